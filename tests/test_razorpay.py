from __future__ import annotations

import hashlib
import hmac
import json

import aiohttp
import pytest

from cityroots.core.config import RazorpayConfig
from cityroots.core.exceptions import ConfigurationException, PaymentGatewayException
from cityroots.integrations.payments import CheckoutPrefill, CreatedPaymentOrder, GatewayOrder, PaymentSucceeded
from cityroots.integrations.razorpay import DemoCheckout, RazorpayClient


class FakeResponse:
    def __init__(self, status: int, data):
        self.status = status
        self._data = data

    async def json(self, content_type=None):
        if isinstance(self._data, Exception):
            raise self._data
        return self._data

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    closed = False

    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.posts: list[tuple[str, dict]] = []

    def post(self, url: str, json: dict):
        self.posts.append((url, json))
        if self.error:
            raise self.error
        return self.response


def _client(**overrides) -> RazorpayClient:
    config = {"key_id": "rzp_test_key", "key_secret": "secret"}
    config.update(overrides)
    return RazorpayClient(RazorpayConfig(**config))


def test_signature_matches_hmac_of_order_and_payment() -> None:
    client = _client()
    expected = hmac.new(b"secret", b"order_1|pay_1", hashlib.sha256).hexdigest()

    assert client.sign("order_1", "pay_1") == expected
    assert client.verify_payment_signature("order_1", "pay_1", expected)


def test_tampered_signature_is_rejected() -> None:
    client = _client()
    signature = client.sign("order_1", "pay_1")

    assert not client.verify_payment_signature("order_1", "pay_2", signature)
    assert not client.verify_payment_signature("order_1", "pay_1", "")


def test_verification_can_be_switched_off() -> None:
    client = _client(verify_signature=False)
    assert client.verify_payment_signature("order_1", "pay_1", "anything")


def test_missing_secret_never_verifies() -> None:
    client = _client(key_secret="")
    assert not client.enabled
    assert not client.verify_payment_signature("order_1", "pay_1", "sig")


@pytest.mark.asyncio
async def test_create_order_posts_amount_in_paise():
    client = _client()
    session = FakeSession(FakeResponse(200, {"id": "order_rzp_9", "amount": 141364, "currency": "INR", "receipt": "VC1"}))
    client._session = session

    order = await client.create_order(141364, "INR", "VC1", {"order_id": "o-1"})

    assert order.id == "order_rzp_9"
    url, payload = session.posts[0]
    assert url.endswith("/orders")
    assert payload == {"amount": 141364, "currency": "INR", "receipt": "VC1", "notes": {"order_id": "o-1"}}


@pytest.mark.asyncio
async def test_create_order_surfaces_gateway_error_description():
    client = _client()
    client._session = FakeSession(FakeResponse(400, {"error": {"description": "amount too small"}}))

    with pytest.raises(PaymentGatewayException) as excinfo:
        await client.create_order(100, "INR", "VC1")

    assert excinfo.value.message == "amount too small"


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(502, json.JSONDecodeError("Expecting value", "<html>", 0)),
        FakeResponse(400, {"error": "BAD_REQUEST_ERROR"}),
        FakeResponse(500, ["unexpected"]),
        FakeResponse(200, {"status": "created"}),
    ],
)
@pytest.mark.asyncio
async def test_create_order_wraps_malformed_responses(response):
    client = _client()
    client._session = FakeSession(response)

    with pytest.raises(PaymentGatewayException):
        await client.create_order(100, "INR", "VC1")


@pytest.mark.asyncio
async def test_create_order_wraps_network_errors():
    client = _client()
    client._session = FakeSession(error=aiohttp.ClientConnectionError("refused"))

    with pytest.raises(PaymentGatewayException):
        await client.create_order(100, "INR", "VC1")


@pytest.mark.asyncio
async def test_create_order_requires_configuration():
    with pytest.raises(ConfigurationException):
        await _client(key_id="").create_order(100, "INR", "VC1")


@pytest.mark.asyncio
async def test_demo_checkout_returns_verifiable_success():
    client = _client()
    order = CreatedPaymentOrder(
        gateway_order=GatewayOrder(id="order_rzp_1", amount=100, currency="INR", receipt="VC1"),
        order_id="o-1",
        order_number="VC1",
    )

    outcome = await DemoCheckout(client).open(order, CheckoutPrefill(name="Asha", contact="9876543210"))

    assert isinstance(outcome, PaymentSucceeded)
    assert outcome.order_id == "order_rzp_1"
    assert client.verify_payment_signature(outcome.order_id, outcome.payment_id, outcome.signature)
