from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cityroots.api.api_server import build_services, create_api_app
from cityroots.core.config import RazorpayConfig
from cityroots.integrations.razorpay import RazorpayClient

from conftest import StubRazorpayClient

ADDRESS = {
    "fullName": "Asha Rao",
    "addressLine1": "12 MG Road",
    "city": "New Delhi",
    "state": "Delhi",
    "postalCode": "110001",
    "country": "India",
    "phone": "9876543210",
}
CUSTOMER = {"phone": "9876543210", "name": "Asha Rao", "email": ""}
CART_ITEMS = [{"product": {"id": "pro-tool-set", "name": "Professional Gardening Tool Set", "price": 89.99}, "quantity": 6}]


@pytest.fixture
def services(settings):
    services = build_services(settings)
    services.razorpay = StubRazorpayClient()
    return services


@pytest.fixture
def client(services, no_rate_limit):
    with TestClient(create_api_app(services=services)) as test_client:
        yield test_client


def _order_payload(**overrides) -> dict:
    payload = {"customerData": CUSTOMER, "addressData": ADDRESS, "cartItems": CART_ITEMS}
    payload.update(overrides)
    return payload


def test_create_order_uses_server_totals(client) -> None:
    response = client.post("/api/orders", json=_order_payload(total=1.0))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["order"]["total"] == 637.13
    assert body["order"]["orderNumber"].startswith("VC")


def test_create_order_requires_all_sections(client) -> None:
    response = client.post("/api/orders", json={"customerData": CUSTOMER})
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required order data"


def test_create_order_rejects_invalid_pin(client) -> None:
    response = client.post("/api/orders", json=_order_payload(addressData={**ADDRESS, "postalCode": "000001"}))
    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter a valid 6-digit PIN code"


def test_create_order_ignores_client_prices(client) -> None:
    tampered = [{"product": {"id": "pro-tool-set", "name": "Tools", "price": -500}, "quantity": 6}]

    response = client.post("/api/orders", json=_order_payload(cartItems=tampered))

    assert response.status_code == 200
    assert response.json()["order"]["total"] == 637.13


def test_create_order_rejects_unknown_product(client) -> None:
    unknown = [{"product": {"id": "monstera", "name": "Monstera", "price": 599}, "quantity": 1}]

    response = client.post("/api/orders", json=_order_payload(cartItems=unknown))

    assert response.status_code == 404


def test_create_order_rejects_out_of_stock_and_oversized_lines(client) -> None:
    out_of_stock = [{"product": {"id": "heirloom-tomato-set"}, "quantity": 1}]
    oversized = [{"product": {"id": "pro-tool-set"}, "quantity": 100}]

    assert client.post("/api/orders", json=_order_payload(cartItems=out_of_stock)).status_code == 400
    assert client.post("/api/orders", json=_order_payload(cartItems=oversized)).status_code == 400


def test_order_details_and_tracking(client) -> None:
    order = client.post("/api/orders", json=_order_payload()).json()["order"]

    details = client.get(f"/api/orders/{order['id']}").json()
    tracking = client.get(f"/api/orders/tracking/{order['orderNumber']}").json()

    assert details["items"][0]["quantity"] == 6
    assert details["address"]["postalCode"] == "110001"
    assert [event["status"] for event in tracking["tracking"]] == ["order_placed"]
    assert client.get("/api/orders/missing").status_code == 404
    assert client.get("/api/orders/tracking/VC000000000").status_code == 404


def test_razorpay_checkout_round_trip(client, services) -> None:
    created = client.post("/api/razorpay/create-order", json=_order_payload())
    assert created.status_code == 200
    body = created.json()
    assert body["order"]["amount"] == 63713
    assert body["keyId"] == "rzp_test_key"

    gateway_order_id = body["order"]["id"]
    signature = services.razorpay.sign(gateway_order_id, "pay_1")
    verified = client.post(
        "/api/razorpay/verify-payment",
        json={
            "razorpay_order_id": gateway_order_id,
            "razorpay_payment_id": "pay_1",
            "razorpay_signature": signature,
            "orderData": {"orderId": body["orderData"]["orderId"]},
        },
    )

    assert verified.status_code == 200
    assert verified.json()["orderId"] == body["orderData"]["orderId"]
    details = client.get(f"/api/orders/{body['orderData']['orderId']}").json()
    assert details["order"]["paymentStatus"] == "paid"
    assert details["order"]["status"] == "paid"


def test_razorpay_rejects_bad_signature(client) -> None:
    body = client.post("/api/razorpay/create-order", json=_order_payload()).json()

    response = client.post(
        "/api/razorpay/verify-payment",
        json={
            "razorpay_order_id": body["order"]["id"],
            "razorpay_payment_id": "pay_1",
            "razorpay_signature": "forged",
            "orderData": {"orderNumber": body["orderData"]["orderNumber"]},
        },
    )

    assert response.status_code == 400


def test_razorpay_unknown_order(client) -> None:
    response = client.post(
        "/api/razorpay/verify-payment",
        json={"razorpay_order_id": "order_x", "razorpay_payment_id": "pay_1", "razorpay_signature": "sig"},
    )
    assert response.status_code == 404


def test_razorpay_routes_unavailable_without_keys(services, no_rate_limit) -> None:
    services.razorpay = RazorpayClient(RazorpayConfig(key_id="", key_secret=""))

    with TestClient(create_api_app(services=services)) as client:
        response = client.post("/api/razorpay/create-order", json=_order_payload())

    assert response.status_code == 503


def test_verify_phone_and_otp(client) -> None:
    sent = client.post("/api/customers/verify-phone", json={"phone": "9876543210"})
    assert sent.status_code == 200
    otp = sent.json()["otp"]

    verified = client.post(
        "/api/customers/verify-otp",
        json={"phone": "9876543210", "otp": otp, "name": "Asha Rao", "email": "asha@example.com"},
    )

    assert verified.json()["customer"]["isVerified"] is True
    assert client.post("/api/customers/verify-phone", json={"phone": "123"}).status_code == 400
    assert client.post("/api/customers/verify-otp", json={"phone": "9876543210", "otp": "000000"}).status_code == 400
    assert client.post("/api/customers/verify-otp", json={"phone": "9876543210", "otp": "١٢٣٤٥٦"}).status_code == 400


def test_create_address_for_verified_customer(client) -> None:
    customer = client.post("/api/customers/verify-phone", json={"phone": "9876543210"}).json()["customer"]

    response = client.post("/api/addresses", json={**ADDRESS, "customerId": customer["id"]})

    assert response.status_code == 200
    assert response.json()["customerId"] == customer["id"]
    assert client.post("/api/addresses", json={**ADDRESS, "customerId": "nope"}).status_code == 400
