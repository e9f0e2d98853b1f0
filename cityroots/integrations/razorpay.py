"""
Razorpay integration.

Order creation goes through the Razorpay REST API; callback signatures are
checked locally with the key secret. Configure with:
- RAZORPAY_KEY_ID
- RAZORPAY_KEY_SECRET
- RAZORPAY_VERIFY_SIGNATURE (default true)
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import time
from typing import Any

import aiohttp

from cityroots.core.config import RazorpayConfig
from cityroots.core.exceptions import ConfigurationException, PaymentGatewayException
from cityroots.integrations.payments import (
    CheckoutPrefill,
    CreatedPaymentOrder,
    GatewayOrder,
    PaymentOutcome,
    PaymentSucceeded,
)

logger = logging.getLogger(__name__)

RAZORPAY_API_URL = "https://api.razorpay.com/v1"


def _error_description(data: Any) -> str | None:
    """Message from a Razorpay error body, whatever its shape."""
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        return error.get("description")
    if isinstance(error, str):
        return error
    return None


class RazorpayClient:
    """Thin async client for the Razorpay Orders API."""

    def __init__(
        self,
        config: RazorpayConfig,
        api_url: str = RAZORPAY_API_URL,
        timeout_seconds: float = 15.0,
    ):
        self._config = config
        self._api_url = api_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session: aiohttp.ClientSession | None = None

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def key_id(self) -> str:
        return self._config.key_id

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            auth = aiohttp.BasicAuth(self._config.key_id, self._config.key_secret)
            self._session = aiohttp.ClientSession(auth=auth, timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict[str, Any] | None = None,
    ) -> GatewayOrder:
        """
        Create a Razorpay order.

        Args:
            amount: Amount in paise
            currency: ISO currency code
            receipt: Storefront order number
            notes: Free-form key/values stored with the order

        Returns:
            GatewayOrder as returned by Razorpay
        """
        if not self.enabled:
            raise ConfigurationException("Razorpay integration not configured")
        if amount <= 0:
            raise PaymentGatewayException("Payment amount must be positive")

        payload = {
            "amount": int(amount),
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        session = await self._get_session()
        try:
            async with session.post(f"{self._api_url}/orders", json=payload) as resp:
                try:
                    data = await resp.json(content_type=None)
                except ValueError as e:
                    raise PaymentGatewayException(
                        f"Razorpay returned an unreadable response ({resp.status})"
                    ) from e
                if resp.status >= 400:
                    raise PaymentGatewayException(
                        _error_description(data) or f"Razorpay order creation failed ({resp.status})"
                    )
        except aiohttp.ClientError as e:
            logger.error(f"Razorpay unreachable: {e}")
            raise PaymentGatewayException("Payment gateway unreachable") from e

        if not isinstance(data, dict) or not data.get("id"):
            raise PaymentGatewayException("Razorpay returned an order without an id")
        order = GatewayOrder.from_api(data)
        logger.info("Razorpay order %s created for receipt %s", order.id, receipt)
        return order

    def sign(self, order_id: str, payment_id: str) -> str:
        """HMAC-SHA256 of ``order_id|payment_id`` with the key secret."""
        if not self._config.key_secret:
            raise ConfigurationException("Razorpay key secret not configured")
        body = f"{order_id}|{payment_id}".encode()
        return hmac.new(self._config.key_secret.encode(), body, hashlib.sha256).hexdigest()

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """
        Verify the signature Razorpay attaches to a successful checkout.

        Returns True if the signature is valid, or if verification is
        switched off by configuration.
        """
        if not self._config.verify_signature:
            logger.warning("Razorpay signature verification disabled; accepting %s", payment_id)
            return True
        if not order_id or not payment_id or not signature:
            return False
        try:
            expected = self.sign(order_id, payment_id)
        except ConfigurationException:
            return False
        return hmac.compare_digest(expected, signature)


class DemoCheckout:
    """Stand-in for the hosted checkout window.

    Always reports a successful payment, signed so that server-side
    verification accepts it. Used in development and in end-to-end tests.
    """

    def __init__(self, client: RazorpayClient):
        self._client = client

    async def open(self, order: CreatedPaymentOrder, prefill: CheckoutPrefill) -> PaymentOutcome:
        payment_id = f"pay_{int(time.time() * 1000)}"
        gateway_order_id = order.gateway_order.id
        logger.info("Demo checkout for %s (%s)", order.order_number, prefill.name)
        return PaymentSucceeded(
            payment_id=payment_id,
            order_id=gateway_order_id,
            signature=self._client.sign(gateway_order_id, payment_id),
        )
