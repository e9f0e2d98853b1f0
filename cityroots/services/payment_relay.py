"""In-process payment collaborators for :class:`CheckoutFlow`.

``ServerPaymentGateway`` places the order and opens the gateway order through
the order use cases; ``ServerPaymentVerifier`` relays the checkout callback
to payment verification and sends the confirmation e-mail.
"""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from cityroots.application.orders import create_payment_order, verify_payment
from cityroots.core.exceptions import PaymentGatewayException
from cityroots.domain.checkout import PaymentMetadata
from cityroots.integrations.payments import (
    CheckoutPrefill,
    CreatedPaymentOrder,
    PaymentOutcome,
    PaymentSucceeded,
    VerificationResult,
)
from cityroots.integrations.razorpay import RazorpayClient
from cityroots.services.order_service import OrderService

logger = logging.getLogger(__name__)

CheckoutOpener = Callable[[CreatedPaymentOrder, CheckoutPrefill], Awaitable[PaymentOutcome]]

VERIFY_MESSAGES = {
    "not_found": "Order not found",
    "already_processed": "Payment already processed for this order",
    "signature_mismatch": "Payment verification failed. Please try again.",
    "db_error": "Order service unavailable",
}


class ServerPaymentGateway:
    def __init__(self, orders: OrderService, client: RazorpayClient, opener: CheckoutOpener):
        self._orders = orders
        self._client = client
        self._opener = opener

    async def create_order(self, amount: int, currency: str, metadata: dict[str, Any]) -> CreatedPaymentOrder:
        result = await create_payment_order(
            metadata["customer"],
            metadata["address"],
            metadata["lines"],
            repo=self._orders.repo,
            gateway=self._client,
            currency=currency,
        )
        if not result.ok:
            raise PaymentGatewayException(result.message or result.error_key or "Payment order failed")

        created = result.payment_order
        if created.gateway_order.amount != amount:
            logger.warning(
                "Client amount %s differs from server amount %s for %s",
                amount,
                created.gateway_order.amount,
                created.order_number,
            )
        return created

    async def open_checkout(self, order: CreatedPaymentOrder, prefill: CheckoutPrefill) -> PaymentOutcome:
        return await self._opener(order, prefill)


class ServerPaymentVerifier:
    def __init__(self, orders: OrderService, client: RazorpayClient):
        self._orders = orders
        self._client = client

    async def verify(
        self,
        success: PaymentSucceeded,
        order: CreatedPaymentOrder,
        summary: dict[str, Any],
    ) -> VerificationResult:
        decision = verify_payment(
            success.order_id,
            success.payment_id,
            success.signature,
            repo=self._orders.repo,
            check_signature=self._client.verify_payment_signature,
            order_id=order.order_id,
        )
        if not decision.ok:
            return VerificationResult(False, message=VERIFY_MESSAGES.get(decision.error_key))

        await self._orders.notify_paid(
            decision.order,
            PaymentMetadata(success.payment_id, "razorpay", decision.order.order_number),
        )
        return VerificationResult(True, order_id=decision.order.id)
