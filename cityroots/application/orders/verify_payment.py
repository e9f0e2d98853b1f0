"""Use case: confirm a gateway payment for an order."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from cityroots.domain.order import (
    Order,
    OrderStatus,
    Payment,
    PaymentStatus,
    TrackingEvent,
    TrackingStatus,
)

logger = logging.getLogger(__name__)

SignatureChecker = Callable[[str, str, str], bool]


@dataclass
class PaymentDecisionResult:
    ok: bool
    error_key: str | None = None
    order: Order | None = None
    payment_status: str | None = None


def _find_order(
    repo: Any,
    *,
    gateway_order_id: str | None,
    order_id: str | None,
    order_number: str | None,
) -> Order | None:
    order = None
    if order_id:
        order = repo.get_order(order_id)
    if order is None and order_number:
        order = repo.get_order_by_number(order_number)
    if order is None and gateway_order_id:
        order = repo.get_order_by_gateway_id(gateway_order_id)
    return order


def verify_payment(
    gateway_order_id: str,
    payment_id: str,
    signature: str,
    *,
    repo: Any,
    check_signature: SignatureChecker,
    order_id: str | None = None,
    order_number: str | None = None,
) -> PaymentDecisionResult:
    if not repo:
        return PaymentDecisionResult(False, "db_error")

    order = _find_order(
        repo,
        gateway_order_id=gateway_order_id,
        order_id=order_id,
        order_number=order_number,
    )
    if not order:
        logger.warning(
            "Payment %s for unknown order (gateway=%s id=%s number=%s)",
            payment_id,
            gateway_order_id,
            order_id,
            order_number,
        )
        return PaymentDecisionResult(False, "not_found")

    if order.payment_status == PaymentStatus.PAID:
        if order.razorpay_payment_id == payment_id:
            return PaymentDecisionResult(True, order=order, payment_status=PaymentStatus.PAID)
        return PaymentDecisionResult(
            False, "already_processed", order=order, payment_status=order.payment_status
        )

    # The signature is computed over the gateway order id the order was created with
    signed_order_id = order.razorpay_order_id or gateway_order_id
    if not check_signature(signed_order_id, payment_id, signature):
        logger.warning("Signature mismatch for order %s payment %s", order.order_number, payment_id)
        repo.update_order(order.id, payment_status=PaymentStatus.FAILED)
        return PaymentDecisionResult(
            False, "signature_mismatch", order=order, payment_status=PaymentStatus.FAILED
        )

    order = repo.update_order(
        order.id,
        status=OrderStatus.PAID,
        payment_status=PaymentStatus.PAID,
        razorpay_order_id=signed_order_id,
        razorpay_payment_id=payment_id,
        razorpay_signature=signature,
    )
    repo.create_tracking(
        TrackingEvent(
            order_id=order.id,
            status=TrackingStatus.PAYMENT_CONFIRMED,
            message="Payment has been confirmed successfully",
            location="Payment Gateway",
        )
    )
    repo.create_payment(
        Payment(
            order_id=order.id,
            amount=order.total,
            payment_id=payment_id,
        )
    )

    logger.info("Payment %s confirmed for order %s", payment_id, order.order_number)
    return PaymentDecisionResult(True, order=order, payment_status=PaymentStatus.PAID)
