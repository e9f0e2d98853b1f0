"""Use case: place an order and open a matching gateway order."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from cityroots.application.orders.place_order import PlaceOrderResult, place_order
from cityroots.core.constants import CURRENCY
from cityroots.core.exceptions import CityRootsException
from cityroots.domain.cart import CartLine
from cityroots.domain.checkout import AddressData, CustomerData
from cityroots.integrations.payments import CreatedPaymentOrder

logger = logging.getLogger(__name__)


@dataclass
class PaymentOrderResult:
    ok: bool
    error_key: str | None = None
    message: str | None = None
    payment_order: CreatedPaymentOrder | None = None
    placed: PlaceOrderResult | None = None


async def create_payment_order(
    customer_data: CustomerData,
    address_data: AddressData,
    lines: Sequence[CartLine],
    *,
    repo: Any,
    gateway: Any,
    currency: str = CURRENCY,
) -> PaymentOrderResult:
    placed = place_order(
        customer_data,
        address_data,
        lines,
        repo=repo,
        notes="Order placed via Razorpay checkout",
    )
    if not placed.ok:
        return PaymentOrderResult(False, placed.error_key, placed.message, placed=placed)

    order, customer, totals = placed.order, placed.customer, placed.totals
    try:
        gateway_order = await gateway.create_order(
            amount=totals.amount_in_paise,
            currency=currency,
            receipt=order.order_number,
            notes={
                "order_id": order.id,
                "customer_name": customer.name,
                "customer_phone": customer.phone,
            },
        )
    except CityRootsException as e:
        logger.error(f"Gateway order creation failed for {order.order_number}: {e.message}")
        return PaymentOrderResult(False, "gateway_error", e.message, placed=placed)

    repo.update_order(order.id, razorpay_order_id=gateway_order.id)
    return PaymentOrderResult(
        True,
        payment_order=CreatedPaymentOrder(
            gateway_order=gateway_order,
            order_id=order.id,
            order_number=order.order_number,
        ),
        placed=placed,
    )
