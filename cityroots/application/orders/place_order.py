"""Use case: record an order for the current cart before payment."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from cityroots.core.constants import WAREHOUSE_LOCATION
from cityroots.core.order_math import OrderTotals, calc_order_totals
from cityroots.domain.cart import CartLine
from cityroots.domain.checkout import AddressData, CustomerData, validate_address
from cityroots.domain.order import (
    Address,
    Customer,
    Order,
    OrderItem,
    TrackingEvent,
    TrackingStatus,
    generate_order_number,
)

logger = logging.getLogger(__name__)


@dataclass
class PlaceOrderResult:
    ok: bool
    error_key: str | None = None
    message: str | None = None
    order: Order | None = None
    customer: Customer | None = None
    address: Address | None = None
    items: list[OrderItem] | None = None
    totals: OrderTotals | None = None


def _get_or_create_customer(repo: Any, customer_data: CustomerData) -> Customer:
    customer = repo.get_customer_by_phone(customer_data.phone)
    if customer is None:
        customer = repo.create_customer(
            Customer(
                phone=customer_data.phone,
                name=customer_data.name,
                email=customer_data.email or "",
                is_verified=True,
            )
        )
    elif customer_data.email and not customer.email:
        customer.email = customer_data.email
    return customer


def place_order(
    customer_data: CustomerData,
    address_data: AddressData,
    lines: Sequence[CartLine],
    *,
    repo: Any,
    notes: str = "Order placed via web checkout",
) -> PlaceOrderResult:
    if not repo:
        return PlaceOrderResult(False, "db_error")

    if not lines:
        return PlaceOrderResult(False, "empty_cart", "Cart is empty")

    if any(not line.product.price.is_finite() or line.product.price <= 0 for line in lines):
        return PlaceOrderResult(False, "invalid_cart", "Cart contains an item without a valid price")

    address_error = validate_address(address_data)
    if address_error:
        return PlaceOrderResult(False, "invalid_address", address_error)

    # Totals come from the lines, never from client-supplied numbers
    totals = calc_order_totals(lines)

    customer = _get_or_create_customer(repo, customer_data)
    address = repo.create_address(
        Address(
            customer_id=customer.id,
            full_name=address_data.full_name,
            address_line1=address_data.address_line1,
            address_line2=address_data.address_line2,
            city=address_data.city,
            state=address_data.state,
            postal_code=address_data.postal_code,
            country=address_data.country,
            phone=address_data.phone,
            is_default=True,
        )
    )

    order = repo.create_order(
        Order(
            order_number=generate_order_number(),
            customer_id=customer.id,
            shipping_address_id=address.id,
            subtotal=totals.subtotal,
            tax=totals.tax,
            shipping=totals.shipping,
            total=totals.total,
            notes=notes,
        )
    )

    items = [
        repo.create_order_item(
            OrderItem(
                order_id=order.id,
                product_id=line.product.id,
                product_name=line.product.name,
                product_image=line.product.image,
                product_price=line.product.price,
                quantity=line.quantity,
            )
        )
        for line in lines
    ]

    repo.create_tracking(
        TrackingEvent(
            order_id=order.id,
            status=TrackingStatus.ORDER_PLACED,
            message="Order has been placed successfully",
            location=WAREHOUSE_LOCATION,
        )
    )

    logger.info("Order %s placed: %s item(s), total %s", order.order_number, len(items), totals.total)
    return PlaceOrderResult(
        True,
        order=order,
        customer=customer,
        address=address,
        items=items,
        totals=totals,
    )
