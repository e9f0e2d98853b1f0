"""Shared helpers for order totals.

Cart drawer, checkout summary, payment form and server order creation all
derive their numbers from :func:`calc_order_totals`.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from cityroots.core.constants import FLAT_SHIPPING_FEE, FREE_SHIPPING_THRESHOLD, TAX_RATE
from cityroots.domain.cart import CartLine

PAISE = Decimal("0.01")


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(PAISE, rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    items_count: int

    @property
    def amount_in_paise(self) -> int:
        """Total in the smallest currency unit, as payment gateways expect."""
        return int((self.total * 100).to_integral_value(rounding=ROUND_HALF_UP))

    def to_dict(self) -> dict[str, Any]:
        return {
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "shipping": float(self.shipping),
            "total": float(self.total),
            "itemsCount": self.items_count,
        }


def calc_subtotal(lines: Iterable[CartLine]) -> Decimal:
    return sum((line.product.price * line.quantity for line in lines), Decimal("0"))


def calc_quantity(lines: Iterable[CartLine]) -> int:
    return sum(line.quantity for line in lines)


def calc_tax(subtotal: Decimal) -> Decimal:
    return quantize_money(subtotal * TAX_RATE)


def calc_shipping(subtotal: Decimal) -> Decimal:
    if subtotal <= 0:
        return Decimal("0")
    if subtotal >= FREE_SHIPPING_THRESHOLD:
        return Decimal("0")
    return FLAT_SHIPPING_FEE


def calc_order_totals(lines: Iterable[CartLine]) -> OrderTotals:
    lines = list(lines)
    subtotal = quantize_money(calc_subtotal(lines))
    tax = calc_tax(subtotal)
    shipping = calc_shipping(subtotal)
    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=subtotal + tax + shipping,
        items_count=calc_quantity(lines),
    )
