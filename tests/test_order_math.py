from decimal import Decimal

from cityroots.core.order_math import calc_order_totals, calc_shipping, calc_tax
from cityroots.domain.cart import CartLine

from conftest import make_product


def test_two_units_of_599_with_free_shipping() -> None:
    totals = calc_order_totals([CartLine(make_product("a", price="599"), 2)])

    assert totals.subtotal == Decimal("1198")
    assert totals.tax == Decimal("215.64")
    assert totals.shipping == Decimal("0")
    assert totals.total == Decimal("1413.64")
    assert totals.items_count == 2
    assert totals.amount_in_paise == 141364


def test_flat_shipping_below_threshold() -> None:
    totals = calc_order_totals([CartLine(make_product("a", price="100"), 1)])

    assert totals.shipping == Decimal("49")
    assert totals.total == Decimal("167.00")


def test_threshold_is_inclusive() -> None:
    assert calc_shipping(Decimal("499")) == Decimal("0")
    assert calc_shipping(Decimal("498.99")) == Decimal("49")


def test_empty_cart_has_zero_totals() -> None:
    totals = calc_order_totals([])
    assert totals.total == Decimal("0")
    assert totals.shipping == Decimal("0")


def test_tax_rounds_half_up_to_paise() -> None:
    assert calc_tax(Decimal("24.99")) == Decimal("4.50")
    assert calc_tax(Decimal("0.25")) == Decimal("0.05")
