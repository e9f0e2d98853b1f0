"""
Cart store - single source of truth for what is in a session's cart.

Every mutation updates the in-memory lines, writes the whole cart through the
injected persistence port and then notifies subscribers, synchronously and in
that order. Persistence failures are logged and never surface to callers:
the cart is a convenience cache, completed orders are recorded elsewhere.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal

from cityroots.core.order_math import OrderTotals, calc_order_totals
from cityroots.domain.cart import CartLine, decode_cart_payload, encode_cart
from cityroots.domain.product import Product
from cityroots.integrations.auth import AuthGate, run_authenticated
from cityroots.integrations.cart_persistence import CartPersistence

logger = logging.getLogger(__name__)

CartListener = Callable[[tuple[CartLine, ...]], None]


class CartStore:
    def __init__(self, persistence: CartPersistence):
        self._persistence = persistence
        self._lines: list[CartLine] = self._load()
        self._listeners: list[CartListener] = []

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------

    def _load(self) -> list[CartLine]:
        try:
            raw = self._persistence.load()
        except Exception as e:
            logger.error(f"Error loading cart: {e}")
            return []
        try:
            lines = decode_cart_payload(raw)
        except (ValueError, TypeError) as e:
            logger.error(f"Stored cart is unreadable, starting empty: {e}")
            return []
        logger.debug("Loaded cart with %s line(s)", len(lines))
        return lines

    def _persist(self) -> None:
        try:
            if self._lines:
                self._persistence.save(encode_cart(self._lines))
            else:
                self._persistence.clear()
        except Exception as e:
            logger.error(f"Error saving cart: {e}")

    def _commit(self) -> None:
        self._persist()
        snapshot = self.lines
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Cart listener failed: {e}")

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a change listener; returns the matching unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------

    def _index_of(self, product_id: str) -> int | None:
        for idx, line in enumerate(self._lines):
            if line.product_id == product_id:
                return idx
        return None

    def add(self, product: Product) -> None:
        idx = self._index_of(product.id)
        if idx is None:
            self._lines.append(CartLine(product=product, quantity=1))
        else:
            # Refresh the snapshot along with the quantity
            current = self._lines[idx]
            self._lines[idx] = CartLine(product=product, quantity=current.quantity + 1)
        self._commit()

    def remove(self, product_id: str) -> None:
        idx = self._index_of(product_id)
        if idx is None:
            return
        del self._lines[idx]
        self._commit()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return
        idx = self._index_of(product_id)
        if idx is None:
            return
        self._lines[idx] = self._lines[idx].with_quantity(quantity)
        self._commit()

    def clear(self) -> None:
        self._lines = []
        self._commit()

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, product_id: str) -> CartLine | None:
        idx = self._index_of(product_id)
        return self._lines[idx] if idx is not None else None

    def is_in_cart(self, product_id: str) -> bool:
        return self._index_of(product_id) is not None

    def get_total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    def get_total_price(self) -> Decimal:
        return sum((line.product.price * line.quantity for line in self._lines), Decimal("0"))

    def snapshot_totals(self) -> OrderTotals:
        return calc_order_totals(self._lines)


async def add_with_auth(cart: CartStore, product: Product, auth: AuthGate | None) -> bool:
    """Add ``product`` once the shopper is signed in; returns whether it was added."""
    return await run_authenticated(auth, lambda: cart.add(product))
