"""Server-side cart operations scoped by session id.

Each call builds a :class:`CartStore` over the session's persistence, so the
server cart and the client cart share one implementation. Quantity limits
(whole numbers in 1..99) are enforced here, not in the store.
"""
from __future__ import annotations

import logging
from typing import Any

from cityroots.core.constants import MAX_CART_QUANTITY, MIN_CART_QUANTITY
from cityroots.core.exceptions import (
    CartItemNotFoundException,
    ProductNotFoundException,
    ValidationException,
)
from cityroots.domain.cart import CartLine
from cityroots.integrations.cart_persistence import SessionCartStorage
from cityroots.repositories.product_repository import ProductRepository
from cityroots.services.cart_store import CartStore

logger = logging.getLogger(__name__)


def _require_whole_number(quantity: Any) -> int:
    # bool is an int subclass; JSON true must not count as 1
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        if isinstance(quantity, float) and quantity.is_integer():
            return int(quantity)
        raise ValidationException("Quantity must be a whole number")
    return quantity


class CartService:
    def __init__(self, carts: SessionCartStorage, products: ProductRepository):
        self._carts = carts
        self._products = products

    def store_for(self, session_id: str) -> CartStore:
        return CartStore(self._carts.for_session(session_id))

    def get_cart(self, session_id: str) -> CartStore:
        return self.store_for(session_id)

    def add_item(self, session_id: str, product_id: str | None, quantity: Any = 1) -> CartLine:
        if not product_id:
            raise ValidationException("Product ID is required")
        try:
            quantity = _require_whole_number(quantity)
        except ValidationException:
            raise ValidationException(
                f"Quantity must be a whole number between {MIN_CART_QUANTITY} and {MAX_CART_QUANTITY}"
            ) from None
        if not MIN_CART_QUANTITY <= quantity <= MAX_CART_QUANTITY:
            raise ValidationException(
                f"Quantity must be a whole number between {MIN_CART_QUANTITY} and {MAX_CART_QUANTITY}"
            )

        product = self._products.get(product_id)
        if product is None:
            raise ProductNotFoundException(product_id)
        if not product.in_stock:
            raise ValidationException("Product is out of stock")

        store = self.store_for(session_id)
        existing = store.get_line(product_id)
        if existing is None:
            store.add(product)
            if quantity > 1:
                store.update_quantity(product_id, quantity)
        else:
            merged = existing.quantity + quantity
            if merged > MAX_CART_QUANTITY:
                raise ValidationException(f"Quantity cannot exceed {MAX_CART_QUANTITY}")
            store.update_quantity(product_id, merged)
        line = store.get_line(product_id)
        logger.info("Cart %s: %s x%s", session_id, product_id, line.quantity)
        return line

    def update_item(self, session_id: str, product_id: str | None, quantity: Any) -> CartLine | None:
        """Set a line's quantity; ``None`` means the line was removed."""
        if not product_id or quantity is None:
            raise ValidationException("Product ID and quantity are required")
        quantity = _require_whole_number(quantity)

        store = self.store_for(session_id)
        if quantity <= 0:
            store.remove(product_id)
            return None
        if quantity > MAX_CART_QUANTITY:
            raise ValidationException(f"Quantity cannot exceed {MAX_CART_QUANTITY}")
        if not store.is_in_cart(product_id):
            raise CartItemNotFoundException(session_id, product_id)

        store.update_quantity(product_id, quantity)
        return store.get_line(product_id)

    def remove_item(self, session_id: str, product_id: str) -> None:
        store = self.store_for(session_id)
        if not store.is_in_cart(product_id):
            raise CartItemNotFoundException(session_id, product_id)
        store.remove(product_id)

    def clear(self, session_id: str) -> None:
        self.store_for(session_id).clear()
