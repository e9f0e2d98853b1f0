"""Cart line types and the stored-payload codec.

Stored carts come in two shapes. Current entries reference the product under
``product``; entries written by older clients used ``plant``. Both are decoded
into tagged types first and then normalized into :class:`CartLine`, so the
rest of the code only ever sees the current shape.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Union

from cityroots.domain.product import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartLine:
    """Single (product, quantity) pair; quantity is always >= 1."""

    product: Product
    quantity: int

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self):
        return self.product.price * self.quantity

    def with_quantity(self, quantity: int) -> CartLine:
        return replace(self, quantity=int(quantity))

    def to_dict(self) -> dict[str, Any]:
        return {"product": self.product.to_dict(), "quantity": int(self.quantity)}


@dataclass(frozen=True)
class CurrentCartLine:
    product: dict[str, Any]
    quantity: int


@dataclass(frozen=True)
class LegacyCartLine:
    plant: dict[str, Any]
    quantity: int


StoredCartLine = Union[CurrentCartLine, LegacyCartLine]


def _parse_quantity(value: Any) -> int | None:
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        return None
    return quantity if quantity >= 1 else None


def decode_stored_line(raw: Any) -> StoredCartLine | None:
    """Classify one stored entry; ``None`` when it matches neither shape."""
    if not isinstance(raw, dict):
        return None
    quantity = _parse_quantity(raw.get("quantity"))
    if quantity is None:
        return None
    if isinstance(raw.get("product"), dict):
        return CurrentCartLine(product=raw["product"], quantity=quantity)
    if isinstance(raw.get("plant"), dict):
        return LegacyCartLine(plant=raw["plant"], quantity=quantity)
    return None


def normalize_line(stored: StoredCartLine) -> CartLine:
    if isinstance(stored, CurrentCartLine):
        return CartLine(product=Product.from_dict(stored.product), quantity=stored.quantity)
    if isinstance(stored, LegacyCartLine):
        return CartLine(product=Product.from_dict(stored.plant), quantity=stored.quantity)
    raise TypeError(f"Unsupported stored cart line: {type(stored).__name__}")


def decode_cart_payload(payload: Any) -> list[CartLine]:
    """Decode a persisted cart (JSON text or list) into normalized lines.

    Malformed entries are dropped with a warning. Repeated product ids are
    merged so the one-line-per-product rule holds after load.
    """
    if payload is None or payload == "":
        return []
    if isinstance(payload, (str, bytes)):
        payload = json.loads(payload)
    if not isinstance(payload, list):
        raise ValueError(f"Cart payload must be a list, got {type(payload).__name__}")

    lines: list[CartLine] = []
    index: dict[str, int] = {}
    for raw in payload:
        stored = decode_stored_line(raw)
        if stored is None:
            logger.warning("Skipping unrecognised cart entry: %r", raw)
            continue
        try:
            line = normalize_line(stored)
        except (ValueError, TypeError) as e:
            logger.warning("Skipping cart entry with bad product: %s", e)
            continue

        position = index.get(line.product_id)
        if position is None:
            index[line.product_id] = len(lines)
            lines.append(line)
        else:
            merged = lines[position]
            lines[position] = merged.with_quantity(merged.quantity + line.quantity)
    return lines


def encode_cart(lines: list[CartLine] | tuple[CartLine, ...]) -> list[dict[str, Any]]:
    return [line.to_dict() for line in lines]
