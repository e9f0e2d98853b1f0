"""Catalog product snapshot carried inside cart lines and orders."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any


def to_money(value: Any) -> Decimal:
    """Parse a JSON number or numeric string into a Decimal amount."""
    if isinstance(value, Decimal):
        return value
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid money amount: {value!r}") from e


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class Product:
    """Single catalog entry (plant, seed, tool or gifting set)."""

    id: str
    name: str
    price: Decimal
    image: str = ""
    category: str = ""
    in_stock: bool = True
    original_price: Decimal | None = None
    description: str = ""
    rating: float = 0.0
    reviews: int = 0
    featured: bool = False
    tags: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Wire/storage form, camelCase like the web client's Product."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": float(self.price),
            "image": self.image,
            "category": self.category,
            "inStock": self.in_stock,
            "description": self.description,
            "rating": self.rating,
            "reviews": self.reviews,
            "featured": self.featured,
            "tags": list(self.tags),
        }
        if self.original_price is not None:
            data["originalPrice"] = float(self.original_price)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Product:
        if not isinstance(data, dict):
            raise ValueError("Product payload must be an object")
        product_id = _pick(data, "id")
        if product_id is None or str(product_id) == "":
            raise ValueError("Product payload has no id")

        original_price = _pick(data, "originalPrice", "original_price")
        return cls(
            id=str(product_id),
            name=str(_pick(data, "name", default="")),
            price=to_money(_pick(data, "price", default=0)),
            image=str(_pick(data, "image", default="")),
            category=str(_pick(data, "category", default="")),
            in_stock=bool(_pick(data, "inStock", "in_stock", default=True)),
            original_price=to_money(original_price) if original_price is not None else None,
            description=str(_pick(data, "description", default="")),
            rating=float(_pick(data, "rating", default=0) or 0),
            reviews=int(_pick(data, "reviews", "reviewCount", "review_count", default=0) or 0),
            featured=bool(_pick(data, "featured", default=False)),
            tags=tuple(str(tag) for tag in _pick(data, "tags", default=()) or ()),
        )
