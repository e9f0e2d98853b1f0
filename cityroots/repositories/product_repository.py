"""Product catalog repository."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from cityroots.domain.product import Product

SEED_PRODUCTS: tuple[dict, ...] = (
    {
        "id": "rose-bush-collection",
        "name": "Premium Rose Bush Collection",
        "description": "Hybrid roses for beginners in red, pink and white, with care instructions.",
        "price": "49.99",
        "originalPrice": "69.99",
        "image": "/api/images/flowering-plants.jpg",
        "category": "Flowering Plants",
        "rating": 4.8,
        "reviews": 156,
        "inStock": True,
        "featured": True,
    },
    {
        "id": "pro-tool-set",
        "name": "Professional Gardening Tool Set",
        "description": "Pruners, trowel, watering can and more, professional grade.",
        "price": "89.99",
        "image": "/api/images/gardening-tools.jpg",
        "category": "Gardening Tools",
        "rating": 4.9,
        "reviews": 243,
        "inStock": True,
        "featured": True,
    },
    {
        "id": "herb-starter-kit",
        "name": "Organic Herb Starter Kit",
        "description": "Basil, parsley, cilantro and rosemary seeds to start a herb garden.",
        "price": "24.99",
        "originalPrice": "34.99",
        "image": "/api/images/seeds.jpg",
        "category": "Seeds",
        "rating": 4.6,
        "reviews": 89,
        "inStock": True,
        "featured": True,
    },
    {
        "id": "mini-succulents",
        "name": "Mini Succulent Collection",
        "description": "Six mini succulents for indoor decoration and gifts.",
        "price": "34.99",
        "image": "/api/images/flowering-plants.jpg",
        "category": "Decorative Plants",
        "rating": 4.7,
        "reviews": 124,
        "inStock": True,
        "featured": True,
    },
    {
        "id": "heirloom-tomato-set",
        "name": "Heirloom Tomato Plant Set",
        "description": "Heritage tomato plants that fruit all season long.",
        "price": "19.99",
        "image": "/api/images/seeds.jpg",
        "category": "Fruit Plants",
        "rating": 4.5,
        "reviews": 78,
        "inStock": False,
        "featured": False,
    },
    {
        "id": "new-gardener-gift-kit",
        "name": "New Gardener's Gift Kit",
        "description": "Tools, seeds, pots and a beginner's guide in one gifting set.",
        "price": "79.99",
        "originalPrice": "99.99",
        "image": "/api/images/gardening-tools.jpg",
        "category": "Gift Kits",
        "rating": 4.9,
        "reviews": 156,
        "inStock": True,
        "featured": False,
    },
)


class ProductRepository(Protocol):
    def list_all(self) -> list[Product]:
        ...

    def get(self, product_id: str) -> Product | None:
        ...

    def by_category(self, category: str) -> list[Product]:
        ...

    def featured(self) -> list[Product]:
        ...

    def search(self, query: str) -> list[Product]:
        ...


class MemoryProductRepository:
    """Read-only catalog held in memory, in insertion order."""

    def __init__(self, products: Iterable[Product] | None = None):
        if products is None:
            products = (Product.from_dict(data) for data in SEED_PRODUCTS)
        self._products: dict[str, Product] = {product.id: product for product in products}

    def list_all(self) -> list[Product]:
        return list(self._products.values())

    def get(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def by_category(self, category: str) -> list[Product]:
        needle = category.strip().lower()
        return [p for p in self._products.values() if needle in p.category.lower()]

    def featured(self) -> list[Product]:
        return [p for p in self._products.values() if p.featured]

    def search(self, query: str) -> list[Product]:
        needle = query.strip().lower()
        if not needle:
            return self.list_all()
        return [
            p
            for p in self._products.values()
            if needle in p.name.lower()
            or needle in p.description.lower()
            or needle in p.category.lower()
        ]
