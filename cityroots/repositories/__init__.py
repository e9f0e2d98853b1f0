"""Repositories for catalog and order records."""

from .order_repository import MemoryOrderRepository, OrderRepository
from .product_repository import MemoryProductRepository, ProductRepository

__all__ = [
    "MemoryOrderRepository",
    "MemoryProductRepository",
    "OrderRepository",
    "ProductRepository",
]
