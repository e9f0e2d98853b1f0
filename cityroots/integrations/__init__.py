"""Integrations package - adapters for external systems."""

from cityroots.integrations.cart_persistence import (
    CartPersistence,
    LocalStorageCartPersistence,
    MemoryCartStorage,
    RedisCartStorage,
    build_session_cart_storage,
)
from cityroots.integrations.local_storage import LocalStorage, get_session_id

__all__ = [
    "CartPersistence",
    "LocalStorage",
    "LocalStorageCartPersistence",
    "MemoryCartStorage",
    "RedisCartStorage",
    "build_session_cart_storage",
    "get_session_id",
]
