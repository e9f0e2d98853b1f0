"""Cart persistence port and its backends.

A backend stores the encoded cart for exactly one session. ``load`` returns
the raw stored payload (JSON text or an already-decoded list) or ``None``;
decoding and legacy-shape normalization happen in the cart store, not here.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import redis

from cityroots.core.constants import CART_STORAGE_KEY
from cityroots.core.exceptions import StorageException
from cityroots.integrations.local_storage import LocalStorage

logger = logging.getLogger(__name__)


class CartPersistence(Protocol):
    """Protocol for cart storage backends."""

    def load(self) -> Any | None:
        ...

    def save(self, payload: list[dict[str, Any]]) -> None:
        ...

    def clear(self) -> None:
        ...


class LocalStorageCartPersistence:
    """Cart kept under one key of a :class:`LocalStorage` file."""

    def __init__(self, storage: LocalStorage, key: str = CART_STORAGE_KEY):
        self._storage = storage
        self._key = key

    def load(self) -> Any | None:
        return self._storage.get_item(self._key)

    def save(self, payload: list[dict[str, Any]]) -> None:
        self._storage.set_item(self._key, json.dumps(payload, ensure_ascii=False))

    def clear(self) -> None:
        self._storage.remove_item(self._key)


class MemoryCartStorage:
    """Process-local carts keyed by session id."""

    def __init__(self) -> None:
        self._carts: dict[str, list[dict[str, Any]]] = {}

    def for_session(self, session_id: str) -> MemoryCartPersistence:
        return MemoryCartPersistence(self, session_id)

    def get(self, session_id: str) -> list[dict[str, Any]] | None:
        payload = self._carts.get(session_id)
        return json.loads(json.dumps(payload)) if payload is not None else None

    def set(self, session_id: str, payload: list[dict[str, Any]]) -> None:
        if not payload:
            self._carts.pop(session_id, None)
            return
        self._carts[session_id] = json.loads(json.dumps(payload))

    def delete(self, session_id: str) -> None:
        self._carts.pop(session_id, None)


class MemoryCartPersistence:
    def __init__(self, storage: MemoryCartStorage, session_id: str):
        self._storage = storage
        self._session_id = session_id

    def load(self) -> Any | None:
        return self._storage.get(self._session_id)

    def save(self, payload: list[dict[str, Any]]) -> None:
        self._storage.set(self._session_id, payload)

    def clear(self) -> None:
        self._storage.delete(self._session_id)


class RedisCartStorage:
    """Session carts persisted in Redis, with in-memory fallback.

    When Redis is unreachable at start-up or fails mid-flight the storage
    switches to process memory for the rest of its life and logs why.
    """

    def __init__(self, redis_url: str | None, ttl_seconds: int | None = None, client: Any = None):
        self._redis_url = redis_url
        self._ttl_seconds = ttl_seconds
        self._memory = MemoryCartStorage()
        self._client = client if client is not None else self._init_client()

    def _init_client(self):
        if not self._redis_url:
            logger.warning("REDIS_URL is not set; cart uses in-memory fallback")
            return None

        try:
            client = redis.from_url(
                self._redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
            logger.info("Redis cart storage enabled")
            return client
        except Exception as exc:
            logger.warning("Redis cart init failed, fallback to in-memory: %s", exc)
            return None

    @property
    def uses_redis(self) -> bool:
        return self._client is not None

    def _switch_to_memory_fallback(self, reason: Exception | str) -> None:
        logger.warning("Redis cart fallback to memory mode: %s", reason)
        self._client = None

    @staticmethod
    def _cart_key(session_id: str) -> str:
        return f"cart:{session_id}"

    def for_session(self, session_id: str) -> RedisCartPersistence:
        return RedisCartPersistence(self, session_id)

    def get(self, session_id: str) -> Any | None:
        if not self._client:
            return self._memory.get(session_id)
        try:
            return self._client.get(self._cart_key(session_id))
        except Exception as exc:
            self._switch_to_memory_fallback(exc)
            return self._memory.get(session_id)

    def set(self, session_id: str, payload: list[dict[str, Any]]) -> None:
        if not payload:
            self.delete(session_id)
            return
        if self._client:
            envelope = json.dumps(payload, ensure_ascii=False)
            try:
                if self._ttl_seconds:
                    self._client.setex(self._cart_key(session_id), self._ttl_seconds, envelope)
                else:
                    self._client.set(self._cart_key(session_id), envelope)
                return
            except Exception as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.set(session_id, payload)

    def delete(self, session_id: str) -> None:
        if self._client:
            try:
                self._client.delete(self._cart_key(session_id))
                return
            except Exception as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.delete(session_id)


class RedisCartPersistence:
    def __init__(self, storage: RedisCartStorage, session_id: str):
        self._storage = storage
        self._session_id = session_id

    def load(self) -> Any | None:
        return self._storage.get(self._session_id)

    def save(self, payload: list[dict[str, Any]]) -> None:
        self._storage.set(self._session_id, payload)

    def clear(self) -> None:
        self._storage.delete(self._session_id)


class SessionCartStorage(Protocol):
    def for_session(self, session_id: str) -> CartPersistence:
        ...


class LocalStorageSessionCarts:
    """Server-side carts in one local-storage file, one key per session."""

    def __init__(self, storage: LocalStorage):
        self._storage = storage

    def for_session(self, session_id: str) -> LocalStorageCartPersistence:
        return LocalStorageCartPersistence(self._storage, key=f"{CART_STORAGE_KEY}:{session_id}")


def build_session_cart_storage(
    backend: str,
    *,
    redis_url: str | None = None,
    local_storage_path: str | None = None,
) -> SessionCartStorage:
    if backend == "redis":
        return RedisCartStorage(redis_url)
    if backend == "local":
        if not local_storage_path:
            raise StorageException("LOCAL_STORAGE_PATH is required for the local cart backend")
        return LocalStorageSessionCarts(LocalStorage(local_storage_path))
    return MemoryCartStorage()


__all__ = [
    "CartPersistence",
    "LocalStorageCartPersistence",
    "LocalStorageSessionCarts",
    "MemoryCartPersistence",
    "MemoryCartStorage",
    "RedisCartPersistence",
    "RedisCartStorage",
    "SessionCartStorage",
    "build_session_cart_storage",
]

