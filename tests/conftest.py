"""Shared pytest fixtures for storefront tests."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

import pytest

from cityroots.core.config import EmailConfig, RazorpayConfig, Settings
from cityroots.domain.checkout import AddressData
from cityroots.domain.product import Product
from cityroots.integrations.cart_persistence import MemoryCartStorage
from cityroots.integrations.payments import GatewayOrder
from cityroots.integrations.razorpay import RazorpayClient
from cityroots.services.cart_store import CartStore


def make_product(product_id: str = "p1", price: str = "599", **overrides) -> Product:
    data = {
        "id": product_id,
        "name": f"Plant {product_id}",
        "price": Decimal(price),
        "image": f"/api/images/{product_id}.jpg",
        "category": "Indoor Plants",
    }
    data.update(overrides)
    return Product(**data)


def make_address(**overrides) -> AddressData:
    data = {
        "full_name": "Asha Rao",
        "address_line1": "12 MG Road",
        "city": "New Delhi",
        "state": "Delhi",
        "postal_code": "110001",
        "phone": "9876543210",
    }
    data.update(overrides)
    return AddressData(**data)


class StubRazorpayClient(RazorpayClient):
    """Real signing, canned order creation."""

    def __init__(self, key_secret: str = "secret"):
        super().__init__(RazorpayConfig(key_id="rzp_test_key", key_secret=key_secret))
        self.amounts: list[int] = []
        self.receipts: list[str] = []

    async def create_order(self, amount, currency, receipt, notes=None):
        self.amounts.append(amount)
        self.receipts.append(receipt)
        return GatewayOrder(id=f"order_{receipt}", amount=amount, currency=currency, receipt=receipt)


class DummyAuth:
    def __init__(self, allow: bool):
        self.allow = allow
        self.prompts = 0

    @property
    def current_user(self):
        return None

    async def require_auth(self, callback) -> bool:
        self.prompts += 1
        if not self.allow:
            return False
        await callback()
        return True


@dataclass
class FakeRedisClient:
    data: dict[str, str] = field(default_factory=dict)
    expiry: dict[str, int] = field(default_factory=dict)
    fail: bool = False

    def _check(self) -> None:
        if self.fail:
            raise ConnectionError("redis down")

    def ping(self) -> bool:
        self._check()
        return True

    def get(self, key: str):
        self._check()
        return self.data.get(key)

    def set(self, key: str, value: str):
        self._check()
        self.data[key] = value
        return True

    def setex(self, key: str, ttl: int, value: str) -> bool:
        self._check()
        self.data[key] = value
        self.expiry[key] = ttl
        return True

    def delete(self, key: str) -> int:
        self._check()
        existed = 1 if key in self.data else 0
        self.data.pop(key, None)
        self.expiry.pop(key, None)
        return existed


@pytest.fixture
def cart_storage() -> MemoryCartStorage:
    return MemoryCartStorage()


@pytest.fixture
def cart(cart_storage) -> CartStore:
    return CartStore(cart_storage.for_session("session-1"))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        api_host="127.0.0.1",
        api_port=5000,
        cart_backend="memory",
        redis_url=None,
        local_storage_path=".cityroots/test_storage.json",
        razorpay=RazorpayConfig(key_id="rzp_test_key", key_secret="test_secret"),
        email=EmailConfig(provider="custom", user="", password="", host="localhost", port=587),
    )


@pytest.fixture
def no_rate_limit(monkeypatch):
    from cityroots.api import rate_limit

    monkeypatch.setattr(rate_limit.limiter, "enabled", False)
