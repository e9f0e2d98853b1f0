"""Payment collaborator contracts and outcome types.

The hosted checkout reports back through exactly one of three outcomes.
Callers branch on the outcome type instead of registering callbacks.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Union


@dataclass(frozen=True)
class GatewayOrder:
    """Order created at the gateway; ``amount`` is in paise."""

    id: str
    amount: int
    currency: str
    receipt: str
    status: str = "created"
    notes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> GatewayOrder:
        return cls(
            id=str(data["id"]),
            amount=int(data.get("amount", 0)),
            currency=str(data.get("currency", "INR")),
            receipt=str(data.get("receipt", "")),
            status=str(data.get("status", "created")),
            notes=dict(data.get("notes") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "currency": self.currency,
            "receipt": self.receipt,
            "status": self.status,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class CheckoutPrefill:
    name: str
    contact: str
    email: str = ""


@dataclass(frozen=True)
class PaymentSucceeded:
    payment_id: str
    order_id: str
    signature: str


@dataclass(frozen=True)
class PaymentFailed:
    reason: str | None = None


@dataclass(frozen=True)
class PaymentDismissed:
    pass


PaymentOutcome = Union[PaymentSucceeded, PaymentFailed, PaymentDismissed]


@dataclass(frozen=True)
class CreatedPaymentOrder:
    """Gateway order plus the storefront order it pays for."""

    gateway_order: GatewayOrder
    order_id: str
    order_number: str


@dataclass(frozen=True)
class VerificationResult:
    ok: bool
    order_id: str | None = None
    message: str | None = None


class PaymentGateway(Protocol):
    async def create_order(
        self, amount: int, currency: str, metadata: dict[str, Any]
    ) -> CreatedPaymentOrder:
        ...

    async def open_checkout(
        self, order: CreatedPaymentOrder, prefill: CheckoutPrefill
    ) -> PaymentOutcome:
        ...


class PaymentVerifier(Protocol):
    async def verify(
        self, success: PaymentSucceeded, order: CreatedPaymentOrder, summary: dict[str, Any]
    ) -> VerificationResult:
        ...
