"""Checkout domain types: steps, customer/address data and session state."""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any

from cityroots.core.constants import DEFAULT_COUNTRY, INDIAN_STATES


class CheckoutStep:
    """Checkout wizard steps, in order."""

    ADDRESS = "address"
    PAYMENT = "payment"
    CONFIRMATION = "confirmation"

    ORDER = (ADDRESS, PAYMENT, CONFIRMATION)

    TITLES = {
        ADDRESS: "Delivery Address",
        PAYMENT: "Payment",
        CONFIRMATION: "Order Confirmation",
    }

    @classmethod
    def index(cls, step: str) -> int:
        return cls.ORDER.index(step)

    @classmethod
    def title(cls, step: str) -> str:
        return cls.TITLES.get(step, "")


POSTAL_CODE_PATTERN = re.compile(r"^[1-9][0-9]{5}$")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")

REQUIRED_ADDRESS_FIELDS = {
    "full_name": "full name",
    "address_line1": "address line 1",
    "city": "city",
    "state": "state",
    "postal_code": "PIN code",
    "phone": "phone",
}


@dataclass
class CustomerData:
    phone: str
    name: str
    email: str = ""
    is_verified: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "phone": self.phone,
            "name": self.name,
            "email": self.email,
            "isVerified": self.is_verified,
        }

    @classmethod
    def from_address(cls, address: AddressData) -> CustomerData:
        # Inline verification is skipped on the primary checkout path
        return cls(phone=address.phone, name=address.full_name, email="", is_verified=True)


@dataclass
class AddressData:
    full_name: str
    address_line1: str
    city: str
    state: str
    postal_code: str
    phone: str
    address_line2: str = ""
    country: str = DEFAULT_COUNTRY

    def __post_init__(self) -> None:
        self.full_name = (self.full_name or "").strip()
        self.address_line1 = (self.address_line1 or "").strip()
        self.address_line2 = (self.address_line2 or "").strip()
        self.city = (self.city or "").strip()
        self.state = (self.state or "").strip()
        self.postal_code = (self.postal_code or "").strip()
        self.phone = (self.phone or "").strip()
        self.country = (self.country or DEFAULT_COUNTRY).strip()

    def to_dict(self) -> dict[str, Any]:
        return {
            "fullName": self.full_name,
            "addressLine1": self.address_line1,
            "addressLine2": self.address_line2,
            "city": self.city,
            "state": self.state,
            "postalCode": self.postal_code,
            "country": self.country,
            "phone": self.phone,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AddressData:
        def pick(camel: str, snake: str) -> str:
            value = data.get(camel, data.get(snake))
            return "" if value is None else str(value)

        return cls(
            full_name=pick("fullName", "full_name"),
            address_line1=pick("addressLine1", "address_line1"),
            address_line2=pick("addressLine2", "address_line2"),
            city=pick("city", "city"),
            state=pick("state", "state"),
            postal_code=pick("postalCode", "postal_code"),
            country=pick("country", "country") or DEFAULT_COUNTRY,
            phone=pick("phone", "phone"),
        )


def validate_address(address: AddressData) -> str | None:
    """Return a single human-readable error, or ``None`` when valid."""
    values = asdict(address)
    missing = [label for name, label in REQUIRED_ADDRESS_FIELDS.items() if not values.get(name)]
    if missing:
        return f"Please fill in all required fields: {', '.join(missing)}"

    if not POSTAL_CODE_PATTERN.match(address.postal_code):
        return "Please enter a valid 6-digit PIN code"

    if not PHONE_PATTERN.match(address.phone):
        return "Please enter a valid 10-digit phone number"

    if address.state not in INDIAN_STATES:
        return "Please select a valid state"

    if address.country != DEFAULT_COUNTRY:
        return f"Delivery is only available within {DEFAULT_COUNTRY}"

    return None


@dataclass(frozen=True)
class PaymentMetadata:
    payment_id: str
    method: str
    order_number: str

    def to_dict(self) -> dict[str, str]:
        return {
            "paymentId": self.payment_id,
            "paymentMethod": self.method,
            "orderNumber": self.order_number,
        }


@dataclass
class CheckoutSession:
    """Transient state of one checkout; never persisted."""

    step: str = CheckoutStep.ADDRESS
    customer: CustomerData | None = None
    address: AddressData | None = None
    order_id: str | None = None
    payment: PaymentMetadata | None = None
    error: str | None = None
    loading: bool = False
    extra: dict[str, Any] = field(default_factory=dict)
