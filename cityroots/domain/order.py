"""Order domain types and status enums."""
from __future__ import annotations

import random
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from cityroots.core.constants import DEFAULT_COUNTRY, ORDER_NUMBER_PREFIX


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_order_number(now_ms: int | None = None, rng: random.Random | None = None) -> str:
    """``VC`` + last 6 digits of the epoch milliseconds + 3 random digits."""
    millis = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = (rng or random).randint(0, 999)
    return f"{ORDER_NUMBER_PREFIX}{str(millis)[-6:]}{suffix:03d}"


class OrderStatus:
    """Order lifecycle statuses."""

    PENDING = "pending"
    PAID = "paid"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus:
    """Payment lifecycle status stored in Order.payment_status."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class TrackingStatus:
    ORDER_PLACED = "order_placed"
    PAYMENT_CONFIRMED = "payment_confirmed"


@dataclass
class Customer:
    phone: str
    name: str
    email: str = ""
    is_verified: bool = False
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "phone": self.phone,
            "name": self.name,
            "email": self.email,
            "isVerified": self.is_verified,
        }


@dataclass
class Address:
    customer_id: str
    full_name: str
    address_line1: str
    city: str
    state: str
    postal_code: str
    phone: str
    address_line2: str = ""
    country: str = DEFAULT_COUNTRY
    type: str = "shipping"
    is_default: bool = False
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "type": self.type,
            "fullName": self.full_name,
            "addressLine1": self.address_line1,
            "addressLine2": self.address_line2,
            "city": self.city,
            "state": self.state,
            "postalCode": self.postal_code,
            "country": self.country,
            "phone": self.phone,
            "isDefault": self.is_default,
        }


@dataclass
class Order:
    order_number: str
    customer_id: str
    shipping_address_id: str
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    status: str = OrderStatus.PENDING
    payment_status: str = PaymentStatus.PENDING
    payment_method: str = "razorpay"
    razorpay_order_id: str | None = None
    razorpay_payment_id: str | None = None
    razorpay_signature: str | None = None
    notes: str = ""
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def touch(self) -> None:
        self.updated_at = _now()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orderNumber": self.order_number,
            "customerId": self.customer_id,
            "shippingAddressId": self.shipping_address_id,
            "status": self.status,
            "paymentStatus": self.payment_status,
            "paymentMethod": self.payment_method,
            "razorpayOrderId": self.razorpay_order_id,
            "razorpayPaymentId": self.razorpay_payment_id,
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "shipping": float(self.shipping),
            "total": float(self.total),
            "notes": self.notes,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass
class OrderItem:
    """Product snapshot at the time of ordering."""

    order_id: str
    product_id: str
    product_name: str
    product_image: str
    product_price: Decimal
    quantity: int
    id: str = field(default_factory=_new_id)

    @property
    def total_price(self) -> Decimal:
        return self.product_price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orderId": self.order_id,
            "productId": self.product_id,
            "productName": self.product_name,
            "productImage": self.product_image,
            "productPrice": float(self.product_price),
            "quantity": self.quantity,
            "totalPrice": float(self.total_price),
        }


@dataclass
class TrackingEvent:
    order_id: str
    status: str
    message: str
    location: str | None = None
    id: str = field(default_factory=_new_id)
    timestamp: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orderId": self.order_id,
            "status": self.status,
            "message": self.message,
            "location": self.location,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class Payment:
    order_id: str
    amount: Decimal
    payment_id: str
    currency: str = "INR"
    payment_method: str = "razorpay"
    status: str = "completed"
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
