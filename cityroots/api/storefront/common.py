from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel, ConfigDict, Field

from cityroots.core.config import Settings
from cityroots.core.constants import MAX_CART_QUANTITY
from cityroots.core.sentry_integration import capture_exception
from cityroots.domain.cart import CartLine, decode_cart_payload
from cityroots.domain.checkout import AddressData, CustomerData
from cityroots.integrations.email_service import EmailService
from cityroots.integrations.razorpay import RazorpayClient
from cityroots.repositories.product_repository import ProductRepository
from cityroots.services.cart_service import CartService
from cityroots.services.order_service import OrderService
from cityroots.services.otp_service import OtpService

logger = logging.getLogger(__name__)


# =============================================================================
# Request models
# =============================================================================


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AddToCartRequest(_CamelModel):
    product_id: str | None = Field(None, alias="productId")
    # Kept loose so non-integer input gets the storefront's own 400 message
    quantity: Any = 1


class UpdateCartRequest(_CamelModel):
    product_id: str | None = Field(None, alias="productId")
    quantity: Any = None


class VerifyPhoneRequest(_CamelModel):
    phone: str | None = None


class VerifyOtpRequest(_CamelModel):
    phone: str | None = None
    otp: str | None = None
    name: str | None = None
    email: str | None = None


class AddressPayload(_CamelModel):
    full_name: str = Field("", alias="fullName")
    address_line1: str = Field("", alias="addressLine1")
    address_line2: str = Field("", alias="addressLine2")
    city: str = ""
    state: str = ""
    postal_code: str = Field("", alias="postalCode")
    country: str = "India"
    phone: str = ""

    def to_domain(self) -> AddressData:
        return AddressData(
            full_name=self.full_name,
            address_line1=self.address_line1,
            address_line2=self.address_line2,
            city=self.city,
            state=self.state,
            postal_code=self.postal_code,
            country=self.country,
            phone=self.phone,
        )


class CreateAddressRequest(AddressPayload):
    customer_id: str | None = Field(None, alias="customerId")
    type: str = "shipping"
    is_default: bool = Field(False, alias="isDefault")


class CustomerPayload(_CamelModel):
    phone: str = ""
    name: str = ""
    email: str = ""

    def to_domain(self) -> CustomerData:
        return CustomerData(phone=self.phone, name=self.name, email=self.email, is_verified=True)


class CartItemPayload(_CamelModel):
    product: dict[str, Any]
    quantity: int


class CreateOrderRequest(_CamelModel):
    customer_data: CustomerPayload | None = Field(None, alias="customerData")
    address_data: AddressPayload | None = Field(None, alias="addressData")
    cart_items: list[CartItemPayload] | None = Field(None, alias="cartItems")
    currency: str = "INR"


class OrderReference(_CamelModel):
    order_id: str | None = Field(None, alias="orderId")
    order_number: str | None = Field(None, alias="orderNumber")


class VerifyPaymentRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    razorpay_order_id: str = ""
    razorpay_payment_id: str = ""
    razorpay_signature: str = ""
    order_data: OrderReference | None = Field(None, alias="orderData")


# =============================================================================
# Response models
# =============================================================================


class CartResponse(BaseModel):
    items: list[dict[str, Any]]
    totals: dict[str, Any]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class StatusResponse(BaseModel):
    status: str
    version: str
    environment: str
    cart_backend: str
    payments_enabled: bool
    email_enabled: bool


# =============================================================================
# Service registry (injected by create_api_app)
# =============================================================================


@dataclass
class StorefrontServices:
    settings: Settings
    products: ProductRepository
    carts: CartService
    orders: OrderService
    otp: OtpService
    razorpay: RazorpayClient
    email: EmailService


_services: StorefrontServices | None = None


def set_services(services: StorefrontServices | None) -> None:
    global _services
    _services = services


def get_services() -> StorefrontServices:
    if _services is None:
        raise HTTPException(status_code=500, detail="Storefront services not initialized")
    return _services


def get_products() -> ProductRepository:
    return get_services().products


def get_cart_service() -> CartService:
    return get_services().carts


def get_order_service() -> OrderService:
    return get_services().orders


def get_otp_service() -> OtpService:
    return get_services().otp


def get_razorpay() -> RazorpayClient:
    client = get_services().razorpay
    if not client.enabled:
        raise HTTPException(status_code=503, detail="Payment gateway not configured")
    return client


# =============================================================================
# Helpers
# =============================================================================


def lines_from_payload(items: list[CartItemPayload], products: ProductRepository) -> list[CartLine]:
    """Client-sent cart items re-priced from the catalog.

    Only the product id and quantity are taken from the client. Unknown ids
    are 404, out-of-stock products and quantities over the cap are 400.
    """
    lines: list[CartLine] = []
    for sent in decode_cart_payload([item.model_dump() for item in items]):
        product = products.get(sent.product_id)
        if product is None:
            raise HTTPException(status_code=404, detail=f"Product with ID {sent.product_id} not found")
        if not product.in_stock:
            raise HTTPException(status_code=400, detail=f"{product.name} is out of stock")
        if sent.quantity > MAX_CART_QUANTITY:
            raise HTTPException(status_code=400, detail=f"Quantity cannot exceed {MAX_CART_QUANTITY}")
        lines.append(CartLine(product=product, quantity=sent.quantity))
    return lines


def internal_error(message: str, error: Exception, **extra: Any) -> HTTPException:
    """Log, report and wrap an unexpected failure as a 500."""
    logger.error(f"{message}: {error}")
    capture_exception(error, **extra)
    return HTTPException(status_code=500, detail=message)


__all__ = [
    "logger",
    "AddToCartRequest",
    "UpdateCartRequest",
    "VerifyPhoneRequest",
    "VerifyOtpRequest",
    "AddressPayload",
    "CreateAddressRequest",
    "CustomerPayload",
    "CartItemPayload",
    "CreateOrderRequest",
    "OrderReference",
    "VerifyPaymentRequest",
    "CartResponse",
    "MessageResponse",
    "StatusResponse",
    "StorefrontServices",
    "set_services",
    "get_services",
    "get_products",
    "get_cart_service",
    "get_order_service",
    "get_otp_service",
    "get_razorpay",
    "lines_from_payload",
    "internal_error",
]
