"""Storefront services: cart store, checkout flow and their server-side helpers."""

from .cart_service import CartService
from .cart_store import CartStore, add_with_auth
from .checkout_flow import CheckoutFlow, StepResult
from .order_service import OrderService
from .otp_service import OtpService
from .payment_relay import ServerPaymentGateway, ServerPaymentVerifier

__all__ = [
    "CartService",
    "CartStore",
    "CheckoutFlow",
    "OrderService",
    "OtpService",
    "ServerPaymentGateway",
    "ServerPaymentVerifier",
    "StepResult",
    "add_with_auth",
]
