"""Domain package."""

from .cart import CartLine, decode_cart_payload, encode_cart
from .checkout import AddressData, CheckoutSession, CheckoutStep, CustomerData, PaymentMetadata
from .order import Address, Customer, Order, OrderItem, OrderStatus, PaymentStatus, TrackingEvent
from .product import Product

__all__ = [
    # Catalog & cart
    "Product",
    "CartLine",
    "decode_cart_payload",
    "encode_cart",
    # Checkout
    "CheckoutStep",
    "CheckoutSession",
    "CustomerData",
    "AddressData",
    "PaymentMetadata",
    # Orders
    "Customer",
    "Address",
    "Order",
    "OrderItem",
    "TrackingEvent",
    "OrderStatus",
    "PaymentStatus",
]
