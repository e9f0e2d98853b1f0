"""Custom exceptions for the City Roots storefront."""
from __future__ import annotations


class CityRootsException(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class StorageException(CityRootsException):
    """Persistence backend errors."""

    pass


class ValidationException(CityRootsException):
    """Input validation errors."""

    pass


class ProductNotFoundException(CityRootsException):
    """Product not found in the catalog."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product with ID {product_id} not found")
        self.product_id = product_id


class CartItemNotFoundException(CityRootsException):
    """Cart has no line for the product."""

    def __init__(self, session_id: str, product_id: str) -> None:
        super().__init__(f"Cart item {product_id} not found for session {session_id}")
        self.session_id = session_id
        self.product_id = product_id


class OrderNotFoundException(CityRootsException):
    """Order not found by id or order number."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"Order {reference} not found")
        self.reference = reference


class PaymentGatewayException(CityRootsException):
    """Payment gateway unreachable or rejected the request."""

    pass


class ConfigurationException(CityRootsException):
    """Configuration errors."""

    pass
