"""Order use cases: placement, gateway order creation, payment confirmation."""

from .create_payment_order import PaymentOrderResult, create_payment_order
from .place_order import PlaceOrderResult, place_order
from .verify_payment import PaymentDecisionResult, verify_payment

__all__ = [
    "PaymentDecisionResult",
    "PaymentOrderResult",
    "PlaceOrderResult",
    "create_payment_order",
    "place_order",
    "verify_payment",
]
