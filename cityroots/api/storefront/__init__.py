from __future__ import annotations

from fastapi import APIRouter

from . import (
    routes_cart,
    routes_customers,
    routes_orders,
    routes_products,
    routes_razorpay,
    routes_status,
)
from .common import StorefrontServices, set_services

router = APIRouter(prefix="/api")

router.include_router(routes_products.router)
router.include_router(routes_cart.router)
router.include_router(routes_customers.router)
router.include_router(routes_orders.router)
router.include_router(routes_razorpay.router)
router.include_router(routes_status.router)

__all__ = ["router", "set_services", "StorefrontServices"]
