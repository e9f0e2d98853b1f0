from __future__ import annotations

from fastapi import APIRouter, Depends

from cityroots import __version__

from .common import StatusResponse, StorefrontServices, get_services

router = APIRouter(tags=["status"])


@router.get("/status", response_model=StatusResponse)
async def status(services: StorefrontServices = Depends(get_services)):
    settings = services.settings
    return StatusResponse(
        status="ok",
        version=__version__,
        environment=settings.environment,
        cart_backend=settings.cart_backend,
        payments_enabled=services.razorpay.enabled,
        email_enabled=services.email.enabled,
    )
