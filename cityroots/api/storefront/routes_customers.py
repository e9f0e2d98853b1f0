from fastapi import APIRouter, Depends, HTTPException, Request

from cityroots.core.exceptions import ValidationException
from cityroots.domain.checkout import validate_address
from cityroots.domain.order import Address
from cityroots.services.order_service import OrderService
from cityroots.services.otp_service import OtpService

from ..rate_limit import OTP_RATE_LIMIT, limiter
from .common import (
    CreateAddressRequest,
    VerifyOtpRequest,
    VerifyPhoneRequest,
    get_order_service,
    get_otp_service,
    internal_error,
    logger,
)

router = APIRouter(tags=["customers"])


@router.post("/customers/verify-phone")
@limiter.limit(OTP_RATE_LIMIT)
async def verify_phone(
    request: Request,
    payload: VerifyPhoneRequest,
    otp: OtpService = Depends(get_otp_service),
):
    try:
        challenge = otp.request_code(payload.phone)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except Exception as e:
        raise internal_error("Failed to verify phone number", e) from e

    logger.info("OTP issued for customer %s", challenge.customer.id)
    return {
        "success": True,
        "message": "OTP sent successfully",
        # Demo only: no SMS provider is wired
        "otp": challenge.otp,
        "customer": challenge.customer.to_dict(),
    }


@router.post("/customers/verify-otp")
@limiter.limit(OTP_RATE_LIMIT)
async def verify_otp(
    request: Request,
    payload: VerifyOtpRequest,
    otp: OtpService = Depends(get_otp_service),
):
    try:
        customer = otp.verify_code(payload.phone, payload.otp, payload.name, payload.email)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except Exception as e:
        raise internal_error("Failed to verify OTP", e) from e

    return {
        "success": True,
        "message": "Phone verified successfully",
        "customer": customer.to_dict(),
    }


@router.post("/addresses")
async def create_address(
    payload: CreateAddressRequest,
    orders: OrderService = Depends(get_order_service),
):
    error = validate_address(payload.to_domain())
    if error:
        raise HTTPException(status_code=400, detail=error)
    if not payload.customer_id or orders.repo.get_customer(payload.customer_id) is None:
        raise HTTPException(status_code=400, detail="Invalid address data: unknown customer")

    data = payload.to_domain()
    try:
        address = orders.repo.create_address(
            Address(
                customer_id=payload.customer_id,
                full_name=data.full_name,
                address_line1=data.address_line1,
                address_line2=data.address_line2,
                city=data.city,
                state=data.state,
                postal_code=data.postal_code,
                country=data.country,
                phone=data.phone,
                type=payload.type,
                is_default=payload.is_default,
            )
        )
    except Exception as e:
        raise internal_error("Failed to create address", e) from e
    return address.to_dict()
