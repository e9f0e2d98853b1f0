from fastapi import APIRouter, Depends, HTTPException, Request

from cityroots.application.orders import create_payment_order, verify_payment
from cityroots.domain.checkout import PaymentMetadata
from cityroots.integrations.razorpay import RazorpayClient
from cityroots.repositories.product_repository import ProductRepository
from cityroots.services.order_service import OrderService

from ..rate_limit import PAYMENT_RATE_LIMIT, limiter
from .common import (
    CreateOrderRequest,
    VerifyPaymentRequest,
    get_order_service,
    get_products,
    get_razorpay,
    internal_error,
    lines_from_payload,
    logger,
)
from .routes_orders import VERIFY_STATUS

router = APIRouter(prefix="/razorpay", tags=["payments"])

CREATE_STATUS = {"empty_cart": 400, "invalid_cart": 400, "invalid_address": 400, "gateway_error": 502, "db_error": 500}


@router.post("/create-order")
@limiter.limit(PAYMENT_RATE_LIMIT)
async def create_razorpay_order(
    request: Request,
    payload: CreateOrderRequest,
    orders: OrderService = Depends(get_order_service),
    products: ProductRepository = Depends(get_products),
    client: RazorpayClient = Depends(get_razorpay),
):
    """Record the order and open a Razorpay order for its server-side total."""
    if not payload.customer_data or not payload.address_data or not payload.cart_items:
        raise HTTPException(status_code=400, detail="Missing required order data")

    lines = lines_from_payload(payload.cart_items, products)
    try:
        result = await create_payment_order(
            payload.customer_data.to_domain(),
            payload.address_data.to_domain(),
            lines,
            repo=orders.repo,
            gateway=client,
            currency=payload.currency,
        )
    except Exception as e:
        raise internal_error("Failed to create payment order", e) from e

    if not result.ok:
        status = CREATE_STATUS.get(result.error_key, 400)
        raise HTTPException(status_code=status, detail=result.message or "Failed to create payment order")

    placed = result.placed
    created = result.payment_order
    return {
        "keyId": client.key_id,
        "order": created.gateway_order.to_dict(),
        "orderData": {
            "orderId": created.order_id,
            "orderNumber": created.order_number,
            "order": placed.order.to_dict(),
            "customer": placed.customer.to_dict(),
            "address": placed.address.to_dict(),
            "totals": placed.totals.to_dict(),
        },
    }


@router.post("/verify-payment")
@limiter.limit(PAYMENT_RATE_LIMIT)
async def verify_razorpay_payment(
    request: Request,
    payload: VerifyPaymentRequest,
    orders: OrderService = Depends(get_order_service),
    client: RazorpayClient = Depends(get_razorpay),
):
    if not payload.razorpay_payment_id or not payload.razorpay_signature:
        raise HTTPException(status_code=400, detail="Missing payment details")

    reference = payload.order_data
    try:
        decision = verify_payment(
            payload.razorpay_order_id,
            payload.razorpay_payment_id,
            payload.razorpay_signature,
            repo=orders.repo,
            check_signature=client.verify_payment_signature,
            order_id=reference.order_id if reference else None,
            order_number=reference.order_number if reference else None,
        )
    except Exception as e:
        raise internal_error("Failed to verify payment", e) from e

    if not decision.ok:
        status, detail = VERIFY_STATUS.get(decision.error_key, (400, "Failed to verify payment"))
        raise HTTPException(status_code=status, detail=detail)

    order = decision.order
    await orders.notify_paid(
        order, PaymentMetadata(payload.razorpay_payment_id, "razorpay", order.order_number)
    )
    logger.info("Razorpay payment %s verified for %s", payload.razorpay_payment_id, order.order_number)
    return {"success": True, "orderId": order.id, "message": "Payment verified successfully"}
