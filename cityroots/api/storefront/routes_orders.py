from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from cityroots.application.orders import place_order, verify_payment
from cityroots.core.exceptions import OrderNotFoundException
from cityroots.domain.checkout import PaymentMetadata
from cityroots.repositories.product_repository import ProductRepository
from cityroots.services.order_service import OrderService

from .common import (
    CreateOrderRequest,
    VerifyPaymentRequest,
    get_order_service,
    get_products,
    get_services,
    internal_error,
    lines_from_payload,
    logger,
)

router = APIRouter(prefix="/orders", tags=["orders"])

PLACE_ORDER_STATUS = {"empty_cart": 400, "invalid_cart": 400, "invalid_address": 400, "db_error": 500}
VERIFY_STATUS = {
    "not_found": (404, "Order not found"),
    "already_processed": (409, "Payment already processed for this order"),
    "signature_mismatch": (400, "Payment verification failed"),
    "db_error": (500, "Failed to verify payment"),
}


@router.post("")
async def create_order(
    payload: CreateOrderRequest,
    orders: OrderService = Depends(get_order_service),
    products: ProductRepository = Depends(get_products),
):
    if not payload.customer_data or not payload.address_data or payload.cart_items is None:
        raise HTTPException(status_code=400, detail="Missing required order data")

    lines = lines_from_payload(payload.cart_items, products)
    try:
        result = place_order(
            payload.customer_data.to_domain(),
            payload.address_data.to_domain(),
            lines,
            repo=orders.repo,
        )
    except Exception as e:
        raise internal_error("Failed to create order", e) from e

    if not result.ok:
        status = PLACE_ORDER_STATUS.get(result.error_key, 400)
        raise HTTPException(status_code=status, detail=result.message or "Failed to create order")

    order = result.order
    return {
        "success": True,
        "order": {
            "id": order.id,
            "orderNumber": order.order_number,
            "status": order.status,
            "total": float(order.total),
            "createdAt": order.created_at.isoformat(),
        },
        "totals": result.totals.to_dict(),
    }


@router.post("/verify-payment")
async def verify_order_payment(
    payload: VerifyPaymentRequest,
    orders: OrderService = Depends(get_order_service),
):
    reference = payload.order_data
    client = get_services().razorpay
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
    logger.info("Order %s marked paid", order.order_number)
    return {"success": True, "orderId": order.id, "message": "Payment verified successfully"}


@router.get("/tracking/{order_number}")
async def get_order_tracking(order_number: str, orders: OrderService = Depends(get_order_service)):
    try:
        return orders.get_tracking(order_number)
    except OrderNotFoundException as e:
        raise HTTPException(status_code=404, detail="Order not found") from e


@router.get("/{order_id}")
async def get_order(order_id: str, orders: OrderService = Depends(get_order_service)):
    try:
        return orders.get_order_details(order_id)
    except OrderNotFoundException as e:
        raise HTTPException(status_code=404, detail="Order not found") from e
