from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from cityroots.core.exceptions import (
    CartItemNotFoundException,
    ProductNotFoundException,
    ValidationException,
)
from cityroots.services.cart_service import CartService

from .common import (
    AddToCartRequest,
    CartResponse,
    MessageResponse,
    UpdateCartRequest,
    get_cart_service,
    internal_error,
)

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/{session_id}", response_model=CartResponse)
async def get_cart(session_id: str, carts: CartService = Depends(get_cart_service)):
    try:
        store = carts.get_cart(session_id)
        return CartResponse(
            items=[line.to_dict() for line in store.lines],
            totals=store.snapshot_totals().to_dict(),
        )
    except Exception as e:
        raise internal_error("Failed to fetch cart", e, session_id=session_id) from e


@router.post("/{session_id}/add")
async def add_to_cart(
    session_id: str,
    payload: AddToCartRequest,
    carts: CartService = Depends(get_cart_service),
):
    try:
        line = carts.add_item(session_id, payload.product_id, payload.quantity)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except ProductNotFoundException as e:
        raise HTTPException(status_code=404, detail="Product not found") from e
    except Exception as e:
        raise internal_error("Failed to add to cart", e, session_id=session_id) from e
    return line.to_dict()


@router.put("/{session_id}/update")
async def update_cart_item(
    session_id: str,
    payload: UpdateCartRequest,
    carts: CartService = Depends(get_cart_service),
):
    try:
        line = carts.update_item(session_id, payload.product_id, payload.quantity)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except CartItemNotFoundException as e:
        raise HTTPException(status_code=404, detail="Cart item not found") from e
    except Exception as e:
        raise internal_error("Failed to update cart", e, session_id=session_id) from e

    if line is None:
        return MessageResponse(message="Item removed from cart")
    return line.to_dict()


@router.delete("/{session_id}/remove/{product_id}", response_model=MessageResponse)
async def remove_from_cart(
    session_id: str,
    product_id: str,
    carts: CartService = Depends(get_cart_service),
):
    try:
        carts.remove_item(session_id, product_id)
    except CartItemNotFoundException as e:
        raise HTTPException(status_code=404, detail="Cart item not found") from e
    except Exception as e:
        raise internal_error("Failed to remove from cart", e, session_id=session_id) from e
    return MessageResponse(message="Item removed from cart")


@router.delete("/{session_id}/clear", response_model=MessageResponse)
async def clear_cart(session_id: str, carts: CartService = Depends(get_cart_service)):
    try:
        carts.clear(session_id)
    except Exception as e:
        raise internal_error("Failed to clear cart", e, session_id=session_id) from e
    return MessageResponse(message="Cart cleared")
