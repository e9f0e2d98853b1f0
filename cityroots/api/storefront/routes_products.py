from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from cityroots.repositories.product_repository import ProductRepository

from .common import get_products, internal_error

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
async def list_products(
    category: str | None = Query(None),
    featured: str | None = Query(None),
    search: str | None = Query(None),
    products: ProductRepository = Depends(get_products),
):
    """Catalog listing; ``search`` wins over ``category`` over ``featured``."""
    try:
        if search:
            items = products.search(search)
        elif category:
            items = products.by_category(category)
        elif featured == "true":
            items = products.featured()
        else:
            items = products.list_all()
    except Exception as e:
        raise internal_error("Failed to fetch products", e) from e
    return [product.to_dict() for product in items]


@router.get("/{product_id}")
async def get_product(product_id: str, products: ProductRepository = Depends(get_products)):
    product = products.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product.to_dict()
