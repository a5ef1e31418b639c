"""
Public Products Router

Catalog reads. A successful full listing is also handed to the cart
engine, which is how the trolley feed gets reconciled once products are
known.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from smartcart.cart import CartEngine
from smartcart.errors import ERROR_CATALOG_UNAVAILABLE, ERROR_PRODUCT_NOT_FOUND
from smartcart.services.catalog import CatalogService
from .deps import get_catalog, get_optional_cart_engine

router = APIRouter(tags=["products"])


@router.get("/products")
async def list_products(
    category: Optional[str] = None,
    catalog: CatalogService = Depends(get_catalog),
    engine: Optional[CartEngine] = Depends(get_optional_cart_engine),
):
    """List products, optionally by category. Works without a running engine."""
    if category:
        products = await catalog.fetch_by_category(category)
    else:
        products = await catalog.fetch_all()
        if engine is not None:
            engine.update_catalog(products)

    return {
        "products": [p.model_dump(mode="json") for p in products],
        "notice": None if products else ERROR_CATALOG_UNAVAILABLE,
    }


@router.get("/products/{product_id}")
async def get_product(product_id: str, catalog: CatalogService = Depends(get_catalog)):
    product = await catalog.fetch_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return product.model_dump(mode="json")
