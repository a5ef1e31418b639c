"""
Cart Router

Thin layer over the CartEngine owned by the application. Every route
returns the full cart after its mutation; mirrored writes to the trolley
feed and the snapshot store happen in the background.
"""
from fastapi import APIRouter, Depends, HTTPException

from smartcart.cart import CartEngine, CartState
from smartcart.errors import ERROR_CATALOG_UNAVAILABLE, ERROR_PRODUCT_NOT_FOUND
from smartcart.services.catalog import CatalogService
from smartcart.services.money import to_float
from .deps import get_cart_engine, get_catalog
from .models import AddToCartRequest, UpdateCartItemRequest

router = APIRouter(tags=["cart"])


def format_cart(state: CartState) -> dict:
    """JSON view of a cart state."""
    return {
        "items": [
            {
                "id": item.id,
                "name": item.product.name,
                "category": item.product.category,
                "image_url": item.product.image_url,
                "stock": item.product.stock,
                "price": to_float(item.price),
                "quantity": item.quantity,
                "subtotal": to_float(item.subtotal),
            }
            for item in state.items
        ],
        "total_items": state.total_items,
        "total_price": to_float(state.total_price),
        "reconciled": state.reconciled,
    }


@router.get("/cart")
async def get_cart(engine: CartEngine = Depends(get_cart_engine)):
    return format_cart(engine.state)


@router.post("/cart/items")
async def add_to_cart(
    request: AddToCartRequest,
    engine: CartEngine = Depends(get_cart_engine),
    catalog: CatalogService = Depends(get_catalog),
):
    """Add one unit of a product."""
    product = await catalog.fetch_by_id(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)

    engine.add_item(product)
    return format_cart(engine.state)


@router.patch("/cart/items/{product_id}")
async def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    engine: CartEngine = Depends(get_cart_engine),
):
    """Set quantity (0 or less removes). Unknown products leave the cart as is."""
    engine.set_quantity(product_id, request.quantity)
    return format_cart(engine.state)


@router.delete("/cart/items/{product_id}")
async def remove_cart_item(product_id: str, engine: CartEngine = Depends(get_cart_engine)):
    engine.remove_item(product_id)
    return format_cart(engine.state)


@router.delete("/cart")
async def clear_cart(engine: CartEngine = Depends(get_cart_engine)):
    engine.clear_cart()
    return format_cart(engine.state)


@router.post("/cart/sync")
async def sync_cart(
    engine: CartEngine = Depends(get_cart_engine),
    catalog: CatalogService = Depends(get_catalog),
):
    """Reload the catalog and reconcile against the latest trolley snapshot."""
    products = await catalog.fetch_all()
    engine.update_catalog(products)

    response = format_cart(engine.state)
    response["notice"] = None if products else ERROR_CATALOG_UNAVAILABLE
    return response
