"""
Shared Dependencies for Routers

The cart engine lives on app.state (created by the application lifespan);
services are lazy singletons. Tests swap any of them through
app.dependency_overrides.
"""
from typing import Optional

from fastapi import HTTPException, Request

from smartcart.cart import CartEngine
from smartcart.services.catalog import CatalogService, get_catalog_service
from smartcart.services.payments import PaymentService, get_payment_service


def get_optional_cart_engine(request: Request) -> Optional[CartEngine]:
    """The running engine, or None before startup / after shutdown."""
    return getattr(request.app.state, "cart_engine", None)


def get_cart_engine(request: Request) -> CartEngine:
    engine = get_optional_cart_engine(request)
    if engine is None:
        raise HTTPException(status_code=503, detail="Cart engine not started")
    return engine


def get_catalog() -> CatalogService:
    return get_catalog_service()


def get_payments() -> PaymentService:
    return get_payment_service()
