"""
HTTP routers.

All routers are mounted under /api by api/index.py.
"""
from fastapi import APIRouter

from .admin import router as admin_router
from .cart import router as cart_router
from .checkout import router as checkout_router
from .products import router as products_router

api_router = APIRouter()
api_router.include_router(products_router)
api_router.include_router(cart_router)
api_router.include_router(checkout_router)
api_router.include_router(admin_router)

__all__ = ["api_router"]
