"""
SmartCart Core Module

Storefront backend for an RFID smart trolley:
- db: Supabase and Upstash Redis clients
- cart: reconciliation engine, trolley feed, snapshot stores
- services: catalog, payments, money helpers
- routers: FastAPI routes

Imports are lazy so that importing the package does not create clients.
"""

__all__ = [
    "get_supabase_sync",
    "get_redis",
    "CartEngine",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "get_supabase_sync":
        from smartcart.db import get_supabase_sync
        return get_supabase_sync
    elif name == "get_redis":
        from smartcart.db import get_redis
        return get_redis
    elif name == "CartEngine":
        from smartcart.cart import CartEngine
        return CartEngine
    raise AttributeError(f"module 'smartcart' has no attribute '{name}'")
