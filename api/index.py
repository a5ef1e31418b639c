"""
SmartCart - Main FastAPI Application

Single entry point for the storefront API. The application lifespan owns
the cart engine: it restores the persisted cart, subscribes to the trolley
feed, and unsubscribes again on shutdown.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartcart import config
from smartcart.cart import CartEngine, TrolleyFeed, create_store
from smartcart.logging import get_logger
from smartcart.routers import api_router

logger = get_logger(__name__)


def build_engine() -> CartEngine:
    """Engine wired to the configured store and trolley namespace."""
    store = create_store(config.CART_STORE_BACKEND, config.CART_STORE_PATH)
    feed = TrolleyFeed(config.TROLLEY_NAMESPACE, config.FEED_POLL_INTERVAL)
    return CartEngine(store, feed)


async def _load_initial_catalog(engine: CartEngine) -> None:
    from smartcart.services.catalog import get_catalog_service

    try:
        catalog = get_catalog_service()
    except ValueError as e:
        logger.error(f"Catalog unavailable at startup: {e}")
        return

    products = await catalog.fetch_all()
    if products:
        engine.update_catalog(products)
        logger.info(f"Loaded {len(products)} products")
    else:
        logger.warning("Catalog empty at startup; trolley reconciliation deferred")


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup
    engine = build_engine()
    await engine.start()
    app.state.cart_engine = engine
    await _load_initial_catalog(engine)
    yield
    # Shutdown
    app.state.cart_engine = None
    await engine.stop()


app = FastAPI(
    title="SmartCart",
    description="Smart trolley storefront API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    engine = getattr(app.state, "cart_engine", None)
    return {
        "status": "ok",
        "service": "smartcart",
        "reconciled": bool(engine and engine.state.reconciled),
    }
