"""
Supabase and Upstash Redis clients.

Clients are created on first use and then shared. Missing credentials
raise ValueError at that point rather than at import, so modules that
never touch a backend (tests, the file store) import cleanly.
"""

from typing import Optional

from supabase import Client, create_client
from upstash_redis import Redis
from upstash_redis.asyncio import Redis as AsyncRedis

from smartcart import config

_supabase_client: Optional[Client] = None
_redis_client: Optional[AsyncRedis] = None
_sync_redis_client: Optional[Redis] = None


def _redis_credentials() -> dict:
    if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
        raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
    return {"url": config.UPSTASH_REDIS_REST_URL, "token": config.UPSTASH_REDIS_REST_TOKEN}


def get_supabase_sync() -> Client:
    """
    Shared Supabase client (products, payments, payment_accounts).

    The client is synchronous; repositories run it via asyncio.to_thread.
    """
    global _supabase_client

    if _supabase_client is None:
        if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        _supabase_client = create_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY)

    return _supabase_client


def get_redis() -> AsyncRedis:
    """Async client for the trolley feed and cart snapshot writes."""
    global _redis_client

    if _redis_client is None:
        _redis_client = AsyncRedis(**_redis_credentials())

    return _redis_client


def get_redis_sync() -> Redis:
    """Sync client, only for loading the cart snapshot while the engine is constructed."""
    global _sync_redis_client

    if _sync_redis_client is None:
        _sync_redis_client = Redis(**_redis_credentials())

    return _sync_redis_client


class RedisKeys:
    CART = "cart:snapshot"
    TOTAL_PRICE = "totalPrice"  # reserved field in the trolley hash
    STREAM_PREFIX = "stream:"

    @staticmethod
    def feed_stream_key(namespace: str) -> str:
        """Change stream announcing writes to the `namespace` hash."""
        return f"{RedisKeys.STREAM_PREFIX}{namespace}"


class StreamLimits:
    MAX_LEN = 1000  # approximate trim on XADD
    MAX_EVENTS_PER_POLL = 100
