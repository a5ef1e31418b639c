"""
Runtime configuration read from environment variables.

Every setting has a default suitable for local development, except the
Supabase and Upstash credentials which are validated when a client is first
requested (see smartcart.db).
"""
import os

# Supabase (catalog, payments, payment accounts)
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")

# Upstash Redis (trolley feed, optional cart store)
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# Cart persistence: "file" keeps the snapshot on local disk, "redis" in Upstash
CART_STORE_BACKEND = os.environ.get("CART_STORE_BACKEND", "file").lower()
CART_STORE_PATH = os.environ.get("CART_STORE_PATH", "data/cart.json")

# Trolley feed
TROLLEY_NAMESPACE = os.environ.get("TROLLEY_NAMESPACE", "smart_trolley")
FEED_POLL_INTERVAL = float(os.environ.get("FEED_POLL_INTERVAL", "1.0"))

# Checkout
MERCHANT_NAME = os.environ.get("MERCHANT_NAME", "Cartopia")
DEFAULT_UPI_ID = os.environ.get("DEFAULT_UPI_ID", "")
CURRENCY = os.environ.get("CURRENCY", "INR")


def get_admin_api_key() -> str:
    """Read lazily so tests and deployments can set it after import."""
    return os.environ.get("ADMIN_API_KEY", "")
