"""Admin API key validation."""
import hmac

from fastapi import Header, HTTPException

from smartcart.config import get_admin_api_key
from smartcart.errors import ERROR_ADMIN_KEY_NOT_CONFIGURED, ERROR_UNAUTHORIZED


async def verify_admin(x_admin_key: str = Header(None, alias="X-Admin-Key")) -> bool:
    """
    Verify the X-Admin-Key header against ADMIN_API_KEY.

    Use for product, payment and payment-account administration.
    """
    admin_key = get_admin_api_key()

    if not admin_key:
        raise HTTPException(status_code=500, detail=ERROR_ADMIN_KEY_NOT_CONFIGURED)

    if not x_admin_key or not hmac.compare_digest(x_admin_key, admin_key):
        raise HTTPException(status_code=401, detail=ERROR_UNAUTHORIZED)

    return True
