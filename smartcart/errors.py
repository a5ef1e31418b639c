"""User-facing error messages returned in HTTPException details."""

# Admin auth
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_ADMIN_KEY_NOT_CONFIGURED = "ADMIN_API_KEY not configured"

# Catalog
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_CATALOG_UNAVAILABLE = "Products could not be loaded. Try again later."

# Cart / checkout
ERROR_CART_EMPTY = "Cart is empty"
ERROR_NO_PAYMENT_ACCOUNT = "No UPI payment account configured"

# Payments
ERROR_PAYMENT_NOT_FOUND = "Payment not found"
ERROR_PAYMENT_ACCOUNT_NOT_FOUND = "Payment account not found"
