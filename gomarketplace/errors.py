"""
Cart Errors

Centralized error messages and exception types for the cart container.
"""

# Usage errors
ERROR_OUTSIDE_PROVIDER = "cart must be used within a CartProvider"
ERROR_STORE_CLOSED = "cart store is closed"
ERROR_PROVIDER_OPEN = "CartProvider is already open"

# Storage errors
ERROR_CORRUPTED_CART = "Corrupted cart data"
ERROR_INVALID_CART_ITEM = "Invalid cart item"
ERROR_REDIS_NOT_CONFIGURED = "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set"
ERROR_UNKNOWN_BACKEND = "Unknown cart storage backend"


class CartError(Exception):
    """Base class for cart errors."""


class CartUsageError(CartError):
    """The cart was accessed outside an initialized provider scope."""


class CartDecodeError(CartError):
    """A persisted cart blob could not be decoded."""


__all__ = [
    "CartDecodeError",
    "CartError",
    "CartUsageError",
    "ERROR_CORRUPTED_CART",
    "ERROR_INVALID_CART_ITEM",
    "ERROR_OUTSIDE_PROVIDER",
    "ERROR_PROVIDER_OPEN",
    "ERROR_REDIS_NOT_CONFIGURED",
    "ERROR_STORE_CLOSED",
    "ERROR_UNKNOWN_BACKEND",
]
