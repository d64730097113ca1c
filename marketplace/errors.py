"""
Error constants and exception types.

Messages are centralized to avoid string duplication across modules.
"""

# Access errors
ERROR_CART_SCOPE = "use_cart must be used within a cart_scope"

# Data errors
ERROR_MALFORMED_CART = "Persisted cart data is malformed"
ERROR_INVALID_PRODUCT = "Invalid product"

# Storage errors
ERROR_STORAGE_UNAVAILABLE = "Cart storage unavailable"


class MarketplaceError(Exception):
    """Base class for all cart errors."""


class CartScopeError(MarketplaceError, RuntimeError):
    """The cart accessor was used without a live CartStore bound."""

    def __init__(self, message: str = ERROR_CART_SCOPE):
        super().__init__(message)


class MalformedCartData(MarketplaceError, ValueError):
    """Persisted cart value could not be turned into line items."""

    def __init__(self, detail: str):
        super().__init__(f"{ERROR_MALFORMED_CART}: {detail}")
        self.detail = detail


class StorageError(MarketplaceError):
    """The durable key-value backend failed."""

    def __init__(self, operation: str, key: str, cause: Exception | None = None):
        super().__init__(f"{ERROR_STORAGE_UNAVAILABLE}: {operation} {key!r} failed: {cause}")
        self.operation = operation
        self.key = key
        self.cause = cause
