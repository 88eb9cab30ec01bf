"""Domain exceptions for the market service."""


class MarketError(Exception):
    """Base exception for all market errors."""

    def __init__(self, message: str, details: list[str] | None = None):
        self.message = message
        self.details = details or []
        super().__init__(message)


class NotFound(MarketError):
    """Raised when a product, cart, cart line or order doesn't exist."""

    pass


class InvalidArgument(MarketError):
    """Raised for malformed quantities, statuses or addresses."""

    pass


class OutOfStock(MarketError):
    """Raised when a product can't be added to a cart in the requested quantity."""

    def __init__(self, product_id: int, title: str | None = None):
        self.product_id = product_id
        name = title or f"Product {product_id}"
        super().__init__(f"{name} is not available in requested quantity")


class InsufficientStock(MarketError):
    """Raised at checkout when a cart line can no longer be fulfilled."""

    def __init__(self, product_id: int, title: str | None = None):
        self.product_id = product_id
        self.title = title
        name = title or f"Product {product_id}"
        super().__init__(f"{name} is not available in requested quantity")


class EmptyCart(MarketError):
    """Raised when checking out a missing or empty cart."""

    def __init__(self):
        super().__init__("Cart is empty")


class Unauthorized(MarketError):
    """Raised when the request carries no identity claim."""

    def __init__(self, message: str = "Access token required"):
        super().__init__(message)


class Forbidden(MarketError):
    """Raised when the caller may not access or modify a resource."""

    pass


class ConcurrentModification(MarketError):
    """Raised when a cart was modified by another request in the meantime."""

    def __init__(self, cart_id: int):
        self.cart_id = cart_id
        super().__init__(f"Cart {cart_id} was modified by another operation")


class InternalFailure(MarketError):
    """Raised when the store is unavailable or fails unexpectedly."""

    pass


class TrackingNumberConflict(InternalFailure):
    """Raised when a generated tracking number is already taken."""

    def __init__(self, tracking_number: str):
        self.tracking_number = tracking_number
        super().__init__(f"Tracking number collision: {tracking_number}")
