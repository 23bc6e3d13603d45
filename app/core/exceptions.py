from typing import Any, Optional


class MarketplaceError(Exception):
    """
    Base exception for the marketplace API.
    Every subclass maps to a fixed HTTP status and renders as {error: true, message}.
    """
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Any] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class InvalidTokenError(MarketplaceError):
    """Missing, malformed or badly signed token. Always 403, never 401."""
    status_code = 403

    def __init__(self, message: str = "Auth-z failed. Invalid Token"):
        super().__init__(message)


class WrongRoleError(MarketplaceError):
    status_code = 403

    def __init__(self, role: str):
        super().__init__(f"Unauthorized action attempted. '{role}' role required")
        self.role = role


class OwnershipError(MarketplaceError):
    status_code = 403

    def __init__(self, message: str = "You can only modify your own products"):
        super().__init__(message)


class ResourceNotFoundError(MarketplaceError):
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ValidationError(MarketplaceError):
    status_code = 422

    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, details=details)


class StoreError(MarketplaceError):
    """
    A store operation failed. The message is fixed per endpoint; multi-step
    operations put the failed and completed steps in details.
    """
    status_code = 501


class PaymentProviderError(MarketplaceError):
    status_code = 502

    def __init__(self, message: str = "Payment provider request failed", details: Optional[Any] = None):
        super().__init__(message, details=details)
