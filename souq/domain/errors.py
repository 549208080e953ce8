# souq/domain/errors.py
"""
Domain errors raised by services and translated to HTTP statuses by the routers.
They subclass the builtins the routers already catch (ValueError, PermissionError).
"""


class NotFoundError(ValueError):
    """Cart, order, product or variant does not exist (404)."""


class ValidationError(ValueError):
    """Malformed input such as an incomplete shipping address or unknown SKU (400)."""


class InvalidStateError(ValueError):
    """Operation not allowed in the current lifecycle state (400)."""


class UnauthorizedError(PermissionError):
    """No authenticated user (401)."""


class ForbiddenError(PermissionError):
    """Authenticated, but role or ownership does not match (403)."""
