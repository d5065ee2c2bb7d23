"""Error taxonomy shared by every storefront context.

Domain errors (NotFound, Unauthorized, EmptyCart, ...) are raised by the
services and rendered distinctly by the HTTP layer. Infrastructure failures
(PaymentServiceError, StoreUnavailable) are rendered as a generic server fault.
"""

from contextlib import contextmanager

import structlog
from pymongo.errors import PyMongoError

logger = structlog.get_logger(__name__)


class StorefrontError(Exception):
    """Base class for errors raised by storefront services."""

    def __init__(self, message: str, **context) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class NotFound(StorefrontError):
    """A referenced entity does not exist."""


class Unauthorized(StorefrontError):
    """The authenticated user may not access another user's entity."""


class NotAuthenticated(StorefrontError):
    """The request carries no valid session."""


class InvalidCredentials(StorefrontError):
    """Login failed: unknown email or wrong password."""


class EmptyCart(StorefrontError):
    """Checkout was requested for a cart without items."""


class PaymentServiceError(StorefrontError):
    """The payment provider rejected the call, failed, or timed out."""


class StoreUnavailable(StorefrontError):
    """The underlying storage failed."""


class DuplicateKey(StorefrontError):
    """A unique constraint in the store was violated."""


class ValidationFailed(StorefrontError):
    """Input was rejected; ``errors`` maps field names to messages."""

    def __init__(self, message: str, errors: dict[str, str] | None = None, **context) -> None:
        super().__init__(message, **context)
        self.errors = errors or {}


@contextmanager
def store_operation(operation: str, **context):
    """Translate storage driver failures into StoreUnavailable.

    Domain errors pass through untouched.
    """
    try:
        yield
    except StorefrontError:
        raise
    except PyMongoError as exc:
        logger.error("Storage operation failed", operation=operation, error=str(exc), **context)
        raise StoreUnavailable(f"Storage unavailable during {operation}", operation=operation, **context) from exc
