# core/errors.py
import functools
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from core.logger import get_logger

logger = get_logger(__name__)


class StorefrontError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message}


class BadRequest(StorefrontError):
    status_code = 400
    default_message = "Bad request"


class NotFound(StorefrontError):
    status_code = 404
    default_message = "Not found"


class InsufficientStock(StorefrontError):
    status_code = 400
    default_message = "Insufficient stock"


class Forbidden(StorefrontError):
    status_code = 403
    default_message = "Forbidden"


class CartConflict(StorefrontError):
    status_code = 409
    default_message = "Cart was modified by another request, reload and try again"


class InternalError(StorefrontError):
    status_code = 500
    default_message = "Server error"


class ValidationFailed(StorefrontError):
    """Field-level validation failure; carries one descriptor per bad field."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, Any]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


def storage_boundary(func):
    """Turn driver failures raised inside a service call into InternalError."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except PyMongoError as exc:
            logger.error(f"Storage failure in {func.__qualname__}: {exc}", exc_info=True)
            raise InternalError() from exc

    return wrapper
