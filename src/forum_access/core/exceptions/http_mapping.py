"""HTTP status code mapping for exceptions, used by the API layer."""

from .base import ForumAccessError
from .validation import ValidationError
from .auth import AuthenticationError, AuthorizationError
from .domain import NotFoundError, ConflictError, RateLimitError, StorageError


HTTP_STATUS_MAP = {
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    RateLimitError: 429,
    StorageError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get the HTTP status code for an exception.

    Walks the MRO so subclasses inherit their base kind's status.
    Unknown exceptions map to 500.
    """
    if not isinstance(exception, ForumAccessError):
        return 500
    for klass in type(exception).__mro__:
        if klass in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[klass]
    return 500
