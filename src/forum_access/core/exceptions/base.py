"""Base exceptions for forum-access.

Every error carries a stable machine-readable code plus the parameters a
presentation layer interpolates when rendering it. ``translation_key``
renders both in the forum's ``[[error:code, p1, p2]]`` form.
"""

from typing import Any, Dict, Optional, Sequence


class ForumAccessError(Exception):
    """Base exception for all forum-access errors."""

    code: str = "internal-error"
    namespace: str = "error"

    def __init__(
        self,
        *params: Any,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code or self.code
        self.params: Sequence[Any] = tuple(params)
        self.details = details or {}
        self.message = message or self.translation_key
        super().__init__(self.message)

    @property
    def translation_key(self) -> str:
        """Render as ``[[namespace:code, p1, p2]]``."""
        key = f"{self.namespace}:{self.error_code}"
        if self.params:
            key += ", " + ", ".join(str(p) for p in self.params)
        return f"[[{key}]]"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error_code,
            "params": list(self.params),
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__,
        }


def create_error_response(exception: ForumAccessError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The forum-access exception

    Returns:
        Error response dictionary
    """
    return {"error": exception.to_dict()}
