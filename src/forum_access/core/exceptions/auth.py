"""Authentication and authorization exceptions."""

from .base import ForumAccessError


class AuthenticationError(ForumAccessError):
    """Base exception for identity problems."""
    code = "not-logged-in"


class WrongCurrentPasswordError(AuthenticationError):
    namespace = "user"
    code = "change-password-error-wrong-current"


class SamePasswordError(AuthenticationError):
    namespace = "user"
    code = "change-password-error-same-password"


class AuthorizationError(ForumAccessError):
    """Base exception for refused actions."""
    code = "no-privileges"


class NoPrivilegesError(AuthorizationError):
    """Raised when the caller lacks a privilege for an action or category."""
    code = "no-privileges"


class ChangePasswordPrivilegesError(AuthorizationError):
    namespace = "user"
    code = "change-password-error-privileges"
