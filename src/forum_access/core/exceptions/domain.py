"""Domain exceptions: missing targets, conflicts, throttling and storage."""

from .base import ForumAccessError


class NotFoundError(ForumAccessError):
    """Base class for missing or invalid targets."""
    code = "not-found"


class InvalidUpdateTargetError(NotFoundError):
    code = "invalid-update-uid"


class InvalidUidError(NotFoundError):
    code = "invalid-uid"


class InvalidCategoryError(NotFoundError):
    code = "no-category"


class InvalidTopicError(NotFoundError):
    code = "no-topic"


class InvalidPostError(NotFoundError):
    code = "no-post"


class ConflictError(ForumAccessError):
    """Base class for uniqueness violations."""
    code = "conflict"


class UsernameTakenError(ConflictError):
    code = "username-taken"


class RateLimitError(ForumAccessError):
    """Base class for throttled actions."""
    code = "too-many-requests"


class TooManyPostsError(RateLimitError):
    """Params: ``(seconds,)``."""
    code = "too-many-posts"


class TooManyPostsNewbieError(RateLimitError):
    """Params: ``(seconds, reputation_threshold)``."""
    code = "too-many-posts-newbie"


class StorageError(ForumAccessError):
    """Raised when the backing store fails."""
    code = "storage-error"
