"""Exception hierarchy for forum-access."""

from .base import ForumAccessError, create_error_response
from .validation import (
    ValidationError,
    InsufficientReputationError,
    ValueTooLongError,
    InvalidNumberError,
    InvalidTextError,
    InvalidDateError,
    InvalidLinkError,
    InvalidSelectValueError,
    InvalidEmailError,
    InvalidUsernameError,
    UsernameTooShortError,
    UsernameTooLongError,
    AboutMeTooLongError,
    SignatureTooLongError,
    ReputationRequiredError,
    InvalidFullnameError,
    InvalidBirthdayError,
    InvalidGroupTitleError,
    InvalidPasswordError,
    PasswordTooShortError,
    PasswordTooLongError,
    InvalidRoleError,
    InvalidFieldDefinitionError,
    InvalidTitleError,
    ContentTooShortError,
)
from .auth import (
    AuthenticationError,
    WrongCurrentPasswordError,
    SamePasswordError,
    AuthorizationError,
    NoPrivilegesError,
    ChangePasswordPrivilegesError,
)
from .domain import (
    NotFoundError,
    InvalidUpdateTargetError,
    InvalidUidError,
    InvalidCategoryError,
    InvalidTopicError,
    InvalidPostError,
    ConflictError,
    UsernameTakenError,
    RateLimitError,
    TooManyPostsError,
    TooManyPostsNewbieError,
    StorageError,
)
from .http_mapping import get_http_status_code, HTTP_STATUS_MAP

__all__ = [
    "ForumAccessError",
    "create_error_response",
    "get_http_status_code",
    "HTTP_STATUS_MAP",
    # Validation
    "ValidationError",
    "InsufficientReputationError",
    "ValueTooLongError",
    "InvalidNumberError",
    "InvalidTextError",
    "InvalidDateError",
    "InvalidLinkError",
    "InvalidSelectValueError",
    "InvalidEmailError",
    "InvalidUsernameError",
    "UsernameTooShortError",
    "UsernameTooLongError",
    "AboutMeTooLongError",
    "SignatureTooLongError",
    "ReputationRequiredError",
    "InvalidFullnameError",
    "InvalidBirthdayError",
    "InvalidGroupTitleError",
    "InvalidPasswordError",
    "PasswordTooShortError",
    "PasswordTooLongError",
    "InvalidRoleError",
    "InvalidFieldDefinitionError",
    "InvalidTitleError",
    "ContentTooShortError",
    # Auth
    "AuthenticationError",
    "WrongCurrentPasswordError",
    "SamePasswordError",
    "AuthorizationError",
    "NoPrivilegesError",
    "ChangePasswordPrivilegesError",
    # Domain
    "NotFoundError",
    "InvalidUpdateTargetError",
    "InvalidUidError",
    "InvalidCategoryError",
    "InvalidTopicError",
    "InvalidPostError",
    "ConflictError",
    "UsernameTakenError",
    "RateLimitError",
    "TooManyPostsError",
    "TooManyPostsNewbieError",
    "StorageError",
]
