"""Field-level validation errors."""

from .base import ForumAccessError


class ValidationError(ForumAccessError):
    """Base class for rejected input."""
    code = "invalid-data"


class InsufficientReputationError(ValidationError):
    """Raised when the caller lacks the reputation a custom field requires.

    Params: ``(min_rep, field_name)``.
    """
    code = "not-enough-reputation-custom-field"


class ValueTooLongError(ValidationError):
    """Raised when a custom field value exceeds the length limit. Params: ``(field_name,)``."""
    code = "custom-user-field-value-too-long"


class InvalidNumberError(ValidationError):
    code = "custom-user-field-invalid-number"


class InvalidTextError(ValidationError):
    code = "custom-user-field-invalid-text"


class InvalidDateError(ValidationError):
    code = "custom-user-field-invalid-date"


class InvalidLinkError(ValidationError):
    code = "custom-user-field-invalid-link"


class InvalidSelectValueError(ValidationError):
    code = "custom-user-field-select-value-invalid"


class InvalidEmailError(ValidationError):
    code = "invalid-email"


class InvalidUsernameError(ValidationError):
    code = "invalid-username"


class UsernameTooShortError(ValidationError):
    code = "username-too-short"


class UsernameTooLongError(ValidationError):
    code = "username-too-long"


class AboutMeTooLongError(ValidationError):
    """Params: ``(max_length,)``."""
    code = "about-me-too-long"


class SignatureTooLongError(ValidationError):
    """Params: ``(max_length,)``."""
    code = "signature-too-long"


class ReputationRequiredError(ValidationError):
    """Raised by ``check_min_reputation``; the code embeds the setting name.

    Params: ``(required_reputation,)``.
    """
    code = "not-enough-reputation"

    def __init__(self, setting: str, required: int):
        super().__init__(required, error_code=f"not-enough-reputation-{setting.replace(':', '-')}")
        self.setting = setting


class InvalidFullnameError(ValidationError):
    code = "invalid-fullname"


class InvalidBirthdayError(ValidationError):
    code = "invalid-birthday"


class InvalidGroupTitleError(ValidationError):
    code = "invalid-group-title"


class InvalidPasswordError(ValidationError):
    code = "invalid-password"


class PasswordTooShortError(ValidationError):
    code = "password-too-short"


class PasswordTooLongError(ValidationError):
    code = "password-too-long"


class InvalidRoleError(ValidationError):
    """Params: ``(role,)``."""
    code = "invalid-role"


class InvalidFieldDefinitionError(ValidationError):
    """Params: ``(key,)``."""
    code = "invalid-custom-user-field"


class InvalidTitleError(ValidationError):
    code = "invalid-title"


class ContentTooShortError(ValidationError):
    code = "content-too-short"
