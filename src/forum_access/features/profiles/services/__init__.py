from .field_validator import validate_custom_fields, validate_field, TYPE_CHECKS
from .identity_provider import StoreIdentityProvider
from .profile_service import ProfileService

__all__ = [
    "validate_custom_fields",
    "validate_field",
    "TYPE_CHECKS",
    "StoreIdentityProvider",
    "ProfileService",
]
