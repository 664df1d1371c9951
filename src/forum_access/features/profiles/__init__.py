"""Profiles feature: custom fields, profile updates and password changes."""

from .entities import FieldType, CustomFieldDefinition, IdentityProvider
from .repositories import CustomFieldRepository, UserRepository, UidMapping, SortedValueIndex
from .services import ProfileService, StoreIdentityProvider, validate_custom_fields, validate_field

__all__ = [
    "FieldType",
    "CustomFieldDefinition",
    "IdentityProvider",
    "CustomFieldRepository",
    "UserRepository",
    "UidMapping",
    "SortedValueIndex",
    "ProfileService",
    "StoreIdentityProvider",
    "validate_custom_fields",
    "validate_field",
]
