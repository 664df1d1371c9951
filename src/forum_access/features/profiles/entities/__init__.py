from .custom_field import FieldType, CustomFieldDefinition
from .protocols import IdentityProvider

__all__ = ["FieldType", "CustomFieldDefinition", "IdentityProvider"]
