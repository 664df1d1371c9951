from .custom_field_repository import CustomFieldRepository
from .user_repository import UserRepository
from .value_index import UidMapping, SortedValueIndex

__all__ = ["CustomFieldRepository", "UserRepository", "UidMapping", "SortedValueIndex"]
