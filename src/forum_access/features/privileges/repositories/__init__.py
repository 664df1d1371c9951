from .category_repository import CategoryRepository
from .privilege_repository import PrivilegeRepository

__all__ = ["CategoryRepository", "PrivilegeRepository"]
