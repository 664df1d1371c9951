from .role_repository import RoleRepository
from .group_repository import GroupRepository, is_privilege_group, moderator_group

__all__ = ["RoleRepository", "GroupRepository", "is_privilege_group", "moderator_group"]
