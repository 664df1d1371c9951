"""Roles feature: role store, group membership and identity resolution."""

from .entities import Identity, GUEST
from .repositories import RoleRepository, GroupRepository, is_privilege_group, moderator_group
from .services import IdentityResolver

__all__ = [
    "Identity",
    "GUEST",
    "RoleRepository",
    "GroupRepository",
    "IdentityResolver",
    "is_privilege_group",
    "moderator_group",
]
