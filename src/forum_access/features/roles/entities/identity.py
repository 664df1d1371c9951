"""Resolved identity of a caller.

Every gate (privileges, content restriction, post queue, resolution) reads
this record instead of asking "is this an administrator?" on its own.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ....config.constants import Groups, Role


@dataclass(frozen=True)
class Identity:
    """Capabilities of a uid, optionally scoped to one category."""

    uid: int
    role: Role = Role.NONE
    is_admin: bool = False
    is_global_moderator: bool = False
    cid: Optional[int] = None
    is_moderator: bool = False
    reputation: int = 0
    groups: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_guest(self) -> bool:
        return self.uid <= 0

    @property
    def has_role(self) -> bool:
        return self.role != Role.NONE

    @property
    def is_admin_or_mod(self) -> bool:
        """Admin, global moderator, or moderator of the scoped category."""
        return self.is_admin or self.is_global_moderator or self.is_moderator

    @property
    def principals(self) -> FrozenSet[str]:
        """Names a privilege set can grant to: role, pseudo-groups, known groups."""
        names = set(self.groups)
        if self.is_guest:
            names.add(Groups.GUESTS)
        else:
            names.add(Groups.REGISTERED_USERS)
        if self.has_role:
            names.add(self.role.value)
        if self.is_admin:
            names.add(Groups.ADMINISTRATORS)
        if self.is_global_moderator:
            names.add(Groups.GLOBAL_MODERATORS)
        return frozenset(names)


GUEST = Identity(uid=0)
