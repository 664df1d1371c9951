"""Capability resolution.

Turns a uid into an ``Identity`` in one place: assigned role, administrator
and global-moderator status, category moderation and reputation. Gates
consume the record uniformly instead of repeating administrator checks.
"""

import asyncio
import logging
from typing import Dict, Iterable, Optional, Sequence

from ....config.constants import Keys
from ..entities.identity import GUEST, Identity
from ..repositories.group_repository import GroupRepository
from ..repositories.role_repository import RoleRepository

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolves uids to identities."""

    def __init__(self, store, role_repository: RoleRepository, group_repository: GroupRepository):
        self.store = store
        self.roles = role_repository
        self.groups = group_repository

    async def resolve(
        self,
        uid: Optional[int],
        cid: Optional[int] = None,
        groups: Iterable[str] = (),
    ) -> Identity:
        """Resolve ``uid``, optionally scoped to category ``cid``.

        Args:
            uid: User id; ``None`` or ``<= 0`` is a guest
            cid: Category whose moderator status should be resolved
            groups: Extra group names whose membership should be recorded

        Returns:
            The caller's identity
        """
        uid = int(uid or 0)
        if uid <= 0:
            if cid is None:
                return GUEST
            return Identity(uid=0, cid=int(cid))

        wanted = tuple(groups)
        role, is_admin, is_global_mod, is_mod, reputation, memberships = await asyncio.gather(
            self.roles.get_role(uid),
            self.groups.is_administrator(uid),
            self.groups.is_global_moderator(uid),
            self.groups.is_moderator(uid, cid) if cid is not None else _false(),
            self.get_reputation(uid),
            self.groups.memberships(uid, wanted),
        )

        return Identity(
            uid=uid,
            role=role,
            is_admin=is_admin,
            is_global_moderator=is_global_mod,
            cid=int(cid) if cid is not None else None,
            is_moderator=is_mod,
            reputation=reputation,
            groups=frozenset(name for name, member in memberships.items() if member),
        )

    async def resolve_many(self, uids: Sequence[int], cid: Optional[int] = None) -> Dict[int, Identity]:
        identities = await asyncio.gather(*(self.resolve(uid, cid) for uid in uids))
        return {identity.uid: identity for identity in identities}

    async def get_reputation(self, uid: int) -> int:
        value = await self.store.get_object_field(Keys.USER.format(uid=uid), "reputation")
        try:
            return int(float(value or 0))
        except ValueError:
            logger.warning(f"Non-numeric reputation {value!r} for uid {uid}")
            return 0


async def _false() -> bool:
    return False
