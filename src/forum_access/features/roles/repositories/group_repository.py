"""Group membership.

Groups are sorted sets of uids. Besides named groups (``administrators``,
``Global Moderators``) the forum uses privilege groups named
``cid:{cid}:privileges:{privilege}``; membership in
``cid:{cid}:privileges:moderate`` makes a user a category moderator.
"""

import logging
import re
import time
from typing import Dict, List, Sequence

from ....config.constants import Groups, Keys, Privilege

logger = logging.getLogger(__name__)

_PRIVILEGE_GROUP = re.compile(r"^cid:-?\d+:privileges:[\w:-]+$")


def is_privilege_group(name: str) -> bool:
    return bool(_PRIVILEGE_GROUP.match(str(name)))


def moderator_group(cid: int) -> str:
    return f"cid:{cid}:privileges:{Privilege.MODERATE}"


class GroupRepository:
    """Reads and changes group membership."""

    def __init__(self, store):
        self.store = store

    @staticmethod
    def _key(group: str) -> str:
        return Keys.GROUP_MEMBERS.format(group=group)

    async def join(self, group: str, uid: int) -> None:
        await self.store.sorted_set_add(self._key(group), int(time.time() * 1000), uid)
        logger.info(f"uid {uid} joined group {group}")

    async def leave(self, group: str, uid: int) -> None:
        await self.store.sorted_set_remove(self._key(group), uid)

    async def is_member(self, uid: int, group: str) -> bool:
        if int(uid) <= 0:
            return group == Groups.GUESTS
        if group == Groups.REGISTERED_USERS:
            return True
        return await self.store.is_sorted_set_member(self._key(group), uid)

    async def is_member_of_any(self, uid: int, groups: Sequence[str]) -> bool:
        for group in groups:
            if await self.is_member(uid, group):
                return True
        return False

    async def memberships(self, uid: int, groups: Sequence[str]) -> Dict[str, bool]:
        return {group: await self.is_member(uid, group) for group in groups}

    async def get_members(self, group: str) -> List[int]:
        return [int(uid) for uid in await self.store.sorted_set_range(self._key(group))]

    async def is_administrator(self, uid: int) -> bool:
        return await self.is_member(uid, Groups.ADMINISTRATORS)

    async def is_global_moderator(self, uid: int) -> bool:
        return await self.is_member(uid, Groups.GLOBAL_MODERATORS)

    async def is_moderator(self, uid: int, cid: int) -> bool:
        return await self.is_member(uid, moderator_group(cid))

    async def add_moderator(self, cid: int, uid: int) -> None:
        await self.join(moderator_group(cid), uid)

    async def remove_moderator(self, cid: int, uid: int) -> None:
        await self.leave(moderator_group(cid), uid)
