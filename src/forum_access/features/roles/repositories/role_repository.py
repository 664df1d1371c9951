"""Role store: one role per user.

The role lives on the user hash (``role`` field) and the uid is also kept in
``role:{role}:uids`` so members of a role can be listed. No cross-checks
against reputation or groups happen here.
"""

import logging
import time
from typing import Dict, List, Sequence, Union

from ....config.constants import Keys, Role
from ....core.exceptions import InvalidRoleError, InvalidUidError
from ....storage import KeyValueStore

logger = logging.getLogger(__name__)


class RoleRepository:
    """Assigns and reads user roles."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def parse_role(value: Union[str, Role, None]) -> Role:
        try:
            return Role.parse(value)
        except ValueError:
            raise InvalidRoleError(value)

    async def assign_role(self, uid: int, role: Union[str, Role]) -> Role:
        """Assign ``role`` to ``uid``; assigning the current role again is a no-op."""
        if int(uid) <= 0:
            raise InvalidUidError()
        new_role = self.parse_role(role)
        current = await self.get_role(uid)

        if current != Role.NONE and current != new_role:
            await self.store.sorted_set_remove(Keys.ROLE_UIDS.format(role=current.value), uid)

        if new_role == Role.NONE:
            await self.store.delete_object_field(Keys.USER.format(uid=uid), "role")
        else:
            await self.store.set_object_field(Keys.USER.format(uid=uid), "role", new_role.value)
            if current != new_role:
                await self.store.sorted_set_add(
                    Keys.ROLE_UIDS.format(role=new_role.value), int(time.time() * 1000), uid
                )

        if current != new_role:
            logger.info(f"Role of uid {uid} changed: {current.value} -> {new_role.value}")
        return new_role

    async def remove_role(self, uid: int) -> None:
        await self.assign_role(uid, Role.NONE)

    async def get_role(self, uid: int) -> Role:
        if int(uid) <= 0:
            return Role.NONE
        value = await self.store.get_object_field(Keys.USER.format(uid=uid), "role")
        try:
            return Role.parse(value)
        except ValueError:
            logger.warning(f"Ignoring unknown role {value!r} stored for uid {uid}")
            return Role.NONE

    async def get_roles(self, uids: Sequence[int]) -> Dict[int, Role]:
        return {int(uid): await self.get_role(uid) for uid in uids}

    async def get_uids_with_role(self, role: Union[str, Role]) -> List[int]:
        parsed = self.parse_role(role)
        if parsed == Role.NONE:
            return []
        members = await self.store.sorted_set_range(Keys.ROLE_UIDS.format(role=parsed.value))
        return [int(uid) for uid in members]
