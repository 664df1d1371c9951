"""User records and their lookup indexes."""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

from ....config.constants import Keys
from ....core.exceptions import InvalidUidError, UsernameTakenError
from ....utils.text import slugify
from .value_index import SortedValueIndex, UidMapping

logger = logging.getLogger(__name__)


class UserRepository:
    """Reads and writes ``user:{uid}`` and the username/email/fullname indexes."""

    def __init__(self, store):
        self.store = store
        self.usernames = UidMapping(store, Keys.USERNAME_UID)
        self.userslugs = UidMapping(store, Keys.USERSLUG_UID)
        self.emails = UidMapping(store, Keys.EMAIL_UID)
        self.fullnames = UidMapping(store, Keys.FULLNAME_UID)
        self.username_search = SortedValueIndex(store, Keys.USERNAME_SORTED)
        self.fullname_search = SortedValueIndex(store, Keys.FULLNAME_SORTED)

    async def create(
        self,
        username: str,
        email: Optional[str] = None,
        fullname: Optional[str] = None,
        reputation: int = 0,
        password: Optional[str] = None,
    ) -> int:
        """Create a user and index it; ``password`` must already be hashed.

        Returns:
            The new uid

        Raises:
            UsernameTakenError: The username's slug is in use
        """
        userslug = slugify(username)
        if await self.exists_by_slug(userslug):
            raise UsernameTakenError()

        uid = await self.store.increment(Keys.NEXT_UID)
        now = int(time.time() * 1000)
        await self.store.set_object(Keys.USER.format(uid=uid), {
            "uid": uid,
            "username": username,
            "userslug": userslug,
            "email": email,
            "fullname": fullname,
            "reputation": reputation,
            "password": password,
            "joindate": now,
            "postcount": 0,
        })
        await self.usernames.upsert(None, username, uid)
        await self.userslugs.upsert(None, userslug, uid)
        await self.username_search.upsert(None, username, uid)
        if email:
            await self.emails.upsert(None, email.lower(), uid)
        if fullname:
            await self.fullnames.upsert(None, fullname, uid)
            await self.fullname_search.upsert(None, fullname, uid)
        logger.info(f"Created user {uid} ({username})")
        return uid

    async def exists(self, uid: int) -> bool:
        return uid > 0 and await self.store.exists(Keys.USER.format(uid=uid))

    async def get_or_raise(self, uid: int) -> Dict[str, str]:
        data = await self.store.get_object(Keys.USER.format(uid=uid)) if uid > 0 else None
        if not data:
            raise InvalidUidError(details={"uid": uid})
        return data

    async def get_fields(self, uid: int, fields: Sequence[str]) -> Dict[str, Optional[str]]:
        return await self.store.get_object_fields(Keys.USER.format(uid=uid), list(fields))

    async def get_field(self, uid: int, field: str) -> Optional[str]:
        return await self.store.get_object_field(Keys.USER.format(uid=uid), field)

    async def set_fields(self, uid: int, data: Dict[str, Any]) -> None:
        await self.store.set_object(Keys.USER.format(uid=uid), data)

    async def set_field(self, uid: int, field: str, value: Any) -> None:
        await self.store.set_object_field(Keys.USER.format(uid=uid), field, value)

    async def get_reputation(self, uid: int) -> int:
        try:
            return int(float(await self.get_field(uid, "reputation") or 0))
        except ValueError:
            return 0

    async def exists_by_slug(self, userslug: str) -> bool:
        return await self.userslugs.exists(userslug)

    async def get_uid_by_slug(self, userslug: str) -> Optional[int]:
        return await self.userslugs.get_uid(userslug)

    async def get_uid_by_username(self, username: str) -> Optional[int]:
        return await self.usernames.get_uid(username)

    async def add_username_history(self, uid: int, username: str, caller_uid: int, timestamp: int) -> None:
        await self.store.sorted_set_add(
            Keys.USER_USERNAMES.format(uid=uid), timestamp, f"{username}:{timestamp}:{caller_uid}"
        )

    async def get_username_history(self, uid: int) -> List[Dict[str, Any]]:
        """Previous usernames, oldest first, as ``{username, timestamp, byUid}``."""
        entries = await self.store.sorted_set_range(Keys.USER_USERNAMES.format(uid=uid), 0, -1)
        history = []
        for entry in entries:
            # usernames may contain ':', so split from the right
            username, timestamp, caller = entry.rsplit(":", 2)
            history.append({"username": username, "timestamp": int(timestamp), "byUid": int(caller)})
        return history
