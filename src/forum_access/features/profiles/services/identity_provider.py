"""Default ``IdentityProvider`` backed by the key-value store.

Passwords are hashed with scrypt from ``cryptography`` and stored as
``scrypt$<n>$<salt>$<digest>`` (base64 parts) in the user hash. Sessions
are the members of ``uid:{uid}:sessions``.
"""

import asyncio
import base64
import logging
import os
from typing import Optional

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from ....config.constants import Keys
from ...roles.repositories.group_repository import GroupRepository

logger = logging.getLogger(__name__)

_SCHEME = "scrypt"
_SALT_BYTES = 16
_KEY_LENGTH = 32
_COST = 2 ** 14


def _kdf(salt: bytes, cost: int) -> Scrypt:
    return Scrypt(salt=salt, length=_KEY_LENGTH, n=cost, r=8, p=1)


def hash_password_sync(password: str, cost: int = _COST) -> str:
    salt = os.urandom(_SALT_BYTES)
    digest = _kdf(salt, cost).derive(password.encode("utf-8"))
    return "$".join((
        _SCHEME,
        str(cost),
        base64.b64encode(salt).decode("ascii"),
        base64.b64encode(digest).decode("ascii"),
    ))


def verify_password_sync(password: str, stored: str) -> bool:
    try:
        scheme, cost, salt, digest = stored.split("$")
    except ValueError:
        logger.warning("Stored password hash has an unknown format")
        return False
    if scheme != _SCHEME:
        return False
    try:
        _kdf(base64.b64decode(salt), int(cost)).verify(password.encode("utf-8"), base64.b64decode(digest))
    except InvalidKey:
        return False
    return True


class StoreIdentityProvider:
    """Password hashes in ``user:{uid}``, admin status from group membership."""

    def __init__(self, store, groups: GroupRepository, cost: int = _COST):
        self.store = store
        self.groups = groups
        self.cost = cost

    async def hash_password(self, password: str) -> str:
        return await asyncio.to_thread(hash_password_sync, password, self.cost)

    async def verify_password(self, uid: int, password: Optional[str]) -> bool:
        stored = await self.store.get_object_field(Keys.USER.format(uid=uid), "password")
        if not stored or not password:
            return False
        return await asyncio.to_thread(verify_password_sync, password, stored)

    async def has_password(self, uid: int) -> bool:
        return bool(await self.store.get_object_field(Keys.USER.format(uid=uid), "password"))

    async def is_administrator(self, uid: int) -> bool:
        return await self.groups.is_administrator(uid)

    async def revoke_sessions(self, uid: int) -> None:
        await self.store.delete(Keys.USER_SESSIONS.format(uid=uid))
        logger.info(f"Revoked all sessions of uid {uid}")
