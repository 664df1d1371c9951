"""Profile updates, username checks and password changes.

``update_profile`` validates every submitted field before writing any of
them. Email, username and fullname each maintain lookup indexes and are
written by their own routines; every other string field goes out in a
single hash write.
"""

import asyncio
import json
import logging
import time
import uuid
from typing import Any, Dict, List, Optional, Sequence

from ....config.constants import Groups
from ....config.settings import ForumSettings
from ....core.exceptions import (
    AboutMeTooLongError,
    ChangePasswordPrivilegesError,
    InvalidBirthdayError,
    InvalidEmailError,
    InvalidFullnameError,
    InvalidGroupTitleError,
    InvalidPasswordError,
    InvalidUidError,
    InvalidUpdateTargetError,
    InvalidUsernameError,
    NoPrivilegesError,
    PasswordTooLongError,
    PasswordTooShortError,
    ReputationRequiredError,
    SamePasswordError,
    SignatureTooLongError,
    UsernameTakenError,
    UsernameTooLongError,
    UsernameTooShortError,
    ValidationError,
    WrongCurrentPasswordError,
)
from ....core.hooks import HookRegistry
from ....utils.text import is_email_valid, is_url, is_username_valid, parse_birthday, slugify, utf16_length
from ...roles.repositories.group_repository import is_privilege_group
from ..entities.protocols import IdentityProvider
from ..repositories.custom_field_repository import CustomFieldRepository
from ..repositories.user_repository import UserRepository
from .field_validator import validate_custom_fields

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("username", "email", "fullname", "groupTitle", "birthday", "signature", "aboutme")

# Fields returned to the caller after an update.
SUMMARY_FIELDS = ("email", "username", "userslug", "picture")

# Reputation settings consulted by ``check_min_reputation``.
REPUTATION_SETTINGS = {
    "min:rep:aboutme": "min_rep_aboutme",
    "min:rep:signature": "min_rep_signature",
}


def _uid(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class ProfileService:
    """Validates and applies user profile changes."""

    def __init__(
        self,
        settings: ForumSettings,
        users: UserRepository,
        custom_fields: CustomFieldRepository,
        hooks: HookRegistry,
        identity_provider: IdentityProvider,
    ):
        self.settings = settings
        self.users = users
        self.custom_fields = custom_fields
        self.hooks = hooks
        self.identity_provider = identity_provider

    async def update_profile(
        self,
        caller_uid: int,
        data: Dict[str, Any],
        extra_fields: Optional[Sequence[str]] = None,
    ) -> Dict[str, Optional[str]]:
        """Validate and store a profile update.

        Args:
            caller_uid: User performing the update
            data: Submitted values; ``data["uid"]`` is the user being updated
            extra_fields: Additional user fields allowed through

        Returns:
            ``email``, ``username``, ``userslug`` and ``picture`` after the update

        Raises:
            InvalidUpdateTargetError: ``data`` has no ``uid``
            ValidationError: A submitted value was rejected; nothing is written
        """
        fields = await self._get_fields(extra_fields)
        if not data.get("uid"):
            raise InvalidUpdateTargetError()
        data = dict(data)
        update_uid = _uid(data["uid"])

        result = await self.hooks.fire_filter("filter:user.updateProfile", {
            "uid": caller_uid,
            "data": data,
            "fields": fields,
        })
        fields = list(result["fields"])
        data = result["data"]

        await self._validate(caller_uid, data)

        old_data = await self.users.get_fields(update_uid, fields)
        update_data: Dict[str, str] = {}
        routines = []
        for field in fields:
            value = data.get(field)
            if not isinstance(value, str):
                continue
            data[field] = value = value.strip()
            if field == "email":
                routines.append(self._update_email(update_uid, value))
            elif field == "username":
                routines.append(self._update_username(update_uid, value, caller_uid))
            elif field == "fullname":
                routines.append(self._update_fullname(update_uid, value))
            else:
                update_data[field] = value

        await asyncio.gather(*routines)
        if update_data:
            await self.users.set_fields(update_uid, update_data)

        await self.hooks.fire_action("action:user.updateProfile", {
            "uid": caller_uid,
            "data": data,
            "fields": fields,
            "old_data": old_data,
        })
        logger.info(f"uid {caller_uid} updated profile of uid {update_uid}")
        return await self.users.get_fields(update_uid, SUMMARY_FIELDS)

    async def _get_fields(self, extra_fields: Optional[Sequence[str]]) -> List[str]:
        fields = list(PROFILE_FIELDS) + await self.custom_fields.get_keys()
        if extra_fields:
            fields.extend(extra_fields)
        return list(dict.fromkeys(fields))

    # Validation

    async def _validate(self, caller_uid: int, data: Dict[str, Any]) -> None:
        self._check_email(data)
        await self._check_username_available(data, _uid(data.get("uid")))
        await self._check_about_me(caller_uid, data)
        await self._check_signature(caller_uid, data)
        self._check_fullname(data)
        self._check_birthday(data)
        self._check_group_title(data)
        await self._check_custom_fields(data)

    def _check_email(self, data: Dict[str, Any]) -> None:
        if not data.get("email"):
            return
        data["email"] = str(data["email"]).strip()
        if not is_email_valid(data["email"]):
            raise InvalidEmailError()

    async def check_username(self, username: str) -> None:
        """Raise when ``username`` may not be taken by a new account."""
        await self._check_username_available({"username": username}, None)

    async def _check_username_available(self, data: Dict[str, Any], uid: Optional[int]) -> None:
        if not data.get("username"):
            return
        username = data["username"] = str(data["username"]).strip()

        current: Dict[str, Optional[str]] = {}
        if uid:
            current = await self.users.get_fields(uid, ["username", "userslug"])
            if current.get("username") == username:
                return

        if len(username) < self.settings.minimum_username_length:
            raise UsernameTooShortError()
        if len(username) > self.settings.maximum_username_length:
            raise UsernameTooLongError()

        userslug = slugify(username)
        if not is_username_valid(username) or not userslug:
            raise InvalidUsernameError()
        if uid and userslug == current.get("userslug"):
            return
        if await self.users.exists_by_slug(userslug):
            raise UsernameTakenError()

        result = await self.hooks.fire_filter("filter:username.check", {"username": username, "error": None})
        error = result.get("error")
        if isinstance(error, Exception):
            raise error
        if error:
            raise ValidationError(message=str(error))

    async def _check_about_me(self, caller_uid: int, data: Dict[str, Any]) -> None:
        if not data.get("aboutme"):
            return
        limit = self.settings.maximum_about_me_length
        if utf16_length(str(data["aboutme"])) > limit:
            raise AboutMeTooLongError(limit)
        await self.check_min_reputation(caller_uid, data.get("uid"), "min:rep:aboutme")

    async def _check_signature(self, caller_uid: int, data: Dict[str, Any]) -> None:
        if not data.get("signature"):
            return
        signature = str(data["signature"]).replace("\r\n", "\n")
        limit = self.settings.maximum_signature_length
        if utf16_length(signature) > limit:
            raise SignatureTooLongError(limit)
        await self.check_min_reputation(caller_uid, data.get("uid"), "min:rep:signature")

    def _check_fullname(self, data: Dict[str, Any]) -> None:
        fullname = data.get("fullname")
        if not fullname:
            return
        if is_url(str(fullname)) or utf16_length(str(fullname)) > self.settings.maximum_fullname_length:
            raise InvalidFullnameError()

    def _check_birthday(self, data: Dict[str, Any]) -> None:
        birthday = data.get("birthday")
        if birthday and parse_birthday(str(birthday)) is None:
            raise InvalidBirthdayError()

    def _check_group_title(self, data: Dict[str, Any]) -> None:
        """Reject pseudo and privilege groups as badges; keep one badge unless multiple are allowed."""
        raw = data.get("groupTitle")
        if not raw:
            return

        titles = [raw]
        if isinstance(raw, str) and raw.strip()[:1] in ("[", "{"):
            try:
                decoded = json.loads(raw)
            except ValueError:
                decoded = None
            if isinstance(decoded, dict):
                raise InvalidGroupTitleError()
            if isinstance(decoded, list):
                titles = decoded

        for title in titles:
            if title == Groups.REGISTERED_USERS or is_privilege_group(title):
                raise InvalidGroupTitleError()

        if not self.settings.allow_multiple_badges and len(titles) > 1:
            data["groupTitle"] = json.dumps(titles[0])

    async def _check_custom_fields(self, data: Dict[str, Any]) -> None:
        definitions = await self.custom_fields.get_fields()
        if not definitions:
            return
        reputation = await self.users.get_reputation(_uid(data.get("uid")))
        validate_custom_fields(
            definitions,
            data,
            reputation,
            self.settings.reputation_disabled,
            self.settings.custom_field_max_length,
        )

    async def check_min_reputation(self, caller_uid: Any, uid: Any, setting: str) -> None:
        """Enforce a ``min:rep:*`` setting when users edit their own profile.

        Raises:
            ReputationRequiredError: Reputation below the configured minimum
        """
        if _uid(caller_uid) != _uid(uid) or self.settings.reputation_disabled:
            return
        required = getattr(self.settings, REPUTATION_SETTINGS[setting])
        reputation = await self.users.get_reputation(_uid(uid))
        if reputation < required:
            raise ReputationRequiredError(setting, required)

    # Mutation

    async def _update_email(self, uid: int, email: str) -> None:
        old_email = await self.users.get_field(uid, "email") or ""
        if old_email == email:
            return
        pending = await self.users.get_field(uid, "email:pending")
        if pending == email:
            return

        await self.users.emails.upsert(old_email.lower() or None, email.lower() or None, uid)
        await self.users.set_fields(uid, {"email": email, "email:pending": email, "email:confirmed": 0})
        await self.hooks.fire_action("action:user.emailChange", {
            "uid": uid,
            "email": email,
            "oldEmail": old_email,
        })

    async def _update_username(self, uid: int, username: str, caller_uid: int) -> None:
        if not username:
            return
        current = await self.users.get_fields(uid, ["username", "userslug"])
        old_username = current.get("username")
        if old_username == username:
            return

        userslug = slugify(username)
        now = int(time.time() * 1000)
        await asyncio.gather(
            self.users.usernames.upsert(old_username, username, uid),
            self.users.userslugs.upsert(current.get("userslug"), userslug, uid),
            self.users.set_fields(uid, {"username": username, "userslug": userslug}),
            self.users.add_username_history(uid, username, caller_uid, now),
        )
        await self.users.username_search.upsert(old_username, username, uid)

    async def _update_fullname(self, uid: int, fullname: str) -> None:
        old_fullname = await self.users.get_field(uid, "fullname")
        if old_fullname == fullname:
            return
        await self.users.fullnames.upsert(old_fullname, fullname, uid)
        await self.users.set_field(uid, "fullname", fullname)
        await self.users.fullname_search.upsert(old_fullname, fullname, uid)

    # Passwords

    def check_password(self, password: Optional[str]) -> None:
        if not password or not isinstance(password, str):
            raise InvalidPasswordError()
        if len(password) < self.settings.min_password_length:
            raise PasswordTooShortError()
        if len(password) > self.settings.max_password_length:
            raise PasswordTooLongError()

    async def change_password(self, caller_uid: int, data: Dict[str, Any]) -> None:
        """Change the password of ``data["uid"]``.

        Args:
            caller_uid: Acting user; must be the target or an administrator
            data: ``uid``, ``newPassword`` and, for self-service, ``currentPassword``

        Raises:
            InvalidUidError: Guest caller or no target
            NoPrivilegesError: Password edits are disabled for non-admins
            ChangePasswordPrivilegesError: Caller is neither the target nor an admin
            WrongCurrentPasswordError / SamePasswordError: Self-service checks failed
        """
        caller_uid = _uid(caller_uid)
        if caller_uid <= 0 or not data or not data.get("uid"):
            raise InvalidUidError()
        target_uid = _uid(data["uid"])
        new_password = data.get("newPassword")
        self.check_password(new_password)

        is_admin, has_password = await asyncio.gather(
            self.identity_provider.is_administrator(caller_uid),
            self.identity_provider.has_password(target_uid),
        )
        if self.settings.password_disable_edit and not is_admin:
            raise NoPrivilegesError()

        is_self = caller_uid == target_uid
        if not is_admin and not is_self:
            raise ChangePasswordPrivilegesError()

        await self.hooks.fire_filter("filter:password.check", {"password": new_password, "uid": target_uid})

        if is_self and has_password:
            current = data.get("currentPassword")
            if not await self.identity_provider.verify_password(target_uid, current):
                raise WrongCurrentPasswordError()
            if current == new_password:
                raise SamePasswordError()

        hashed = await self.identity_provider.hash_password(new_password)
        await asyncio.gather(
            self.users.set_fields(target_uid, {"password": hashed, "rss_token": str(uuid.uuid4())}),
            self.identity_provider.revoke_sessions(target_uid),
        )
        await self.hooks.fire_action("action:password.change", {"uid": caller_uid, "targetUid": target_uid})
        logger.info(f"uid {caller_uid} changed the password of uid {target_uid}")
