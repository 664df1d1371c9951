"""Post-queue and post-delay gate.

``should_queue`` decides whether a new post is held for moderation.
Assigned roles count as a trust signal: students, TAs and professors skip
the queue just like administrators, moderators, exempt groups and
well-reputed users. Guests are held whenever the queue is active, so a
role-bearing user is never queued where a guest would not be.
"""

import logging
import time
from typing import Any, Dict, Optional

from ....config.constants import Keys
from ....config.settings import ForumSettings
from ....core.exceptions import TooManyPostsError, TooManyPostsNewbieError
from ....core.hooks import HookRegistry
from ...privileges.repositories.category_repository import CategoryRepository
from ...roles.entities.identity import Identity
from ...roles.services.identity_resolver import IdentityResolver

logger = logging.getLogger(__name__)


class PostGate:
    """Decides hold-or-publish and enforces the post delay."""

    def __init__(
        self,
        settings: ForumSettings,
        resolver: IdentityResolver,
        categories: CategoryRepository,
        hooks: HookRegistry,
        store,
    ):
        self.settings = settings
        self.resolver = resolver
        self.categories = categories
        self.hooks = hooks
        self.store = store

    async def is_queue_active(self, cid: Optional[int]) -> bool:
        """The queue applies when enabled globally and not disabled on the category."""
        if not self.settings.post_queue:
            return False
        if cid is None:
            return True
        category = await self.categories.get(cid)
        return category is None or category.post_queue

    def bypasses_queue(self, identity: Identity) -> bool:
        if identity.is_guest:
            return False
        if identity.has_role or identity.is_admin_or_mod:
            return True
        if identity.groups:
            return True
        return identity.reputation >= self.settings.post_queue_reputation_threshold

    async def should_queue(self, uid: Optional[int], context: Dict[str, Any]) -> bool:
        """Decide whether a post from ``uid`` must wait for moderation.

        Args:
            uid: Author; ``0``/``None`` is a guest
            context: Submission data; ``cid`` selects the category

        Returns:
            True when the post should be queued
        """
        uid = int(uid or 0)
        cid = context.get("cid")
        cid = int(cid) if cid is not None else None

        queue = False
        if await self.is_queue_active(cid):
            identity = await self.resolver.resolve(
                uid, cid, groups=self.settings.groups_exempt_from_post_queue
            )
            queue = not self.bypasses_queue(identity)

        result = await self.hooks.fire_filter("filter:post.shouldQueue", {
            "shouldQueue": queue,
            "uid": uid,
            "data": context,
        })
        queue = bool(result.get("shouldQueue", queue))
        logger.debug(f"should_queue uid={uid} cid={cid} -> {queue}")
        return queue

    async def is_ready_to_post(self, uid: Optional[int], cid: int) -> None:
        """Raise when ``uid`` posted too recently.

        Role-bearing users, administrators and moderators are exempt. Users
        below ``newbie_reputation_threshold`` wait ``newbie_post_delay``
        seconds, everyone else ``post_delay``.
        """
        uid = int(uid or 0)
        if uid <= 0:
            return
        identity = await self.resolver.resolve(uid, cid)
        if identity.has_role or identity.is_admin_or_mod:
            return

        last = await self.store.get_object_field(Keys.USER.format(uid=uid), "lastposttime")
        last_post_time = int(float(last or 0))
        now = int(time.time() * 1000)
        is_newbie = (
            not self.settings.reputation_disabled
            and identity.reputation < self.settings.newbie_reputation_threshold
        )
        delay = self.settings.newbie_post_delay if is_newbie else self.settings.post_delay

        if last_post_time and now - last_post_time < delay * 1000:
            if is_newbie:
                raise TooManyPostsNewbieError(delay, self.settings.newbie_reputation_threshold)
            raise TooManyPostsError(delay)
