"""Marking topics resolved."""

import logging
import time
from typing import List, Sequence

from ....core.exceptions import InvalidTopicError, NoPrivilegesError
from ....core.hooks import HookRegistry
from ...roles.services.identity_resolver import IdentityResolver
from ..repositories.indexes import ResolutionIndex
from ..repositories.topic_repository import TopicRepository

logger = logging.getLogger(__name__)


class ResolutionService:
    """Resolve and unresolve topics; admins and category moderators only."""

    def __init__(
        self,
        topics: TopicRepository,
        resolutions: ResolutionIndex,
        resolver: IdentityResolver,
        hooks: HookRegistry,
    ):
        self.topics = topics
        self.resolutions = resolutions
        self.resolver = resolver
        self.hooks = hooks

    async def resolve(self, caller_uid: int, cid: int, tids: Sequence[int]) -> List[int]:
        """Mark ``tids`` resolved in category ``cid``.

        Args:
            caller_uid: Acting user
            cid: Category the topics belong to
            tids: Topics to mark

        Returns:
            The tids that were marked

        Raises:
            NoPrivilegesError: Caller is neither admin nor moderator of ``cid``
            InvalidTopicError: A tid does not exist or is in another category
        """
        topics = await self._load(caller_uid, cid, tids)
        timestamp = int(time.time() * 1000)
        for topic in topics:
            await self.resolutions.mark(topic, timestamp)
            await self.hooks.fire_action("action:topic.resolve", {"topic": topic, "uid": caller_uid})
        logger.info(f"uid {caller_uid} resolved topics {[t.tid for t in topics]} in category {cid}")
        return [topic.tid for topic in topics]

    async def unresolve(self, caller_uid: int, cid: int, tids: Sequence[int]) -> List[int]:
        topics = await self._load(caller_uid, cid, tids)
        for topic in topics:
            await self.resolutions.unmark(topic)
            await self.hooks.fire_action("action:topic.unresolve", {"topic": topic, "uid": caller_uid})
        logger.info(f"uid {caller_uid} unresolved topics {[t.tid for t in topics]} in category {cid}")
        return [topic.tid for topic in topics]

    async def is_resolved(self, cid: int, tids: Sequence[int]) -> List[bool]:
        return await self.resolutions.are_resolved(cid, tids)

    async def _load(self, caller_uid: int, cid: int, tids: Sequence[int]):
        identity = await self.resolver.resolve(caller_uid, cid)
        if not identity.is_admin_or_mod:
            raise NoPrivilegesError(details={"cid": cid, "uid": identity.uid})

        topics = await self.topics.get_many([int(tid) for tid in tids])
        for tid, topic in zip(tids, topics):
            if topic is None or topic.cid != int(cid):
                raise InvalidTopicError(details={"tid": tid, "cid": cid})
        return topics
