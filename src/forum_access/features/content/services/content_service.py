"""Content creation and role-filtered reads.

Creation accepts an optional ``targetRole``. Callers below the instructor
tier (and not administrators) get it stripped without an error, so the
composer stays ungated while the restriction is enforced here. Accepted
tags are written together with the category's restricted-id index.

Reads (topic posts, teasers) are filtered for the viewer before anything
is picked or sliced, so restricted posts never leak through a teaser.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ....config.constants import Privilege, Role
from ....core.exceptions import (
    ContentTooShortError,
    InvalidCategoryError,
    InvalidTitleError,
    InvalidTopicError,
    NotFoundError,
    NoPrivilegesError,
)
from ....core.hooks import HookRegistry
from ...posting.repositories.post_queue_repository import PostQueueRepository, QueuedPost
from ...posting.services.post_gate import PostGate
from ...privileges.services.privilege_service import PrivilegeService
from ...roles.entities.identity import Identity
from ..entities.content import Post, Topic
from ..entities.visibility import RoleVisibility
from ..repositories.indexes import RestrictionIndex
from ..repositories.post_repository import PostRepository
from ..repositories.topic_repository import TopicRepository

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """Outcome of a topic or reply submission: created content, or a queue entry."""

    topic: Optional[Topic] = None
    post: Optional[Post] = None
    queued: Optional[QueuedPost] = None

    @property
    def is_queued(self) -> bool:
        return self.queued is not None

    @property
    def tid(self) -> Optional[int]:
        return self.topic.tid if self.topic else None

    @property
    def pid(self) -> Optional[int]:
        return self.post.pid if self.post else None


def _now() -> int:
    return int(time.time() * 1000)


class ContentService:
    """Topics and replies with target-role restriction."""

    def __init__(
        self,
        topics: TopicRepository,
        posts: PostRepository,
        restrictions: RestrictionIndex,
        privileges: PrivilegeService,
        visibility: RoleVisibility,
        gate: PostGate,
        queue: PostQueueRepository,
        hooks: HookRegistry,
    ):
        self.topics = topics
        self.posts = posts
        self.restrictions = restrictions
        self.privileges = privileges
        self.visibility = visibility
        self.gate = gate
        self.queue = queue
        self.hooks = hooks

    # Creation

    async def create_topic(self, caller_uid: Optional[int], data: Dict[str, Any]) -> SubmissionResult:
        """Create a topic in ``data["cid"]``.

        Args:
            caller_uid: Author
            data: ``cid``, ``title``, ``content`` and optional ``targetRole``

        Returns:
            The created topic and main post, or the queue entry when held

        Raises:
            InvalidCategoryError: No category given
            NoPrivilegesError: Caller may not create topics there
            InvalidTitleError / ContentTooShortError: Empty title or content
            TooManyPostsError: Caller posted too recently
        """
        uid = int(caller_uid or 0)
        if not data.get("cid"):
            raise InvalidCategoryError()
        cid = int(data["cid"])
        title = str(data.get("title") or "").strip()
        content = str(data.get("content") or "").strip()
        if not title:
            raise InvalidTitleError()
        if not content:
            raise ContentTooShortError()

        identity = await self.privileges.assert_can(Privilege.TOPICS_CREATE, cid, uid)
        target_role = self.visibility.normalize_target_role(identity, data.get("targetRole"))
        await self.gate.is_ready_to_post(uid, cid)

        submission = {
            "cid": cid,
            "title": title,
            "content": content,
            "targetRole": target_role.value if target_role else None,
        }
        if await self.gate.should_queue(uid, submission):
            return SubmissionResult(queued=await self.queue.enqueue("topic", uid, cid, submission))

        return await self._write_topic(identity, cid, title, content, target_role)

    async def reply(self, caller_uid: Optional[int], data: Dict[str, Any]) -> SubmissionResult:
        """Reply to topic ``data["tid"]``.

        Replying requires ``topics:reply`` in the topic's category and the
        ability to see the topic itself.
        """
        uid = int(caller_uid or 0)
        topic = await self.topics.get(int(data.get("tid") or 0))
        if topic is None:
            raise InvalidTopicError()
        content = str(data.get("content") or "").strip()
        if not content:
            raise ContentTooShortError()

        identity = await self.privileges.assert_can(Privilege.TOPICS_REPLY, topic.cid, uid)
        if not self.visibility.can_view(identity, topic.target_role):
            raise NoPrivilegesError(details={"tid": topic.tid})

        target_role = self.visibility.normalize_target_role(identity, data.get("targetRole"))
        await self.gate.is_ready_to_post(uid, topic.cid)

        submission = {
            "cid": topic.cid,
            "tid": topic.tid,
            "content": content,
            "targetRole": target_role.value if target_role else None,
        }
        if await self.gate.should_queue(uid, submission):
            return SubmissionResult(queued=await self.queue.enqueue("reply", uid, topic.cid, submission))

        return await self._write_reply(identity, topic, content, target_role)

    async def _write_topic(
        self, identity: Identity, cid: int, title: str, content: str, target_role: Optional[Role]
    ) -> SubmissionResult:
        timestamp = _now()
        tid = await self.topics.next_tid()
        topic = await self.topics.create(tid, cid, identity.uid, title, timestamp)
        pid = await self.posts.next_pid()
        post = await self.posts.create(pid, tid, cid, identity.uid, content, timestamp)
        await self.topics.set_main_pid(tid, pid)
        topic.main_pid = pid
        topic.post_count = 1

        if target_role is not None:
            await self.restrictions.restrict_topic(topic, target_role)

        await self.hooks.fire_action("action:topic.save", {"topic": topic, "post": post})
        logger.info(f"uid {identity.uid} created topic {tid} in category {cid}")
        return SubmissionResult(topic=topic, post=post)

    async def _write_reply(
        self, identity: Identity, topic: Topic, content: str, target_role: Optional[Role]
    ) -> SubmissionResult:
        timestamp = _now()
        pid = await self.posts.next_pid()
        post = await self.posts.create(pid, topic.tid, topic.cid, identity.uid, content, timestamp)
        await self.topics.add_reply(topic, pid, timestamp)

        if target_role is not None:
            await self.restrictions.restrict_post(post, target_role)

        await self.hooks.fire_action("action:post.save", {"post": post})
        logger.info(f"uid {identity.uid} replied to topic {topic.tid} with post {pid}")
        return SubmissionResult(topic=topic, post=post)

    # Moderation of held posts

    async def accept_queued(self, caller_uid: int, queue_id: int) -> SubmissionResult:
        """Publish a held submission. Requires admin or moderator of its category."""
        item = await self.queue.get(queue_id)
        if item is None:
            raise NotFoundError(details={"queue_id": queue_id})
        await self._assert_moderator(caller_uid, item.cid)

        author = await self.privileges.resolver.resolve(item.uid, item.cid)
        target_role = Role.parse(item.data.get("targetRole")) if item.data.get("targetRole") else None
        if item.type == "topic":
            result = await self._write_topic(
                author, item.cid, item.data.get("title", ""), item.data.get("content", ""), target_role
            )
        else:
            topic = await self.topics.get(int(item.data.get("tid") or 0))
            if topic is None:
                raise InvalidTopicError()
            result = await self._write_reply(author, topic, item.data.get("content", ""), target_role)

        await self.queue.remove(queue_id)
        return result

    async def reject_queued(self, caller_uid: int, queue_id: int) -> None:
        item = await self.queue.get(queue_id)
        if item is None:
            return
        await self._assert_moderator(caller_uid, item.cid)
        await self.queue.remove(queue_id)
        logger.info(f"uid {caller_uid} rejected queued post #{queue_id}")

    async def _assert_moderator(self, uid: int, cid: int) -> None:
        identity = await self.privileges.resolver.resolve(uid, cid)
        if not identity.is_admin_or_mod:
            raise NoPrivilegesError(details={"cid": cid})

    # Reads

    async def get_topic_posts(
        self, tid: int, uid: Optional[int], start: int = 0, stop: int = -1
    ) -> List[Post]:
        """Posts of a topic visible to ``uid``, main post first.

        ``start``/``stop`` index the visible list (``stop`` inclusive, -1 for all).
        """
        topic = await self.topics.get(tid)
        if topic is None:
            return []
        pids = ([topic.main_pid] if topic.main_pid else []) + await self.topics.get_reply_pids(tid)
        visible = await self.privileges.filter_posts(Privilege.TOPICS_READ, pids, uid)
        visible = visible[start:] if stop == -1 else visible[start:stop + 1]
        return [post for post in await self.posts.get_many(visible) if post is not None]

    async def get_teasers(self, tids: Sequence[int], uid: Optional[int]) -> List[Optional[Post]]:
        """Latest post of each topic that ``uid`` may see, aligned with ``tids``."""
        teasers: List[Optional[Post]] = []
        for topic in await self.topics.get_many(tids):
            if topic is None:
                teasers.append(None)
                continue
            candidates = await self.topics.get_reply_pids(topic.tid, reverse=True)
            if topic.main_pid:
                candidates.append(topic.main_pid)
            visible = await self.privileges.filter_posts(Privilege.TOPICS_READ, candidates, uid)
            teasers.append(await self.posts.get(visible[0]) if visible else None)
        return teasers
