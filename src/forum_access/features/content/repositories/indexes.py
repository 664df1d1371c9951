"""Per-category secondary indexes over topics and posts.

``RestrictionIndex`` keeps the ``targetRole`` field and the category's
restricted-id sets in step: an id is in ``cid:{cid}:tids:instructor`` (or
``cid:{cid}:pids:instructor``) exactly when its hash carries a target role.
``ResolutionIndex`` does the same for ``cid:{cid}:tids:resolved`` and the
topic's ``resolved`` flag.

Field write and index write are separate store calls; a crash between them
leaves a mismatch that ``ConsistencyChecker`` repairs.
"""

import logging
from typing import List, Sequence

from ....config.constants import Keys, Role
from ..entities.content import Post, Topic

logger = logging.getLogger(__name__)


class RestrictionIndex:
    """Target-role tags and the restricted-id sets."""

    def __init__(self, store):
        self.store = store

    @staticmethod
    def topics_key(cid: int) -> str:
        return Keys.CATEGORY_TIDS_INSTRUCTOR.format(cid=cid)

    @staticmethod
    def posts_key(cid: int) -> str:
        return Keys.CATEGORY_PIDS_INSTRUCTOR.format(cid=cid)

    async def restrict_topic(self, topic: Topic, role: Role) -> None:
        await self.store.set_object_field(Keys.TOPIC.format(tid=topic.tid), "targetRole", role.value)
        await self.store.sorted_set_add(self.topics_key(topic.cid), topic.timestamp, topic.tid)
        topic.target_role = role.value
        logger.info(f"Topic {topic.tid} restricted to {role.value} in category {topic.cid}")

    async def unrestrict_topic(self, topic: Topic) -> None:
        await self.store.sorted_set_remove(self.topics_key(topic.cid), topic.tid)
        await self.store.delete_object_field(Keys.TOPIC.format(tid=topic.tid), "targetRole")
        topic.target_role = None

    async def restrict_post(self, post: Post, role: Role) -> None:
        await self.store.set_object_field(Keys.POST.format(pid=post.pid), "targetRole", role.value)
        await self.store.sorted_set_add(self.posts_key(post.cid), post.timestamp, post.pid)
        post.target_role = role.value
        logger.info(f"Post {post.pid} restricted to {role.value} in category {post.cid}")

    async def unrestrict_post(self, post: Post) -> None:
        await self.store.sorted_set_remove(self.posts_key(post.cid), post.pid)
        await self.store.delete_object_field(Keys.POST.format(pid=post.pid), "targetRole")
        post.target_role = None

    async def index_topic(self, cid: int, tid: int, score: float) -> None:
        await self.store.sorted_set_add(self.topics_key(cid), score, tid)

    async def deindex_topic(self, cid: int, tid: int) -> None:
        await self.store.sorted_set_remove(self.topics_key(cid), tid)

    async def index_post(self, cid: int, pid: int, score: float) -> None:
        await self.store.sorted_set_add(self.posts_key(cid), score, pid)

    async def deindex_post(self, cid: int, pid: int) -> None:
        await self.store.sorted_set_remove(self.posts_key(cid), pid)

    async def restricted_tids(self, cid: int) -> List[int]:
        return [int(tid) for tid in await self.store.sorted_set_range(self.topics_key(cid))]

    async def restricted_pids(self, cid: int) -> List[int]:
        return [int(pid) for pid in await self.store.sorted_set_range(self.posts_key(cid))]


class ResolutionIndex:
    """Resolved flags and ``cid:{cid}:tids:resolved``."""

    def __init__(self, store):
        self.store = store

    @staticmethod
    def key(cid: int) -> str:
        return Keys.CATEGORY_TIDS_RESOLVED.format(cid=cid)

    async def mark(self, topic: Topic, timestamp: int) -> None:
        await self.store.set_object_field(Keys.TOPIC.format(tid=topic.tid), "resolved", 1)
        await self.store.sorted_set_add(self.key(topic.cid), timestamp, topic.tid)
        topic.resolved = True

    async def unmark(self, topic: Topic) -> None:
        await self.store.sorted_set_remove(self.key(topic.cid), topic.tid)
        await self.store.delete_object_field(Keys.TOPIC.format(tid=topic.tid), "resolved")
        topic.resolved = False

    async def index(self, cid: int, tid: int, score: float) -> None:
        await self.store.sorted_set_add(self.key(cid), score, tid)

    async def deindex(self, cid: int, tid: int) -> None:
        await self.store.sorted_set_remove(self.key(cid), tid)

    async def resolved_tids(self, cid: int) -> List[int]:
        return [int(tid) for tid in await self.store.sorted_set_range(self.key(cid))]

    async def are_resolved(self, cid: int, tids: Sequence[int]) -> List[bool]:
        return await self.store.is_sorted_set_members(self.key(cid), list(tids))
