"""Topic storage.

A topic is the hash ``topic:{tid}``; its replies are ``tid:{tid}:posts``
(scored by timestamp, main post excluded). Each category keeps the topic
ordering sets used by listings:

* ``cid:{cid}:tids`` scored by last post time
* ``cid:{cid}:tids:create`` scored by creation time
* ``cid:{cid}:tids:posts`` scored by post count
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ....config.constants import Keys
from ..entities.content import Topic

logger = logging.getLogger(__name__)


class TopicRepository:
    """Reads and writes topics and their category ordering sets."""

    def __init__(self, store):
        self.store = store

    async def next_tid(self) -> int:
        return await self.store.increment(Keys.NEXT_TID)

    async def create(self, tid: int, cid: int, uid: int, title: str, timestamp: int) -> Topic:
        topic = Topic(
            tid=tid,
            cid=cid,
            uid=uid,
            title=title,
            timestamp=timestamp,
            last_post_time=timestamp,
            post_count=0,
        )
        await self.store.set_object(Keys.TOPIC.format(tid=tid), {
            "tid": tid,
            "cid": cid,
            "uid": uid,
            "title": title,
            "timestamp": timestamp,
            "lastposttime": timestamp,
            "postcount": 0,
        })
        await self.store.sorted_set_add(Keys.CATEGORY_TIDS.format(cid=cid), timestamp, tid)
        await self.store.sorted_set_add(Keys.CATEGORY_TIDS_CREATE.format(cid=cid), timestamp, tid)
        await self.store.sorted_set_add(Keys.CATEGORY_TIDS_POSTS.format(cid=cid), 0, tid)
        logger.debug(f"Created topic {tid} in category {cid}")
        return topic

    async def get(self, tid: int) -> Optional[Topic]:
        data = await self.store.get_object(Keys.TOPIC.format(tid=tid))
        return Topic.from_hash(data) if data else None

    async def get_many(self, tids: Sequence[int]) -> List[Optional[Topic]]:
        rows = await self.store.get_objects([Keys.TOPIC.format(tid=tid) for tid in tids])
        return [Topic.from_hash(row) if row else None for row in rows]

    async def set_fields(self, tid: int, data: Dict[str, Any]) -> None:
        await self.store.set_object(Keys.TOPIC.format(tid=tid), data)

    async def delete_field(self, tid: int, field: str) -> None:
        await self.store.delete_object_field(Keys.TOPIC.format(tid=tid), field)

    async def set_main_pid(self, tid: int, pid: int) -> None:
        await self.store.set_object(Keys.TOPIC.format(tid=tid), {"mainPid": pid})
        await self._bump_post_count(tid)

    async def add_reply(self, topic: Topic, pid: int, timestamp: int) -> None:
        """Append a reply and refresh the orderings that depend on it."""
        await self.store.sorted_set_add(Keys.TOPIC_POSTS.format(tid=topic.tid), timestamp, pid)
        await self.store.set_object(Keys.TOPIC.format(tid=topic.tid), {"lastposttime": timestamp})
        await self.store.sorted_set_add(Keys.CATEGORY_TIDS.format(cid=topic.cid), timestamp, topic.tid)
        await self._bump_post_count(topic.tid, topic.cid)

    async def _bump_post_count(self, tid: int, cid: Optional[int] = None) -> None:
        count = await self.store.increment_object_field(Keys.TOPIC.format(tid=tid), "postcount")
        if cid is None:
            cid = int(await self.store.get_object_field(Keys.TOPIC.format(tid=tid), "cid") or 0)
        await self.store.sorted_set_add(Keys.CATEGORY_TIDS_POSTS.format(cid=cid), count, tid)

    async def get_reply_pids(self, tid: int, start: int = 0, stop: int = -1, reverse: bool = False) -> List[int]:
        key = Keys.TOPIC_POSTS.format(tid=tid)
        if reverse:
            pids = await self.store.sorted_set_rev_range(key, start, stop)
        else:
            pids = await self.store.sorted_set_range(key, start, stop)
        return [int(pid) for pid in pids]

    async def get_category_tids(self, key: str, reverse: bool = True) -> List[int]:
        """All tids of a category ordering set."""
        if reverse:
            tids = await self.store.sorted_set_rev_range(key, 0, -1)
        else:
            tids = await self.store.sorted_set_range(key, 0, -1)
        return [int(tid) for tid in tids]