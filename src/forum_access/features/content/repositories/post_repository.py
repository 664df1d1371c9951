"""Post storage (``post:{pid}``)."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ....config.constants import Keys
from ..entities.content import Post

logger = logging.getLogger(__name__)


class PostRepository:
    """Reads and writes posts."""

    def __init__(self, store):
        self.store = store

    async def next_pid(self) -> int:
        return await self.store.increment(Keys.NEXT_PID)

    async def create(self, pid: int, tid: int, cid: int, uid: int, content: str, timestamp: int) -> Post:
        await self.store.set_object(Keys.POST.format(pid=pid), {
            "pid": pid,
            "tid": tid,
            "cid": cid,
            "uid": uid,
            "content": content,
            "timestamp": timestamp,
        })
        await self.store.set_object(Keys.USER.format(uid=uid), {"lastposttime": timestamp})
        await self.store.increment_object_field(Keys.USER.format(uid=uid), "postcount")
        return Post(pid=pid, tid=tid, cid=cid, uid=uid, content=content, timestamp=timestamp)

    async def get(self, pid: int) -> Optional[Post]:
        data = await self.store.get_object(Keys.POST.format(pid=pid))
        return Post.from_hash(data) if data else None

    async def get_many(self, pids: Sequence[int]) -> List[Optional[Post]]:
        rows = await self.store.get_objects([Keys.POST.format(pid=pid) for pid in pids])
        return [Post.from_hash(row) if row else None for row in rows]

    async def set_fields(self, pid: int, data: Dict[str, Any]) -> None:
        await self.store.set_object(Keys.POST.format(pid=pid), data)

    async def delete_field(self, pid: int, field: str) -> None:
        await self.store.delete_object_field(Keys.POST.format(pid=pid), field)
