"""Held posts awaiting moderation.

Each queued submission is a hash ``post:queue:{id}`` whose ``data`` field
holds the JSON-encoded submission; ``post:queue`` orders them by time.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ....config.constants import Keys

logger = logging.getLogger(__name__)


@dataclass
class QueuedPost:
    """A submission held by the post queue."""

    id: int
    type: str
    uid: int
    cid: int
    data: Dict[str, Any]
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "uid": self.uid,
            "cid": self.cid,
            "data": self.data,
            "timestamp": self.timestamp,
            "queued": True,
        }


class PostQueueRepository:
    """Stores and lists queued submissions."""

    def __init__(self, store):
        self.store = store

    async def enqueue(self, kind: str, uid: int, cid: int, data: Dict[str, Any]) -> QueuedPost:
        queue_id = await self.store.increment(Keys.NEXT_QUEUE_ID)
        now = int(time.time() * 1000)
        await self.store.set_object(Keys.POST_QUEUE_ITEM.format(id=queue_id), {
            "id": queue_id,
            "type": kind,
            "uid": uid,
            "cid": cid,
            "data": json.dumps(data),
            "timestamp": now,
        })
        await self.store.sorted_set_add(Keys.POST_QUEUE, now, queue_id)
        logger.info(f"Queued {kind} from uid {uid} in category {cid} as #{queue_id}")
        return QueuedPost(id=queue_id, type=kind, uid=uid, cid=cid, data=data, timestamp=now)

    async def get(self, queue_id: int) -> Optional[QueuedPost]:
        row = await self.store.get_object(Keys.POST_QUEUE_ITEM.format(id=queue_id))
        return self._from_hash(row) if row else None

    async def list(self, start: int = 0, stop: int = -1) -> List[QueuedPost]:
        ids = await self.store.sorted_set_range(Keys.POST_QUEUE, start, stop)
        rows = await self.store.get_objects([Keys.POST_QUEUE_ITEM.format(id=i) for i in ids])
        return [self._from_hash(row) for row in rows if row]

    async def remove(self, queue_id: int) -> None:
        await self.store.sorted_set_remove(Keys.POST_QUEUE, queue_id)
        await self.store.delete(Keys.POST_QUEUE_ITEM.format(id=queue_id))

    @staticmethod
    def _from_hash(row: Dict[str, str]) -> QueuedPost:
        try:
            data = json.loads(row.get("data") or "{}")
        except ValueError:
            logger.warning(f"Queued post {row.get('id')} has undecodable data")
            data = {}
        return QueuedPost(
            id=int(row["id"]),
            type=row.get("type", "reply"),
            uid=int(row.get("uid", 0)),
            cid=int(row.get("cid", 0)),
            data=data,
            timestamp=int(row.get("timestamp", 0)),
        )
