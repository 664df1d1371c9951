"""In-process storage adapter.

Mirrors the Redis adapter's semantics (string values, inclusive ranges with
negative indexes, members ordered by score then member) so services behave
the same against either backend. Used for tests and local development.
"""

import bisect
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .protocols import KeyValueStore, Member, encode_value

logger = logging.getLogger(__name__)


class _SortedSet:
    """A sorted set kept as a score map plus an ordered entry list."""

    def __init__(self):
        self.scores: Dict[str, float] = {}
        self.entries: List[Tuple[float, str]] = []

    def add(self, score: float, member: str) -> None:
        if member in self.scores:
            self.remove(member)
        self.scores[member] = score
        bisect.insort(self.entries, (score, member))

    def remove(self, member: str) -> None:
        score = self.scores.pop(member, None)
        if score is None:
            return
        index = bisect.bisect_left(self.entries, (score, member))
        del self.entries[index]

    def __len__(self) -> int:
        return len(self.scores)


def _slice(items: List[str], start: int, stop: int) -> List[str]:
    length = len(items)
    if start < 0:
        start = max(length + start, 0)
    if stop < 0:
        stop = length + stop
    if start > stop or start >= length:
        return []
    return items[start:stop + 1]


class MemoryStore(KeyValueStore):
    """Dictionary-backed implementation of ``KeyValueStore``."""

    def __init__(self):
        self._hashes: Dict[str, Dict[str, str]] = {}
        self._sorted_sets: Dict[str, _SortedSet] = {}
        self._counters: Dict[str, int] = {}

    # Hashes

    async def get_object(self, key: str) -> Optional[Dict[str, str]]:
        data = self._hashes.get(key)
        return dict(data) if data else None

    async def get_objects(self, keys: Sequence[str]) -> List[Optional[Dict[str, str]]]:
        return [await self.get_object(key) for key in keys]

    async def get_object_field(self, key: str, field: str) -> Optional[str]:
        return self._hashes.get(key, {}).get(field)

    async def get_object_fields(self, key: str, fields: Sequence[str]) -> Dict[str, Optional[str]]:
        data = self._hashes.get(key, {})
        return {field: data.get(field) for field in fields}

    async def set_object(self, key: str, data: Dict[str, Any]) -> None:
        values = {field: encode_value(value) for field, value in data.items() if value is not None}
        if values:
            self._hashes.setdefault(key, {}).update(values)

    async def set_object_field(self, key: str, field: str, value: Any) -> None:
        await self.set_object(key, {field: value})

    async def delete_object_field(self, key: str, field: str) -> None:
        data = self._hashes.get(key)
        if data is not None:
            data.pop(field, None)
            if not data:
                del self._hashes[key]

    async def increment_object_field(self, key: str, field: str, amount: int = 1) -> int:
        data = self._hashes.setdefault(key, {})
        value = int(data.get(field) or 0) + amount
        data[field] = str(value)
        return value

    # Keys

    async def exists(self, key: str) -> bool:
        return key in self._hashes or key in self._sorted_sets or key in self._counters

    async def delete(self, key: str) -> None:
        self._hashes.pop(key, None)
        self._sorted_sets.pop(key, None)
        self._counters.pop(key, None)

    async def increment(self, key: str) -> int:
        self._counters[key] = self._counters.get(key, 0) + 1
        return self._counters[key]

    # Sorted sets

    async def sorted_set_add(self, key: str, score: float, member: Member) -> None:
        self._sorted_sets.setdefault(key, _SortedSet()).add(float(score), str(member))

    async def sorted_set_add_bulk(self, key: str, items: Iterable[Tuple[float, Member]]) -> None:
        for score, member in items:
            await self.sorted_set_add(key, score, member)

    async def sorted_set_remove(self, key: str, *members: Member) -> None:
        zset = self._sorted_sets.get(key)
        if zset is None:
            return
        for member in members:
            zset.remove(str(member))
        if not zset:
            del self._sorted_sets[key]

    async def sorted_set_range(self, key: str, start: int = 0, stop: int = -1) -> List[str]:
        zset = self._sorted_sets.get(key)
        if zset is None:
            return []
        return _slice([member for _, member in zset.entries], start, stop)

    async def sorted_set_rev_range(self, key: str, start: int = 0, stop: int = -1) -> List[str]:
        zset = self._sorted_sets.get(key)
        if zset is None:
            return []
        return _slice([member for _, member in reversed(zset.entries)], start, stop)

    async def sorted_set_range_by_score(self, key: str, minimum: float, maximum: float) -> List[str]:
        zset = self._sorted_sets.get(key)
        if zset is None:
            return []
        return [member for score, member in zset.entries if minimum <= score <= maximum]

    async def sorted_set_score(self, key: str, member: Member) -> Optional[float]:
        zset = self._sorted_sets.get(key)
        if zset is None:
            return None
        return zset.scores.get(str(member))

    async def is_sorted_set_member(self, key: str, member: Member) -> bool:
        return await self.sorted_set_score(key, member) is not None

    async def is_sorted_set_members(self, key: str, members: Sequence[Member]) -> List[bool]:
        return [await self.is_sorted_set_member(key, member) for member in members]

    async def sorted_set_card(self, key: str) -> int:
        zset = self._sorted_sets.get(key)
        return len(zset) if zset is not None else 0

    async def close(self) -> None:
        logger.debug("Memory store closed")
