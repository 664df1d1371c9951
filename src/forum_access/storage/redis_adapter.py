"""Redis storage adapter for forum-access."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from ..core.exceptions import StorageError
from .protocols import KeyValueStore, Member, encode_value

logger = logging.getLogger(__name__)


class RedisStore(KeyValueStore):
    """``KeyValueStore`` backed by Redis hashes and sorted sets.

    Each method issues one command (or one non-transactional pipeline for
    batched reads), so atomicity holds per call only.
    """

    def __init__(self, client: Redis):
        self._client = client

    @classmethod
    def from_url(cls, redis_url: str, pool_size: int = 10) -> "RedisStore":
        """Create a store with its own connection pool."""
        pool = ConnectionPool.from_url(
            redis_url,
            max_connections=pool_size,
            decode_responses=True,
            health_check_interval=30,
        )
        logger.info("Creating Redis connection pool...")
        return cls(Redis(connection_pool=pool))

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def _run(self, operation: str, coro):
        try:
            return await coro
        except RedisError as e:
            logger.error(f"Redis {operation} failed: {e}")
            raise StorageError(details={"operation": operation, "reason": str(e)}) from e

    # Hashes

    async def get_object(self, key: str) -> Optional[Dict[str, str]]:
        data = await self._run("hgetall", self._client.hgetall(key))
        return data or None

    async def get_objects(self, keys: Sequence[str]) -> List[Optional[Dict[str, str]]]:
        if not keys:
            return []
        pipe = self._client.pipeline(transaction=False)
        for key in keys:
            pipe.hgetall(key)
        results = await self._run("hgetall", pipe.execute())
        return [data or None for data in results]

    async def get_object_field(self, key: str, field: str) -> Optional[str]:
        return await self._run("hget", self._client.hget(key, field))

    async def get_object_fields(self, key: str, fields: Sequence[str]) -> Dict[str, Optional[str]]:
        if not fields:
            return {}
        values = await self._run("hmget", self._client.hmget(key, list(fields)))
        return dict(zip(fields, values))

    async def set_object(self, key: str, data: Dict[str, Any]) -> None:
        mapping = {field: encode_value(value) for field, value in data.items() if value is not None}
        if mapping:
            await self._run("hset", self._client.hset(key, mapping=mapping))

    async def set_object_field(self, key: str, field: str, value: Any) -> None:
        await self.set_object(key, {field: value})

    async def delete_object_field(self, key: str, field: str) -> None:
        await self._run("hdel", self._client.hdel(key, field))

    async def increment_object_field(self, key: str, field: str, amount: int = 1) -> int:
        return int(await self._run("hincrby", self._client.hincrby(key, field, amount)))

    # Keys

    async def exists(self, key: str) -> bool:
        return bool(await self._run("exists", self._client.exists(key)))

    async def delete(self, key: str) -> None:
        await self._run("del", self._client.delete(key))

    async def increment(self, key: str) -> int:
        return int(await self._run("incr", self._client.incr(key)))

    # Sorted sets

    async def sorted_set_add(self, key: str, score: float, member: Member) -> None:
        await self._run("zadd", self._client.zadd(key, {str(member): score}))

    async def sorted_set_add_bulk(self, key: str, items: Iterable[Tuple[float, Member]]) -> None:
        mapping = {str(member): score for score, member in items}
        if mapping:
            await self._run("zadd", self._client.zadd(key, mapping))

    async def sorted_set_remove(self, key: str, *members: Member) -> None:
        if members:
            await self._run("zrem", self._client.zrem(key, *[str(m) for m in members]))

    async def sorted_set_range(self, key: str, start: int = 0, stop: int = -1) -> List[str]:
        return await self._run("zrange", self._client.zrange(key, start, stop))

    async def sorted_set_rev_range(self, key: str, start: int = 0, stop: int = -1) -> List[str]:
        return await self._run("zrevrange", self._client.zrevrange(key, start, stop))

    async def sorted_set_range_by_score(self, key: str, minimum: float, maximum: float) -> List[str]:
        return await self._run("zrangebyscore", self._client.zrangebyscore(key, minimum, maximum))

    async def sorted_set_score(self, key: str, member: Member) -> Optional[float]:
        score = await self._run("zscore", self._client.zscore(key, str(member)))
        return float(score) if score is not None else None

    async def is_sorted_set_member(self, key: str, member: Member) -> bool:
        return await self.sorted_set_score(key, member) is not None

    async def is_sorted_set_members(self, key: str, members: Sequence[Member]) -> List[bool]:
        if not members:
            return []
        pipe = self._client.pipeline(transaction=False)
        for member in members:
            pipe.zscore(key, str(member))
        scores = await self._run("zscore", pipe.execute())
        return [score is not None for score in scores]

    async def sorted_set_card(self, key: str) -> int:
        return int(await self._run("zcard", self._client.zcard(key)))

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Redis connection closed")
