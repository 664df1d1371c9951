"""Storage adapters for forum-access."""

import logging

from ..config.constants import StoreBackend
from ..config.settings import ForumSettings
from ..core.exceptions import StorageError
from .protocols import KeyValueStore, encode_value
from .memory_adapter import MemoryStore
from .redis_adapter import RedisStore

logger = logging.getLogger(__name__)


def create_store(settings: ForumSettings) -> KeyValueStore:
    """Create the store selected by ``settings.store_backend``."""
    if settings.store_backend == StoreBackend.REDIS:
        if not settings.redis_url:
            raise StorageError(
                message="Redis backend selected but FORUM_REDIS_URL is not set",
                details={"backend": settings.store_backend.value},
            )
        return RedisStore.from_url(str(settings.redis_url), pool_size=settings.redis_pool_size)

    logger.info("Using in-memory store; data will not persist across restarts")
    return MemoryStore()


__all__ = ["KeyValueStore", "MemoryStore", "RedisStore", "create_store", "encode_value"]
