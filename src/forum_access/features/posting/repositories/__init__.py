from .post_queue_repository import PostQueueRepository, QueuedPost

__all__ = ["PostQueueRepository", "QueuedPost"]
