"""Posting feature: post queue and post delay."""

from .repositories import PostQueueRepository, QueuedPost
from .services import PostGate

__all__ = ["PostQueueRepository", "QueuedPost", "PostGate"]
