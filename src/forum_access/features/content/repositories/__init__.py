from .topic_repository import TopicRepository
from .post_repository import PostRepository
from .indexes import RestrictionIndex, ResolutionIndex

__all__ = ["TopicRepository", "PostRepository", "RestrictionIndex", "ResolutionIndex"]
