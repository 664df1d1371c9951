"""Content feature: topics, posts and their role restrictions.

Services live in ``content.services``; they depend on the privileges and
posting features, which in turn import the entities exported here.
"""

from .entities import Topic, Post, TopicListQuery, RoleVisibility, ROLE_LEVELS
from .repositories import TopicRepository, PostRepository, RestrictionIndex, ResolutionIndex

__all__ = [
    "Topic",
    "Post",
    "TopicListQuery",
    "RoleVisibility",
    "ROLE_LEVELS",
    "TopicRepository",
    "PostRepository",
    "RestrictionIndex",
    "ResolutionIndex",
]
