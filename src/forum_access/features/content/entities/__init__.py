from .content import Topic, Post
from .listing import TopicListQuery
from .visibility import RoleVisibility, ROLE_LEVELS

__all__ = ["Topic", "Post", "TopicListQuery", "RoleVisibility", "ROLE_LEVELS"]
