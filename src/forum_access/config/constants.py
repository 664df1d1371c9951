"""Constants shared across forum-access.

Key patterns for the sorted-set store, role values, privilege names and
well-known group names.
"""

from enum import Enum
from typing import Final


class Keys:
    """Storage key patterns."""

    USER: Final[str] = "user:{uid}"
    USER_USERNAMES: Final[str] = "user:{uid}:usernames"
    USER_SESSIONS: Final[str] = "uid:{uid}:sessions"
    USERNAME_UID: Final[str] = "username:uid"
    USERSLUG_UID: Final[str] = "userslug:uid"
    EMAIL_UID: Final[str] = "email:uid"
    FULLNAME_UID: Final[str] = "fullname:uid"
    USERNAME_SORTED: Final[str] = "username:sorted"
    FULLNAME_SORTED: Final[str] = "fullname:sorted"
    ROLE_UIDS: Final[str] = "role:{role}:uids"

    GROUP_MEMBERS: Final[str] = "group:{group}:members"

    CUSTOM_FIELDS: Final[str] = "user-custom-fields"
    CUSTOM_FIELD: Final[str] = "user-custom-field:{key}"

    CATEGORY: Final[str] = "category:{cid}"
    CATEGORIES: Final[str] = "categories:cid"
    CATEGORY_TIDS: Final[str] = "cid:{cid}:tids"
    CATEGORY_TIDS_POSTS: Final[str] = "cid:{cid}:tids:posts"
    CATEGORY_TIDS_CREATE: Final[str] = "cid:{cid}:tids:create"
    CATEGORY_TIDS_INSTRUCTOR: Final[str] = "cid:{cid}:tids:instructor"
    CATEGORY_TIDS_RESOLVED: Final[str] = "cid:{cid}:tids:resolved"
    CATEGORY_PIDS_INSTRUCTOR: Final[str] = "cid:{cid}:pids:instructor"
    CATEGORY_PRIVILEGE: Final[str] = "cid:{cid}:privileges:{action}"

    TOPIC: Final[str] = "topic:{tid}"
    TOPIC_POSTS: Final[str] = "tid:{tid}:posts"
    POST: Final[str] = "post:{pid}"

    POST_QUEUE: Final[str] = "post:queue"
    POST_QUEUE_ITEM: Final[str] = "post:queue:{id}"

    NEXT_UID: Final[str] = "global:nextUid"
    NEXT_CID: Final[str] = "global:nextCid"
    NEXT_TID: Final[str] = "global:nextTid"
    NEXT_PID: Final[str] = "global:nextPid"
    NEXT_QUEUE_ID: Final[str] = "global:nextQueueId"


class Role(str, Enum):
    """Trust tier assigned to a user. Administrator status is a group, not a role."""

    NONE = "none"
    STUDENT = "student"
    TA = "ta"
    PROFESSOR = "professor"

    @classmethod
    def parse(cls, value) -> "Role":
        """Parse a stored value; empty or missing means ``NONE``."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.NONE
        return cls(str(value))


class Privilege:
    """Category privilege names."""

    FIND: Final[str] = "find"
    READ: Final[str] = "read"
    TOPICS_READ: Final[str] = "topics:read"
    TOPICS_CREATE: Final[str] = "topics:create"
    TOPICS_REPLY: Final[str] = "topics:reply"
    POSTS_EDIT: Final[str] = "posts:edit"
    MODERATE: Final[str] = "moderate"

    ALL: Final[tuple] = (FIND, READ, TOPICS_READ, TOPICS_CREATE, TOPICS_REPLY, POSTS_EDIT, MODERATE)


class PrivilegeDefault(str, Enum):
    """What an unconfigured privilege means for a category."""

    ALLOW = "allow"
    DENY = "deny"


class Groups:
    """Well-known group and pseudo-group names."""

    ADMINISTRATORS: Final[str] = "administrators"
    GLOBAL_MODERATORS: Final[str] = "Global Moderators"
    REGISTERED_USERS: Final[str] = "registered-users"
    GUESTS: Final[str] = "guests"


class SortMode(str, Enum):
    """Category topic list orderings."""

    RECENTLY_REPLIED = "recently_replied"
    RECENTLY_CREATED = "recently_created"
    MOST_POSTS = "most_posts"
    OLDEST_TO_NEWEST = "oldest_to_newest"
    NEWEST_TO_OLDEST = "newest_to_oldest"


class StoreBackend(str, Enum):
    """Supported storage backends."""

    MEMORY = "memory"
    REDIS = "redis"
