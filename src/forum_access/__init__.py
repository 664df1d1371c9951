"""forum-access: role-aware access control for a discussion forum.

Provides role assignment, category privileges, target-role content
restriction, the post queue gate and validated profile updates on top of a
sorted-set key-value store (Redis or in-memory).
"""

from .__version__ import __version__

from .config import ForumSettings, get_settings, setup_logging
from .config.constants import Groups, Keys, Privilege, PrivilegeDefault, Role, SortMode, StoreBackend
from .container import ForumAccess
from .core.exceptions import (
    ForumAccessError,
    ValidationError,
    AuthorizationError,
    NoPrivilegesError,
    NotFoundError,
    RateLimitError,
    StorageError,
    create_error_response,
    get_http_status_code,
)
from .core.hooks import HookRegistry
from .storage import KeyValueStore, MemoryStore, RedisStore, create_store

__all__ = [
    "__version__",
    "ForumAccess",
    "ForumSettings",
    "get_settings",
    "setup_logging",
    "Groups",
    "Keys",
    "Privilege",
    "PrivilegeDefault",
    "Role",
    "SortMode",
    "StoreBackend",
    "ForumAccessError",
    "ValidationError",
    "AuthorizationError",
    "NoPrivilegesError",
    "NotFoundError",
    "RateLimitError",
    "StorageError",
    "create_error_response",
    "get_http_status_code",
    "HookRegistry",
    "KeyValueStore",
    "MemoryStore",
    "RedisStore",
    "create_store",
]
