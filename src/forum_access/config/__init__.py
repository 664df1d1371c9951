"""Configuration for forum-access."""

from .constants import Keys, Role, Privilege, PrivilegeDefault, Groups, SortMode, StoreBackend
from .settings import ForumSettings, get_settings
from .logging_config import setup_logging, LoggingConfig, LogVerbosity, LogFormat

__all__ = [
    "Keys",
    "Role",
    "Privilege",
    "PrivilegeDefault",
    "Groups",
    "SortMode",
    "StoreBackend",
    "ForumSettings",
    "get_settings",
    "setup_logging",
    "LoggingConfig",
    "LogVerbosity",
    "LogFormat",
]
