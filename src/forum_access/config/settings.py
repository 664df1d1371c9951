"""
Runtime settings for forum-access.

Values load from the environment (``FORUM_`` prefix) or a ``.env`` file and
may be overridden in code, which is how the admin layer and tests tweak
post-queue and reputation behaviour at runtime.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, RedisDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import Role, StoreBackend


class ForumSettings(BaseSettings):
    """Settings consumed by the role, privilege and profile services."""

    model_config = SettingsConfigDict(
        env_prefix="FORUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    # Storage
    store_backend: StoreBackend = Field(default=StoreBackend.MEMORY)
    redis_url: Optional[RedisDsn] = Field(default=None)
    redis_pool_size: int = Field(default=10, ge=1)

    # Reputation
    reputation_disabled: bool = Field(default=False)
    min_rep_aboutme: int = Field(default=0, ge=0)
    min_rep_signature: int = Field(default=0, ge=0)

    # Profile limits
    minimum_username_length: int = Field(default=2, ge=1)
    maximum_username_length: int = Field(default=16, ge=1)
    maximum_about_me_length: int = Field(default=1000, ge=0)
    maximum_signature_length: int = Field(default=255, ge=0)
    maximum_fullname_length: int = Field(default=255, ge=0)
    custom_field_max_length: int = Field(default=255, ge=1)
    allow_multiple_badges: bool = Field(default=False)

    # Passwords
    password_disable_edit: bool = Field(default=False)
    min_password_length: int = Field(default=6, ge=1)
    max_password_length: int = Field(default=4096, ge=1)

    # Post queue and post delay
    post_queue: bool = Field(default=False)
    post_queue_reputation_threshold: int = Field(default=0, ge=0)
    groups_exempt_from_post_queue: List[str] = Field(default_factory=list)
    post_delay: int = Field(default=10, ge=0, description="Seconds between posts")
    newbie_post_delay: int = Field(default=120, ge=0)
    newbie_reputation_threshold: int = Field(default=3, ge=0)

    # Content restriction
    instructor_role: Role = Field(default=Role.TA)
    restricted_target_roles: List[Role] = Field(default_factory=lambda: [Role.TA])
    announcement_category_names: List[str] = Field(default_factory=lambda: ["Announcements"])

    @field_validator("maximum_username_length")
    @classmethod
    def _max_not_below_min(cls, value: int, info) -> int:
        minimum = info.data.get("minimum_username_length", 1)
        if value < minimum:
            raise ValueError(
                f"maximum_username_length ({value}) must be >= minimum_username_length ({minimum})"
            )
        return value

    @field_validator("instructor_role")
    @classmethod
    def _instructor_is_assignable(cls, value: Role) -> Role:
        if value == Role.NONE:
            raise ValueError("instructor_role cannot be 'none'")
        return value


@lru_cache()
def get_settings() -> ForumSettings:
    """Get the process-wide settings instance."""
    return ForumSettings()
