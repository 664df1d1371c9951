"""Wiring of stores, repositories and services."""

import logging
from typing import Optional

from .config.settings import ForumSettings, get_settings
from .core.hooks import HookRegistry
from .features.content.entities.visibility import RoleVisibility
from .features.content.repositories import PostRepository, ResolutionIndex, RestrictionIndex, TopicRepository
from .features.content.services import (
    CategoryListingService,
    ConsistencyChecker,
    ContentService,
    ResolutionService,
)
from .features.posting import PostGate, PostQueueRepository
from .features.privileges import CategoryRepository, PrivilegeRepository, PrivilegeService
from .features.profiles import (
    CustomFieldRepository,
    IdentityProvider,
    ProfileService,
    StoreIdentityProvider,
    UserRepository,
)
from .features.roles import GroupRepository, IdentityResolver, RoleRepository
from .storage import KeyValueStore, create_store

logger = logging.getLogger(__name__)


class ForumAccess:
    """All services of one forum, sharing a store, settings and hook registry."""

    def __init__(
        self,
        settings: ForumSettings,
        store: KeyValueStore,
        hooks: Optional[HookRegistry] = None,
        identity_provider: Optional[IdentityProvider] = None,
    ):
        self.settings = settings
        self.store = store
        self.hooks = hooks or HookRegistry()
        self.visibility = RoleVisibility.from_settings(settings)

        # Repositories
        self.roles = RoleRepository(store)
        self.groups = GroupRepository(store)
        self.users = UserRepository(store)
        self.custom_fields = CustomFieldRepository(store)
        self.categories = CategoryRepository(store)
        self.privilege_sets = PrivilegeRepository(store)
        self.topics = TopicRepository(store)
        self.posts = PostRepository(store)
        self.restrictions = RestrictionIndex(store)
        self.resolutions = ResolutionIndex(store)
        self.post_queue = PostQueueRepository(store)

        # Services
        self.identity_provider = identity_provider or StoreIdentityProvider(store, self.groups)
        self.resolver = IdentityResolver(store, self.roles, self.groups)
        self.privileges = PrivilegeService(
            self.categories,
            self.privilege_sets,
            self.resolver,
            self.groups,
            self.topics,
            self.posts,
            self.visibility,
            settings,
        )
        self.post_gate = PostGate(settings, self.resolver, self.categories, self.hooks, store)
        self.profiles = ProfileService(
            settings, self.users, self.custom_fields, self.hooks, self.identity_provider
        )
        self.content = ContentService(
            self.topics,
            self.posts,
            self.restrictions,
            self.privileges,
            self.visibility,
            self.post_gate,
            self.post_queue,
            self.hooks,
        )
        self.listings = CategoryListingService(self.topics, self.restrictions, self.resolutions, self.content)
        self.resolution = ResolutionService(self.topics, self.resolutions, self.resolver, self.hooks)
        self.consistency = ConsistencyChecker(self.topics, self.posts, self.restrictions, self.resolutions)

    @classmethod
    def create(
        cls,
        settings: Optional[ForumSettings] = None,
        store: Optional[KeyValueStore] = None,
        **kwargs,
    ) -> "ForumAccess":
        """Build from settings, creating the configured store when none is given."""
        settings = settings or get_settings()
        if store is None:
            store = create_store(settings)
        logger.debug(f"Created forum-access services on {type(store).__name__}")
        return cls(settings, store, **kwargs)

    async def close(self) -> None:
        await self.store.close()
