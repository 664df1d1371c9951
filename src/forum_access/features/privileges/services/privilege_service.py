"""Privilege evaluation.

Answers "may this uid perform this action in this category?" and filters
candidate topic/post ids down to what a viewer may see. Evaluation is a
set-membership test between the caller's principals (role, pseudo-groups,
groups) and the category's configured principal set for the action.
Administrators always pass. An unconfigured action falls back to the
category's declared default.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ....config.constants import Groups, Privilege, PrivilegeDefault, Role
from ....config.settings import ForumSettings
from ....core.exceptions import NoPrivilegesError
from ...content.entities.visibility import RoleVisibility
from ...content.repositories.post_repository import PostRepository
from ...content.repositories.topic_repository import TopicRepository
from ...roles.entities.identity import Identity
from ...roles.repositories.group_repository import GroupRepository
from ...roles.services.identity_resolver import IdentityResolver
from ..entities.category import Category
from ..repositories.category_repository import CategoryRepository
from ..repositories.privilege_repository import PrivilegeRepository

logger = logging.getLogger(__name__)

# Privileges a guest gets from an "allow" category default.
GUEST_DEFAULT_PRIVILEGES = frozenset({Privilege.FIND, Privilege.READ, Privilege.TOPICS_READ})

# Principals resolved from the identity itself rather than group membership.
_IMPLICIT_PRINCIPALS = frozenset(
    {Groups.REGISTERED_USERS, Groups.GUESTS, Groups.ADMINISTRATORS, Groups.GLOBAL_MODERATORS}
    | {role.value for role in Role}
)


class PrivilegeService:
    """Category privilege checks and read-time filtering."""

    def __init__(
        self,
        categories: CategoryRepository,
        privileges: PrivilegeRepository,
        resolver: IdentityResolver,
        groups: GroupRepository,
        topics: TopicRepository,
        posts: PostRepository,
        visibility: RoleVisibility,
        settings: ForumSettings,
    ):
        self.categories = categories
        self.privileges = privileges
        self.resolver = resolver
        self.groups = groups
        self.topics = topics
        self.posts = posts
        self.visibility = visibility
        self.settings = settings

    async def can(self, action: str, cid: int, uid: Optional[int]) -> bool:
        """Check whether ``uid`` may perform ``action`` in category ``cid``.

        Args:
            action: Privilege name, e.g. ``topics:create``
            cid: Category id
            uid: Caller; ``0``/``None`` is a guest

        Returns:
            True when allowed. Unknown categories are never allowed.
        """
        identity = await self.resolver.resolve(uid)
        return await self.can_identity(action, cid, identity)

    async def can_identity(self, action: str, cid: int, identity: Identity) -> bool:
        category = await self.categories.get(cid)
        if category is None:
            logger.debug(f"Privilege {action} denied: category {cid} does not exist")
            return False
        return await self._evaluate(action, category, identity)

    async def assert_can(self, action: str, cid: int, uid: Optional[int]) -> Identity:
        """Like ``can`` but raises ``NoPrivilegesError``; returns the resolved identity."""
        identity = await self.resolver.resolve(uid, cid)
        if not await self.can_identity(action, cid, identity):
            raise NoPrivilegesError(details={"action": action, "cid": cid, "uid": identity.uid})
        return identity

    async def _evaluate(self, action: str, category: Category, identity: Identity) -> bool:
        if identity.is_admin:
            return True

        allowed = await self.privileges.get_principals(category.cid, action)
        if not allowed:
            if category.privilege_default != PrivilegeDefault.ALLOW:
                return False
            return not identity.is_guest or action in GUEST_DEFAULT_PRIVILEGES

        if allowed & identity.principals:
            return True

        named_groups = [name for name in allowed if name not in _IMPLICIT_PRINCIPALS]
        if named_groups and not identity.is_guest:
            return await self.groups.is_member_of_any(identity.uid, named_groups)
        return False

    async def get_privileges(self, cid: int, uid: Optional[int]) -> Dict[str, bool]:
        """Evaluate every known privilege for ``uid`` in ``cid``."""
        identity = await self.resolver.resolve(uid, cid)
        category = await self.categories.get(cid)
        if category is None:
            return {action: False for action in Privilege.ALL}
        return {action: await self._evaluate(action, category, identity) for action in Privilege.ALL}

    # Read-time filtering

    async def filter_topics(self, action: str, tids: Sequence[int], uid: Optional[int]) -> List[int]:
        """Keep the tids ``uid`` may see, preserving order.

        Drops missing topics, topics in categories where ``action`` is not
        allowed, and topics whose target role the viewer does not meet.
        """
        if not tids:
            return []
        identity = await self.resolver.resolve(uid)
        topics = await self.topics.get_many(tids)
        allowed_cids = await self._allowed_cids(action, {t.cid for t in topics if t}, identity)

        return [
            topic.tid for topic in topics
            if topic is not None
            and topic.cid in allowed_cids
            and self.visibility.can_view(identity, topic.target_role)
        ]

    async def filter_posts(self, action: str, pids: Sequence[int], uid: Optional[int]) -> List[int]:
        """Keep the pids ``uid`` may see, preserving order.

        A post is hidden when its own target role or its topic's target role
        is not met, or when ``action`` is not allowed in its category.
        """
        if not pids:
            return []
        identity = await self.resolver.resolve(uid)
        posts = await self.posts.get_many(pids)
        tids = sorted({p.tid for p in posts if p})
        topics = {t.tid: t for t in await self.topics.get_many(tids) if t}
        allowed_cids = await self._allowed_cids(action, {p.cid for p in posts if p}, identity)

        visible = []
        for post in posts:
            if post is None or post.cid not in allowed_cids:
                continue
            topic = topics.get(post.tid)
            if topic is None or not self.visibility.can_view(identity, topic.target_role):
                continue
            if self.visibility.can_view(identity, post.target_role):
                visible.append(post.pid)
        return visible

    async def filter(self, action: str, content_ids: Sequence[int], uid: Optional[int], kind: str = "posts") -> List[int]:
        """Dispatch to ``filter_posts`` or ``filter_topics``."""
        if kind == "topics":
            return await self.filter_topics(action, content_ids, uid)
        if kind == "posts":
            return await self.filter_posts(action, content_ids, uid)
        raise ValueError(f"Unknown content kind: {kind}")

    async def _allowed_cids(self, action: str, cids: Iterable[int], identity: Identity) -> set:
        allowed = set()
        for cid in cids:
            if await self.can_identity(action, cid, identity):
                allowed.add(cid)
        return allowed

    # Administration

    async def give(self, cid: int, action: str, principals: Iterable[str]) -> None:
        await self.categories.get_or_raise(cid)
        await self.privileges.give(cid, action, principals)

    async def rescind(self, cid: int, action: str, principals: Iterable[str]) -> None:
        await self.categories.get_or_raise(cid)
        await self.privileges.rescind(cid, action, principals)

    async def ensure_announcement_privileges(self) -> List[int]:
        """Lock announcement categories down to professors.

        Every category whose name is listed in
        ``settings.announcement_category_names`` gets ``topics:create`` and
        ``topics:reply`` restricted to professors, read access for everyone,
        and a deny default for anything else.

        Returns:
            The cids that were updated
        """
        names = {name.lower() for name in self.settings.announcement_category_names}
        updated = []
        for category in await self.categories.get_all():
            if category.name.lower() not in names:
                continue
            for action in (Privilege.TOPICS_CREATE, Privilege.TOPICS_REPLY):
                await self.privileges.replace(category.cid, action, [Role.PROFESSOR.value])
            for action in GUEST_DEFAULT_PRIVILEGES:
                await self.privileges.replace(
                    category.cid, action, [Groups.REGISTERED_USERS, Groups.GUESTS]
                )
            await self.categories.set_field(category.cid, "privilegeDefault", PrivilegeDefault.DENY.value)
            updated.append(category.cid)
            logger.info(f"Applied announcement privileges to category {category.cid} ({category.name})")
        return updated
