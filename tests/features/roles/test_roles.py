"""Tests for role assignment, groups and identity resolution."""

import pytest

from forum_access.config.constants import Groups, Keys, Role
from forum_access.core.exceptions import InvalidRoleError, InvalidUidError
from forum_access.features.roles.entities.identity import GUEST, Identity
from forum_access.features.roles.repositories.group_repository import is_privilege_group, moderator_group


class TestRoleRepository:
    """One role per user."""

    @pytest.mark.asyncio
    async def test_assign_and_read(self, forum, community):
        assert await forum.roles.get_role(community.professor) == Role.PROFESSOR
        assert await forum.roles.get_role(community.plain) == Role.NONE

    @pytest.mark.asyncio
    async def test_assign_is_idempotent(self, forum, store, community):
        await forum.roles.assign_role(community.student, "student")
        await forum.roles.assign_role(community.student, Role.STUDENT)

        assert await forum.roles.get_uids_with_role(Role.STUDENT) == [community.student]
        assert await store.get_object_field(Keys.USER.format(uid=community.student), "role") == "student"

    @pytest.mark.asyncio
    async def test_reassign_moves_between_role_sets(self, forum, community):
        await forum.roles.assign_role(community.student, Role.TA)

        assert await forum.roles.get_role(community.student) == Role.TA
        assert community.student not in await forum.roles.get_uids_with_role(Role.STUDENT)
        assert set(await forum.roles.get_uids_with_role(Role.TA)) == {community.ta, community.student}

    @pytest.mark.asyncio
    async def test_remove_role(self, forum, store, community):
        await forum.roles.remove_role(community.ta)

        assert await forum.roles.get_role(community.ta) == Role.NONE
        assert await forum.roles.get_uids_with_role(Role.TA) == []
        assert await store.get_object_field(Keys.USER.format(uid=community.ta), "role") is None

    @pytest.mark.asyncio
    async def test_unknown_role_rejected(self, forum, community):
        with pytest.raises(InvalidRoleError) as exc_info:
            await forum.roles.assign_role(community.plain, "dean")
        assert exc_info.value.message == "[[error:invalid-role, dean]]"

    @pytest.mark.asyncio
    async def test_guest_cannot_hold_role(self, forum):
        with pytest.raises(InvalidUidError):
            await forum.roles.assign_role(0, Role.STUDENT)

    @pytest.mark.asyncio
    async def test_corrupt_stored_role_reads_as_none(self, forum, store, community):
        await store.set_object_field(Keys.USER.format(uid=community.plain), "role", "wizard")
        assert await forum.roles.get_role(community.plain) == Role.NONE

    @pytest.mark.asyncio
    async def test_get_roles(self, forum, community):
        roles = await forum.roles.get_roles([community.professor, community.plain, 0])
        assert roles == {community.professor: Role.PROFESSOR, community.plain: Role.NONE, 0: Role.NONE}


class TestGroups:
    """Membership, pseudo-groups and moderators."""

    def test_privilege_group_names(self):
        assert is_privilege_group("cid:3:privileges:topics:create")
        assert is_privilege_group(moderator_group(7))
        assert not is_privilege_group("administrators")
        assert not is_privilege_group("cid:abc:privileges:read")

    @pytest.mark.asyncio
    async def test_pseudo_groups(self, forum, community):
        assert await forum.groups.is_member(community.plain, Groups.REGISTERED_USERS)
        assert not await forum.groups.is_member(community.plain, Groups.GUESTS)
        assert await forum.groups.is_member(0, Groups.GUESTS)
        assert not await forum.groups.is_member(0, Groups.REGISTERED_USERS)

    @pytest.mark.asyncio
    async def test_moderators(self, forum, community):
        assert await forum.groups.is_moderator(community.moderator, community.general)
        assert not await forum.groups.is_moderator(community.moderator, community.announcements)

        await forum.groups.remove_moderator(community.general, community.moderator)
        assert not await forum.groups.is_moderator(community.moderator, community.general)

    @pytest.mark.asyncio
    async def test_join_and_leave(self, forum, community):
        await forum.groups.join("Study Group", community.student)
        assert await forum.groups.get_members("Study Group") == [community.student]
        await forum.groups.leave("Study Group", community.student)
        assert not await forum.groups.is_member(community.student, "Study Group")


class TestIdentityResolver:
    """Resolved capabilities of a caller."""

    @pytest.mark.asyncio
    async def test_guest(self, forum):
        assert await forum.resolver.resolve(None) is GUEST
        identity = await forum.resolver.resolve(0, cid=1)
        assert identity.is_guest and identity.cid == 1

    @pytest.mark.asyncio
    async def test_resolve_scoped_to_category(self, forum, store, community):
        await store.set_object_field(Keys.USER.format(uid=community.moderator), "reputation", 12)

        scoped = await forum.resolver.resolve(community.moderator, community.general)
        unscoped = await forum.resolver.resolve(community.moderator)

        assert scoped.is_moderator and scoped.is_admin_or_mod
        assert not unscoped.is_moderator
        assert scoped.reputation == 12

    @pytest.mark.asyncio
    async def test_admin_and_role(self, forum, community):
        admin = await forum.resolver.resolve(community.admin)
        professor = await forum.resolver.resolve(community.professor)

        assert admin.is_admin and not admin.has_role
        assert professor.role == Role.PROFESSOR and not professor.is_admin

    @pytest.mark.asyncio
    async def test_requested_group_memberships(self, forum, community):
        await forum.groups.join("trusted", community.plain)
        identity = await forum.resolver.resolve(community.plain, groups=["trusted", "other"])
        assert identity.groups == frozenset({"trusted"})

    @pytest.mark.asyncio
    async def test_resolve_many(self, forum, community):
        identities = await forum.resolver.resolve_many([community.student, community.ta])
        assert identities[community.student].role == Role.STUDENT
        assert identities[community.ta].role == Role.TA


class TestIdentityPrincipals:

    def test_registered_user_with_role(self):
        identity = Identity(uid=4, role=Role.TA, groups=frozenset({"Study Group"}))
        assert identity.principals == frozenset({Groups.REGISTERED_USERS, "ta", "Study Group"})

    def test_guest(self):
        assert GUEST.principals == frozenset({Groups.GUESTS})

    def test_admin_and_global_moderator(self):
        identity = Identity(uid=1, is_admin=True, is_global_moderator=True)
        assert {Groups.ADMINISTRATORS, Groups.GLOBAL_MODERATORS} <= identity.principals
