"""Pytest configuration and fixtures for forum-access tests."""

import itertools
from dataclasses import dataclass

import pytest
import pytest_asyncio

from forum_access.config.constants import Groups, Role
from forum_access.config.settings import ForumSettings
from forum_access.container import ForumAccess
from forum_access.core.hooks import HookRegistry
from forum_access.features.profiles.services.identity_provider import StoreIdentityProvider
from forum_access.features.roles.repositories.group_repository import GroupRepository
from forum_access.storage.memory_adapter import MemoryStore


@pytest.fixture
def settings():
    """Settings with post delays disabled so tests can post back to back."""
    return ForumSettings(_env_file=None, post_delay=0, newbie_post_delay=0)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def hooks():
    return HookRegistry()


@pytest.fixture
def clock(mocker):
    """Deterministic, strictly increasing content timestamps one second apart."""
    ticks = itertools.count(1_700_000_000_000, 1000)
    return mocker.patch(
        "forum_access.features.content.services.content_service._now",
        side_effect=lambda: next(ticks),
    )


@pytest.fixture
def forum(settings, store, hooks):
    """Fully wired services over an in-memory store."""
    # cheap scrypt cost keeps password tests fast
    provider = StoreIdentityProvider(store, GroupRepository(store), cost=2 ** 4)
    return ForumAccess(settings, store, hooks=hooks, identity_provider=provider)


@dataclass
class Community:
    """Users and categories most tests start from."""

    admin: int
    professor: int
    ta: int
    student: int
    plain: int
    moderator: int
    general: int
    announcements: int


@pytest_asyncio.fixture
async def community(forum):
    """One user per role plus an admin, a moderator and two categories."""
    admin = await forum.users.create("admin", email="admin@example.com")
    professor = await forum.users.create("professor", email="prof@example.com")
    ta = await forum.users.create("assistant", email="ta@example.com")
    student = await forum.users.create("student", email="student@example.com")
    plain = await forum.users.create("plain", email="plain@example.com")
    moderator = await forum.users.create("moderator", email="mod@example.com")

    await forum.groups.join(Groups.ADMINISTRATORS, admin)
    await forum.roles.assign_role(professor, Role.PROFESSOR)
    await forum.roles.assign_role(ta, Role.TA)
    await forum.roles.assign_role(student, Role.STUDENT)

    general = await forum.categories.create("General Discussion")
    announcements = await forum.categories.create("Announcements")
    await forum.groups.add_moderator(general.cid, moderator)

    return Community(
        admin=admin,
        professor=professor,
        ta=ta,
        student=student,
        plain=plain,
        moderator=moderator,
        general=general.cid,
        announcements=announcements.cid,
    )
