"""Tests for target-role restricted topics and posts."""

import pytest
from unittest.mock import AsyncMock

from forum_access.config.constants import Keys, Privilege
from forum_access.core.exceptions import (
    ContentTooShortError,
    InvalidCategoryError,
    InvalidTitleError,
    InvalidTopicError,
    NoPrivilegesError,
)

pytestmark = pytest.mark.usefixtures("clock")


async def post_topic(forum, uid, cid, title="A topic", content="Topic body", target_role=None):
    data = {"cid": cid, "title": title, "content": content}
    if target_role is not None:
        data["targetRole"] = target_role
    return await forum.content.create_topic(uid, data)


async def post_reply(forum, uid, tid, content="A reply", target_role=None):
    data = {"tid": tid, "content": content}
    if target_role is not None:
        data["targetRole"] = target_role
    return await forum.content.reply(uid, data)


class TestTopicCreation:
    """targetRole handling when topics are created."""

    @pytest.mark.asyncio
    async def test_instructor_topic_stored_and_indexed(self, forum, store, community):
        result = await post_topic(forum, community.ta, community.general, target_role="ta")

        assert await store.get_object_field(Keys.TOPIC.format(tid=result.tid), "targetRole") == "ta"
        assert await store.is_sorted_set_member(
            Keys.CATEGORY_TIDS_INSTRUCTOR.format(cid=community.general), result.tid
        )
        assert result.topic.target_role == "ta"

    @pytest.mark.asyncio
    async def test_normal_topic_not_indexed(self, forum, store, community):
        result = await post_topic(forum, community.ta, community.general)

        assert await store.get_object_field(Keys.TOPIC.format(tid=result.tid), "targetRole") is None
        assert not await store.is_sorted_set_member(
            Keys.CATEGORY_TIDS_INSTRUCTOR.format(cid=community.general), result.tid
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("who,requested", [
        ("student", "ta"),
        ("plain", "ta"),
        ("ta", "dean"),
        ("ta", "professor"),
        ("ta", "student"),
    ])
    async def test_target_role_silently_stripped(self, forum, store, community, who, requested):
        result = await post_topic(forum, getattr(community, who), community.general, target_role=requested)

        assert result.topic is not None
        assert await store.get_object_field(Keys.TOPIC.format(tid=result.tid), "targetRole") is None
        assert await forum.restrictions.restricted_tids(community.general) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("who", ["admin", "professor", "ta"])
    async def test_instructors_and_admins_may_restrict(self, forum, community, who):
        result = await post_topic(forum, getattr(community, who), community.general, target_role="ta")
        assert await forum.restrictions.restricted_tids(community.general) == [result.tid]

    @pytest.mark.asyncio
    async def test_required_fields(self, forum, community):
        with pytest.raises(InvalidCategoryError):
            await forum.content.create_topic(community.plain, {"title": "t", "content": "c"})
        with pytest.raises(InvalidTitleError):
            await post_topic(forum, community.plain, community.general, title="   ")
        with pytest.raises(ContentTooShortError):
            await post_topic(forum, community.plain, community.general, content="")

    @pytest.mark.asyncio
    async def test_guest_cannot_create(self, forum, community):
        with pytest.raises(NoPrivilegesError):
            await post_topic(forum, 0, community.general)

    @pytest.mark.asyncio
    async def test_topic_orderings_maintained(self, forum, store, community):
        result = await post_topic(forum, community.plain, community.general)

        for key in (Keys.CATEGORY_TIDS, Keys.CATEGORY_TIDS_CREATE, Keys.CATEGORY_TIDS_POSTS):
            assert await store.is_sorted_set_member(key.format(cid=community.general), result.tid)
        topic = await forum.topics.get(result.tid)
        assert topic.main_pid == result.pid
        assert topic.post_count == 1

    @pytest.mark.asyncio
    async def test_save_action_fired(self, forum, hooks, community):
        listener = AsyncMock()
        hooks.register("action:topic.save", listener)

        result = await post_topic(forum, community.plain, community.general)

        listener.assert_awaited_once()
        assert listener.await_args.args[0]["topic"].tid == result.tid


class TestReplies:
    """targetRole on replies and access to the parent topic."""

    @pytest.mark.asyncio
    async def test_instructor_reply_stored_and_indexed(self, forum, store, community):
        topic = await post_topic(forum, community.student, community.general)
        reply = await post_reply(forum, community.ta, topic.tid, target_role="ta")

        assert await store.get_object_field(Keys.POST.format(pid=reply.pid), "targetRole") == "ta"
        assert await forum.restrictions.restricted_pids(community.general) == [reply.pid]

    @pytest.mark.asyncio
    async def test_student_reply_target_role_stripped(self, forum, store, community):
        topic = await post_topic(forum, community.student, community.general)
        reply = await post_reply(forum, community.student, topic.tid, target_role="ta")

        assert await store.get_object_field(Keys.POST.format(pid=reply.pid), "targetRole") is None
        assert await forum.restrictions.restricted_pids(community.general) == []

    @pytest.mark.asyncio
    async def test_reply_updates_topic(self, forum, store, community):
        topic = await post_topic(forum, community.student, community.general)
        reply = await post_reply(forum, community.plain, topic.tid)

        stored = await forum.topics.get(topic.tid)
        assert stored.post_count == 2
        assert stored.last_post_time == reply.post.timestamp
        assert await forum.topics.get_reply_pids(topic.tid) == [reply.pid]
        assert await store.sorted_set_score(Keys.CATEGORY_TIDS_POSTS.format(cid=community.general), topic.tid) == 2

    @pytest.mark.asyncio
    async def test_cannot_reply_to_hidden_topic(self, forum, community):
        topic = await post_topic(forum, community.ta, community.general, target_role="ta")
        with pytest.raises(NoPrivilegesError):
            await post_reply(forum, community.student, topic.tid)

    @pytest.mark.asyncio
    async def test_missing_topic(self, forum, community):
        with pytest.raises(InvalidTopicError):
            await post_reply(forum, community.plain, 12345)

    @pytest.mark.asyncio
    async def test_empty_reply(self, forum, community):
        topic = await post_topic(forum, community.student, community.general)
        with pytest.raises(ContentTooShortError):
            await post_reply(forum, community.plain, topic.tid, content="  ")


class TestTopicPosts:
    """Role-filtered topic pages."""

    async def _build(self, forum, community):
        topic = await post_topic(forum, community.student, community.general)
        public = await post_reply(forum, community.plain, topic.tid, content="public")
        staff = await post_reply(forum, community.ta, topic.tid, content="staff only", target_role="ta")
        last = await post_reply(forum, community.student, topic.tid, content="later public")
        return topic, public, staff, last

    @pytest.mark.asyncio
    async def test_students_do_not_see_restricted_posts(self, forum, community):
        topic, public, staff, last = await self._build(forum, community)

        posts = await forum.content.get_topic_posts(topic.tid, community.student)
        assert [p.pid for p in posts] == [topic.pid, public.pid, last.pid]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("who", ["ta", "professor", "admin"])
    async def test_instructors_see_everything(self, forum, community, who):
        topic, public, staff, last = await self._build(forum, community)

        posts = await forum.content.get_topic_posts(topic.tid, getattr(community, who))
        assert [p.pid for p in posts] == [topic.pid, public.pid, staff.pid, last.pid]

    @pytest.mark.asyncio
    async def test_guest_sees_unrestricted_posts(self, forum, community):
        topic, public, staff, last = await self._build(forum, community)

        posts = await forum.content.get_topic_posts(topic.tid, 0)
        assert staff.pid not in [p.pid for p in posts]
        assert len(posts) == 3

    @pytest.mark.asyncio
    async def test_slicing_applies_after_filtering(self, forum, community):
        topic, public, staff, last = await self._build(forum, community)

        posts = await forum.content.get_topic_posts(topic.tid, community.student, start=1, stop=2)
        assert [p.pid for p in posts] == [public.pid, last.pid]

    @pytest.mark.asyncio
    async def test_restricted_topic_hides_all_posts(self, forum, community):
        topic = await post_topic(forum, community.ta, community.general, target_role="ta")
        await post_reply(forum, community.professor, topic.tid)

        assert await forum.content.get_topic_posts(topic.tid, community.student) == []
        assert len(await forum.content.get_topic_posts(topic.tid, community.ta)) == 2

    @pytest.mark.asyncio
    async def test_unknown_topic(self, forum, community):
        assert await forum.content.get_topic_posts(999, community.admin) == []


class TestPostFilter:
    """Read-time filtering through the privilege service."""

    @pytest.mark.asyncio
    async def test_filter_hides_restricted_posts_from_students(self, forum, community):
        topic = await post_topic(forum, community.student, community.general)
        staff = await post_reply(forum, community.ta, topic.tid, target_role="ta")
        pids = [topic.pid, staff.pid]

        assert await forum.privileges.filter_posts(Privilege.TOPICS_READ, pids, community.student) == [topic.pid]
        assert await forum.privileges.filter_posts(Privilege.TOPICS_READ, pids, community.ta) == pids

    @pytest.mark.asyncio
    async def test_visibility_grows_with_role(self, forum, community):
        open_topic = await post_topic(forum, community.student, community.general)
        hidden_topic = await post_topic(forum, community.ta, community.general, target_role="ta")
        pids = [open_topic.pid, hidden_topic.pid]
        pids.append((await post_reply(forum, community.ta, open_topic.tid, target_role="ta")).pid)
        pids.append((await post_reply(forum, community.plain, open_topic.tid)).pid)
        pids.append((await post_reply(forum, community.professor, hidden_topic.tid)).pid)

        ladder = [0, community.plain, community.student, community.ta, community.professor, community.admin]
        visible = [set(await forum.privileges.filter_posts(Privilege.TOPICS_READ, pids, uid)) for uid in ladder]

        for lower, higher in zip(visible, visible[1:]):
            assert lower <= higher
        assert visible[-1] == set(pids)

    @pytest.mark.asyncio
    async def test_filter_preserves_order_and_drops_missing(self, forum, community):
        first = await post_topic(forum, community.student, community.general)
        second = await post_topic(forum, community.student, community.general)

        result = await forum.privileges.filter(Privilege.TOPICS_READ, [second.pid, 999, first.pid], community.plain)
        assert result == [second.pid, first.pid]

    @pytest.mark.asyncio
    async def test_filter_topics(self, forum, community):
        open_topic = await post_topic(forum, community.student, community.general)
        hidden_topic = await post_topic(forum, community.ta, community.general, target_role="ta")
        tids = [hidden_topic.tid, open_topic.tid]

        assert await forum.privileges.filter(Privilege.TOPICS_READ, tids, community.student, kind="topics") == [
            open_topic.tid
        ]
        assert await forum.privileges.filter(Privilege.TOPICS_READ, tids, community.ta, kind="topics") == tids

    @pytest.mark.asyncio
    async def test_unknown_kind(self, forum):
        with pytest.raises(ValueError):
            await forum.privileges.filter(Privilege.TOPICS_READ, [1], 1, kind="chats")


class TestTeasers:
    """Teasers never leak restricted replies."""

    @pytest.mark.asyncio
    async def test_student_teaser_skips_restricted_reply(self, forum, community):
        topic = await post_topic(forum, community.student, community.general)
        public = await post_reply(forum, community.plain, topic.tid)
        staff = await post_reply(forum, community.ta, topic.tid, target_role="ta")

        [student_teaser] = await forum.content.get_teasers([topic.tid], community.student)
        [ta_teaser] = await forum.content.get_teasers([topic.tid], community.ta)

        assert student_teaser.pid == public.pid
        assert ta_teaser.pid == staff.pid

    @pytest.mark.asyncio
    async def test_falls_back_to_main_post(self, forum, community):
        topic = await post_topic(forum, community.student, community.general)
        await post_reply(forum, community.ta, topic.tid, target_role="ta")

        [teaser] = await forum.content.get_teasers([topic.tid], community.student)
        assert teaser.pid == topic.pid

    @pytest.mark.asyncio
    async def test_hidden_topic_and_missing_topic(self, forum, community):
        hidden = await post_topic(forum, community.ta, community.general, target_role="ta")
        assert await forum.content.get_teasers([hidden.tid, 999], community.student) == [None, None]


class TestIndexInvariant:
    """A topic is in the restricted index exactly when it carries a targetRole."""

    @pytest.mark.asyncio
    async def test_index_matches_tags(self, forum, community):
        requests = [
            (community.ta, "ta"),
            (community.student, "ta"),
            (community.professor, "ta"),
            (community.plain, None),
            (community.admin, "ta"),
            (community.ta, "bogus"),
        ]
        for uid, role in requests:
            await post_topic(forum, uid, community.general, target_role=role)

        tids = await forum.topics.get_category_tids(Keys.CATEGORY_TIDS.format(cid=community.general))
        tagged = {t.tid for t in await forum.topics.get_many(tids) if t.target_role}
        assert tagged == set(await forum.restrictions.restricted_tids(community.general))
        assert len(tagged) == 3
