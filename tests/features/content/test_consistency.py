"""Tests for index repair."""

import pytest

from forum_access.config.constants import Keys

pytestmark = pytest.mark.usefixtures("clock")


async def post_topic(forum, uid, cid, target_role=None):
    data = {"cid": cid, "title": "Topic", "content": "Body"}
    if target_role:
        data["targetRole"] = target_role
    return await forum.content.create_topic(uid, data)


class TestReconcile:
    """Hash fields win over the secondary indexes."""

    @pytest.mark.asyncio
    async def test_consistent_category_untouched(self, forum, community):
        await post_topic(forum, community.ta, community.general, target_role="ta")
        await post_topic(forum, community.student, community.general)

        report = await forum.consistency.reconcile(community.general)

        assert not report.changed
        assert report.to_dict()["topicsAdded"] == []

    @pytest.mark.asyncio
    async def test_missing_topic_entry_restored(self, forum, store, community):
        result = await post_topic(forum, community.ta, community.general, target_role="ta")
        await store.sorted_set_remove(Keys.CATEGORY_TIDS_INSTRUCTOR.format(cid=community.general), result.tid)

        report = await forum.consistency.reconcile(community.general)

        assert report.topics_added == [result.tid]
        assert await forum.restrictions.restricted_tids(community.general) == [result.tid]

    @pytest.mark.asyncio
    async def test_stale_topic_entry_removed(self, forum, store, community):
        result = await post_topic(forum, community.student, community.general)
        await forum.restrictions.index_topic(community.general, result.tid, 1)

        report = await forum.consistency.reconcile(community.general)

        assert report.topics_removed == [result.tid]
        assert await forum.restrictions.restricted_tids(community.general) == []

    @pytest.mark.asyncio
    async def test_tag_without_index_after_partial_write(self, forum, store, community):
        result = await post_topic(forum, community.student, community.general)
        await store.set_object_field(Keys.TOPIC.format(tid=result.tid), "targetRole", "ta")

        report = await forum.consistency.reconcile(community.general)

        assert report.topics_added == [result.tid]
        assert report.changed

    @pytest.mark.asyncio
    async def test_post_index_repaired(self, forum, store, community):
        topic = await post_topic(forum, community.student, community.general)
        reply = await forum.content.reply(community.ta, {"tid": topic.tid, "content": "x", "targetRole": "ta"})
        await forum.restrictions.deindex_post(community.general, reply.pid)
        await forum.restrictions.index_post(community.general, topic.pid, 1)

        report = await forum.consistency.reconcile(community.general)

        assert report.posts_added == [reply.pid]
        assert report.posts_removed == [topic.pid]
        assert await forum.restrictions.restricted_pids(community.general) == [reply.pid]

    @pytest.mark.asyncio
    async def test_resolved_index_repaired(self, forum, store, community):
        resolved = await post_topic(forum, community.student, community.general)
        stale = await post_topic(forum, community.student, community.general)
        await store.set_object_field(Keys.TOPIC.format(tid=resolved.tid), "resolved", 1)
        await forum.resolutions.index(community.general, stale.tid, 1)

        report = await forum.consistency.reconcile(community.general)

        assert report.resolved_added == [resolved.tid]
        assert report.resolved_removed == [stale.tid]
        assert await forum.resolutions.resolved_tids(community.general) == [resolved.tid]

    @pytest.mark.asyncio
    async def test_repair_is_idempotent(self, forum, store, community):
        result = await post_topic(forum, community.ta, community.general, target_role="ta")
        await store.sorted_set_remove(Keys.CATEGORY_TIDS_INSTRUCTOR.format(cid=community.general), result.tid)

        await forum.consistency.reconcile(community.general)
        second = await forum.consistency.reconcile(community.general)

        assert not second.changed
