"""Tests for the in-memory store."""

import pytest

from forum_access.storage import MemoryStore


@pytest.fixture
def memory():
    return MemoryStore()


class TestHashes:

    @pytest.mark.asyncio
    async def test_values_stored_as_strings(self, memory):
        await memory.set_object("user:1", {"uid": 1, "confirmed": True, "banned": False, "skip": None})

        assert await memory.get_object("user:1") == {"uid": "1", "confirmed": "1", "banned": "0"}

    @pytest.mark.asyncio
    async def test_missing_object(self, memory):
        assert await memory.get_object("user:404") is None
        assert await memory.get_object_field("user:404", "uid") is None
        assert await memory.get_objects(["user:404"]) == [None]

    @pytest.mark.asyncio
    async def test_returned_hash_is_a_copy(self, memory):
        await memory.set_object("post:1", {"content": "a"})
        data = await memory.get_object("post:1")
        data["content"] = "b"
        assert await memory.get_object_field("post:1", "content") == "a"

    @pytest.mark.asyncio
    async def test_delete_last_field_removes_key(self, memory):
        await memory.set_object_field("topic:1", "targetRole", "ta")
        await memory.delete_object_field("topic:1", "targetRole")
        assert not await memory.exists("topic:1")

    @pytest.mark.asyncio
    async def test_increment_field(self, memory):
        assert await memory.increment_object_field("topic:1", "postcount") == 1
        assert await memory.increment_object_field("topic:1", "postcount", 5) == 6
        assert await memory.get_object_field("topic:1", "postcount") == "6"

    @pytest.mark.asyncio
    async def test_get_fields(self, memory):
        await memory.set_object("user:1", {"username": "alice"})
        assert await memory.get_object_fields("user:1", ["username", "email"]) == {
            "username": "alice",
            "email": None,
        }


class TestCounters:

    @pytest.mark.asyncio
    async def test_increment_and_delete(self, memory):
        assert await memory.increment("global:nextTid") == 1
        assert await memory.increment("global:nextTid") == 2
        await memory.delete("global:nextTid")
        assert await memory.increment("global:nextTid") == 1


class TestSortedSets:
    """Redis-compatible ordering and ranges."""

    @pytest.mark.asyncio
    async def test_order_by_score_then_member(self, memory):
        await memory.sorted_set_add_bulk("z", [(2, "b"), (1, "c"), (2, "a")])

        assert await memory.sorted_set_range("z") == ["c", "a", "b"]
        assert await memory.sorted_set_rev_range("z") == ["b", "a", "c"]

    @pytest.mark.asyncio
    async def test_inclusive_and_negative_ranges(self, memory):
        await memory.sorted_set_add_bulk("z", [(i, str(i)) for i in range(5)])

        assert await memory.sorted_set_range("z", 1, 2) == ["1", "2"]
        assert await memory.sorted_set_range("z", -2, -1) == ["3", "4"]
        assert await memory.sorted_set_rev_range("z", 0, 0) == ["4"]
        assert await memory.sorted_set_range("z", 3, 1) == []
        assert await memory.sorted_set_range("z", 10, 20) == []

    @pytest.mark.asyncio
    async def test_re_adding_updates_score(self, memory):
        await memory.sorted_set_add("z", 1, 7)
        await memory.sorted_set_add("z", 5, 7)

        assert await memory.sorted_set_score("z", 7) == 5.0
        assert await memory.sorted_set_card("z") == 1

    @pytest.mark.asyncio
    async def test_membership_and_removal(self, memory):
        await memory.sorted_set_add_bulk("z", [(1, 1), (2, 2)])

        assert await memory.is_sorted_set_members("z", [1, 3, 2]) == [True, False, True]
        await memory.sorted_set_remove("z", 1, 2)
        assert not await memory.exists("z")
        assert await memory.sorted_set_card("z") == 0

    @pytest.mark.asyncio
    async def test_range_by_score(self, memory):
        await memory.sorted_set_add_bulk("z", [(1, "a"), (5, "b"), (9, "c")])
        assert await memory.sorted_set_range_by_score("z", 1, 5) == ["a", "b"]
