"""Secondary indexes over user fields.

Both index kinds apply an update as remove-then-add, each step skipped
when the value did not change. The two steps are separate store calls and
are not atomic.
"""

from typing import Optional


class UidMapping:
    """Value to uid lookup, e.g. ``username:uid``: member is the value, score the uid."""

    def __init__(self, store, key: str):
        self.store = store
        self.key = key

    async def upsert(self, old: Optional[str], new: Optional[str], owner: int) -> None:
        if old == new:
            return
        if old:
            await self.store.sorted_set_remove(self.key, old)
        if new:
            await self.store.sorted_set_add(self.key, owner, new)

    async def get_uid(self, value: str) -> Optional[int]:
        score = await self.store.sorted_set_score(self.key, value)
        return int(score) if score is not None else None

    async def exists(self, value: str) -> bool:
        return await self.store.is_sorted_set_member(self.key, value)


class SortedValueIndex:
    """Case-folded search list, e.g. ``username:sorted``: members ``{value}:{uid}`` at score 0."""

    def __init__(self, store, key: str):
        self.store = store
        self.key = key

    @staticmethod
    def member(value: str, owner: int) -> str:
        return f"{value.lower()}:{owner}"

    async def upsert(self, old: Optional[str], new: Optional[str], owner: int) -> None:
        if old == new:
            return
        if old:
            await self.store.sorted_set_remove(self.key, self.member(old, owner))
        if new:
            await self.store.sorted_set_add(self.key, 0, self.member(new, owner))
