"""Category storage."""

import logging
from typing import Any, List, Optional

from ....config.constants import Keys, PrivilegeDefault
from ....core.exceptions import InvalidCategoryError
from ..entities.category import Category

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Creates and reads categories."""

    def __init__(self, store):
        self.store = store

    async def create(
        self,
        name: str,
        description: str = "",
        post_queue: bool = True,
        privilege_default: PrivilegeDefault = PrivilegeDefault.ALLOW,
    ) -> Category:
        cid = await self.store.increment(Keys.NEXT_CID)
        category = Category(
            cid=cid,
            name=name,
            description=description,
            post_queue=post_queue,
            privilege_default=PrivilegeDefault(privilege_default),
        )
        await self.store.set_object(Keys.CATEGORY.format(cid=cid), category.to_hash())
        await self.store.sorted_set_add(Keys.CATEGORIES, cid, cid)
        logger.info(f"Created category {cid} ({name})")
        return category

    async def get(self, cid: int) -> Optional[Category]:
        data = await self.store.get_object(Keys.CATEGORY.format(cid=cid))
        return Category.from_hash(data) if data else None

    async def get_or_raise(self, cid: int) -> Category:
        category = await self.get(cid)
        if category is None:
            raise InvalidCategoryError(details={"cid": cid})
        return category

    async def get_all(self) -> List[Category]:
        cids = await self.store.sorted_set_range(Keys.CATEGORIES)
        rows = await self.store.get_objects([Keys.CATEGORY.format(cid=cid) for cid in cids])
        return [Category.from_hash(row) for row in rows if row]

    async def exists(self, cid: int) -> bool:
        return await self.store.exists(Keys.CATEGORY.format(cid=cid))

    async def set_field(self, cid: int, field: str, value: Any) -> None:
        await self.get_or_raise(cid)
        await self.store.set_object_field(Keys.CATEGORY.format(cid=cid), field, value)
