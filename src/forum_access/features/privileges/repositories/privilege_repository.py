"""Per-category privilege sets.

``cid:{cid}:privileges:{action}`` holds the principals allowed to perform
an action: role names (``professor``), group names, or the pseudo-groups
``registered-users`` and ``guests``. An empty set means the action is not
configured for the category.
"""

import logging
import time
from typing import Dict, FrozenSet, Iterable, Sequence

from ....config.constants import Keys

logger = logging.getLogger(__name__)


class PrivilegeRepository:
    """Stores principal sets per category and action."""

    def __init__(self, store):
        self.store = store

    @staticmethod
    def _key(cid: int, action: str) -> str:
        return Keys.CATEGORY_PRIVILEGE.format(cid=cid, action=action)

    async def give(self, cid: int, action: str, principals: Iterable[str]) -> None:
        now = int(time.time() * 1000)
        names = list(principals)
        await self.store.sorted_set_add_bulk(self._key(cid, action), [(now, name) for name in names])
        logger.info(f"Gave {action} on category {cid} to {names}")

    async def rescind(self, cid: int, action: str, principals: Iterable[str]) -> None:
        names = list(principals)
        await self.store.sorted_set_remove(self._key(cid, action), *names)
        logger.info(f"Rescinded {action} on category {cid} from {names}")

    async def replace(self, cid: int, action: str, principals: Iterable[str]) -> None:
        """Make ``principals`` the exact set for ``action``."""
        await self.store.delete(self._key(cid, action))
        await self.give(cid, action, principals)

    async def get_principals(self, cid: int, action: str) -> FrozenSet[str]:
        return frozenset(await self.store.sorted_set_range(self._key(cid, action)))

    async def get_all(self, cid: int, actions: Sequence[str]) -> Dict[str, FrozenSet[str]]:
        return {action: await self.get_principals(cid, action) for action in actions}
