"""Storage of custom profile field definitions.

The ordered key list lives in ``user-custom-fields`` (scored by position)
and each definition in ``user-custom-field:{key}``.
"""

import logging
from typing import List, Sequence

from ....config.constants import Keys
from ....core.exceptions import InvalidFieldDefinitionError
from ..entities.custom_field import CustomFieldDefinition

logger = logging.getLogger(__name__)


class CustomFieldRepository:
    """Reads and replaces the set of custom field definitions."""

    def __init__(self, store):
        self.store = store

    async def get_keys(self) -> List[str]:
        return await self.store.sorted_set_range(Keys.CUSTOM_FIELDS, 0, -1)

    async def get_fields(self) -> List[CustomFieldDefinition]:
        """All definitions in their configured order; dangling keys are skipped."""
        keys = await self.get_keys()
        rows = await self.store.get_objects([Keys.CUSTOM_FIELD.format(key=key) for key in keys])
        fields = []
        for key, row in zip(keys, rows):
            if not row:
                logger.warning(f"Custom field {key} is listed but has no definition")
                continue
            fields.append(CustomFieldDefinition.from_hash(row))
        return fields

    async def save_fields(self, fields: Sequence[CustomFieldDefinition]) -> None:
        """Replace every definition with ``fields``, keeping their order.

        Raises:
            InvalidFieldDefinitionError: Duplicate keys
        """
        keys = [f.key for f in fields]
        duplicates = {key for key in keys if keys.count(key) > 1}
        if duplicates:
            raise InvalidFieldDefinitionError(sorted(duplicates)[0])

        old_keys = await self.get_keys()
        for key in old_keys:
            await self.store.delete(Keys.CUSTOM_FIELD.format(key=key))
        await self.store.delete(Keys.CUSTOM_FIELDS)

        for definition in fields:
            await self.store.set_object(Keys.CUSTOM_FIELD.format(key=definition.key), definition.to_hash())
        await self.store.sorted_set_add_bulk(
            Keys.CUSTOM_FIELDS, [(position, f.key) for position, f in enumerate(fields)]
        )
        logger.info(f"Saved {len(fields)} custom profile fields")
