"""Custom profile field definitions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ....core.exceptions import InvalidFieldDefinitionError


class FieldType(str, Enum):
    """Kinds of custom profile fields an administrator can define."""

    INPUT_TEXT = "input-text"
    INPUT_LINK = "input-link"
    INPUT_NUMBER = "input-number"
    INPUT_DATE = "input-date"
    SELECT = "select"
    SELECT_MULTI = "select-multi"


@dataclass(frozen=True)
class CustomFieldDefinition:
    """One administrator-defined profile field.

    Stored as the hash ``user-custom-field:{key}``; ``select_options`` is
    kept there as newline-separated text under ``select-options``.
    """

    key: str
    name: str
    type: FieldType = FieldType.INPUT_TEXT
    min_rep: int = 0
    select_options: Tuple[str, ...] = field(default_factory=tuple)
    icon: str = ""
    visibility: str = "all"

    def __post_init__(self):
        if not self.key or not self.key.strip():
            raise InvalidFieldDefinitionError(self.key)
        if not isinstance(self.type, FieldType):
            try:
                object.__setattr__(self, "type", FieldType(self.type))
            except ValueError:
                raise InvalidFieldDefinitionError(self.key, details={"type": self.type}) from None

    @staticmethod
    def parse_options(text: Optional[str]) -> Tuple[str, ...]:
        """Split newline-separated options, dropping blank lines."""
        if not text:
            return ()
        return tuple(line for line in str(text).split("\n") if line)

    @classmethod
    def from_hash(cls, data: Dict[str, Any]) -> "CustomFieldDefinition":
        try:
            min_rep = int(float(data.get("min:rep") or 0))
        except ValueError:
            min_rep = 0
        return cls(
            key=data.get("key", ""),
            name=data.get("name") or data.get("key", ""),
            type=data.get("type") or FieldType.INPUT_TEXT,
            min_rep=min_rep,
            select_options=cls.parse_options(data.get("select-options")),
            icon=data.get("icon", ""),
            visibility=data.get("visibility") or "all",
        )

    def to_hash(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "type": self.type.value,
            "min:rep": self.min_rep,
            "select-options": "\n".join(self.select_options),
            "icon": self.icon,
            "visibility": self.visibility,
        }
