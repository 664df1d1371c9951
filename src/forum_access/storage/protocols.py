"""Storage protocol for forum-access.

The forum keeps its state in an ordered key-value store: hashes addressed by
key, and sorted sets of string members ordered by a numeric score. Every
method is atomic on its own; nothing spans calls. Values come back as
strings, the way Redis returns them, and callers coerce types.
"""

from abc import abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

Member = Union[str, int]


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for the hash and sorted-set operations the forum needs."""

    # Hashes

    @abstractmethod
    async def get_object(self, key: str) -> Optional[Dict[str, str]]:
        """Get a whole hash, or None when the key does not exist."""
        ...

    @abstractmethod
    async def get_objects(self, keys: Sequence[str]) -> List[Optional[Dict[str, str]]]:
        """Get several hashes, preserving order."""
        ...

    @abstractmethod
    async def get_object_field(self, key: str, field: str) -> Optional[str]:
        ...

    @abstractmethod
    async def get_object_fields(self, key: str, fields: Sequence[str]) -> Dict[str, Optional[str]]:
        ...

    @abstractmethod
    async def set_object(self, key: str, data: Dict[str, Any]) -> None:
        """Set several fields; ``None`` values are skipped."""
        ...

    @abstractmethod
    async def set_object_field(self, key: str, field: str, value: Any) -> None:
        ...

    @abstractmethod
    async def delete_object_field(self, key: str, field: str) -> None:
        ...

    @abstractmethod
    async def increment_object_field(self, key: str, field: str, amount: int = 1) -> int:
        ...

    # Keys

    @abstractmethod
    async def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def increment(self, key: str) -> int:
        """Increment a counter and return the new value."""
        ...

    # Sorted sets

    @abstractmethod
    async def sorted_set_add(self, key: str, score: float, member: Member) -> None:
        ...

    @abstractmethod
    async def sorted_set_add_bulk(self, key: str, items: Iterable[Tuple[float, Member]]) -> None:
        ...

    @abstractmethod
    async def sorted_set_remove(self, key: str, *members: Member) -> None:
        ...

    @abstractmethod
    async def sorted_set_range(self, key: str, start: int = 0, stop: int = -1) -> List[str]:
        """Members by ascending score; ``stop`` is inclusive and may be negative."""
        ...

    @abstractmethod
    async def sorted_set_rev_range(self, key: str, start: int = 0, stop: int = -1) -> List[str]:
        """Members by descending score."""
        ...

    @abstractmethod
    async def sorted_set_range_by_score(self, key: str, minimum: float, maximum: float) -> List[str]:
        ...

    @abstractmethod
    async def sorted_set_score(self, key: str, member: Member) -> Optional[float]:
        ...

    @abstractmethod
    async def is_sorted_set_member(self, key: str, member: Member) -> bool:
        ...

    @abstractmethod
    async def is_sorted_set_members(self, key: str, members: Sequence[Member]) -> List[bool]:
        ...

    @abstractmethod
    async def sorted_set_card(self, key: str) -> int:
        ...

    async def close(self) -> None:
        """Release connections."""
        ...


def encode_value(value: Any) -> str:
    """Encode a value the way it is persisted (Redis stores strings)."""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)
