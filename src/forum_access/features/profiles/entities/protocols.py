"""Protocol interfaces for the profiles feature."""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class IdentityProvider(Protocol):
    """Credential and session operations used by password changes."""

    @abstractmethod
    async def hash_password(self, password: str) -> str:
        """Hash a plaintext password for storage."""
        ...

    @abstractmethod
    async def verify_password(self, uid: int, password: Optional[str]) -> bool:
        """Check ``password`` against the stored hash of ``uid``."""
        ...

    @abstractmethod
    async def has_password(self, uid: int) -> bool:
        """Whether ``uid`` has a local password at all."""
        ...

    @abstractmethod
    async def is_administrator(self, uid: int) -> bool:
        """Whether ``uid`` is a forum administrator."""
        ...

    @abstractmethod
    async def revoke_sessions(self, uid: int) -> None:
        """Invalidate every login session of ``uid``."""
        ...
