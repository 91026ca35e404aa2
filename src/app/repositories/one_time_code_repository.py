from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.domain.entities import OneTimeCode


class IOneTimeCodeRepository(ABC):
    """OneTimeCode repository interface - application layer"""

    @abstractmethod
    async def replace(self, code: OneTimeCode) -> OneTimeCode:
        """Store a code, superseding any existing code for the same identifier"""
        pass

    @abstractmethod
    async def get(self, identifier: str) -> Optional[OneTimeCode]:
        """Get the live code for an identifier"""
        pass

    @abstractmethod
    async def increment_attempts(self, identifier: str) -> bool:
        """Increment attempt_count in place. Returns False if no code exists."""
        pass

    @abstractmethod
    async def delete_if_matches(self, identifier: str, code_hash: str) -> bool:
        """
        Atomically delete the code if its hash matches.
        Returns True only for the caller that deleted it.
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete codes whose expiry has passed, returning the count"""
        pass
