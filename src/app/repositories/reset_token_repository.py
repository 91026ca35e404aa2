from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.domain.entities import ResetToken


class IResetTokenRepository(ABC):
    """ResetToken repository interface - application layer"""

    @abstractmethod
    async def replace(self, token: ResetToken) -> ResetToken:
        """Store a token, superseding any existing token for the same identifier"""
        pass

    @abstractmethod
    async def get(self, identifier: str) -> Optional[ResetToken]:
        """Get the token issued for an identifier"""
        pass

    @abstractmethod
    async def delete_if_valid(
        self, identifier: str, token_hash: str, issued_after: datetime
    ) -> bool:
        """
        Atomically delete the token if hash matches and it was issued after
        the given instant. Returns True only for the caller that deleted it.
        """
        pass

    @abstractmethod
    async def delete_issued_before(self, cutoff: datetime) -> int:
        """Delete tokens issued before cutoff, returning the count"""
        pass
