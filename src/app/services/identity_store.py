from abc import ABC, abstractmethod
from typing import Optional


class IdentityStoreError(Exception):
    """Base error raised by secondary identity store adapters"""


class IdentityStoreNotFoundError(IdentityStoreError):
    """The secondary store has no account with the given id"""


class IdentityStoreUnavailableError(IdentityStoreError):
    """Transient condition: timeout, network error, throttling, 5xx"""


class IdentityStoreRejectedError(IdentityStoreError):
    """The secondary store refused the write outright"""


class IIdentityStore(ABC):
    """
    Secondary identity store interface - application layer.

    The store is independently authoritative for its own copy of credentials
    and roles. It may throttle and may reject unknown ids.
    """

    @abstractmethod
    async def update_password(self, secondary_id: str, plaintext: str) -> None:
        """Set the account password"""
        pass

    @abstractmethod
    async def update_role(self, secondary_id: str, role: str) -> None:
        """Set the role custom claim"""
        pass

    @abstractmethod
    async def get_role(self, secondary_id: str) -> Optional[str]:
        """Read the role custom claim, None when unset"""
        pass
