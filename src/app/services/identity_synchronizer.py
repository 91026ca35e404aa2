"""
Identity Synchronizer

Mirrors committed primary-store changes to the secondary identity store.
The primary store is the system of record: nothing here can roll it back,
and every outcome is advisory.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, List

from src.app.services.identity_store import (
    IIdentityStore,
    IdentityStoreNotFoundError,
    IdentityStoreRejectedError,
    IdentityStoreUnavailableError,
)
from src.domain.entities import Identifier, SyncOutcome, SyncStatus, SyncTarget, UserRole

logger = logging.getLogger(__name__)

SYNC_FAILED_WARNING = "secondary sync failed"


def collect_warnings(outcomes: Iterable[SyncOutcome]) -> List[str]:
    """User-visible warnings; details stay in the outcomes and the log"""
    return [SYNC_FAILED_WARNING for outcome in outcomes if not outcome.succeeded]


class IdentitySynchronizer:
    """
    Best-effort writer for the secondary identity store.

    Policy:
    - One direct attempt, bounded by timeout_seconds, no retries
    - Unknown remote account -> failure (accounts are never provisioned here)
    - Timeout or transient error -> partial (primary already updated)
    - Outright rejection -> failure
    - Re-applying the current state reports success
    """

    def __init__(self, identity_store: IIdentityStore, timeout_seconds: float = 5.0):
        self.identity_store = identity_store
        self.timeout_seconds = timeout_seconds

    async def sync_password(
        self, identifier: Identifier, secondary_store_id: str, new_password: str
    ) -> SyncOutcome:
        """
        Mirror a password change.

        A repeated write of the same password is accepted by the store, which
        keeps this idempotent without reading the remote credential.
        """

        async def write() -> str:
            await self.identity_store.update_password(secondary_store_id, new_password)
            return "secondary password updated"

        return await self._attempt(identifier.value, "password", write)

    async def sync_role(self, secondary_store_id: str, role: UserRole) -> SyncOutcome:
        """Mirror a role change, skipping the write when already in sync"""
        role_value = UserRole(role).value

        async def write() -> str:
            current = await self.identity_store.get_role(secondary_store_id)
            if current == role_value:
                return "secondary role already up to date"
            await self.identity_store.update_role(secondary_store_id, role_value)
            return "secondary role updated"

        return await self._attempt(secondary_store_id, "role", write)

    async def _attempt(
        self, identifier: str, field: str, call: Callable[[], Awaitable[str]]
    ) -> SyncOutcome:
        try:
            message = await asyncio.wait_for(call(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            return self._outcome(identifier, field, SyncStatus.partial, "secondary store timed out")
        except IdentityStoreUnavailableError:
            return self._outcome(identifier, field, SyncStatus.partial, "secondary store unavailable")
        except IdentityStoreNotFoundError:
            return self._outcome(identifier, field, SyncStatus.failure, "secondary account not found")
        except IdentityStoreRejectedError:
            return self._outcome(
                identifier, field, SyncStatus.failure, "secondary store rejected the update"
            )

        return self._outcome(identifier, field, SyncStatus.success, message)

    def _outcome(
        self, identifier: str, field: str, status: SyncStatus, message: str
    ) -> SyncOutcome:
        if status == SyncStatus.success:
            logger.info(f"Secondary {field} sync for {identifier}: {message}")
        else:
            logger.warning(f"Secondary {field} sync for {identifier} {status.value}: {message}")

        return SyncOutcome(
            identifier=identifier,
            target=SyncTarget.secondary,
            status=status,
            message=message,
        )
