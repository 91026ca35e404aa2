"""
Sync Role Use Case

Pushes a role to the secondary identity store for callers that already
updated the primary record.
"""

from libs.result import Error, Result, Return
from src.app.services.identity_synchronizer import IdentitySynchronizer, collect_warnings
from src.domain.entities import UserRole
from .dtos import SyncRoleResponse


class SyncRoleUseCase:
    """
    Use case for mirroring a role to the secondary store.

    Business Rules:
    - Role must be one of: user, admin
    - Secondary store id must be non-empty
    - Outcome is advisory: partial and failure are reported as warnings
    """

    def __init__(self, synchronizer: IdentitySynchronizer):
        self.synchronizer = synchronizer

    async def execute(self, secondary_store_id: str, role: str) -> Result[SyncRoleResponse]:
        try:
            user_role = UserRole(role)
        except ValueError:
            return Return.err(
                Error("INVALID_ROLE", f"Invalid role: {role}. Must be one of: user, admin")
            )

        secondary_store_id = secondary_store_id.strip()
        if not secondary_store_id:
            return Return.err(Error("VALIDATION_ERROR", "Secondary store id is required"))

        outcome = await self.synchronizer.sync_role(secondary_store_id, user_role)

        return Return.ok(
            SyncRoleResponse(
                status=outcome.status,
                warnings=collect_warnings([outcome]),
                outcome=outcome,
            )
        )
