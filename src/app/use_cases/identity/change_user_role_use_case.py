"""
Change User Role Use Case

Changes a user's role in the primary store and mirrors it to the secondary
identity store.
"""

from libs.result import Error, Result, Return
from src.app.services.identity_synchronizer import IdentitySynchronizer, collect_warnings
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, Identifier, SyncOutcome, UserRole
from .dtos import ChangeUserRoleResponse


class ChangeUserRoleUseCase:
    """
    Use case for changing a user's role.

    Business Rules:
    - Role must be one of: user, admin
    - Primary store is updated and committed first, with an audit event
    - Secondary role claim is synced afterwards when the user is linked
    - Sync problems are reported as warnings, never rolled back
    """

    def __init__(self, uow: UnitOfWork, synchronizer: IdentitySynchronizer):
        self.uow = uow
        self.synchronizer = synchronizer

    async def execute(self, identifier: Identifier, new_role: str) -> Result[ChangeUserRoleResponse]:
        """
        Execute change user role use case.

        Errors:
            - INVALID_ROLE: Role is not recognised
            - NOT_FOUND: No user for the identifier
        """
        try:
            role = UserRole(new_role)
        except ValueError:
            return Return.err(
                Error("INVALID_ROLE", f"Invalid role: {new_role}. Must be one of: user, admin")
            )

        async with self.uow:
            user = await self.uow.users.get_by_identifier(identifier)
            if user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            old_role = UserRole(user.role).value
            await self.uow.users.update_role(user, role)

            audit_event = AuditEvent(
                user_id=user.id,
                action="role_changed",
                event_metadata={"old_role": old_role, "new_role": role.value},
            )
            await self.uow.audit_events.create(audit_event)

            user_id = user.id
            secondary_store_id = user.secondary_store_id

            await self.uow.commit()

        outcomes = [
            SyncOutcome.primary_committed(Identifier.for_user(user_id).value, "role updated")
        ]
        if secondary_store_id:
            outcomes.append(await self.synchronizer.sync_role(secondary_store_id, role))

        return Return.ok(
            ChangeUserRoleResponse(
                user_id=user_id,
                role=role.value,
                warnings=collect_warnings(outcomes),
                outcomes=outcomes,
            )
        )
