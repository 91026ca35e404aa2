"""
Complete Password Reset Use Case

Consumes the reset token, stores the new password hash and mirrors the
change to the secondary identity store.
"""

import re

from libs.result import Error, Result, Return
from src.app.services.identity_synchronizer import IdentitySynchronizer, collect_warnings
from src.app.services.password_hasher import HashingError, PasswordHasher
from src.app.services.reset_token_manager import ResetTokenManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, SyncOutcome
from .dtos import CompletePasswordResetCommand, CompletePasswordResetResponse

INVALID_TOKEN_ERROR = Error("INVALID", "Invalid or expired password reset token")


class CompletePasswordResetUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - Password policy and confirmation are checked before touching state
    - Token must be valid, unexpired and unused; every token failure maps to
      the same INVALID error
    - A hashing failure aborts the reset and nothing is committed
    - Primary store commit happens before any secondary store call
    - Secondary sync problems never fail the reset; they become warnings
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_manager: ResetTokenManager,
        hasher: PasswordHasher,
        synchronizer: IdentitySynchronizer,
        min_password_length: int = 8,
        max_password_length: int = 128,
    ):
        self.uow = uow
        self.token_manager = token_manager
        self.hasher = hasher
        self.synchronizer = synchronizer
        self.min_password_length = min_password_length
        self.max_password_length = max_password_length

    def _validate_password(self, password: str) -> Result[None]:
        """
        Validate password strength.

        Returns:
            Result with None if valid, or WEAK_PASSWORD Error
        """
        if len(password) < self.min_password_length:
            return Return.err(
                Error(
                    "WEAK_PASSWORD",
                    f"Password must be at least {self.min_password_length} characters long",
                )
            )

        if len(password) > self.max_password_length:
            return Return.err(
                Error(
                    "WEAK_PASSWORD",
                    f"Password must be at most {self.max_password_length} characters long",
                )
            )

        if not re.search(r"[A-Za-z]", password) or not re.search(r"\d", password):
            return Return.err(
                Error("WEAK_PASSWORD", "Password must contain letters and digits")
            )

        return Return.ok(None)

    async def execute(
        self, command: CompletePasswordResetCommand
    ) -> Result[CompletePasswordResetResponse]:
        """
        Execute complete password reset use case.

        Errors:
            - VALIDATION_ERROR: confirm_password does not match
            - WEAK_PASSWORD: Password does not meet the policy
            - INVALID: Token invalid, expired or already used
            - HASHING_FAILURE: New hash could not be computed
        """
        if command.confirm_password is not None and command.confirm_password != command.new_password:
            return Return.err(Error("VALIDATION_ERROR", "Passwords don't match"))

        password_validation = self._validate_password(command.new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            consumption = await self.token_manager.consume(command.identifier, command.token)
            if not consumption.ok:
                return Return.err(INVALID_TOKEN_ERROR)

            user = await self.uow.users.get_by_id(consumption.identifier.user_id)
            if user is None:
                return Return.err(INVALID_TOKEN_ERROR)

            try:
                password_hash = self.hasher.hash(command.new_password)
            except HashingError:
                # Leaving the block rolls back the token consumption too
                return Return.err(Error("HASHING_FAILURE", "Unable to reset password"))

            await self.uow.users.update_password_hash(user, password_hash)

            audit_event = AuditEvent(
                user_id=user.id,
                action="password_reset_completed",
                event_metadata={"secondary_linked": user.secondary_store_id is not None},
            )
            await self.uow.audit_events.create(audit_event)

            record_identifier = consumption.identifier
            secondary_store_id = user.secondary_store_id

            await self.uow.commit()

        outcomes = [
            SyncOutcome.primary_committed(record_identifier.value, "password updated")
        ]
        if secondary_store_id:
            outcomes.append(
                await self.synchronizer.sync_password(
                    record_identifier, secondary_store_id, command.new_password
                )
            )

        return Return.ok(
            CompletePasswordResetResponse(
                message="Password has been reset successfully",
                warnings=collect_warnings(outcomes),
                outcomes=outcomes,
            )
        )
