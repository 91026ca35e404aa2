"""
Verify Reset Code Use Case

Exchanges a valid one-time code for a short-lived reset token.
"""

from libs.result import Error, Result, Return
from src.app.services.otp_manager import OtpManager
from src.app.services.reset_token_manager import ResetTokenManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, Identifier, VerificationFailure
from .dtos import VerifyResetCodeResponse

# Unknown identifiers and lost races look like a wrong code to the caller
FAILURE_ERRORS = {
    VerificationFailure.not_found: Error("MISMATCH", "Invalid verification code"),
    VerificationFailure.mismatch: Error("MISMATCH", "Invalid verification code"),
    VerificationFailure.expired: Error(
        "EXPIRED", "Verification code has expired. Please request a new one."
    ),
    VerificationFailure.too_many_attempts: Error(
        "TOO_MANY_ATTEMPTS", "Too many attempts. Please request a new code."
    ),
}


class VerifyResetCodeUseCase:
    """
    Use case for verifying a password reset code.

    Business Rules:
    - Malformed codes are rejected before any state is touched
    - Every well-formed attempt counts toward the attempt ceiling
    - Code consumption and token issuance commit together
    - Error messages never reveal remaining attempts or expiry times
    """

    def __init__(
        self,
        uow: UnitOfWork,
        otp_manager: OtpManager,
        token_manager: ResetTokenManager,
    ):
        self.uow = uow
        self.otp_manager = otp_manager
        self.token_manager = token_manager

    def _validate_code(self, code: str) -> Result[None]:
        if not (code.isascii() and code.isdigit() and len(code) == self.otp_manager.code_length):
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    f"Code must be {self.otp_manager.code_length} digits",
                )
            )
        return Return.ok(None)

    async def execute(self, identifier: Identifier, code: str) -> Result[VerifyResetCodeResponse]:
        """
        Execute verify reset code use case.

        Returns:
            Result with the reset token, or Error

        Errors:
            - VALIDATION_ERROR: Code is not a well-formed numeric code
            - MISMATCH: Wrong code, or no live code for the identifier
            - EXPIRED: Code is past its expiry
            - TOO_MANY_ATTEMPTS: Attempt ceiling exceeded
        """
        validation = self._validate_code(code)
        if validation.is_err():
            return Return.err(validation.error)

        async with self.uow:
            verification = await self.otp_manager.verify(identifier, code)
            if not verification.ok:
                return Return.err(FAILURE_ERRORS[verification.reason])

            issued = await self.token_manager.issue(verification.identifier)

            audit_event = AuditEvent(
                user_id=verification.identifier.user_id,
                action="password_reset_code_verified",
                event_metadata={"token_expires_at": issued.expires_at.isoformat()},
            )
            await self.uow.audit_events.create(audit_event)

            # Code deletion and token issuance land together
            await self.uow.commit()

        return Return.ok(
            VerifyResetCodeResponse(reset_token=issued.token, expires_in=issued.expires_in)
        )
