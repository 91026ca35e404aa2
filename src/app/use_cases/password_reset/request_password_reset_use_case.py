"""
Request Password Reset Use Case

Issues a one-time code and sends it out of band.
"""

import logging
from typing import Any, Callable, Optional

from libs.result import Result, Return
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.otp_manager import IssuedCode, OtpManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, Identifier
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "If the account exists, a password reset code has been sent"


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset code.

    Business Rules:
    - Fixed-length numeric code, expiry set by the OTP manager
    - A new request supersedes any unconsumed code for the same user
    - No identifier enumeration: the response never depends on whether the
      identifier exists or whether delivery worked
    - Code is dispatched only after it is committed, and off the response path
      when a scheduler is given, so latency does not reveal whether the
      identifier exists
    - Audit event created for security tracking
    """

    def __init__(
        self,
        uow: UnitOfWork,
        otp_manager: OtpManager,
        dispatcher: INotificationDispatcher,
    ):
        self.uow = uow
        self.otp_manager = otp_manager
        self.dispatcher = dispatcher

    async def deliver(self, issued: IssuedCode) -> None:
        delivered = await self.dispatcher.send(issued.address, issued.code)
        if not delivered:
            logger.error(f"Password reset code for user {issued.user_id} was not delivered")

    async def execute(
        self,
        identifier: Identifier,
        schedule: Optional[Callable[..., Any]] = None,
    ) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            identifier: Canonical identifier parsed at the API boundary
            schedule: Runs deliver(issued) after the response, e.g.
                BackgroundTasks.add_task; delivery is awaited inline without it

        Returns:
            Result with the generic acknowledgment
        """
        async with self.uow:
            issued = await self.otp_manager.request(identifier)

            if issued is None:
                return Return.ok(RequestPasswordResetResponse(message=GENERIC_MESSAGE))

            audit_event = AuditEvent(
                user_id=issued.user_id,
                action="password_reset_requested",
                event_metadata={"identifier_kind": identifier.kind.value},
            )
            await self.uow.audit_events.create(audit_event)

            await self.uow.commit()

        # External call happens outside the transaction
        if schedule is not None:
            schedule(self.deliver, issued)
        else:
            await self.deliver(issued)

        return Return.ok(RequestPasswordResetResponse(message=GENERIC_MESSAGE))
