"""
Sweep Expired Records Use Case

Reclaims expired codes and tokens. Not needed for correctness: every read
re-checks expiry.
"""

from libs.result import Result, Return
from src.app.services.otp_manager import OtpManager
from src.app.services.reset_token_manager import ResetTokenManager
from src.app.services.unit_of_work import UnitOfWork
from .dtos import SweepExpiredRecordsResponse


class SweepExpiredRecordsUseCase:
    def __init__(
        self,
        uow: UnitOfWork,
        otp_manager: OtpManager,
        token_manager: ResetTokenManager,
    ):
        self.uow = uow
        self.otp_manager = otp_manager
        self.token_manager = token_manager

    async def execute(self) -> Result[SweepExpiredRecordsResponse]:
        async with self.uow:
            codes_deleted = await self.otp_manager.sweep()
            tokens_deleted = await self.token_manager.sweep()
            await self.uow.commit()

        return Return.ok(
            SweepExpiredRecordsResponse(
                codes_deleted=codes_deleted, tokens_deleted=tokens_deleted
            )
        )
