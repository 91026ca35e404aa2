"""
OTP Lifecycle Manager

Generates, stores, verifies and single-use-invalidates password reset codes.
"""

import hashlib
import hmac
import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from src.app.services.identity_resolution import resolve_record_identifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    Identifier,
    OneTimeCode,
    VerificationFailure,
    VerificationResult,
)

logger = logging.getLogger(__name__)


def hash_code(code: str) -> str:
    return hashlib.sha256(code.encode()).hexdigest()


@dataclass(frozen=True)
class IssuedCode:
    """Plain code handed to the dispatcher; only its hash is persisted"""

    identifier: Identifier
    user_id: int
    address: str
    code: str
    expires_at: datetime


class OtpManager:
    """
    Manages one-time codes inside the caller's unit of work.

    Business Rules:
    - Fixed-length numeric code, expires a fixed offset after issue
    - At most one live code per user; a new request overwrites the old one
    - Unknown identifiers never get a code, and the caller cannot tell
    - Every verification attempt is counted and committed before comparing
    - Attempts beyond max_attempts fail even with the correct code
    - A verified code is deleted by a conditional delete, so of two
      concurrent verifications only one can succeed

    The manager never commits, except for the attempt counter which must
    survive a failure during the comparison.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        code_length: int = 6,
        ttl: timedelta = timedelta(minutes=10),
        max_attempts: int = 5,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.uow = uow
        self.code_length = code_length
        self.ttl = ttl
        self.max_attempts = max_attempts
        self.clock = clock

    def _generate_code(self) -> str:
        return "".join(secrets.choice(string.digits) for _ in range(self.code_length))

    async def request(self, identifier: Identifier) -> Optional[IssuedCode]:
        """
        Mint and store a new code for the user behind identifier.

        Returns:
            IssuedCode for dispatch, or None if no such user exists
        """
        user = await self.uow.users.get_by_identifier(identifier)
        if user is None:
            logger.info(f"Reset code requested for unknown identifier {identifier}")
            return None

        record_identifier = Identifier.for_user(user.id)
        code = self._generate_code()
        now = self.clock()

        record = OneTimeCode(
            identifier=record_identifier.value,
            code_hash=hash_code(code),
            attempt_count=0,
            expires_at=now + self.ttl,
            created_at=now,
        )
        record = await self.uow.one_time_codes.replace(record)

        return IssuedCode(
            identifier=record_identifier,
            user_id=user.id,
            address=user.email,
            code=code,
            expires_at=record.expires_at,
        )

    async def verify(self, identifier: Identifier, supplied_code: str) -> VerificationResult:
        """
        Check a supplied code.

        On success the code is deleted (uncommitted); the caller commits so the
        deletion lands atomically with whatever it does next.
        """
        record_identifier = await resolve_record_identifier(self.uow, identifier)
        if record_identifier is None:
            return VerificationResult.failed(VerificationFailure.not_found)

        key = record_identifier.value

        # Count the attempt first and make it durable
        if not await self.uow.one_time_codes.increment_attempts(key):
            return VerificationResult.failed(VerificationFailure.not_found)
        await self.uow.commit()

        record = await self.uow.one_time_codes.get(key)
        if record is None:
            return VerificationResult.failed(VerificationFailure.not_found)

        if record.attempt_count > self.max_attempts:
            logger.warning(f"Reset code attempt limit reached for {key}")
            return VerificationResult.failed(VerificationFailure.too_many_attempts)

        if self.clock() > record.expires_at:
            return VerificationResult.failed(VerificationFailure.expired)

        supplied_hash = hash_code(supplied_code)
        if not hmac.compare_digest(supplied_hash, record.code_hash):
            return VerificationResult.failed(VerificationFailure.mismatch)

        # Only one concurrent caller can delete the row
        if not await self.uow.one_time_codes.delete_if_matches(key, supplied_hash):
            return VerificationResult.failed(VerificationFailure.not_found)

        return VerificationResult.success(record_identifier)

    async def sweep(self) -> int:
        """Delete expired codes. Optional: every read re-checks expiry."""
        return await self.uow.one_time_codes.delete_expired(self.clock())
