"""
Reset Token Manager

Issues and consumes short-lived tokens proving a code was verified.
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from src.app.services.identity_resolution import resolve_record_identifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    Identifier,
    ResetToken,
    VerificationFailure,
    VerificationResult,
)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


@dataclass(frozen=True)
class IssuedToken:
    """Plain token returned to the client; only its hash is persisted"""

    identifier: Identifier
    token: str
    issued_at: datetime
    expires_at: datetime

    @property
    def expires_in(self) -> int:
        return int((self.expires_at - self.issued_at).total_seconds())


class ResetTokenManager:
    """
    Manages reset tokens inside the caller's unit of work. Never commits.

    Business Rules:
    - Token is a cryptographically random URL-safe string
    - Validity window is measured from issuance, not from the code request
    - Consumption deletes the token; a failed attempt leaves it in place
    - Expired and already-consumed tokens can never be consumed
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ttl: timedelta = timedelta(minutes=10),
        token_bytes: int = 32,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.uow = uow
        self.ttl = ttl
        self.token_bytes = token_bytes
        self.clock = clock

    async def issue(self, identifier: Identifier) -> IssuedToken:
        """
        Issue a token for a freshly verified identifier.

        Args:
            identifier: Canonical record identifier from a successful verify

        Raises:
            LookupError: if the identifier does not resolve to a user
        """
        record_identifier = await resolve_record_identifier(self.uow, identifier)
        if record_identifier is None:
            raise LookupError("Cannot issue a reset token for an unknown identifier")

        token = secrets.token_urlsafe(self.token_bytes)
        now = self.clock()

        await self.uow.reset_tokens.replace(
            ResetToken(
                identifier=record_identifier.value,
                token_hash=hash_token(token),
                issued_at=now,
            )
        )

        return IssuedToken(
            identifier=record_identifier,
            token=token,
            issued_at=now,
            expires_at=now + self.ttl,
        )

    async def consume(self, identifier: Identifier, token: str) -> VerificationResult:
        """
        Validate and delete a token.

        Returns:
            VerificationResult; failure reasons are expired, mismatch and
            already_consumed. Callers must not expose which one occurred.
        """
        record_identifier = await resolve_record_identifier(self.uow, identifier)
        if record_identifier is None:
            return VerificationResult.failed(VerificationFailure.already_consumed)

        key = record_identifier.value
        record = await self.uow.reset_tokens.get(key)
        if record is None:
            return VerificationResult.failed(VerificationFailure.already_consumed)

        now = self.clock()
        if now - record.issued_at > self.ttl:
            return VerificationResult.failed(VerificationFailure.expired)

        supplied_hash = hash_token(token)
        if not hmac.compare_digest(supplied_hash, record.token_hash):
            return VerificationResult.failed(VerificationFailure.mismatch)

        # A concurrent consumer may have won between the read and this delete
        if not await self.uow.reset_tokens.delete_if_valid(key, supplied_hash, now - self.ttl):
            return VerificationResult.failed(VerificationFailure.already_consumed)

        return VerificationResult.success(record_identifier)

    async def sweep(self) -> int:
        """Delete tokens past their window"""
        return await self.uow.reset_tokens.delete_issued_before(self.clock() - self.ttl)
