from datetime import datetime
from typing import Optional

from sqlmodel import delete, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.one_time_code_repository import IOneTimeCodeRepository
from src.domain.entities import OneTimeCode


class OneTimeCodeRepository(IOneTimeCodeRepository):
    """OneTimeCode repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def replace(self, code: OneTimeCode) -> OneTimeCode:
        """Store a code, superseding any existing code for the same identifier"""
        existing = await self.get(code.identifier)
        if existing is not None:
            existing.code_hash = code.code_hash
            existing.attempt_count = 0
            existing.expires_at = code.expires_at
            existing.created_at = code.created_at
            code = existing
        self.session.add(code)
        await self.session.flush()
        await self.session.refresh(code)
        return code

    async def get(self, identifier: str) -> Optional[OneTimeCode]:
        """Get the live code for an identifier, bypassing stale identity-map state"""
        stmt = (
            select(OneTimeCode)
            .where(OneTimeCode.identifier == identifier)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def increment_attempts(self, identifier: str) -> bool:
        """Increment attempt_count in the database, not in Python"""
        stmt = (
            update(OneTimeCode)
            .where(OneTimeCode.identifier == identifier)
            .values(attempt_count=OneTimeCode.attempt_count + 1)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_if_matches(self, identifier: str, code_hash: str) -> bool:
        """Conditional delete; the affected-row count picks the single winner"""
        stmt = delete(OneTimeCode).where(
            OneTimeCode.identifier == identifier,
            OneTimeCode.code_hash == code_hash,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def delete_expired(self, now: datetime) -> int:
        """Delete codes whose expiry has passed"""
        stmt = delete(OneTimeCode).where(OneTimeCode.expires_at < now)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
