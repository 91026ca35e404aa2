from datetime import datetime
from typing import Optional

from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.reset_token_repository import IResetTokenRepository
from src.domain.entities import ResetToken


class ResetTokenRepository(IResetTokenRepository):
    """ResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def replace(self, token: ResetToken) -> ResetToken:
        """Store a token, superseding any existing token for the same identifier"""
        existing = await self.get(token.identifier)
        if existing is not None:
            existing.token_hash = token.token_hash
            existing.issued_at = token.issued_at
            token = existing
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get(self, identifier: str) -> Optional[ResetToken]:
        """Get the token issued for an identifier"""
        stmt = (
            select(ResetToken)
            .where(ResetToken.identifier == identifier)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def delete_if_valid(
        self, identifier: str, token_hash: str, issued_after: datetime
    ) -> bool:
        """Conditional delete; the affected-row count picks the single winner"""
        stmt = delete(ResetToken).where(
            ResetToken.identifier == identifier,
            ResetToken.token_hash == token_hash,
            ResetToken.issued_at >= issued_after,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def delete_issued_before(self, cutoff: datetime) -> int:
        """Delete tokens issued before cutoff"""
        stmt = delete(ResetToken).where(ResetToken.issued_at < cutoff)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
