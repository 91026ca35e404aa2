"""
Integration tests for the atomic operations of the code and token repositories
"""
from datetime import datetime, timedelta

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.one_time_code_repository import OneTimeCodeRepository
from src.adapter.repositories.reset_token_repository import ResetTokenRepository
from src.domain.entities import OneTimeCode, ResetToken

NOW = datetime(2024, 1, 1, 12, 0, 0)


def make_code(code_hash: str = "a" * 64) -> OneTimeCode:
    return OneTimeCode(
        identifier="7", code_hash=code_hash, expires_at=NOW + timedelta(minutes=10), created_at=NOW
    )


@pytest.mark.asyncio
async def test_increment_attempts_counts_in_database(db_session: AsyncSession):
    repository = OneTimeCodeRepository(db_session)
    await repository.replace(make_code())

    for _ in range(3):
        assert await repository.increment_attempts("7")
    await db_session.commit()

    record = await repository.get("7")
    assert record.attempt_count == 3
    assert await repository.increment_attempts("missing") is False


@pytest.mark.asyncio
async def test_replace_resets_attempts_and_hash(db_session: AsyncSession):
    repository = OneTimeCodeRepository(db_session)
    await repository.replace(make_code("a" * 64))
    await repository.increment_attempts("7")

    await repository.replace(make_code("b" * 64))
    await db_session.commit()

    record = await repository.get("7")
    assert record.code_hash == "b" * 64
    assert record.attempt_count == 0


@pytest.mark.asyncio
async def test_conditional_delete_has_single_winner(db_session: AsyncSession):
    """
    Given a live code
    When two verifications both try to delete it
    Then exactly one of them succeeds
    """
    repository = OneTimeCodeRepository(db_session)
    await repository.replace(make_code())
    await db_session.commit()

    first = await repository.delete_if_matches("7", "a" * 64)
    second = await repository.delete_if_matches("7", "a" * 64)

    assert (first, second) == (True, False)
    assert await repository.get("7") is None


@pytest.mark.asyncio
async def test_conditional_delete_requires_matching_hash(db_session: AsyncSession):
    repository = OneTimeCodeRepository(db_session)
    await repository.replace(make_code())

    assert await repository.delete_if_matches("7", "b" * 64) is False
    assert await repository.get("7") is not None


@pytest.mark.asyncio
async def test_code_can_be_reissued_after_consumption(db_session: AsyncSession):
    repository = OneTimeCodeRepository(db_session)
    await repository.replace(make_code("a" * 64))
    await repository.delete_if_matches("7", "a" * 64)

    await repository.replace(make_code("b" * 64))
    await db_session.commit()

    assert (await repository.get("7")).code_hash == "b" * 64


@pytest.mark.asyncio
async def test_token_delete_respects_window(db_session: AsyncSession):
    repository = ResetTokenRepository(db_session)
    await repository.replace(ResetToken(identifier="7", token_hash="t" * 64, issued_at=NOW))
    await db_session.commit()

    # Issued before the window start: not consumable
    assert await repository.delete_if_valid("7", "t" * 64, NOW + timedelta(seconds=1)) is False
    assert await repository.delete_if_valid("7", "t" * 64, NOW) is True
    assert await repository.delete_if_valid("7", "t" * 64, NOW) is False
