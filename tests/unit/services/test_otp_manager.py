"""
Unit tests for OtpManager

Repositories are mocked; the database-side atomicity of the attempt counter
and the conditional delete is covered by the repository integration tests.
"""
from datetime import datetime, timedelta

import pytest

from src.app.services.otp_manager import OtpManager, hash_code
from src.domain.entities import (
    OneTimeCode,
    User,
    VerificationFailure,
    parse_identifier,
)
from tests.fixtures.fakes import MutableClock

NOW = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def clock():
    return MutableClock(NOW)


@pytest.fixture
def manager(mock_uow, clock):
    return OtpManager(mock_uow, code_length=6, ttl=timedelta(minutes=10), max_attempts=5, clock=clock)


def make_user(user_id: int = 42) -> User:
    return User(id=user_id, email="user@example.com", password_hash="x.y")


def make_record(code: str = "123456", attempt_count: int = 1, expires_at: datetime = None) -> OneTimeCode:
    return OneTimeCode(
        identifier="42",
        code_hash=hash_code(code),
        attempt_count=attempt_count,
        expires_at=expires_at or NOW + timedelta(minutes=10),
        created_at=NOW,
    )


@pytest.mark.asyncio
async def test_request_stores_hashed_code_under_user_id(manager, mock_uow):
    """
    Given a registered user
    When a code is requested by email
    Then a 6-digit code is issued, stored hashed under the user's id
    And it expires 10 minutes after issue
    """
    mock_uow.users.get_by_identifier.return_value = make_user()

    issued = await manager.request(parse_identifier("user@example.com"))

    assert issued is not None
    assert len(issued.code) == 6 and issued.code.isdigit()
    assert issued.address == "user@example.com"
    assert issued.identifier.value == "42"
    assert issued.expires_at == NOW + timedelta(minutes=10)

    stored = mock_uow.one_time_codes.replace.call_args[0][0]
    assert stored.identifier == "42"
    assert stored.code_hash == hash_code(issued.code)
    assert stored.code_hash != issued.code
    assert stored.attempt_count == 0
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_request_for_unknown_identifier_issues_nothing(manager, mock_uow):
    mock_uow.users.get_by_identifier.return_value = None

    issued = await manager.request(parse_identifier("ghost@example.com"))

    assert issued is None
    mock_uow.one_time_codes.replace.assert_not_called()


@pytest.mark.asyncio
async def test_verify_correct_code_succeeds_and_deletes(manager, mock_uow):
    mock_uow.one_time_codes.get.return_value = make_record("123456")

    result = await manager.verify(parse_identifier(42), "123456")

    assert result.ok
    assert result.identifier.value == "42"
    mock_uow.one_time_codes.increment_attempts.assert_awaited_once_with("42")
    mock_uow.one_time_codes.delete_if_matches.assert_awaited_once_with("42", hash_code("123456"))
    # Only the attempt counter is committed here
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_verify_by_email_uses_same_record(manager, mock_uow):
    mock_uow.users.get_by_email.return_value = make_user()
    mock_uow.one_time_codes.get.return_value = make_record("123456")

    result = await manager.verify(parse_identifier("USER@example.com"), "123456")

    assert result.ok
    mock_uow.users.get_by_email.assert_awaited_once_with("user@example.com")
    mock_uow.one_time_codes.get.assert_awaited_once_with("42")


@pytest.mark.asyncio
async def test_verify_wrong_code_is_mismatch_and_keeps_record(manager, mock_uow):
    mock_uow.one_time_codes.get.return_value = make_record("123456")

    result = await manager.verify(parse_identifier(42), "654321")

    assert not result.ok
    assert result.reason == VerificationFailure.mismatch
    mock_uow.one_time_codes.delete_if_matches.assert_not_called()
    # The attempt is still counted and made durable
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_verify_after_expiry_fails(manager, mock_uow, clock):
    mock_uow.one_time_codes.get.return_value = make_record("123456")
    clock.advance(minutes=10, seconds=1)

    result = await manager.verify(parse_identifier(42), "123456")

    assert result.reason == VerificationFailure.expired
    mock_uow.one_time_codes.delete_if_matches.assert_not_called()


@pytest.mark.asyncio
async def test_verify_at_exact_expiry_still_succeeds(manager, mock_uow, clock):
    mock_uow.one_time_codes.get.return_value = make_record("123456")
    clock.advance(minutes=10)

    result = await manager.verify(parse_identifier(42), "123456")

    assert result.ok


@pytest.mark.asyncio
async def test_fifth_attempt_may_still_succeed(manager, mock_uow):
    mock_uow.one_time_codes.get.return_value = make_record("123456", attempt_count=5)

    result = await manager.verify(parse_identifier(42), "123456")

    assert result.ok


@pytest.mark.asyncio
async def test_sixth_attempt_fails_even_with_correct_code(manager, mock_uow):
    """
    Given a code that has already been tried 5 times
    When the correct code is submitted
    Then verification fails with too_many_attempts and nothing is deleted
    """
    mock_uow.one_time_codes.get.return_value = make_record("123456", attempt_count=6)

    result = await manager.verify(parse_identifier(42), "123456")

    assert result.reason == VerificationFailure.too_many_attempts
    mock_uow.one_time_codes.delete_if_matches.assert_not_called()


@pytest.mark.asyncio
async def test_verify_without_live_code_is_not_found(manager, mock_uow):
    mock_uow.one_time_codes.increment_attempts.return_value = False

    result = await manager.verify(parse_identifier(42), "123456")

    assert result.reason == VerificationFailure.not_found
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_verify_unknown_email_is_not_found(manager, mock_uow):
    mock_uow.users.get_by_email.return_value = None

    result = await manager.verify(parse_identifier("ghost@example.com"), "123456")

    assert result.reason == VerificationFailure.not_found
    mock_uow.one_time_codes.increment_attempts.assert_not_called()


@pytest.mark.asyncio
async def test_verify_losing_concurrent_delete_fails(manager, mock_uow):
    mock_uow.one_time_codes.get.return_value = make_record("123456")
    mock_uow.one_time_codes.delete_if_matches.return_value = False

    result = await manager.verify(parse_identifier(42), "123456")

    assert not result.ok
    assert result.reason == VerificationFailure.not_found


@pytest.mark.asyncio
async def test_sweep_deletes_codes_expired_at_clock_time(manager, mock_uow):
    mock_uow.one_time_codes.delete_expired.return_value = 3

    deleted = await manager.sweep()

    assert deleted == 3
    mock_uow.one_time_codes.delete_expired.assert_awaited_once_with(NOW)
