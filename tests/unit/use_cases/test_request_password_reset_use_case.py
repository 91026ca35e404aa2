"""
Unit tests for RequestPasswordResetUseCase
"""
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.otp_manager import IssuedCode
from src.app.use_cases.password_reset import RequestPasswordResetUseCase
from src.app.use_cases.password_reset.request_password_reset_use_case import GENERIC_MESSAGE
from src.domain.entities import Identifier, parse_identifier


@pytest.fixture
def otp_manager():
    manager = MagicMock()
    manager.request = AsyncMock()
    return manager


@pytest.fixture
def dispatcher():
    dispatcher = MagicMock()
    dispatcher.send = AsyncMock(return_value=True)
    return dispatcher


def issued_code() -> IssuedCode:
    return IssuedCode(
        identifier=Identifier.for_user(42),
        user_id=42,
        address="user@example.com",
        code="123456",
        expires_at=datetime(2024, 1, 1, 12, 10),
    )


@pytest.mark.asyncio
async def test_known_identifier_commits_then_dispatches(mock_uow, otp_manager, dispatcher):
    otp_manager.request.return_value = issued_code()
    order = []
    mock_uow.commit.side_effect = lambda: order.append("commit")
    dispatcher.send.side_effect = lambda address, code: order.append("send") or True

    use_case = RequestPasswordResetUseCase(mock_uow, otp_manager, dispatcher)
    result = await use_case.execute(parse_identifier("user@example.com"))

    assert result.is_ok()
    assert result.value.ok is True
    assert result.value.message == GENERIC_MESSAGE
    assert order == ["commit", "send"]
    dispatcher.send.assert_awaited_once_with("user@example.com", "123456")

    audit_event = mock_uow.audit_events.create.call_args[0][0]
    assert audit_event.action == "password_reset_requested"
    assert audit_event.user_id == 42
    assert "123456" not in str(audit_event.event_metadata)


@pytest.mark.asyncio
async def test_unknown_identifier_gets_same_acknowledgment(mock_uow, otp_manager, dispatcher):
    otp_manager.request.return_value = None

    use_case = RequestPasswordResetUseCase(mock_uow, otp_manager, dispatcher)
    result = await use_case.execute(parse_identifier("ghost@example.com"))

    assert result.is_ok()
    assert result.value.message == GENERIC_MESSAGE
    dispatcher.send.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_failed_delivery_still_acknowledges(mock_uow, otp_manager, dispatcher):
    otp_manager.request.return_value = issued_code()
    dispatcher.send.return_value = False

    use_case = RequestPasswordResetUseCase(mock_uow, otp_manager, dispatcher)
    result = await use_case.execute(parse_identifier(42))

    assert result.is_ok()
    assert result.value.message == GENERIC_MESSAGE
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_scheduled_delivery_runs_after_response(mock_uow, otp_manager, dispatcher):
    """
    Given a scheduler for post-response work
    When a known identifier requests a code
    Then delivery is handed to the scheduler instead of awaited inline
    And running the scheduled job sends the code
    """
    issued = issued_code()
    otp_manager.request.return_value = issued
    scheduled = []

    use_case = RequestPasswordResetUseCase(mock_uow, otp_manager, dispatcher)
    result = await use_case.execute(
        parse_identifier(42), schedule=lambda func, *args: scheduled.append((func, args))
    )

    assert result.is_ok()
    dispatcher.send.assert_not_called()
    assert scheduled == [(use_case.deliver, (issued,))]

    func, args = scheduled[0]
    await func(*args)
    dispatcher.send.assert_awaited_once_with("user@example.com", "123456")


@pytest.mark.asyncio
async def test_unknown_identifier_schedules_nothing(mock_uow, otp_manager, dispatcher):
    otp_manager.request.return_value = None
    scheduled = []

    use_case = RequestPasswordResetUseCase(mock_uow, otp_manager, dispatcher)
    await use_case.execute(
        parse_identifier("ghost@example.com"), schedule=lambda *args: scheduled.append(args)
    )

    assert scheduled == []
