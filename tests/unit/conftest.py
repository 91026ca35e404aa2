import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_identifier = AsyncMock(return_value=None)
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.update_password_hash = AsyncMock(side_effect=lambda user, value: user)
    uow.users.update_role = AsyncMock(side_effect=lambda user, role: user)

    uow.one_time_codes = MagicMock()
    uow.one_time_codes.replace = AsyncMock(side_effect=lambda record: record)
    uow.one_time_codes.get = AsyncMock(return_value=None)
    uow.one_time_codes.increment_attempts = AsyncMock(return_value=True)
    uow.one_time_codes.delete_if_matches = AsyncMock(return_value=True)
    uow.one_time_codes.delete_expired = AsyncMock(return_value=0)

    uow.reset_tokens = MagicMock()
    uow.reset_tokens.replace = AsyncMock(side_effect=lambda record: record)
    uow.reset_tokens.get = AsyncMock(return_value=None)
    uow.reset_tokens.delete_if_valid = AsyncMock(return_value=True)
    uow.reset_tokens.delete_issued_before = AsyncMock(return_value=0)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()

    return uow
