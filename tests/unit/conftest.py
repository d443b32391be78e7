import pytest
from unittest.mock import AsyncMock, MagicMock

from libs.result import Return
from src.app.services.credential_hasher import CredentialHasher


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with the account repository"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock(return_value=Return.ok(None))
    uow.rollback = AsyncMock()

    uow.accounts = MagicMock()
    uow.accounts.get_by_email = AsyncMock(return_value=Return.ok(None))
    uow.accounts.get_by_live_token = AsyncMock(return_value=Return.ok(None))
    uow.accounts.create = AsyncMock(side_effect=lambda account: Return.ok(account))
    uow.accounts.set_reset_token = AsyncMock(return_value=Return.ok(None))
    uow.accounts.set_credential_and_clear_token = AsyncMock(return_value=Return.ok(True))
    return uow


@pytest.fixture
def hasher():
    # Minimum bcrypt cost keeps the suite fast
    return CredentialHasher(rounds=4)
