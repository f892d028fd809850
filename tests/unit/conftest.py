import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email_for_update = AsyncMock()
    uow.users.get_by_username_or_email = AsyncMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.update_password_hash = AsyncMock(return_value=True)

    uow.recovery_records = MagicMock()
    uow.recovery_records.create = AsyncMock(side_effect=lambda record: record)
    uow.recovery_records.find_active_by_code = AsyncMock(return_value=None)
    uow.recovery_records.find_active_by_token = AsyncMock(return_value=None)
    uow.recovery_records.invalidate_active = AsyncMock(return_value=0)
    uow.recovery_records.increment_attempts = AsyncMock(return_value=0)
    uow.recovery_records.mark_used = AsyncMock(return_value=True)
    uow.recovery_records.delete = AsyncMock()
    return uow
