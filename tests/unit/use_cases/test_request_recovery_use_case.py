"""
Unit tests for RequestRecoveryUseCase

Tests all business logic with mocked dependencies.
"""
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.repositories.recovery_record_repository import ActiveRecordFilter
from src.app.services.notifier import DeliveryResult
from src.app.use_cases.recovery.request_recovery_use_case import RequestRecoveryUseCase
from src.domain.entities import RecoveryKind, User


def make_user(email: str = "user@example.com") -> User:
    return User(
        id=uuid4(),
        email=email,
        username="someone",
        password_hash="hashed_password",
    )


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.send_recovery_message = AsyncMock(
        return_value=DeliveryResult(success=True)
    )
    return notifier


@pytest.mark.asyncio
async def test_successful_password_reset_request(mock_uow, notifier):
    """Record is created with a fresh token, zero attempts and unused"""
    # Arrange
    user = make_user()
    mock_uow.users.get_by_email_for_update.return_value = user

    use_case = RequestRecoveryUseCase(mock_uow, notifier)

    # Act
    before = datetime.utcnow()
    result = await use_case.execute(RecoveryKind.password, user.email)

    # Assert
    assert result.is_ok()
    data = result.value
    assert data.status == "sent"
    assert "password reset code" in data.message

    mock_uow.recovery_records.create.assert_called_once()
    record = mock_uow.recovery_records.create.call_args.args[0]
    assert record.user_id == user.id
    assert record.delivery_address == user.email
    assert record.kind == RecoveryKind.password
    assert record.attempts == 0
    assert record.used is False
    assert len(record.token) == 64  # 32 bytes hex encoded
    assert data.expires_at == record.expires_at

    window = record.expires_at - before
    assert timedelta(minutes=59) < window <= timedelta(hours=1, seconds=5)


@pytest.mark.asyncio
async def test_prior_records_of_same_kind_are_invalidated(mock_uow, notifier):
    """Older active records for the account and kind are invalidated first"""
    # Arrange
    user = make_user()
    mock_uow.users.get_by_email_for_update.return_value = user

    use_case = RequestRecoveryUseCase(mock_uow, notifier)

    # Act
    result = await use_case.execute(RecoveryKind.username, user.email)

    # Assert
    assert result.is_ok()
    mock_uow.recovery_records.invalidate_active.assert_called_once()
    record_filter = mock_uow.recovery_records.invalidate_active.call_args.args[0]
    assert isinstance(record_filter, ActiveRecordFilter)
    assert record_filter.user_id == user.id
    assert record_filter.kind == RecoveryKind.username


@pytest.mark.asyncio
async def test_code_is_stored_before_delivery(mock_uow, notifier):
    """The record already carries its code when the notifier is called"""
    # Arrange
    user = make_user()
    mock_uow.users.get_by_email_for_update.return_value = user
    commits_at_send = []

    async def send(*args):
        commits_at_send.append(mock_uow.commit.await_count)
        return DeliveryResult(success=True)

    notifier.send_recovery_message.side_effect = send

    use_case = RequestRecoveryUseCase(mock_uow, notifier)

    # Act
    result = await use_case.execute(RecoveryKind.password, user.email)

    # Assert
    assert result.is_ok()
    created = mock_uow.recovery_records.create.call_args.args[0]
    assert len(created.code) == 6 and created.code.isdigit()

    notifier.send_recovery_message.assert_called_once()
    address, code, kind, expires_at = notifier.send_recovery_message.call_args.args
    assert address == user.email
    assert code == created.code
    assert kind == RecoveryKind.password
    assert expires_at == created.expires_at

    assert commits_at_send == [1]
    assert mock_uow.commit.await_count == 1
    mock_uow.recovery_records.delete.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_email_has_no_side_effects(mock_uow, notifier):
    """No email enumeration: success response, nothing created or sent"""
    # Arrange
    mock_uow.users.get_by_email_for_update.return_value = None

    use_case = RequestRecoveryUseCase(mock_uow, notifier)

    # Act
    result = await use_case.execute(RecoveryKind.password, "nobody@example.com")

    # Assert
    assert result.is_ok()
    assert result.value.status == "sent"

    mock_uow.recovery_records.invalidate_active.assert_not_called()
    mock_uow.recovery_records.create.assert_not_called()
    notifier.send_recovery_message.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_response_shape_does_not_reveal_account_existence(mock_uow, notifier):
    """Existing and unknown emails get the same fields and message"""
    # Arrange
    user = make_user()
    use_case = RequestRecoveryUseCase(mock_uow, notifier)

    # Act
    mock_uow.users.get_by_email_for_update.return_value = None
    missing = await use_case.execute(RecoveryKind.password, "nobody@example.com")

    mock_uow.users.get_by_email_for_update.return_value = user
    found = await use_case.execute(RecoveryKind.password, user.email)

    # Assert
    missing_data = missing.value.model_dump()
    found_data = found.value.model_dump()
    assert missing_data.keys() == found_data.keys()
    assert missing_data["status"] == found_data["status"]
    assert missing_data["message"] == found_data["message"]


@pytest.mark.asyncio
async def test_delivery_failure_deletes_record(mock_uow, notifier):
    """Failed delivery removes the just-created record and reports failure"""
    # Arrange
    user = make_user()
    mock_uow.users.get_by_email_for_update.return_value = user
    notifier.send_recovery_message.return_value = DeliveryResult(success=False)

    use_case = RequestRecoveryUseCase(mock_uow, notifier)

    # Act
    result = await use_case.execute(RecoveryKind.password, user.email)

    # Assert
    assert result.is_err()
    assert result.error.code == "DELIVERY_FAILED"

    created = mock_uow.recovery_records.create.call_args.args[0]
    mock_uow.recovery_records.delete.assert_called_once_with(created)


@pytest.mark.asyncio
async def test_notifier_exception_is_treated_as_delivery_failure(mock_uow, notifier):
    """A raising notifier still triggers the compensating delete"""
    # Arrange
    user = make_user()
    mock_uow.users.get_by_email_for_update.return_value = user
    notifier.send_recovery_message.side_effect = RuntimeError("smtp down")

    use_case = RequestRecoveryUseCase(mock_uow, notifier)

    # Act
    result = await use_case.execute(RecoveryKind.username, user.email)

    # Assert
    assert result.is_err()
    assert result.error.code == "DELIVERY_FAILED"
    mock_uow.recovery_records.delete.assert_called_once()


@pytest.mark.asyncio
async def test_recovery_window_is_configurable(mock_uow, notifier):
    """Expiry follows the injected recovery window"""
    # Arrange
    user = make_user()
    mock_uow.users.get_by_email_for_update.return_value = user

    use_case = RequestRecoveryUseCase(mock_uow, notifier, recovery_window=timedelta(minutes=10))

    # Act
    before = datetime.utcnow()
    result = await use_case.execute(RecoveryKind.password, user.email)

    # Assert
    assert result.is_ok()
    window = result.value.expires_at - before
    assert timedelta(minutes=9) < window <= timedelta(minutes=10, seconds=5)


@pytest.mark.asyncio
async def test_each_request_gets_a_new_token(mock_uow, notifier):
    """Tokens are freshly generated per request"""
    # Arrange
    user = make_user()
    mock_uow.users.get_by_email_for_update.return_value = user

    use_case = RequestRecoveryUseCase(mock_uow, notifier)

    # Act
    await use_case.execute(RecoveryKind.password, user.email)
    await use_case.execute(RecoveryKind.password, user.email)

    # Assert
    first, second = [c.args[0] for c in mock_uow.recovery_records.create.call_args_list]
    assert first.token != second.token
