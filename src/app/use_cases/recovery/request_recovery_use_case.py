"""
Request Recovery Use Case

Creates a fresh recovery record for a password reset or username recovery
and hands it to the notifier for delivery.
"""

import logging
import secrets
from datetime import datetime, timedelta

from libs.result import Error, Result, Return
from src.app.repositories.recovery_record_repository import ActiveRecordFilter
from src.app.services.notifier import DeliveryResult, INotifier, generate_verification_code
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RecoveryKind, RecoveryRecord
from .dtos import RequestRecoveryResponse

logger = logging.getLogger(__name__)

DEFAULT_RECOVERY_WINDOW = timedelta(hours=1)

SENT_MESSAGES = {
    RecoveryKind.password: "If an account with this email exists, a password reset code has been sent.",
    RecoveryKind.username: "If an account with this email exists, username recovery information has been sent.",
}

DELIVERY_FAILED_MESSAGES = {
    RecoveryKind.password: "Failed to send password reset email. Please try again.",
    RecoveryKind.username: "Failed to send username recovery email. Please try again.",
}


class RequestRecoveryUseCase:
    """
    Use case for requesting a password reset or username recovery.

    Business Rules:
    - No email enumeration (same response shape for valid/invalid emails)
    - Older active records of the same kind are invalidated first, so only
      the newest record can ever be completed
    - Token is 32 bytes from secrets, hex encoded
    - Record expires after the configured recovery window (default 1 hour)
    - The 6-digit code is stored with the record before delivery, so it
      works as soon as the message arrives
    - If delivery fails the new record is deleted again
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: INotifier,
        recovery_window: timedelta = DEFAULT_RECOVERY_WINDOW,
    ):
        self.uow = uow
        self.notifier = notifier
        self.recovery_window = recovery_window

    async def execute(self, kind: RecoveryKind, email: str) -> Result[RequestRecoveryResponse]:
        """
        Execute request recovery use case.

        Args:
            kind: Which recovery flow the record belongs to
            email: Address the account is registered with

        Returns:
            Result with the generic "sent" response, or Error

        Errors:
            - DELIVERY_FAILED: account exists but the message could not be sent
        """
        now = datetime.utcnow()
        expires_at = now + self.recovery_window

        async with self.uow:
            # Lock the account row so concurrent requests serialize here
            user = await self.uow.users.get_by_email_for_update(email)

            if user is None:
                # No side effects for unknown addresses
                return Return.ok(self._sent_response(kind, expires_at))

            invalidated = await self.uow.recovery_records.invalidate_active(
                ActiveRecordFilter(kind=kind, now=now, user_id=user.id)
            )

            record = RecoveryRecord(
                user_id=user.id,
                delivery_address=user.email,
                token=secrets.token_hex(32),
                code=generate_verification_code(),
                kind=kind,
                attempts=0,
                used=False,
                expires_at=expires_at,
            )
            record = await self.uow.recovery_records.create(record)
            await self.uow.commit()

            logger.info(
                "Created %s recovery record %s for user %s (%d invalidated)",
                kind.value,
                record.id,
                user.id,
                invalidated,
            )

            delivery = await self._deliver(record)

            if not delivery.success:
                await self.uow.recovery_records.delete(record)
                await self.uow.commit()
                logger.warning("Delivery failed, recovery record %s deleted", record.id)
                return Return.err(Error("DELIVERY_FAILED", DELIVERY_FAILED_MESSAGES[kind]))

            return Return.ok(self._sent_response(kind, expires_at))

    async def _deliver(self, record: RecoveryRecord) -> DeliveryResult:
        try:
            return await self.notifier.send_recovery_message(
                record.delivery_address, record.code, record.kind, record.expires_at
            )
        except Exception:
            logger.exception("Notifier raised for recovery record %s", record.id)
            return DeliveryResult(success=False)

    @staticmethod
    def _sent_response(kind: RecoveryKind, expires_at: datetime) -> RequestRecoveryResponse:
        return RequestRecoveryResponse(
            status="sent",
            message=SENT_MESSAGES[kind],
            expires_at=expires_at,
        )
