"""
Consume Reset Token Use Case

Sets a new password using the token handed out by code verification.
"""

import logging
from datetime import datetime

from libs.result import Error, Result, Return
from src.app.repositories.recovery_record_repository import TokenLookup
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RecoveryKind
from .dtos import ConsumeResetTokenResponse

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or expired reset token"


class ConsumeResetTokenUseCase:
    """
    Use case for consuming a password reset token.

    Business Rules:
    - Token must belong to an active password record
    - Token is single-use: marked used with a compare-and-set, so two
      concurrent submissions cannot both succeed
    - Password hash update and mark-used commit in one transaction
    - A record that ran out of verification attempts cannot be consumed
    """

    def __init__(self, uow: UnitOfWork, hasher: IPasswordHasher):
        self.uow = uow
        self.hasher = hasher

    async def execute(self, token: str, new_password: str) -> Result[ConsumeResetTokenResponse]:
        """
        Execute consume reset token use case.

        Args:
            token: Reset token returned by code verification
            new_password: New password, already validated by the API layer

        Returns:
            Result with success status, or Error

        Errors:
            - INVALID_TOKEN: Token unknown, used, expired or owner missing
        """
        now = datetime.utcnow()

        async with self.uow:
            record = await self.uow.recovery_records.find_active_by_token(
                TokenLookup(token=token, kind=RecoveryKind.password, now=now)
            )

            if record is None:
                return Return.err(Error("INVALID_TOKEN", INVALID_TOKEN_MESSAGE))

            if record.is_locked_out():
                await self.uow.recovery_records.mark_used(record.id)
                await self.uow.commit()
                return Return.err(Error("INVALID_TOKEN", INVALID_TOKEN_MESSAGE))

            user = await self.uow.users.get_by_id(record.user_id)
            if user is None:
                # Foreign key should prevent this
                logger.error(
                    "Recovery record %s references missing user %s", record.id, record.user_id
                )
                return Return.err(Error("INVALID_TOKEN", INVALID_TOKEN_MESSAGE))

            password_hash = self.hasher.hash(new_password)

            if not await self.uow.recovery_records.mark_used(record.id):
                # Lost the race against a concurrent consumer
                return Return.err(Error("INVALID_TOKEN", INVALID_TOKEN_MESSAGE))

            await self.uow.users.update_password_hash(user.id, password_hash)

            await self.uow.commit()

            logger.info("Password reset completed for user %s", user.id)

            return Return.ok(
                ConsumeResetTokenResponse(
                    status="success",
                    message="Password reset successfully",
                )
            )
