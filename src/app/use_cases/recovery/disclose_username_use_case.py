"""
Disclose Username Use Case

Single-step username recovery: a correct code reveals the username and
retires the record at once.
"""

import logging
from datetime import datetime

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RecoveryKind
from .code_matching import INVALID_CODE_MESSAGE, match_recovery_code
from .dtos import DiscloseUsernameResponse

logger = logging.getLogger(__name__)


class DiscloseUsernameUseCase:
    """
    Use case for recovering a username with a delivered code.

    Business Rules:
    - Same lookup, attempt counting and lockout as code verification,
      scoped to username records
    - Record is marked used as soon as the username is disclosed
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, email: str, code: str) -> Result[DiscloseUsernameResponse]:
        """
        Execute disclose username use case.

        Errors:
            - INVALID_CODE: Code wrong, record expired or owner missing
            - TOO_MANY_ATTEMPTS: Record locked out, a new code is needed
        """
        now = datetime.utcnow()

        async with self.uow:
            matched = await match_recovery_code(
                self.uow, email, RecoveryKind.username, code, now
            )
            if matched.is_err():
                return Return.err(matched.error)

            record = matched.value

            user = await self.uow.users.get_by_id(record.user_id)
            if user is None:
                logger.error(
                    "Recovery record %s references missing user %s", record.id, record.user_id
                )
                return Return.err(Error("INVALID_CODE", INVALID_CODE_MESSAGE))

            if not await self.uow.recovery_records.mark_used(record.id):
                return Return.err(Error("INVALID_CODE", INVALID_CODE_MESSAGE))

            await self.uow.commit()

            return Return.ok(
                DiscloseUsernameResponse(
                    status="success",
                    message="Username recovered successfully",
                    username=user.username,
                )
            )
