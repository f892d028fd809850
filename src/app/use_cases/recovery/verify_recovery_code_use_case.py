"""
Verify Recovery Code Use Case

Exchanges a delivered 6-digit code for the record's reset token.
"""

from datetime import datetime

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RecoveryKind
from .code_matching import match_recovery_code
from .dtos import VerifyRecoveryCodeResponse

VERIFIED_MESSAGES = {
    RecoveryKind.password: "Verification code confirmed. You can now reset your password.",
    RecoveryKind.username: "Verification code confirmed.",
}


class VerifyRecoveryCodeUseCase:
    """
    Use case for verifying a recovery code.

    Business Rules:
    - Code must match an active record of the same kind for the email
    - Misses add an attempt to every active record of (email, kind)
    - A record with 5 or more attempts is locked out even on a correct code
    - The record is NOT marked used here; consuming the token does that
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, email: str, kind: RecoveryKind, code: str
    ) -> Result[VerifyRecoveryCodeResponse]:
        """
        Execute verify recovery code use case.

        Errors:
            - INVALID_CODE: Code wrong, record expired or no record at all
            - TOO_MANY_ATTEMPTS: Record locked out, a new code is needed
        """
        now = datetime.utcnow()

        async with self.uow:
            matched = await match_recovery_code(self.uow, email, kind, code, now)
            if matched.is_err():
                return Return.err(matched.error)

            record = matched.value

            return Return.ok(
                VerifyRecoveryCodeResponse(
                    status="verified",
                    message=VERIFIED_MESSAGES[kind],
                    reset_token=record.token,
                )
            )
