"""
Shared code-matching step of the verification flows.

Both verify-code and username disclosure look a presented code up the same
way, count misses the same way and lock records out the same way.
"""

import logging
from datetime import datetime

from libs.result import Error, Result, Return
from src.app.repositories.recovery_record_repository import ActiveRecordFilter, CodeLookup
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RecoveryKind, RecoveryRecord

logger = logging.getLogger(__name__)

INVALID_CODE_MESSAGE = "Invalid or expired verification code"

LOCKOUT_MESSAGES = {
    RecoveryKind.password: "Too many verification attempts. Please request a new reset code.",
    RecoveryKind.username: "Too many verification attempts. Please request a new recovery code.",
}


async def match_recovery_code(
    uow: UnitOfWork,
    email: str,
    kind: RecoveryKind,
    code: str,
    now: datetime,
) -> Result[RecoveryRecord]:
    """
    Find the active record for (email, kind, code).

    Must run inside ``async with uow``. Commits on the failure branches
    because the attempt increment and the lockout are the outcome of a
    failed verification. The success branch leaves the record untouched.

    Errors:
        - INVALID_CODE: no active record matches; every active record of
          (email, kind) gets one more attempt
        - TOO_MANY_ATTEMPTS: the matching record already used up its attempts;
          it is marked used
    """
    record = await uow.recovery_records.find_active_by_code(
        CodeLookup(delivery_address=email, kind=kind, code=code, now=now)
    )

    if record is None:
        await uow.recovery_records.increment_attempts(
            ActiveRecordFilter(kind=kind, now=now, delivery_address=email)
        )
        await uow.commit()
        return Return.err(Error("INVALID_CODE", INVALID_CODE_MESSAGE))

    if record.is_locked_out():
        await uow.recovery_records.mark_used(record.id)
        await uow.commit()
        logger.info(
            "Recovery record %s locked out after %d attempts", record.id, record.attempts
        )
        return Return.err(Error("TOO_MANY_ATTEMPTS", LOCKOUT_MESSAGES[kind]))

    return Return.ok(record)
