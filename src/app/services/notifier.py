"""
Notifier port

Out-of-band delivery of recovery codes. The request use case generates and
stores the code, the notifier only delivers it.
"""

import secrets
from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel

from src.domain.entities import RecoveryKind

CODE_LENGTH = 6


class DeliveryResult(BaseModel):
    """Outcome of a delivery attempt"""

    success: bool


def generate_verification_code() -> str:
    """Uniformly random 6-digit numeric code, zero padded"""
    return f"{secrets.randbelow(10 ** CODE_LENGTH):0{CODE_LENGTH}d}"


class INotifier(ABC):
    """Recovery message delivery interface - application layer"""

    @abstractmethod
    async def send_recovery_message(
        self,
        address: str,
        code: str,
        kind: RecoveryKind,
        expires_at: datetime,
    ) -> DeliveryResult:
        """
        Deliver code to address and report the outcome.

        Failures must be reported with success=False, never swallowed.
        """
        pass
