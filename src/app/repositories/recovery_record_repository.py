from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import RecoveryKind, RecoveryRecord


@dataclass(frozen=True)
class ActiveRecordFilter:
    """
    Selects active (unused, unexpired at ``now``) records of one kind.

    Exactly one of ``user_id`` / ``delivery_address`` identifies the owner.
    """

    kind: RecoveryKind
    now: datetime
    user_id: Optional[UUID] = None
    delivery_address: Optional[str] = None

    def __post_init__(self):
        if (self.user_id is None) == (self.delivery_address is None):
            raise ValueError("ActiveRecordFilter needs exactly one of user_id or delivery_address")


@dataclass(frozen=True)
class CodeLookup:
    """Active record matching address, kind and exact code"""

    delivery_address: str
    kind: RecoveryKind
    code: str
    now: datetime


@dataclass(frozen=True)
class TokenLookup:
    """Active record matching exact token and kind"""

    token: str
    kind: RecoveryKind
    now: datetime


class IRecoveryRecordRepository(ABC):
    """RecoveryRecord repository interface - application layer"""

    @abstractmethod
    async def create(self, record: RecoveryRecord) -> RecoveryRecord:
        """Create a new recovery record"""
        pass

    @abstractmethod
    async def find_active_by_code(self, lookup: CodeLookup) -> Optional[RecoveryRecord]:
        """Find the active record for a presented code, locking it for update"""
        pass

    @abstractmethod
    async def find_active_by_token(self, lookup: TokenLookup) -> Optional[RecoveryRecord]:
        """Find the active record for a presented token, locking it for update"""
        pass

    @abstractmethod
    async def invalidate_active(self, record_filter: ActiveRecordFilter) -> int:
        """Mark every matching active record as used, returns affected rows"""
        pass

    @abstractmethod
    async def increment_attempts(self, record_filter: ActiveRecordFilter) -> int:
        """Atomically add one attempt to every matching active record"""
        pass

    @abstractmethod
    async def mark_used(self, record_id: UUID) -> bool:
        """Flip used to True if it is still False, returns whether this call did it"""
        pass

    @abstractmethod
    async def delete(self, record: RecoveryRecord) -> None:
        """Delete a recovery record"""
        pass
