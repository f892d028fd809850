from typing import Optional
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.recovery_record_repository import (
    ActiveRecordFilter,
    CodeLookup,
    IRecoveryRecordRepository,
    TokenLookup,
)
from src.domain.entities import RecoveryRecord


def _active_criteria(record_filter: ActiveRecordFilter) -> list:
    criteria = [
        RecoveryRecord.kind == record_filter.kind,
        RecoveryRecord.used == False,  # noqa: E712
        RecoveryRecord.expires_at > record_filter.now,
    ]
    if record_filter.user_id is not None:
        criteria.append(RecoveryRecord.user_id == record_filter.user_id)
    else:
        criteria.append(RecoveryRecord.delivery_address == record_filter.delivery_address)
    return criteria


class RecoveryRecordRepository(IRecoveryRecordRepository):
    """RecoveryRecord repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: RecoveryRecord) -> RecoveryRecord:
        """Create a new recovery record"""
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def find_active_by_code(self, lookup: CodeLookup) -> Optional[RecoveryRecord]:
        """Find the active record for a presented code"""
        stmt = (
            select(RecoveryRecord)
            .where(
                RecoveryRecord.delivery_address == lookup.delivery_address,
                RecoveryRecord.kind == lookup.kind,
                RecoveryRecord.code == lookup.code,
                RecoveryRecord.used == False,  # noqa: E712
                RecoveryRecord.expires_at > lookup.now,
            )
            .order_by(RecoveryRecord.created_at.desc())
            .with_for_update()
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def find_active_by_token(self, lookup: TokenLookup) -> Optional[RecoveryRecord]:
        """Find the active record for a presented token"""
        stmt = (
            select(RecoveryRecord)
            .where(
                RecoveryRecord.token == lookup.token,
                RecoveryRecord.kind == lookup.kind,
                RecoveryRecord.used == False,  # noqa: E712
                RecoveryRecord.expires_at > lookup.now,
            )
            .with_for_update()
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def invalidate_active(self, record_filter: ActiveRecordFilter) -> int:
        """Mark all matching active records as used"""
        stmt = (
            update(RecoveryRecord)
            .where(*_active_criteria(record_filter))
            .values(used=True)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def increment_attempts(self, record_filter: ActiveRecordFilter) -> int:
        """Add one attempt in SQL so concurrent misses are never lost"""
        stmt = (
            update(RecoveryRecord)
            .where(*_active_criteria(record_filter))
            .values(attempts=RecoveryRecord.attempts + 1)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def mark_used(self, record_id: UUID) -> bool:
        """Compare-and-set used from False to True"""
        stmt = (
            update(RecoveryRecord)
            .where(RecoveryRecord.id == record_id, RecoveryRecord.used == False)  # noqa: E712
            .values(used=True)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete(self, record: RecoveryRecord) -> None:
        """Delete a recovery record"""
        await self.session.delete(record)
        await self.session.flush()
