"""
RecoveryRecord Entity

One outstanding password-reset or username-recovery attempt.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import RecoveryKind

MAX_VERIFICATION_ATTEMPTS = 5


class RecoveryRecord(SQLModel, table=True):
    """
    RecoveryRecord entity - single-use, expiring, attempt-limited.

    Business Rules:
    - At most one active (unused, unexpired) record per user and kind
    - Token is 32 random bytes hex-encoded, unique across all records
    - Code is the 6-digit value generated with the record
    - attempts only grows; at MAX_VERIFICATION_ATTEMPTS the record is dead
    - used flips to True exactly once and never back
    """

    __tablename__ = "recovery_records"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    delivery_address: str = Field(max_length=255)

    token: str = Field(unique=True, index=True, max_length=64)
    code: str = Field(max_length=6)
    kind: RecoveryKind

    attempts: int = Field(default=0)
    used: bool = Field(default=False)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(
        default_factory=datetime.utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_recovery_user_kind_used", "user_id", "kind", "used"),
        Index("idx_recovery_address_kind", "delivery_address", "kind"),
        Index("idx_recovery_expires_at", "expires_at"),
    )

    def is_locked_out(self) -> bool:
        return self.attempts >= MAX_VERIFICATION_ATTEMPTS
