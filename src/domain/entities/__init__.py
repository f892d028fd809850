"""
Recovery Domain Entities

Each entity in its own file.
"""

from .enums import RecoveryKind
from .user import User
from .recovery_record import MAX_VERIFICATION_ATTEMPTS, RecoveryRecord

__all__ = [
    # Enums
    "RecoveryKind",
    # Entities
    "User",
    "RecoveryRecord",
    # Constants
    "MAX_VERIFICATION_ATTEMPTS",
]
