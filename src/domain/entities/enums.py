"""
Recovery Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class RecoveryKind(str, Enum):
    """Recovery flow a record belongs to. Flows never cross kinds."""

    password = "password"
    username = "username"
