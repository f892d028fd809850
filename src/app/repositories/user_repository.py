from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email_for_update(self, email: str) -> Optional[User]:
        """Get user by email address and lock the row until commit/rollback"""
        pass

    @abstractmethod
    async def get_by_username_or_email(self, identifier: str) -> Optional[User]:
        """Get user whose email or username equals identifier"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def update_password_hash(self, user_id: UUID, password_hash: str) -> bool:
        """Replace the stored password hash, returns False if no such user"""
        pass
