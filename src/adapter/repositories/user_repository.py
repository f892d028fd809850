from typing import Optional
from uuid import UUID

from sqlalchemy import or_
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email_for_update(self, email: str) -> Optional[User]:
        """Get user by email address with a row lock"""
        stmt = select(User).where(User.email == email).with_for_update()
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_username_or_email(self, identifier: str) -> Optional[User]:
        """Get user by email or username"""
        stmt = select(User).where(or_(User.email == identifier, User.username == identifier))
        result = await self.session.exec(stmt)
        return result.first()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update_password_hash(self, user_id: UUID, password_hash: str) -> bool:
        """Replace the stored password hash"""
        stmt = update(User).where(User.id == user_id).values(password_hash=password_hash)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
