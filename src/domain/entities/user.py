"""
User Entity

The account a recovery record points at. Owned by the wider auth backend;
the recovery flows only read it and replace its password hash.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel


class User(SQLModel, table=True):
    """
    User entity - an account that can be recovered.

    Business Rules:
    - Email and username are unique across all users
    - Password stored as bcrypt hash
    - Security answer stored as bcrypt hash of the lower-cased answer
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    username: str = Field(unique=True, index=True, max_length=150)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    # Fallback recovery path
    security_question: Optional[str] = Field(default=None, max_length=255)
    security_answer_hash: Optional[str] = Field(default=None, max_length=60)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
