"""
User Entity

Credential record owned by the primary store.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, SQLModel

from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity - the primary store's credential record (UserCredential).

    Business Rules:
    - Email must be unique across all users
    - Password stored as "hash.salt" scrypt output
    - secondary_store_id is a back-reference into the secondary identity
      store; the primary record is always the source of truth
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=255)

    role: UserRole = Field(default=UserRole.user)

    secondary_store_id: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=128
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
