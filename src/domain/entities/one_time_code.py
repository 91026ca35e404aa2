"""
OneTimeCode Entity

Short-lived numeric codes proving control of an identifier.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class OneTimeCode(SQLModel, table=True):
    """
    OneTimeCode entity - password reset verification codes.

    Business Rules:
    - At most one live code per identifier (identifier is the primary key)
    - A new request replaces any unconsumed code for the same identifier
    - Code is stored as the SHA-256 hash of the numeric string
    - attempt_count is incremented before every comparison
    - Deleted on successful verification (single-use)
    """

    __tablename__ = "one_time_codes"

    identifier: str = Field(primary_key=True, max_length=64)
    code_hash: str = Field(max_length=64)  # SHA-256 output

    attempt_count: int = Field(default=0)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_one_time_codes_expires_at", "expires_at"),)
