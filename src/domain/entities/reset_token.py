"""
ResetToken Entity

Proof that a one-time code was verified.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class ResetToken(SQLModel, table=True):
    """
    ResetToken entity - issued after a successful code verification.

    Business Rules:
    - Valid for a bounded window measured from issued_at
    - Token is SHA-256 hash of a secure random string
    - Single-use: deleted by the password reset that consumes it
    - One token per identifier; a newer verification replaces it
    """

    __tablename__ = "reset_tokens"

    identifier: str = Field(primary_key=True, max_length=64)
    token_hash: str = Field(max_length=64)  # SHA-256 output

    issued_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(),
        sa_column=Column(DateTime, nullable=False),
    )

    __table_args__ = (Index("idx_reset_tokens_issued_at", "issued_at"),)
