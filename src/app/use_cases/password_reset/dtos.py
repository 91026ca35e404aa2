"""
Password Reset Use Case DTOs (Data Transfer Objects)

Command and Response classes for the three-step reset flow.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from src.domain.entities import Identifier, SyncOutcome


# ============================================================================
# Command DTOs
# ============================================================================


class CompletePasswordResetCommand(BaseModel):
    """Final step of the reset flow"""

    identifier: Identifier
    token: str
    new_password: str
    confirm_password: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class RequestPasswordResetResponse(BaseModel):
    """Identical for known and unknown identifiers"""

    ok: bool = True
    message: str


class VerifyResetCodeResponse(BaseModel):
    """Carries the reset token required by the final step"""

    ok: bool = True
    reset_token: str
    expires_in: int


class CompletePasswordResetResponse(BaseModel):
    """Primary change is committed; secondary sync problems become warnings"""

    ok: bool = True
    message: str
    warnings: List[str] = Field(default_factory=list)
    outcomes: List[SyncOutcome] = Field(default_factory=list)
