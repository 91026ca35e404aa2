"""
Identity Synchronization Use Case DTOs
"""

from typing import List

from pydantic import BaseModel, Field

from src.domain.entities import SyncOutcome, SyncStatus


class ChangeUserRoleResponse(BaseModel):
    """Response for change user role use case"""

    ok: bool = True
    user_id: int
    role: str
    warnings: List[str] = Field(default_factory=list)
    outcomes: List[SyncOutcome] = Field(default_factory=list)


class SyncRoleResponse(BaseModel):
    """Response for direct secondary role sync"""

    ok: bool = True
    status: SyncStatus
    warnings: List[str] = Field(default_factory=list)
    outcome: SyncOutcome
