"""
Use Cases

Organized into domain folders:
- password_reset/: Request, verify and complete a password reset
- identity/: Role changes and secondary identity store sync
- maintenance/: Reclaiming expired transient records

Import from subdirectories for better organization.
"""

from .password_reset import (
    RequestPasswordResetUseCase,
    VerifyResetCodeUseCase,
    CompletePasswordResetUseCase,
    CompletePasswordResetCommand,
)
from .identity import (
    ChangeUserRoleUseCase,
    SyncRoleUseCase,
)
from .maintenance import (
    SweepExpiredRecordsUseCase,
)

__all__ = [
    # Password reset
    "RequestPasswordResetUseCase",
    "VerifyResetCodeUseCase",
    "CompletePasswordResetUseCase",
    "CompletePasswordResetCommand",
    # Identity
    "ChangeUserRoleUseCase",
    "SyncRoleUseCase",
    # Maintenance
    "SweepExpiredRecordsUseCase",
]
