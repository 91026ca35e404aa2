"""
Credential Sync Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    UserRole,
    IdentifierKind,
    VerificationFailure,
    SyncTarget,
    SyncStatus,
)

# Export value objects
from .identifier import Identifier, parse_identifier
from .sync_outcome import SyncOutcome
from .verification_result import VerificationResult

# Export all entities
from .user import User
from .one_time_code import OneTimeCode
from .reset_token import ResetToken
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "UserRole",
    "IdentifierKind",
    "VerificationFailure",
    "SyncTarget",
    "SyncStatus",
    # Value objects
    "Identifier",
    "parse_identifier",
    "SyncOutcome",
    "VerificationResult",
    # Entities
    "User",
    "OneTimeCode",
    "ResetToken",
    "AuditEvent",
]
