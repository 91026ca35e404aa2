"""
Credential Sync Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role held by a user in the primary store"""

    user = "user"
    admin = "admin"


class IdentifierKind(str, Enum):
    """Textual form an identifier was supplied in"""

    email = "email"
    user_id = "user_id"


class VerificationFailure(str, Enum):
    """Why a one-time code or reset token was not accepted"""

    not_found = "not_found"
    expired = "expired"
    mismatch = "mismatch"
    too_many_attempts = "too_many_attempts"
    already_consumed = "already_consumed"


class SyncTarget(str, Enum):
    """Store a synchronization outcome refers to"""

    primary = "primary"
    secondary = "secondary"


class SyncStatus(str, Enum):
    """Three-valued outcome of one synchronization attempt"""

    success = "success"
    partial = "partial"
    failure = "failure"
