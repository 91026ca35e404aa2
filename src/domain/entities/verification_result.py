"""
VerificationResult

Outcome of checking a one-time code or consuming a reset token.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from .enums import VerificationFailure
from .identifier import Identifier


class VerificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: bool
    reason: Optional[VerificationFailure] = None
    # Canonical record identifier; set only when ok
    identifier: Optional[Identifier] = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, identifier: Identifier) -> "VerificationResult":
        return cls(ok=True, identifier=identifier)

    @classmethod
    def failed(cls, reason: VerificationFailure) -> "VerificationResult":
        return cls(ok=False, reason=reason)
