"""
SyncOutcome

Result of mirroring one change to one store. Ephemeral: drives user-visible
warnings and retry decisions, never persisted.
"""

from pydantic import BaseModel, ConfigDict

from .enums import SyncStatus, SyncTarget


class SyncOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    identifier: str
    target: SyncTarget
    status: SyncStatus
    message: str

    @property
    def succeeded(self) -> bool:
        return self.status == SyncStatus.success

    @property
    def retryable(self) -> bool:
        """Only transient failures are worth retrying later"""
        return self.status == SyncStatus.partial

    @classmethod
    def primary_committed(cls, identifier: str, message: str) -> "SyncOutcome":
        return cls(
            identifier=identifier,
            target=SyncTarget.primary,
            status=SyncStatus.success,
            message=message,
        )
