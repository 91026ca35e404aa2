from .sweep_expired_records_use_case import SweepExpiredRecordsUseCase
from .dtos import SweepExpiredRecordsResponse

__all__ = ["SweepExpiredRecordsUseCase", "SweepExpiredRecordsResponse"]
