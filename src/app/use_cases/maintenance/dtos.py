from pydantic import BaseModel


class SweepExpiredRecordsResponse(BaseModel):
    """Counts of transient records removed"""

    codes_deleted: int
    tokens_deleted: int
