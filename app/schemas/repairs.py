from typing import Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, field_validator


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stamps are written in UTC; SQLite hands them back without an offset."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class RepairTrackerRead(BaseModel):
    id: int
    reported_at: Optional[datetime] = None
    team_assigned_at: Optional[datetime] = None
    on_the_way_at: Optional[datetime] = None
    in_progress_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    worker_id: Optional[int] = None
    worker_name: Optional[str] = None
    photo_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("reported_at", "team_assigned_at", "on_the_way_at", "in_progress_at", "completed_at")
    @classmethod
    def utc_stamps(cls, value):
        return as_utc(value)


class RepairUpdateRequest(BaseModel):
    status: str
    worker_id: Optional[int] = None
    photo_url: Optional[str] = None


class RepairUpdateResponse(BaseModel):
    success: bool = True
    data: RepairTrackerRead
