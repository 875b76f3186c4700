from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.repairs import RepairTrackerRead, as_utc


class HazardCreate(BaseModel):
    latitude: float
    longitude: float
    hazard_type: str
    reported_at: Optional[datetime] = None
    state: Optional[str] = None
    image_url: Optional[str] = None
    risk_level: Optional[str] = None
    risk_reason: Optional[str] = None
    repair_material: Optional[str] = None
    repair_material_reason: Optional[str] = None
    volume_material_required: Optional[str] = None
    volume_calculation: Optional[str] = None
    manpower_required: Optional[int] = None
    job_distribution: Optional[str] = None
    repair_guide: Optional[str] = None


class HazardRead(HazardCreate):
    id: int
    reported_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("reported_at")
    @classmethod
    def utc_reported_at(cls, value):
        return as_utc(value)


class HazardSummary(BaseModel):
    id: int
    reported_at: datetime
    image_url: Optional[str] = None
    latitude: float
    longitude: float
    hazard_type: str
    state: Optional[str] = None
    risk_level: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("reported_at")
    @classmethod
    def utc_reported_at(cls, value):
        return as_utc(value)


class HazardWithProgress(HazardSummary):
    # always present; None when the hazard has no tracker row
    progress: Optional[RepairTrackerRead]


class HazardMapItem(BaseModel):
    id: int
    reported_at: datetime
    image_url: Optional[str] = None
    latitude: float
    longitude: float
    hazard_type: str
    risk_level: Optional[str] = None
    repair_material: Optional[str] = None
    volume_material_required: Optional[str] = None
    manpower_required: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("reported_at")
    @classmethod
    def utc_reported_at(cls, value):
        return as_utc(value)


class WorkerRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
