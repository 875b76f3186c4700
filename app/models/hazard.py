from typing import Optional
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Text


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Hazard(SQLModel, table=True):
    __tablename__ = "road_hazards"

    id: Optional[int] = Field(default=None, primary_key=True)
    reported_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    latitude: float
    longitude: float
    hazard_type: str
    state: Optional[str] = None
    image_url: Optional[str] = None

    # risk assessment; *_reason / job_distribution / repair_guide hold JSON-encoded lists
    risk_level: Optional[str] = Field(default=None, index=True)
    risk_reason: Optional[str] = Field(default=None, sa_column=Column(Text))

    # repair planning
    repair_material: Optional[str] = None
    repair_material_reason: Optional[str] = Field(default=None, sa_column=Column(Text))
    volume_material_required: Optional[str] = None
    volume_calculation: Optional[str] = Field(default=None, sa_column=Column(Text))
    manpower_required: Optional[int] = None
    job_distribution: Optional[str] = Field(default=None, sa_column=Column(Text))
    repair_guide: Optional[str] = Field(default=None, sa_column=Column(Text))
