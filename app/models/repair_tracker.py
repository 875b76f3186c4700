from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime


class RepairTracker(SQLModel, table=True):
    """Repair progress for one hazard; shares the hazard's id.

    Stage timestamps are filled in forward order and never cleared.
    """

    __tablename__ = "repair_trackers"

    id: Optional[int] = Field(default=None, primary_key=True, foreign_key="road_hazards.id")
    reported_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    team_assigned_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    on_the_way_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    in_progress_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    completed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    worker_id: Optional[int] = Field(default=None, foreign_key="workers.id")
    photo_url: Optional[str] = None
