from typing import Optional
from sqlmodel import SQLModel, Field


class Worker(SQLModel, table=True):
    __tablename__ = "workers"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
