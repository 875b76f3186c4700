from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_session

router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "ok"
    app: str
    database: str = "ok"


@router.get("/health", response_model=HealthResponse)
async def health_check(session: AsyncSession = Depends(get_session)):
    """Liveness plus a trivial round-trip to the database."""
    await session.execute(text("SELECT 1"))
    return HealthResponse(app=settings.APP_NAME)
