from typing import List, Optional
from fastapi import APIRouter, Depends, status

from app.core.config import settings
from app.repositories.record_store import RecordStore, get_record_store
from app.schemas.hazards import HazardCreate, HazardMapItem, HazardRead, HazardWithProgress
from app.services import hazard_service

router = APIRouter()


@router.get("/stats", response_model=List[HazardWithProgress])
async def hazard_stats(store: RecordStore = Depends(get_record_store)):
    """Hazards ordered by risk, each merged with its repair progress."""
    return await hazard_service.list_hazards_with_progress(store, limit=settings.HAZARD_STATS_LIMIT)


@router.get("/hazard-map", response_model=List[HazardMapItem])
async def hazard_map(store: RecordStore = Depends(get_record_store)):
    items = await hazard_service.list_hazard_map(store, limit=settings.HAZARD_MAP_LIMIT)
    return [HazardMapItem.model_validate(h, from_attributes=True) for h in items]


@router.get("/hazard/{hazard_id}", response_model=Optional[HazardRead])
async def hazard_detail(hazard_id: int, store: RecordStore = Depends(get_record_store)):
    hazard = await hazard_service.get_hazard(store, hazard_id)
    if hazard is None:
        return None
    return HazardRead.model_validate(hazard, from_attributes=True)


@router.post("/hazard", response_model=HazardRead, status_code=status.HTTP_201_CREATED)
async def report_hazard(payload: HazardCreate, store: RecordStore = Depends(get_record_store)):
    hazard = await hazard_service.report_hazard(store, payload)
    return HazardRead.model_validate(hazard, from_attributes=True)
