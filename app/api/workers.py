from typing import List
from fastapi import APIRouter, Depends

from app.repositories.record_store import RecordStore, get_record_store
from app.schemas.hazards import WorkerRead
from app.services import hazard_service

router = APIRouter()


@router.get("/workers", response_model=List[WorkerRead])
async def workers(store: RecordStore = Depends(get_record_store)):
    items = await hazard_service.list_workers(store)
    return [WorkerRead.model_validate(w, from_attributes=True) for w in items]
