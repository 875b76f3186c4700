from fastapi import APIRouter, Depends

from app.api.deps import get_repair_policy
from app.repositories.record_store import RecordStore, get_record_store
from app.schemas.repairs import RepairUpdateRequest, RepairUpdateResponse
from app.services import hazard_service
from app.services.repair_service import advance
from app.services.repair_state import RepairPolicy

router = APIRouter()


@router.get("/repair/{hazard_id}")
async def repair_tracker(hazard_id: int, store: RecordStore = Depends(get_record_store)):
    tracker = await hazard_service.get_tracker(store, hazard_id)
    # the UI expects an empty object rather than null or 404
    return tracker.model_dump(mode="json") if tracker else {}


@router.post("/update-repair/{hazard_id}", response_model=RepairUpdateResponse)
async def update_repair(
    hazard_id: int,
    payload: RepairUpdateRequest,
    store: RecordStore = Depends(get_record_store),
    policy: RepairPolicy = Depends(get_repair_policy),
):
    tracker = await advance(
        store,
        hazard_id,
        payload.status,
        worker_id=payload.worker_id,
        photo_url=payload.photo_url,
        policy=policy,
    )
    data = await hazard_service.describe_tracker(store, tracker)
    return RepairUpdateResponse(success=True, data=data)
