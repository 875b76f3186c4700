from typing import Dict, List, Optional

from sqlalchemy import case, func

from app.models.hazard import Hazard
from app.models.repair_tracker import RepairTracker
from app.models.worker import Worker
from app.repositories.record_store import RecordStore
from app.schemas.hazards import HazardCreate, HazardWithProgress, HazardSummary
from app.schemas.repairs import RepairTrackerRead


# high > medium > low > anything else. Integer levels stored as text sort by
# length first so "10" ranks above "9".
RISK_RANK = case(
    (func.lower(Hazard.risk_level) == "high", 3),
    (func.lower(Hazard.risk_level) == "medium", 2),
    (func.lower(Hazard.risk_level) == "low", 1),
    else_=0,
)

ORDERINGS = {
    "risk": (
        RISK_RANK.desc(),
        func.length(Hazard.risk_level).desc(),
        Hazard.risk_level.desc(),
        Hazard.id.desc(),
    ),
    "recent": (Hazard.reported_at.desc(), Hazard.id.desc()),
}


async def list_hazards(store: RecordStore, order_by: str = "risk", limit: Optional[int] = None) -> List[Hazard]:
    if order_by not in ORDERINGS:
        raise ValueError(f"unknown ordering {order_by!r}")
    return await store.list_filtered(Hazard, order_by=ORDERINGS[order_by], limit=limit)


async def list_hazard_map(store: RecordStore, limit: Optional[int] = None) -> List[Hazard]:
    return await list_hazards(store, order_by="recent", limit=limit)


async def get_hazard(store: RecordStore, hazard_id: int) -> Optional[Hazard]:
    return await store.find_by_id(Hazard, hazard_id)


async def list_workers(store: RecordStore) -> List[Worker]:
    return await store.list_filtered(Worker, order_by=(Worker.name, Worker.id))


async def _worker_names(store: RecordStore, worker_ids) -> Dict[int, str]:
    ids = sorted({w for w in worker_ids if w is not None})
    if not ids:
        return {}
    workers = await store.list_filtered(Worker, Worker.id.in_(ids))
    return {w.id: w.name for w in workers}


def _tracker_read(tracker: RepairTracker, names: Dict[int, str]) -> RepairTrackerRead:
    out = RepairTrackerRead.model_validate(tracker, from_attributes=True)
    out.worker_name = names.get(tracker.worker_id)
    return out


async def describe_tracker(store: RecordStore, tracker: RepairTracker) -> RepairTrackerRead:
    names = await _worker_names(store, [tracker.worker_id])
    return _tracker_read(tracker, names)


async def get_tracker(store: RecordStore, hazard_id: int) -> Optional[RepairTrackerRead]:
    tracker = await store.find_by_id(RepairTracker, hazard_id)
    if tracker is None:
        return None
    return await describe_tracker(store, tracker)


async def list_hazards_with_progress(store: RecordStore, limit: Optional[int] = None) -> List[HazardWithProgress]:
    """Left-join hazards with their tracker rows.

    A hazard without a tracker keeps ``progress=None`` rather than being
    dropped.
    """
    hazards = await list_hazards(store, order_by="risk", limit=limit)
    if not hazards:
        return []

    ids = [h.id for h in hazards]
    trackers = await store.list_filtered(RepairTracker, RepairTracker.id.in_(ids))
    names = await _worker_names(store, [t.worker_id for t in trackers])
    by_id = {t.id: _tracker_read(t, names) for t in trackers}

    return [
        HazardWithProgress(
            **HazardSummary.model_validate(h, from_attributes=True).model_dump(),
            progress=by_id.get(h.id),
        )
        for h in hazards
    ]


async def report_hazard(store: RecordStore, payload: HazardCreate) -> Hazard:
    """Create a hazard and its tracker row, copying the reported timestamp."""
    data = payload.model_dump(exclude_none=True)
    return await store.create_with(
        Hazard(**data),
        lambda hazard: RepairTracker(id=hazard.id, reported_at=hazard.reported_at),
    )
