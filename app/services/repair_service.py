import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.core.exceptions import InvalidReference, InvalidTransition, NotFound
from app.models.repair_tracker import RepairTracker
from app.models.worker import Worker
from app.repositories.record_store import RecordStore
from app.services.repair_state import (
    STAGE_FIELDS,
    RepairPolicy,
    check_transition,
    derive_state,
    guard_columns,
    parse_stage,
)

logger = logging.getLogger(__name__)


async def advance(
    store: RecordStore,
    tracker_id: int,
    status: str,
    worker_id: Optional[int] = None,
    photo_url: Optional[str] = None,
    *,
    policy: Optional[RepairPolicy] = None,
    now: Optional[datetime] = None,
) -> RepairTracker:
    """Move one tracker forward to ``status`` and stamp that stage with ``now``.

    The write is a conditional update that re-checks the forward-only guard, so
    a concurrent request that advanced the same row first makes this one fail
    with InvalidTransition instead of overwriting it.
    """
    policy = policy or RepairPolicy()
    target = parse_stage(status, policy)

    current = await store.find_by_id(RepairTracker, tracker_id)
    if current is None:
        raise NotFound("No repair entry found for this hazard")

    check_transition(current, target, policy)
    previous = derive_state(current, policy)

    values: Dict[str, Any] = {STAGE_FIELDS[target]: now or datetime.now(timezone.utc)}
    if worker_id is not None:
        if await store.find_by_id(Worker, worker_id) is None:
            raise InvalidReference(f"Unknown worker {worker_id}")
        values["worker_id"] = worker_id
    if photo_url:
        values["photo_url"] = photo_url

    require_null, require_set = guard_columns(target, policy)
    updated = await store.update_by_id(
        RepairTracker,
        tracker_id,
        values,
        require_null=require_null,
        require_set=require_set,
    )
    if updated is None:
        # lost a race: the row vanished or someone advanced it first
        latest = await store.find_by_id(RepairTracker, tracker_id)
        if latest is None:
            raise NotFound("No repair entry found for this hazard")
        check_transition(latest, target, policy)
        raise InvalidTransition("Repair status changed concurrently, reload and retry")

    logger.info(
        "Repair %s advanced %s -> %s",
        tracker_id,
        previous.value,
        target.value,
    )
    return updated
