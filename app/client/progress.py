import json
import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel

from app.services.repair_state import (
    STAGE_FIELDS,
    STAGE_LABELS,
    RepairPolicy,
    Stage,
    derive_state,
)

logger = logging.getLogger(__name__)


class TimelineEntry(BaseModel):
    stage: Stage
    label: str
    at: Optional[str] = None
    done: bool = False


def _format(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def latest_progress_text(tracker: Optional[Mapping[str, Any]], policy: Optional[RepairPolicy] = None) -> str:
    """One-line status for the list view, e.g. ``"In Progress: 2025-01-02T10:00:00"``."""
    if not tracker:
        return "No Progress"
    stage = derive_state(tracker, policy)
    if stage is Stage.REPORTED:
        return STAGE_LABELS[Stage.REPORTED]
    return f"{STAGE_LABELS[stage]}: {_format(tracker.get(STAGE_FIELDS[stage]))}"


def timeline(tracker: Optional[Mapping[str, Any]], policy: Optional[RepairPolicy] = None) -> List[TimelineEntry]:
    tracker = tracker or {}
    policy = policy or RepairPolicy()
    entries = []
    for stage in policy.order:
        if stage is Stage.REPORTED:
            at = tracker.get("reported_at")
            done = True
        else:
            at = tracker.get(STAGE_FIELDS[stage])
            done = at is not None
        entries.append(
            TimelineEntry(stage=stage, label=STAGE_LABELS[stage], at=_format(at) if at else None, done=done)
        )
    return entries


def decode_json_list(raw: Any) -> List[Any]:
    """Decode a JSON-encoded list column (risk_reason, repair_guide, ...); [] on bad input."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return raw
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Could not decode JSON list field: %r", raw)
        return []
    return value if isinstance(value, list) else []
