"""Forward-only repair status rules.

A tracker row has no explicit status column: its stage is the most advanced
stage whose timestamp is set. Everything that needs to know the current stage
or whether a requested stage is legal (the update endpoint, the conditional
store update, the client form) goes through this module.
"""
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from app.core.exceptions import InvalidTransition


class Stage(str, Enum):
    REPORTED = "reported"
    ASSIGNED = "assigned"
    ON_THE_WAY = "on_the_way"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class SkipPolicy(str, Enum):
    ALLOW_SKIP = "allow_skip"
    ADJACENT_ONLY = "adjacent_only"


# REPORTED is implicit: it has no timestamp of its own
STAGE_FIELDS = {
    Stage.ASSIGNED: "team_assigned_at",
    Stage.ON_THE_WAY: "on_the_way_at",
    Stage.IN_PROGRESS: "in_progress_at",
    Stage.COMPLETED: "completed_at",
}

STAGE_LABELS = {
    Stage.REPORTED: "Reported",
    Stage.ASSIGNED: "Team Assigned",
    Stage.ON_THE_WAY: "On the Way",
    Stage.IN_PROGRESS: "In Progress",
    Stage.COMPLETED: "Completed",
}

_DUPLICATE_MESSAGES = {
    Stage.ASSIGNED: "Already assigned",
    Stage.ON_THE_WAY: "Already on the way",
    Stage.IN_PROGRESS: "Already in progress",
    Stage.COMPLETED: "Already completed",
}

BASE_ORDER: Tuple[Stage, ...] = (
    Stage.REPORTED,
    Stage.ASSIGNED,
    Stage.IN_PROGRESS,
    Stage.COMPLETED,
)
EXTENDED_ORDER: Tuple[Stage, ...] = (
    Stage.REPORTED,
    Stage.ASSIGNED,
    Stage.ON_THE_WAY,
    Stage.IN_PROGRESS,
    Stage.COMPLETED,
)


def stage_order(include_on_the_way: bool = False) -> Tuple[Stage, ...]:
    return EXTENDED_ORDER if include_on_the_way else BASE_ORDER


class RepairPolicy(BaseModel):
    """Which stages exist and whether intermediate stages may be skipped."""

    model_config = ConfigDict(frozen=True)

    skip_policy: SkipPolicy = SkipPolicy.ALLOW_SKIP
    include_on_the_way: bool = False

    @property
    def order(self) -> Tuple[Stage, ...]:
        return stage_order(self.include_on_the_way)

    def index(self, stage: Stage) -> int:
        return self.order.index(stage)

    @classmethod
    def from_settings(cls, settings) -> "RepairPolicy":
        return cls(
            skip_policy=SkipPolicy(settings.REPAIR_SKIP_POLICY),
            include_on_the_way=settings.REPAIR_INCLUDE_ON_THE_WAY,
        )


def _field_value(record: Any, field: str) -> Any:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def is_stage_set(record: Any, stage: Stage) -> bool:
    if stage is Stage.REPORTED:
        return True
    return _field_value(record, STAGE_FIELDS[stage]) is not None


def derive_state(record: Any, policy: Optional[RepairPolicy] = None) -> Stage:
    """Return the most advanced stage whose timestamp is set on ``record``.

    ``record`` may be a RepairTracker, a dict (e.g. a JSON response) or None.
    """
    policy = policy or RepairPolicy()
    for stage in reversed(policy.order[1:]):
        if is_stage_set(record, stage):
            return stage
    return Stage.REPORTED


def parse_stage(value: Any, policy: Optional[RepairPolicy] = None) -> Stage:
    policy = policy or RepairPolicy()
    try:
        stage = Stage(value)
    except ValueError:
        raise InvalidTransition(f"Unknown status '{value}'")
    if stage not in policy.order:
        raise InvalidTransition(f"Status '{stage.value}' is not enabled")
    return stage


def is_forward_transition(current: Stage, target: Stage, policy: Optional[RepairPolicy] = None) -> bool:
    """True if moving from ``current`` to ``target`` is allowed by stage order alone."""
    policy = policy or RepairPolicy()
    if current not in policy.order or target not in policy.order:
        return False
    step = policy.index(target) - policy.index(current)
    if policy.skip_policy is SkipPolicy.ADJACENT_ONLY:
        return step == 1
    return step > 0


def check_transition(record: Any, requested: Any, policy: Optional[RepairPolicy] = None) -> Stage:
    """Validate moving ``record`` to ``requested``; return the target stage.

    Raises InvalidTransition with a readable reason for unknown, duplicate,
    backward, same-stage and (under ADJACENT_ONLY) skipping requests.
    """
    policy = policy or RepairPolicy()
    target = parse_stage(requested, policy)

    if target is not Stage.REPORTED and is_stage_set(record, target):
        raise InvalidTransition(_DUPLICATE_MESSAGES[target])

    current = derive_state(record, policy)
    if policy.index(target) <= policy.index(current):
        raise InvalidTransition(
            f"Cannot move from '{current.value}' to '{target.value}': repair status only moves forward"
        )
    if not is_forward_transition(current, target, policy):
        raise InvalidTransition(f"Cannot skip from '{current.value}' to '{target.value}'")
    return target


def can_transition(record: Any, requested: Any, policy: Optional[RepairPolicy] = None) -> bool:
    try:
        check_transition(record, requested, policy)
    except InvalidTransition:
        return False
    return True


def allowed_next_stages(record: Any, policy: Optional[RepairPolicy] = None) -> List[Stage]:
    policy = policy or RepairPolicy()
    return [s for s in policy.order if can_transition(record, s, policy)]


def guard_columns(target: Stage, policy: Optional[RepairPolicy] = None) -> Tuple[List[str], List[str]]:
    """Columns a conditional update must check to stay a legal move to ``target``.

    Returns ``(require_null, require_set)``: the target stage and every later
    stage must still be unset, and under ADJACENT_ONLY the stage right before
    the target must already be set.
    """
    policy = policy or RepairPolicy()
    idx = policy.index(target)
    require_null = [STAGE_FIELDS[s] for s in policy.order[idx:] if s is not Stage.REPORTED]
    require_set: List[str] = []
    if policy.skip_policy is SkipPolicy.ADJACENT_ONLY and idx > 0:
        previous = policy.order[idx - 1]
        if previous is not Stage.REPORTED:
            require_set.append(STAGE_FIELDS[previous])
    return require_null, require_set
