from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from app.client.api_client import HazardApiClient
from app.services.repair_state import (
    STAGE_LABELS,
    RepairPolicy,
    Stage,
    can_transition,
    check_transition,
    derive_state,
    parse_stage,
)


class StatusOption(BaseModel):
    value: str
    label: str
    enabled: bool


class RepairForm:
    """State behind the repair-tracking modal for one hazard.

    Uses the same transition rules as the server so invalid choices are
    disabled before anything is submitted; the server still has the final say.
    """

    def __init__(
        self,
        hazard_id: int,
        tracker: Optional[Dict[str, Any]] = None,
        policy: Optional[RepairPolicy] = None,
    ):
        self.hazard_id = hazard_id
        self.tracker: Dict[str, Any] = dict(tracker or {})
        self.policy = policy or RepairPolicy()
        self.worker_id: Optional[int] = self.tracker.get("worker_id")
        self.photo_url: Optional[str] = None
        self.status: Stage = self.current_stage

    @property
    def current_stage(self) -> Stage:
        return derive_state(self.tracker, self.policy)

    def status_options(self) -> List[StatusOption]:
        return [
            StatusOption(
                value=stage.value,
                label=STAGE_LABELS[stage],
                enabled=can_transition(self.tracker, stage, self.policy),
            )
            for stage in self.policy.order
        ]

    def select_status(self, status: str) -> None:
        self.status = parse_stage(status, self.policy)

    def validate(self) -> Stage:
        return check_transition(self.tracker, self.status, self.policy)

    async def submit(self, client: HazardApiClient) -> Dict[str, Any]:
        target = self.validate()
        self.tracker = await client.update_repair(
            self.hazard_id,
            target.value,
            worker_id=self.worker_id,
            photo_url=self.photo_url,
        )
        self.photo_url = None
        self.status = self.current_stage
        return self.tracker

    @classmethod
    async def load(cls, client: HazardApiClient, hazard_id: int, policy: Optional[RepairPolicy] = None) -> "RepairForm":
        tracker = await client.get_repair(hazard_id)
        return cls(hazard_id, tracker, policy)
