import json

import httpx
import pytest
from httpx import ASGITransport

from app.client.api_client import ApiError, HazardApiClient
from app.client.progress import decode_json_list, latest_progress_text, timeline
from app.client.repair_form import RepairForm
from app.core.exceptions import InvalidTransition
from app.main import app as fastapi_app
from app.services.repair_state import RepairPolicy, SkipPolicy, Stage


def test_latest_progress_text():
    assert latest_progress_text({}) == "No Progress"
    assert latest_progress_text(None) == "No Progress"
    assert latest_progress_text({"id": 1, "team_assigned_at": None}) == "Reported"
    assert (
        latest_progress_text({"team_assigned_at": "2025-03-01T09:00:00", "in_progress_at": "2025-03-02T09:00:00"})
        == "In Progress: 2025-03-02T09:00:00"
    )


def test_timeline_marks_done_stages():
    tracker = {"reported_at": "2025-03-01T08:00:00", "team_assigned_at": "2025-03-01T09:00:00"}
    entries = timeline(tracker, RepairPolicy(include_on_the_way=True))
    assert [e.stage for e in entries] == [
        Stage.REPORTED,
        Stage.ASSIGNED,
        Stage.ON_THE_WAY,
        Stage.IN_PROGRESS,
        Stage.COMPLETED,
    ]
    assert [e.done for e in entries] == [True, True, False, False, False]
    assert entries[1].label == "Team Assigned"


def test_decode_json_list():
    assert decode_json_list('["a", "b"]') == ["a", "b"]
    assert decode_json_list("not json") == []
    assert decode_json_list('{"a": 1}') == []
    assert decode_json_list(None) == []


def test_form_disables_invalid_statuses():
    form = RepairForm(7, {"id": 7, "team_assigned_at": "2025-03-01T09:00:00", "worker_id": 3})
    assert form.current_stage is Stage.ASSIGNED
    assert form.worker_id == 3
    enabled = {o.value: o.enabled for o in form.status_options()}
    assert enabled == {"reported": False, "assigned": False, "in_progress": True, "completed": True}

    adjacent = RepairForm(7, form.tracker, RepairPolicy(skip_policy=SkipPolicy.ADJACENT_ONLY))
    assert [o.value for o in adjacent.status_options() if o.enabled] == ["in_progress"]


async def test_form_validates_before_sending():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"success": True, "data": {}})

    form = RepairForm(7, {"completed_at": "2025-03-01T09:00:00"})
    form.select_status("in_progress")
    async with HazardApiClient("http://test", transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(InvalidTransition):
            await form.submit(client)
    assert calls == []


async def test_form_submit_posts_and_updates_tracker():
    sent = {}

    def handler(request):
        sent["path"] = request.url.path
        sent["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"success": True, "data": {"id": 7, "team_assigned_at": "2025-03-01T09:00:00", "worker_id": 3}},
        )

    form = RepairForm(7, {"id": 7})
    form.select_status("assigned")
    form.worker_id = 3
    async with HazardApiClient("http://test", transport=httpx.MockTransport(handler)) as client:
        tracker = await form.submit(client)

    assert sent == {"path": "/update-repair/7", "body": {"status": "assigned", "worker_id": 3}}
    assert tracker["worker_id"] == 3
    assert form.current_stage is Stage.ASSIGNED


async def test_client_raises_api_error_from_body():
    def handler(request):
        return httpx.Response(400, json={"error": "Already completed"})

    async with HazardApiClient("http://test", transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.update_repair(1, "completed")
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Already completed"


async def test_client_against_app(client, seed):
    # ``client`` fixture installs the in-memory database override
    worker = await seed.worker("Iskandar")
    hazard = await seed.hazard()

    async with HazardApiClient("http://test", transport=ASGITransport(app=fastapi_app)) as api:
        assert await api.get_workers() == [{"id": worker.id, "name": "Iskandar"}]
        stats = await api.get_stats()
        assert stats[0]["id"] == hazard.id

        form = await RepairForm.load(api, hazard.id)
        assert form.current_stage is Stage.REPORTED
        form.select_status("assigned")
        form.worker_id = worker.id
        await form.submit(api)
        assert form.tracker["worker_name"] == "Iskandar"

        with pytest.raises(ApiError) as exc_info:
            await api.update_repair(hazard.id, "assigned")
        assert exc_info.value.status_code == 400
        assert latest_progress_text(await api.get_repair(hazard.id)).startswith("Team Assigned")
