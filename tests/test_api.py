from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from roster_management.api.main import create_app
from roster_management.storage import InMemoryDocumentStore


@pytest.fixture()
def api_client():
    return TestClient(create_app(InMemoryDocumentStore()))


def test_health_reports_unpublished_roster(api_client) -> None:
    response = api_client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["roster_published"] is False


def test_preview_does_not_publish(api_client, example_config) -> None:
    response = api_client.post("/roster/preview", json=example_config)

    assert response.status_code == 200
    body = response.json()
    assert len(body["roster"]) == 5
    assert body["workload_balance"] == {"brandon": 5, "ying-xian": 5, "derlinder": 5, "fadzlynn": 5}
    assert body["summary_stats"]["total_assignments"] == 20

    assert api_client.get("/roster").status_code == 404


def test_generate_publishes_and_exports(api_client, example_config) -> None:
    response = api_client.post("/roster/generate", json=example_config)
    assert response.status_code == 200

    stored = api_client.get("/roster").json()
    assert stored["roster"]["2026-01-05"][0] == {
        "task": "EFT",
        "staff": "Brandon",
        "task_id": "eft",
        "staff_id": "brandon",
    }

    ics = api_client.get("/roster/export.ics")
    assert ics.status_code == 200
    assert ics.headers["content-type"].startswith("text/calendar")
    assert ics.text.count("BEGIN:VEVENT") == 20

    csv_response = api_client.get("/roster/export.csv")
    assert csv_response.status_code == 200
    assert csv_response.text.splitlines()[1] == "2026-01-05,EFT,Brandon"


def test_exports_without_roster_return_404(api_client) -> None:
    assert api_client.get("/roster/export.ics").status_code == 404
    assert api_client.get("/roster/export.csv").status_code == 404


def test_invalid_configuration_returns_field(api_client, example_config) -> None:
    example_config["staff"] = []

    response = api_client.post("/roster/generate", json=example_config)

    assert response.status_code == 400
    assert response.json()["field"] == "staff"


def test_schedule_conflict_returns_409_and_keeps_roster(api_client, example_config) -> None:
    api_client.post("/roster/generate", json=example_config)
    before = api_client.get("/roster").json()

    response = api_client.post("/roster/generate", json={**example_config, "staff": ["Brandon"]})

    assert response.status_code == 409
    assert response.json()["date"] == "2026-01-05"
    assert response.json()["task"] == "IPT+SKG"
    assert api_client.get("/roster").json() == before


def test_structured_entries_are_accepted(api_client) -> None:
    payload = {
        "staff": [{"name": "Brandon", "id": "cep-1"}, "Nisa"],
        "tasks": [{"name": "On-call", "weekend_coverage": True}],
        "startDate": "2026-01-05",
        "weeks": 1,
    }

    response = api_client.post("/roster/preview", json=payload)

    assert response.status_code == 200
    assert len(response.json()["roster"]) == 7
    assert response.json()["roster"]["2026-01-05"][0]["staff_id"] == "cep-1"


def test_checkin_flow(api_client) -> None:
    response = api_client.post(
        "/wellbeing/checkins",
        json={"staff_id": "nisa", "phase": "reacting", "energy": 62, "note": "busy"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["checkin"]["phase"] == "REACTING"
    assert body["pulse_score"] == 6
    assert body["messages"][-1] == "Logged: REACTING at 62%. Take care!"

    history = api_client.get("/wellbeing/checkins/nisa").json()
    assert [log["energy"] for log in history["logs"]] == [62]
    assert history["logs"][0]["note"] == "busy"


def test_checkin_rejects_unknown_phase(api_client) -> None:
    response = api_client.post("/wellbeing/checkins", json={"phase": "GREAT", "energy": 50})

    assert response.status_code == 400


def test_checkin_rejects_out_of_range_energy(api_client) -> None:
    response = api_client.post("/wellbeing/checkins", json={"phase": "HEALTHY", "energy": 120})

    assert response.status_code == 422


def test_burnout_grid_endpoint(api_client) -> None:
    api_client.post("/wellbeing/checkins", json={"staff_id": "alif", "phase": "ILL", "energy": 10})

    response = api_client.get("/wellbeing/burnout", params={"days": 3})

    assert response.status_code == 200
    body = response.json()
    assert len(body["dates"]) == 3
    today = body["staff"]["alif"][-1]
    assert today["energy"] == 10
    assert today["risk"] == "alert"
    assert body["staff"]["alif"][0]["energy"] is None


def test_burnout_rejects_bad_date(api_client) -> None:
    assert api_client.get("/wellbeing/burnout", params={"end": "yesterday"}).status_code == 400


class FixedAssistant:
    def __init__(self, reply):
        self.reply = reply

    def generate(self, prompt):
        return self.reply


def test_analyze_returns_assessment() -> None:
    reply = '{"reply": "Sounds like a good day.", "phase": "HEALTHY", "energy": 88, "action": "Keep it up."}'
    client = TestClient(create_app(InMemoryDocumentStore(), assistant=FixedAssistant(reply)))

    response = client.post("/wellbeing/analyze", json={"text": "Great clinic today"})

    assert response.status_code == 200
    assert response.json() == {
        "reply": "Sounds like a good day.",
        "phase": "HEALTHY",
        "energy": 88,
        "action": "Keep it up.",
    }


def test_analyze_falls_back_on_bad_reply() -> None:
    client = TestClient(create_app(InMemoryDocumentStore(), assistant=FixedAssistant("not json")))

    response = client.post("/wellbeing/analyze", json={"text": "meh"})

    assert response.status_code == 200
    assert response.json()["phase"] == "REACTING"
    assert response.json()["energy"] == 50


def test_analyze_without_assistant_returns_503(api_client) -> None:
    assert api_client.post("/wellbeing/analyze", json={"text": "hi"}).status_code == 503


def test_preview_rejects_excessive_weeks(api_client, example_config) -> None:
    response = api_client.post("/roster/preview", json={**example_config, "weeks": 10_000_000})

    assert response.status_code == 422
