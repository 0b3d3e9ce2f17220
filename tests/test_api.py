"""Tests de endpoints FastAPI."""

from __future__ import annotations

from datetime import date
from typing import List

from conftest import InMemoryFinder, make_priority
from fastapi.testclient import TestClient

from priorityradar.api.main import create_app
from priorityradar.domain.clock import FixedClock
from priorityradar.domain.enums import PriorityStatus
from priorityradar.domain.models import Priority


def _client(rows: List[Priority], today: date = date(2024, 3, 20)) -> TestClient:
    app = create_app()
    app.state.priorities_repo = InMemoryFinder(rows)
    app.state.clock = FixedClock(today)
    return TestClient(app)


def test_health() -> None:
    client = _client([])
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json().get("status") == "ok"


def test_list_endpoint(march_priorities: List[Priority]) -> None:
    client = _client(march_priorities)
    res = client.get("/priorities", params={"month": 3, "year": 2024, "limit": 50})
    assert res.status_code == 200
    data = res.json()
    assert data["total"] == 8
    assert data["page"] == 1
    assert data["limit"] == 50
    first = data["items"][0]
    assert first["id"] == "carried"
    assert first["monthlyClass"] == "OVERDUE_CARRIED_FROM_EARLIER"
    assert first["compliance"] == "NOT_MET"
    assert first["compliancePct"] == "0%"
    assert first["untilAt"].startswith("2024-01-05")
    assert data["icp"]["icp"] == 42.86
    assert data["icp"]["totalPlanned"] == 7


def test_list_endpoint_defaults_and_filters(march_priorities: List[Priority]) -> None:
    client = _client(march_priorities)
    res = client.get("/priorities", params={"monthlyClass": "CANCELED"})
    assert res.status_code == 200
    data = res.json()
    assert data["limit"] == 10
    assert [i["id"] for i in data["items"]] == ["canceled"]
    assert data["icp"]["month"] == 3 and data["icp"]["year"] == 2024

    bad = client.get("/priorities", params={"month": 13, "year": 2024})
    assert bad.status_code == 422


def test_icp_endpoint(march_priorities: List[Priority]) -> None:
    client = _client(march_priorities)
    res = client.get("/priorities/icp", params={"month": 3, "year": 2024, "positionId": "pos-1"})
    assert res.status_code == 200
    payload = res.json()
    assert payload["positionId"] == "pos-1"
    assert "objectiveId" not in payload
    assert payload["totalCompleted"] == 3
    assert payload["completedInOtherMonth"] == 1
    assert payload["completedEarly"] == 1
    assert payload["canceled"] == 1
    assert payload["notCompletedOverdue"] == 1


def test_series_endpoint_matches_icp_endpoint(march_priorities: List[Priority]) -> None:
    client = _client(march_priorities)
    res = client.get(
        "/priorities/icp/series", params={"from": "2024-01", "to": "2024-04", "positionId": "pos-1"}
    )
    assert res.status_code == 200
    data = res.json()
    assert data["from"] == "2024-01"
    assert data["to"] == "2024-04"
    assert data["positionId"] == "pos-1"
    assert len(data["items"]) == 4

    for item in data["items"]:
        single = client.get(
            "/priorities/icp",
            params={"month": item["month"], "year": item["year"], "positionId": "pos-1"},
        ).json()
        single.pop("positionId")
        assert single == item


def test_series_endpoint_empty_scope() -> None:
    client = _client([])
    res = client.get("/priorities/icp/series", params={"from": "2024-01", "to": "2024-03"})
    assert res.status_code == 200
    items = res.json()["items"]
    assert [(i["month"], i["icp"], i["totalPlanned"], i["totalCompleted"]) for i in items] == [
        (1, 0, 0, 0),
        (2, 0, 0, 0),
        (3, 0, 0, 0),
    ]


def test_series_endpoint_rejects_invalid_ranges() -> None:
    client = _client([])
    inverted = client.get("/priorities/icp/series", params={"from": "2024-05", "to": "2024-01"})
    assert inverted.status_code == 400
    too_long = client.get("/priorities/icp/series", params={"from": "2020-01", "to": "2024-01"})
    assert too_long.status_code == 400
    assert "36" in too_long.json()["detail"]
    malformed = client.get("/priorities/icp/series", params={"from": "2024-1", "to": "2024-02"})
    assert malformed.status_code == 422


def test_detail_endpoint() -> None:
    p = make_priority(
        "done", until="2024-02-10", status=PriorityStatus.CLOSED, finished="2024-02-09"
    )
    client = _client([p])
    feb = client.get("/priorities/done", params={"month": 2, "year": 2024})
    assert feb.status_code == 200
    assert feb.json()["monthlyClass"] == "COMPLETED_ON_TIME"
    assert feb.json()["period"] == "2024-02"

    mar = client.get("/priorities/done")
    assert mar.status_code == 200
    assert mar.json()["monthlyClass"] is None
    assert mar.json()["period"] == "2024-03"

    missing = client.get("/priorities/does-not-exist")
    assert missing.status_code == 404
