"""HTTP tests for the salary and configuration routers."""
from __future__ import annotations

from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from compensation.core.config import get_settings
from compensation.main import create_app
from compensation.routers.dependencies import get_db_session


@pytest.fixture()
def client(monkeypatch, session, members) -> Iterator[TestClient]:
    monkeypatch.setenv("LOG_DIR", "")
    get_settings.cache_clear()
    app = create_app()

    def _session_override():
        yield session

    app.dependency_overrides[get_db_session] = _session_override
    yield TestClient(app)
    app.dependency_overrides.clear()
    get_settings.cache_clear()


def _create(client: TestClient, period: str = "2024-05") -> list[dict]:
    response = client.post("/api/salary/periods", json={"period": period})
    assert response.status_code == 200
    return response.json()["data"]


def test_create_period_returns_camel_case_records(client: TestClient) -> None:
    records = _create(client)

    assert len(records) == 5
    first = records[0]
    assert first["period"] == "2024-05"
    assert first["miniCoins"] == 0
    assert first["communityActivityPoints"] == 0
    assert Decimal(first["salaryAmount"]) == 0
    assert first["archived"] is False


def test_duplicate_period_answers_conflict(client: TestClient) -> None:
    _create(client)

    response = client.post("/api/salary/periods", json={"period": "2024-05"})

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "CONFLICT"


def test_invalid_period_answers_validation_error(client: TestClient) -> None:
    response = client.post("/api/salary/periods", json={"period": "2024-13"})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_period_listing_and_latest(client: TestClient) -> None:
    _create(client, "2024-04")
    _create(client, "2024-05")

    periods = client.get("/api/salary/periods").json()["data"]
    latest = client.get("/api/salary/periods/latest").json()["data"]

    assert [entry["period"] for entry in periods] == ["2024-05", "2024-04"]
    assert periods[0]["recordCount"] == 5
    assert latest == {"period": "2024-05"}


def test_calculate_member_preview(client: TestClient) -> None:
    response = client.post(
        "/api/salary/calculate-member",
        json={"communityActivityPoints": 50, "checkinCount": 45, "announcementCount": 2},
    )

    data = response.json()["data"]
    assert data["checkinPoints"] == 30
    assert data["announcementPoints"] == 10
    assert data["totalPoints"] == 90
    assert data["miniCoins"] == 180
    assert data["checkinLevel"] == "良好"


def test_calculate_member_out_of_range(client: TestClient) -> None:
    response = client.post("/api/salary/calculate-member", json={"eventHostingPoints": 400})

    assert response.status_code == 400
    assert "eventHostingPoints" in response.json()["message"]


def test_calculate_distribute_and_report(client: TestClient) -> None:
    for record in _create(client):
        response = client.put(
            f"/api/salary/{record['id']}",
            json={
                "version": record["version"],
                "communityActivityPoints": 100,
                "checkinCount": 50,
                "taskCompletionPoints": 100,
            },
        )
        assert response.status_code == 200

    distributed = client.post("/api/salary/calculate-distribute", params={"period": "2024-05"}).json()["data"]
    report = client.get("/api/salary/report", params={"period": "2024-05"}).json()["data"]
    stats = client.get("/api/salary/stats", params={"period": "2024-05"}).json()["data"]

    assert [record["miniCoins"] for record in distributed] == [400] * 5
    assert all(Decimal(record["salaryAmount"]) == 400 for record in distributed)
    assert all(Decimal(detail["salaryAmount"]) == 400 for detail in report["details"])
    assert report["allocatedTotal"] == 2000
    assert report["remainingAmount"] == 0
    assert len(report["details"]) == 5
    assert stats["usageRate"] == pytest.approx(1.0)


def test_calculate_distribute_unknown_period(client: TestClient) -> None:
    response = client.post("/api/salary/calculate-distribute", params={"period": "2031-01"})

    assert response.status_code == 404


def test_update_with_stale_version_answers_conflict(client: TestClient) -> None:
    record = _create(client)[0]
    client.put(f"/api/salary/{record['id']}", json={"version": 1, "remark": "first"})

    response = client.put(f"/api/salary/{record['id']}", json={"version": 1, "remark": "second"})

    assert response.status_code == 409


def test_members_view_orders_by_role(client: TestClient) -> None:
    _create(client)

    rows = client.get("/api/salary/members").json()["data"]

    assert [row["role"] for row in rows] == ["LEADER", "VICE_LEADER", "VICE_LEADER", "INTERN", "INTERN"]
    assert all(row["record"]["period"] == "2024-05" for row in rows)


def test_batch_save_reports_violations(client: TestClient) -> None:
    records = _create(client)
    payload = {
        "period": "2024-05",
        "operatorId": 1,
        "records": [
            {"userId": record["userId"], "miniCoins": 500 if index == 0 else 300, "version": record["version"]}
            for index, record in enumerate(records)
        ],
    }

    response = client.post("/api/salary/batch-save", json=payload)

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is False
    assert body["data"]["violatingUserIds"] == [records[0]["userId"]]
    assert body["data"]["errors"][0]["field"] == "miniCoins"


def test_batch_save_then_archive_then_refuse_writes(client: TestClient) -> None:
    records = _create(client)
    payload = {
        "period": "2024-05",
        "operatorId": 1,
        "records": [{"userId": record["userId"], "miniCoins": 400} for record in records],
    }

    saved = client.post("/api/salary/batch-save", json=payload).json()
    archived = client.post("/api/salary/archive", json={"period": "2024-05", "operatorId": 1}).json()
    refused = client.post("/api/salary/archive", json={"period": "2024-05", "operatorId": 1})

    assert saved["success"] is True
    assert len(saved["data"]["savedRecords"]) == 5
    assert archived["data"] == {"period": "2024-05", "archivedCount": 5}
    assert refused.status_code == 400
    assert refused.json()["code"] == "INVALID_STATE"


def test_config_round_trip_and_validation(client: TestClient) -> None:
    saved = client.put("/api/salary-config", json={"salary_pool_total": 2500, "theme": "dark"})
    rejected = client.put("/api/salary-config", json={"mini_coins_min": "900"})

    assert saved.status_code == 200
    assert saved.json()["data"]["salary_pool_total"] == "2500"
    assert rejected.status_code == 400
    assert "个人最低迷你币" in rejected.json()["message"]
    assert client.get("/api/salary-config").json()["data"] == {"salary_pool_total": "2500", "theme": "dark"}


def test_checkin_tiers_endpoints(client: TestClient) -> None:
    defaults = client.get("/api/salary-config/checkin-tiers").json()["data"]
    assert defaults[0] == {"minCount": 0, "maxCount": 19, "points": -20, "label": "不合格"}

    response = client.put(
        "/api/salary-config/checkin-tiers",
        json={"tiers": [{"minCount": 0, "maxCount": 29, "points": 0}, {"minCount": 30, "maxCount": 999, "points": 20}]},
    )
    assert response.status_code == 200
    assert len(response.json()["data"]) == 2

    gap = client.put(
        "/api/salary-config/checkin-tiers",
        json={"tiers": [{"minCount": 0, "maxCount": 10, "points": 0}, {"minCount": 20, "maxCount": 999, "points": 5}]},
    )
    assert gap.status_code == 400


def test_rotation_thresholds_endpoint(client: TestClient) -> None:
    data = client.get("/api/salary-config/rotation-thresholds").json()["data"]

    assert data == {
        "promotionPointsThreshold": 100,
        "demotionSalaryThreshold": 150,
        "demotionConsecutiveMonths": 2,
        "dismissalPointsThreshold": 100,
        "dismissalConsecutiveMonths": 2,
    }
