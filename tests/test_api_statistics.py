from datetime import datetime, timezone

import pytest

from xtrack.deps import DbSession, get_statistic_service
from xtrack.services import StatisticService

SERVER_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def frozen_today(app):
    def _statistics(session: DbSession) -> StatisticService:
        return StatisticService(session, clock=lambda: SERVER_NOW)

    app.dependency_overrides[get_statistic_service] = _statistics
    yield
    app.dependency_overrides.pop(get_statistic_service, None)


@pytest.fixture
def alice_account(make_user, make_account):
    alice, alice_headers = make_user("alice")
    return make_account(alice["id"], alice_headers), alice_headers


def ingest(client, token, timestamp, pl=0.0, trades=0, balance=0.0):
    return client.post(
        "/api/ingest/statistics",
        json={
            "timestamp": timestamp,
            "daily_profit_loss": pl,
            "total_trades_today": trades,
            "total_balance": balance,
        },
        headers={"X-API-Token": token},
    )


def test_alice_scenario(client, frozen_today, make_user, login_headers):
    alice, _ = make_user("alice", "pw123456")
    alice_headers = login_headers("alice", "pw123456")
    created = client.post("/api/accounts", json={"user_id": alice["id"], "name": "Main"}, headers=alice_headers)
    account = created.json()["data"]

    ingested = ingest(client, account["api_token"], "2024-01-15T10:30:00Z", 150.5, 3, 10500.0)
    assert ingested.status_code == 201
    assert ingested.json()["message"] == "Statistic ingested successfully"

    response = client.get(f"/api/statistics/{account['id']}/today", headers=alice_headers)

    assert response.status_code == 200
    summary = response.json()["data"]
    assert summary["total_records"] == 1
    assert summary["latest_balance"] == 10500.0
    assert summary["daily_pl"] == 150.5
    assert summary["trades_today"] == 3
    assert summary["latest_update"].startswith("2024-01-15T10:30:00")
    assert len(summary["statistics"]) == 1


def test_today_summary_with_no_data_omits_statistics(client, frozen_today, alice_account):
    account, headers = alice_account

    summary = client.get(f"/api/statistics/{account['id']}/today", headers=headers).json()["data"]

    assert summary == {
        "total_records": 0,
        "latest_balance": 0.0,
        "daily_pl": 0.0,
        "trades_today": 0,
        "latest_update": None,
    }


def test_overall_summary_without_data(client, alice_account):
    account, headers = alice_account

    response = client.get(f"/api/statistics/{account['id']}/summary", headers=headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Overall summary retrieved successfully"
    assert response.json()["data"] == {"has_data": False, "current_balance": 0.0, "latest_update": None}


def test_overall_summary_with_data(client, alice_account):
    account, headers = alice_account
    ingest(client, account["api_token"], "2024-01-14T10:00:00Z", -3.0, 2, 990.0)
    ingest(client, account["api_token"], "2024-01-15T10:00:00Z", 12.0, 4, 1002.0)

    data = client.get(f"/api/statistics/{account['id']}/summary", headers=headers).json()["data"]

    assert data["has_data"] is True
    assert data["current_balance"] == 1002.0
    assert data["latest_pl"] == 12.0
    assert data["latest_trades"] == 4


def test_ingest_requires_a_valid_api_token(client, admin_headers):
    missing = ingest(client, "", "2024-01-15T10:30:00Z")
    invalid = ingest(client, "f" * 64, "2024-01-15T10:30:00Z")
    session_only = client.post(
        "/api/ingest/statistics",
        json={"timestamp": "2024-01-15T10:30:00Z", "daily_profit_loss": 0, "total_trades_today": 0, "total_balance": 0},
        headers=admin_headers,
    )

    assert missing.status_code == 401
    assert missing.json()["message"] == "API token required"
    assert invalid.status_code == 401
    assert invalid.json()["message"] == "Invalid API token"
    assert session_only.status_code == 401


def test_ingest_validation(client, alice_account):
    account, _ = alice_account
    token = account["api_token"]

    bad_timestamp = ingest(client, token, "15/01/2024 10:30")
    negative_trades = ingest(client, token, "2024-01-15T10:30:00Z", trades=-1)
    negative_balance = ingest(client, token, "2024-01-15T10:30:00Z", balance=-0.01)

    assert bad_timestamp.status_code == 400
    assert bad_timestamp.json()["message"] == "Invalid timestamp format, use RFC3339 (e.g., 2024-01-15T10:30:00Z)"
    assert negative_trades.status_code == 400
    assert negative_balance.status_code == 400


def test_list_is_paginated_newest_first(client, alice_account):
    account, headers = alice_account
    for day in range(1, 6):
        ingest(client, account["api_token"], f"2024-01-0{day}T10:00:00Z", pl=float(day))

    response = client.get(f"/api/statistics/{account['id']}", params={"page": 1, "page_size": 2}, headers=headers)

    body = response.json()
    assert body["message"] == "Statistics retrieved successfully"
    assert [s["daily_pl"] for s in body["data"]] == [5.0, 4.0]
    assert body["pagination"] == {"page": 1, "page_size": 2, "total_items": 5, "total_pages": 3}


@pytest.mark.parametrize("page,page_size", [("0", "0"), ("-1", "101"), ("abc", "-5")])
def test_bad_paging_falls_back_to_defaults(client, alice_account, page, page_size):
    account, headers = alice_account

    response = client.get(
        f"/api/statistics/{account['id']}",
        params={"page": page, "page_size": page_size},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["pagination"] == {"page": 1, "page_size": 20, "total_items": 0, "total_pages": 0}


def test_range_is_inclusive_of_the_end_date(client, alice_account):
    account, headers = alice_account
    ingest(client, account["api_token"], "2024-01-09T23:59:59Z", pl=1.0)
    ingest(client, account["api_token"], "2024-01-10T00:00:00Z", pl=2.0)
    ingest(client, account["api_token"], "2024-01-12T00:00:00Z", pl=3.0)
    ingest(client, account["api_token"], "2024-01-12T23:59:59Z", pl=4.0)
    ingest(client, account["api_token"], "2024-01-13T00:00:00Z", pl=5.0)

    response = client.get(
        f"/api/statistics/{account['id']}/range",
        params={"start_date": "2024-01-10", "end_date": "2024-01-12"},
        headers=headers,
    )

    assert response.status_code == 200
    assert [s["daily_pl"] for s in response.json()["data"]] == [4.0, 3.0, 2.0]


@pytest.mark.parametrize(
    "params,message",
    [
        ({"start_date": "2024-01-10"}, "start_date and end_date are required"),
        ({"start_date": "2024/01/10", "end_date": "2024-01-12"}, "Invalid start_date format, use YYYY-MM-DD"),
        ({"start_date": "2024-01-10", "end_date": "Jan 12"}, "Invalid end_date format, use YYYY-MM-DD"),
    ],
)
def test_range_parameter_errors(client, alice_account, params, message):
    account, headers = alice_account

    response = client.get(f"/api/statistics/{account['id']}/range", params=params, headers=headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": message}


def test_foreign_statistics_are_forbidden(client, alice_account, make_user):
    account, _ = alice_account
    _, bob_headers = make_user("bob")

    for suffix in ("", "/range?start_date=2024-01-01&end_date=2024-01-31", "/today", "/summary"):
        response = client.get(f"/api/statistics/{account['id']}{suffix}", headers=bob_headers)
        assert response.status_code == 403


def test_unknown_account_statistics(client, admin_headers, make_user):
    _, bob_headers = make_user("bob")

    assert client.get("/api/statistics/999", headers=bob_headers).status_code == 403
    admin_view = client.get("/api/statistics/999/summary", headers=admin_headers)
    assert admin_view.status_code == 200
    assert admin_view.json()["data"]["has_data"] is False


def test_admin_reads_any_account(client, admin_headers, alice_account):
    account, _ = alice_account
    ingest(client, account["api_token"], "2024-01-15T10:00:00Z", pl=7.0)

    response = client.get(f"/api/statistics/{account['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["pagination"]["total_items"] == 1


@pytest.mark.parametrize(
    "raw_body",
    [
        '{"timestamp": "2024-01-15T10:30:00Z", "daily_profit_loss": NaN, "total_trades_today": 1, "total_balance": 100.0}',
        '{"timestamp": "2024-01-15T10:30:00Z", "daily_profit_loss": 1.0, "total_trades_today": 1, "total_balance": Infinity}',
        '{"timestamp": "2024-01-15T10:30:00Z", "daily_profit_loss": -Infinity, "total_trades_today": 1, "total_balance": 1.0}',
    ],
)
def test_ingest_rejects_non_finite_numbers(client, alice_account, raw_body):
    account, headers = alice_account

    response = client.post(
        "/api/ingest/statistics",
        content=raw_body,
        headers={"X-API-Token": account["api_token"], "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    summary = client.get(f"/api/statistics/{account['id']}/summary", headers=headers).json()["data"]
    assert summary["has_data"] is False


@pytest.mark.parametrize("timestamp", ["2024-01-15 10:30:00+00:00", "2024-01-15T10:30+00:00"])
def test_ingest_rejects_iso_forms_outside_rfc3339(client, alice_account, timestamp):
    account, _ = alice_account

    response = ingest(client, account["api_token"], timestamp)

    assert response.status_code == 400


def test_huge_page_number_falls_back_to_first_page(client, alice_account):
    account, headers = alice_account
    ingest(client, account["api_token"], "2024-01-15T10:00:00Z", pl=1.0)

    response = client.get(
        f"/api/statistics/{account['id']}",
        params={"page": "99999999999999999999"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["pagination"]["page"] == 1
    assert len(response.json()["data"]) == 1


def test_range_up_to_the_last_calendar_date(client, alice_account):
    account, headers = alice_account
    ingest(client, account["api_token"], "2024-01-15T10:00:00Z", pl=1.0)

    response = client.get(
        f"/api/statistics/{account['id']}/range",
        params={"start_date": "2024-01-01", "end_date": "9999-12-31"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["pagination"]["total_items"] == 1
