def test_user_creates_own_account(client, make_user):
    alice, alice_headers = make_user("alice")

    response = client.post("/api/accounts", json={"user_id": alice["id"], "name": "Main"}, headers=alice_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user_id"] == alice["id"]
    assert data["name"] == "Main"
    assert len(data["api_token"]) == 64


def test_user_cannot_create_account_for_someone_else(client, make_user):
    _, alice_headers = make_user("alice")
    bob, _ = make_user("bob")

    response = client.post("/api/accounts", json={"user_id": bob["id"], "name": "Sneaky"}, headers=alice_headers)

    assert response.status_code == 403
    assert response.json()["message"] == "You can only create accounts for yourself"


def test_admin_creates_account_for_anyone(client, admin_headers, make_user, make_account):
    alice, _ = make_user("alice")

    account = make_account(alice["id"], admin_headers)

    assert account["user_id"] == alice["id"]


def test_admin_account_for_missing_user(client, admin_headers):
    response = client.post("/api/accounts", json={"user_id": 999, "name": "Ghost"}, headers=admin_headers)

    assert response.status_code == 404


def test_create_account_validation(client, make_user):
    alice, alice_headers = make_user("alice")

    response = client.post("/api/accounts", json={"user_id": alice["id"], "name": ""}, headers=alice_headers)

    assert response.status_code == 400


def test_list_accounts_is_admin_only(client, admin_headers, make_user, make_account):
    alice, alice_headers = make_user("alice")
    make_account(alice["id"], alice_headers)

    assert client.get("/api/accounts", headers=alice_headers).status_code == 403
    listed = client.get("/api/accounts", headers=admin_headers).json()["data"]
    assert len(listed) == 1
    assert listed[0]["user"]["username"] == "alice"


def test_my_accounts(client, make_user, make_account):
    alice, alice_headers = make_user("alice")
    bob, bob_headers = make_user("bob")
    make_account(alice["id"], alice_headers, "A1")
    make_account(alice["id"], alice_headers, "A2")
    make_account(bob["id"], bob_headers, "B1")

    response = client.get("/api/accounts/me", headers=alice_headers)

    assert response.status_code == 200
    assert [a["name"] for a in response.json()["data"]] == ["A1", "A2"]


def test_foreign_account_is_forbidden(client, make_user, make_account):
    alice, alice_headers = make_user("alice")
    _, bob_headers = make_user("bob")
    account = make_account(alice["id"], alice_headers)
    path = f"/api/accounts/{account['id']}"

    responses = [
        client.get(path, headers=bob_headers),
        client.put(path, json={"name": "Mine now"}, headers=bob_headers),
        client.delete(path, headers=bob_headers),
        client.post(f"{path}/regenerate-token", headers=bob_headers),
    ]

    for response in responses:
        assert response.status_code == 403
        assert response.json() == {"success": False, "message": "Access denied"}
        assert "api_token" not in response.text


def test_get_account_includes_owner(client, make_user, make_account):
    alice, alice_headers = make_user("alice")
    account = make_account(alice["id"], alice_headers)

    response = client.get(f"/api/accounts/{account['id']}", headers=alice_headers)

    assert response.status_code == 200
    assert response.json()["data"]["user"]["username"] == "alice"


def test_missing_and_malformed_account_ids(client, admin_headers):
    missing = client.get("/api/accounts/999", headers=admin_headers)
    malformed = client.get("/api/accounts/0", headers=admin_headers)

    assert missing.status_code == 404
    assert missing.json()["message"] == "Account not found"
    assert malformed.status_code == 400
    assert malformed.json()["message"] == "Invalid account ID"


def test_rename_and_delete_account(client, make_user, make_account):
    alice, alice_headers = make_user("alice")
    account = make_account(alice["id"], alice_headers)
    path = f"/api/accounts/{account['id']}"

    renamed = client.put(path, json={"name": "Renamed"}, headers=alice_headers)
    deleted = client.delete(path, headers=alice_headers)

    assert renamed.status_code == 200
    assert renamed.json()["data"]["name"] == "Renamed"
    assert deleted.status_code == 200
    assert client.get(path, headers=alice_headers).status_code == 404


def test_regenerated_token_replaces_the_old_one(client, make_user, make_account):
    alice, alice_headers = make_user("alice")
    account = make_account(alice["id"], alice_headers)
    body = {
        "timestamp": "2024-01-15T10:30:00Z",
        "daily_profit_loss": 1.0,
        "total_trades_today": 1,
        "total_balance": 100.0,
    }

    response = client.post(f"/api/accounts/{account['id']}/regenerate-token", headers=alice_headers)
    new_token = response.json()["data"]["api_token"]

    assert response.status_code == 200
    assert new_token != account["api_token"]
    old = client.post("/api/ingest/statistics", json=body, headers={"X-API-Token": account["api_token"]})
    new = client.post("/api/ingest/statistics", json=body, headers={"X-API-Token": new_token})
    assert old.status_code == 401
    assert old.json()["message"] == "Invalid API token"
    assert new.status_code == 201
