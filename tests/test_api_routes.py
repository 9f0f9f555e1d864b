"""
tests/test_api_routes.py -- Integration tests for the auth and task routes.

These tests exercise the full stack: FastAPI routing -> Requires/RoleGate
dependency -> AuthService / TaskStore -> ownership policy -> exception
handlers -> response model serialization.

Fixtures used (from conftest.py):
  - api_client with an admin, alice and bob already registered.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from auth.models import Role
from auth.tokens import TokenService


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _create_task(api, token: str, title: str = "Alice's task") -> dict:
    resp = api.client.post("/api/v1/tasks", json={"title": title}, headers=bearer(token))
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestRegisterAndLogin:
    """register -> login -> duplicate register, end to end."""

    def test_register_login_duplicate(self, api_client) -> None:
        client = api_client.client
        resp = client.post("/api/v1/register", json={"email": "a@x.com", "password": "secret"})
        assert resp.status_code == 201, resp.text
        assert resp.json()["message"] == "User registered"

        resp = client.post("/api/v1/login", json={"email": "a@x.com", "password": "secret"})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["token_type"] == "bearer"
        assert body["expires_in"] == 3600
        assert resp.headers["cache-control"] == "no-store"

        me = client.get("/api/v1/me", headers=bearer(body["access_token"]))
        assert me.status_code == 200
        assert me.json()["role"] == "user"

        resp = client.post("/api/v1/login", json={"email": "a@x.com", "password": "wrong"})
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "invalid_credentials"

        resp = client.post("/api/v1/register", json={"email": "a@x.com", "password": "secret"})
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "identity_exists"

    def test_unknown_email_same_error_as_wrong_password(self, api_client) -> None:
        client = api_client.client
        unknown = client.post("/api/v1/login", json={"email": "ghost@x.com", "password": "x"})
        wrong = client.post("/api/v1/login", json={"email": "alice@example.com", "password": "x"})
        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()

    def test_register_missing_fields(self, api_client) -> None:
        resp = api_client.client.post("/api/v1/register", json={"email": "nopw@x.com"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "missing_fields"

    def test_register_unknown_role_rejected(self, api_client) -> None:
        resp = api_client.client.post(
            "/api/v1/register", json={"email": "weird@x.com", "password": "secret", "role": "superuser"}
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "invalid_role"

    def test_register_as_admin(self, api_client) -> None:
        client = api_client.client
        client.post("/api/v1/register", json={"email": "boss@x.com", "password": "secret", "role": "admin"})
        token = client.post("/api/v1/login", json={"email": "boss@x.com", "password": "secret"}).json()["access_token"]
        assert client.get("/api/v1/me", headers=bearer(token)).json()["role"] == "admin"


class TestGate:
    def test_no_token(self, api_client) -> None:
        resp = api_client.client.get("/api/v1/tasks")
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    def test_malformed_header(self, api_client) -> None:
        resp = api_client.client.get("/api/v1/tasks", headers={"Authorization": "Token abc"})
        assert resp.status_code == 401

    def test_expired_and_forged_tokens_identical(self, api_client) -> None:
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        expired = TokenService(api_client.secret, clock=lambda: past).issue(api_client.alice_id, Role.user)
        forged = TokenService("f" * 32).issue(api_client.alice_id, Role.admin)

        expired_resp = api_client.client.get("/api/v1/me", headers=bearer(expired))
        forged_resp = api_client.client.get("/api/v1/me", headers=bearer(forged))
        assert expired_resp.status_code == forged_resp.status_code == 401
        assert expired_resp.json() == forged_resp.json()

    def test_admin_route_rejects_user(self, api_client) -> None:
        resp = api_client.client.get("/api/v1/users", headers=bearer(api_client.alice_token))
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "forbidden"

    def test_admin_route_accepts_admin_without_leaking_hashes(self, api_client) -> None:
        resp = api_client.client.get("/api/v1/users", headers=bearer(api_client.admin_token))
        assert resp.status_code == 200
        users = resp.json()
        assert {"admin@example.com", "alice@example.com", "bob@example.com"} <= {u["email"] for u in users}
        assert all("hashed_password" not in u and "password" not in u for u in users)


class TestTaskOwnership:
    def test_owner_is_taken_from_token(self, api_client) -> None:
        resp = api_client.client.post(
            "/api/v1/tasks",
            json={"title": "spoof", "owner_id": "999", "userId": "999"},
            headers=bearer(api_client.alice_token),
        )
        assert resp.status_code == 201
        assert resp.json()["owner_id"] == api_client.alice_id

    def test_title_required(self, api_client) -> None:
        resp = api_client.client.post("/api/v1/tasks", json={}, headers=bearer(api_client.alice_token))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "title_required"

    def test_non_owner_forbidden_admin_allowed(self, api_client) -> None:
        client = api_client.client
        task = _create_task(api_client, api_client.alice_token)
        url = f"/api/v1/tasks/{task['id']}"

        resp = client.put(url, json={"title": "bob was here"}, headers=bearer(api_client.bob_token))
        assert resp.status_code == 403
        assert client.get(url, headers=bearer(api_client.bob_token)).status_code == 403
        assert client.delete(url, headers=bearer(api_client.bob_token)).status_code == 403

        resp = client.put(url, json={"title": "admin edit"}, headers=bearer(api_client.admin_token))
        assert resp.status_code == 200
        assert resp.json()["title"] == "admin edit"
        assert resp.json()["owner_id"] == api_client.alice_id

    def test_owner_can_update_and_delete(self, api_client) -> None:
        client = api_client.client
        task = _create_task(api_client, api_client.alice_token, "draft")
        url = f"/api/v1/tasks/{task['id']}"

        resp = client.put(url, json={"title": "final"}, headers=bearer(api_client.alice_token))
        assert resp.status_code == 200
        assert resp.json()["title"] == "final"

        resp = client.put(url, json={}, headers=bearer(api_client.alice_token))
        assert resp.json()["title"] == "final"

        resp = client.delete(url, headers=bearer(api_client.alice_token))
        assert resp.status_code == 200
        assert resp.json() == {"message": "Deleted"}
        assert client.get(url, headers=bearer(api_client.alice_token)).status_code == 404

    def test_missing_task_is_404_for_every_role(self, api_client) -> None:
        client = api_client.client
        for token in (api_client.alice_token, api_client.bob_token, api_client.admin_token):
            assert client.put("/api/v1/tasks/99999", json={"title": "x"}, headers=bearer(token)).status_code == 404
            assert client.delete("/api/v1/tasks/99999", headers=bearer(token)).status_code == 404

    @pytest.mark.parametrize("task_id", ["abc", "-1", "1.5", "99999999999999999999999"])
    def test_unparsable_task_id_is_404(self, api_client, task_id: str) -> None:
        client = api_client.client
        for token in (api_client.alice_token, api_client.admin_token):
            resp = client.put(f"/api/v1/tasks/{task_id}", json={"title": "x"}, headers=bearer(token))
            assert resp.status_code == 404
            assert resp.json()["error"]["code"] == "not_found"
            assert client.get(f"/api/v1/tasks/{task_id}", headers=bearer(token)).status_code == 404
            assert client.delete(f"/api/v1/tasks/{task_id}", headers=bearer(token)).status_code == 404

    def test_list_scoped_by_role(self, api_client) -> None:
        client = api_client.client
        alice_task = _create_task(api_client, api_client.alice_token, "alice list")
        bob_task = _create_task(api_client, api_client.bob_token, "bob list")

        alice_ids = {t["id"] for t in client.get("/api/v1/tasks", headers=bearer(api_client.alice_token)).json()}
        admin_ids = {t["id"] for t in client.get("/api/v1/tasks", headers=bearer(api_client.admin_token)).json()}

        assert alice_task["id"] in alice_ids
        assert bob_task["id"] not in alice_ids
        assert {alice_task["id"], bob_task["id"]} <= admin_ids
