"""
Tests for the HTTP surface.

Validates:
1. Auth routes map identity errors to status codes and issue per-client tokens
2. Clients never share a signed-in user or a quota
3. Conversations spend quota and autosave projects
4. Admin routes are role-gated; backup/restore/reset round trip
5. Maintenance mode blocks everyone but administrators
"""

import sys
import os

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from backend.main import create_app
from scribe.errors import MissingProviderCredential

ADMIN_KEY = "test-admin-key"


class FakeProvider:
    def __init__(self, chunks=("Once ", "upon ", "a time."), error=None):
        self.chunks = chunks
        self.error = error
        self.calls = []

    async def stream_reply(self, system_instruction, history):
        self.calls.append((system_instruction, [m.text for m in history]))
        if self.error:
            raise self.error
        for chunk in self.chunks:
            yield chunk

    async def optimize_prompt(self, raw_input, kind):
        if self.error:
            raise self.error
        return f"You are a {kind} writer. {raw_input}"


def configure(monkeypatch, tmp_path, rate_limit=1000, ai_limit=1000, auth_limit=1000):
    monkeypatch.setenv("SCRIBE_DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("SCRIBE_AUTH_LATENCY", "0")
    monkeypatch.setenv("SCRIBE_ADMIN_KEY", ADMIN_KEY)
    monkeypatch.setenv("SCRIBE_RATE_LIMIT", str(rate_limit))
    monkeypatch.setenv("SCRIBE_AI_RATE_LIMIT", str(ai_limit))
    monkeypatch.setenv("SCRIBE_AUTH_RATE_LIMIT", str(auth_limit))


@pytest.fixture
def client(tmp_path, monkeypatch):
    configure(monkeypatch, tmp_path)
    app = create_app()
    with TestClient(app) as c:
        app.state.provider = FakeProvider()
        yield c


def _keep_token(client, response):
    if response.status_code == 200:
        client.headers["Authorization"] = f"Bearer {response.json()['token']}"
    return response


def signup(client, email="ada@example.com", password="secret", name="Ada"):
    response = client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})
    return _keep_token(client, response)


def login(client, email="ada@example.com", password="secret"):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    return _keep_token(client, response)


def admin(client, key=ADMIN_KEY):
    return _keep_token(client, client.post("/api/auth/admin", json={"key": key}))


def logout(client):
    client.post("/api/auth/logout")
    client.headers.pop("Authorization", None)


def update_config(client, **changes):
    config = client.get("/api/admin/config").json()
    for path, value in changes.items():
        target = config
        *parents, leaf = path.split("__")
        for part in parents:
            target = target[part]
        target[leaf] = value
    assert client.put("/api/admin/config", json=config).status_code == 200


class TestHealth:
    def test_health(self, client):
        assert client.get("/api/health").json()["status"] == "healthy"


class TestAuthRoutes:
    """Sign-in flows over HTTP."""

    def test_signup_returns_token_and_user_without_credential(self, client):
        response = signup(client)
        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["user"]["email"] == "ada@example.com"
        assert body["user"]["plan"] == "FREE"
        assert body["user"]["dailyUsage"]["count"] == 0
        assert "credentialHash" not in body["user"]

    def test_duplicate_signup_conflicts(self, client):
        signup(client)
        response = signup(client)
        assert response.status_code == 409
        assert "already registered" in response.json()["detail"]

    def test_login_and_logout(self, client):
        signup(client)
        logout(client)
        assert client.get("/api/auth/me").status_code == 401

        assert login(client, password="bad").status_code == 401
        assert login(client).status_code == 200
        assert client.get("/api/auth/me").json()["email"] == "ada@example.com"

    def test_signed_out_token_is_refused(self, client):
        token = signup(client).json()["token"]
        client.post("/api/auth/logout")
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_garbage_token_is_anonymous(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_federated_login(self, client):
        first = client.post("/api/auth/federated").json()
        second = client.post("/api/auth/federated").json()
        assert first["user"]["id"] == second["user"]["id"]

    def test_upgrade(self, client):
        signup(client)
        response = client.post("/api/auth/upgrade", json={"plan": "PREMIUM"})
        assert response.json()["plan"] == "PREMIUM"

    def test_upgrade_blocked_when_payments_disabled(self, client):
        admin(client)
        update_config(client, shopierConfig__isEnabled=False)

        response = client.post("/api/auth/upgrade", json={"plan": "PREMIUM"})
        assert response.status_code == 503


class TestAdminSignIn:
    """The admin flow needs the deployment key."""

    def test_wrong_key_forbidden(self, client):
        assert admin(client, key="guess").status_code == 403
        assert client.get("/api/auth/me").status_code == 401

    def test_disabled_without_configured_key(self, client, monkeypatch):
        monkeypatch.delenv("SCRIBE_ADMIN_KEY")
        assert admin(client).status_code == 403

    def test_reset_needs_admin(self, client):
        signup(client)
        assert client.post("/api/admin/reset").status_code == 403
        assert client.get("/api/auth/me").status_code == 200


class TestClientIsolation:
    """Each client sees only its own session."""

    def test_second_client_is_anonymous(self, client):
        signup(client)
        other = TestClient(client.app)
        assert other.get("/api/auth/me").status_code == 401
        assert client.get("/api/auth/me").json()["email"] == "ada@example.com"

    def test_quota_is_per_user(self, client):
        admin(client)
        update_config(client, freeDailyLimit=1)
        logout(client)

        signup(client)
        other = TestClient(client.app)
        signup(other, email="bo@example.com", name="Bo")

        assert client.post("/api/conversations", json={"content": "one"}).status_code == 200
        assert client.post("/api/conversations", json={"content": "two"}).status_code == 429
        assert other.post("/api/conversations", json={"content": "one"}).status_code == 200
        assert other.get("/api/auth/me").json()["email"] == "bo@example.com"

    def test_logout_only_affects_caller(self, client):
        signup(client)
        other = TestClient(client.app)
        signup(other, email="bo@example.com", name="Bo")
        logout(other)
        assert client.get("/api/auth/me").status_code == 200


class TestConversationRoutes:
    """Chat exchange and project management."""

    def test_requires_session(self, client):
        response = client.post("/api/conversations", json={"content": "Hi", "mode": "BOOK"})
        assert response.status_code == 401

    def test_first_message_creates_project(self, client):
        signup(client)
        response = client.post("/api/conversations", json={"content": "A story about tides", "mode": "BOOK"})
        assert response.status_code == 200
        body = response.json()
        assert body["message"]["text"] == "Once upon a time."
        assert body["dailyUsage"]["count"] == 1

        projects = client.get("/api/projects").json()
        assert len(projects) == 1
        assert projects[0]["id"] == body["projectId"]
        assert projects[0]["messageCount"] == 2

        follow_up = client.post(
            "/api/conversations",
            json={"content": "Continue", "mode": "BOOK", "projectId": body["projectId"]},
        ).json()
        assert follow_up["projectId"] == body["projectId"]
        project = client.get(f"/api/projects/{body['projectId']}").json()
        assert len(project["messages"]) == 4

    def test_daily_limit(self, client):
        admin(client)
        update_config(client, freeDailyLimit=1)
        logout(client)

        signup(client)
        assert client.post("/api/conversations", json={"content": "one"}).status_code == 200
        response = client.post("/api/conversations", json={"content": "two"})
        assert response.status_code == 429

    def test_blank_message_rejected(self, client):
        signup(client)
        assert client.post("/api/conversations", json={"content": "   "}).status_code == 400

    def test_delete_project(self, client):
        signup(client)
        project_id = client.post("/api/conversations", json={"content": "Hi"}).json()["projectId"]
        assert client.delete(f"/api/projects/{project_id}").status_code == 200
        assert client.get(f"/api/projects/{project_id}").status_code == 404

    def test_other_users_project_is_hidden(self, client):
        signup(client)
        project_id = client.post("/api/conversations", json={"content": "Hi"}).json()["projectId"]
        logout(client)
        signup(client, email="bo@example.com", name="Bo")
        assert client.get(f"/api/projects/{project_id}").status_code == 404

    def test_provider_failure_returns_apology(self, client):
        signup(client)
        client.app.state.provider = FakeProvider(error=MissingProviderCredential())
        body = client.post("/api/conversations", json={"content": "Hi"}).json()
        assert body["message"]["text"] == "Sorry, something went wrong."
        assert "projectId" not in body


class TestPromptRoutes:
    """Prompt builder and feedback."""

    def test_optimize_and_rate(self, client):
        signup(client)
        prompt = client.post("/api/prompts/optimize", json={"input": "a heist", "kind": "screenplay"}).json()["prompt"]
        assert "a heist" in prompt

        response = client.post(
            "/api/feedback",
            json={"originalInput": "a heist", "generatedPrompt": prompt, "rating": "up"},
        )
        assert response.status_code == 200
        assert response.json()["rating"] == "up"

    def test_optimize_without_provider_key(self, client):
        signup(client)
        client.app.state.provider = FakeProvider(error=MissingProviderCredential())
        response = client.post("/api/prompts/optimize", json={"input": "a heist"})
        assert response.status_code == 503

    def test_public_config_hides_secrets(self, client):
        body = client.get("/api/config").json()
        assert body["shopierConfig"] == {"isEnabled": True}
        assert len(body["adConfig"]["mobileAdSlots"]) == 3


class TestAdminRoutes:
    """Role gate and system operations."""

    def test_non_admin_forbidden(self, client):
        signup(client)
        assert client.get("/api/admin/logs").status_code == 403

    def test_logs_and_users(self, client):
        signup(client)
        admin(client)
        logs = client.get("/api/admin/logs").json()
        assert logs[0]["message"] == "Administrator signed in."
        users = client.get("/api/admin/users").json()
        assert {u["email"] for u in users} == {"ada@example.com", "admin@scribe.studio"}
        assert all("credentialHash" not in u for u in users)

    def test_summary(self, client):
        signup(client)
        client.post("/api/auth/upgrade", json={"plan": "PREMIUM"})
        admin(client)
        summary = client.get("/api/admin/summary").json()
        assert summary["totalUsers"] == 2
        assert summary["premiumUsers"] == 2
        assert summary["estimatedRevenue"] == 298

    def test_backup_restore(self, client):
        signup(client)
        admin(client)
        backup = client.get("/api/admin/backup")
        assert backup.headers["content-disposition"].startswith("attachment;")

        signup(client, email="bo@example.com", name="Bo")
        admin(client)
        assert len(client.get("/api/admin/users").json()) == 3

        assert client.post("/api/admin/restore", content=backup.content).status_code == 200
        assert len(client.get("/api/admin/users").json()) == 2

    def test_restore_invalid_file(self, client):
        admin(client)
        response = client.post("/api/admin/restore", content=b"{broken")
        assert response.status_code == 400
        assert response.json()["detail"] == "Backup file is invalid."

    def test_restore_unreadable_rows(self, client):
        admin(client)
        response = client.post("/api/admin/restore", content=b'{"users": [{"id": "u1"}]}')
        assert response.status_code == 400
        assert client.get("/api/admin/users").status_code == 200

    def test_factory_reset_signs_everyone_out(self, client):
        signup(client)
        other = TestClient(client.app)
        admin(other)
        assert other.post("/api/admin/reset").status_code == 200
        assert other.get("/api/auth/me").status_code == 401
        assert client.get("/api/auth/me").status_code == 401


class TestMaintenanceMode:
    """Only administrators get through."""

    def test_blocks_users_but_not_admin(self, client):
        signup(client)
        logout(client)
        admin(client)
        update_config(client, maintenanceMode=True)

        assert client.get("/api/admin/logs").status_code == 200
        logout(client)
        assert login(client).status_code == 503
        assert admin(client).status_code == 200

    def test_signed_in_user_is_blocked(self, client):
        signup(client)
        other = TestClient(client.app)
        admin(other)
        update_config(other, maintenanceMode=True)
        assert client.get("/api/auth/me").status_code == 503


class TestRateLimits:
    """Per-route buckets configured from the environment."""

    def test_auth_bucket(self, tmp_path, monkeypatch):
        configure(monkeypatch, tmp_path, auth_limit=2)
        with TestClient(create_app()) as c:
            assert login(c).status_code == 401
            assert login(c).status_code == 401
            assert login(c).status_code == 429
            assert c.get("/api/config").status_code == 200
            assert c.get("/api/health").status_code == 200
