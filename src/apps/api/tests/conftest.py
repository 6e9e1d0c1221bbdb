"""API fixtures: temp SQLite store, in-process job runs, a scripted remote client."""
import pytest
from fastapi.testclient import TestClient

from record_sync_api.main import app
from record_sync_api.routers import jobs as jobs_router
from record_sync_api.settings import get_settings
from record_sync_core.sync import ImportOrchestrator


class ScriptedClient:
    """Accepts every record unless its Name is listed in ``rejected``."""

    def __init__(self):
        self.rejected = set()
        self.calls = []

    def _answer(self, kind, records):
        self.calls.append((kind, len(records)))
        return [
            {"success": False, "errors": [{"message": "REJECTED"}]}
            if r.get("Name") in self.rejected
            else {"success": True, "id": r.get("id") or "new"}
            for r in records
        ]

    def create_collection(self, resource_type, records):
        return self._answer("create", records)

    def update_collection(self, resource_type, records):
        return self._answer("update", records)

    def upsert_collection(self, resource_type, external_id_field, records):
        return self._answer("upsert", records)


@pytest.fixture
def remote():
    return ScriptedClient()


@pytest.fixture
def client(tmp_path, monkeypatch, remote):
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "jobs.db"))
    monkeypatch.setenv("QUEUE_ENABLED", "false")
    get_settings.cache_clear()
    monkeypatch.setattr(
        jobs_router,
        "get_orchestrator",
        lambda: ImportOrchestrator(client_factory=lambda conn: remote, chunk_size=2),
    )
    with TestClient(app) as test_client:
        yield test_client
    get_settings.cache_clear()


@pytest.fixture
def registered(client):
    resp = client.post(
        "/api/connections",
        json={
            "target_id": "org-1",
            "base_url": "https://example.test",
            "access_token": "token-1",
            "refresh_token": "refresh-1",
        },
    )
    assert resp.status_code == 200
    return "org-1"
