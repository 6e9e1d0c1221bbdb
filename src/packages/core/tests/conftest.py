"""Shared fixtures: an isolated SQLite store and an in-memory remote client."""
import pytest

from record_sync_core.connections import Connection, load_context, save_connection
from record_sync_core.jobs import init_db

TARGET_ID = "org-1"


class FakeRemoteClient:
    """Records every call and answers like the composite collection endpoints.

    reject: record -> message | None, per-record remote rejection.
    raise_on: (kind, records) -> Exception | None, whole-call failure.
    on_call: (kind, records) -> None, observed before the call is answered.
    """

    def __init__(self):
        self.calls = []
        self.reject = None
        self.raise_on = None
        self.on_call = None
        self._next_id = 0

    def _answer(self, kind, records):
        self.calls.append((kind, [dict(r) for r in records]))
        if self.on_call:
            self.on_call(kind, records)
        if self.raise_on:
            exc = self.raise_on(kind, records)
            if exc is not None:
                raise exc
        results = []
        for r in records:
            message = self.reject(r) if self.reject else None
            if message:
                results.append({"success": False, "errors": [{"message": message}]})
                continue
            self._next_id += 1
            results.append({"success": True, "id": r.get("id") or f"new-{self._next_id}", "errors": []})
        return results

    def create_collection(self, resource_type, records):
        return self._answer("create", records)

    def update_collection(self, resource_type, records):
        return self._answer("update", records)

    def upsert_collection(self, resource_type, external_id_field, records):
        return self._answer(f"upsert:{external_id_field}", records)

    def calls_of(self, kind):
        return [records for k, records in self.calls if k == kind]


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    path = tmp_path / "jobs.db"
    monkeypatch.setenv("SQLITE_PATH", str(path))
    init_db()
    return path


@pytest.fixture
def connection(sqlite_db):
    save_connection(
        Connection(
            target_id=TARGET_ID,
            base_url="https://example.test",
            access_token="token-1",
            refresh_token="refresh-1",
        )
    )
    return load_context(TARGET_ID)


@pytest.fixture
def fake_client():
    return FakeRemoteClient()
