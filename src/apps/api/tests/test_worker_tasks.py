"""Tests for the RQ sync task."""
import pytest

from record_sync_core.jobs import get_job
from record_sync_core.sync import DEFAULT_CHUNK_SIZE, ImportOrchestrator
from record_sync_core.util import ConfigurationError
from record_sync_worker import tasks
from record_sync_worker.settings import get_chunk_size


def test_run_sync_job_completes(client, registered, remote, monkeypatch):
    monkeypatch.setenv("SYNC_CHUNK_SIZE", "1")
    monkeypatch.setattr(
        tasks,
        "ImportOrchestrator",
        lambda chunk_size: ImportOrchestrator(client_factory=lambda conn: remote, chunk_size=chunk_size),
    )
    job_id = ImportOrchestrator().submit("org-1", "Account", "api", "INSERT")

    tasks.run_sync_job(job_id, "org-1", [{"Name": "a"}, {"Name": "b"}])

    job = get_job(job_id)
    assert job.status.value == "COMPLETED"
    assert remote.calls == [("create", 1), ("create", 1)]


def test_run_sync_job_unknown_target(client):
    with pytest.raises(ConfigurationError):
        tasks.run_sync_job("job-1", "nope", [])


def test_worker_chunk_size_defaults_to_engine_ceiling(monkeypatch):
    monkeypatch.delenv("SYNC_CHUNK_SIZE", raising=False)
    assert get_chunk_size() == DEFAULT_CHUNK_SIZE == 200
