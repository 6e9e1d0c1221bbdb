"""Tests for the SQLite job store."""
import sqlite3

import pytest

from record_sync_core.jobs import (
    ErrorRow,
    JobStatus,
    Operation,
    append_errors,
    create_job,
    finalize_job,
    get_job,
    list_jobs,
    mark_processing,
    record_chunk,
    update_progress,
)
from record_sync_core.util import JobStateError


def _new_job(target_id="org-1", operation=Operation.INSERT):
    return create_job(target_id, "Contact", operation, source_label="c.csv", creator="tester")


def test_create_and_get(sqlite_db):
    job = _new_job(operation=Operation.UPSERT)
    loaded = get_job(job.job_id)

    assert loaded.status is JobStatus.PENDING
    assert loaded.operation is Operation.UPSERT
    assert loaded.source_label == "c.csv"
    assert loaded.created_at.endswith("Z")
    assert loaded.errors == []


def test_get_missing_job(sqlite_db):
    assert get_job("nope") is None


def test_full_transition(sqlite_db):
    job = _new_job()
    mark_processing(job.job_id, 4)
    update_progress(job.job_id, 2, 1, 1)
    append_errors(job.job_id, [ErrorRow(row_number=2, error_message="bad", raw_data="{}")])
    update_progress(job.job_id, 4, 3, 1)
    finalize_job(job.job_id, JobStatus.COMPLETED_WITH_ERRORS)

    loaded = get_job(job.job_id)
    assert loaded.status is JobStatus.COMPLETED_WITH_ERRORS
    assert (loaded.total_records, loaded.processed_records) == (4, 4)
    assert (loaded.success_count, loaded.error_count) == (3, 1)
    assert loaded.completed_at is not None
    assert [e.row_number for e in loaded.errors] == [2]


def test_mark_processing_only_from_pending(sqlite_db):
    job = _new_job()
    mark_processing(job.job_id, 1)
    with pytest.raises(JobStateError):
        mark_processing(job.job_id, 1)


def test_progress_cannot_decrease(sqlite_db):
    job = _new_job()
    mark_processing(job.job_id, 10)
    update_progress(job.job_id, 5, 5, 0)
    with pytest.raises(JobStateError):
        update_progress(job.job_id, 3, 3, 0)
    assert get_job(job.job_id).processed_records == 5


def test_progress_counters_must_add_up(sqlite_db):
    job = _new_job()
    mark_processing(job.job_id, 10)
    with pytest.raises(ValueError, match="Inconsistent"):
        update_progress(job.job_id, 5, 3, 1)


def test_progress_requires_processing(sqlite_db):
    job = _new_job()
    with pytest.raises(JobStateError):
        update_progress(job.job_id, 1, 1, 0)


def test_finalize_requires_terminal_status_and_processing(sqlite_db):
    job = _new_job()
    with pytest.raises(JobStateError):
        finalize_job(job.job_id, JobStatus.COMPLETED)
    mark_processing(job.job_id, 0)
    with pytest.raises(JobStateError):
        finalize_job(job.job_id, JobStatus.PROCESSING)
    finalize_job(job.job_id, JobStatus.COMPLETED)
    with pytest.raises(JobStateError):
        finalize_job(job.job_id, JobStatus.COMPLETED_WITH_ERRORS)
    assert get_job(job.job_id).status is JobStatus.COMPLETED


def test_errors_ordered_and_unique_per_row(sqlite_db):
    job = _new_job()
    append_errors(
        job.job_id,
        [
            ErrorRow(row_number=9, error_message="late", raw_data="{}"),
            ErrorRow(row_number=3, error_message="early", raw_data="{}"),
        ],
    )
    append_errors(job.job_id, [])
    assert [e.row_number for e in get_job(job.job_id).errors] == [3, 9]
    assert get_job(job.job_id, include_errors=False).errors == []

    with pytest.raises(sqlite3.IntegrityError):
        append_errors(job.job_id, [ErrorRow(row_number=3, error_message="dup", raw_data="{}")])


def test_list_jobs_newest_first_and_paged(sqlite_db):
    ids = [_new_job().job_id for _ in range(5)]
    _new_job(target_id="org-2")

    first = list_jobs("org-1", page=0, page_size=2)
    second = list_jobs("org-1", page=1, page_size=2)
    third = list_jobs("org-1", page=2, page_size=2)

    listed = [j.job_id for j in first + second + third]
    assert listed == list(reversed(ids))
    assert len(third) == 1
    assert list_jobs("org-1", page=3, page_size=2) == []
    assert [j.target_id for j in list_jobs("org-2")] == ["org-2"]


def test_summary_excludes_errors(sqlite_db):
    summary = get_job(_new_job().job_id).summary()
    assert "errors" not in summary
    assert summary["status"] == "PENDING"
    assert summary["operation"] == "INSERT"


def test_record_chunk_writes_errors_and_counters_together(sqlite_db):
    job = _new_job()
    mark_processing(job.job_id, 3)
    record_chunk(job.job_id, [ErrorRow(row_number=2, error_message="bad", raw_data="{}")], 3, 2, 1)

    loaded = get_job(job.job_id)
    assert (loaded.processed_records, loaded.error_count) == (3, 1)
    assert [e.row_number for e in loaded.errors] == [2]


def test_record_chunk_rolls_back_errors_when_counters_rejected(sqlite_db):
    job = _new_job()
    rows = [ErrorRow(row_number=1, error_message="bad", raw_data="{}")]

    with pytest.raises(JobStateError):
        record_chunk(job.job_id, rows, 1, 0, 1)
    assert get_job(job.job_id).errors == []

    mark_processing(job.job_id, 2)
    with pytest.raises(ValueError, match="Inconsistent"):
        record_chunk(job.job_id, rows, 2, 0, 1)
    loaded = get_job(job.job_id)
    assert loaded.errors == []
    assert loaded.error_count == 0
