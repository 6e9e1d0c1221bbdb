"""Job store using SQLite.

Single-writer contract: exactly one orchestrator run owns a job id while it
is PROCESSING, so updates are guarded only against status regressions and
shrinking progress, not against concurrent writers.
"""
from typing import Iterable

import structlog

from record_sync_core.db import get_conn
from record_sync_core.jobs.models import ErrorRow, Job, JobStatus, Operation
from record_sync_core.util import JobStateError, generate_id, utc_now_iso

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 20


def _row_to_job(row) -> Job:
    data = dict(row)
    data["status"] = JobStatus(data["status"])
    data["operation"] = Operation(data["operation"])
    return Job(**data)


def create_job(
    target_id: str,
    resource_type: str,
    operation: Operation,
    source_label: str | None = None,
    external_id_field: str | None = None,
    creator: str | None = None,
) -> Job:
    """Insert a new job in PENDING state."""
    job = Job(
        job_id=generate_id(),
        target_id=target_id,
        resource_type=resource_type,
        status=JobStatus.PENDING,
        source_label=source_label,
        operation=operation,
        external_id_field=external_id_field,
        creator=creator,
        created_at=utc_now_iso(),
    )
    with get_conn() as conn:
        conn.execute(
            """
            INSERT INTO jobs (job_id, target_id, resource_type, status, total_records,
                              processed_records, success_count, error_count, source_label,
                              operation, external_id_field, creator, created_at, completed_at)
            VALUES (?, ?, ?, ?, 0, 0, 0, 0, ?, ?, ?, ?, ?, NULL)
            """,
            (
                job.job_id,
                job.target_id,
                job.resource_type,
                job.status.value,
                job.source_label,
                job.operation.value,
                job.external_id_field,
                job.creator,
                job.created_at,
            ),
        )
    logger.info("job_created", job_id=job.job_id, target_id=target_id, operation=operation.value)
    return job


def mark_processing(job_id: str, total_records: int) -> None:
    """Move a PENDING job to PROCESSING and record its size."""
    with get_conn() as conn:
        cur = conn.execute(
            "UPDATE jobs SET status = ?, total_records = ? WHERE job_id = ? AND status = ?",
            (JobStatus.PROCESSING.value, total_records, job_id, JobStatus.PENDING.value),
        )
        if cur.rowcount != 1:
            raise JobStateError(f"Job {job_id} is not pending")


def _insert_errors(conn, job_id: str, rows: Iterable[ErrorRow]) -> None:
    params = [(job_id, r.row_number, r.error_message, r.raw_data) for r in rows]
    if params:
        conn.executemany(
            "INSERT INTO job_errors (job_id, row_number, error_message, raw_data) VALUES (?, ?, ?, ?)",
            params,
        )


def _write_progress(conn, job_id: str, processed: int, success: int, error: int) -> None:
    if success + error != processed:
        raise ValueError(
            f"Inconsistent counters: success {success} + error {error} != processed {processed}"
        )
    cur = conn.execute(
        """
        UPDATE jobs
        SET processed_records = ?, success_count = ?, error_count = ?
        WHERE job_id = ? AND status = ? AND processed_records <= ?
        """,
        (processed, success, error, job_id, JobStatus.PROCESSING.value, processed),
    )
    if cur.rowcount != 1:
        raise JobStateError(f"Job {job_id} is not processing or progress would decrease")


def append_errors(job_id: str, rows: Iterable[ErrorRow]) -> None:
    """Append error rows to a job."""
    with get_conn() as conn:
        _insert_errors(conn, job_id, rows)


def update_progress(job_id: str, processed: int, success: int, error: int) -> None:
    """Persist cumulative counters for a PROCESSING job."""
    with get_conn() as conn:
        _write_progress(conn, job_id, processed, success, error)


def record_chunk(
    job_id: str, rows: Iterable[ErrorRow], processed: int, success: int, error: int
) -> None:
    """Append a chunk's error rows and persist the new counters in one transaction."""
    with get_conn() as conn:
        _insert_errors(conn, job_id, rows)
        _write_progress(conn, job_id, processed, success, error)


def finalize_job(job_id: str, status: JobStatus, completed_at: str | None = None) -> None:
    """Move a PROCESSING job to a terminal status."""
    if not status.is_terminal:
        raise JobStateError(f"{status.value} is not a terminal status")
    with get_conn() as conn:
        cur = conn.execute(
            "UPDATE jobs SET status = ?, completed_at = ? WHERE job_id = ? AND status = ?",
            (status.value, completed_at or utc_now_iso(), job_id, JobStatus.PROCESSING.value),
        )
        if cur.rowcount != 1:
            raise JobStateError(f"Job {job_id} is not processing")


def get_job(job_id: str, include_errors: bool = True) -> Job | None:
    """Get a job by ID, with its error rows ordered by row number."""
    with get_conn() as conn:
        row = conn.execute("SELECT * FROM jobs WHERE job_id = ?", (job_id,)).fetchone()
        if row is None:
            return None
        job = _row_to_job(row)
        if include_errors:
            err_rows = conn.execute(
                """
                SELECT id, row_number, error_message, raw_data FROM job_errors
                WHERE job_id = ? ORDER BY row_number
                """,
                (job_id,),
            ).fetchall()
            job.errors = [ErrorRow(**dict(r)) for r in err_rows]
        return job


def list_jobs(target_id: str, page: int = 0, page_size: int = DEFAULT_PAGE_SIZE) -> list[Job]:
    """List jobs for a target, newest first. Pages are zero-based."""
    page = max(0, page)
    page_size = max(1, page_size)
    with get_conn() as conn:
        rows = conn.execute(
            """
            SELECT * FROM jobs WHERE target_id = ?
            ORDER BY created_at DESC, rowid DESC
            LIMIT ? OFFSET ?
            """,
            (target_id, page_size, page * page_size),
        ).fetchall()
        return [_row_to_job(r) for r in rows]
