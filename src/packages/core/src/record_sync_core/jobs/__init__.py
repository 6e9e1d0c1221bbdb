"""Job management module."""
from record_sync_core.db import init_db
from record_sync_core.jobs.repo import (
    create_job,
    mark_processing,
    append_errors,
    update_progress,
    record_chunk,
    finalize_job,
    get_job,
    list_jobs,
)
from record_sync_core.jobs.models import ErrorRow, Job, JobStatus, Operation

__all__ = [
    "init_db",
    "create_job",
    "mark_processing",
    "append_errors",
    "update_progress",
    "record_chunk",
    "finalize_job",
    "get_job",
    "list_jobs",
    "ErrorRow",
    "Job",
    "JobStatus",
    "Operation",
]
