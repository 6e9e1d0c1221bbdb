"""Sync job endpoints."""
from typing import Any

import structlog
from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel, Field

from record_sync_api.settings import get_settings
from record_sync_core.connections import load_context
from record_sync_core.ingest import load_records
from record_sync_core.jobs import Operation, get_job, list_jobs
from record_sync_core.sync import ImportOrchestrator
from record_sync_core.util import ConfigurationError

router = APIRouter(prefix="/sync", tags=["sync"])
logger = structlog.get_logger()


class SyncJobCreate(BaseModel):
    """Request to create and start a sync job."""

    target_id: str = Field(..., min_length=1)
    resource_type: str = Field(..., min_length=1)
    operation: str = Operation.INSERT.value
    external_id_field: str | None = None
    source_label: str = "upload.csv"
    creator: str = "user"
    records: list[dict[str, Any]] = Field(default_factory=list)


def get_orchestrator() -> ImportOrchestrator:
    return ImportOrchestrator(chunk_size=get_settings().sync_chunk_size)


def _enqueue_or_run(job_id: str, target_id: str, records: list[dict[str, Any]]):
    """Enqueue the run on RQ, or run it on a background thread as fallback."""
    settings = get_settings()
    if settings.queue_enabled:
        try:
            from redis import Redis
            from rq import Queue
            from record_sync_worker.tasks import run_sync_job

            conn = Redis.from_url(settings.redis_url)
            q = Queue(settings.queue_name, connection=conn)
            # Note: job_id must be passed positionally (RQ uses job_id= for its internal ID)
            q.enqueue(run_sync_job, job_id, target_id, records, job_timeout="6h")
            return
        except Exception as e:
            logger.warning("rq_enqueue_failed_running_in_thread", job_id=job_id, error=str(e))

    get_orchestrator().start(job_id, records, load_context(target_id))


def _submit(
    target_id: str,
    resource_type: str,
    operation: str,
    external_id_field: str | None,
    source_label: str,
    creator: str,
    records: list[dict[str, Any]],
) -> dict:
    try:
        operation = Operation.parse(operation)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    try:
        job_id = get_orchestrator().submit(
            target_id=target_id,
            resource_type=resource_type,
            source_label=source_label,
            operation=operation,
            external_id_field=external_id_field,
            creator=creator,
        )
    except ConfigurationError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    _enqueue_or_run(job_id, target_id, records)
    job = get_job(job_id, include_errors=False)
    response = job.summary()
    response["message"] = "Import job started"
    return response


@router.post("/jobs")
def create_sync_job(body: SyncJobCreate):
    """Create a sync job and start writing its records."""
    return _submit(
        body.target_id,
        body.resource_type,
        body.operation,
        body.external_id_field,
        body.source_label,
        body.creator,
        body.records,
    )


@router.post("/jobs/upload")
def upload_sync_job(
    file: UploadFile = File(...),
    target_id: str = Form(...),
    resource_type: str = Form(...),
    operation: str = Form(Operation.INSERT.value),
    external_id_field: str | None = Form(None),
    creator: str = Form("user"),
):
    """Create a sync job from an uploaded CSV, JSON or JSONL file."""
    settings = get_settings()
    max_bytes = settings.max_upload_mb * 1024 * 1024
    content = file.file.read()
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413, detail=f"File too large (max {settings.max_upload_mb} MB)"
        )
    filename = file.filename or "upload"
    try:
        records = load_records(filename, content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if not records:
        raise HTTPException(status_code=400, detail="No records found in file")

    return _submit(
        target_id, resource_type, operation, external_id_field, filename, creator, records
    )


@router.get("/jobs")
def list_sync_jobs(target_id: str, page: int = Query(0, ge=0)):
    """List jobs for a target, newest first."""
    jobs = list_jobs(target_id, page=page, page_size=get_settings().default_page_size)
    return {"page": page, "jobs": [j.summary() for j in jobs]}


@router.get("/jobs/{job_id}")
def get_sync_job(job_id: str):
    """Get job status, counters and the ordered error rows."""
    job = get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    response = job.summary()
    response["errors"] = [e.model_dump() for e in job.errors]
    return response
