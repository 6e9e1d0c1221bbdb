"""Sync task."""
from typing import Any

import structlog

from record_sync_core.connections import load_context
from record_sync_core.sync import ImportOrchestrator
from record_sync_core.util import ConfigurationError
from record_sync_worker.settings import get_chunk_size

logger = structlog.get_logger()


def run_sync_job(job_id: str, target_id: str, records: list[dict[str, Any]]) -> None:
    """Run a sync job enqueued by the API."""
    try:
        connection = load_context(target_id)
        ImportOrchestrator(chunk_size=get_chunk_size()).run(job_id, records, connection)
    except ConfigurationError as e:
        logger.error("sync_job_not_started", job_id=job_id, target_id=target_id, error=str(e))
        raise
