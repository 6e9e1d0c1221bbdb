"""Import job orchestration: submit, run the batch loop, finalize."""
import json
import threading
from typing import Any, Callable, Sequence

import structlog

from record_sync_core.connections import ConnectionContext, get_connection
from record_sync_core.jobs import (
    ErrorRow,
    Job,
    JobStatus,
    Operation,
    create_job,
    finalize_job,
    get_job,
    mark_processing,
    record_chunk,
)
from record_sync_core.remote import RemoteWriteClient
from record_sync_core.sync.dispatcher import (
    DEFAULT_CHUNK_SIZE,
    BatchDispatcher,
    RecordResult,
    iter_chunks,
)
from record_sync_core.sync.operations import resolve_write_mode
from record_sync_core.util import ConfigurationError, RemoteWriteError, utc_now_iso

logger = structlog.get_logger()


def snapshot_record(record: dict[str, Any]) -> str:
    """String snapshot of a record for error rows."""
    try:
        return json.dumps(record, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(record)


class JobProgress:
    """Cumulative counters for one run, written only by the run that owns it."""

    def __init__(self):
        self.processed = 0
        self.success = 0
        self.error = 0

    def add(self, start: int, chunk: Sequence[dict], results: Sequence[RecordResult]) -> list[ErrorRow]:
        """Count a finished chunk. Returns error rows numbered by position in the full list."""
        rows = []
        for offset, (record, result) in enumerate(zip(chunk, results)):
            if result.success:
                self.success += 1
            else:
                self.error += 1
                rows.append(
                    ErrorRow(
                        row_number=start + offset + 1,
                        error_message=result.error_message or "Unknown error",
                        raw_data=snapshot_record(record),
                    )
                )
        self.processed += len(chunk)
        return rows


class ImportOrchestrator:
    """Owns the life cycle of import jobs."""

    def __init__(
        self,
        client_factory: Callable[[ConnectionContext], Any] = RemoteWriteClient,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        if not 1 <= chunk_size <= DEFAULT_CHUNK_SIZE:
            raise ValueError(f"Chunk size must be between 1 and {DEFAULT_CHUNK_SIZE}, got {chunk_size}")
        self._client_factory = client_factory
        self.chunk_size = chunk_size

    def submit(
        self,
        target_id: str,
        resource_type: str,
        source_label: str | None = None,
        operation: "str | Operation | None" = Operation.INSERT,
        external_id_field: str | None = None,
        creator: str | None = None,
    ) -> str:
        """Create a PENDING job and return its id. Records are handed to run() separately."""
        get_connection(target_id)
        if not resource_type or not resource_type.strip():
            raise ConfigurationError("Resource type is required")
        try:
            op = Operation.parse(operation)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        ext_field = external_id_field.strip() if external_id_field and external_id_field.strip() else None
        job = create_job(
            target_id=target_id,
            resource_type=resource_type.strip(),
            operation=op,
            source_label=source_label,
            external_id_field=ext_field,
            creator=creator,
        )
        return job.job_id

    def start(
        self, job_id: str, records: Sequence[dict], connection: ConnectionContext
    ) -> threading.Thread:
        """Check the job can run, then run it on its own background thread."""
        self._check_entry(job_id, connection)
        thread = threading.Thread(
            target=self.run,
            args=(job_id, list(records), connection),
            name=f"sync-job-{job_id}",
            daemon=True,
        )
        thread.start()
        return thread

    def run(self, job_id: str, records: Sequence[dict], connection: ConnectionContext) -> None:
        """Run the batch loop for a PENDING job.

        Raises ConfigurationError at entry for an unknown job or a connection for
        another target. After that nothing is raised: chunk and record failures
        become error rows, and the job's status is the only outcome.
        """
        job = self._check_entry(job_id, connection)
        if job.status is not JobStatus.PENDING:
            logger.warning("sync_job_already_started", job_id=job_id, status=job.status.value)
            return
        try:
            self._run(job, records, connection)
        except Exception:
            logger.exception("sync_job_aborted", job_id=job_id)

    def _check_entry(self, job_id: str, connection: ConnectionContext) -> Job:
        job = get_job(job_id, include_errors=False)
        if job is None:
            raise ConfigurationError(f"Job not found: {job_id}")
        if connection.target_id != job.target_id:
            raise ConfigurationError(
                f"Connection {connection.target_id} does not match job target {job.target_id}"
            )
        return job

    def _run(self, job: Job, records: Sequence[dict], connection: ConnectionContext) -> None:
        records = list(records)
        mark_processing(job.job_id, len(records))
        mode = resolve_write_mode(job.operation, job.external_id_field)
        dispatcher = BatchDispatcher(self._client_factory(connection))
        progress = JobProgress()
        logger.info(
            "sync_job_started",
            job_id=job.job_id,
            target_id=job.target_id,
            resource_type=job.resource_type,
            mode=mode.value,
            total=len(records),
            chunk_size=self.chunk_size,
        )

        for start, chunk in iter_chunks(records, self.chunk_size):
            try:
                results = dispatcher.dispatch(job.resource_type, mode, job.external_id_field, chunk)
                if len(results) != len(chunk):
                    raise RemoteWriteError(
                        f"Dispatcher returned {len(results)} results for {len(chunk)} records"
                    )
            except Exception as e:
                message = str(e) or type(e).__name__
                logger.exception("chunk_failed", job_id=job.job_id, start=start, size=len(chunk))
                results = [RecordResult.failure(message)] * len(chunk)

            error_rows = progress.add(start, chunk, results)
            record_chunk(
                job.job_id, error_rows, progress.processed, progress.success, progress.error
            )
            logger.info(
                "chunk_processed",
                job_id=job.job_id,
                start=start,
                size=len(chunk),
                processed=progress.processed,
                errors=progress.error,
            )

        status = JobStatus.COMPLETED if progress.error == 0 else JobStatus.COMPLETED_WITH_ERRORS
        finalize_job(job.job_id, status, utc_now_iso())
        logger.info(
            "sync_job_completed",
            job_id=job.job_id,
            status=status.value,
            success=progress.success,
            errors=progress.error,
        )
