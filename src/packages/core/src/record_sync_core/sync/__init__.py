"""Import/synchronization engine."""
from record_sync_core.sync.operations import WriteMode, resolve_write_mode
from record_sync_core.sync.dispatcher import (
    DEFAULT_CHUNK_SIZE,
    BatchDispatcher,
    RecordResult,
    iter_chunks,
)
from record_sync_core.sync.orchestrator import ImportOrchestrator, JobProgress

__all__ = [
    "WriteMode",
    "resolve_write_mode",
    "DEFAULT_CHUNK_SIZE",
    "BatchDispatcher",
    "RecordResult",
    "iter_chunks",
    "ImportOrchestrator",
    "JobProgress",
]
