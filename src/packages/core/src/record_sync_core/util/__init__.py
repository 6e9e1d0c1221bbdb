"""Utility modules."""
from record_sync_core.util.ids import generate_id
from record_sync_core.util.time import utc_now_iso
from record_sync_core.util.errors import (
    SyncError,
    ConfigurationError,
    TransientAuthError,
    RemoteWriteError,
    JobStateError,
)

__all__ = [
    "generate_id",
    "utc_now_iso",
    "SyncError",
    "ConfigurationError",
    "TransientAuthError",
    "RemoteWriteError",
    "JobStateError",
]
