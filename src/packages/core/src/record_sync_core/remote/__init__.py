"""Remote system-of-record client."""
from record_sync_core.remote.client import RemoteWriteClient

__all__ = ["RemoteWriteClient"]
