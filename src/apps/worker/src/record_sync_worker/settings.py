"""Worker settings."""
import os

from record_sync_core.sync import DEFAULT_CHUNK_SIZE


def get_redis_url() -> str:
    """Get Redis URL from environment."""
    return os.environ.get("REDIS_URL", "redis://redis:6379/0")

def get_queue_name() -> str:
    """Get the RQ queue name from environment."""
    return os.environ.get("QUEUE_NAME", "default")

def get_chunk_size() -> int:
    """Get the sync chunk size from environment."""
    return int(os.environ.get("SYNC_CHUNK_SIZE", DEFAULT_CHUNK_SIZE))
