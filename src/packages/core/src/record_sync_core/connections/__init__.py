"""Target connection registry."""
from record_sync_core.connections.models import Connection, ConnectionContext
from record_sync_core.connections.repo import (
    save_connection,
    find_connection,
    get_connection,
    list_connections,
    update_access_token,
)
from record_sync_core.connections.auth import refresh_access_token, load_context

__all__ = [
    "Connection",
    "ConnectionContext",
    "save_connection",
    "find_connection",
    "get_connection",
    "list_connections",
    "update_access_token",
    "refresh_access_token",
    "load_context",
]
