"""Connection store using SQLite."""
import structlog

from record_sync_core.connections.models import Connection
from record_sync_core.db import get_conn
from record_sync_core.util import ConfigurationError, utc_now_iso

logger = structlog.get_logger()


def save_connection(connection: Connection) -> Connection:
    """Insert or replace a connection."""
    now = utc_now_iso()
    with get_conn() as conn:
        conn.execute(
            """
            INSERT INTO connections (target_id, base_url, api_version, access_token,
                                     refresh_token, token_url, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(target_id) DO UPDATE SET
                base_url = excluded.base_url,
                api_version = excluded.api_version,
                access_token = excluded.access_token,
                refresh_token = excluded.refresh_token,
                token_url = excluded.token_url,
                updated_at = excluded.updated_at
            """,
            (
                connection.target_id,
                connection.base_url,
                connection.api_version,
                connection.access_token,
                connection.refresh_token,
                connection.token_url,
                now,
                now,
            ),
        )
    logger.info("connection_saved", target_id=connection.target_id)
    return get_connection(connection.target_id)


def find_connection(target_id: str) -> Connection | None:
    """Get a connection by target ID."""
    with get_conn() as conn:
        row = conn.execute(
            "SELECT * FROM connections WHERE target_id = ?", (target_id,)
        ).fetchone()
        if row is None:
            return None
        return Connection(**dict(row))


def get_connection(target_id: str) -> Connection:
    """Get a connection by target ID, raising ConfigurationError when unknown."""
    connection = find_connection(target_id)
    if connection is None:
        raise ConfigurationError(f"No connection registered for target: {target_id}")
    return connection


def list_connections() -> list[Connection]:
    """List all connections."""
    with get_conn() as conn:
        rows = conn.execute("SELECT * FROM connections ORDER BY target_id").fetchall()
        return [Connection(**dict(r)) for r in rows]


def update_access_token(target_id: str, access_token: str) -> None:
    """Store a refreshed access token."""
    with get_conn() as conn:
        conn.execute(
            "UPDATE connections SET access_token = ?, updated_at = ? WHERE target_id = ?",
            (access_token, utc_now_iso(), target_id),
        )
