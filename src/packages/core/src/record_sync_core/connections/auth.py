"""Credential refresh and connection-context assembly."""
import os

import requests
import structlog

from record_sync_core.connections.models import ConnectionContext
from record_sync_core.connections.repo import get_connection, update_access_token
from record_sync_core.util import ConfigurationError, RemoteWriteError

logger = structlog.get_logger()

TOKEN_TIMEOUT_SECONDS = 30


def _default_token_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/services/oauth2/token"


def refresh_access_token(target_id: str, session: requests.Session | None = None) -> str:
    """Exchange the stored refresh token for a new access token and persist it."""
    connection = get_connection(target_id)
    if not connection.refresh_token:
        raise ConfigurationError(f"Connection {target_id} has no refresh token")

    data = {
        "grant_type": "refresh_token",
        "refresh_token": connection.refresh_token,
        "client_id": os.environ.get("SYNC_OAUTH_CLIENT_ID", ""),
        "client_secret": os.environ.get("SYNC_OAUTH_CLIENT_SECRET", ""),
    }
    url = connection.token_url or _default_token_url(connection.base_url)
    http = session or requests
    try:
        resp = http.post(url, data=data, timeout=TOKEN_TIMEOUT_SECONDS)
        resp.raise_for_status()
        token = resp.json()["access_token"]
    except (requests.RequestException, ValueError, KeyError) as e:
        logger.warning("access_token_refresh_failed", target_id=target_id, error=str(e))
        raise RemoteWriteError(f"Token refresh failed: {e}") from e

    update_access_token(target_id, token)
    logger.info("access_token_refreshed", target_id=target_id)
    return token


def load_context(target_id: str) -> ConnectionContext:
    """Build the connection context for a target, with a refresh hook bound to it."""
    connection = get_connection(target_id)
    refresh_hook = None
    if connection.refresh_token:
        def refresh_hook():
            return refresh_access_token(target_id)

    return ConnectionContext(
        target_id=connection.target_id,
        base_url=connection.base_url,
        api_version=connection.api_version,
        access_token=connection.access_token,
        refresh_hook=refresh_hook,
    )
