"""Remote-write client for the composite collection endpoints."""
from typing import Any

import requests
import structlog

from record_sync_core.connections.models import ConnectionContext
from record_sync_core.util import RemoteWriteError, TransientAuthError

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 120
COLLECTION_PATH = "/composite/sobjects"


def _typed(resource_type: str, record: dict[str, Any]) -> dict[str, Any]:
    return {"attributes": {"type": resource_type}, **record}


def _error_text(resp: requests.Response) -> str:
    """Best-effort message from an error response body."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:500] or resp.reason or ""
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return str(data[0].get("message") or data[0])
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error_description") or data)
    return str(data)


class RemoteWriteClient:
    """Writes record collections to one target.

    Each call returns one result dict per input record, in input order:
    ``{"success": bool, "id": str | None, "errors": [{"message": str}, ...]}``.
    An expired credential is refreshed once through the connection's refresh
    hook and the call retried; every other failure raises RemoteWriteError.
    """

    def __init__(
        self,
        connection: ConnectionContext,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.connection = connection
        self._session = session or requests.Session()
        self._timeout = timeout

    def create_collection(self, resource_type: str, records: list[dict]) -> list[dict]:
        return self._send("POST", COLLECTION_PATH, resource_type, records)

    def update_collection(self, resource_type: str, records: list[dict]) -> list[dict]:
        return self._send("PATCH", COLLECTION_PATH, resource_type, records)

    def upsert_collection(
        self, resource_type: str, external_id_field: str, records: list[dict]
    ) -> list[dict]:
        path = f"{COLLECTION_PATH}/{resource_type}/{external_id_field}"
        return self._send("PATCH", path, resource_type, records)

    def _send(self, method: str, path: str, resource_type: str, records: list[dict]) -> list[dict]:
        url = self.connection.api_root + path
        body = {"allOrNone": False, "records": [_typed(resource_type, r) for r in records]}
        try:
            return self._request(method, url, body)
        except TransientAuthError as e:
            logger.info("access_token_expired", target_id=self.connection.target_id)
            if not self.connection.refresh():
                raise RemoteWriteError(str(e), status_code=401) from e
        try:
            return self._request(method, url, body)
        except TransientAuthError as e:
            raise RemoteWriteError(str(e), status_code=401) from e

    def _request(self, method: str, url: str, body: dict) -> list[dict]:
        headers = {
            "Authorization": f"Bearer {self.connection.access_token}",
            "Content-Type": "application/json",
        }
        try:
            resp = self._session.request(
                method, url, json=body, headers=headers, timeout=self._timeout
            )
        except requests.RequestException as e:
            raise RemoteWriteError(f"Request to {url} failed: {e}") from e

        if resp.status_code == 401:
            raise TransientAuthError(f"Unauthorized: {_error_text(resp)}")
        if resp.status_code >= 400:
            raise RemoteWriteError(
                f"HTTP {resp.status_code}: {_error_text(resp)}", status_code=resp.status_code
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteWriteError(f"Malformed response from {url}") from e
        if not isinstance(data, list):
            raise RemoteWriteError(f"Expected a result list from {url}, got {type(data).__name__}")
        return data
