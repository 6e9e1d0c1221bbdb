"""Chunk dispatch: resolves one chunk into remote write calls per write mode."""
from typing import Any, Iterator, Sequence

import structlog
from pydantic import BaseModel, ConfigDict

from record_sync_core.sync.operations import (
    NATIVE_ID_FIELD,
    WriteMode,
    for_create,
    for_update,
    native_id,
)

logger = structlog.get_logger()

# Composite collection calls accept at most 200 records.
DEFAULT_CHUNK_SIZE = 200
UNKNOWN_ERROR_MESSAGE = "Unknown error"
MISSING_RESULT_MESSAGE = "No result returned for record"
MISSING_ID_MESSAGE = f"Missing record identifier ({NATIVE_ID_FIELD}) required for update"


class RecordResult(BaseModel):
    """Outcome of writing one record."""

    model_config = ConfigDict(frozen=True)

    success: bool
    remote_id: str | None = None
    error_message: str | None = None

    @classmethod
    def failure(cls, message: str) -> "RecordResult":
        return cls(success=False, error_message=message)

    @classmethod
    def from_remote(cls, raw: Any) -> "RecordResult":
        if not isinstance(raw, dict):
            return cls.failure(f"Malformed result: {raw!r}")
        if raw.get("success") is True:
            remote_id = raw.get("id")
            return cls(success=True, remote_id=str(remote_id) if remote_id is not None else None)
        return cls.failure(extract_error_message(raw))


def extract_error_message(raw: dict) -> str:
    """Join the messages of a remote result's errors list."""
    errors = raw.get("errors")
    if isinstance(errors, list):
        messages = [
            str(e["message"]) for e in errors if isinstance(e, dict) and e.get("message")
        ]
        if messages:
            return "; ".join(messages)
    return UNKNOWN_ERROR_MESSAGE


def iter_chunks(records: Sequence[dict], size: int = DEFAULT_CHUNK_SIZE) -> Iterator[tuple[int, Sequence[dict]]]:
    """Yield (start offset, chunk) pairs over an ordered record list."""
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    for start in range(0, len(records), size):
        yield start, records[start : start + size]


class _SubGroup:
    """Records bound for one remote call, with their original positions in the chunk."""

    def __init__(self, kind: str):
        self.kind = kind
        self.indices: list[int] = []
        self.records: list[dict] = []

    def add(self, index: int, record: dict) -> None:
        self.indices.append(index)
        self.records.append(record)


class BatchDispatcher:
    """Writes chunks through a remote-write client.

    The client must provide ``create_collection``, ``update_collection`` and
    ``upsert_collection``, each returning one raw result per input record in
    input order.
    """

    def __init__(self, client):
        self.client = client

    def dispatch(
        self,
        resource_type: str,
        mode: WriteMode,
        external_id_field: str | None,
        chunk: Sequence[dict],
    ) -> list[RecordResult]:
        """Write a chunk. Returns one result per record, in chunk order."""
        if not chunk:
            return []

        results: list[RecordResult | None] = [None] * len(chunk)
        for group in self._plan(mode, chunk, results):
            if group.records:
                self._run_group(resource_type, external_id_field, group, results)
        return [r if r is not None else RecordResult.failure(MISSING_RESULT_MESSAGE) for r in results]

    def _plan(
        self, mode: WriteMode, chunk: Sequence[dict], results: list[RecordResult | None]
    ) -> list[_SubGroup]:
        if mode is WriteMode.INSERT:
            create = _SubGroup("create")
            for i, record in enumerate(chunk):
                create.add(i, for_create(record))
            return [create]

        if mode is WriteMode.UPDATE:
            update = _SubGroup("update")
            for i, record in enumerate(chunk):
                record_id = native_id(record)
                if record_id is None:
                    results[i] = RecordResult.failure(MISSING_ID_MESSAGE)
                else:
                    update.add(i, for_update(record, record_id))
            return [update]

        if mode is WriteMode.UPSERT_NATIVE:
            # The upsert endpoint cannot key on the native id: records that
            # carry one are updated, the rest are created.
            update = _SubGroup("update")
            create = _SubGroup("create")
            for i, record in enumerate(chunk):
                record_id = native_id(record)
                if record_id is None:
                    create.add(i, for_create(record))
                else:
                    update.add(i, for_update(record, record_id))
            return [update, create]

        if mode is WriteMode.UPSERT_BY_FIELD:
            upsert = _SubGroup("upsert")
            for i, record in enumerate(chunk):
                upsert.add(i, dict(record))
            return [upsert]

        raise ValueError(f"Unsupported write mode: {mode}")

    def _call(self, kind: str, resource_type: str, external_id_field: str | None, records: list[dict]):
        if kind == "create":
            return self.client.create_collection(resource_type, records)
        if kind == "update":
            return self.client.update_collection(resource_type, records)
        return self.client.upsert_collection(resource_type, external_id_field, records)

    def _run_group(
        self,
        resource_type: str,
        external_id_field: str | None,
        group: _SubGroup,
        results: list[RecordResult | None],
    ) -> None:
        try:
            raw_results = self._call(group.kind, resource_type, external_id_field, group.records)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning(
                "sub_call_failed",
                kind=group.kind,
                resource_type=resource_type,
                size=len(group.records),
                error=message,
            )
            for i in group.indices:
                results[i] = RecordResult.failure(message)
            return

        raw_results = raw_results or []
        if len(raw_results) != len(group.records):
            logger.warning(
                "result_count_mismatch",
                kind=group.kind,
                expected=len(group.records),
                received=len(raw_results),
            )
        for pos, i in enumerate(group.indices):
            if pos < len(raw_results):
                results[i] = RecordResult.from_remote(raw_results[pos])
            else:
                results[i] = RecordResult.failure(MISSING_RESULT_MESSAGE)
