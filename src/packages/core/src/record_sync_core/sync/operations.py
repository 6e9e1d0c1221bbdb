"""Write modes and per-record shaping."""
from enum import Enum
from typing import Any

from record_sync_core.jobs.models import Operation

NATIVE_ID_FIELD = "Id"
NATIVE_ID_FIELDS = ("Id", "id")
REMOTE_ID_KEY = "id"


class WriteMode(str, Enum):
    """How a chunk is written. Resolved once per job from operation + external id field."""

    INSERT = "insert"
    UPDATE = "update"
    UPSERT_NATIVE = "upsert_native"
    UPSERT_BY_FIELD = "upsert_by_field"


def is_native_id_field(field: str | None) -> bool:
    """True when the field is absent, blank or names the native identifier."""
    return field is None or not field.strip() or field.strip().lower() == NATIVE_ID_FIELD.lower()


def resolve_write_mode(operation: Operation, external_id_field: str | None) -> WriteMode:
    if operation is Operation.INSERT:
        return WriteMode.INSERT
    if operation is Operation.UPDATE:
        return WriteMode.UPDATE
    if operation is Operation.UPSERT:
        if is_native_id_field(external_id_field):
            return WriteMode.UPSERT_NATIVE
        return WriteMode.UPSERT_BY_FIELD
    raise ValueError(f"Unsupported operation: {operation}")


def native_id(record: dict[str, Any]) -> str | None:
    """The record's native identifier, or None when absent or blank."""
    for field in NATIVE_ID_FIELDS:
        value = record.get(field)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def without_native_id(record: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in record.items() if k not in NATIVE_ID_FIELDS}


def for_create(record: dict[str, Any]) -> dict[str, Any]:
    """Record body for a create call: identifier fields removed."""
    return without_native_id(record)


def for_update(record: dict[str, Any], record_id: str) -> dict[str, Any]:
    """Record body for an update call: identifier under the remote id key."""
    return {REMOTE_ID_KEY: record_id, **without_native_id(record)}
