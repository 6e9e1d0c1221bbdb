"""JSON loader."""
import json
from typing import Any

from record_sync_core.ingest.loaders.base import BaseLoader
from record_sync_core.ingest.normalize import normalize_record

WRAPPER_KEY = "records"


def _objects(items: list) -> list[dict[str, Any]]:
    """Every array element must be an object, so positions stay aligned with the file."""
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(
                f"JSON element {i + 1} is a {type(item).__name__}, expected an object"
            )
    return items


def _records_from_json(data: Any) -> list[dict[str, Any]]:
    """Find the record list in a JSON document.

    A top-level array is the record list. An object is unwrapped only when it
    has a ``records`` array or is a single-key object holding an array;
    any other object is one record, and its nested values stay on it.
    """
    if isinstance(data, list):
        return _objects(data)
    if isinstance(data, dict):
        if isinstance(data.get(WRAPPER_KEY), list):
            return _objects(data[WRAPPER_KEY])
        if len(data) == 1:
            (val,) = data.values()
            if isinstance(val, list) and val and all(isinstance(v, dict) for v in val):
                return val
        return [data]
    return []


class JSONLoader(BaseLoader):
    """Loader for JSON files."""

    name = "json"
    suffixes = (".json",)

    def detect(self, head: bytes, suffix: str) -> bool:
        if suffix not in self.suffixes:
            return False
        text = head.decode("utf-8-sig", errors="replace").strip()
        return text.startswith("{") or text.startswith("[")

    def load(self, content: bytes) -> list[dict[str, Any]]:
        try:
            data = json.loads(content.decode("utf-8-sig"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValueError(f"JSON parse error: {e}") from e

        records = _records_from_json(data)
        if not records:
            raise ValueError("JSON file has no array of objects or single object")
        return [normalize_record(r) for r in records]
