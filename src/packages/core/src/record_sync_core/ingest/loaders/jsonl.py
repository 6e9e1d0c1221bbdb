"""JSONL loader."""
import json
from typing import Any

from record_sync_core.ingest.loaders.base import BaseLoader
from record_sync_core.ingest.normalize import normalize_record


class JSONLLoader(BaseLoader):
    """Loader for JSONL (newline-delimited JSON) files. Blank lines are skipped; every other line must be an object."""

    name = "jsonl"
    suffixes = (".jsonl", ".ndjson")

    def detect(self, head: bytes, suffix: str) -> bool:
        if suffix not in self.suffixes:
            return False
        text = head.decode("utf-8-sig", errors="replace").strip()
        if not text:
            return True
        try:
            json.loads(text.split("\n")[0])
            return True
        except json.JSONDecodeError:
            return False

    def load(self, content: bytes) -> list[dict[str, Any]]:
        records = []
        text = content.decode("utf-8-sig", errors="replace")
        for i, line in enumerate(text.splitlines()):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"JSONL line {i + 1} parse error: {e}") from e
            if not isinstance(obj, dict):
                raise ValueError(
                    f"JSONL line {i + 1} is a {type(obj).__name__}, expected an object"
                )
            records.append(normalize_record(obj))
        return records
