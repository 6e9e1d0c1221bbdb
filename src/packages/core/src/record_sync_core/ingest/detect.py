"""Format detection and record loading for uploaded content."""
from pathlib import Path
from typing import Any

from record_sync_core.ingest.loaders import BaseLoader, CSVLoader, JSONLoader, JSONLLoader

LOADERS: list[BaseLoader] = [JSONLLoader(), JSONLoader(), CSVLoader()]
HEAD_BYTES = 8192


def detect_format(filename: str, content: bytes) -> str | None:
    """Detect the format of uploaded content from its filename and first bytes."""
    suffix = Path(filename or "").suffix.lower()
    head = content[:HEAD_BYTES]
    for loader in LOADERS:
        if loader.detect(head, suffix):
            return loader.name
    return None


def get_loader(format_name: str) -> BaseLoader:
    """Get a loader by format name."""
    for loader in LOADERS:
        if loader.name == format_name:
            return loader
    raise ValueError(f"Unknown format: {format_name}")


def load_records(filename: str, content: bytes) -> list[dict[str, Any]]:
    """Load all records from uploaded content, in file order."""
    format_name = detect_format(filename, content)
    if format_name is None:
        raise ValueError(f"Unsupported or unrecognized file format: {filename}")
    return get_loader(format_name).load(content)
