"""Record loaders for CSV, JSON, JSONL."""
from record_sync_core.ingest.loaders.base import BaseLoader
from record_sync_core.ingest.loaders.csv import CSVLoader
from record_sync_core.ingest.loaders.json import JSONLoader
from record_sync_core.ingest.loaders.jsonl import JSONLLoader

__all__ = ["BaseLoader", "CSVLoader", "JSONLoader", "JSONLLoader"]
