"""Ingest module: turns uploaded files into ordered flat records."""
from record_sync_core.ingest.detect import detect_format, get_loader, load_records

__all__ = ["detect_format", "get_loader", "load_records"]
