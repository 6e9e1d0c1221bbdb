"""CSV loader."""
import csv
import io
from typing import Any

import pandas as pd

from record_sync_core.ingest.loaders.base import BaseLoader
from record_sync_core.ingest.normalize import normalize_record


class CSVLoader(BaseLoader):
    """Loader for CSV files. Every value is kept as a string; blank cells are empty strings."""

    name = "csv"
    suffixes = (".csv",)

    def detect(self, head: bytes, suffix: str) -> bool:
        if suffix not in self.suffixes:
            return False
        try:
            text = head.decode("utf-8-sig", errors="replace")
            list(csv.reader([text.split("\n")[0]]))
            return True
        except csv.Error:
            return False

    def load(self, content: bytes) -> list[dict[str, Any]]:
        try:
            df = pd.read_csv(
                io.BytesIO(content),
                dtype=str,
                keep_default_na=False,
                encoding="utf-8-sig",
            )
        except Exception as e:
            raise ValueError(f"CSV parse error: {e}") from e
        df = df.fillna("")
        return [normalize_record(r) for r in df.to_dict("records")]
