"""Record normalization utilities."""
import json
from typing import Any

import pandas as pd


def normalize_value(v: Any) -> Any:
    """Normalize a scalar to a JSON-serializable value. Nested values become JSON strings."""
    if v is None:
        return None
    if isinstance(v, float) and pd.isna(v):
        return None
    if isinstance(v, (str, int, float, bool)):
        return v
    if isinstance(v, (dict, list)):
        return json.dumps(v) if v else ""
    return str(v)


def normalize_record(row: dict) -> dict[str, Any]:
    """Normalize a parsed row into a flat record with string keys."""
    return {str(k).strip(): normalize_value(v) for k, v in row.items()}
