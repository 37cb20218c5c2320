"""
JSON serialization utilities for advisor results.

Handles numpy types, timestamps and other non-standard JSON types so that
profiles, ingest results and chart specifications can be serialized, and so
that canonical JSON can be hashed for fingerprints.
"""

import json
import math
import numpy as np
import pandas as pd
from datetime import datetime, date
from typing import Any


class NumpyJSONEncoder(json.JSONEncoder):
    """
    Custom JSON encoder that handles numpy types and other non-standard types.

    Converts:
    - numpy int types → Python int
    - numpy float types → Python float
    - numpy bool → Python bool
    - numpy arrays → Python lists
    - pandas Timestamp → ISO format string
    - datetime/date → ISO format string
    - NaN/inf → null
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, np.integer):
            return int(obj)

        if isinstance(obj, np.floating):
            if np.isnan(obj) or np.isinf(obj):
                return None
            return float(obj)

        if isinstance(obj, np.bool_):
            return bool(obj)

        if isinstance(obj, np.ndarray):
            return obj.tolist()

        if isinstance(obj, pd.Timestamp):
            return obj.isoformat()

        if isinstance(obj, (datetime, date)):
            return obj.isoformat()

        if isinstance(obj, (set, frozenset)):
            return sorted(obj, key=str)

        return super().default(obj)


def convert_to_json_serializable(obj: Any) -> Any:
    """
    Recursively convert object to JSON-serializable types.

    Handles nested structures like dicts and lists. Float NaN/inf become None.

    Args:
        obj: Object to convert

    Returns:
        JSON-serializable version of object
    """
    if obj is None:
        return None

    if isinstance(obj, (bool, np.bool_)):
        return bool(obj)

    if isinstance(obj, np.integer):
        return int(obj)

    if isinstance(obj, (float, np.floating)):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return float(obj)

    if isinstance(obj, np.ndarray):
        return [convert_to_json_serializable(item) for item in obj.tolist()]

    if obj is pd.NaT:
        return None

    if isinstance(obj, pd.Timestamp):
        return obj.isoformat()

    if isinstance(obj, (datetime, date)):
        return obj.isoformat()

    if hasattr(obj, 'to_dict') and callable(obj.to_dict) and not isinstance(obj, dict):
        return convert_to_json_serializable(obj.to_dict())

    if isinstance(obj, dict):
        return {
            str(key): convert_to_json_serializable(value)
            for key, value in obj.items()
        }

    if isinstance(obj, (list, tuple)):
        return [convert_to_json_serializable(item) for item in obj]

    if isinstance(obj, (set, frozenset)):
        return [convert_to_json_serializable(item) for item in sorted(obj, key=str)]

    return obj


def canonical_json(obj: Any) -> str:
    """
    Serialize to compact JSON with sorted keys.

    Two equal objects always produce the same string, which makes the output
    suitable for hashing.
    """
    return json.dumps(
        convert_to_json_serializable(obj),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def safe_json_dumps(obj: Any, **kwargs) -> str:
    """
    Safely serialize object to JSON string using custom encoder.

    Args:
        obj: Object to serialize
        **kwargs: Additional arguments to pass to json.dumps

    Returns:
        JSON string
    """
    if 'cls' not in kwargs:
        kwargs['cls'] = NumpyJSONEncoder
    if 'indent' not in kwargs:
        kwargs['indent'] = 2

    return json.dumps(convert_to_json_serializable(obj), **kwargs)
