"""
Cell Classifier - tagged value model for parsed cells.

Every parsed cell is one of Number | Text | DateTime | Bool | Null. The kind
is decided by a pure function of the cell's own content, never of its column,
so the same raw string always yields the same native value.

Usage:
    kind, value = classify_cell("2024-01-15")   # (ValueKind.DATETIME, datetime(2024, 1, 15))
    kind, value = classify_cell("42")           # (ValueKind.NUMBER, 42)
    value = coerce_cell("true")                 # True
"""

import math
import re
from datetime import datetime, date, timezone
from enum import Enum
from typing import Any, Optional, Tuple

import numpy as np
import pandas as pd

from visualization_advisor.core.constants import DATE_PATTERNS


class ValueKind(str, Enum):
    """Tag of a classified cell value."""
    NUMBER = "number"
    TEXT = "text"
    DATETIME = "datetime"
    BOOL = "bool"
    NULL = "null"


# Same shape papaparse's dynamic typing accepts: optional sign, digits with an
# optional fraction, optional exponent. No thousands separators, no inf/nan.
_NUMBER_RE = re.compile(r'^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$')
_INTEGER_RE = re.compile(r'^\s*-?\d+\s*$')
_DATE_RES = [re.compile(p) for p in DATE_PATTERNS]
_BOOL_STRINGS = {'true': True, 'false': False}


def is_null(value: Any) -> bool:
    """True for None and float/numpy NaN or NaT."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, (np.floating,)) and np.isnan(value):
        return True
    if value is pd.NaT:
        return True
    return False


def is_number(value: Any) -> bool:
    """True for native or numpy numbers; booleans are not numbers."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating)) and not is_null(value)


def is_datetime(value: Any) -> bool:
    """True for datetime, date and pandas Timestamp instances."""
    return isinstance(value, (datetime, date)) and value is not pd.NaT


def looks_like_date(text: str) -> bool:
    """Check whether a string matches one of the accepted date patterns."""
    candidate = text.strip()
    return any(regex.match(candidate) for regex in _DATE_RES)


def parse_date_string(text: str) -> Optional[datetime]:
    """
    Parse a date-looking string into a naive datetime.

    Only strings matching DATE_PATTERNS are attempted. Timezone-aware values
    are converted to UTC and made naive so parsed values stay comparable.

    Returns:
        datetime, or None when the string is not an unambiguous date
    """
    if not looks_like_date(text):
        return None
    try:
        timestamp = pd.Timestamp(text.strip())
    except (ValueError, OverflowError):
        return None
    if timestamp is pd.NaT:
        return None
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert('UTC').tz_localize(None)
    return timestamp.to_pydatetime()


def _classify_number_text(text: str) -> Tuple[ValueKind, Any]:
    if _INTEGER_RE.match(text):
        return ValueKind.NUMBER, int(text)
    number = float(text)
    if math.isinf(number):
        return ValueKind.TEXT, text
    return ValueKind.NUMBER, number


def classify_cell(raw: Any) -> Tuple[ValueKind, Any]:
    """
    Classify a single cell and return its tag with the native value.

    Args:
        raw: Raw cell content (usually a string from a delimited file)

    Returns:
        Tuple of (ValueKind, native value)
    """
    if is_null(raw):
        return ValueKind.NULL, None

    if isinstance(raw, (bool, np.bool_)):
        return ValueKind.BOOL, bool(raw)

    if isinstance(raw, (int, np.integer)):
        return ValueKind.NUMBER, int(raw)

    if isinstance(raw, (float, np.floating)):
        return ValueKind.NUMBER, float(raw)

    if isinstance(raw, pd.Timestamp):
        return ValueKind.DATETIME, raw.to_pydatetime()

    if isinstance(raw, (datetime, date)):
        return ValueKind.DATETIME, raw

    if not isinstance(raw, str):
        return ValueKind.TEXT, str(raw)

    stripped = raw.strip()
    if not stripped:
        return ValueKind.NULL, None

    lowered = stripped.lower()
    if lowered in _BOOL_STRINGS:
        return ValueKind.BOOL, _BOOL_STRINGS[lowered]

    if _NUMBER_RE.match(stripped):
        return _classify_number_text(stripped)

    parsed_date = parse_date_string(stripped)
    if parsed_date is not None:
        return ValueKind.DATETIME, parsed_date

    return ValueKind.TEXT, raw


def coerce_cell(raw: Any) -> Any:
    """Return only the native value of classify_cell()."""
    return classify_cell(raw)[1]


def value_kind(value: Any) -> ValueKind:
    """
    Tag an already-native value without coercing strings.

    Used by the profiler and type inference, which must not re-parse text.
    """
    if is_null(value):
        return ValueKind.NULL
    if isinstance(value, (bool, np.bool_)):
        return ValueKind.BOOL
    if is_number(value):
        return ValueKind.NUMBER
    if is_datetime(value):
        return ValueKind.DATETIME
    return ValueKind.TEXT


def as_datetime(value: Any) -> Optional[datetime]:
    """
    Read a temporal value as a naive datetime.

    Accepts datetimes, dates and date-looking strings; anything else is None.
    """
    if is_null(value):
        return None
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        return parse_date_string(value)
    return None
