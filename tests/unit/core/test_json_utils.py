"""Unit tests for JSON serialization helpers."""

import json
from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from visualization_advisor.utils.json_utils import (
    canonical_json,
    convert_to_json_serializable,
    safe_json_dumps,
)


@pytest.mark.unit
class TestConvertToJsonSerializable:
    """Test recursive conversion."""

    def test_numpy_scalars(self):
        assert convert_to_json_serializable(np.int64(5)) == 5
        assert isinstance(convert_to_json_serializable(np.int64(5)), int)
        assert convert_to_json_serializable(np.float32(1.5)) == 1.5
        assert convert_to_json_serializable(np.bool_(True)) is True

    def test_non_finite_floats_become_none(self):
        assert convert_to_json_serializable(float("nan")) is None
        assert convert_to_json_serializable(np.inf) is None

    def test_temporal_values(self):
        assert convert_to_json_serializable(datetime(2024, 1, 2, 3, 4)) == "2024-01-02T03:04:00"
        assert convert_to_json_serializable(date(2024, 1, 2)) == "2024-01-02"
        assert convert_to_json_serializable(pd.Timestamp("2024-01-02")) == "2024-01-02T00:00:00"
        assert convert_to_json_serializable(pd.NaT) is None

    def test_nested(self):
        value = {"a": [np.int64(1), {"b": np.float64(2.0)}], 3: (1, 2)}
        assert convert_to_json_serializable(value) == {"a": [1, {"b": 2.0}], "3": [1, 2]}

    def test_arrays(self):
        assert convert_to_json_serializable(np.array([1, 2, 3])) == [1, 2, 3]


@pytest.mark.unit
class TestCanonicalJson:
    """Equal objects serialize identically."""

    def test_key_order_does_not_matter(self):
        assert canonical_json({"b": 1, "a": 2}) == canonical_json({"a": 2, "b": 1})

    def test_compact(self):
        assert canonical_json({"a": [1, 2]}) == '{"a":[1,2]}'

    def test_safe_dumps_handles_numpy(self):
        assert json.loads(safe_json_dumps({"n": np.int64(3)})) == {"n": 3}
