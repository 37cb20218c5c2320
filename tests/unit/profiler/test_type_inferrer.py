"""Unit tests for TypeInferrer."""

from datetime import datetime

import pytest

from visualization_advisor.core.values import ValueKind
from visualization_advisor.profiler.profile_result import FieldType
from visualization_advisor.profiler.type_inferrer import TypeInferrer


@pytest.fixture
def inferrer():
    return TypeInferrer()


@pytest.mark.unit
class TestInferTypes:
    """Priority rules."""

    def test_empty_sample(self, inferrer):
        assert inferrer.infer_types([]) == {}

    def test_numbers_and_date_strings(self, inferrer):
        types = inferrer.infer_types([{"x": 1, "when": "2024-01-15"}])
        assert types == {"x": FieldType.QUANTITATIVE, "when": FieldType.TEMPORAL}

    def test_native_datetimes(self, inferrer):
        rows = [{"at": datetime(2024, 1, day)} for day in range(1, 5)]
        assert inferrer.infer_types(rows)["at"] == FieldType.TEMPORAL

    def test_numeric_rule_wins_over_relationship_name(self, inferrer):
        rows = [{"source": 1}, {"source": 2}]
        assert inferrer.infer_types(rows)["source"] == FieldType.QUANTITATIVE

    def test_relationship_name_wins_over_temporal(self, inferrer):
        rows = [{"parent": "2024-01-01"}, {"parent": "2024-01-02"}]
        assert inferrer.infer_types(rows)["parent"] == FieldType.HIERARCHICAL

    @pytest.mark.parametrize("name", ["parent", "source_node", "Target"])
    def test_relationship_names(self, inferrer, name):
        rows = [{name: "a"}, {name: "b"}]
        assert inferrer.infer_types(rows)[name] == FieldType.HIERARCHICAL

    def test_low_cardinality_is_ordinal(self, inferrer):
        rows = [{"size": "S" if i % 2 else "L"} for i in range(10)]
        assert inferrer.infer_types(rows)["size"] == FieldType.ORDINAL

    def test_high_cardinality_is_nominal(self, inferrer):
        rows = [{"name": f"item-{i}"} for i in range(10)]
        assert inferrer.infer_types(rows)["name"] == FieldType.NOMINAL

    def test_booleans_are_nominal(self, inferrer):
        rows = [{"flag": i % 2 == 0} for i in range(20)]
        assert inferrer.infer_types(rows)["flag"] == FieldType.NOMINAL

    def test_all_null_is_nominal(self, inferrer):
        rows = [{"empty": None}, {"empty": None}]
        assert inferrer.infer_types(rows)["empty"] == FieldType.NOMINAL

    def test_nulls_ignored(self, inferrer):
        rows = [{"x": 1}, {"x": None}, {"x": 3.5}]
        assert inferrer.infer_types(rows)["x"] == FieldType.QUANTITATIVE

    def test_mixed_numbers_and_text(self, inferrer):
        rows = [{"code": 1}, {"code": "A2"}, {"code": 3}]
        assert inferrer.infer_types(rows)["code"] == FieldType.NOMINAL

    def test_field_names_from_first_record(self, inferrer):
        rows = [{"a": 1}, {"a": 2, "b": "late"}]
        assert list(inferrer.infer_types(rows)) == ["a"]

    def test_column_order_preserved(self, inferrer):
        rows = [{"z": 1, "a": "x", "m": "2024-01-01"}]
        assert list(inferrer.infer_types(rows)) == ["z", "a", "m"]

    def test_idempotent(self, inferrer, sales_records):
        assert inferrer.infer_types(sales_records) == inferrer.infer_types(sales_records)

    def test_configurable_ratio(self):
        rows = [{"name": f"n{i % 5}"} for i in range(10)]
        assert TypeInferrer(ordinal_cardinality_ratio=0.3).infer_types(rows)["name"] == FieldType.NOMINAL
        assert TypeInferrer(ordinal_cardinality_ratio=0.6).infer_types(rows)["name"] == FieldType.ORDINAL


@pytest.mark.unit
class TestDetectType:
    """Single value tags."""

    @pytest.mark.parametrize("value,kind", [
        (1, ValueKind.NUMBER),
        (2.5, ValueKind.NUMBER),
        (True, ValueKind.BOOL),
        (None, ValueKind.NULL),
        (float("nan"), ValueKind.NULL),
        ("42", ValueKind.TEXT),
        (datetime(2024, 1, 1), ValueKind.DATETIME),
    ])
    def test_kinds(self, value, kind):
        assert TypeInferrer().detect_type(value) == kind
