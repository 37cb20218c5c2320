"""Unit tests for DataProfiler."""

import copy

import pytest

from visualization_advisor.core.config import AdvisorConfig
from visualization_advisor.core.exceptions import ProfilerError
from visualization_advisor.profiler.engine import DataProfiler
from visualization_advisor.profiler.profile_result import FieldType, RelationshipType


@pytest.fixture
def profiler():
    return DataProfiler()


@pytest.mark.unit
class TestProfile:
    """Full profiles."""

    def test_scatter_records(self, profiler, scatter_records):
        profile = profiler.profile(scatter_records)

        assert not profile.is_degenerate
        assert profile.row_count == 3
        assert set(profile.field_profiles) == {"x", "y"}
        rel = profile.get_relationship("y", "x")
        assert rel.type == RelationshipType.LINEAR
        assert rel.strength == pytest.approx(1.0)

    def test_given_field_types_are_used(self, profiler, category_records):
        types = {"cat": FieldType.NOMINAL, "val": FieldType.QUANTITATIVE}
        profile = profiler.profile(category_records, types)
        assert profile.field_profiles["cat"].field_type == FieldType.NOMINAL
        assert profile.field_profiles["cat"].unique_count == 3

    def test_sample_not_modified(self, profiler, sales_records):
        before = copy.deepcopy(sales_records)
        profiler.profile(sales_records)
        assert sales_records == before

    def test_sales_trend(self, profiler, sales_records):
        profile = profiler.profile(sales_records)
        assert profile.field_profiles["date"].field_type == FieldType.TEMPORAL
        assert profile.field_profiles["region"].field_type == FieldType.ORDINAL
        assert ("date", "revenue") in profile.patterns.trend_pairs
        assert not profile.patterns.has_gaps

    def test_uses_config_thresholds(self):
        rows = [{"a": a, "b": b} for a, b in [(1, 2), (2, 1), (3, 4), (4, 3), (5, 6)]]
        strict = DataProfiler(AdvisorConfig(linear_correlation_threshold=0.99))
        loose = DataProfiler(AdvisorConfig(linear_correlation_threshold=0.5))
        assert strict.profile(rows).get_relationship("a", "b").type == RelationshipType.NONLINEAR
        assert loose.profile(rows).get_relationship("a", "b").type == RelationshipType.LINEAR

    def test_to_dict(self, profiler, scatter_records):
        summary = profiler.profile(scatter_records).to_dict()
        assert summary["row_count"] == 3
        assert summary["is_degenerate"] is False
        assert summary["relationships"][0]["fields"] == ["x", "y"]


@pytest.mark.unit
class TestDegenerateProfiles:
    """Degenerate samples are results, not errors."""

    def test_empty(self, profiler):
        profile = profiler.profile([])
        assert profile.is_degenerate
        assert profile.field_profiles == {}

    def test_single_row_keeps_field_profiles(self, profiler):
        profile = profiler.profile([{"a": 1, "b": "x"}])
        assert profile.is_degenerate
        assert set(profile.field_profiles) == {"a", "b"}
        assert profile.relationships == {}

    def test_no_quantitative_fields(self, profiler):
        profile = profiler.profile([{"c": "x"}, {"c": "y"}, {"c": "x"}])
        assert profile.is_degenerate
        assert not profile.patterns.has_trend


@pytest.mark.unit
class TestFieldTypeCoercion:
    """Stored string field types."""

    def test_string_values_accepted(self, profiler, category_records):
        profile = profiler.profile(category_records, {"cat": "nominal", "val": "quantitative"})
        assert profile.field_profiles["val"].field_type == FieldType.QUANTITATIVE
        assert profile.field_profiles["val"].distribution is not None

    def test_unknown_value(self, profiler, category_records):
        with pytest.raises(ProfilerError) as exc_info:
            profiler.profile(category_records, {"cat": "colour", "val": "quantitative"})
        assert exc_info.value.field == "cat"
