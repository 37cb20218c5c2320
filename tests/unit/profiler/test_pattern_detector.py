"""Unit tests for PatternDetector."""

from datetime import datetime, timedelta

import pytest

from visualization_advisor.profiler.pattern_detector import PatternDetector
from visualization_advisor.profiler.profile_result import Density, FieldProfile, FieldType
from visualization_advisor.profiler.statistics_calculator import StatisticsCalculator


def detect(rows, field_types):
    calculator = StatisticsCalculator()
    profiles = {
        name: calculator.calculate_field_profile(rows, name, ftype)
        for name, ftype in field_types.items()
    }
    return PatternDetector().detect(rows, field_types, profiles)


def daily_rows(count, value_fn, field="value"):
    start = datetime(2024, 3, 1)
    return [{"day": start + timedelta(days=i), field: value_fn(i)} for i in range(count)]


@pytest.fixture
def detector():
    return PatternDetector()


@pytest.mark.unit
class TestTrend:
    """First-quarter vs last-quarter drift."""

    def test_step_up(self, detector):
        assert detector.has_trend([1, 1, 1, 1, 2, 2, 2, 2])

    def test_flat(self, detector):
        assert not detector.has_trend([5, 5, 5, 5, 5, 5, 5, 5])

    def test_small_change_below_threshold(self, detector):
        assert not detector.has_trend([10, 10, 11, 11])

    def test_zero_first_mean(self, detector):
        assert detector.has_trend([0, 0, 0, 5])
        assert not detector.has_trend([0, 0, 0, 0])

    def test_too_short(self, detector):
        assert not detector.has_trend([1])

    def test_rows_sorted_by_time(self):
        rows = daily_rows(16, lambda i: i * 2.5)
        rows.reverse()
        series = PatternDetector.time_ordered_series(rows, "day", "value")
        assert series == [i * 2.5 for i in range(16)]

    def test_trend_pair_recorded(self):
        rows = daily_rows(16, lambda i: i * 2.5)
        patterns = detect(rows, {"day": FieldType.TEMPORAL, "value": FieldType.QUANTITATIVE})
        assert patterns.has_trend
        assert patterns.trend_pairs == [("day", "value")]

    def test_identifier_fields_ignored(self):
        rows = daily_rows(16, lambda i: i, field="row_num")
        patterns = detect(rows, {"day": FieldType.TEMPORAL, "row_num": FieldType.QUANTITATIVE})
        assert not patterns.has_trend


@pytest.mark.unit
class TestCyclicality:
    """Direction changes in a time-ordered series."""

    def test_zigzag(self, detector):
        assert detector.has_cyclicality([0, 1] * 5)

    def test_monotonic(self, detector):
        assert not detector.has_cyclicality(list(range(20)))

    def test_short_series(self, detector):
        assert not detector.has_cyclicality([0, 1, 0, 1])

    def test_constant(self, detector):
        assert not detector.has_cyclicality([3] * 12)

    def test_detected_through_rows(self):
        rows = daily_rows(12, lambda i: 10.5 if i % 2 else 2.5)
        patterns = detect(rows, {"day": FieldType.TEMPORAL, "value": FieldType.QUANTITATIVE})
        assert patterns.has_cyclicality


@pytest.mark.unit
class TestGaps:
    """Nulls and irregular temporal spacing."""

    def test_regular_daily_series(self):
        rows = daily_rows(10, lambda i: i * 1.5)
        patterns = detect(rows, {"day": FieldType.TEMPORAL, "value": FieldType.QUANTITATIVE})
        assert not patterns.has_gaps

    def test_missing_days(self):
        rows = daily_rows(10, lambda i: i * 1.5)
        del rows[4:8]
        assert PatternDetector.has_temporal_gaps(rows, "day")

    def test_date_strings(self):
        rows = [{"d": d} for d in ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-10"]]
        assert PatternDetector.has_temporal_gaps(rows, "d")

    def test_too_few_dates(self):
        rows = [{"d": "2024-01-01"}, {"d": "2024-06-01"}]
        assert not PatternDetector.has_temporal_gaps(rows, "d")

    def test_null_cells(self):
        rows = [{"a": 1.5, "b": "x"}, {"a": 2.5, "b": None}, {"a": 4.0, "b": "y"}]
        patterns = detect(rows, {"a": FieldType.QUANTITATIVE, "b": FieldType.NOMINAL})
        assert patterns.has_gaps


@pytest.mark.unit
class TestDistributionFlags:
    """Outliers, variance and shape."""

    def test_outliers_and_high_variance(self):
        rows = [{"v": v} for v in [1, 1, 1, 1, 100]]
        patterns = detect(rows, {"v": FieldType.QUANTITATIVE})
        assert patterns.has_outliers
        assert patterns.has_high_variance

    def test_tight_values(self):
        rows = [{"v": v} for v in [10.5, 11.0, 10.0, 10.5, 11.5]]
        patterns = detect(rows, {"v": FieldType.QUANTITATIVE})
        assert not patterns.has_outliers
        assert not patterns.has_high_variance

    def test_two_clusters_are_multi_modal(self):
        rows = [{"score": v} for v in [0.5] * 10 + [10.5] * 10]
        assert detect(rows, {"score": FieldType.QUANTITATIVE}).has_multi_modality

    def test_peaked_values_are_not_multi_modal(self):
        values = [5.5] * 16 + [1.5, 9.5]
        rows = [{"score": v} for v in values]
        assert not detect(rows, {"score": FieldType.QUANTITATIVE}).has_multi_modality


@pytest.mark.unit
class TestDensity:
    """Mean unique ratio buckets."""

    @pytest.mark.parametrize("ratios,expected", [
        ([0.1], Density.SPARSE),
        ([0.1, 0.2], Density.SPARSE),
        ([0.5], Density.MEDIUM),
        ([0.9, 1.0], Density.DENSE),
        ([], Density.MEDIUM),
    ])
    def test_buckets(self, detector, ratios, expected):
        profiles = [
            FieldProfile(field=f"f{i}", field_type=FieldType.NOMINAL, unique_ratio=ratio)
            for i, ratio in enumerate(ratios)
        ]
        assert detector.classify_density(profiles) == expected


@pytest.mark.unit
def test_patterns_to_dict():
    rows = daily_rows(16, lambda i: i * 2.5)
    summary = detect(rows, {"day": FieldType.TEMPORAL, "value": FieldType.QUANTITATIVE}).to_dict()
    assert summary["has_trend"] is True
    assert summary["trend_pairs"] == [["day", "value"]]
    assert summary["density"] in {"sparse", "medium", "dense"}
