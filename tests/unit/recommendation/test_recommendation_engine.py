"""Unit tests for RecommendationEngine."""

import pytest

from visualization_advisor.core.config import AdvisorConfig
from visualization_advisor.profiler.engine import DataProfiler
from visualization_advisor.recommendation.engine import RecommendationEngine


def recommend(records, config=None):
    profiler = DataProfiler(config)
    field_types = profiler.type_inferrer.infer_types(records)
    profile = profiler.profile(records, field_types)
    return RecommendationEngine(config).recommend(records, field_types, profile)


def by_type(recommendations, chart_type):
    return [rec for rec in recommendations if rec.chart_type == chart_type]


@pytest.mark.unit
class TestScatter:
    """Strong linear relationships."""

    def test_perfect_correlation(self, scatter_records):
        recommendations = recommend(scatter_records)

        top = recommendations[0]
        assert top.chart_type == "point"
        assert top.confidence >= 0.9
        encodings = top.encoding_dict()
        assert encodings["x"]["field"] == "x"
        assert encodings["y"]["field"] == "y"
        assert encodings["x"]["scale"] == {"zero": False}
        assert "Strong positive correlation" in top.reason

    def test_dense_pair_adds_heatmap(self, scatter_records):
        chart_types = [rec.chart_type for rec in recommend(scatter_records)]
        assert chart_types == ["point", "rect"]

    def test_negative_correlation_reason(self):
        rows = [{"a": i * 1.5, "b": 100.0 - i * 3.5} for i in range(8)]
        scatter = by_type(recommend(rows), "point")[0]
        assert "negative" in scatter.reason

    def test_third_measure_on_size(self):
        rows = [{"a": i * 1.5, "b": i * 3.5, "c": (i % 3) * 0.5} for i in range(8)]
        scatter = by_type(recommend(rows), "point")[0]
        assert scatter.encoding_dict()["size"]["field"] == "c"


@pytest.mark.unit
class TestComparison:
    """Bar charts over categories."""

    def test_category_bar(self, category_records):
        recommendations = recommend(category_records)
        bar = by_type(recommendations, "bar")[0]
        encodings = bar.encoding_dict()
        assert encodings["x"] == {"field": "cat", "type": "nominal"}
        assert encodings["y"] == {"field": "val", "type": "quantitative"}
        assert [rec.chart_type for rec in recommendations] == ["bar", "arc"]

    def test_arc_encodings(self, category_records):
        arc = by_type(recommend(category_records), "arc")[0]
        encodings = arc.encoding_dict()
        assert encodings["theta"] == {"field": "val", "type": "quantitative", "aggregate": "sum"}
        assert encodings["color"]["field"] == "cat"

    def test_long_labels_add_horizontal_bar(self):
        names = ["International Shipping", "Domestic Delivery", "Store Pickup"]
        rows = [{"method": names[i % 3], "cost": 2.5 + i} for i in range(9)]
        bars = by_type(recommend(rows), "bar")
        horizontal = [bar for bar in bars if bar.encoding_dict()["y"].get("sort") == "-x"]
        assert len(horizontal) == 1
        assert horizontal[0].encoding_dict()["x"]["field"] == "cost"

    def test_second_category_adds_grouped_bar(self):
        rows = [
            {"store": f"s{i % 3}", "channel": "web" if i % 2 else "retail", "sales": 10.5 + i}
            for i in range(12)
        ]
        grouped = [
            bar for bar in by_type(recommend(rows), "bar")
            if "xOffset" in bar.suggested_encodings
        ]
        assert len(grouped) == 1
        encodings = grouped[0].encoding_dict()
        assert encodings["xOffset"]["field"] == "channel"
        assert encodings["color"]["field"] == "channel"

    def test_too_many_categories(self):
        rows = [{"name": f"n{i}", "v": i * 0.5} for i in range(40)]
        assert not by_type(recommend(rows), "arc")
        assert all("xOffset" not in rec.suggested_encodings for rec in recommend(rows))

    def test_grouping_name_adds_treemap(self):
        rows = [{"product_category": f"c{i % 3}", "units": 3.5 + i} for i in range(9)]
        treemap = by_type(recommend(rows), "treemap")
        assert treemap
        assert treemap[0].encoding_dict()["size"]["field"] == "units"


@pytest.mark.unit
class TestTrendsAndDistributions:
    """Time series, outliers and skew."""

    def test_sales_trend(self, sales_records):
        recommendations = recommend(sales_records)
        chart_types = [rec.chart_type for rec in recommendations]
        assert "line" in chart_types
        assert "area" in chart_types

        line = by_type(recommendations, "line")[0].encoding_dict()
        assert line["x"] == {"field": "date", "type": "temporal"}
        assert line["y"]["field"] == "revenue"

        area = by_type(recommendations, "area")[0].encoding_dict()
        assert area["y"]["stack"] == "normalize"
        assert area["color"]["field"] == "region"

    def test_outliers_add_boxplot(self):
        values = [10.5, 11.0, 10.0, 10.5, 11.5, 10.0, 11.0, 95.0]
        rows = [{"site": "a" if i % 2 else "b", "latency": v} for i, v in enumerate(values)]
        boxplot = by_type(recommend(rows), "boxplot")
        assert boxplot
        assert boxplot[0].encoding_dict()["y"]["field"] == "latency"

    def test_skewed_measure_adds_histogram(self):
        values = [1.5] * 20 + [2.5] * 5 + [40.5]
        rows = [{"latency": v} for v in values]
        histogram = [
            rec for rec in by_type(recommend(rows), "bar")
            if rec.encoding_dict()["x"].get("bin")
        ]
        assert histogram
        assert histogram[0].encoding_dict()["y"] == {"type": "quantitative", "aggregate": "count"}


@pytest.mark.unit
class TestRanking:
    """Ordering, limits and degenerate input."""

    def test_ordering_and_limit(self, sales_records):
        recommendations = recommend(sales_records)
        confidences = [rec.confidence for rec in recommendations]
        assert confidences == sorted(confidences, reverse=True)
        assert len(recommendations) <= 5
        assert all(0.0 <= c <= 1.0 for c in confidences)

    def test_configured_limit(self, sales_records):
        assert len(recommend(sales_records, AdvisorConfig(max_recommendations=2))) == 2

    def test_every_recommendation_has_tooltip(self, sales_records):
        for rec in recommend(sales_records):
            tooltip = rec.encoding_dict()["tooltip"]
            assert 1 <= len(tooltip) <= 3
            assert all("title" in entry for entry in tooltip)

    @pytest.mark.parametrize("records", [
        [],
        [{"x": 1, "y": 2}],
        [{"c": "a"}, {"c": "b"}, {"c": "a"}],
    ])
    def test_no_recommendations(self, records):
        assert recommend(records) == []

    def test_identifiers_are_not_measures(self):
        rows = [{"id": i, "kind": "ab"[i % 2], "score": (i % 4) * 1.5} for i in range(12)]
        for rec in recommend(rows):
            assert "id" not in rec.fields_used()

    def test_identifier_correlation_is_not_a_scatter(self):
        rows = [{"order_id": i, "amount": i * 2.5 + 0.5} for i in range(12)]
        assert not by_type(recommend(rows), "point")
