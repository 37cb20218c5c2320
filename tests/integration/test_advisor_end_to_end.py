"""
End-to-end tests through VisualizationAdvisor.

Raw bytes go in; ingest results, profiles, ranked recommendations and
renderer-ready specifications come out.
"""

import asyncio
import json
import logging

import pytest

from visualization_advisor import AdvisorConfig, FieldType, VisualizationAdvisor
from visualization_advisor.core.exceptions import ProfilerError
from visualization_advisor.datasets.models import Dataset
from visualization_advisor.datasets.repository import InMemoryDatasetRepository


@pytest.fixture
def advisor():
    return VisualizationAdvisor()


@pytest.mark.integration
class TestAnalyze:
    """File in, recommendations out."""

    def test_csv_sales(self, advisor, csv_bytes, sales_records):
        analysis = advisor.analyze(csv_bytes(sales_records), "csv", file_name="sales.csv")

        assert analysis.ingest.total_row_count == 120
        assert analysis.field_types == {
            "date": FieldType.TEMPORAL,
            "region": FieldType.ORDINAL,
            "revenue": FieldType.QUANTITATIVE,
            "cost": FieldType.QUANTITATIVE,
        }
        chart_types = [rec.chart_type for rec in analysis.recommendations]
        assert "line" in chart_types
        assert len(chart_types) <= 5

    def test_json_categories(self, advisor, category_records):
        analysis = advisor.analyze(json.dumps(category_records).encode(), "json")

        top = analysis.recommendations[0]
        assert top.chart_type == "bar"
        assert top.encoding_dict()["x"] == {"field": "cat", "type": "nominal"}
        assert top.encoding_dict()["y"] == {"field": "val", "type": "quantitative"}

    def test_jsonl_scatter(self, advisor, jsonl_bytes, scatter_records):
        analysis = advisor.analyze(jsonl_bytes(scatter_records), file_name="points.ndjson")
        assert analysis.recommendations[0].chart_type == "point"

    def test_analysis_is_json_serializable(self, advisor, csv_bytes, sales_records):
        summary = advisor.analyze(csv_bytes(sales_records), "csv").to_dict()
        decoded = json.loads(json.dumps(summary))
        assert decoded["field_types"]["date"] == "temporal"
        assert decoded["profile"]["row_count"] == 120
        assert decoded["recommendations"]

    def test_analysis_to_json(self, advisor, csv_bytes, sales_records):
        analysis = advisor.analyze(csv_bytes(sales_records), "csv")
        decoded = json.loads(analysis.to_json())
        assert decoded["field_types"]["date"] == "temporal"
        assert len(decoded["recommendations"]) == len(analysis.recommendations)
        assert "\n" not in analysis.to_json(indent=None)

    def test_sampled_file(self, csv_bytes):
        rows = [{"store": f"s{i % 4}", "units": (i % 17) * 1.5 + 0.5} for i in range(3_000)]
        advisor = VisualizationAdvisor(AdvisorConfig(
            chunk_size=250, max_rows_to_keep=300, max_chunk_collect=1_000, fingerprint_sample_size=100,
        ))

        analysis = advisor.analyze(csv_bytes(rows), "csv")

        assert analysis.ingest.total_row_count == 3_000
        assert analysis.ingest.is_sampled
        assert analysis.profile.row_count == 300
        assert any(rec.chart_type == "bar" for rec in analysis.recommendations)

    def test_recommend_with_string_field_types(self, advisor, category_records):
        from_strings = advisor.recommend(category_records, {"cat": "nominal", "val": "quantitative"})
        from_enums = advisor.recommend(
            category_records, {"cat": FieldType.NOMINAL, "val": FieldType.QUANTITATIVE}
        )

        assert from_strings
        assert [rec.to_dict() for rec in from_strings] == [rec.to_dict() for rec in from_enums]

    def test_recommend_with_unknown_field_type(self, advisor, category_records):
        with pytest.raises(ProfilerError):
            advisor.recommend(category_records, {"cat": "categorical", "val": "quantitative"})

    def test_async_ingest(self, advisor, csv_bytes, scatter_records):
        result = asyncio.run(advisor.ingest_async(csv_bytes(scatter_records), "csv"))
        assert advisor.analyze_records(result).recommendations[0].chart_type == "point"


@pytest.mark.integration
class TestSynthesizeRecommendations:
    """Every recommendation turns into a usable specification."""

    def test_all_recommendations(self, advisor, csv_bytes, sales_records):
        analysis = advisor.analyze(csv_bytes(sales_records), "csv")
        rows = analysis.ingest.sample_rows

        for rec in analysis.recommendations:
            spec = advisor.synthesize_recommendation(rec, rows)
            assert len(spec["data"]["values"]) == 120
            assert spec["encoding"]
            json.dumps(spec)

    def test_arc_recommendation_is_radial(self, advisor, category_records):
        recommendations = advisor.recommend(category_records)
        arc = next(rec for rec in recommendations if rec.chart_type == "arc")

        spec = advisor.synthesize_recommendation(arc, category_records, mark_options={"innerRadius": 40})

        assert spec["mark"] == {"type": "arc", "tooltip": True, "innerRadius": 40}
        assert not {"x", "y", "size"} & set(spec["encoding"])

    def test_direct_synthesis(self, advisor):
        spec = advisor.synthesize("wordcloud", {}, [{"word": "a", "count": 3}])
        assert spec["mark"]["type"] == "text"


@pytest.mark.integration
class TestStoredDatasets:
    """Recommendations for datasets held by a repository."""

    def test_store_and_analyze(self, advisor, csv_bytes, category_records):
        repository = InMemoryDatasetRepository()
        ingest = advisor.ingest(csv_bytes(category_records), "csv", file_name="cats.csv")

        dataset = advisor.store_ingest(repository, "cats", ingest, tags=["demo"])

        assert dataset.data_types == {"cat": "nominal", "val": "quantitative"}
        assert repository.get("cats").fingerprint == ingest.fingerprint
        recommendations = advisor.analyze_dataset(repository, "cats")
        assert [rec.chart_type for rec in recommendations] == ["bar", "arc"]

    def test_types_inferred_and_written_back(self, advisor, scatter_records):
        repository = InMemoryDatasetRepository()
        repository.put(Dataset(id="points", name="Points", values=scatter_records))

        recommendations = advisor.analyze_dataset(repository, "points")

        assert recommendations[0].chart_type == "point"
        assert repository.get("points").data_types == {"x": "quantitative", "y": "quantitative"}

    def test_stored_types_reused(self, advisor, category_records):
        repository = InMemoryDatasetRepository()
        repository.put(Dataset(
            id="cats",
            name="Cats",
            values=category_records,
            data_types={"cat": "ordinal", "val": "quantitative"},
        ))
        bar = advisor.analyze_dataset(repository, "cats")[0]
        assert bar.encoding_dict()["x"]["type"] == "ordinal"

    def test_unknown_dataset(self, advisor, caplog):
        with caplog.at_level(logging.WARNING):
            assert advisor.analyze_dataset(InMemoryDatasetRepository(), "nope") is None
        assert "Dataset nope not found" in caplog.text

    def test_bad_stored_type(self, advisor, category_records):
        repository = InMemoryDatasetRepository()
        repository.put(Dataset(id="cats", name="Cats", values=category_records, data_types={"cat": "colour"}))
        with pytest.raises(ProfilerError):
            advisor.analyze_dataset(repository, "cats")
