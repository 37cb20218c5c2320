"""Unit tests for Dataset and the in-memory repository."""

from datetime import datetime
from concurrent.futures import ThreadPoolExecutor

import pytest

from visualization_advisor.datasets.models import Dataset
from visualization_advisor.datasets.repository import DatasetRepository, InMemoryDatasetRepository
from visualization_advisor.ingestion.result import IngestResult


@pytest.fixture
def repository():
    return InMemoryDatasetRepository()


@pytest.fixture
def ingest_result(category_records):
    return IngestResult(
        sample_rows=category_records,
        total_row_count=5,
        fingerprint="0123456789abcdef",
        is_sampled=False,
        columns=["cat", "val"],
        file_name="cats.csv",
        file_format="csv",
    )


@pytest.mark.unit
class TestDataset:

    def test_from_ingest(self, ingest_result):
        dataset = Dataset.from_ingest("ds-1", ingest_result, tags=["demo"])

        assert dataset.name == "cats.csv"
        assert dataset.row_count == 5
        assert dataset.fingerprint == "0123456789abcdef"
        assert dataset.tags == ["demo"]
        assert isinstance(dataset.upload_date, datetime)
        assert dataset.values is not ingest_result.sample_rows

    def test_from_ingest_explicit_name_and_date(self, ingest_result):
        uploaded = datetime(2024, 2, 1, 9, 30)
        dataset = Dataset.from_ingest("ds-1", ingest_result, name="Cats", upload_date=uploaded, origin="sample")
        assert dataset.name == "Cats"
        assert dataset.upload_date == uploaded
        assert dataset.origin == "sample"

    def test_to_dict(self):
        dataset = Dataset(
            id="ds-2",
            name="Tiny",
            values=[{"when": datetime(2024, 1, 1), "v": 1}],
            upload_date=datetime(2024, 3, 4),
        )
        summary = dataset.to_dict()
        assert summary["upload_date"] == "2024-03-04T00:00:00"
        assert summary["values"] == [{"when": "2024-01-01T00:00:00", "v": 1}]
        assert summary["row_count"] == 1
        assert "values" not in dataset.to_dict(include_values=False)


@pytest.mark.unit
class TestInMemoryRepository:

    def test_is_a_repository(self, repository):
        assert isinstance(repository, DatasetRepository)

    def test_abstract_interface(self):
        with pytest.raises(TypeError):
            DatasetRepository()

    def test_put_get(self, repository):
        dataset = Dataset(id="a", name="A")
        repository.put(dataset)
        assert repository.get("a") is dataset
        assert repository.get("missing") is None

    def test_put_replaces(self, repository):
        repository.put(Dataset(id="a", name="first"))
        repository.put(Dataset(id="a", name="second"))
        assert repository.get("a").name == "second"
        assert len(repository) == 1

    def test_get_all(self, repository):
        repository.put(Dataset(id="a", name="A"))
        repository.put(Dataset(id="b", name="B"))
        assert [d.id for d in repository.get_all()] == ["a", "b"]

    def test_delete(self, repository):
        repository.put(Dataset(id="a", name="A"))
        repository.delete("a")
        repository.delete("never-stored")
        assert repository.get("a") is None
        assert len(repository) == 0

    def test_concurrent_puts(self, repository):
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: repository.put(Dataset(id=f"d{i}", name=str(i))), range(200)))
        assert len(repository) == 200
