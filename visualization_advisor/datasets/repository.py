"""Store/retrieve-by-id contract for datasets."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from visualization_advisor.datasets.models import Dataset

logger = logging.getLogger(__name__)


class DatasetRepository(ABC):
    """
    Interface to the dataset persistence collaborator.

    Each call is independent; no atomicity is assumed across datasets.
    """

    @abstractmethod
    def get(self, dataset_id: str) -> Optional[Dataset]:
        """Fetch a dataset by id, or None."""
        pass

    @abstractmethod
    def get_all(self) -> List[Dataset]:
        """List every stored dataset."""
        pass

    @abstractmethod
    def put(self, dataset: Dataset) -> None:
        """Store a dataset, replacing any with the same id."""
        pass

    @abstractmethod
    def delete(self, dataset_id: str) -> None:
        """Remove a dataset; unknown ids are ignored."""
        pass


class InMemoryDatasetRepository(DatasetRepository):
    """Dictionary-backed repository, for tests and single-process use."""

    def __init__(self):
        self._datasets: Dict[str, Dataset] = {}
        self._lock = threading.Lock()

    def get(self, dataset_id: str) -> Optional[Dataset]:
        with self._lock:
            return self._datasets.get(dataset_id)

    def get_all(self) -> List[Dataset]:
        with self._lock:
            return list(self._datasets.values())

    def put(self, dataset: Dataset) -> None:
        with self._lock:
            self._datasets[dataset.id] = dataset
        logger.debug(f"Stored dataset {dataset.id} ({dataset.row_count:,} rows)")

    def delete(self, dataset_id: str) -> None:
        with self._lock:
            removed = self._datasets.pop(dataset_id, None)
        if removed is not None:
            logger.debug(f"Deleted dataset {dataset_id}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._datasets)
