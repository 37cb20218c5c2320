"""
Dataset records and the store/retrieve-by-id contract.

Key Components:
- Dataset: a stored record set with name, tags and origin
- DatasetRepository: get/get_all/put/delete interface
- InMemoryDatasetRepository: dictionary-backed implementation
"""

from visualization_advisor.datasets.compatibility import (
    determine_compatible_charts,
    determine_dataset_type,
    validate_record_set,
)
from visualization_advisor.datasets.models import Dataset
from visualization_advisor.datasets.repository import DatasetRepository, InMemoryDatasetRepository

__all__ = [
    'Dataset',
    'DatasetRepository',
    'InMemoryDatasetRepository',
    'determine_compatible_charts',
    'determine_dataset_type',
    'validate_record_set',
]
