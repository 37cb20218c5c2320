"""Dataset record consumed from the persistence collaborator."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from visualization_advisor.ingestion.result import IngestResult
from visualization_advisor.utils.json_utils import convert_to_json_serializable


@dataclass
class Dataset:
    """
    A stored record set and its metadata.

    Attributes:
        id: Repository key
        name: Display name
        values: The record set
        description: Free-form description
        tags: User-assigned tags
        origin: 'custom' for uploads, 'sample' for bundled data
        data_types: Field name to field type value, when already inferred
        fingerprint: Content fingerprint from ingestion
        upload_date: When the dataset was stored
    """
    id: str
    name: str
    values: List[Dict[str, Any]] = field(default_factory=list)
    description: str = ""
    tags: List[str] = field(default_factory=list)
    origin: str = "custom"
    data_types: Optional[Dict[str, str]] = None
    fingerprint: Optional[str] = None
    upload_date: Optional[datetime] = None

    @property
    def row_count(self) -> int:
        return len(self.values)

    @classmethod
    def from_ingest(
        cls,
        dataset_id: str,
        result: IngestResult,
        name: Optional[str] = None,
        **metadata
    ) -> "Dataset":
        """Dataset holding an ingest result's sample rows and fingerprint."""
        return cls(
            id=dataset_id,
            name=name or result.file_name,
            values=list(result.sample_rows),
            fingerprint=result.fingerprint,
            upload_date=metadata.pop('upload_date', None) or datetime.now(),
            **metadata
        )

    def to_dict(self, include_values: bool = True) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'tags': list(self.tags),
            'origin': self.origin,
            'data_types': dict(self.data_types) if self.data_types is not None else None,
            'fingerprint': self.fingerprint,
            'upload_date': self.upload_date,
            'row_count': self.row_count,
        }
        if include_values:
            result['values'] = self.values
        return convert_to_json_serializable(result)
