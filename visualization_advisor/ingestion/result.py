"""Result of ingesting one file."""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from visualization_advisor.utils.json_utils import convert_to_json_serializable


@dataclass
class IngestResult:
    """
    Bounded sample, true row count and fingerprint of an ingested file.

    Attributes:
        sample_rows: Retained records (at most max_rows_to_keep)
        total_row_count: Number of valid records in the file
        fingerprint: Deterministic content digest
        is_sampled: True when sample_rows holds fewer rows than the file
        columns: Column names from the first chunk that reported them
        skipped_row_count: Malformed rows skipped while parsing
        file_name: Display name of the source
        file_format: Resolved format ('csv', 'json', 'jsonl')
        record_path: Property holding the records when a JSON document is an
            object rather than an array
        elapsed_seconds: Wall-clock ingest time
    """
    sample_rows: List[Dict[str, Any]]
    total_row_count: int
    fingerprint: str
    is_sampled: bool
    columns: List[str] = field(default_factory=list)
    skipped_row_count: int = 0
    file_name: Optional[str] = None
    file_format: Optional[str] = None
    record_path: Optional[str] = None
    elapsed_seconds: float = 0.0

    def to_dict(self, include_rows: bool = False) -> Dict[str, Any]:
        """
        Convert to dictionary representation.

        Args:
            include_rows: Include the retained rows themselves
        """
        result = {
            "file_name": self.file_name,
            "file_format": self.file_format,
            "record_path": self.record_path,
            "columns": list(self.columns),
            "total_row_count": self.total_row_count,
            "sample_row_count": len(self.sample_rows),
            "is_sampled": self.is_sampled,
            "skipped_row_count": self.skipped_row_count,
            "fingerprint": self.fingerprint,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }
        if include_rows:
            result["sample_rows"] = convert_to_json_serializable(self.sample_rows)
        return result
