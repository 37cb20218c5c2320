"""Content fingerprints for ingested datasets."""

import hashlib
from typing import Any, Dict, List, Optional, Sequence

from visualization_advisor.core.constants import FINGERPRINT_LENGTH, FINGERPRINT_SAMPLE_SIZE
from visualization_advisor.ingestion.sampling import ReservoirSampler
from visualization_advisor.utils.json_utils import canonical_json


def canonicalize_rows(rows: Sequence[Dict[str, Any]]) -> List[str]:
    """Canonical JSON of each row, sorted so row order does not matter."""
    return sorted(canonical_json(row) for row in rows)


def compute_fingerprint(
    columns: Sequence[str],
    total_row_count: int,
    rows: Sequence[Dict[str, Any]],
    length: int = FINGERPRINT_LENGTH,
) -> str:
    """
    Compute a deterministic fingerprint for a dataset sub-sample.

    The digest covers the column names, the true row count and the sorted
    canonical rows, so it depends only on content, never on object identity
    or the order rows were sampled in.

    Returns:
        First `length` hex characters of the SHA-256 digest
    """
    payload = canonical_json({
        "columns": list(columns),
        "total_row_count": int(total_row_count),
        "rows": canonicalize_rows(rows),
    })
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:length]


class FingerprintSampler:
    """
    Independent reservoir over every row of a stream, used only for fingerprinting.

    The generator is seeded apart from the retained-sample reservoir so the
    two samples are not correlated.
    """

    def __init__(self, sample_size: int = FINGERPRINT_SAMPLE_SIZE, random_seed: Optional[int] = 42):
        seed = None if random_seed is None else random_seed + 1
        self._reservoir = ReservoirSampler(sample_size, random_seed=seed)

    def add_batch(self, rows: List[Dict[str, Any]]) -> None:
        self._reservoir.add_batch(rows)

    def fingerprint(self, columns: Sequence[str], total_row_count: int) -> str:
        return compute_fingerprint(columns, total_row_count, self._reservoir.get_sample())
