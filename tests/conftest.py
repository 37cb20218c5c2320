"""Shared fixtures for the advisor test suite."""

import csv
import io
import json
from datetime import datetime, timedelta

import numpy as np
import pytest

from visualization_advisor.core.config import AdvisorConfig


def to_csv_bytes(rows, columns=None, delimiter=","):
    """Render records as delimited text bytes."""
    columns = columns or list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, delimiter=delimiter, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue().encode("utf-8")


def to_jsonl_bytes(rows):
    return "\n".join(json.dumps(row) for row in rows).encode("utf-8")


@pytest.fixture
def small_config():
    """Scaled-down ingestion limits so sampling switches over on small inputs."""
    return AdvisorConfig(
        chunk_size=100,
        max_rows_to_keep=200,
        max_chunk_collect=1_000,
        fingerprint_sample_size=50,
    )


@pytest.fixture
def scatter_records():
    return [{"x": 1, "y": 2}, {"x": 2, "y": 4}, {"x": 3, "y": 6}]


@pytest.fixture
def category_records():
    return [
        {"cat": "a", "val": 1},
        {"cat": "b", "val": 2},
        {"cat": "c", "val": 3},
        {"cat": "a", "val": 4},
        {"cat": "b", "val": 5},
    ]


@pytest.fixture
def sales_records():
    """Daily sales with a rising trend, a region category and a noisy cost column."""
    rng = np.random.default_rng(42)
    start = datetime(2024, 1, 1)
    regions = ["North", "South", "East", "West"]
    rows = []
    for day in range(120):
        rows.append({
            "date": start + timedelta(days=day),
            "region": regions[day % len(regions)],
            "revenue": float(100 + day * 5 + rng.normal(0, 5)),
            "cost": float(rng.uniform(10, 50)),
        })
    return rows


@pytest.fixture
def csv_bytes():
    """Factory: records -> delimited text bytes."""
    return to_csv_bytes


@pytest.fixture
def jsonl_bytes():
    """Factory: records -> JSON Lines bytes."""
    return to_jsonl_bytes
