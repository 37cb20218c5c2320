"""Ingestion: chunk consumption, bounded sampling and content fingerprints."""

from visualization_advisor.ingestion.fingerprint import FingerprintSampler, compute_fingerprint
from visualization_advisor.ingestion.pipeline import IngestionPipeline
from visualization_advisor.ingestion.result import IngestResult
from visualization_advisor.ingestion.sampling import ReservoirSampler, SampleBuffer

__all__ = [
    'FingerprintSampler',
    'IngestResult',
    'IngestionPipeline',
    'ReservoirSampler',
    'SampleBuffer',
    'compute_fingerprint',
]
