"""
Visualization Advisor - thin orchestration over the pipeline stages.

    raw file -> IngestionPipeline -> TypeInferrer -> DataProfiler
             -> RecommendationEngine -> EncodingSynthesizer -> specification

Every stage is also usable on its own; the advisor only wires them to one
shared AdvisorConfig and keeps no per-dataset state.

Usage:
    advisor = VisualizationAdvisor()
    analysis = advisor.analyze(raw_bytes, "csv", file_name="sales.csv")
    best = analysis.recommendations[0]
    spec = advisor.synthesize_recommendation(best, analysis.ingest.sample_rows)
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from visualization_advisor.core.config import AdvisorConfig
from visualization_advisor.datasets.compatibility import field_type_values
from visualization_advisor.datasets.models import Dataset
from visualization_advisor.datasets.repository import DatasetRepository
from visualization_advisor.ingestion.pipeline import IngestionPipeline
from visualization_advisor.ingestion.result import IngestResult
from visualization_advisor.loaders.base import Source
from visualization_advisor.profiler.engine import DataProfiler
from visualization_advisor.profiler.profile_result import DataProfile, FieldType
from visualization_advisor.recommendation.engine import RecommendationEngine
from visualization_advisor.recommendation.models import Recommendation
from visualization_advisor.synthesis.synthesizer import EncodingSynthesizer
from visualization_advisor.utils.json_utils import safe_json_dumps

logger = logging.getLogger(__name__)

Records = Sequence[Dict[str, Any]]


@dataclass
class AnalysisResult:
    """Everything derived from one file: ingest, field types, profile and recommendations."""
    ingest: IngestResult
    field_types: Dict[str, FieldType] = field(default_factory=dict)
    profile: Optional[DataProfile] = None
    recommendations: List[Recommendation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (without sample rows)."""
        return {
            'ingest': self.ingest.to_dict(),
            'field_types': field_type_values(self.field_types),
            'profile': self.profile.to_dict() if self.profile else None,
            'recommendations': [rec.to_dict() for rec in self.recommendations],
        }

    def to_json(self, **kwargs) -> str:
        """JSON text of to_dict(); keyword arguments go to json.dumps."""
        return safe_json_dumps(self.to_dict(), **kwargs)


class VisualizationAdvisor:
    """
    Façade over ingestion, profiling, recommendation and synthesis.

    Attributes:
        config: Shared thresholds for every stage
    """

    def __init__(self, config: Optional[AdvisorConfig] = None):
        self.config = config or AdvisorConfig()
        self.pipeline = IngestionPipeline(self.config)
        self.profiler = DataProfiler(self.config)
        self.recommender = RecommendationEngine(self.config)
        self.synthesizer = EncodingSynthesizer(self.config)

    def ingest(
        self,
        source: Source,
        file_format: Optional[str] = None,
        file_name: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
        **loader_kwargs
    ) -> IngestResult:
        return self.pipeline.ingest(source, file_format, file_name, cancel_event, **loader_kwargs)

    async def ingest_async(
        self,
        source: Source,
        file_format: Optional[str] = None,
        file_name: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
        **loader_kwargs
    ) -> IngestResult:
        return await self.pipeline.ingest_async(source, file_format, file_name, cancel_event, **loader_kwargs)

    def infer_types(self, record_set: Records) -> Dict[str, FieldType]:
        return self.profiler.type_inferrer.infer_types(record_set)

    def profile(self, record_set: Records, field_types: Optional[Dict[str, Union[FieldType, str]]] = None) -> DataProfile:
        return self.profiler.profile(record_set, field_types)

    def recommend(
        self,
        record_set: Records,
        field_types: Optional[Dict[str, Union[FieldType, str]]] = None,
        profile: Optional[DataProfile] = None,
    ) -> List[Recommendation]:
        """
        Ranked recommendations; types and profile are computed when not given.

        Field types may be FieldType members or their string values.

        Raises:
            ProfilerError: If a field type is not a known FieldType value
        """
        if field_types is None:
            field_types = self.infer_types(record_set)
        else:
            field_types = self.profiler.coerce_field_types(field_types)
        if profile is None:
            profile = self.profile(record_set, field_types)
        return self.recommender.recommend(record_set, field_types, profile)

    def synthesize(
        self,
        mark_type: str,
        encoding_map: Optional[Dict[str, Any]],
        record_set: Records,
        mark_options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return self.synthesizer.synthesize(mark_type, encoding_map, record_set, mark_options)

    def synthesize_recommendation(
        self,
        recommendation: Recommendation,
        record_set: Records,
        mark_options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return self.synthesizer.synthesize_recommendation(recommendation, record_set, mark_options)

    def analyze_records(self, ingest_result: IngestResult) -> AnalysisResult:
        """Type inference, profiling and recommendations over an ingest sample."""
        rows = ingest_result.sample_rows
        field_types = self.infer_types(rows)
        profile = self.profile(rows, field_types)
        recommendations = self.recommender.recommend(rows, field_types, profile)
        logger.info(
            f"Analyzed {ingest_result.file_name}: {len(field_types)} fields, "
            f"{len(recommendations)} recommendations"
        )
        return AnalysisResult(
            ingest=ingest_result,
            field_types=field_types,
            profile=profile,
            recommendations=recommendations,
        )

    def analyze(
        self,
        source: Source,
        file_format: Optional[str] = None,
        file_name: Optional[str] = None,
        **loader_kwargs
    ) -> AnalysisResult:
        """Ingest a file and run every analysis stage on its sample."""
        return self.analyze_records(self.ingest(source, file_format, file_name, **loader_kwargs))

    def analyze_dataset(self, repository: DatasetRepository, dataset_id: str) -> Optional[List[Recommendation]]:
        """
        Recommendations for a stored dataset, or None when the id is unknown.

        Field types stored on the dataset are reused; otherwise they are
        inferred and written back.
        """
        dataset = repository.get(dataset_id)
        if dataset is None:
            logger.warning(f"Dataset {dataset_id} not found")
            return None

        if dataset.data_types:
            field_types = self.profiler.coerce_field_types(dataset.data_types)
        else:
            field_types = self.infer_types(dataset.values)
            dataset.data_types = field_type_values(field_types)
            repository.put(dataset)

        return self.recommend(dataset.values, field_types)

    def store_ingest(
        self,
        repository: DatasetRepository,
        dataset_id: str,
        ingest_result: IngestResult,
        **metadata
    ) -> Dataset:
        """Save an ingest sample as a dataset with inferred field types."""
        dataset = Dataset.from_ingest(dataset_id, ingest_result, **metadata)
        dataset.data_types = field_type_values(self.infer_types(dataset.values))
        repository.put(dataset)
        return dataset
