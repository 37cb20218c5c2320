"""
Visualization Advisor

Profiles uploaded tabular data and recommends chart specifications.

Key Components:
- IngestionPipeline: chunked CSV/JSON/JSON Lines ingestion with bounded samples
- DataProfiler: field types, distribution statistics, relationships, patterns
- RecommendationEngine: ranked chart recommendations with draft encodings
- EncodingSynthesizer: renderer-ready chart specifications
- VisualizationAdvisor: façade wiring the stages together
"""

from visualization_advisor.advisor import AnalysisResult, VisualizationAdvisor
from visualization_advisor.core.config import AdvisorConfig
from visualization_advisor.ingestion.pipeline import IngestionPipeline
from visualization_advisor.ingestion.result import IngestResult
from visualization_advisor.profiler.engine import DataProfiler
from visualization_advisor.profiler.profile_result import DataProfile, FieldType
from visualization_advisor.recommendation.engine import RecommendationEngine
from visualization_advisor.recommendation.models import EncodingSpec, Recommendation
from visualization_advisor.synthesis.synthesizer import EncodingSynthesizer

__version__ = "0.1.0"

__all__ = [
    'AdvisorConfig',
    'AnalysisResult',
    'DataProfile',
    'DataProfiler',
    'EncodingSpec',
    'EncodingSynthesizer',
    'FieldType',
    'IngestResult',
    'IngestionPipeline',
    'Recommendation',
    'RecommendationEngine',
    'VisualizationAdvisor',
]
