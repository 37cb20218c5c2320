"""
Data profiler engine.

Profiles a record sample: per-field statistics, pairwise relationships and
dataset-level patterns. The profiler is a pure computation over an
immutable sample and holds no state between calls.
"""

import logging
import time
from typing import Dict, Any, Optional, Sequence, Union

from visualization_advisor.core import constants
from visualization_advisor.core.config import AdvisorConfig
from visualization_advisor.core.exceptions import ProfilerError
from visualization_advisor.profiler.pattern_detector import PatternDetector
from visualization_advisor.profiler.profile_result import DataProfile, FieldType
from visualization_advisor.profiler.statistics_calculator import StatisticsCalculator
from visualization_advisor.profiler.type_inferrer import TypeInferrer

logger = logging.getLogger(__name__)


class DataProfiler:
    """
    Statistical profiler for record samples.

    A sample with fewer than two rows, or without any quantitative field, is
    profiled as degenerate: field profiles are still built, but relationships
    and pattern flags are left empty and is_degenerate is set.
    """

    def __init__(self, config: Optional[AdvisorConfig] = None):
        """
        Initialize data profiler.

        Args:
            config: Thresholds to use (defaults when None)
        """
        self.config = config or AdvisorConfig()

        self.type_inferrer = TypeInferrer(
            ordinal_cardinality_ratio=self.config.ordinal_cardinality_ratio
        )
        self.stats_calculator = StatisticsCalculator(
            outlier_iqr_multiplier=self.config.outlier_iqr_multiplier,
            linear_correlation_threshold=self.config.linear_correlation_threshold,
        )
        self.pattern_detector = PatternDetector(
            trend_change_threshold=self.config.trend_change_threshold,
            skewness_threshold=self.config.skewness_threshold,
            multimodality_kurtosis_threshold=self.config.multimodality_kurtosis_threshold,
            high_variance_cv_threshold=self.config.high_variance_cv_threshold,
            sparse_density_threshold=self.config.sparse_density_threshold,
            dense_density_threshold=self.config.dense_density_threshold,
        )

    def profile(
        self,
        record_set: Sequence[Dict[str, Any]],
        field_types: Optional[Dict[str, Union[FieldType, str]]] = None,
    ) -> DataProfile:
        """
        Profile a record sample.

        Args:
            record_set: Record sample (not modified)
            field_types: Field types, as FieldType or their string values;
                inferred here when None

        Returns:
            DataProfile

        Raises:
            ProfilerError: If a field type is not a known FieldType value
        """
        start_time = time.time()

        if field_types is None:
            field_types = self.type_inferrer.infer_types(record_set)
        else:
            field_types = self.coerce_field_types(field_types)

        profile = DataProfile(row_count=len(record_set))

        for field_name, field_type in field_types.items():
            profile.field_profiles[field_name] = self.stats_calculator.calculate_field_profile(
                record_set, field_name, field_type
            )

        quantitative_fields = [
            name for name, ftype in field_types.items() if ftype == FieldType.QUANTITATIVE
        ]

        if len(record_set) < constants.MIN_ROWS_FOR_PROFILE or not quantitative_fields:
            profile.is_degenerate = True
            logger.debug(
                f"Degenerate profile: {len(record_set)} rows, "
                f"{len(quantitative_fields)} quantitative fields"
            )
            return profile

        profile.relationships = self.stats_calculator.calculate_relationships(
            record_set, quantitative_fields
        )
        profile.patterns = self.pattern_detector.detect(
            record_set, field_types, profile.field_profiles
        )

        elapsed = time.time() - start_time
        logger.debug(
            f"Profiled {len(record_set):,} rows x {len(field_types)} fields in {elapsed:.3f}s"
        )
        return profile

    @staticmethod
    def coerce_field_types(field_types: Dict[str, Union[FieldType, str]]) -> Dict[str, FieldType]:
        """Accept stored string values such as 'quantitative' alongside FieldType members."""
        coerced: Dict[str, FieldType] = {}
        for field_name, field_type in field_types.items():
            try:
                coerced[field_name] = FieldType(field_type)
            except ValueError as e:
                raise ProfilerError(
                    f"Unknown field type '{field_type}' for field '{field_name}'",
                    field=field_name,
                    original_exception=e
                )
        return coerced
