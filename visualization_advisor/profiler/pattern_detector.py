"""
Pattern Detector - dataset-level pattern flags.

Derives DatasetPatterns from a record sample, its field types and the field
profiles built by StatisticsCalculator.

Design Decisions:
    - Trend is a cheap drift proxy: rows sorted by time, mean of the first
      quarter compared with mean of the last quarter. It is not a statistical
      trend test.
    - Cyclicality counts direction changes in the time-ordered series.
    - Gaps are null cells anywhere in the sample, or a temporal interval larger
      than GAP_INTERVAL_MULTIPLIER times the median interval.
    - Multi-modality is approximated by a flat, symmetric shape (low Pearson
      kurtosis with small skew).
    - Identifier-like fields are ignored for value-driven flags.
"""

import logging
from datetime import datetime
from typing import Dict, List, Any, Sequence, Tuple

import numpy as np

from visualization_advisor.core import constants
from visualization_advisor.core.values import as_datetime, is_number
from visualization_advisor.profiler.profile_result import (
    DatasetPatterns,
    Density,
    FieldProfile,
    FieldType,
)

logger = logging.getLogger(__name__)


class PatternDetector:
    """
    Detect trend, cyclicality, gaps, variance, shape and density patterns.

    Example:
        >>> detector = PatternDetector()
        >>> patterns = detector.detect(records, field_types, field_profiles)
        >>> patterns.has_trend
        True
    """

    def __init__(
        self,
        trend_change_threshold: float = constants.TREND_CHANGE_THRESHOLD,
        skewness_threshold: float = constants.SKEWNESS_THRESHOLD,
        multimodality_kurtosis_threshold: float = constants.MULTIMODALITY_KURTOSIS_THRESHOLD,
        high_variance_cv_threshold: float = constants.HIGH_VARIANCE_CV_THRESHOLD,
        sparse_density_threshold: float = constants.SPARSE_DENSITY_THRESHOLD,
        dense_density_threshold: float = constants.DENSE_DENSITY_THRESHOLD,
    ):
        self.trend_change_threshold = trend_change_threshold
        self.skewness_threshold = skewness_threshold
        self.multimodality_kurtosis_threshold = multimodality_kurtosis_threshold
        self.high_variance_cv_threshold = high_variance_cv_threshold
        self.sparse_density_threshold = sparse_density_threshold
        self.dense_density_threshold = dense_density_threshold

    def detect(
        self,
        record_set: Sequence[Dict[str, Any]],
        field_types: Dict[str, FieldType],
        field_profiles: Dict[str, FieldProfile],
    ) -> DatasetPatterns:
        """
        Compute all dataset pattern flags.

        Args:
            record_set: Record sample
            field_types: Inferred field types
            field_profiles: Profiles keyed by field name

        Returns:
            DatasetPatterns
        """
        patterns = DatasetPatterns()

        measures = [
            profile for profile in field_profiles.values()
            if profile.field_type == FieldType.QUANTITATIVE
            and profile.distribution is not None
            and not profile.is_identifier
        ]
        temporal_fields = [name for name, ftype in field_types.items() if ftype == FieldType.TEMPORAL]

        patterns.has_outliers = any(p.has_outliers for p in measures)
        patterns.has_high_variance = any(self._is_high_variance(p) for p in measures)
        patterns.has_multi_modality = any(self._is_multi_modal(p) for p in measures)
        patterns.density = self.classify_density(field_profiles.values())

        has_nulls = any(p.null_count > 0 for p in field_profiles.values())
        patterns.has_gaps = has_nulls or any(
            self.has_temporal_gaps(record_set, name) for name in temporal_fields
        )

        for temporal_field in temporal_fields:
            for measure in measures:
                series = self.time_ordered_series(record_set, temporal_field, measure.field)
                if self.has_trend(series):
                    patterns.trend_pairs.append((temporal_field, measure.field))
                if self.has_cyclicality(series):
                    patterns.has_cyclicality = True
        patterns.has_trend = bool(patterns.trend_pairs)

        logger.debug(
            f"Patterns: outliers={patterns.has_outliers}, gaps={patterns.has_gaps}, "
            f"trend={patterns.has_trend}, cyclic={patterns.has_cyclicality}, "
            f"density={patterns.density.value}"
        )
        return patterns

    def classify_density(self, field_profiles) -> Density:
        """Bucket the mean unique ratio over all fields."""
        ratios = [p.unique_ratio for p in field_profiles]
        if not ratios:
            return Density.MEDIUM
        mean_ratio = sum(ratios) / len(ratios)
        if mean_ratio < self.sparse_density_threshold:
            return Density.SPARSE
        if mean_ratio > self.dense_density_threshold:
            return Density.DENSE
        return Density.MEDIUM

    @staticmethod
    def time_ordered_series(
        record_set: Sequence[Dict[str, Any]],
        temporal_field: str,
        value_field: str,
    ) -> List[float]:
        """Values of value_field for rows where both fields are present, sorted by time."""
        pairs: List[Tuple[datetime, float]] = []
        for row in record_set:
            when = as_datetime(row.get(temporal_field))
            value = row.get(value_field)
            if when is None or not is_number(value):
                continue
            pairs.append((when, float(value)))
        pairs.sort(key=lambda pair: pair[0])
        return [value for _, value in pairs]

    def has_trend(self, series: Sequence[float]) -> bool:
        """
        Compare the mean of the first and last quarter of a time-ordered series.

        A relative change above trend_change_threshold flags a trend. When the
        first-quarter mean is zero any non-zero last-quarter mean counts.
        """
        if len(series) < 2:
            return False

        quarter = max(1, len(series) // 4)
        first_mean = float(np.mean(series[:quarter]))
        last_mean = float(np.mean(series[-quarter:]))

        if first_mean == 0:
            return last_mean != 0
        return abs(last_mean - first_mean) / abs(first_mean) > self.trend_change_threshold

    @staticmethod
    def has_cyclicality(series: Sequence[float]) -> bool:
        """Direction changes of successive differences exceed a quarter of the series length."""
        if len(series) < constants.MIN_POINTS_FOR_SHAPE:
            return False

        diffs = np.diff(np.asarray(series, dtype=np.float64))
        signs = np.sign(diffs)
        signs = signs[signs != 0]
        if signs.size < 2:
            return False

        sign_changes = int(np.sum(signs[1:] != signs[:-1]))
        return sign_changes > len(series) / 4

    @staticmethod
    def has_temporal_gaps(record_set: Sequence[Dict[str, Any]], temporal_field: str) -> bool:
        """An interval larger than GAP_INTERVAL_MULTIPLIER x the median interval."""
        times = sorted(
            when for when in (as_datetime(row.get(temporal_field)) for row in record_set)
            if when is not None
        )
        if len(times) < 3:
            return False

        intervals = np.array(
            [(b - a).total_seconds() for a, b in zip(times, times[1:])],
            dtype=np.float64,
        )
        median_interval = float(np.median(intervals))
        if median_interval <= 0:
            return False
        return bool(np.any(intervals > median_interval * constants.GAP_INTERVAL_MULTIPLIER))

    def _is_high_variance(self, profile: FieldProfile) -> bool:
        cv = profile.distribution.coefficient_of_variation
        return cv is not None and cv > self.high_variance_cv_threshold

    def _is_multi_modal(self, profile: FieldProfile) -> bool:
        dist = profile.distribution
        if dist.count < constants.MIN_POINTS_FOR_SHAPE or dist.std_dev == 0:
            return False
        pearson_kurtosis = dist.kurtosis + 3.0
        return (
            pearson_kurtosis < self.multimodality_kurtosis_threshold
            and abs(dist.skewness) < self.skewness_threshold
        )
