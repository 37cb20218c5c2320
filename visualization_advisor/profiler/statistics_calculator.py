"""
Statistics Calculator - per-field and pairwise statistics for profiling.

Architecture:
    StatisticsCalculator is responsible for:
    1. Distribution statistics for quantitative fields (moments, quartiles, Tukey fences)
    2. Field profiles (cardinality, nulls, identifier detection, label length)
    3. Pearson relationships between every pair of quantitative fields

Design Decisions:
    - Null and NaN values are excluded, never coerced to 0
    - Variance is the population variance (ddof=0)
    - Skewness is scipy's biased estimator, kurtosis is excess (normal = 0)
    - Quartiles use numpy's linear interpolation
    - Correlation uses pairwise-complete rows; zero variance gives r = 0

Usage:
    calculator = StatisticsCalculator()
    stats = calculator.calculate_distribution([1.0, 2.0, 3.0, 100.0])
    relationships = calculator.calculate_relationships(records, ['price', 'qty'])
"""

import logging
import math
import warnings
from typing import Dict, List, Any, Optional, Sequence, Tuple

import numpy as np
from scipy import stats as scipy_stats

from visualization_advisor.core import constants
from visualization_advisor.core.values import is_null, is_number
from visualization_advisor.profiler.name_heuristics import is_identifier_name
from visualization_advisor.profiler.profile_result import (
    DistributionStats,
    FieldProfile,
    FieldType,
    Relationship,
    RelationshipType,
    pair_key,
)

logger = logging.getLogger(__name__)


def numeric_values(record_set: Sequence[Dict[str, Any]], field_name: str) -> List[float]:
    """Non-null numeric values of a field, in row order."""
    return [float(row.get(field_name)) for row in record_set if is_number(row.get(field_name))]


class StatisticsCalculator:
    """
    Statistical calculations over a record sample.

    Attributes:
        outlier_iqr_multiplier: Tukey fence multiplier (k in Q1 - k*IQR)
        linear_correlation_threshold: |r| above which a relationship is linear

    Example:
        >>> calculator = StatisticsCalculator()
        >>> stats = calculator.calculate_distribution([1, 2, 3, 4, 100])
        >>> stats.outlier_count
        1
    """

    def __init__(
        self,
        outlier_iqr_multiplier: float = constants.OUTLIER_IQR_MULTIPLIER,
        linear_correlation_threshold: float = constants.LINEAR_CORRELATION_THRESHOLD,
    ):
        self.outlier_iqr_multiplier = outlier_iqr_multiplier
        self.linear_correlation_threshold = linear_correlation_threshold

    def calculate_distribution(self, values: Sequence[float]) -> Optional[DistributionStats]:
        """
        Calculate distribution statistics for numeric values.

        Args:
            values: Numeric values; NaN entries are dropped

        Returns:
            DistributionStats, or None when no finite value remains
        """
        array = np.asarray(values, dtype=np.float64)
        array = array[np.isfinite(array)]
        if array.size == 0:
            return None

        mean = float(np.mean(array))
        variance = float(np.var(array))
        std_dev = math.sqrt(variance)

        if array.size > 1 and std_dev > 0:
            # scipy warns on nearly-constant input; the values are still usable
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", RuntimeWarning)
                skewness = float(scipy_stats.skew(array, bias=True))
                kurtosis = float(scipy_stats.kurtosis(array, fisher=True, bias=True))
            if not math.isfinite(skewness):
                skewness = 0.0
            if not math.isfinite(kurtosis):
                kurtosis = 0.0
        else:
            skewness = 0.0
            kurtosis = 0.0

        q1, median, q3 = (float(q) for q in np.percentile(array, [25, 50, 75]))
        iqr = q3 - q1
        lower_fence = q1 - self.outlier_iqr_multiplier * iqr
        upper_fence = q3 + self.outlier_iqr_multiplier * iqr
        outlier_count = int(np.sum((array < lower_fence) | (array > upper_fence)))

        min_value = float(np.min(array))
        max_value = float(np.max(array))

        return DistributionStats(
            count=int(array.size),
            mean=mean,
            variance=variance,
            std_dev=std_dev,
            skewness=skewness,
            kurtosis=kurtosis,
            q1=q1,
            median=median,
            q3=q3,
            iqr=iqr,
            min=min_value,
            max=max_value,
            range=max_value - min_value,
            outlier_count=outlier_count,
            lower_fence=lower_fence,
            upper_fence=upper_fence,
        )

    def calculate_field_profile(
        self,
        record_set: Sequence[Dict[str, Any]],
        field_name: str,
        field_type: FieldType,
    ) -> FieldProfile:
        """
        Build the profile of a single field.

        Args:
            record_set: Record sample
            field_name: Field to profile
            field_type: Inferred type of the field

        Returns:
            FieldProfile; distribution is set for quantitative fields only
        """
        sample_size = len(record_set)
        values = [row.get(field_name) for row in record_set]
        present = [v for v in values if not is_null(v)]

        unique_values = {_hashable(v) for v in present}
        unique_count = len(unique_values)

        profile = FieldProfile(
            field=field_name,
            field_type=field_type,
            unique_count=unique_count,
            unique_ratio=unique_count / sample_size if sample_size else 0.0,
            null_count=sample_size - len(present),
        )

        if field_type == FieldType.QUANTITATIVE:
            numbers = numeric_values(record_set, field_name)
            profile.distribution = self.calculate_distribution(numbers)
            profile.is_identifier = self.is_identifier_like(field_name, present)
        elif field_type.is_categorical:
            profile.max_label_length = max((len(str(v)) for v in present), default=0)

        return profile

    @staticmethod
    def is_identifier_like(field_name: str, values: Sequence[Any]) -> bool:
        """
        Check whether numeric values look like row identifiers.

        Every value must be unique and integral. On top of that either the
        name must look like an identifier, or the values must run upward in
        steps of one in row order over at least MIN_IDENTIFIER_RUN_LENGTH rows.

        Args:
            field_name: Field name
            values: Non-null values of the field, in row order

        Returns:
            True when the field should not be used as a measure
        """
        if len(values) < 2 or not all(is_number(v) for v in values):
            return False
        if any(float(v) != math.floor(float(v)) for v in values):
            return False
        if len({float(v) for v in values}) != len(values):
            return False

        if is_identifier_name(field_name):
            return True

        if len(values) < constants.MIN_IDENTIFIER_RUN_LENGTH:
            return False
        return all(float(b) - float(a) == 1.0 for a, b in zip(values, values[1:]))

    def calculate_relationships(
        self,
        record_set: Sequence[Dict[str, Any]],
        quantitative_fields: Sequence[str],
    ) -> Dict[Tuple[str, str], Relationship]:
        """
        Pearson relationships between every pair of quantitative fields.

        Args:
            record_set: Record sample
            quantitative_fields: Fields to correlate

        Returns:
            Dictionary keyed by sorted field pair
        """
        relationships: Dict[Tuple[str, str], Relationship] = {}

        for i, field_a in enumerate(quantitative_fields):
            for field_b in quantitative_fields[i + 1:]:
                xs, ys = [], []
                for row in record_set:
                    a, b = row.get(field_a), row.get(field_b)
                    if is_number(a) and is_number(b):
                        xs.append(float(a))
                        ys.append(float(b))

                coefficient = self.pearson(xs, ys)
                strength = abs(coefficient)
                rel_type = (
                    RelationshipType.LINEAR
                    if strength > self.linear_correlation_threshold
                    else RelationshipType.NONLINEAR
                )
                key = pair_key(field_a, field_b)
                relationships[key] = Relationship(
                    fields=key,
                    type=rel_type,
                    strength=strength,
                    coefficient=coefficient,
                )
                logger.debug(f"Relationship {key[0]} ~ {key[1]}: r={coefficient:.3f} ({rel_type.value})")

        return relationships

    @staticmethod
    def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
        """
        Pearson correlation coefficient.

        Returns 0.0 for fewer than two points or when either side has zero variance.
        """
        if len(xs) < 2 or len(xs) != len(ys):
            return 0.0

        x = np.asarray(xs, dtype=np.float64)
        y = np.asarray(ys, dtype=np.float64)
        mask = np.isfinite(x) & np.isfinite(y)
        x, y = x[mask], y[mask]
        if x.size < 2:
            return 0.0

        dx = x - x.mean()
        dy = y - y.mean()
        denominator = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
        if denominator == 0.0:
            return 0.0

        r = float(np.sum(dx * dy)) / denominator
        return max(-1.0, min(1.0, r))


def _hashable(value: Any) -> Any:
    try:
        hash(value)
        return value
    except TypeError:
        return repr(value)
