"""
Data structures for storing profiling results.

Contains classes for holding field classification, distribution statistics,
pairwise relationships and dataset-level pattern flags.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any, Optional, Tuple


class FieldType(str, Enum):
    """Semantic type of a field, as used by encoding channels."""
    QUANTITATIVE = "quantitative"
    TEMPORAL = "temporal"
    NOMINAL = "nominal"
    ORDINAL = "ordinal"
    HIERARCHICAL = "hierarchical"

    @property
    def is_categorical(self) -> bool:
        """Nominal and ordinal fields are the category pool for recommendations."""
        return self in (FieldType.NOMINAL, FieldType.ORDINAL)


class Density(str, Enum):
    """Bucketed mean unique ratio of a dataset."""
    SPARSE = "sparse"
    MEDIUM = "medium"
    DENSE = "dense"


class RelationshipType(str, Enum):
    LINEAR = "linear"
    NONLINEAR = "nonlinear"


def pair_key(field_a: str, field_b: str) -> Tuple[str, str]:
    """Key for an unordered field pair."""
    return (field_a, field_b) if field_a <= field_b else (field_b, field_a)


@dataclass
class DistributionStats:
    """
    Distribution statistics for a quantitative field.

    Attributes:
        count: Number of non-null values used
        mean: Arithmetic mean
        variance: Population variance
        std_dev: Population standard deviation
        skewness: Sample skewness (biased estimator)
        kurtosis: Excess kurtosis (normal = 0)
        q1: First quartile
        median: Second quartile
        q3: Third quartile
        iqr: Interquartile range (q3 - q1)
        min: Minimum value
        max: Maximum value
        range: max - min
        outlier_count: Values outside the Tukey fence
        lower_fence: Q1 - k*IQR
        upper_fence: Q3 + k*IQR
    """
    count: int = 0
    mean: float = 0.0
    variance: float = 0.0
    std_dev: float = 0.0
    skewness: float = 0.0
    kurtosis: float = 0.0
    q1: float = 0.0
    median: float = 0.0
    q3: float = 0.0
    iqr: float = 0.0
    min: float = 0.0
    max: float = 0.0
    range: float = 0.0
    outlier_count: int = 0
    lower_fence: float = 0.0
    upper_fence: float = 0.0

    @property
    def coefficient_of_variation(self) -> Optional[float]:
        if self.mean == 0:
            return None
        return self.std_dev / abs(self.mean)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "count": int(self.count),
            "mean": round(float(self.mean), 6),
            "variance": round(float(self.variance), 6),
            "std_dev": round(float(self.std_dev), 6),
            "skewness": round(float(self.skewness), 6),
            "kurtosis": round(float(self.kurtosis), 6),
            "q1": round(float(self.q1), 6),
            "median": round(float(self.median), 6),
            "q3": round(float(self.q3), 6),
            "iqr": round(float(self.iqr), 6),
            "min": float(self.min),
            "max": float(self.max),
            "range": float(self.range),
            "outlier_count": int(self.outlier_count),
        }


@dataclass
class FieldProfile:
    """
    Profile of one field in the sample.

    Attributes:
        field: Field name
        field_type: Inferred FieldType
        unique_count: Distinct non-null values
        unique_ratio: unique_count / sample size
        null_count: Null or missing cells
        is_identifier: Numeric field that looks like a row identifier
        max_label_length: Longest string value (categorical fields)
        distribution: Distribution statistics (quantitative fields only)
    """
    field: str
    field_type: FieldType
    unique_count: int = 0
    unique_ratio: float = 0.0
    null_count: int = 0
    is_identifier: bool = False
    max_label_length: int = 0
    distribution: Optional[DistributionStats] = None

    @property
    def has_outliers(self) -> bool:
        return self.distribution is not None and self.distribution.outlier_count > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "field": self.field,
            "field_type": self.field_type.value,
            "unique_count": int(self.unique_count),
            "unique_ratio": round(float(self.unique_ratio), 4),
            "null_count": int(self.null_count),
            "is_identifier": bool(self.is_identifier),
        }
        if self.max_label_length:
            result["max_label_length"] = int(self.max_label_length)
        if self.distribution is not None:
            result["distribution"] = self.distribution.to_dict()
        return result


@dataclass
class Relationship:
    """
    Pearson relationship between two quantitative fields.

    Attributes:
        fields: Sorted field pair
        type: LINEAR when strength exceeds the linear threshold
        strength: |r| in [0, 1]
        coefficient: Signed Pearson r
    """
    fields: Tuple[str, str]
    type: RelationshipType
    strength: float
    coefficient: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "fields": list(self.fields),
            "type": self.type.value,
            "strength": round(float(self.strength), 4),
            "coefficient": round(float(self.coefficient), 4),
        }


@dataclass
class DatasetPatterns:
    """
    Dataset-level pattern flags derived from a sample and its field types.

    Attributes:
        has_outliers: Some quantitative field has Tukey outliers
        has_gaps: Null cells, or a temporal field with irregular spacing
        has_trend: Some temporal/quantitative pair drifts by more than the threshold
        has_high_variance: Some quantitative field has a high coefficient of variation
        has_multi_modality: Some quantitative field is flat and symmetric
        has_cyclicality: Some time-ordered quantitative series oscillates
        density: Bucketed mean unique ratio
        trend_pairs: (temporal field, quantitative field) pairs with a trend
    """
    has_outliers: bool = False
    has_gaps: bool = False
    has_trend: bool = False
    has_high_variance: bool = False
    has_multi_modality: bool = False
    has_cyclicality: bool = False
    density: Density = Density.MEDIUM
    trend_pairs: List[Tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "has_outliers": self.has_outliers,
            "has_gaps": self.has_gaps,
            "has_trend": self.has_trend,
            "has_high_variance": self.has_high_variance,
            "has_multi_modality": self.has_multi_modality,
            "has_cyclicality": self.has_cyclicality,
            "density": self.density.value,
            "trend_pairs": [list(pair) for pair in self.trend_pairs],
        }


@dataclass
class DataProfile:
    """
    Complete profile of a RecordSet sample.

    A degenerate profile (fewer than two rows or no quantitative field) is a
    normal result, not an error; downstream recommendation returns nothing.
    """
    field_profiles: Dict[str, FieldProfile] = field(default_factory=dict)
    patterns: DatasetPatterns = field(default_factory=DatasetPatterns)
    relationships: Dict[Tuple[str, str], Relationship] = field(default_factory=dict)
    row_count: int = 0
    is_degenerate: bool = False

    def get_relationship(self, field_a: str, field_b: str) -> Optional[Relationship]:
        return self.relationships.get(pair_key(field_a, field_b))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "row_count": int(self.row_count),
            "is_degenerate": self.is_degenerate,
            "fields": {name: fp.to_dict() for name, fp in self.field_profiles.items()},
            "patterns": self.patterns.to_dict(),
            "relationships": [rel.to_dict() for rel in self.relationships.values()],
        }
