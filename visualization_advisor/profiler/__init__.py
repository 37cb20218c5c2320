"""
Statistical profiling of record samples.

Key Components:
- TypeInferrer: field type per column
- StatisticsCalculator: distribution statistics and pairwise relationships
- PatternDetector: dataset-level pattern flags
- DataProfiler: runs all three over one sample
"""

from visualization_advisor.profiler.engine import DataProfiler
from visualization_advisor.profiler.pattern_detector import PatternDetector
from visualization_advisor.profiler.profile_result import (
    DataProfile,
    DatasetPatterns,
    Density,
    DistributionStats,
    FieldProfile,
    FieldType,
    Relationship,
    RelationshipType,
)
from visualization_advisor.profiler.statistics_calculator import StatisticsCalculator
from visualization_advisor.profiler.type_inferrer import TypeInferrer

__all__ = [
    'DataProfile',
    'DataProfiler',
    'DatasetPatterns',
    'Density',
    'DistributionStats',
    'FieldProfile',
    'FieldType',
    'PatternDetector',
    'Relationship',
    'RelationshipType',
    'StatisticsCalculator',
    'TypeInferrer',
]
