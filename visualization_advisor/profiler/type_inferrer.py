"""
Type Inferrer - semantic field type detection.

Classifies every field of a record sample into a FieldType (quantitative,
temporal, nominal, ordinal, hierarchical) that downstream profiling and
encoding use to pick channels.

Architecture:
    TypeInferrer applies a priority list per field, evaluated against the
    set of non-null sampled values:
    1. All values native numbers → quantitative
    2. Field name suggests a relationship (parent/source/target) → hierarchical
    3. All values datetimes, or strings that parse as dates → temporal
    4. Remaining fields: ordinal when unique count < ratio x sample size,
       else nominal
    5. Boolean fields → nominal

Design Decisions:
    - Field names come from the first record only; all rows are scanned
    - Booleans are never numbers even though bool subclasses int
    - A field with no non-null values defaults to nominal
    - The ordinal ratio is a heuristic and is configurable

Usage:
    inferrer = TypeInferrer()
    field_types = inferrer.infer_types(sample_rows)   # {'price': FieldType.QUANTITATIVE, ...}
"""

import logging
from typing import Dict, List, Any, Sequence

from visualization_advisor.core.constants import ORDINAL_CARDINALITY_RATIO
from visualization_advisor.core.values import ValueKind, value_kind, parse_date_string
from visualization_advisor.profiler.name_heuristics import is_relationship_name
from visualization_advisor.profiler.profile_result import FieldType

logger = logging.getLogger(__name__)


class TypeInferrer:
    """
    Deterministic field type inference over a record sample.

    Attributes:
        ordinal_cardinality_ratio: Unique-value ratio below which string fields
            are treated as ordinal categories.

    Example:
        >>> inferrer = TypeInferrer()
        >>> inferrer.infer_types([{'x': 1, 'when': '2024-01-15'}])
        {'x': <FieldType.QUANTITATIVE: 'quantitative'>, 'when': <FieldType.TEMPORAL: 'temporal'>}
    """

    def __init__(self, ordinal_cardinality_ratio: float = ORDINAL_CARDINALITY_RATIO):
        self.ordinal_cardinality_ratio = ordinal_cardinality_ratio

    def detect_type(self, value: Any) -> ValueKind:
        """Tag a single native value."""
        return value_kind(value)

    def infer_types(self, sample_rows: Sequence[Dict[str, Any]]) -> Dict[str, FieldType]:
        """
        Infer a FieldType for every field of the sample.

        Args:
            sample_rows: Record sample; field names are taken from the first record

        Returns:
            Mapping of field name to FieldType, in first-record column order
        """
        if not sample_rows:
            return {}

        field_names = list(sample_rows[0].keys())
        sample_size = len(sample_rows)
        field_types: Dict[str, FieldType] = {}

        for field_name in field_names:
            values = [row.get(field_name) for row in sample_rows]
            field_types[field_name] = self.infer_field_type(field_name, values, sample_size)

        logger.debug(
            "Inferred field types: "
            + ", ".join(f"{name}={ftype.value}" for name, ftype in field_types.items())
        )
        return field_types

    def infer_field_type(self, field_name: str, values: List[Any], sample_size: int) -> FieldType:
        """
        Apply the priority rules to one field.

        Args:
            field_name: Name of the field
            values: All sampled values for the field, nulls included
            sample_size: Number of rows in the sample

        Returns:
            FieldType for the field
        """
        present = [(value_kind(v), v) for v in values]
        present = [(kind, v) for kind, v in present if kind != ValueKind.NULL]

        if not present:
            return FieldType.NOMINAL

        kinds = {kind for kind, _ in present}

        if kinds == {ValueKind.NUMBER}:
            return FieldType.QUANTITATIVE

        if is_relationship_name(field_name):
            return FieldType.HIERARCHICAL

        if self._all_temporal(present):
            return FieldType.TEMPORAL

        if kinds == {ValueKind.BOOL}:
            return FieldType.NOMINAL

        unique_count = len({self._hashable(v) for _, v in present})
        if unique_count < self.ordinal_cardinality_ratio * sample_size:
            return FieldType.ORDINAL
        return FieldType.NOMINAL

    @staticmethod
    def _all_temporal(present: List[tuple]) -> bool:
        for kind, value in present:
            if kind == ValueKind.DATETIME:
                continue
            if kind == ValueKind.TEXT and isinstance(value, str) and parse_date_string(value) is not None:
                continue
            return False
        return True

    @staticmethod
    def _hashable(value: Any) -> Any:
        try:
            hash(value)
            return value
        except TypeError:
            return repr(value)
