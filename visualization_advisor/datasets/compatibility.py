"""
Record-set validation and chart compatibility from field types.

These are coarse, gallery-level checks: which chart families can be offered
for a dataset at all. Ranked suggestions come from the recommendation engine.
"""

from typing import Any, Dict, List, Mapping, Sequence, Union

from visualization_advisor.profiler.name_heuristics import (
    is_link_name,
    is_relationship_name,
    is_text_name,
)
from visualization_advisor.profiler.profile_result import FieldType

FieldTypeMap = Mapping[str, Union[FieldType, str]]


def _type_value(field_type: Union[FieldType, str]) -> str:
    return field_type.value if isinstance(field_type, FieldType) else str(field_type)


def validate_record_set(records: Any) -> bool:
    """
    True when records is a non-empty list of dicts sharing one key set.

    Key order does not matter.
    """
    if not isinstance(records, (list, tuple)) or not records:
        return False
    if not all(isinstance(record, dict) for record in records):
        return False
    first_keys = sorted(records[0].keys())
    if not first_keys:
        return False
    return all(sorted(record.keys()) == first_keys for record in records)


def determine_dataset_type(field_types: FieldTypeMap) -> str:
    """'temporal' if any field is temporal, else 'numerical' if any is quantitative, else 'categorical'."""
    types = {_type_value(t) for t in field_types.values()}
    if FieldType.TEMPORAL.value in types:
        return 'temporal'
    if FieldType.QUANTITATIVE.value in types:
        return 'numerical'
    return 'categorical'


def determine_compatible_charts(field_types: FieldTypeMap) -> List[str]:
    """
    Chart types that can be drawn from fields of these types.

    Returns distinct mark or chart type names in first-added order.
    """
    type_values: Sequence[str] = [_type_value(t) for t in field_types.values()]
    types = set(type_values)
    names = list(field_types.keys())
    charts: List[str] = []

    if FieldType.QUANTITATIVE.value in types:
        charts += ['bar', 'line', 'point', 'area', 'boxplot', 'violin']
        if type_values.count(FieldType.QUANTITATIVE.value) > 1:
            charts += ['circle', 'square']

    if FieldType.TEMPORAL.value in types:
        charts += ['line', 'area', 'point', 'bar', 'trail']

    categorical = {FieldType.NOMINAL.value, FieldType.ORDINAL.value}
    if types & categorical:
        charts += ['bar', 'point', 'text', 'tick']
        if FieldType.QUANTITATIVE.value in types:
            charts += ['boxplot', 'violin']

    if any(is_relationship_name(name) for name in names):
        charts += ['treemap', 'sunburst']
        if any(is_link_name(name) for name in names):
            charts += ['force-directed', 'chord-diagram']

    if any(is_text_name(name) for name in names):
        charts += ['text', 'wordcloud']

    return list(dict.fromkeys(charts))


def is_chart_compatible(chart_type: str, field_types: FieldTypeMap) -> bool:
    return chart_type in determine_compatible_charts(field_types)


def field_type_values(field_types: Dict[str, FieldType]) -> Dict[str, str]:
    """Field types as plain strings, for storing on a Dataset."""
    return {name: _type_value(t) for name, t in field_types.items()}
