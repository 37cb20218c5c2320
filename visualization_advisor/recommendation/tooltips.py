"""Tooltip synthesis for recommendations."""

from typing import Dict, List

from visualization_advisor.core.constants import (
    MAX_TOOLTIP_FIELDS,
    QUANTITATIVE_TOOLTIP_FORMAT,
    TEMPORAL_TOOLTIP_FORMAT,
)
from visualization_advisor.profiler.name_heuristics import humanize_field_name
from visualization_advisor.profiler.profile_result import FieldType
from visualization_advisor.recommendation.models import EncodingSpec, Recommendation


def tooltip_spec(field_name: str, field_type: FieldType) -> EncodingSpec:
    """Tooltip entry with a display title and a type-appropriate format."""
    spec = EncodingSpec(field=field_name, type=field_type, title=humanize_field_name(field_name))
    if field_type == FieldType.TEMPORAL:
        spec.format = TEMPORAL_TOOLTIP_FORMAT
    elif field_type == FieldType.QUANTITATIVE:
        spec.format = QUANTITATIVE_TOOLTIP_FORMAT
    return spec


def build_tooltip(
    recommendation: Recommendation,
    field_types: Dict[str, FieldType],
    max_fields: int = MAX_TOOLTIP_FIELDS,
) -> List[EncodingSpec]:
    """
    Tooltip from the fields a recommendation already uses.

    Field-less channels (count placeholders) are skipped; at most max_fields
    distinct fields are listed, in channel order.
    """
    tooltip: List[EncodingSpec] = []
    for field_name in recommendation.fields_used()[:max_fields]:
        field_type = field_types.get(field_name, FieldType.NOMINAL)
        tooltip.append(tooltip_spec(field_name, field_type))
    return tooltip


def ensure_tooltip(
    recommendation: Recommendation,
    field_types: Dict[str, FieldType],
    max_fields: int = MAX_TOOLTIP_FIELDS,
) -> Recommendation:
    """Add a synthesized tooltip channel when the recommendation has none."""
    if "tooltip" not in recommendation.suggested_encodings:
        recommendation.suggested_encodings["tooltip"] = build_tooltip(
            recommendation, field_types, max_fields
        )
    return recommendation
