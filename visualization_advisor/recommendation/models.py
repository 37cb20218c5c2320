"""
Data structures for chart recommendations.

EncodingSpec describes one field-to-channel mapping; Recommendation bundles a
chart type with its confidence, a human-readable reason and the draft
encodings.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Union

from visualization_advisor.profiler.profile_result import FieldType

BinSetting = Union[bool, Dict[str, int]]


def encoding_type_name(field_type: Union[FieldType, str]) -> str:
    """Vega-Lite type name for a field type; hierarchical fields encode as nominal."""
    value = field_type.value if isinstance(field_type, FieldType) else str(field_type)
    if value == FieldType.HIERARCHICAL.value:
        return FieldType.NOMINAL.value
    return value


@dataclass
class EncodingSpec:
    """
    One channel encoding.

    Attributes:
        field: Field name; None for field-less aggregates such as count
        type: Field type used on the channel
        aggregate: Aggregate operation ('sum', 'count', ...)
        time_unit: Time unit ('month', 'yearmonth', ...)
        bin: True for automatic binning, or {'maxbins': N}
        scale: Scale properties
        sort: Sort order or sort field
        title: Display title
        format: d3 format string (tooltips, axes)
        stack: Stack mode ('zero', 'normalize', ...)
    """
    field: Optional[str] = None
    type: Union[FieldType, str] = FieldType.NOMINAL
    aggregate: Optional[str] = None
    time_unit: Optional[str] = None
    bin: Optional[BinSetting] = None
    scale: Optional[Dict[str, Any]] = None
    sort: Optional[Any] = None
    title: Optional[str] = None
    format: Optional[str] = None
    stack: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a Vega-Lite channel definition."""
        result: Dict[str, Any] = {}
        if self.field is not None:
            result["field"] = self.field
        result["type"] = encoding_type_name(self.type)
        if self.aggregate is not None:
            result["aggregate"] = self.aggregate
        if self.time_unit is not None:
            result["timeUnit"] = self.time_unit
        if self.bin is not None:
            result["bin"] = dict(self.bin) if isinstance(self.bin, dict) else self.bin
        if self.scale is not None:
            result["scale"] = dict(self.scale)
        if self.sort is not None:
            result["sort"] = self.sort
        if self.title is not None:
            result["title"] = self.title
        if self.format is not None:
            result["format"] = self.format
        if self.stack is not None:
            result["stack"] = self.stack
        return result


ChannelEncoding = Union[EncodingSpec, List[EncodingSpec]]


@dataclass
class Recommendation:
    """
    A ranked chart suggestion.

    Attributes:
        chart_type: Mark type ('point', 'bar', 'line', 'arc', ...)
        confidence: Score in [0, 1]
        reason: Why the chart fits the data
        suggested_encodings: Channel name to encoding (a list for tooltips)
    """
    chart_type: str
    confidence: float
    reason: str
    suggested_encodings: Dict[str, ChannelEncoding] = field(default_factory=dict)

    def encoding_dict(self) -> Dict[str, Any]:
        """Suggested encodings as Vega-Lite channel definitions."""
        result: Dict[str, Any] = {}
        for channel, encoding in self.suggested_encodings.items():
            if isinstance(encoding, list):
                result[channel] = [spec.to_dict() for spec in encoding]
            else:
                result[channel] = encoding.to_dict()
        return result

    def fields_used(self) -> List[str]:
        """Distinct fields referenced by non-tooltip channels, in channel order."""
        used: List[str] = []
        for channel, encoding in self.suggested_encodings.items():
            if channel == "tooltip":
                continue
            specs = encoding if isinstance(encoding, list) else [encoding]
            for spec in specs:
                if spec.field is not None and spec.field not in used:
                    used.append(spec.field)
        return used

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "chart_type": self.chart_type,
            "confidence": round(float(self.confidence), 4),
            "reason": self.reason,
            "suggested_encodings": self.encoding_dict(),
        }
