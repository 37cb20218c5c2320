"""
Encoding Synthesizer - turns a mark type and channel map into a chart specification.

The output is a complete Vega-Lite style dictionary with the records inlined
as JSON-safe values. Layout depends on the mark family:

    FOLD     parallel coordinates: numeric dimensions folded into key/value
             pairs and drawn as one unfilled line per record
    TEXT     word clouds: centered text marks sized by a weight field
    RADIAL   arc/pie/donut: theta and color only, sized to the container
    DEFAULT  the given channels filtered by what the mark accepts, plus
             per-mark defaults

synthesize() never raises. Anything unexpected is logged and a minimal
specification carrying the data is returned instead.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from visualization_advisor.core.config import AdvisorConfig
from visualization_advisor.core.constants import (
    DONUT_INNER_RADIUS,
    MIN_FOLD_DIMENSIONS,
    VEGA_LITE_SCHEMA,
    WORDCLOUD_FONT_RANGE,
)
from visualization_advisor.core.values import is_null, is_number
from visualization_advisor.profiler.name_heuristics import (
    find_category_field,
    find_identifier_field,
    find_text_field,
    find_value_field,
    find_weight_field,
)
from visualization_advisor.recommendation.models import Recommendation
from visualization_advisor.synthesis.channels import (
    RADIAL_CHANNELS,
    RADIAL_STRIPPED_CHANNELS,
    MarkFamily,
    dropped_channels,
    filter_channels,
    mark_family,
)
from visualization_advisor.synthesis.spec_utils import (
    default_config,
    inline_data,
    mark_config,
    transform_encodings,
)

logger = logging.getLogger(__name__)

Records = Sequence[Dict[str, Any]]


def record_columns(records: Records) -> List[str]:
    """Field names in order of first appearance."""
    columns: List[str] = []
    seen = set()
    for record in records:
        for key in record:
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


def numeric_columns(records: Records, columns: Sequence[str]) -> List[str]:
    """Columns whose present values are all numbers."""
    numeric = []
    for column in columns:
        present = [record.get(column) for record in records if not is_null(record.get(column))]
        if present and all(is_number(value) for value in present):
            numeric.append(column)
    return numeric


def _channel_field(encoding: Dict[str, Any], channel: str) -> Optional[str]:
    spec = encoding.get(channel)
    if isinstance(spec, dict):
        return spec.get('field')
    return None


class EncodingSynthesizer:
    """
    Build chart specifications from a mark type, channels and records.

    Attributes:
        config: Renderer capabilities (independent_scales_supported)
    """

    def __init__(self, config: Optional[AdvisorConfig] = None):
        self.config = config or AdvisorConfig()

    def synthesize(
        self,
        mark_type: str,
        encoding_map: Optional[Dict[str, Any]],
        record_set: Optional[Records],
        mark_options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Build a specification.

        Args:
            mark_type: Mark or chart type ('bar', 'line', 'arc', 'donut',
                'parallel-coordinates', 'wordcloud', ...)
            encoding_map: Channel name to EncodingSpec, list of EncodingSpec,
                or plain channel dictionaries
            record_set: Records to inline
            mark_options: Mark properties that override the defaults

        Returns:
            Specification dictionary with an inline data block
        """
        family = mark_family(mark_type)
        records: List[Dict[str, Any]] = []
        try:
            records = list(record_set or [])
            encoding = transform_encodings(encoding_map or {})
            if family == MarkFamily.FOLD:
                spec = self._fold_spec(encoding, records, mark_options)
            elif family == MarkFamily.TEXT:
                spec = self._text_spec(encoding, records, mark_options)
            elif family == MarkFamily.RADIAL:
                spec = self._radial_spec(str(mark_type).lower(), encoding, records, mark_options)
            else:
                spec = self._default_spec(mark_type, encoding, records, mark_options)
        except Exception as e:
            logger.warning(f"Could not build {mark_type} specification, using a bare one: {e}")
            spec = self._fallback_spec(mark_type, records)

        logger.debug(f"Synthesized {family.value} specification for {mark_type} ({len(records):,} records)")
        return spec

    def synthesize_recommendation(
        self,
        recommendation: Recommendation,
        record_set: Optional[Records],
        mark_options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Specification for a recommendation's chart type and encodings."""
        return self.synthesize(
            recommendation.chart_type,
            recommendation.suggested_encodings,
            record_set,
            mark_options,
        )

    def _fold_spec(
        self,
        encoding: Dict[str, Any],
        records: List[Dict[str, Any]],
        mark_options: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        columns = record_columns(records)
        detail_field = _channel_field(encoding, 'detail') or find_identifier_field(columns)

        candidates = [column for column in columns if column != detail_field]
        dimensions = numeric_columns(records, candidates)
        if len(dimensions) < MIN_FOLD_DIMENSIONS:
            padding = [column for column in candidates if column not in dimensions]
            dimensions += padding[:MIN_FOLD_DIMENSIONS - len(dimensions)]

        fold_encoding: Dict[str, Any] = {
            'x': {'field': 'key', 'type': 'nominal'},
            'y': {'field': 'value', 'type': 'quantitative', 'scale': {'zero': False}},
        }
        if detail_field is not None:
            fold_encoding['detail'] = {'field': detail_field, 'type': 'nominal'}
        for channel in ('color', 'opacity', 'tooltip'):
            if channel in encoding:
                fold_encoding[channel] = encoding[channel]

        mark = {'type': 'line', 'opacity': 0.5}
        mark.update(mark_options or {})
        mark['type'] = 'line'
        mark['filled'] = False

        spec: Dict[str, Any] = {
            '$schema': VEGA_LITE_SCHEMA,
            'width': 500,
            'height': 300,
            'data': inline_data(records),
            'transform': [{'fold': dimensions}],
            'mark': mark,
            'encoding': fold_encoding,
        }
        if self.config.independent_scales_supported:
            spec['resolve'] = {'scale': {'y': 'independent'}}
        return spec

    def _text_spec(
        self,
        encoding: Dict[str, Any],
        records: List[Dict[str, Any]],
        mark_options: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        columns = record_columns(records)
        text_field = _channel_field(encoding, 'text') or find_text_field(columns) or 'text'
        weight_field = _channel_field(encoding, 'size') or find_weight_field(columns) or 'value'

        mark = {'baseline': 'middle', 'align': 'center'}
        mark.update(mark_options or {})
        mark['type'] = 'text'

        text_encoding: Dict[str, Any] = {
            'text': {'field': text_field},
            'size': {
                'field': weight_field,
                'type': 'quantitative',
                'scale': {'range': list(WORDCLOUD_FONT_RANGE)},
            },
            'color': {
                'field': weight_field,
                'type': 'quantitative',
                'scale': {'scheme': 'blues'},
            },
        }
        if 'tooltip' in encoding:
            text_encoding['tooltip'] = encoding['tooltip']

        return {
            '$schema': VEGA_LITE_SCHEMA,
            'width': 600,
            'height': 400,
            'data': inline_data(records),
            'mark': mark,
            'encoding': text_encoding,
        }

    def _radial_spec(
        self,
        mark_type: str,
        encoding: Dict[str, Any],
        records: List[Dict[str, Any]],
        mark_options: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        columns = record_columns(records)
        stripped = [channel for channel in encoding if channel in RADIAL_STRIPPED_CHANNELS]
        if stripped:
            logger.debug(f"Removing {stripped} from {mark_type} encoding")

        radial_encoding: Dict[str, Any] = {
            'theta': encoding.get('theta') or {
                'field': find_value_field(columns) or 'value',
                'type': 'quantitative',
                'stack': True,
            },
            'color': encoding.get('color') or {
                'field': find_category_field(columns) or 'category',
                'type': 'nominal',
            },
        }
        for channel, spec in encoding.items():
            if channel in RADIAL_CHANNELS and channel not in radial_encoding:
                radial_encoding[channel] = spec

        mark: Dict[str, Any] = {'tooltip': True}
        if mark_type == 'donut':
            mark['innerRadius'] = DONUT_INNER_RADIUS
        mark.update(mark_options or {})
        mark['type'] = 'arc'

        return {
            '$schema': VEGA_LITE_SCHEMA,
            'width': 'container',
            'height': 'container',
            'data': inline_data(records),
            'mark': mark,
            'encoding': radial_encoding,
            'view': {'stroke': None},
            'autosize': {'type': 'pad', 'resize': True},
            'config': {
                'view': {'stroke': None, 'fill': None},
                'axis': None,
                'axisX': None,
                'axisY': None,
                'axisTop': None,
                'axisBottom': None,
                'axisLeft': None,
                'axisRight': None,
            },
        }

    def _default_spec(
        self,
        mark_type: str,
        encoding: Dict[str, Any],
        records: List[Dict[str, Any]],
        mark_options: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        removed = dropped_channels(mark_type, encoding)
        if removed:
            logger.debug(f"Mark {mark_type} does not accept {removed}; dropping them")

        return {
            '$schema': VEGA_LITE_SCHEMA,
            'data': inline_data(records),
            'mark': mark_config(mark_type, mark_options),
            'encoding': filter_channels(mark_type, encoding),
            'config': default_config(),
        }

    @staticmethod
    def _fallback_spec(mark_type: Any, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        try:
            data = inline_data(records)
        except (TypeError, ValueError) as e:
            logger.warning(f"Records could not be inlined: {e}")
            data = {'values': []}
        return {
            '$schema': VEGA_LITE_SCHEMA,
            'data': data,
            'mark': str(mark_type),
            'encoding': {},
        }
