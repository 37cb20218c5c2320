"""
Helpers for assembling and editing chart specifications.

Specifications are plain dictionaries in Vega-Lite layout. Nothing here
touches the record data beyond wrapping it in an inline data block.
"""

import copy
import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Union

from visualization_advisor.recommendation.models import EncodingSpec
from visualization_advisor.utils.json_utils import convert_to_json_serializable

logger = logging.getLogger(__name__)

# Mutually exclusive channel transforms, highest precedence first
CHANNEL_TRANSFORMS = ('bin', 'timeUnit', 'aggregate')

_BIN_COUNT_PATTERN = re.compile(r'^\s*(\d+)\s*(buckets?|bins?)?\s*$', re.IGNORECASE)

BinValue = Union[bool, Dict[str, int]]


def parse_bin_directive(value: Any) -> Optional[BinValue]:
    """
    Normalize a bin directive.

    Accepts booleans, {'maxbins': N} dictionaries, integers, and shorthand
    text such as "20 buckets", "10 bins", "15" or "auto".

    Returns:
        True, False, {'maxbins': N}, or None when the directive is not understood
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return {'maxbins': value} if value > 0 else None
    if isinstance(value, dict):
        if not value:
            return True
        normalized = dict(value)
        if 'maxbins' in normalized:
            try:
                maxbins = int(normalized['maxbins'])
            except (TypeError, ValueError):
                return None
            if maxbins <= 0:
                return None
            normalized['maxbins'] = maxbins
        return normalized
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ('auto', 'true', 'yes'):
            return True
        if text in ('false', 'no', 'none', 'off'):
            return False
        match = _BIN_COUNT_PATTERN.match(text)
        if match:
            maxbins = int(match.group(1))
            return {'maxbins': maxbins} if maxbins > 0 else None
    return None


def set_channel_transform(channel_def: Dict[str, Any], transform: str, value: Any) -> Dict[str, Any]:
    """
    Set one of bin, timeUnit or aggregate on a channel and clear the other two.

    A value of None removes the transform. Returns a new channel definition.
    """
    if transform not in CHANNEL_TRANSFORMS:
        raise ValueError(f"Unknown channel transform '{transform}', expected one of {CHANNEL_TRANSFORMS}")

    result = {key: val for key, val in channel_def.items() if key not in CHANNEL_TRANSFORMS}
    if transform == 'bin' and value is not None:
        value = parse_bin_directive(value)
    if value is not None and value is not False:
        result[transform] = value
    return result


def normalize_channel_transforms(channel_def: Dict[str, Any]) -> Dict[str, Any]:
    """Resolve conflicting transforms on a channel: bin, then timeUnit, then aggregate."""
    present = [name for name in CHANNEL_TRANSFORMS if channel_def.get(name) not in (None, False)]
    if not present:
        return {key: val for key, val in channel_def.items() if key not in CHANNEL_TRANSFORMS}

    for name in present:
        value = channel_def[name]
        if name == 'bin':
            value = parse_bin_directive(value)
            if not value:
                logger.debug(f"Ignoring bin directive {channel_def['bin']!r} on field {channel_def.get('field')}")
                continue
        if len(present) > 1:
            logger.debug(f"Channel on {channel_def.get('field')} has {present}; keeping {name}")
        return set_channel_transform(channel_def, name, value)

    return {key: val for key, val in channel_def.items() if key not in CHANNEL_TRANSFORMS}


def channel_to_dict(encoding: Any) -> Any:
    """Convert an EncodingSpec, a list of them, or a plain dict into channel definitions."""
    if isinstance(encoding, EncodingSpec):
        return encoding.to_dict()
    if isinstance(encoding, (list, tuple)):
        return [channel_to_dict(item) for item in encoding]
    if isinstance(encoding, dict):
        return copy.deepcopy(encoding)
    if isinstance(encoding, str):
        return {'field': encoding}
    return encoding


def transform_encodings(encodings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Channel map with every entry as a Vega-Lite definition.

    Tooltip lists stay lists; transforms on each channel are made exclusive.
    """
    result: Dict[str, Any] = {}
    for channel, encoding in (encodings or {}).items():
        converted = channel_to_dict(encoding)
        if isinstance(converted, dict):
            converted = normalize_channel_transforms(converted)
        elif isinstance(converted, list):
            converted = [
                normalize_channel_transforms(item) if isinstance(item, dict) else item
                for item in converted
            ]
        elif converted is None:
            continue
        result[channel] = converted
    return result


def mark_config(mark_type: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Mark definition with per-mark defaults; caller options take precedence.

    Defaults: line gets point markers and strokeWidth 2; bar gets
    cornerRadius 0; area gets opacity 0.7 and an outline; point and circle
    get size 60 and are filled. Every mark shows tooltips.
    """
    options = dict(options or {})
    options.pop('type', None)
    config: Dict[str, Any] = {'type': mark_type, 'tooltip': True}

    if mark_type == 'bar':
        config['cornerRadius'] = 0
    elif mark_type == 'line':
        config['point'] = True
        config['strokeWidth'] = 2
    elif mark_type == 'area':
        config['opacity'] = 0.7
        config['line'] = True
    elif mark_type in ('point', 'circle'):
        config['size'] = 60
        config['filled'] = True

    config.update(options)
    return config


def default_config() -> Dict[str, Any]:
    """Shared view and axis configuration."""
    return {
        'view': {'stroke': None},
        'axis': {'grid': True, 'tickBand': 'extent'},
    }


def inline_data(records: Optional[Sequence[Dict[str, Any]]]) -> Dict[str, List[Dict[str, Any]]]:
    """Inline data block with JSON-safe values."""
    return {'values': convert_to_json_serializable(list(records or []))}


def _merge_mark(current: Any, update: Any) -> Any:
    if isinstance(update, str):
        return update
    if isinstance(current, str):
        return {'type': current, **update}
    return {**(current or {}), **update}


def update_spec(spec: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply updates to a specification without mutating it.

    Mark, encoding and data are merged one level deep. Config is merged two
    levels deep so updating one axis property keeps the others. Any other
    key is replaced.
    """
    result = copy.deepcopy(spec)
    for key, value in (updates or {}).items():
        if value is None:
            continue
        if key == 'mark':
            result['mark'] = _merge_mark(result.get('mark'), copy.deepcopy(value))
        elif key in ('encoding', 'data') and isinstance(value, dict):
            result[key] = {**result.get(key, {}), **copy.deepcopy(value)}
        elif key == 'config' and isinstance(value, dict):
            config = dict(result.get('config') or {})
            for section, settings in value.items():
                existing = config.get(section)
                if isinstance(settings, dict) and isinstance(existing, dict):
                    config[section] = {**existing, **settings}
                else:
                    config[section] = copy.deepcopy(settings)
            result['config'] = config
        else:
            result[key] = copy.deepcopy(value)
    return result
