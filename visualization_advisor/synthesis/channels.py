"""
Mark families and the encoding channels each mark accepts.

Most marks share the cartesian channel set. Three families need different
handling when a specification is built:

    FOLD    parallel coordinates, drawn as lines over folded key/value pairs
    TEXT    word clouds, drawn as sized text marks
    RADIAL  arc, pie and donut charts, positioned by angle instead of x/y
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable

COMMON_CHANNELS = ('color', 'tooltip', 'opacity', 'size')

# Channels that never belong on a radial chart
RADIAL_STRIPPED_CHANNELS: FrozenSet[str] = frozenset(
    ('x', 'y', 'x2', 'y2', 'xOffset', 'yOffset', 'size')
)

RADIAL_CHANNELS: FrozenSet[str] = frozenset(
    ('theta', 'color', 'tooltip', 'opacity', 'radius', 'order')
)

# Fallback for marks without an entry in MARK_CHANNELS
DEFAULT_CHANNELS: FrozenSet[str] = frozenset(('x', 'y') + COMMON_CHANNELS)


def _channels(*names: str) -> FrozenSet[str]:
    return frozenset(names + COMMON_CHANNELS)


MARK_CHANNELS: Dict[str, FrozenSet[str]] = {
    'bar': _channels('x', 'y', 'x2', 'y2', 'xOffset', 'yOffset', 'detail'),
    'line': _channels('x', 'y', 'strokeWidth', 'detail', 'order'),
    'area': _channels('x', 'y', 'x2', 'y2', 'strokeWidth', 'detail', 'order'),
    'point': _channels('x', 'y', 'strokeWidth', 'shape', 'detail'),
    'circle': _channels('x', 'y', 'strokeWidth', 'shape', 'detail'),
    'square': _channels('x', 'y', 'strokeWidth', 'shape', 'detail'),
    'tick': _channels('x', 'y', 'detail'),
    'rect': _channels('x', 'y', 'x2', 'y2', 'detail'),
    'boxplot': _channels('x', 'y', 'detail'),
    'violin': _channels('x', 'y', 'density'),
    'text': _channels('text', 'x', 'y', 'angle', 'detail'),
    'rule': _channels('x', 'y', 'x2', 'y2', 'strokeWidth', 'detail'),
}


class MarkFamily(str, Enum):
    """Specification layout used for a mark type."""
    FOLD = "fold"
    TEXT = "text"
    RADIAL = "radial"
    DEFAULT = "default"


FAMILY_BY_MARK: Dict[str, MarkFamily] = {
    'parallel-coordinates': MarkFamily.FOLD,
    'parallel_coordinates': MarkFamily.FOLD,
    'wordcloud': MarkFamily.TEXT,
    'arc': MarkFamily.RADIAL,
    'pie': MarkFamily.RADIAL,
    'donut': MarkFamily.RADIAL,
}


def mark_family(mark_type: str) -> MarkFamily:
    """Family of a mark type; unknown marks use the default layout."""
    return FAMILY_BY_MARK.get(str(mark_type).lower(), MarkFamily.DEFAULT)


def allowed_channels(mark_type: str) -> FrozenSet[str]:
    """Channels a mark type accepts."""
    if mark_family(mark_type) == MarkFamily.RADIAL:
        return RADIAL_CHANNELS
    return MARK_CHANNELS.get(str(mark_type).lower(), DEFAULT_CHANNELS)


def filter_channels(mark_type: str, encoding: Dict[str, dict]) -> Dict[str, dict]:
    """Drop channels the mark does not accept, keeping the caller's order."""
    allowed = allowed_channels(mark_type)
    return {channel: spec for channel, spec in encoding.items() if channel in allowed}


def dropped_channels(mark_type: str, channels: Iterable[str]) -> list:
    """Channels from the input that filter_channels would remove."""
    allowed = allowed_channels(mark_type)
    return [channel for channel in channels if channel not in allowed]
