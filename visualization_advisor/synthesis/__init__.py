"""Chart specification synthesis."""

from visualization_advisor.synthesis.channels import MarkFamily, allowed_channels, mark_family
from visualization_advisor.synthesis.spec_utils import (
    parse_bin_directive,
    set_channel_transform,
    update_spec,
)
from visualization_advisor.synthesis.synthesizer import EncodingSynthesizer

__all__ = [
    'EncodingSynthesizer',
    'MarkFamily',
    'allowed_channels',
    'mark_family',
    'parse_bin_directive',
    'set_channel_transform',
    'update_spec',
]
