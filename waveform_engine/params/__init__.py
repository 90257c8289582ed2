"""
Option schema, color parsing and validation for the render policy.
Defaults: single source is schema.OPTION_SCHEMA.
"""
from waveform_engine.params.schema import OPTION_SCHEMA, STRATEGY_OPTIONS
from waveform_engine.params.colors import hex_to_rgb
from waveform_engine.params.resolve import resolve_color_policy
from waveform_engine.params.validate import validate_numeric

__all__ = ["OPTION_SCHEMA", "STRATEGY_OPTIONS", "hex_to_rgb", "resolve_color_policy", "validate_numeric"]
