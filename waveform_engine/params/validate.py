"""
Range checks for numeric options against OPTION_SCHEMA bounds.
"""
from typing import Any, Dict

from waveform_engine.core.errors import ConfigError
from waveform_engine.params.schema import OPTION_SCHEMA


def validate_uint(name: str, value: Any) -> int:
    """Return value as int if it lies within the schema bounds for `name`."""
    entry = OPTION_SCHEMA[name]
    if isinstance(value, bool):
        raise ConfigError(f"{name}: expected an unsigned integer, got {value!r}")
    try:
        v = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name}: expected an unsigned integer, got {value!r}")
    if v != value and not isinstance(value, str):
        raise ConfigError(f"{name}: expected an unsigned integer, got {value!r}")

    lo, hi = entry["min"], entry["max"]
    if lo is not None and v < lo:
        raise ConfigError(f"{name}: {v} is below minimum {lo}")
    if hi is not None and v > hi:
        raise ConfigError(f"{name}: {v} is above maximum {hi}")
    return v


def validate_numeric(values: Dict[str, Any]) -> Dict[str, int]:
    """
    Validate every numeric option in `values`. None entries are passed through.
    Returns a new dict (does not mutate input).
    """
    result = dict(values)
    for name, value in values.items():
        if value is None:
            continue
        result[name] = validate_uint(name, value)
    return result
