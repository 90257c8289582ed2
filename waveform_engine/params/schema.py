"""
Option schema and defaults for the command line.
Single source for flag names, defaults, bounds and help text.
"""
from typing import Dict, Any, Literal, Optional

from waveform_engine.core.types import MAX_IMAGE_PIXELS, STRATEGIES, STRATEGY_SOLID

# Type definitions
OptionType = Literal["str", "uint"]
OptionGroup = Literal["color", "geometry", "output"]

# Schema entry structure: type, default, min, max, group, description
OptionSchemaEntry = Dict[str, Any]

# Largest value accepted for unsigned options
UINT32_MAX = 2 ** 32 - 1


def _make_option(
    option_type: OptionType,
    default: Any,
    min_val: Optional[int],
    max_val: Optional[int],
    group: OptionGroup,
    description: str,
) -> OptionSchemaEntry:
    """Helper to create a schema entry."""
    return {
        "type": option_type,
        "default": default,
        "min": min_val,
        "max": max_val,
        "group": group,
        "description": description,
    }


# Help string which lists available strategies
STRATEGY_OPTIONS = "[options: " + ", ".join(STRATEGIES) + "]"


# -----------------------------------------------------------------------------
# OPTION_SCHEMA: flag name -> metadata
# -----------------------------------------------------------------------------

OPTION_SCHEMA: Dict[str, OptionSchemaEntry] = {
    "bg": _make_option(
        "str", "#FFFFFF", None, None, "color", "hex background color of output waveform image"
    ),
    "fg": _make_option(
        "str", "#000000", None, None, "color", "hex foreground color of output waveform image"
    ),
    "alt": _make_option(
        "str", "", None, None, "color", "hex alternate color of output waveform image (default: fg)"
    ),
    "fn": _make_option(
        "str", STRATEGY_SOLID, None, None, "color",
        "function used to color output waveform image " + STRATEGY_OPTIONS,
    ),
    "checker_size": _make_option(
        "uint", 10, 1, UINT32_MAX, "color", "cell size in pixels of the checker function"
    ),
    "resolution": _make_option(
        "uint", 1, 1, UINT32_MAX, "geometry", "number of times audio is read and drawn per second of audio"
    ),
    "x": _make_option(
        "uint", 1, 1, UINT32_MAX, "geometry", "scaling factor for image X-axis"
    ),
    "y": _make_option(
        "uint", 1, 1, UINT32_MAX, "geometry", "scaling factor for image Y-axis"
    ),
    "sharpness": _make_option(
        "uint", 1, 0, UINT32_MAX, "geometry",
        "sharpening factor used to add curvature to a scaled image",
    ),
    "format": _make_option(
        "str", "tiff", None, None, "output", "raster container of the rendered image [options: tiff, png]"
    ),
    "seed": _make_option(
        "uint", None, 0, UINT32_MAX, "output", "seed for the fuzz function (default: random)"
    ),
    "max_pixels": _make_option(
        "uint", MAX_IMAGE_PIXELS, 1, UINT32_MAX, "output", "largest image, in pixels, a single request may produce"
    ),
}


def default_for(name: str) -> Any:
    return OPTION_SCHEMA[name]["default"]
