"""
Render configuration: aggregates the resolved color policy and numeric options
into the single immutable RenderPolicy shared by every request of a batch.
"""
from typing import Optional

from waveform_engine.core.errors import ConfigError
from waveform_engine.core.io import IMAGE_FORMATS
from waveform_engine.core.types import MAX_IMAGE_PIXELS, ColorPolicy, RenderPolicy
from waveform_engine.dsp.raster import image_size
from waveform_engine.params.resolve import resolve_color_policy
from waveform_engine.params.schema import default_for
from waveform_engine.params.validate import validate_numeric


def build_policy(
    colors: ColorPolicy,
    resolution_hz: int = 1,
    scale_x: int = 1,
    scale_y: int = 1,
    sharpness: int = 1,
    image_format: str = "tiff",
    seed: Optional[int] = None,
    max_pixels: int = MAX_IMAGE_PIXELS,
) -> RenderPolicy:
    """Pure aggregation of already-validated inputs."""
    return RenderPolicy(
        colors=colors,
        resolution_hz=resolution_hz,
        scale_x=scale_x,
        scale_y=scale_y,
        sharpness=sharpness,
        image_format=image_format,
        seed=seed,
        max_pixels=max_pixels,
    )


def policy_from_options(
    bg: str = None,
    fg: str = None,
    alt: str = None,
    fn: str = None,
    resolution: int = None,
    x: int = None,
    y: int = None,
    sharpness: int = None,
    checker_size: int = None,
    format: str = None,
    seed: Optional[int] = None,
    max_pixels: int = None,
) -> RenderPolicy:
    """
    Build a RenderPolicy from flat option values, filling unset ones from OPTION_SCHEMA.
    Raises ConfigError on an unknown strategy, image format, out-of-range number,
    or scale factors whose single-bar image already exceeds max_pixels.
    """
    def _or_default(value, name):
        return default_for(name) if value is None else value

    numeric = validate_numeric({
        "resolution": _or_default(resolution, "resolution"),
        "x": _or_default(x, "x"),
        "y": _or_default(y, "y"),
        "sharpness": _or_default(sharpness, "sharpness"),
        "checker_size": _or_default(checker_size, "checker_size"),
        "seed": seed,
        "max_pixels": _or_default(max_pixels, "max_pixels"),
    })

    # Every rendered image is at least one bar wide
    height, width = image_size(1, numeric["x"], numeric["y"])
    if height * width > numeric["max_pixels"]:
        raise ConfigError(
            f"scale x={numeric['x']} y={numeric['y']} gives {width}x{height} pixels per bar, "
            f"above max_pixels {numeric['max_pixels']}"
        )

    image_format = _or_default(format, "format").lower()
    if image_format not in IMAGE_FORMATS:
        raise ConfigError(f"unknown image format: {image_format!r} [options: {', '.join(IMAGE_FORMATS)}]")

    colors = resolve_color_policy(
        _or_default(bg, "bg"),
        _or_default(fg, "fg"),
        _or_default(alt, "alt"),
        _or_default(fn, "fn"),
        checker_size=numeric["checker_size"],
    )

    return build_policy(
        colors,
        resolution_hz=numeric["resolution"],
        scale_x=numeric["x"],
        scale_y=numeric["y"],
        sharpness=numeric["sharpness"],
        image_format=image_format,
        seed=numeric["seed"],
        max_pixels=numeric["max_pixels"],
    )
