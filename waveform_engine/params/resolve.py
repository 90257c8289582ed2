"""
Color policy resolution: hex strings + strategy name -> ColorPolicy.
Color parsing never fails; an unknown strategy is a ConfigError.
"""
from waveform_engine.core.errors import ConfigError
from waveform_engine.core.types import STRATEGIES, STRATEGY_SOLID, ColorPolicy
from waveform_engine.params.colors import hex_to_rgb
from waveform_engine.params.schema import STRATEGY_OPTIONS, default_for


def resolve_color_policy(
    bg_hex: str,
    fg_hex: str,
    alt_hex: str = "",
    strategy: str = STRATEGY_SOLID,
    checker_size: int = None,
) -> ColorPolicy:
    """
    Resolve colors and strategy:
    1. bg/fg parse with black fallback
    2. empty alt means alt == fg
    3. strategy must be one of STRATEGIES
    """
    if strategy not in STRATEGIES:
        raise ConfigError(f"unknown function: {strategy!r} {STRATEGY_OPTIONS}")

    if checker_size is None:
        checker_size = default_for("checker_size")

    background = hex_to_rgb(bg_hex)
    foreground = hex_to_rgb(fg_hex)
    alternate = hex_to_rgb(alt_hex) if alt_hex else foreground

    return ColorPolicy(
        background=background,
        foreground=foreground,
        alternate=alternate,
        strategy=strategy,
        checker_size=int(checker_size),
    )
