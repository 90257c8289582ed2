"""
Color fields for the five strategies.
Each function returns an (H, W, 4) uint8 tensor giving the foreground color of every pixel;
the rasterizer only reads it where a bar is drawn.
"""
from typing import Callable, Dict, Optional

import torch

from waveform_engine.core.types import (
    RGB,
    ColorPolicy,
    STRATEGY_CHECKER,
    STRATEGY_FUZZ,
    STRATEGY_GRADIENT,
    STRATEGY_SOLID,
    STRATEGY_STRIPE,
)

ColorField = Callable[[ColorPolicy, int, int, int, Optional[torch.Generator]], torch.Tensor]


def _rgba(color: RGB) -> torch.Tensor:
    return torch.tensor(color.rgba(), dtype=torch.float32)


def _pick(mask: torch.Tensor, a: RGB, b: RGB) -> torch.Tensor:
    """mask True -> a, False -> b. mask is (H, W)."""
    out = torch.where(mask.unsqueeze(-1), _rgba(a), _rgba(b))
    return out.to(torch.uint8)


def solid(colors: ColorPolicy, height: int, width: int, bar_width: int, generator=None) -> torch.Tensor:
    return _rgba(colors.foreground).to(torch.uint8).expand(height, width, 4).clone()


def checker(colors: ColorPolicy, height: int, width: int, bar_width: int, generator=None) -> torch.Tensor:
    size = max(1, int(colors.checker_size))
    ys = torch.arange(height).view(-1, 1) // size
    xs = torch.arange(width).view(1, -1) // size
    return _pick((ys + xs) % 2 == 0, colors.foreground, colors.alternate)


def stripe(colors: ColorPolicy, height: int, width: int, bar_width: int, generator=None) -> torch.Tensor:
    bars = torch.arange(width) // max(1, bar_width)
    mask = (bars % 2 == 0).view(1, -1).expand(height, width)
    return _pick(mask, colors.foreground, colors.alternate)


def gradient(colors: ColorPolicy, height: int, width: int, bar_width: int, generator=None) -> torch.Tensor:
    """Linear fg -> alt along the X-axis."""
    if width > 1:
        t = torch.arange(width, dtype=torch.float32) / float(width - 1)
    else:
        t = torch.zeros(width, dtype=torch.float32)
    t = t.view(1, -1, 1)
    fg = _rgba(colors.foreground).view(1, 1, 4)
    alt = _rgba(colors.alternate).view(1, 1, 4)
    row = torch.round(fg + (alt - fg) * t)
    return row.expand(height, width, 4).clamp(0, 255).to(torch.uint8)


def fuzz(colors: ColorPolicy, height: int, width: int, bar_width: int, generator=None) -> torch.Tensor:
    """Per-pixel coin flip between fg and alt."""
    mask = torch.rand((height, width), generator=generator) < 0.5
    return _pick(mask, colors.foreground, colors.alternate)


COLOR_FIELDS: Dict[str, ColorField] = {
    STRATEGY_CHECKER: checker,
    STRATEGY_FUZZ: fuzz,
    STRATEGY_GRADIENT: gradient,
    STRATEGY_SOLID: solid,
    STRATEGY_STRIPE: stripe,
}


def color_field(colors: ColorPolicy, height: int, width: int, bar_width: int,
                generator: Optional[torch.Generator] = None) -> torch.Tensor:
    try:
        fn = COLOR_FIELDS[colors.strategy]
    except KeyError:
        raise ValueError(f"Unknown color strategy: {colors.strategy}")
    return fn(colors, height, width, bar_width, generator)
