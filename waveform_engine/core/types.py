from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

# Names of available color strategies
STRATEGY_CHECKER = "checker"
STRATEGY_FUZZ = "fuzz"
STRATEGY_GRADIENT = "gradient"
STRATEGY_SOLID = "solid"
STRATEGY_STRIPE = "stripe"

STRATEGIES = (
    STRATEGY_CHECKER,
    STRATEGY_FUZZ,
    STRATEGY_GRADIENT,
    STRATEGY_SOLID,
    STRATEGY_STRIPE,
)

# Operation name a request must carry to be rendered
OP_WAVEFORM = "waveform"

# Wire value of RenderResult.error on success
NO_ERROR = "false"

# Largest image, in pixels, a single request may produce
MAX_IMAGE_PIXELS = 2 ** 24


@dataclass(frozen=True)
class RGB:
    """8-bit color; alpha is always fully opaque."""
    r: int = 0
    g: int = 0
    b: int = 0

    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, 255)


@dataclass(frozen=True)
class ColorPolicy:
    background: RGB
    foreground: RGB
    alternate: RGB
    strategy: str = STRATEGY_SOLID
    checker_size: int = 10


@dataclass(frozen=True)
class RenderPolicy:
    """Shared, read-only rendering options for every request in a batch."""
    colors: ColorPolicy
    resolution_hz: int = 1
    scale_x: int = 1
    scale_y: int = 1
    sharpness: int = 1
    image_format: str = "tiff"
    seed: Optional[int] = None
    max_pixels: int = MAX_IMAGE_PIXELS

    @property
    def background(self) -> RGB:
        return self.colors.background

    @property
    def strategy(self) -> str:
        return self.colors.strategy


@dataclass(frozen=True)
class RenderRequest:
    id: str
    operation: str
    payload: Tuple[str, ...] = ()


@dataclass
class RenderResult:
    id: str
    result: str = ""
    error: str = NO_ERROR

    @property
    def ok(self) -> bool:
        return self.error == NO_ERROR


@dataclass
class AudioBuffer:
    samples: np.ndarray  # float32, shape (frames, channels)
    sample_rate: int
    channels: int = field(init=False)

    def __post_init__(self):
        if self.samples.ndim == 1:
            self.samples = self.samples.reshape(-1, 1)
        self.channels = int(self.samples.shape[1])

    @property
    def frames(self) -> int:
        return int(self.samples.shape[0])


