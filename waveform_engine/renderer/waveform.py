"""
Waveform renderer: decoded audio + RenderPolicy -> RGBA image.
Decode (soundfile) -> windowed RMS -> bar mask -> color field over background.
"""
import logging
from typing import Optional

import numpy as np
import torch

from waveform_engine.core.errors import ImageTooLargeError
from waveform_engine.core.io import AudioIO, ImageIO
from waveform_engine.core.types import AudioBuffer, RenderPolicy
from waveform_engine.dsp.colorfuncs import color_field
from waveform_engine.dsp.raster import bar_mask, image_size
from waveform_engine.dsp.rms import window_frames, windowed_rms

logger = logging.getLogger(__name__)


class WaveformRenderer:
    """
    Rendering engine collaborator used by the batch orchestrator.
    Holds no per-request state; one instance serves a whole batch.
    """

    def __init__(self, policy: RenderPolicy):
        self.policy = policy
        self._generator: Optional[torch.Generator] = None
        if policy.seed is not None:
            self._generator = torch.Generator()
            self._generator.manual_seed(int(policy.seed))

    def compute(self, audio: AudioBuffer) -> torch.Tensor:
        """One RMS value per 1/resolution seconds of audio."""
        window = window_frames(audio.sample_rate, self.policy.resolution_hz)
        return windowed_rms(audio.samples, window)

    def draw(self, values: torch.Tensor) -> np.ndarray:
        """
        Rasterize computed values into an (H, W, 4) uint8 RGBA array.
        Raises ImageTooLargeError before allocating anything above policy.max_pixels.
        """
        p = self.policy
        height, width = image_size(values.shape[0], p.scale_x, p.scale_y)
        if height * width > p.max_pixels:
            raise ImageTooLargeError(
                f"image too large: {width}x{height} pixels exceeds max_pixels {p.max_pixels}"
            )

        mask = bar_mask(values, p.scale_x, p.scale_y, p.sharpness)

        fg = color_field(p.colors, height, width, p.scale_x, generator=self._generator)
        bg = torch.tensor(p.background.rgba(), dtype=torch.uint8).expand(height, width, 4)

        img = torch.where(mask.unsqueeze(-1), fg, bg)
        return img.contiguous().numpy()

    def render(self, audio_bytes: bytes) -> np.ndarray:
        """
        Decode and draw. Raises FormatError, InvalidDataError,
        TruncatedStreamError, ImageTooLargeError or RenderError.
        """
        audio = AudioIO.decode(audio_bytes)
        values = self.compute(audio)
        logger.debug(
            "decoded %d frames @ %d Hz x%d ch -> %d values",
            audio.frames, audio.sample_rate, audio.channels, values.shape[0],
        )
        return self.draw(values)

    def encode_image(self, pixels: np.ndarray) -> bytes:
        return ImageIO.to_bytes(pixels, self.policy.image_format)
