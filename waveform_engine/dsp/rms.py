import torch
import numpy as np
from typing import Union


def window_frames(sample_rate: int, resolution_hz: int) -> int:
    """Frames per computed value: one value per 1/resolution seconds, at least one frame."""
    if resolution_hz <= 0:
        raise ValueError("resolution must be positive")
    return max(1, int(sample_rate) // int(resolution_hz))


def windowed_rms(samples: Union[np.ndarray, torch.Tensor], window: int) -> torch.Tensor:
    """
    RMS of each consecutive `window`-frame block over all channels.
    The trailing partial block is kept (padding is excluded from its mean).
    Returns a 1D float32 tensor of length ceil(frames / window).
    """
    if isinstance(samples, np.ndarray):
        samples = torch.from_numpy(np.ascontiguousarray(samples, dtype=np.float32))
    x = samples.float()
    if x.dim() == 1:
        x = x.view(-1, 1)

    frames, channels = x.shape
    if frames == 0:
        return torch.zeros(0, dtype=torch.float32)

    n_values = (frames + window - 1) // window
    pad = n_values * window - frames

    sq = x.pow(2).sum(dim=1)
    if pad:
        sq = torch.nn.functional.pad(sq, (0, pad))

    # Per-block sample count, shorter for the trailing block
    counts = torch.full((n_values,), float(window * channels))
    counts[-1] = float((window - pad) * channels)

    sums = sq.view(n_values, window).sum(dim=1)
    return torch.sqrt(sums / counts)
