"""
Bar rasterization: computed RMS values -> boolean (H, W) foreground mask.
"""
import torch

# Unscaled image height in pixels
IMG_Y_DEFAULT = 128


def image_size(n_values: int, scale_x: int, scale_y: int):
    """Return (height, width) of the image for n computed values."""
    return IMG_Y_DEFAULT * int(scale_y), int(n_values) * int(scale_x)


def column_half_heights(values: torch.Tensor, height: int, scale_x: int, sharpness: int) -> torch.Tensor:
    """
    Half-height in pixels of the bar in every image column.
    Each value spans scale_x columns; with scale_x > 1 the bar edges are rounded
    by sharpness * d^2 / scale_x, d being the column's distance from the bar centre.
    """
    half = height / 2.0
    per_value = torch.clamp(values.float(), 0.0, 1.0) * half

    cols = per_value.repeat_interleave(int(scale_x))
    if scale_x > 1 and sharpness > 0:
        offsets = torch.arange(scale_x, dtype=torch.float32) - (scale_x - 1) / 2.0
        curve = float(sharpness) * offsets.pow(2) / float(scale_x)
        cols = cols - curve.repeat(values.shape[0])

    return torch.clamp(cols, 0.0, half)


def bar_mask(values: torch.Tensor, scale_x: int, scale_y: int, sharpness: int) -> torch.Tensor:
    """Boolean (H, W) mask, True where the waveform is drawn. Bars are centred on the X-axis midline."""
    height, width = image_size(values.shape[0], scale_x, scale_y)
    half_heights = column_half_heights(values, height, scale_x, sharpness)

    # Distance of every pixel row centre from the midline
    rows = torch.arange(height, dtype=torch.float32) + 0.5
    dist = torch.abs(rows - height / 2.0).view(-1, 1)

    return dist < half_heights.view(1, width)
