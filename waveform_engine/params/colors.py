import re

from waveform_engine.core.types import RGB

_HEX6 = re.compile(r"[0-9a-fA-F]{6}")

BLACK = RGB(0, 0, 0)


def hex_to_rgb(h: str) -> RGB:
    """
    Convert a hex string ("#abc", "aabbcc", ...) to an RGB triple.
    Anything that is not 3 or 6 hex digits after an optional '#' yields black.
    """
    if h is None:
        return BLACK
    if h.startswith("#"):
        h = h[1:]
    if len(h) == 3:
        h = h[0] * 2 + h[1] * 2 + h[2] * 2
    if len(h) == 6 and _HEX6.fullmatch(h):
        rgb = int(h, 16)
        return RGB((rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF)
    return BLACK
