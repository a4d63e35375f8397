"""
Color conversion helpers: hex encoding and the RGB to HSL derivation used
for naming and aggregate statistics.
"""
import math
import re
from typing import Optional, Tuple

HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert an RGB triple to an uppercase ``#RRGGBB`` string."""
    return f"#{int(r):02X}{int(g):02X}{int(b):02X}"


def hex_to_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    """
    Convert a hex color string to an RGB tuple.

    The leading ``#`` is optional and digits are case-insensitive.

    Returns:
        (r, g, b) tuple, or None when the string is not a 6-digit hex color
    """
    match = HEX_RE.match(hex_color.strip()) if hex_color else None
    if match is None:
        return None
    return tuple(int(part, 16) for part in match.groups())


def rgb_string(r: int, g: int, b: int) -> str:
    """CSS functional notation, e.g. ``rgb(255, 0, 0)``."""
    return f"rgb({int(r)}, {int(g)}, {int(b)})"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_hue(r: int, g: int, b: int) -> int:
    """
    Hue in whole degrees, in [0, 360).

    Six-sector formula; achromatic colors (max == min) have hue 0.
    """
    r, g, b = int(r), int(g), int(b)
    cmax = max(r, g, b)
    cmin = min(r, g, b)
    if cmax == cmin:
        return 0

    delta = cmax - cmin
    if cmax == r:
        sector = math.fmod((g - b) / delta, 6)
    elif cmax == g:
        sector = (b - r) / delta + 2
    else:
        sector = (r - g) / delta + 4

    hue = _round_half_up(sector * 60)
    if hue < 0:
        hue += 360
    return hue % 360


def get_lightness(r: int, g: int, b: int) -> float:
    """HSL lightness as a percentage rounded to 2 decimals."""
    cmax = max(int(r), int(g), int(b))
    cmin = min(int(r), int(g), int(b))
    return round((cmax + cmin) / 2 / 255 * 100, 2)


def get_saturation(r: int, g: int, b: int) -> float:
    """HSL saturation as a percentage rounded to 2 decimals."""
    cmax = max(int(r), int(g), int(b))
    cmin = min(int(r), int(g), int(b))
    lightness = (cmax + cmin) / 2 / 255
    if lightness == 0 or lightness == 1:
        return 0.0
    delta = (cmax - cmin) / 255
    return round(delta / (1 - abs(2 * lightness - 1)) * 100, 2)


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[int, float, float]:
    """Return (hue degrees, saturation %, lightness %)."""
    return get_hue(r, g, b), get_saturation(r, g, b), get_lightness(r, g, b)
