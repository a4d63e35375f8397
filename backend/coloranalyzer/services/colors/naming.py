"""
Canonical color naming from an HSL threshold table.
"""
from typing import Tuple

from .utils import rgb_to_hsl

# Lightness and saturation gates (percent), checked before hue
BLACK_LIGHTNESS_LT = 20
WHITE_LIGHTNESS_GT = 85
GRAY_SATURATION_LT = 15

# (start, end, name) half-open hue ranges in degrees, first match wins.
# Hues at or above 330 wrap back to Red.
HUE_RANGES: Tuple[Tuple[int, int, str], ...] = (
    (0, 15, "Red"),
    (15, 45, "Orange"),
    (45, 75, "Yellow"),
    (75, 165, "Green"),
    (165, 195, "Cyan"),
    (195, 255, "Blue"),
    (255, 285, "Purple"),
    (285, 330, "Pink"),
)
WRAP_NAME = "Red"

COLOR_NAMES = ("Black", "White", "Gray") + tuple(
    dict.fromkeys(name for _, _, name in HUE_RANGES)
)


def classify_hsl(hue: float, saturation: float, lightness: float) -> str:
    """Map HSL components to a canonical name."""
    if lightness < BLACK_LIGHTNESS_LT:
        return "Black"
    if lightness > WHITE_LIGHTNESS_GT:
        return "White"
    if saturation < GRAY_SATURATION_LT:
        return "Gray"

    for start, end, name in HUE_RANGES:
        if start <= hue < end:
            return name
    return WRAP_NAME


def get_color_name(r: int, g: int, b: int) -> str:
    """
    Classify an RGB triple into a canonical color name.

    Never fails for channel values in [0, 255].
    """
    return classify_hsl(*rgb_to_hsl(r, g, b))
