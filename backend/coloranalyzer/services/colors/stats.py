"""
Aggregate color statistics over a set of ranked buckets.
"""
from typing import Dict, Optional, Sequence

from coloranalyzer.schemas import ColorBucket, ColorStats

from .naming import classify_hsl
from .utils import rgb_to_hsl


def get_color_stats(
    colors: Sequence[ColorBucket],
    total_pixels: Optional[int] = None,
    processed_pixels: Optional[int] = None,
) -> Optional[ColorStats]:
    """
    Compute saturation/lightness averages and the name distribution.

    Averages are plain means over the representative bucket colors, not
    weighted by pixel share. A bucket's existing name is reused; unnamed
    buckets are classified on the fly.

    Args:
        colors: Ranked (or full) bucket set
        total_pixels: Pixels in the analyzed buffer (default: sum of counts)
        processed_pixels: Pixels swept by the histogram (default: total_pixels)

    Returns:
        ColorStats, or None when ``colors`` is empty
    """
    if not colors:
        return None

    total_saturation = 0.0
    total_lightness = 0.0
    distribution: Dict[str, float] = {}

    for color in colors:
        hue, saturation, lightness = rgb_to_hsl(color.r, color.g, color.b)
        total_saturation += saturation
        total_lightness += lightness

        name = color.name or classify_hsl(hue, saturation, lightness)
        distribution[name] = distribution.get(name, 0.0) + color.percentage

    if total_pixels is None:
        total_pixels = sum(color.count for color in colors)
    if processed_pixels is None:
        processed_pixels = total_pixels

    return ColorStats(
        total_colors=len(colors),
        total_pixels=total_pixels,
        processed_pixels=processed_pixels,
        color_distribution={name: round(share, 2) for name, share in distribution.items()},
        average_saturation=round(total_saturation / len(colors), 2),
        average_lightness=round(total_lightness / len(colors), 2),
    )
