"""
Bucket ranking: materialize histogram buckets into color records ordered by
pixel count.
"""
from typing import List, Optional, Tuple

from coloranalyzer.config import is_integer
from coloranalyzer.errors import ValidationError
from coloranalyzer.schemas import ColorBucket

from .histogram import ColorHistogram
from .naming import get_color_name
from .utils import rgb_string, rgb_to_hex


def make_bucket(
    rgb: Tuple[int, int, int],
    count: int,
    total_pixels: int,
    include_name: bool = True,
) -> ColorBucket:
    """Build the color record for one quantized bucket."""
    r, g, b = rgb
    percentage = round(100.0 * count / total_pixels, 2) if total_pixels else 0.0
    return ColorBucket(
        r=r,
        g=g,
        b=b,
        hex=rgb_to_hex(r, g, b),
        rgb_string=rgb_string(r, g, b),
        count=count,
        percentage=percentage,
        name=get_color_name(r, g, b) if include_name else None,
    )


def rank_buckets(histogram: ColorHistogram, include_names: bool = True) -> List[ColorBucket]:
    """
    All buckets ordered by count descending.

    Equal counts keep the order in which their keys were first seen during
    the histogram sweep; the insertion index is an explicit secondary key.
    """
    indexed = [
        (index, rgb, count)
        for index, (rgb, count) in enumerate(histogram.buckets())
    ]
    indexed.sort(key=lambda entry: (-entry[2], entry[0]))

    return [
        make_bucket(rgb, count, histogram.total_pixels, include_names)
        for _, rgb, count in indexed
    ]


def select_top(ranked: List[ColorBucket], top_n: int) -> Tuple[Optional[ColorBucket], List[ColorBucket]]:
    """
    Take the first ``min(top_n, len(ranked))`` buckets.

    Returns:
        (dominant color or None when there are no buckets, top colors)

    Raises:
        ValidationError: If top_n < 1
    """
    if not is_integer(top_n) or top_n <= 0:
        raise ValidationError(f"top_colors_count must be a positive integer, got {top_n!r}")

    top = ranked[:int(top_n)]
    return (top[0] if top else None), top
