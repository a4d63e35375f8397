"""
Color Analyzer

Turns a raster image into a ranked color histogram: dominant colors with
canonical names and aggregate statistics.
"""
from coloranalyzer.config import AnalysisOptions, config
from coloranalyzer.errors import (
    AnalysisError,
    ColorAnalysisError,
    DecodeError,
    ImageIOError,
    ValidationError,
)
from coloranalyzer.schemas import AnalysisResult, ColorBucket, ColorStats, ImageInfo
from coloranalyzer.services.analyzer import (
    analyze,
    analyze_async,
    get_color_palette,
    get_dominant_color,
)
from coloranalyzer.services.colors.naming import get_color_name
from coloranalyzer.services.colors.stats import get_color_stats
from coloranalyzer.services.colors.utils import hex_to_rgb, rgb_to_hex

__version__ = "1.0.0"

__all__ = [
    "AnalysisError",
    "AnalysisOptions",
    "AnalysisResult",
    "ColorAnalysisError",
    "ColorBucket",
    "ColorStats",
    "DecodeError",
    "ImageIOError",
    "ImageInfo",
    "ValidationError",
    "analyze",
    "analyze_async",
    "config",
    "get_color_name",
    "get_color_palette",
    "get_color_stats",
    "get_dominant_color",
    "hex_to_rgb",
    "rgb_to_hex",
]
