"""
Color Analyzer Configuration
Manages environment variables and defaults for the analysis pipeline and its surfaces.
"""
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import numpy as np
from dotenv import load_dotenv

from coloranalyzer.errors import ValidationError

# Load environment variables
load_dotenv()


class Config:
    """Configuration class for the color analyzer."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("COLOR_ANALYZER_MAX_FILE_MB", "10"))
    UPLOAD_DIR: str = os.environ.get("COLOR_ANALYZER_UPLOAD_DIR", "uploads")

    # Analysis defaults
    MAX_DIMENSION: int = int(os.environ.get("COLOR_ANALYZER_MAX_DIMENSION", "200"))
    TOP_COLORS_COUNT: int = int(os.environ.get("COLOR_ANALYZER_TOP_COLORS_COUNT", "10"))
    COLOR_QUANTIZATION: int = int(os.environ.get("COLOR_ANALYZER_COLOR_QUANTIZATION", "10"))
    INCLUDE_NAMES: bool = bool(int(os.environ.get("COLOR_ANALYZER_INCLUDE_NAMES", "1")))
    INCLUDE_STATS: bool = bool(int(os.environ.get("COLOR_ANALYZER_INCLUDE_STATS", "1")))
    HISTOGRAM_SHARDS: int = int(os.environ.get("COLOR_ANALYZER_HISTOGRAM_SHARDS", "1"))

    # Logging
    LOG_LEVEL: str = os.environ.get("COLOR_ANALYZER_LOG_LEVEL", "INFO")

    # Samples kept per metrics series
    METRICS_MAX_SAMPLES: int = int(os.environ.get("COLOR_ANALYZER_METRICS_MAX_SAMPLES", "1000"))

    # Supported image formats
    SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"}

    @classmethod
    def max_file_bytes(cls) -> int:
        """Upload size cap in bytes."""
        return cls.MAX_FILE_MB * 1024 * 1024

    @classmethod
    def validate_extension(cls, filename: str) -> bool:
        """Validate upload file extension."""
        ext = os.path.splitext(filename or "")[1].lower()
        return ext in cls.SUPPORTED_EXTENSIONS

    @classmethod
    def validate_file_size(cls, size: int) -> bool:
        """Validate upload size."""
        return 0 <= size <= cls.max_file_bytes()


# Global config instance
config = Config()


# camelCase option names accepted from callers of the public API
_OPTION_ALIASES = {
    "maxDimension": "max_dimension",
    "topColorsCount": "top_colors_count",
    "colorQuantization": "color_quantization",
    "includeNames": "include_names",
    "includeStats": "include_stats",
    "histogramShards": "histogram_shards",
}


def is_integer(value: Any) -> bool:
    """True for Python and numpy integers; bools do not count."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def canonical_option_name(key: str) -> str:
    """Map a camelCase option name to its AnalysisOptions field name."""
    return _OPTION_ALIASES.get(key, key)


@dataclass(frozen=True)
class AnalysisOptions:
    """
    Options for a single analysis call.

    Attributes:
        max_dimension: Longer image side is downsampled to at most this many pixels (default 200)
        top_colors_count: Number of ranked colors to return (default 10)
        color_quantization: Bucket edge size per channel; 1 gives an exact histogram (default 10)
        include_names: Attach a canonical color name to every returned color (default True)
        include_stats: Compute aggregate color statistics (default True)
        histogram_shards: Row ranges counted in parallel before a fixed-order merge (default 1)
    """
    max_dimension: int = Config.MAX_DIMENSION
    top_colors_count: int = Config.TOP_COLORS_COUNT
    color_quantization: int = Config.COLOR_QUANTIZATION
    include_names: bool = Config.INCLUDE_NAMES
    include_stats: bool = Config.INCLUDE_STATS
    histogram_shards: int = Config.HISTOGRAM_SHARDS

    def __post_init__(self):
        for name in ("max_dimension", "top_colors_count", "color_quantization", "histogram_shards"):
            value = getattr(self, name)
            if not is_integer(value):
                raise ValidationError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValidationError(f"{name} must be a positive integer, got {value}")
            # numpy integers are stored as plain ints
            object.__setattr__(self, name, int(value))

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]] = None) -> "AnalysisOptions":
        """
        Build options from caller-supplied values.

        Accepts snake_case field names or their camelCase equivalents.
        Unrecognized keys are ignored and missing keys take the defaults.
        """
        if mapping is None:
            return cls()

        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in mapping.items():
            name = canonical_option_name(key)
            if name in known and value is not None:
                values[name] = value
        return cls(**values)

    def with_overrides(self, **changes: Any) -> "AnalysisOptions":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)
