"""
Quantized color histogram.

Pixels are collapsed onto a uniform grid of edge ``quantization`` per channel
and counted per bucket. Buckets are keyed by a packed integer
``qR << 16 | qG << 8 | qB`` and kept in first-seen order, which the ranking
stage relies on to break count ties deterministically.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from coloranalyzer.config import is_integer
from coloranalyzer.errors import ValidationError

RGB = Tuple[int, int, int]

# Every step above 255 maps all channel values to bucket 0
_MAX_EFFECTIVE_STEP = 256


def validate_quantization(quantization: int) -> None:
    """Raise ValidationError unless quantization is an integer >= 1."""
    if not is_integer(quantization):
        raise ValidationError(f"color_quantization must be an integer, got {quantization!r}")
    if quantization <= 0:
        raise ValidationError(f"color_quantization must be >= 1, got {quantization}")


def quantize(r: int, g: int, b: int, quantization: int) -> RGB:
    """
    Map an RGB triple to its bucket corner.

    Each channel becomes ``floor(x / Q) * Q``. Idempotent and monotonic per channel.
    """
    validate_quantization(quantization)
    q = int(quantization)
    return (int(r) // q * q, int(g) // q * q, int(b) // q * q)


def pack_key(r: int, g: int, b: int) -> int:
    """Pack a quantized triple into a single integer key."""
    return (int(r) << 16) | (int(g) << 8) | int(b)


def unpack_key(key: int) -> RGB:
    """Inverse of pack_key."""
    return (key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF


@dataclass
class ColorHistogram:
    """Bucket counts in first-seen order plus the number of pixels counted."""
    counts: Dict[int, int] = field(default_factory=dict)
    total_pixels: int = 0
    quantization: int = 1

    def __len__(self) -> int:
        return len(self.counts)

    def buckets(self) -> Iterator[Tuple[RGB, int]]:
        """Yield ((r, g, b), count) in first-seen order."""
        for key, count in self.counts.items():
            yield unpack_key(key), count

    def count_of(self, r: int, g: int, b: int) -> int:
        """Count for the bucket containing the given (unquantized) color."""
        return self.counts.get(pack_key(*quantize(r, g, b, self.quantization)), 0)


def _as_pixel_rows(pixels: np.ndarray, channels: Optional[int]) -> Tuple[np.ndarray, int]:
    """Normalize a buffer to (rows, pixels_per_row, channels) and return its stride."""
    pixels = np.asarray(pixels)

    if pixels.ndim == 3:
        stride = pixels.shape[2]
        if channels is not None and channels != stride:
            raise ValidationError(
                f"Declared channel count {channels} does not match buffer stride {stride}"
            )
    elif pixels.ndim == 2 and channels is None:
        # (height, width) single-channel image
        stride = 1
        pixels = pixels[:, :, np.newaxis]
    elif pixels.ndim in (1, 2):
        if channels is None:
            raise ValidationError("Channel count is required for a flat pixel buffer")
        stride = int(channels)
        if stride < 3:
            raise ValidationError(f"Channel stride {stride} < 3 cannot form an RGB triple")
        flat = pixels.reshape(-1)
        if flat.size % stride != 0:
            raise ValidationError(
                f"Buffer length {flat.size} is not a multiple of channel stride {stride}"
            )
        pixels = flat.reshape(1, -1, stride)
    else:
        raise ValidationError(f"Unsupported pixel buffer shape {pixels.shape}")

    if stride < 3:
        raise ValidationError(f"Channel stride {stride} < 3 cannot form an RGB triple")

    return pixels, stride


def _count_rows(rows: np.ndarray, step: int) -> Dict[int, int]:
    """Histogram of one row range; keys in first-seen (scan) order."""
    rgb = rows[..., :3].reshape(-1, 3).astype(np.uint32)
    if rgb.shape[0] == 0:
        return {}

    quantized = rgb // step * step
    keys = (quantized[:, 0] << 16) | (quantized[:, 1] << 8) | quantized[:, 2]

    unique_keys, first_index, counts = np.unique(keys, return_index=True, return_counts=True)
    order = np.argsort(first_index, kind="stable")
    return {int(unique_keys[i]): int(counts[i]) for i in order}


def merge_histograms(partials: Sequence[Dict[int, int]]) -> Dict[int, int]:
    """
    Merge partial histograms by key-wise count addition.

    Partials must be given in ascending shard order: a key keeps the
    position of the first partial it appears in.
    """
    merged: Dict[int, int] = {}
    for partial in partials:
        for key, count in partial.items():
            merged[key] = merged.get(key, 0) + count
    return merged


def build_histogram(
    pixels: np.ndarray,
    quantization: int,
    channels: Optional[int] = None,
    shards: int = 1,
) -> ColorHistogram:
    """
    Count pixels per quantized bucket in a single sweep.

    Args:
        pixels: (height, width, channels) array, or a flat buffer with ``channels`` given
        quantization: Bucket edge size, >= 1
        channels: Channel stride for flat buffers; only the first three are read
        shards: Number of contiguous row ranges counted on a thread pool

    Returns:
        ColorHistogram whose counts sum to the number of pixels in the buffer

    Raises:
        ValidationError: quantization < 1, shards < 1, or channel stride < 3
    """
    validate_quantization(quantization)
    if shards < 1:
        raise ValidationError(f"histogram_shards must be >= 1, got {shards}")

    rows, _ = _as_pixel_rows(pixels, channels)
    total = int(rows.shape[0] * rows.shape[1])
    step = min(int(quantization), _MAX_EFFECTIVE_STEP)

    shards = max(1, min(shards, rows.shape[0]))
    if shards == 1:
        counts = _count_rows(rows, step)
    else:
        row_ranges: List[np.ndarray] = np.array_split(rows, shards, axis=0)
        with ThreadPoolExecutor(max_workers=shards) as pool:
            # map() yields in submission order, i.e. ascending shard index
            partials = list(pool.map(lambda part: _count_rows(part, step), row_ranges))
        counts = merge_histograms(partials)

    return ColorHistogram(counts=counts, total_pixels=total, quantization=int(quantization))
