"""
Color Analyzer Imaging Utilities
Image decoding, downsampling, and upload validation.
"""
import io
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from coloranalyzer.config import config
from coloranalyzer.errors import DecodeError, ImageIOError, UploadValidationError, ValidationError
from coloranalyzer.schemas import ImageInfo

PathLike = Union[str, Path]

# Modes kept as decoded; everything else is converted to one of them
_NATIVE_MODES = {"L", "LA", "RGB", "RGBA"}
_GRAYSCALE_MODES = {"1", "I", "I;16", "I;16B", "I;16L", "I;16N", "F"}


@dataclass
class PixelBuffer:
    """Decoded (and possibly downsampled) pixels with source metadata."""
    pixels: np.ndarray
    info: ImageInfo

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


def _normalize_mode(image: Image.Image) -> Image.Image:
    """Convert exotic Pillow modes to L, LA, RGB or RGBA."""
    mode = image.mode
    if mode in _NATIVE_MODES:
        return image
    if mode == "P":
        return image.convert("RGBA" if "transparency" in image.info else "RGB")
    if mode in ("PA", "RGBa"):
        return image.convert("RGBA")
    if mode == "La":
        return image.convert("LA")
    if mode in _GRAYSCALE_MODES:
        return image.convert("L")
    return image.convert("RGB")


def decode_image(data: bytes) -> Tuple[np.ndarray, ImageInfo]:
    """
    Decode image bytes into a (height, width, channels) uint8 array.

    Single-channel images stay single-channel; no RGB expansion happens here.

    Raises:
        DecodeError: If Pillow cannot interpret the bytes as an image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            image_format = image.format.lower() if image.format else None
            width, height = image.size
            pixels = np.asarray(_normalize_mode(image), dtype=np.uint8)
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to decode image: {e}") from e

    if pixels.ndim == 2:
        pixels = pixels[:, :, np.newaxis]

    info = ImageInfo(
        width=width,
        height=height,
        format=image_format,
        channels=int(pixels.shape[2]),
        byte_size=len(data),
    )
    return pixels, info


def target_size(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """
    Dimensions with the longer side capped at max_dimension, aspect ratio kept.

    Returns the input size unchanged when it already fits.
    """
    if max_dimension <= 0:
        raise ValidationError(f"max_dimension must be a positive integer, got {max_dimension}")
    if width <= max_dimension and height <= max_dimension:
        return width, height

    if width > height:
        new_height = int(math.floor(height * max_dimension / width + 0.5))
        return max_dimension, max(1, new_height)
    new_width = int(math.floor(width * max_dimension / height + 0.5))
    return max(1, new_width), max_dimension


def resize_long_edge(pixels: np.ndarray, max_dimension: int) -> np.ndarray:
    """
    Downsample so the longest edge is at most max_dimension pixels.

    Args:
        pixels: (height, width, channels) uint8 array
        max_dimension: Maximum edge size

    Returns:
        Resized (height, width, channels) array; the input itself when it fits
    """
    height, width = pixels.shape[:2]
    new_width, new_height = target_size(width, height, max_dimension)
    if (new_width, new_height) == (width, height):
        return pixels

    channels = pixels.shape[2]
    # INTER_AREA for downscaling (better quality)
    resized = cv2.resize(
        np.ascontiguousarray(pixels), (new_width, new_height), interpolation=cv2.INTER_AREA
    )
    # OpenCV drops the trailing axis of single-channel images
    return resized.reshape(new_height, new_width, channels)


def read_image_bytes(path: PathLike) -> bytes:
    """
    Read an image file from disk.

    Raises:
        ImageIOError: Missing or unreadable file
    """
    path = Path(path)
    if not path.is_file():
        raise ImageIOError(f"File not found: {path}")
    try:
        return path.read_bytes()
    except OSError as e:
        raise ImageIOError(f"Failed to read file {path}: {e}") from e


def load_pixels(path: PathLike, max_dimension: int) -> PixelBuffer:
    """
    Decode an image file and downsample it for analysis.

    ImageInfo keeps the original (not resized) width and height.
    """
    pixels, info = decode_image(read_image_bytes(path))
    return PixelBuffer(pixels=resize_long_edge(pixels, max_dimension), info=info)


def validate_upload_filename(filename: str) -> None:
    """
    Validate upload extension.

    Raises:
        UploadValidationError: Missing filename or unsupported extension
    """
    if not filename:
        raise UploadValidationError("No image file provided")
    if not config.validate_extension(filename):
        raise UploadValidationError(
            f"Only image files are allowed! Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}"
        )


def validate_upload_size(size: int) -> None:
    """
    Validate upload size against the configured cap.

    Raises:
        UploadValidationError: Empty or oversized upload
    """
    if size == 0:
        raise UploadValidationError("Uploaded file is empty")
    if not config.validate_file_size(size):
        raise UploadValidationError(f"File too large. Maximum size: {config.MAX_FILE_MB}MB")


def save_upload(data: bytes, filename: str, upload_dir: PathLike = None) -> Path:
    """
    Persist uploaded bytes under the upload directory.

    Raises:
        ImageIOError: Directory or file not writable
    """
    directory = Path(upload_dir or config.UPLOAD_DIR)
    target = directory / filename
    try:
        directory.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as e:
        raise ImageIOError(f"Failed to store upload {filename}: {e}") from e
    return target
