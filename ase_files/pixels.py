"""
Cel pixel codec: zlib (de)compression of pixel buffers and RGBA expansion.
"""

import zlib
import numpy as np
import xxhash
from dataclasses import dataclass
from typing import Optional

from data import ZLIB_COMPRESSION_LEVEL
from .constants import ColorDepth
from .document import RawPixels, CompressedPixels
from .errors import AseCodecError, AseFormatError


@dataclass
class PixelBuffer:
    """Decoded pixels of one cel, shape (height, width, bytes_per_pixel)."""

    color_depth: int
    pixels: np.ndarray

    @property
    def is_rgba(self) -> bool:
        return self.color_depth == ColorDepth.RGBA

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


def bytes_per_pixel(color_depth: int) -> int:
    try:
        return ColorDepth.BYTES_PER_PIXEL[color_depth]
    except KeyError:
        raise AseFormatError(f"Unsupported color depth: {color_depth}")


def pixels_from_bytes(raw: bytes, width: int, height: int, color_depth: int) -> np.ndarray:
    """Shape raw pixel bytes into a writable (height, width, bpp) array."""
    bpp = bytes_per_pixel(color_depth)
    expected = width * height * bpp
    if len(raw) != expected:
        raise AseCodecError(
            f"Pixel data has {len(raw)} bytes, expected {expected} "
            f"for {width}x{height} at {color_depth}bpp"
        )
    return np.frombuffer(raw, dtype=np.uint8).reshape(height, width, bpp).copy()


def decode_pixels(data: bytes, width: int, height: int, color_depth: int) -> np.ndarray:
    try:
        raw = zlib.decompress(data)
    except zlib.error as e:
        raise AseCodecError(f"Could not decompress cel pixels: {e}")
    return pixels_from_bytes(raw, width, height, color_depth)


def encode_pixels(pixels: np.ndarray, level: int = ZLIB_COMPRESSION_LEVEL) -> bytes:
    try:
        return zlib.compress(np.ascontiguousarray(pixels, dtype=np.uint8).tobytes(), level)
    except zlib.error as e:
        raise AseCodecError(f"Could not compress cel pixels: {e}")


def decode_cel_pixels(cel) -> PixelBuffer:
    """Materialize the pixels of a raw or compressed cel.

    Raw cels share their array with the returned buffer, so mutating the
    buffer mutates the cel.
    """
    if isinstance(cel, RawPixels):
        return PixelBuffer(cel.color_depth, cel.pixels)
    if isinstance(cel, CompressedPixels):
        pixels = decode_pixels(cel.data, cel.width, cel.height, cel.color_depth)
        return PixelBuffer(cel.color_depth, pixels)
    raise TypeError(f"Cel has no pixels of its own: {type(cel).__name__}")


def to_rgba(
    buffer: PixelBuffer,
    palette: Optional[np.ndarray] = None,
    transparent_index: Optional[int] = None,
) -> np.ndarray:
    """Expand a pixel buffer to a (height, width, 4) RGBA array.

    Grayscale pixels become (v, v, v, a). Indexed pixels are resolved through
    palette (a (256, 4) array); the transparent index maps to (0, 0, 0, 0).
    """
    pixels = buffer.pixels
    if buffer.color_depth == ColorDepth.RGBA:
        return pixels

    if buffer.color_depth == ColorDepth.GRAYSCALE:
        value = pixels[:, :, 0]
        alpha = pixels[:, :, 1]
        return np.stack([value, value, value, alpha], axis=-1)

    if buffer.color_depth == ColorDepth.INDEXED:
        if palette is None:
            palette = np.zeros((256, 4), dtype=np.uint8)
        indices = pixels[:, :, 0]
        rgba = palette[indices].copy()
        if transparent_index is not None:
            rgba[indices == transparent_index] = 0
        return rgba

    raise AseFormatError(f"Unsupported color depth: {buffer.color_depth}")


def buffer_digest(buffer: PixelBuffer) -> str:
    """xxh3_64 digest of the decoded pixels, independent of compression."""
    return xxhash.xxh3_64(np.ascontiguousarray(buffer.pixels).tobytes()).hexdigest()
