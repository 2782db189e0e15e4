"""
Uniform pixel mutation over every cel storage encoding.
"""

import numpy as np
from typing import Callable

from ase_files import (
    CelChunk,
    RawPixels,
    CompressedPixels,
    LinkedCel,
    PixelBuffer,
    AseCodecError,
    decode_cel_pixels,
    encode_pixels,
)
from data import print_warning

PixelMutator = Callable[[PixelBuffer], None]


def _check_geometry(buffer: PixelBuffer, width: int, height: int) -> None:
    if buffer.pixels.shape[:2] != (height, width):
        raise ValueError(
            f"Pixel mutator changed cel geometry from {width}x{height} "
            f"to {buffer.width}x{buffer.height}"
        )


def transform_cel_pixels(cel_chunk: CelChunk, mutator: PixelMutator) -> bool:
    """Apply mutator once to the fully decoded pixels of a cel.

    - RawPixels: the buffer is the cel's own array, mutated in place.
    - CompressedPixels: decoded, mutated, then re-compressed. Unchanged
      pixels keep the original blob. A codec failure leaves the blob as it
      was and is reported as a skipped cel.
    - LinkedCel: nothing to do, mutator is never called.

    Returns:
        False if the cel was skipped because of a codec error, True otherwise
    """
    cel = cel_chunk.cel

    if isinstance(cel, LinkedCel):
        return True

    if isinstance(cel, RawPixels):
        buffer = decode_cel_pixels(cel)
        mutator(buffer)
        _check_geometry(buffer, cel.width, cel.height)
        cel.pixels = buffer.pixels
        return True

    if isinstance(cel, CompressedPixels):
        try:
            buffer = decode_cel_pixels(cel)
        except AseCodecError as e:
            print_warning(f"Layer {cel_chunk.layer_index}: skipping cel, {e}")
            return False

        original = buffer.pixels.copy()
        mutator(buffer)
        _check_geometry(buffer, cel.width, cel.height)

        if np.array_equal(buffer.pixels, original):
            return True

        try:
            cel.data = encode_pixels(buffer.pixels)
        except AseCodecError as e:
            print_warning(
                f"Layer {cel_chunk.layer_index}: keeping original pixels, {e}"
            )
            return False
        return True

    raise TypeError(f"Unknown cel type: {type(cel).__name__}")
