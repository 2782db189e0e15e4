"""
Aseprite files module for decoding, representing, and encoding .ase/.aseprite sprites.
"""

from .ase_io import extract_ase, generate_ase
from .document import (
    # Document classes
    Color,
    AseHeader,
    Document,
    Frame,
    Chunk,
    LegacyPaletteChunk,
    PaletteChunk,
    PaletteEntry,
    CelChunk,
    Cel,
    RawPixels,
    CompressedPixels,
    LinkedCel,
    OtherChunk,
)
from .pixels import (
    PixelBuffer,
    bytes_per_pixel,
    decode_pixels,
    encode_pixels,
    decode_cel_pixels,
    to_rgba,
    buffer_digest,
)
from .errors import AseFormatError, AseCodecError
from .constants import AseFormat, ChunkType, CelType, ColorDepth

__all__ = [
    # IO functions
    "extract_ase",
    "generate_ase",
    # Document classes
    "Color",
    "AseHeader",
    "Document",
    "Frame",
    "Chunk",
    "LegacyPaletteChunk",
    "PaletteChunk",
    "PaletteEntry",
    "CelChunk",
    "Cel",
    "RawPixels",
    "CompressedPixels",
    "LinkedCel",
    "OtherChunk",
    # Pixel codec
    "PixelBuffer",
    "bytes_per_pixel",
    "decode_pixels",
    "encode_pixels",
    "decode_cel_pixels",
    "to_rgba",
    "buffer_digest",
    # Errors
    "AseFormatError",
    "AseCodecError",
    # Constants
    "AseFormat",
    "ChunkType",
    "CelType",
    "ColorDepth",
]
