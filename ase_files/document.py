"""
Document data structures for representing decoded Aseprite files.

A Document is an ordered list of frames, each frame an ordered list of
chunks. Chunk and Cel are closed unions: every consumer handles each
variant explicitly and raises TypeError on anything else.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Tuple, Union

from .constants import ChunkType, ColorDepth, CEL_RESERVED_LEN, PALETTE_RESERVED_LEN


class Color(NamedTuple):
    """RGBA color. Equality and hashing cover all four channels."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def __str__(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}{self.alpha:02x}"


@dataclass
class AseHeader:
    """128-byte file header. file_size and num_frames are recomputed on write."""

    file_size: int = 0
    num_frames: int = 0
    width: int = 0
    height: int = 0
    color_depth: int = ColorDepth.RGBA
    flags: int = 1
    speed: int = 100
    reserved0: int = 0
    reserved1: int = 0
    transparent_index: int = 0
    ignored: bytes = bytes(3)
    num_colors: int = 0
    pixel_width: int = 1
    pixel_height: int = 1
    grid_x: int = 0
    grid_y: int = 0
    grid_width: int = 16
    grid_height: int = 16
    reserved: bytes = bytes(84)


@dataclass
class LegacyPaletteChunk:
    """Deprecated palette chunk (0x0004 or 0x0011). Read-only: raw bytes are re-emitted."""

    chunk_type: int
    packets: List[Tuple[int, List[Tuple[int, int, int]]]] = field(default_factory=list)
    raw: bytes = b""

    @property
    def is_v11(self) -> bool:
        return self.chunk_type == ChunkType.OLD_PALETTE_11

    def colors(self) -> Dict[int, Color]:
        """Expand packets into index -> color (0x0011 channels are scaled from 0-63)."""
        result = {}
        index = 0
        for skip, colors in self.packets:
            index += skip
            for r, g, b in colors:
                if self.is_v11:
                    r, g, b = ((c << 2) | (c >> 4) for c in (r, g, b))
                result[index] = Color(r, g, b, 255)
                index += 1
        return result


@dataclass
class PaletteEntry:
    color: Color
    flags: int = 0
    name: Optional[str] = None


@dataclass
class PaletteChunk:
    """Palette chunk (0x2019): entries cover indices first_index..last_index."""

    palette_size: int = 0
    first_index: int = 0
    last_index: int = 0
    reserved: bytes = bytes(PALETTE_RESERVED_LEN)
    entries: List[PaletteEntry] = field(default_factory=list)


@dataclass
class RawPixels:
    """Uncompressed cel image. pixels has shape (height, width, bytes_per_pixel)."""

    width: int
    height: int
    color_depth: int
    pixels: np.ndarray


@dataclass
class CompressedPixels:
    """zlib-compressed cel image with its declared geometry."""

    width: int
    height: int
    color_depth: int
    data: bytes


@dataclass
class LinkedCel:
    """Cel reusing the pixels of the cel on the same layer in another frame."""

    frame_position: int


Cel = Union[RawPixels, CompressedPixels, LinkedCel]


@dataclass
class CelChunk:
    layer_index: int
    x: int
    y: int
    opacity: int
    z_index: int
    cel: Cel
    reserved: bytes = bytes(CEL_RESERVED_LEN)


@dataclass
class OtherChunk:
    """Any chunk this library does not interpret, kept as opaque bytes."""

    chunk_type: int
    data: bytes = b""


Chunk = Union[LegacyPaletteChunk, PaletteChunk, CelChunk, OtherChunk]


@dataclass
class Frame:
    duration: int = 100
    chunks: List[Chunk] = field(default_factory=list)
    reserved: bytes = bytes(2)
    # Files written by old Aseprite versions leave the DWORD chunk count at 0
    legacy_chunk_count: bool = False


class Document:
    """Decoded Aseprite file."""

    def __init__(self, header: Optional[AseHeader] = None):
        self.header = header if header is not None else AseHeader()
        self.frames: List[Frame] = []

    def iter_chunks(self):
        """Yield (frame_index, chunk) in document order."""
        for frame_idx, frame in enumerate(self.frames):
            for chunk in frame.chunks:
                yield frame_idx, chunk

    def palette_array(self) -> np.ndarray:
        """Resolve the document palette into a (256, 4) RGBA array.

        Palette chunks win over legacy palette chunks; legacy chunks are only
        consulted when the file has no palette chunk at all.
        """
        palette = np.zeros((256, 4), dtype=np.uint8)

        palette_chunks = [c for _, c in self.iter_chunks() if isinstance(c, PaletteChunk)]
        if palette_chunks:
            for chunk in palette_chunks:
                for offset, entry in enumerate(chunk.entries):
                    index = chunk.first_index + offset
                    if index < 256:
                        palette[index] = entry.color
        else:
            for _, chunk in self.iter_chunks():
                if isinstance(chunk, LegacyPaletteChunk):
                    for index, color in chunk.colors().items():
                        if index < 256:
                            palette[index] = color

        return palette
