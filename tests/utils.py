"""Common builders and helpers for the test modules."""

import hashlib
import zlib
from pathlib import Path
from typing import List, Sequence

import numpy as np

from ase_files import (
    AseHeader,
    Color,
    ColorDepth,
    ChunkType,
    Document,
    Frame,
    LegacyPaletteChunk,
    PaletteChunk,
    PaletteEntry,
    CelChunk,
    RawPixels,
    CompressedPixels,
    LinkedCel,
    OtherChunk,
    decode_cel_pixels,
    generate_ase,
)
from data import read_file_to_bytes

RED = Color(255, 0, 0, 255)
GREEN = Color(0, 255, 0, 255)
BLUE = Color(0, 0, 255, 255)
BLACK = Color(0, 0, 0, 255)
WHITE = Color(255, 255, 255, 255)
YELLOW = Color(255, 255, 0, 255)
MAGENTA = Color(255, 0, 255, 255)


def rgba_pixels(rows: Sequence[Sequence[Color]]) -> np.ndarray:
    """Build a (height, width, 4) array from rows of colors."""
    return np.array([[tuple(c) for c in row] for row in rows], dtype=np.uint8)


def make_raw_cel_chunk(rows, layer_index: int = 0) -> CelChunk:
    pixels = rgba_pixels(rows)
    height, width = pixels.shape[:2]
    cel = RawPixels(width, height, ColorDepth.RGBA, pixels)
    return CelChunk(layer_index=layer_index, x=0, y=0, opacity=255, z_index=0, cel=cel)


def make_compressed_cel_chunk(rows, layer_index: int = 0) -> CelChunk:
    pixels = rgba_pixels(rows)
    height, width = pixels.shape[:2]
    cel = CompressedPixels(width, height, ColorDepth.RGBA, zlib.compress(pixels.tobytes()))
    return CelChunk(layer_index=layer_index, x=0, y=0, opacity=255, z_index=0, cel=cel)


def make_grayscale_cel_chunk(values: Sequence[Sequence[int]], layer_index: int = 0) -> CelChunk:
    """Grayscale cel with fully opaque pixels."""
    gray = np.array(values, dtype=np.uint8)
    pixels = np.stack([gray, np.full_like(gray, 255)], axis=-1)
    height, width = gray.shape
    cel = RawPixels(width, height, ColorDepth.GRAYSCALE, pixels)
    return CelChunk(layer_index=layer_index, x=0, y=0, opacity=255, z_index=0, cel=cel)


def make_indexed_cel_chunk(indices: Sequence[Sequence[int]], layer_index: int = 0) -> CelChunk:
    pixels = np.array(indices, dtype=np.uint8)[:, :, np.newaxis]
    height, width = pixels.shape[:2]
    cel = CompressedPixels(width, height, ColorDepth.INDEXED, zlib.compress(pixels.tobytes()))
    return CelChunk(layer_index=layer_index, x=0, y=0, opacity=255, z_index=0, cel=cel)


def make_linked_cel_chunk(frame_position: int, layer_index: int = 0) -> CelChunk:
    return CelChunk(
        layer_index=layer_index,
        x=3,
        y=-2,
        opacity=200,
        z_index=0,
        cel=LinkedCel(frame_position=frame_position),
    )


def make_palette_chunk(colors: Sequence[Color], names=None) -> PaletteChunk:
    names = names or [None] * len(colors)
    return PaletteChunk(
        palette_size=len(colors),
        first_index=0,
        last_index=len(colors) - 1,
        entries=[PaletteEntry(color=c, name=n) for c, n in zip(colors, names)],
    )


def make_legacy_palette_chunk(colors: Sequence[Color], v11: bool = False) -> LegacyPaletteChunk:
    """Single-packet old palette chunk; colors are written as given (no scaling)."""
    raw = bytearray([1, 0, 0, len(colors)])
    for c in colors:
        raw.extend([c.red, c.green, c.blue])
    chunk_type = ChunkType.OLD_PALETTE_11 if v11 else ChunkType.OLD_PALETTE_4
    packets = [(0, [(c.red, c.green, c.blue) for c in colors])]
    return LegacyPaletteChunk(chunk_type=chunk_type, packets=packets, raw=bytes(raw))


def make_layer_chunk(name: str = "Layer 1") -> OtherChunk:
    encoded = name.encode("utf-8")
    data = bytes(16) + len(encoded).to_bytes(2, "little") + encoded
    return OtherChunk(chunk_type=ChunkType.LAYER, data=data)


def make_document(
    *frames: List, color_depth: int = ColorDepth.RGBA, width: int = 16, height: int = 16
) -> Document:
    """Build a document with one frame per list of chunks."""
    document = Document(
        AseHeader(width=width, height=height, color_depth=color_depth, num_colors=256)
    )
    for chunks in frames:
        document.frames.append(Frame(duration=100, chunks=list(chunks)))
    return document


def write_document(document: Document, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(generate_ase(document))
    return path


def pixel_rows(cel_chunk: CelChunk) -> List[List[Color]]:
    """Decoded RGBA pixels of a cel as rows of colors."""
    pixels = decode_cel_pixels(cel_chunk.cel).pixels
    return [[Color(*(int(v) for v in px)) for px in row] for row in pixels]


def cel_chunks(document: Document) -> List[CelChunk]:
    return [c for _, c in document.iter_chunks() if isinstance(c, CelChunk)]


def get_file_checksum(file_path: Path) -> str:
    """Get SHA256 checksum of a file."""
    data = read_file_to_bytes(file_path)
    return hashlib.sha256(data).hexdigest()
