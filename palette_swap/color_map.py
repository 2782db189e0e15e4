"""
Color map extraction from palette map reference images.

A palette map is an image at least two pixels tall: each column maps the
color on the first row to the color on the second row.
"""

import numpy as np
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional

from ase_files import (
    Color,
    Document,
    CelChunk,
    RawPixels,
    CompressedPixels,
    LinkedCel,
    ColorDepth,
    extract_ase,
    decode_cel_pixels,
    to_rgba,
)
from data import ASE_EXTENSIONS, PALETTE_MAP_FROM_ROW, PALETTE_MAP_TO_ROW, print_warning
from data import config
from external_files import read_palette_map_image


def _pack_rgba(pixels: np.ndarray) -> np.ndarray:
    """Pack (..., 4) uint8 RGBA pixels into uint32 codes."""
    p = pixels.astype(np.uint32)
    return (p[..., 0] << 24) | (p[..., 1] << 16) | (p[..., 2] << 8) | p[..., 3]


def _as_color(value) -> Color:
    return Color(*(int(c) for c in value))


def _pack_color(color: Color) -> int:
    return (color.red << 24) | (color.green << 16) | (color.blue << 8) | color.alpha


class ColorMap:
    """Immutable source color -> destination color table.

    Keys match on all four channels. Built once per job and shared read-only
    by every document remapped with it.
    """

    def __init__(self, mapping: Optional[Mapping[Color, Color]] = None):
        self._table: Dict[Color, Color] = {
            _as_color(src): _as_color(dst) for src, dst in (mapping or {}).items()
        }
        # Identity entries never change a pixel, so the vectorised path skips them
        changing = [(s, d) for s, d in self._table.items() if s != d]
        self._src_codes = np.array([_pack_color(s) for s, _ in changing], dtype=np.uint32)
        self._dst_rows = np.array([tuple(d) for _, d in changing], dtype=np.uint8).reshape(-1, 4)

    def get(self, color: Color, default: Optional[Color] = None) -> Optional[Color]:
        return self._table.get(color, default)

    def __contains__(self, color) -> bool:
        return color in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[Color]:
        return iter(self._table)

    def __eq__(self, other) -> bool:
        if isinstance(other, ColorMap):
            return self._table == other._table
        return NotImplemented

    def __repr__(self) -> str:
        return f"ColorMap({len(self._table)} entries)"

    def items(self):
        return self._table.items()

    def is_empty(self) -> bool:
        return not self._table

    def map_color(self, color: Color) -> Color:
        """Mapped value of color, or color itself when it is not a key."""
        return self._table.get(color, color)

    def apply_to_rgba(self, pixels: np.ndarray) -> int:
        """Remap a (height, width, 4) RGBA array in place.

        Every mask is computed against the original pixel values, so a table
        holding both A -> B and B -> C never maps A to C.

        Returns:
            Number of pixels whose value changed
        """
        if len(self._src_codes) == 0 or pixels.size == 0:
            return 0

        codes = _pack_rgba(pixels)
        present = np.isin(self._src_codes, codes)

        changed = 0
        for src_code, dst in zip(self._src_codes[present], self._dst_rows[present]):
            mask = codes == src_code
            pixels[mask] = dst
            changed += int(np.count_nonzero(mask))
        return changed


def _add_column_pairs(table: Dict[Color, Color], rgba: np.ndarray) -> None:
    """Insert row 0 -> row 1 for every column of an RGBA image."""
    from_row = rgba[PALETTE_MAP_FROM_ROW]
    to_row = rgba[PALETTE_MAP_TO_ROW]
    for x in range(rgba.shape[1]):
        src = Color(*(int(c) for c in from_row[x]))
        dst = Color(*(int(c) for c in to_row[x]))
        table[src] = dst


def _log_color_map(color_map: ColorMap, source: str) -> None:
    print(f"[INFO] Palette map {source}: {len(color_map)} color(s)")
    for src, dst in color_map.items():
        print(f"  {src} -> {dst}")
    print()


def color_map_from_rgba(rgba: np.ndarray, source: str = "image") -> ColorMap:
    """Build a color map from a single (height, width, 4) RGBA image."""
    table: Dict[Color, Color] = {}
    height, width = rgba.shape[:2]
    if width >= 1 and height >= 2:
        _add_column_pairs(table, rgba)
    color_map = ColorMap(table)
    _log_color_map(color_map, source)
    return color_map


def extract_color_map(document: Document, source: str = "document") -> ColorMap:
    """Build a color map from every usable cel of a reference document.

    Cels narrower than one pixel or shorter than two rows are skipped, as
    are linked cels. Later cels overwrite keys set by earlier ones.

    Raises:
        AseCodecError: If a cel's pixels cannot be decoded
    """
    table: Dict[Color, Color] = {}
    palette = None

    for frame_idx, chunk in document.iter_chunks():
        if not isinstance(chunk, CelChunk):
            continue

        cel = chunk.cel
        if isinstance(cel, LinkedCel):
            continue
        if not isinstance(cel, (RawPixels, CompressedPixels)):
            raise TypeError(f"Unknown cel type: {type(cel).__name__}")

        if cel.width < 1 or cel.height < 2:
            if config.DEBUG:
                print(
                    f"[DEBUG] Frame {frame_idx} layer {chunk.layer_index}: "
                    f"{cel.width}x{cel.height} cel too small for a palette map\n"
                )
            continue

        buffer = decode_cel_pixels(cel)
        transparent_index = None
        if buffer.color_depth == ColorDepth.INDEXED:
            if palette is None:
                palette = document.palette_array()
            transparent_index = document.header.transparent_index

        _add_column_pairs(table, to_rgba(buffer, palette, transparent_index))

    color_map = ColorMap(table)
    _log_color_map(color_map, source)
    return color_map


def load_color_map(path: Path) -> ColorMap:
    """Read a palette map file and build its color map.

    Aseprite files are decoded and every cel contributes; any other file is
    opened as a flat image with Pillow.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file cannot be decoded
    """
    if path.suffix.lower() in ASE_EXTENSIONS:
        return extract_color_map(extract_ase(path), source=path.name)
    else:
        rgba = read_palette_map_image(path)
        if rgba.shape[0] < 2:
            print_warning(f"Palette map image has fewer than two rows: {path}")
        return color_map_from_rgba(rgba, source=path.name)
