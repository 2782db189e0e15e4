"""
In-place palette remapping of decoded Aseprite documents.
"""

from dataclasses import dataclass

from ase_files import (
    Document,
    LegacyPaletteChunk,
    PaletteChunk,
    CelChunk,
    OtherChunk,
    LinkedCel,
    PixelBuffer,
)
from data import config
from .color_map import ColorMap
from .pixel_transform import transform_cel_pixels


@dataclass
class RemapStats:
    """Counters collected while remapping one document."""

    palette_entries_changed: int = 0
    pixels_changed: int = 0
    cels_remapped: int = 0
    linked_cels: int = 0
    non_rgba_cels: int = 0
    failed_cels: int = 0
    legacy_palettes: int = 0

    def summary(self) -> str:
        parts = [
            f"{self.palette_entries_changed} palette entr(ies)",
            f"{self.pixels_changed} pixel(s) in {self.cels_remapped} cel(s)",
        ]
        if self.failed_cels:
            parts.append(f"{self.failed_cels} cel(s) skipped on codec errors")
        return ", ".join(parts)


def remap_palette_chunk(chunk: PaletteChunk, color_map: ColorMap) -> int:
    """Replace every palette entry whose color is a key. Returns the count replaced."""
    changed = 0
    for entry in chunk.entries:
        mapped = color_map.get(entry.color)
        if mapped is not None and mapped != entry.color:
            entry.color = mapped
            changed += 1
    return changed


def _remap_cel(chunk: CelChunk, color_map: ColorMap, stats: RemapStats, frame_idx: int) -> None:
    if isinstance(chunk.cel, LinkedCel):
        # The linked frame's own cel carries the pixels and is remapped there
        stats.linked_cels += 1
        return

    changed = []

    def mutator(buffer: PixelBuffer) -> None:
        if not buffer.is_rgba:
            stats.non_rgba_cels += 1
            if config.DEBUG:
                print(
                    f"[DEBUG] Frame {frame_idx} layer {chunk.layer_index}: "
                    f"{buffer.color_depth}bpp cel left unchanged\n"
                )
            return
        changed.append(color_map.apply_to_rgba(buffer.pixels))

    if not transform_cel_pixels(chunk, mutator):
        stats.failed_cels += 1
    elif changed:
        stats.pixels_changed += changed[0]
        stats.cels_remapped += 1


def remap_document(document: Document, color_map: ColorMap) -> RemapStats:
    """Rewrite every mapped color of a document in place.

    Palette chunks and RGBA cels are remapped; legacy palette chunks, linked
    cels, non-RGBA cels and other chunks are left untouched. A codec failure
    on one cel does not stop the others.
    """
    stats = RemapStats()

    for frame_idx, chunk in document.iter_chunks():
        if isinstance(chunk, LegacyPaletteChunk):
            stats.legacy_palettes += 1
            version = 11 if chunk.is_v11 else 4
            print(
                f"[INFO] Found old palette chunk {version} in frame {frame_idx}, "
                f"leaving it unchanged"
            )
        elif isinstance(chunk, PaletteChunk):
            stats.palette_entries_changed += remap_palette_chunk(chunk, color_map)
        elif isinstance(chunk, CelChunk):
            _remap_cel(chunk, color_map, stats, frame_idx)
        elif isinstance(chunk, OtherChunk):
            continue
        else:
            raise TypeError(f"Unknown chunk type: {type(chunk).__name__}")

    return stats
