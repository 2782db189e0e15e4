"""
Palette swap module for remapping colors across Aseprite documents.

This module provides the color map extraction, the per-document remap and
the batch driver over files and folders.
"""

from .color_map import (
    ColorMap,
    extract_color_map,
    color_map_from_rgba,
    load_color_map,
)

from .pixel_transform import transform_cel_pixels, PixelMutator

from .remap import remap_document, remap_palette_chunk, RemapStats

from .batch import (
    run_palette_swap,
    swap_single_file,
    find_ase_files,
    is_ase_file,
    BatchReport,
    OutputCollisionError,
)

__all__ = [
    # Color map
    "ColorMap",
    "extract_color_map",
    "color_map_from_rgba",
    "load_color_map",
    # Pixel transform
    "transform_cel_pixels",
    "PixelMutator",
    # Remap
    "remap_document",
    "remap_palette_chunk",
    "RemapStats",
    # Batch
    "run_palette_swap",
    "swap_single_file",
    "find_ase_files",
    "is_ase_file",
    "BatchReport",
    "OutputCollisionError",
]
