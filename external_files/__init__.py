"""
External files utility module for palette map images and palette exports.
"""

from .images import read_palette_map_image
from .palette import write_palette

__all__ = [
    "read_palette_map_image",
    "write_palette",
]
