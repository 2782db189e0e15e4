"""
Palette map image import.
"""

import numpy as np
from pathlib import Path
from PIL import Image, UnidentifiedImageError


def read_palette_map_image(image_path: Path) -> np.ndarray:
    """Load a flat image (PNG, GIF, ...) as a (height, width, 4) RGBA array.

    Args:
        image_path: Path to the palette map image

    Raises:
        OSError: If the file cannot be read
        ValueError: If Pillow cannot identify the image format
    """
    try:
        with Image.open(image_path) as img:
            if img.mode != "RGBA":
                img = img.convert("RGBA")
            return np.array(img, dtype=np.uint8)
    except UnidentifiedImageError as e:
        raise ValueError(f"Cannot decode palette map image {image_path}: {e}")
