"""
JASC-PAL palette writing.
"""

import numpy as np
from pathlib import Path
from ase_files import Document
from data import write_bytes_to_file


def write_palette(document: Document, output_path: Path) -> int:
    """Export a document's palette to JASC-PAL format.

    Colors are written up to the header's color count (256 when unset), with
    their alpha as the fourth value.

    Args:
        document: Document whose palette is exported
        output_path: Path to output palette file

    Returns:
        Number of colors written
    """
    palette = document.palette_array()
    num_colors = document.header.num_colors or 256
    num_colors = min(num_colors, 256)
    colors = palette[:num_colors].astype(np.uint8)

    lines = ["JASC-PAL", "0100", str(num_colors)]
    for r, g, b, a in colors:
        lines.append(f"{r} {g} {b} {a}")

    content = "\n".join(lines) + "\n"
    write_bytes_to_file(output_path, content.encode("ascii"))
    return num_colors
