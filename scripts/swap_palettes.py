#!/usr/bin/env python3
"""
Swap palettes of Aseprite file(s) using a palette map.

Usage:
    python scripts/swap_palettes.py <palette_map> <ase_file> <output_file>    # Single file
    python scripts/swap_palettes.py <palette_map> <folder> <output_folder>    # All files in folder tree
"""

import sys
import argparse
from pathlib import Path

# Add parent directory to path for imports
script_dir = Path(__file__).parent
if str(script_dir.parent) not in sys.path:
    sys.path.insert(0, str(script_dir.parent))

from palette_swap import load_color_map, run_palette_swap, OutputCollisionError
from data import print_error


def main():
    parser = argparse.ArgumentParser(
        description="Swap palettes of Aseprite file(s) using a palette map"
    )
    parser.add_argument("palette_map", help="Palette map file")
    parser.add_argument("input", help="Aseprite file or folder containing Aseprite files")
    parser.add_argument("output", help="Output file or folder (must not exist)")

    args = parser.parse_args()

    palette_map = Path(args.palette_map).resolve()
    input_path = Path(args.input).resolve()
    output_path = Path(args.output).resolve()

    if output_path.exists():
        print_error(f"Output path already exists: {output_path}")
        sys.exit(1)

    try:
        color_map = load_color_map(palette_map)
    except Exception as e:
        print_error(f"Could not load palette map {palette_map}: {e}")
        sys.exit(1)

    try:
        report = run_palette_swap(color_map, input_path, output_path)
    except (OutputCollisionError, FileNotFoundError) as e:
        print_error(str(e))
        sys.exit(1)

    sys.exit(0 if report.ok else 1)


if __name__ == "__main__":
    main()
