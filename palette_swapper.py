#!/usr/bin/env python3
"""
Aseprite palette swapper.

Usage:
    python palette_swapper.py swap <palette_map> <input> <output>
    python palette_swapper.py dump <ase_file> [--palette-out palette.pal]

The palette map is an .ase/.aseprite file or a flat image whose first row
holds the source colors and whose second row holds, column by column, the
colors they are replaced with. <input> is a single file or a folder searched
recursively for .ase/.aseprite files; <output> must not exist yet.
"""

import sys
import argparse
from pathlib import Path

from ase_files import (
    extract_ase,
    LegacyPaletteChunk,
    PaletteChunk,
    CelChunk,
    OtherChunk,
    RawPixels,
    CompressedPixels,
    LinkedCel,
    AseCodecError,
    decode_cel_pixels,
    buffer_digest,
)
from data import config, CURRENT_VERSION, SEPARATOR_LINE_LENGTH, print_error
from external_files import write_palette
from palette_swap import load_color_map, run_palette_swap, OutputCollisionError


def swap_command(args) -> int:
    palette_map = Path(args.palette_map)
    input_path = Path(args.input)
    output_path = Path(args.output)

    if output_path.exists():
        print_error(f"Output path already exists: {output_path}")
        return 1

    try:
        color_map = load_color_map(palette_map)
    except Exception as e:
        print_error(f"Could not load palette map {palette_map}: {e}")
        return 1

    if color_map.is_empty():
        print("[INFO] Palette map is empty, files will be copied unchanged")

    try:
        report = run_palette_swap(color_map, input_path, output_path)
    except (OutputCollisionError, FileNotFoundError) as e:
        print_error(str(e))
        return 1

    return 0 if report.ok else 1


def _describe_cel(chunk: CelChunk) -> str:
    cel = chunk.cel
    if isinstance(cel, LinkedCel):
        return f"linked to frame {cel.frame_position}"

    if isinstance(cel, RawPixels):
        kind = "raw"
    elif isinstance(cel, CompressedPixels):
        kind = "compressed"
    else:
        raise TypeError(f"Unknown cel type: {type(cel).__name__}")

    try:
        digest = buffer_digest(decode_cel_pixels(cel))
    except AseCodecError as e:
        digest = f"undecodable ({e})"
    return f"{kind} {cel.width}x{cel.height} {cel.color_depth}bpp xxh3={digest}"


def dump_command(args) -> int:
    ase_path = Path(args.file)

    try:
        document = extract_ase(ase_path)
    except Exception as e:
        print_error(f"Could not read {ase_path}: {e}")
        return 1

    header = document.header
    print("=" * SEPARATOR_LINE_LENGTH)
    print(f"[INFO] File: {ase_path}")
    print(f"[INFO] Size: {header.width}x{header.height}, {header.color_depth}bpp")
    print(f"[INFO] Frames: {len(document.frames)}")
    print(f"[INFO] Colors: {header.num_colors}, transparent index: {header.transparent_index}")
    print("=" * SEPARATOR_LINE_LENGTH)

    for frame_idx, frame in enumerate(document.frames):
        print(f"\nFrame {frame_idx}: {len(frame.chunks)} chunk(s), {frame.duration} ms")
        for chunk in frame.chunks:
            if isinstance(chunk, LegacyPaletteChunk):
                print(f"  Found old palette chunk {11 if chunk.is_v11 else 4}")
            elif isinstance(chunk, PaletteChunk):
                print(
                    f"  Found palette chunk: indices {chunk.first_index}..{chunk.last_index} "
                    f"of {chunk.palette_size}"
                )
                for offset, entry in enumerate(chunk.entries):
                    name = f" {entry.name}" if entry.name else ""
                    print(f"    {chunk.first_index + offset:3d}: {entry.color}{name}")
            elif isinstance(chunk, CelChunk):
                print(f"  Cel on layer {chunk.layer_index}: {_describe_cel(chunk)}")
            elif isinstance(chunk, OtherChunk):
                if config.DEBUG:
                    print(f"  Chunk 0x{chunk.chunk_type:04X}: {len(chunk.data)} bytes")
            else:
                raise TypeError(f"Unknown chunk type: {type(chunk).__name__}")

    if args.palette_out:
        palette_path = Path(args.palette_out)
        count = write_palette(document, palette_path)
        print(f"\n[OK] {count} color(s) saved to: {palette_path}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Swap palette colors across Aseprite files"
    )
    parser.add_argument("--version", action="version", version=CURRENT_VERSION)
    parser.add_argument(
        "--debug", action="store_true", help="Print extra diagnostic output"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    swap = subparsers.add_parser(
        "swap", help="Remap colors of a file or folder using a palette map"
    )
    swap.add_argument("palette_map", help="Palette map (.ase/.aseprite or image file)")
    swap.add_argument("input", help="Aseprite file or folder to process")
    swap.add_argument("output", help="Output file or folder (must not exist)")
    swap.set_defaults(func=swap_command)

    dump = subparsers.add_parser("dump", help="Print the chunk structure of a file")
    dump.add_argument("file", help="Aseprite file to inspect")
    dump.add_argument("--palette-out", help="Export the palette as JASC-PAL")
    dump.set_defaults(func=dump_command)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        config.DEBUG = True
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
