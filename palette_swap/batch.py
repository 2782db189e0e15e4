"""
Batch palette swapping over a single Aseprite file or a directory tree.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from ase_files import extract_ase, generate_ase
from data import (
    ASE_EXTENSIONS,
    SEPARATOR_LINE_LENGTH,
    print_error,
    print_warning,
)
from .color_map import ColorMap
from .remap import remap_document


class OutputCollisionError(FileExistsError):
    """The output path already exists."""


@dataclass
class BatchReport:
    """Outcome of one palette swap run."""

    succeeded: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed


def is_ase_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in ASE_EXTENSIONS


def find_ase_files(input_dir: Path) -> List[Path]:
    """Recursively list every Aseprite file under input_dir, sorted.

    The result is a complete list: callers write outputs only after the walk
    has finished, so an output directory nested in input_dir is never picked
    up as input.
    """
    return sorted(p for p in input_dir.rglob("*") if is_ase_file(p))


def swap_single_file(color_map: ColorMap, input_file: Path, output_file: Path) -> bool:
    """Remap one file and write it to output_file, which must not exist.

    Returns:
        True if successful, False otherwise
    """
    try:
        document = extract_ase(input_file)
        stats = remap_document(document, color_map)
        generate_ase(document, output_file)
    except Exception as e:
        print_error(f"Failed to process {input_file}: {e}")
        return False

    print(f"[OK] {input_file} -> {output_file} ({stats.summary()})")
    return True


def _print_summary(report: BatchReport) -> None:
    print()
    print("=" * SEPARATOR_LINE_LENGTH)
    print("[SUMMARY] PALETTE SWAP SUMMARY")
    print("=" * SEPARATOR_LINE_LENGTH)
    print(f"[INFO] Total: {report.total}")
    print(f"[INFO] Successful: {len(report.succeeded)}")
    print(f"[INFO] Failed: {len(report.failed)}")

    if report.failed:
        print_error("Failed files:")
        for item in report.failed:
            print_error(f"   - {item}")

    print("=" * SEPARATOR_LINE_LENGTH)


def _swap_directory(color_map: ColorMap, input_dir: Path, output_dir: Path) -> BatchReport:
    report = BatchReport()

    files = find_ase_files(input_dir)
    if not files:
        print_warning(f"No Aseprite files found in: {input_dir}")
        return report

    print("=" * SEPARATOR_LINE_LENGTH)
    print(f"[INFO] Found {len(files)} file(s) to process")
    print(f"[INFO] Output folder: {output_dir}")
    print("=" * SEPARATOR_LINE_LENGTH)
    print()

    for input_file in files:
        output_file = output_dir / input_file.relative_to(input_dir)

        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print_error(f"Could not create folder {output_file.parent}: {e}")
            report.failed.append(input_file)
            continue

        if swap_single_file(color_map, input_file, output_file):
            report.succeeded.append(input_file)
        else:
            report.failed.append(input_file)

    _print_summary(report)
    return report


def run_palette_swap(color_map: ColorMap, input_path: Path, output_path: Path) -> BatchReport:
    """Swap palettes of a file or of every Aseprite file under a directory.

    Directory inputs are mirrored under output_path. A failing file is logged
    and skipped, the rest of the batch still runs.

    Raises:
        OutputCollisionError: If output_path already exists (nothing is read)
        FileNotFoundError: If input_path does not exist
    """
    if output_path.exists() or output_path.is_symlink():
        raise OutputCollisionError(f"Output path already exists: {output_path}")

    if not input_path.exists():
        raise FileNotFoundError(f"Input path does not exist: {input_path}")

    if input_path.is_dir():
        print(f"[START] Swapping palettes in folder: {input_path}")
        return _swap_directory(color_map, input_path, output_path)

    print(f"[START] Swapping palette of file: {input_path}")
    report = BatchReport()
    if swap_single_file(color_map, input_path, output_path):
        report.succeeded.append(input_path)
    else:
        report.failed.append(input_path)
    return report
