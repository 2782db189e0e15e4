"""
Tests for color map extraction, the pixel transform and document remapping.

Usage:
    pytest tests/test_palette_swap.py
"""

import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

script_dir = Path(__file__).parent
for path in (script_dir, script_dir.parent):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

import palette_swap.pixel_transform as pixel_transform_module
from ase_files import (
    AseCodecError,
    Color,
    ColorDepth,
    PaletteChunk,
    LinkedCel,
    generate_ase,
    extract_ase,
)
from palette_swap import (
    ColorMap,
    extract_color_map,
    color_map_from_rgba,
    load_color_map,
    transform_cel_pixels,
    remap_document,
    remap_palette_chunk,
)
from utils import (
    RED,
    GREEN,
    BLUE,
    BLACK,
    WHITE,
    YELLOW,
    MAGENTA,
    rgba_pixels,
    make_document,
    make_raw_cel_chunk,
    make_compressed_cel_chunk,
    make_grayscale_cel_chunk,
    make_indexed_cel_chunk,
    make_linked_cel_chunk,
    make_palette_chunk,
    make_legacy_palette_chunk,
    pixel_rows,
    cel_chunks,
    write_document,
)

SCENARIO_MAP = {RED: BLACK, GREEN: WHITE, BLUE: YELLOW}


def scenario_reference():
    return make_document([make_raw_cel_chunk([[RED, GREEN, BLUE], [BLACK, WHITE, YELLOW]])])


# Color map extraction


def test_extract_reference_scenario():
    color_map = extract_color_map(scenario_reference())
    assert dict(color_map.items()) == SCENARIO_MAP


def test_extract_from_compressed_cel():
    reference = make_document(
        [make_compressed_cel_chunk([[RED, GREEN, BLUE], [BLACK, WHITE, YELLOW]])]
    )
    assert dict(extract_color_map(reference).items()) == SCENARIO_MAP


def test_extract_unions_cels_with_last_write_wins():
    reference = make_document(
        [make_raw_cel_chunk([[RED, GREEN], [BLACK, WHITE]])],
        [make_compressed_cel_chunk([[RED, BLUE], [YELLOW, MAGENTA]])],
    )
    color_map = extract_color_map(reference)
    assert dict(color_map.items()) == {RED: YELLOW, GREEN: WHITE, BLUE: MAGENTA}


def test_extract_only_reads_first_two_rows():
    reference = make_document(
        [make_raw_cel_chunk([[RED], [BLACK], [WHITE]])],
    )
    assert dict(extract_color_map(reference).items()) == {RED: BLACK}


def test_extract_skips_short_and_linked_cels():
    reference = make_document(
        [make_raw_cel_chunk([[RED, GREEN]]), make_palette_chunk([RED])],
        [make_linked_cel_chunk(0)],
    )
    color_map = extract_color_map(reference)
    assert color_map.is_empty()
    assert len(color_map) == 0


def test_extract_indexed_reference_uses_palette():
    reference = make_document(
        [
            make_palette_chunk([Color(0, 0, 0, 0), RED, BLACK]),
            make_indexed_cel_chunk([[1, 0], [2, 1]]),
        ],
        color_depth=ColorDepth.INDEXED,
    )
    color_map = extract_color_map(reference)
    assert dict(color_map.items()) == {RED: BLACK, Color(0, 0, 0, 0): RED}


def test_extract_grayscale_reference():
    reference = make_document(
        [make_grayscale_cel_chunk([[10], [20]])], color_depth=ColorDepth.GRAYSCALE
    )
    color_map = extract_color_map(reference)
    assert dict(color_map.items()) == {Color(10, 10, 10, 255): Color(20, 20, 20, 255)}


def test_load_color_map_from_png(tmp_path):
    png_path = tmp_path / "map.png"
    Image.fromarray(rgba_pixels([[RED, GREEN, BLUE], [BLACK, WHITE, YELLOW]])).save(png_path)
    assert dict(load_color_map(png_path).items()) == SCENARIO_MAP


def test_load_color_map_from_ase(tmp_path):
    ase_path = write_document(scenario_reference(), tmp_path / "map.aseprite")
    assert dict(load_color_map(ase_path).items()) == SCENARIO_MAP


def test_load_color_map_rejects_garbage(tmp_path):
    bad_ase = tmp_path / "map.ase"
    bad_ase.write_bytes(b"garbage")
    with pytest.raises(ValueError):
        load_color_map(bad_ase)

    bad_png = tmp_path / "map.png"
    bad_png.write_bytes(b"garbage")
    with pytest.raises(ValueError):
        load_color_map(bad_png)

    with pytest.raises(OSError):
        load_color_map(tmp_path / "missing.png")


def test_single_row_image_gives_empty_map():
    assert color_map_from_rgba(rgba_pixels([[RED, GREEN]])).is_empty()


# ColorMap


def test_color_map_lookup():
    color_map = ColorMap(SCENARIO_MAP)
    assert RED in color_map
    assert MAGENTA not in color_map
    assert color_map.get(GREEN) == WHITE
    assert color_map.map_color(MAGENTA) == MAGENTA
    assert color_map == ColorMap(dict(SCENARIO_MAP))


def test_alpha_is_part_of_the_key():
    color_map = ColorMap({RED: BLACK})
    pixels = rgba_pixels([[RED, Color(255, 0, 0, 128)]])
    assert color_map.apply_to_rgba(pixels) == 1
    assert pixels.tolist() == [[list(BLACK), [255, 0, 0, 128]]]


def test_apply_does_not_chain_mappings():
    color_map = ColorMap({RED: GREEN, GREEN: BLUE})
    pixels = rgba_pixels([[RED, GREEN, BLUE]])
    assert color_map.apply_to_rgba(pixels) == 2
    assert pixels.tolist() == [[list(GREEN), list(BLUE), list(BLUE)]]


def test_identity_entries_count_as_unchanged():
    color_map = ColorMap({RED: RED})
    pixels = rgba_pixels([[RED]])
    assert color_map.apply_to_rgba(pixels) == 0
    assert pixels.tolist() == [[list(RED)]]


# Pixel transform


def test_transform_raw_pixels_in_place():
    chunk = make_raw_cel_chunk([[RED, BLUE]])
    array_before = chunk.cel.pixels
    calls = []

    def mutator(buffer):
        calls.append(buffer.color_depth)
        buffer.pixels[0, 0] = WHITE

    assert transform_cel_pixels(chunk, mutator)
    assert calls == [ColorDepth.RGBA]
    assert chunk.cel.pixels is array_before
    assert pixel_rows(chunk) == [[WHITE, BLUE]]


def test_transform_compressed_pixels_recompresses():
    chunk = make_compressed_cel_chunk([[RED, BLUE], [GREEN, GREEN]])

    def mutator(buffer):
        buffer.pixels[1, 1] = BLACK

    assert transform_cel_pixels(chunk, mutator)
    assert (chunk.cel.width, chunk.cel.height) == (2, 2)
    assert pixel_rows(chunk) == [[RED, BLUE], [GREEN, BLACK]]


def test_transform_identity_keeps_compressed_bytes():
    chunk = make_compressed_cel_chunk([[RED, BLUE]])
    data_before = chunk.cel.data
    assert transform_cel_pixels(chunk, lambda buffer: None)
    assert chunk.cel.data is data_before


def test_transform_linked_cel_never_calls_mutator():
    chunk = make_linked_cel_chunk(2)
    calls = []
    assert transform_cel_pixels(chunk, calls.append)
    assert calls == []
    assert chunk.cel == LinkedCel(frame_position=2)


def test_transform_keeps_blob_when_recompression_fails(monkeypatch):
    chunk = make_compressed_cel_chunk([[RED, BLUE]])
    data_before = chunk.cel.data

    def failing_encode(pixels):
        raise AseCodecError("simulated failure")

    monkeypatch.setattr(pixel_transform_module, "encode_pixels", failing_encode)

    def mutator(buffer):
        buffer.pixels[0, 0] = WHITE

    assert not transform_cel_pixels(chunk, mutator)
    assert chunk.cel.data == data_before
    assert pixel_rows(chunk) == [[RED, BLUE]]


def test_transform_rejects_geometry_change():
    chunk = make_raw_cel_chunk([[RED, BLUE]])

    def mutator(buffer):
        buffer.pixels = np.zeros((3, 3, 4), dtype=np.uint8)

    with pytest.raises(ValueError):
        transform_cel_pixels(chunk, mutator)


# Document remap


def test_remap_raw_scenario():
    document = make_document([make_raw_cel_chunk([[RED, BLUE, MAGENTA]])])
    stats = remap_document(document, extract_color_map(scenario_reference()))

    assert pixel_rows(cel_chunks(document)[0]) == [[BLACK, YELLOW, MAGENTA]]
    assert stats.pixels_changed == 2
    assert stats.cels_remapped == 1


def test_remap_palette_chunk():
    chunk = make_palette_chunk([RED, MAGENTA, BLUE], names=["a", None, "c"])
    assert remap_palette_chunk(chunk, ColorMap(SCENARIO_MAP)) == 2
    assert [e.color for e in chunk.entries] == [BLACK, MAGENTA, YELLOW]
    assert [e.name for e in chunk.entries] == ["a", None, "c"]


def build_mixed_document():
    return make_document(
        [
            make_legacy_palette_chunk([RED, GREEN]),
            make_legacy_palette_chunk([RED], v11=True),
            make_palette_chunk([RED, GREEN, MAGENTA]),
            make_raw_cel_chunk([[RED, MAGENTA], [GREEN, BLUE]]),
            make_compressed_cel_chunk([[BLUE, BLUE, RED]], layer_index=1),
        ],
        [
            make_linked_cel_chunk(0),
            make_compressed_cel_chunk([[MAGENTA]], layer_index=1),
        ],
    )


def test_remap_mixed_document():
    document = build_mixed_document()
    stats = remap_document(document, ColorMap(SCENARIO_MAP))

    chunks = document.frames[0].chunks
    assert [e.color for e in chunks[2].entries] == [BLACK, WHITE, MAGENTA]
    assert pixel_rows(chunks[3]) == [[BLACK, MAGENTA], [WHITE, YELLOW]]
    assert pixel_rows(chunks[4]) == [[YELLOW, YELLOW, BLACK]]
    assert pixel_rows(document.frames[1].chunks[1]) == [[MAGENTA]]

    assert stats.palette_entries_changed == 2
    assert stats.pixels_changed == 6
    assert stats.legacy_palettes == 2
    assert stats.linked_cels == 1
    assert stats.failed_cels == 0


def test_remap_leaves_legacy_and_linked_chunks_byte_identical():
    document = build_mixed_document()
    legacy_before = [c.raw for c in document.frames[0].chunks[:2]]
    linked_before = generate_ase(make_document([document.frames[1].chunks[0]]))

    remap_document(document, ColorMap(SCENARIO_MAP))

    assert [c.raw for c in document.frames[0].chunks[:2]] == legacy_before
    assert generate_ase(make_document([document.frames[1].chunks[0]])) == linked_before


def test_remap_with_empty_map_is_identity():
    document = build_mixed_document()
    before = generate_ase(document)
    stats = remap_document(document, ColorMap())
    assert generate_ase(document) == before
    assert stats.pixels_changed == 0
    assert stats.palette_entries_changed == 0


def test_remap_with_disjoint_map_is_noop():
    document = build_mixed_document()
    before = generate_ase(document)
    remap_document(document, ColorMap({Color(1, 2, 3, 4): BLACK, WHITE: BLACK}))
    assert generate_ase(document) == before


def test_remap_skips_non_rgba_cels():
    document = make_document(
        [make_grayscale_cel_chunk([[255, 0]])], color_depth=ColorDepth.GRAYSCALE
    )
    before = generate_ase(document)
    stats = remap_document(document, ColorMap({WHITE: RED, BLACK: RED}))
    assert generate_ase(document) == before
    assert stats.non_rgba_cels == 1
    assert stats.cels_remapped == 0


def test_remap_continues_after_corrupt_cel():
    broken = make_compressed_cel_chunk([[RED]])
    broken.cel.data = b"definitely not zlib"
    document = make_document([broken, make_raw_cel_chunk([[RED]], layer_index=1)])

    stats = remap_document(document, ColorMap(SCENARIO_MAP))

    assert broken.cel.data == b"definitely not zlib"
    assert pixel_rows(document.frames[0].chunks[1]) == [[BLACK]]
    assert stats.failed_cels == 1
    assert stats.cels_remapped == 1


def test_remap_survives_write_and_reload():
    document = build_mixed_document()
    remap_document(document, ColorMap(SCENARIO_MAP))
    reloaded = extract_ase(generate_ase(document))
    palette = [c for _, c in reloaded.iter_chunks() if isinstance(c, PaletteChunk)][0]
    assert [e.color for e in palette.entries] == [BLACK, WHITE, MAGENTA]
    assert pixel_rows(cel_chunks(reloaded)[1]) == [[YELLOW, YELLOW, BLACK]]
