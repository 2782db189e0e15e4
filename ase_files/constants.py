"""
Aseprite file format constants.
"""


class AseFormat:
    HEADER_MAGIC = 0xA5E0
    FRAME_MAGIC = 0xF1FA
    HEADER_LEN = 128
    FRAME_HEADER_LEN = 16
    CHUNK_HEADER_LEN = 6
    # Frame headers store 0xFFFF in the old chunk count when the real count
    # only fits in the newer DWORD field
    OLD_CHUNK_COUNT_OVERFLOW = 0xFFFF


class ChunkType:
    OLD_PALETTE_4 = 0x0004
    OLD_PALETTE_11 = 0x0011
    LAYER = 0x2004
    CEL = 0x2005
    CEL_EXTRA = 0x2006
    COLOR_PROFILE = 0x2007
    EXTERNAL_FILES = 0x2008
    MASK = 0x2016
    PATH = 0x2017
    TAGS = 0x2018
    PALETTE = 0x2019
    USER_DATA = 0x2020
    SLICE = 0x2022
    TILESET = 0x2023

    LEGACY_PALETTES = (OLD_PALETTE_4, OLD_PALETTE_11)


class CelType:
    RAW_IMAGE = 0
    LINKED = 1
    COMPRESSED_IMAGE = 2
    COMPRESSED_TILEMAP = 3


class ColorDepth:
    INDEXED = 8
    GRAYSCALE = 16
    RGBA = 32

    BYTES_PER_PIXEL = {
        INDEXED: 1,
        GRAYSCALE: 2,
        RGBA: 4,
    }


# Cel chunk: layer(2) x(2) y(2) opacity(1) cel_type(2) z_index(2) reserved(5)
CEL_HEADER_LEN = 16
CEL_RESERVED_LEN = 5

# Palette chunk: size(4) first(4) last(4) reserved(8)
PALETTE_HEADER_LEN = 20
PALETTE_RESERVED_LEN = 8
PALETTE_ENTRY_HAS_NAME = 0x0001

FRAME_RESERVED_LEN = 2
