"""
Aseprite file parser for reading .ase/.aseprite files.
"""

import struct

from .constants import (
    AseFormat,
    ChunkType,
    CelType,
    CEL_HEADER_LEN,
    CEL_RESERVED_LEN,
    PALETTE_HEADER_LEN,
    PALETTE_RESERVED_LEN,
    PALETTE_ENTRY_HAS_NAME,
    FRAME_RESERVED_LEN,
)
from .document import (
    AseHeader,
    Color,
    Document,
    Frame,
    Chunk,
    LegacyPaletteChunk,
    PaletteChunk,
    PaletteEntry,
    CelChunk,
    RawPixels,
    CompressedPixels,
    LinkedCel,
    OtherChunk,
)
from .errors import AseFormatError, AseCodecError
from .pixels import pixels_from_bytes
from data import (
    read_uint32,
    read_uint16,
    read_uint8,
    read_int16,
    read_string,
)


def _parse_legacy_palette(chunk_type: int, data: bytes) -> LegacyPaletteChunk:
    """Parse an old palette chunk. Packets are (skip, [(r, g, b), ...])."""
    packets = []
    num_packets = read_uint16(data, 0)
    pos = 2
    for _ in range(num_packets):
        skip = read_uint8(data, pos)
        count = read_uint8(data, pos + 1) or 256
        pos += 2
        colors = []
        for _ in range(count):
            colors.append((data[pos], data[pos + 1], data[pos + 2]))
            pos += 3
        packets.append((skip, colors))
    return LegacyPaletteChunk(chunk_type=chunk_type, packets=packets, raw=data)


def _parse_palette(data: bytes) -> PaletteChunk:
    chunk = PaletteChunk(
        palette_size=read_uint32(data, 0),
        first_index=read_uint32(data, 4),
        last_index=read_uint32(data, 8),
        reserved=data[12 : 12 + PALETTE_RESERVED_LEN],
    )

    pos = PALETTE_HEADER_LEN
    for _ in range(chunk.last_index - chunk.first_index + 1):
        flags = read_uint16(data, pos)
        color = Color(*struct.unpack_from("4B", data, pos + 2))
        pos += 6
        name = None
        if flags & PALETTE_ENTRY_HAS_NAME:
            name, consumed = read_string(data, pos)
            pos += consumed
        chunk.entries.append(PaletteEntry(color=color, flags=flags, name=name))

    return chunk


def _parse_cel(data: bytes, color_depth: int) -> Chunk:
    """Parse a cel chunk. Tilemap cels are kept as opaque chunks."""
    cel_type = read_uint16(data, 7)
    body = CEL_HEADER_LEN

    if cel_type == CelType.RAW_IMAGE:
        width = read_uint16(data, body)
        height = read_uint16(data, body + 2)
        try:
            pixels = pixels_from_bytes(data[body + 4 :], width, height, color_depth)
        except AseCodecError as e:
            raise AseFormatError(f"Raw cel: {e}")
        cel = RawPixels(width, height, color_depth, pixels)
    elif cel_type == CelType.LINKED:
        cel = LinkedCel(frame_position=read_uint16(data, body))
    elif cel_type == CelType.COMPRESSED_IMAGE:
        width = read_uint16(data, body)
        height = read_uint16(data, body + 2)
        cel = CompressedPixels(width, height, color_depth, data[body + 4 :])
    else:
        return OtherChunk(chunk_type=ChunkType.CEL, data=data)

    return CelChunk(
        layer_index=read_uint16(data, 0),
        x=read_int16(data, 2),
        y=read_int16(data, 4),
        opacity=read_uint8(data, 6),
        z_index=read_int16(data, 9),
        cel=cel,
        reserved=data[11 : 11 + CEL_RESERVED_LEN],
    )


class AseParser:
    """Parser for Aseprite sprite files."""

    def __init__(self, rawdata: bytes):
        """Initialize parser with raw file data."""
        self.rawdata = rawdata

    def parse(self) -> Document:
        """Parse the whole file into a Document.

        Raises:
            AseFormatError: If the data is truncated or not an Aseprite file
        """
        try:
            document = Document(self._read_header())
            pos = AseFormat.HEADER_LEN
            for _ in range(document.header.num_frames):
                frame, frame_size = self._read_frame(pos, document.header.color_depth)
                document.frames.append(frame)
                pos += frame_size
        except (struct.error, IndexError, UnicodeDecodeError) as e:
            raise AseFormatError(f"Truncated or corrupt Aseprite data: {e}")
        return document

    def _read_header(self) -> AseHeader:
        data = self.rawdata
        if len(data) < AseFormat.HEADER_LEN:
            raise AseFormatError(
                f"File too small for an Aseprite header ({len(data)} bytes)"
            )

        magic = read_uint16(data, 4)
        if magic != AseFormat.HEADER_MAGIC:
            raise AseFormatError(f"Invalid Aseprite header magic: 0x{magic:04X}")

        header = AseHeader(
            file_size=read_uint32(data, 0),
            num_frames=read_uint16(data, 6),
            width=read_uint16(data, 8),
            height=read_uint16(data, 10),
            color_depth=read_uint16(data, 12),
            flags=read_uint32(data, 14),
            speed=read_uint16(data, 18),
            reserved0=read_uint32(data, 20),
            reserved1=read_uint32(data, 24),
            transparent_index=read_uint8(data, 28),
            ignored=data[29:32],
            num_colors=read_uint16(data, 32),
            pixel_width=read_uint8(data, 34),
            pixel_height=read_uint8(data, 35),
            grid_x=read_int16(data, 36),
            grid_y=read_int16(data, 38),
            grid_width=read_uint16(data, 40),
            grid_height=read_uint16(data, 42),
            reserved=data[44 : AseFormat.HEADER_LEN],
        )

        if header.file_size > len(data):
            raise AseFormatError(
                f"Header declares {header.file_size} bytes but file has {len(data)}"
            )

        return header

    def _read_frame(self, offset: int, color_depth: int):
        """Read one frame. Returns (frame, frame size in bytes)."""
        data = self.rawdata
        frame_size = read_uint32(data, offset)
        magic = read_uint16(data, offset + 4)
        if magic != AseFormat.FRAME_MAGIC:
            raise AseFormatError(
                f"Invalid frame magic 0x{magic:04X} at offset 0x{offset:X}"
            )
        if frame_size < AseFormat.FRAME_HEADER_LEN or offset + frame_size > len(data):
            raise AseFormatError(f"Invalid frame size {frame_size} at offset 0x{offset:X}")

        old_count = read_uint16(data, offset + 6)
        new_count = read_uint32(data, offset + 12)
        frame = Frame(
            duration=read_uint16(data, offset + 8),
            reserved=data[offset + 10 : offset + 10 + FRAME_RESERVED_LEN],
            legacy_chunk_count=new_count == 0,
        )
        num_chunks = new_count if new_count != 0 else old_count

        frame_end = offset + frame_size
        pos = offset + AseFormat.FRAME_HEADER_LEN
        for _ in range(num_chunks):
            chunk_size = read_uint32(data, pos)
            chunk_type = read_uint16(data, pos + 4)
            if chunk_size < AseFormat.CHUNK_HEADER_LEN or pos + chunk_size > frame_end:
                raise AseFormatError(
                    f"Invalid chunk size {chunk_size} for chunk 0x{chunk_type:04X} "
                    f"at offset 0x{pos:X}"
                )
            chunk_data = data[pos + AseFormat.CHUNK_HEADER_LEN : pos + chunk_size]
            frame.chunks.append(self._read_chunk(chunk_type, chunk_data, color_depth))
            pos += chunk_size

        return frame, frame_size

    def _read_chunk(self, chunk_type: int, data: bytes, color_depth: int) -> Chunk:
        if chunk_type in ChunkType.LEGACY_PALETTES:
            return _parse_legacy_palette(chunk_type, data)
        if chunk_type == ChunkType.PALETTE:
            return _parse_palette(data)
        if chunk_type == ChunkType.CEL:
            return _parse_cel(data, color_depth)
        return OtherChunk(chunk_type=chunk_type, data=data)

