"""
Aseprite file writer for creating .ase/.aseprite files.
"""

from .constants import (
    AseFormat,
    ChunkType,
    CelType,
    PALETTE_ENTRY_HAS_NAME,
)
from .document import (
    AseHeader,
    Document,
    Frame,
    Chunk,
    LegacyPaletteChunk,
    PaletteChunk,
    CelChunk,
    RawPixels,
    CompressedPixels,
    LinkedCel,
    OtherChunk,
)
from .errors import AseFormatError
from data import (
    write_uint32,
    write_uint16,
    write_uint8,
    write_int16,
    write_string,
)


def _write_palette(chunk: PaletteChunk) -> bytes:
    expected = chunk.last_index - chunk.first_index + 1
    if len(chunk.entries) != expected:
        raise AseFormatError(
            f"Palette chunk covers indices {chunk.first_index}..{chunk.last_index} "
            f"but has {len(chunk.entries)} entries"
        )

    result = bytearray()
    result.extend(write_uint32(chunk.palette_size))
    result.extend(write_uint32(chunk.first_index))
    result.extend(write_uint32(chunk.last_index))
    result.extend(chunk.reserved)

    for entry in chunk.entries:
        flags = entry.flags
        if entry.name is not None:
            flags |= PALETTE_ENTRY_HAS_NAME
        else:
            flags &= ~PALETTE_ENTRY_HAS_NAME
        result.extend(write_uint16(flags))
        result.extend(bytes(entry.color))
        if entry.name is not None:
            result.extend(write_string(entry.name))

    return bytes(result)


def _write_cel(chunk: CelChunk) -> bytes:
    cel = chunk.cel
    if isinstance(cel, RawPixels):
        cel_type = CelType.RAW_IMAGE
    elif isinstance(cel, LinkedCel):
        cel_type = CelType.LINKED
    elif isinstance(cel, CompressedPixels):
        cel_type = CelType.COMPRESSED_IMAGE
    else:
        raise TypeError(f"Unknown cel type: {type(cel).__name__}")

    result = bytearray()
    result.extend(write_uint16(chunk.layer_index))
    result.extend(write_int16(chunk.x))
    result.extend(write_int16(chunk.y))
    result.extend(write_uint8(chunk.opacity))
    result.extend(write_uint16(cel_type))
    result.extend(write_int16(chunk.z_index))
    result.extend(chunk.reserved)

    if isinstance(cel, LinkedCel):
        result.extend(write_uint16(cel.frame_position))
        return bytes(result)

    result.extend(write_uint16(cel.width))
    result.extend(write_uint16(cel.height))
    if isinstance(cel, RawPixels):
        if cel.pixels.shape[:2] != (cel.height, cel.width):
            raise AseFormatError(
                f"Raw cel declares {cel.width}x{cel.height} but pixels are "
                f"{cel.pixels.shape[1]}x{cel.pixels.shape[0]}"
            )
        result.extend(cel.pixels.tobytes())
    else:
        result.extend(cel.data)

    return bytes(result)


def _chunk_payload(chunk: Chunk):
    """Return (chunk type, payload bytes) for any chunk variant."""
    if isinstance(chunk, LegacyPaletteChunk):
        return chunk.chunk_type, chunk.raw
    if isinstance(chunk, PaletteChunk):
        return ChunkType.PALETTE, _write_palette(chunk)
    if isinstance(chunk, CelChunk):
        return ChunkType.CEL, _write_cel(chunk)
    if isinstance(chunk, OtherChunk):
        return chunk.chunk_type, chunk.data
    raise TypeError(f"Unknown chunk type: {type(chunk).__name__}")


class AseWriter:
    """Writer for Aseprite sprite files."""

    def __init__(self, document: Document):
        """Initialize writer with document data."""
        self.document = document
        self.output_buffer = bytearray()

    def write(self) -> bytes:
        """Serialize the document. Sizes and counts are recomputed."""
        self.output_buffer = bytearray(AseFormat.HEADER_LEN)

        for frame in self.document.frames:
            self.output_buffer.extend(self._write_frame(frame))

        self.output_buffer[: AseFormat.HEADER_LEN] = self._write_header(
            self.document.header, len(self.output_buffer), len(self.document.frames)
        )
        return bytes(self.output_buffer)

    def _write_header(self, header: AseHeader, file_size: int, num_frames: int) -> bytes:
        result = bytearray()
        result.extend(write_uint32(file_size))
        result.extend(write_uint16(AseFormat.HEADER_MAGIC))
        result.extend(write_uint16(num_frames))
        result.extend(write_uint16(header.width))
        result.extend(write_uint16(header.height))
        result.extend(write_uint16(header.color_depth))
        result.extend(write_uint32(header.flags))
        result.extend(write_uint16(header.speed))
        result.extend(write_uint32(header.reserved0))
        result.extend(write_uint32(header.reserved1))
        result.extend(write_uint8(header.transparent_index))
        result.extend(header.ignored)
        result.extend(write_uint16(header.num_colors))
        result.extend(write_uint8(header.pixel_width))
        result.extend(write_uint8(header.pixel_height))
        result.extend(write_int16(header.grid_x))
        result.extend(write_int16(header.grid_y))
        result.extend(write_uint16(header.grid_width))
        result.extend(write_uint16(header.grid_height))
        result.extend(header.reserved)

        if len(result) != AseFormat.HEADER_LEN:
            raise AseFormatError(f"Header serialized to {len(result)} bytes")
        return bytes(result)

    def _write_frame(self, frame: Frame) -> bytes:
        body = bytearray()
        for chunk in frame.chunks:
            chunk_type, payload = _chunk_payload(chunk)
            body.extend(write_uint32(AseFormat.CHUNK_HEADER_LEN + len(payload)))
            body.extend(write_uint16(chunk_type))
            body.extend(payload)

        num_chunks = len(frame.chunks)
        old_count = min(num_chunks, AseFormat.OLD_CHUNK_COUNT_OVERFLOW)
        new_count = 0 if frame.legacy_chunk_count else num_chunks

        result = bytearray()
        result.extend(write_uint32(AseFormat.FRAME_HEADER_LEN + len(body)))
        result.extend(write_uint16(AseFormat.FRAME_MAGIC))
        result.extend(write_uint16(old_count))
        result.extend(write_uint16(frame.duration))
        result.extend(frame.reserved)
        result.extend(write_uint32(new_count))
        result.extend(body)
        return bytes(result)
