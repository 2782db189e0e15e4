import struct
import sys
from pathlib import Path
from typing import Tuple


def read_uint32(data: bytes, offset: int, little_endian: bool = True) -> int:
    fmt = "<I" if little_endian else ">I"
    return struct.unpack_from(fmt, data, offset)[0]


def read_uint16(data: bytes, offset: int, little_endian: bool = True) -> int:
    fmt = "<H" if little_endian else ">H"
    return struct.unpack_from(fmt, data, offset)[0]


def read_uint8(data: bytes, offset: int) -> int:
    return data[offset]


def read_int16(data: bytes, offset: int, little_endian: bool = True) -> int:
    fmt = "<h" if little_endian else ">h"
    return struct.unpack_from(fmt, data, offset)[0]


def read_string(data: bytes, offset: int) -> Tuple[str, int]:
    """Read a WORD-prefixed UTF-8 string. Returns (text, bytes consumed)."""
    length = read_uint16(data, offset)
    raw = data[offset + 2 : offset + 2 + length]
    if len(raw) != length:
        raise struct.error(f"string of {length} bytes runs past end of data")
    return raw.decode("utf-8"), 2 + length


def write_uint32(value: int, little_endian: bool = True) -> bytes:
    fmt = "<I" if little_endian else ">I"
    return struct.pack(fmt, value)


def write_uint16(value: int, little_endian: bool = True) -> bytes:
    fmt = "<H" if little_endian else ">H"
    return struct.pack(fmt, value)


def write_uint8(value: int) -> bytes:
    return struct.pack("B", value)


def write_int16(value: int, little_endian: bool = True) -> bytes:
    fmt = "<h" if little_endian else ">h"
    return struct.pack(fmt, value)


def write_string(value: str) -> bytes:
    raw = value.encode("utf-8")
    return write_uint16(len(raw)) + raw


def read_file_to_bytes(filepath: Path) -> bytes:
    with open(filepath, "rb") as f:
        return f.read()


def write_bytes_to_file(filepath: Path, data: bytes) -> None:
    with open(filepath, "wb") as f:
        f.write(data)


def write_bytes_to_new_file(filepath: Path, data: bytes) -> None:
    """Write bytes to a file that must not exist yet (raises FileExistsError)."""
    with open(filepath, "xb") as f:
        f.write(data)


def print_error(message: str) -> None:
    print(f"[ERROR] {message}", file=sys.stderr)


def print_warning(message: str) -> None:
    print(f"[WARNING] {message}", file=sys.stderr)
