"""
Core configuration, constants, and utils
"""

from .config import (
    CURRENT_VERSION,
)

from .utils import (
    read_uint32,
    read_uint16,
    read_uint8,
    read_int16,
    read_string,
    write_uint32,
    write_uint16,
    write_uint8,
    write_int16,
    write_string,
    read_file_to_bytes,
    write_bytes_to_file,
    write_bytes_to_new_file,
    print_error,
    print_warning,
)

from .constants import (
    SEPARATOR_LINE_LENGTH,
    ASE_EXTENSIONS,
    ZLIB_COMPRESSION_LEVEL,
    PALETTE_MAP_FROM_ROW,
    PALETTE_MAP_TO_ROW,
)

__all__ = [
    # Config
    "CURRENT_VERSION",
    # Utils
    "read_uint32",
    "read_uint16",
    "read_uint8",
    "read_int16",
    "read_string",
    "write_uint32",
    "write_uint16",
    "write_uint8",
    "write_int16",
    "write_string",
    "read_file_to_bytes",
    "write_bytes_to_file",
    "write_bytes_to_new_file",
    "print_error",
    "print_warning",
    # Constants
    "SEPARATOR_LINE_LENGTH",
    "ASE_EXTENSIONS",
    "ZLIB_COMPRESSION_LEVEL",
    "PALETTE_MAP_FROM_ROW",
    "PALETTE_MAP_TO_ROW",
]
