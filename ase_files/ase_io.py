"""
Aseprite file I/O operations for reading and writing documents.
"""

from pathlib import Path
from typing import Union, Optional

from .document import Document
from data import read_file_to_bytes, write_bytes_to_new_file
from .ase_parser import AseParser
from .ase_writer import AseWriter


def extract_ase(ase_input: Union[Path, bytes]) -> Document:
    """
    Decode an Aseprite document from a file path or raw bytes.

    Args:
        ase_input: Either Path to an .ase/.aseprite file or raw file bytes

    Returns:
        Document object

    Raises:
        OSError: If the file cannot be read
        AseFormatError: If the data is not a valid Aseprite file
    """
    if isinstance(ase_input, (bytes, bytearray)):
        rawdata = bytes(ase_input)
    else:
        rawdata = read_file_to_bytes(ase_input)

    return AseParser(rawdata).parse()


def generate_ase(document: Document, output_path: Optional[Path] = None) -> bytes:
    """
    Encode a document to Aseprite file bytes.

    Args:
        document: Document to serialize
        output_path: Optional output file. It must not exist yet; the write
            fails with FileExistsError instead of replacing an existing file.

    Returns:
        The encoded file as bytes
    """
    ase_bytes = AseWriter(document).write()

    if output_path is not None:
        write_bytes_to_new_file(output_path, ase_bytes)

    return ase_bytes
