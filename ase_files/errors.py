"""
Error types raised by the Aseprite reader, writer and pixel codec.
"""


class AseFormatError(ValueError):
    """The file is not a well-formed Aseprite document."""


class AseCodecError(ValueError):
    """A cel's compressed pixel data could not be decoded or re-encoded."""
