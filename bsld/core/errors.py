"""
Boskeopolis Land Data - Codec Errors

Every decoder and encoder in bsld.core fails fast with one of these.
Nothing in the core catches them; the caller decides what to tell the user.
"""


class CodecError(Exception):
    """Base class for all save data codec failures."""

    pass


class InvalidTypeError(CodecError):
    """Raised when a wire type name is malformed or unknown."""

    pass


class InvalidColorError(CodecError):
    """Raised when a color channel, color index or pixel is out of range."""

    pass


class InvalidTilesetDataError(CodecError):
    """Raised when a pixel stream does not split cleanly into 3-bit pixels."""

    pass


class TextDecodeError(CodecError):
    """Raised when a Huffman text stream cannot be decoded."""

    pass


class TextEncodeError(CodecError, LookupError):
    """Raised when text contains a character missing from the code table."""

    pass


class UnknownObjectTypeError(CodecError):
    """Raised when an object type tag is not in the object type table."""

    pass


class UnknownGoalError(CodecError):
    """Raised when a goal id does not select a goal template."""

    pass


class BufferUnderrunError(CodecError):
    """Raised when a decode step needs more bytes than remain."""

    pass
