"""
Boskeopolis Land Data - Bit and Byte Primitives

Fixed-width wire types, big-endian reads/writes at byte offsets, and the
MSB-first bit list helpers shared by the text, graphics and palette codecs.

Every multi-byte field in the save format is big-endian, matching the
MSB-first order used inside bit-packed fields.
"""

import re
import struct
from enum import Enum
from typing import Iterable, NamedTuple

from .constants import BITS_PER_CHANNEL, BITS_PER_PIXEL, MAX_CHANNEL_VALUE, MAX_COLOR_INDEX
from .errors import BufferUnderrunError, InvalidColorError, InvalidTypeError

_TYPE_NAME_PATTERN = re.compile(r"^[a-zA-Z]+([0-9]+)$")


class WireType(Enum):
    """Fixed-width binary encodings used by the save format."""

    UINT8 = ("Uint8", ">B")
    UINT16 = ("Uint16", ">H")
    UINT32 = ("Uint32", ">I")
    INT8 = ("Int8", ">b")
    INT16 = ("Int16", ">h")
    FLOAT32 = ("Float32", ">f")

    def __init__(self, type_name: str, fmt: str):
        self.type_name = type_name
        self.fmt = fmt

    @property
    def size(self) -> int:
        return size_of(self.type_name)

    @property
    def is_integer(self) -> bool:
        return self is not WireType.FLOAT32

    @property
    def is_signed(self) -> bool:
        return self.type_name.startswith("Int")

    @property
    def min_value(self) -> int:
        """Smallest value an integer wire type can hold."""
        return -(1 << (self.size * 8 - 1)) if self.is_signed else 0

    @property
    def max_value(self) -> int:
        """Largest value an integer wire type can hold."""
        bits = self.size * 8 - 1 if self.is_signed else self.size * 8
        return (1 << bits) - 1


_WIRE_TYPES_BY_NAME = {wt.type_name: wt for wt in WireType}


class TypedValue(NamedTuple):
    """A value paired with the wire type it is written as."""

    wire_type: WireType
    value: int | float


class FieldSpec(NamedTuple):
    """A named field and the wire type it is stored as."""

    wire_type: WireType
    key: str


def size_of(type_name: str | WireType) -> int:
    """
    Get the byte width of a wire type.

    Type names have the form <Letters><BitWidth>, e.g. "Uint16" or "Float32".

    Args:
        type_name: Wire type name or WireType member

    Returns:
        Width in bytes (BitWidth / 8)

    Raises:
        InvalidTypeError: If the name does not match <Letters><BitWidth>
    """
    if isinstance(type_name, WireType):
        type_name = type_name.type_name

    match = _TYPE_NAME_PATTERN.match(type_name) if isinstance(type_name, str) else None
    if match is None:
        raise InvalidTypeError(f"Invalid data type: {type_name}")
    return int(match.group(1)) // 8


def wire_type(type_name: str | WireType) -> WireType:
    """
    Resolve a wire type name to its WireType member.

    Raises:
        InvalidTypeError: If the name is malformed or not a supported type
    """
    if isinstance(type_name, WireType):
        return type_name

    size_of(type_name)
    try:
        return _WIRE_TYPES_BY_NAME[type_name]
    except KeyError:
        raise InvalidTypeError(f"Unsupported data type: {type_name}") from None


def read_value(data: bytes, offset: int, wtype: WireType) -> int | float:
    """
    Read one big-endian value at a byte offset.

    Raises:
        BufferUnderrunError: If the value extends past the end of data
    """
    end = offset + wtype.size
    if offset < 0 or end > len(data):
        raise BufferUnderrunError(
            f"Cannot read {wtype.type_name} at offset {offset}: "
            f"buffer is {len(data)} bytes"
        )
    return struct.unpack_from(wtype.fmt, data, offset)[0]


def write_value(wtype: WireType, value: int | float) -> bytes:
    """
    Encode one value as big-endian bytes.

    Raises:
        ValueError: If the value does not fit the wire type
    """
    if wtype.is_integer:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"{wtype.type_name} value must be an integer, got {value!r}")
        if not wtype.min_value <= value <= wtype.max_value:
            raise ValueError(
                f"{wtype.type_name} value must be in [{wtype.min_value}, {wtype.max_value}], "
                f"got {value}"
            )
    try:
        return struct.pack(wtype.fmt, value)
    except (OverflowError, struct.error) as e:
        raise ValueError(f"{wtype.type_name} cannot hold {value!r}: {e}") from e


def pack_values(values: Iterable[TypedValue]) -> bytes:
    """Write a sequence of typed values back to back."""
    return b"".join(write_value(wtype, value) for wtype, value in values)


class ByteReader:
    """
    Forward-only cursor over an immutable byte buffer.

    Every read checks bounds before advancing, so a truncated buffer raises
    BufferUnderrunError instead of yielding zeros. A bytes buffer is shared,
    not copied.
    """

    def __init__(self, data: bytes, offset: int = 0):
        self.data = data if isinstance(data, bytes) else bytes(data)
        self.offset = offset

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def remaining_bytes(self) -> bytes:
        return self.data[self.offset :]

    def peek(self, wtype: WireType) -> int | float:
        return read_value(self.data, self.offset, wtype)

    def read(self, wtype: WireType) -> int | float:
        value = read_value(self.data, self.offset, wtype)
        self.offset += wtype.size
        return value

    def read_bytes(self, length: int) -> bytes:
        self._require(length)
        chunk = self.data[self.offset : self.offset + length]
        self.offset += length
        return chunk

    def skip(self, length: int):
        self._require(length)
        self.offset += length

    def _require(self, length: int):
        if length < 0 or length > self.remaining:
            raise BufferUnderrunError(
                f"Cannot read {length} bytes at offset {self.offset}: "
                f"{self.remaining} bytes remain"
            )


# ============================================================================
# Bit lists (MSB first)
# ============================================================================


def get_bit(n: int, bit: int) -> int:
    return (n >> bit) & 1


def byte_to_bits(byte: int) -> list[int]:
    """
    Split a byte into 8 bits, most significant first.

    Example:
        >>> byte_to_bits(0x33)
        [0, 0, 1, 1, 0, 0, 1, 1]
    """
    return [get_bit(byte, i) for i in range(7, -1, -1)]


def int_to_bits(value: int, width: int) -> list[int]:
    """Split a non-negative integer into exactly `width` bits, MSB first."""
    if value < 0 or value >= 1 << width:
        raise ValueError(f"Value {value} does not fit in {width} bits")
    return [get_bit(value, i) for i in range(width - 1, -1, -1)]


def bits_to_int(bits: Iterable[int]) -> int:
    """Join a list of bits (MSB first) into an integer."""
    value = 0
    for bit in bits:
        value = (value << 1) | (bit & 1)
    return value


def bits_to_byte(bits: list[int]) -> int:
    """Join exactly 8 bits (MSB first) into a byte."""
    if len(bits) != 8:
        raise ValueError(f"Expected 8 bits, got {len(bits)}")
    return bits_to_int(bits)


def color_channel_to_bits(channel: int) -> list[int]:
    """
    Pack a true color channel (0-255) into 5 high color bits.

    The low 3 bits of the channel are dropped.

    Raises:
        InvalidColorError: If channel is outside 0-255
    """
    if not 0 <= channel <= 255:
        raise InvalidColorError(f"Invalid color: {channel}")
    return int_to_bits(channel // 8, BITS_PER_CHANNEL)


def bits_to_color_channel(bits: list[int]) -> int:
    """
    Unpack 5 high color bits into a channel value (a multiple of 8).

    Raises:
        InvalidColorError: If the bits encode a value above 31
    """
    color = bits_to_int(bits)
    if not 0 <= color <= MAX_CHANNEL_VALUE:
        raise InvalidColorError(f"Invalid color: {color}")
    return color * 8


def color_index_to_bits(color: int) -> list[int]:
    """Pack a pixel color index (0-7) into 3 bits."""
    if not 0 <= color <= MAX_COLOR_INDEX:
        raise InvalidColorError(f"Invalid color: {color}")
    return int_to_bits(color, BITS_PER_PIXEL)


def bits_to_color_index(bits: list[int]) -> int:
    """Unpack 3 bits into a pixel color index (0-7)."""
    color = bits_to_int(bits)
    if not 0 <= color <= MAX_COLOR_INDEX:
        raise InvalidColorError(f"Invalid color: {color}")
    return color
