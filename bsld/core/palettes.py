"""
Boskeopolis Land Data - Color Palettes

High color (5 bits per channel + 1 alpha bit) packing and the immutable
Palette / PaletteList models.

Palette block layout:
    Uint8 palette_count
    per palette: Huffman-coded name, then colors 1-7 as Uint16 high color
Color 0 is always transparent and is never stored.

High color layout (MSB first): [R R R R R G G G G G B B B B B A]
The A bit is always written as 1.
"""

from dataclasses import dataclass, replace
from typing import Callable, NamedTuple, TypeVar

from .byte_utils import (
    ByteReader,
    TypedValue,
    WireType,
    bits_to_color_channel,
    bits_to_int,
    byte_to_bits,
    color_channel_to_bits,
    pack_values,
)
from .constants import PALETTE_SIZE
from .errors import InvalidColorError
from .text import decode_text, encode_text

T = TypeVar("T")


def round_to_high_color(c: int) -> int:
    """
    Round a true color channel to the nearest high color value.

    Halves round up; the result is capped at 255.

    Example:
        >>> round_to_high_color(43)
        40
        >>> round_to_high_color(253)
        255
    """
    return min(((c + 4) // 8) * 8, 255)


@dataclass(frozen=True)
class Color:
    """An RGB color with a 1-bit alpha flag."""

    r: int
    g: int
    b: int
    a: int = 1

    def __post_init__(self):
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise InvalidColorError(f"Invalid color: {channel}")
        if self.a not in (0, 1):
            raise InvalidColorError(f"Invalid alpha: {self.a}")

    @classmethod
    def from_hex(cls, hex_color: str) -> "Color":
        """Build an opaque color from "#rrggbb", rounding to high color."""
        hex_str = hex_color.lstrip("#")
        if len(hex_str) != 6:
            raise ValueError(f"Invalid hex color: {hex_color}")
        r, g, b = (round_to_high_color(int(hex_str[i : i + 2], 16)) for i in (0, 2, 4))
        return cls(r, g, b, 1)

    @classmethod
    def from_high_color(cls, value: int) -> "Color":
        """Unpack a 16-bit high color value."""
        bits = byte_to_bits(value >> 8) + byte_to_bits(value & 0xFF)
        return cls(
            bits_to_color_channel(bits[0:5]),
            bits_to_color_channel(bits[5:10]),
            bits_to_color_channel(bits[10:15]),
            bits[15],
        )

    def high_color(self) -> int:
        """
        Pack into a 16-bit high color value.

        The alpha bit is always written as 1: only colors 1-7 are stored and
        the game draws them opaque. Decoding still reads the stored bit.
        """
        bits = (
            color_channel_to_bits(self.r)
            + color_channel_to_bits(self.g)
            + color_channel_to_bits(self.b)
            + [1]
        )
        return bits_to_int(bits)

    def encode(self) -> TypedValue:
        return TypedValue(WireType.UINT16, self.high_color())

    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def rgba(self) -> str:
        return f"rgba( {self.r}, {self.g}, {self.b}, {self.a} )"

    def to_json(self) -> dict:
        return {"r": self.r, "g": self.g, "b": self.b, "a": self.a}


TRANSPARENT = Color(0, 0, 0, 0)


@dataclass(frozen=True)
class Palette:
    """A named set of 8 colors; color 0 is transparent."""

    name: str
    colors: tuple[Color, ...]

    def __post_init__(self):
        object.__setattr__(self, "colors", tuple(self.colors))
        if len(self.colors) != PALETTE_SIZE:
            raise ValueError(
                f"Palette {self.name!r} has {len(self.colors)} colors, expected {PALETTE_SIZE}"
            )

    def nth_color(self, index: int) -> Color:
        return self.colors[index]

    def map_colors(self, action: Callable[[Color, int], T], ignore_first: bool = False) -> list[T]:
        colors = self.colors[1:] if ignore_first else self.colors
        return [action(color, i) for i, color in enumerate(colors)]

    def update_name(self, new_name: str) -> "Palette":
        return replace(self, name=new_name)

    def update_color(self, index: int, new_color: Color) -> "Palette":
        colors = list(self.colors)
        colors[index] = new_color
        return replace(self, colors=tuple(colors))

    def encode(self) -> bytes:
        return encode_text(self.name) + pack_values(color.encode() for color in self.colors[1:])

    def to_json(self) -> dict:
        return {"name": self.name, "colors": [color.to_json() for color in self.colors]}


def create_blank_palette() -> Palette:
    return Palette(
        "GRAYSCALE",
        (
            TRANSPARENT,
            Color(0, 0, 0, 1),
            Color(43, 43, 43, 1),
            Color(85, 85, 85, 1),
            Color(128, 128, 128, 1),
            Color(170, 170, 170, 1),
            Color(213, 213, 213, 1),
            Color(255, 255, 255, 1),
        ),
    )


@dataclass(frozen=True)
class PaletteList:
    palettes: tuple[Palette, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "palettes", tuple(self.palettes))

    def __len__(self) -> int:
        return len(self.palettes)

    def __iter__(self):
        return iter(self.palettes)

    def nth(self, index: int) -> Palette:
        return self.palettes[index]

    def add_blank_palette(self) -> "PaletteList":
        return PaletteList(self.palettes + (create_blank_palette(),))

    def remove_palette(self, index: int) -> "PaletteList":
        palettes = list(self.palettes)
        del palettes[index]
        return PaletteList(tuple(palettes))

    def update_palette(self, index: int, new_palette: Palette) -> "PaletteList":
        palettes = list(self.palettes)
        palettes[index] = new_palette
        return PaletteList(tuple(palettes))

    def encode(self) -> bytes:
        """
        Encode the palette block.

        Raises:
            ValueError: If there are more than 255 palettes
        """
        if len(self.palettes) > 0xFF:
            raise ValueError(f"Palette count must be 0-255, got {len(self.palettes)}")
        return bytes([len(self.palettes)]) + b"".join(p.encode() for p in self.palettes)

    def to_json(self) -> list[dict]:
        return [palette.to_json() for palette in self.palettes]


def create_blank_palette_list() -> PaletteList:
    return PaletteList((create_blank_palette(),))


class DecodedPalettes(NamedTuple):
    palettes: PaletteList
    remaining_bytes: bytes


def decode_palette_data(data: bytes) -> DecodedPalettes:
    """
    Decode a palette block from the start of a buffer.

    Args:
        data: Buffer starting with the palette count byte

    Returns:
        DecodedPalettes with the palette list and the bytes after the block

    Raises:
        BufferUnderrunError: If the block is truncated
        TextDecodeError: If a palette name cannot be decoded
    """
    reader = ByteReader(data)
    count = reader.read(WireType.UINT8)

    palettes = []
    for _ in range(count):
        # Pull name from data, then move past the name bytes
        name_data = decode_text(reader.remaining_bytes())
        reader.skip(name_data.bytes_used)

        # 1st color is always transparent; the other 7 are 2 bytes each
        colors = [TRANSPARENT]
        for _ in range(PALETTE_SIZE - 1):
            colors.append(Color.from_high_color(reader.read(WireType.UINT16)))

        palettes.append(Palette(name_data.text, tuple(colors)))

    return DecodedPalettes(PaletteList(tuple(palettes)), reader.remaining_bytes())
