"""
Boskeopolis Land Data - Graphics Codec

3-bit pixel packing for tilesets, the immutable Tileset model, and the
Graphics triple (block, overworld and sprite sheets).

Each pixel is a palette index 0-7 (0 is transparent). Pixels are packed
MSB first into a continuous bit stream and the last byte is zero-padded.
"""

from dataclasses import dataclass, replace
from typing import NamedTuple

from .byte_utils import ByteReader, WireType, bits_to_color_index, byte_to_bits, color_index_to_bits
from .constants import (
    BITS_PER_PIXEL,
    MAX_COLOR_INDEX,
    OVERWORLD_TILESET_HEIGHT_TILES,
    OVERWORLD_TILESET_WIDTH_TILES,
    SPRITE_TILESET_HEIGHT_TILES,
    SPRITE_TILESET_WIDTH_TILES,
    TILE_SIZE,
    TILESET_HEIGHT_TILES,
    TILESET_WIDTH_TILES,
)
from .errors import InvalidColorError, InvalidTilesetDataError

# Bit patterns for every color index, built once
_PIXEL_BITS = tuple(tuple(color_index_to_bits(color)) for color in range(MAX_COLOR_INDEX + 1))


def compress_pixels(pixels: list[int]) -> bytes:
    """
    Pack 3-bit pixel color indices into bytes.

    Args:
        pixels: Color indices 0-7

    Returns:
        Packed bytes, final byte zero-padded

    Raises:
        InvalidColorError: If a pixel is outside 0-7
    """
    output = bytearray()
    acc = 0
    bit_count = 0

    for pixel in pixels:
        if not 0 <= pixel <= MAX_COLOR_INDEX:
            raise InvalidColorError(f"Invalid color: {pixel}")
        for bit in _PIXEL_BITS[pixel]:
            acc = (acc << 1) | bit
            bit_count += 1
            if bit_count == 8:
                output.append(acc)
                acc = 0
                bit_count = 0

    # Fill out the rest of the last byte with 0s
    if bit_count > 0:
        output.append(acc << (8 - bit_count))

    return bytes(output)


def decompress_pixels(data: bytes) -> list[int]:
    """
    Unpack bytes into 3-bit pixel color indices.

    Inverse of compress_pixels() for any pixel count that is a multiple of
    8, which covers every tileset (tiles are 8x8).

    Raises:
        InvalidTilesetDataError: If bits are left over after the last
            whole pixel (the bit count is not a multiple of 3)
    """
    out = []
    bits: list[int] = []

    for byte in data:
        bits.extend(byte_to_bits(byte))

        while len(bits) >= BITS_PER_PIXEL:
            out.append(bits_to_color_index(bits[:BITS_PER_PIXEL]))
            del bits[:BITS_PER_PIXEL]

    if bits:
        raise InvalidTilesetDataError(
            f"Invalid tileset data: {len(bits)} bits left over after {len(out)} pixels"
        )

    return out


def pixel_data_size(pixel_count: int) -> int:
    """Bytes needed to store pixel_count packed pixels."""
    return (pixel_count * BITS_PER_PIXEL + 7) // 8


class DecodedTileset(NamedTuple):
    tileset: "Tileset"
    remaining_bytes: bytes


@dataclass(frozen=True)
class Tileset:
    """
    A sheet of 8x8 tiles stored as a flat row-major pixel list.

    Every edit returns a new Tileset; the pixel tuple is never mutated.
    """

    width_tiles: int
    height_tiles: int
    pixels: tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "pixels", tuple(self.pixels))
        expected = self.width_pixels * self.height_pixels
        if len(self.pixels) != expected:
            raise ValueError(
                f"Tileset of {self.width_tiles}x{self.height_tiles} tiles needs "
                f"{expected} pixels, got {len(self.pixels)}"
            )

    @property
    def width_pixels(self) -> int:
        return self.width_tiles * TILE_SIZE

    @property
    def height_pixels(self) -> int:
        return self.height_tiles * TILE_SIZE

    @property
    def data_size(self) -> int:
        return pixel_data_size(len(self.pixels))

    def get_pixel(self, x: int, y: int) -> int:
        return self.pixels[self._pixel_index(x, y)]

    def _pixel_index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width_pixels and 0 <= y < self.height_pixels):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self.width_pixels}x{self.height_pixels} sheet"
            )
        return y * self.width_pixels + x

    def _tile_origin(self, tile_index: int) -> tuple[int, int]:
        tile_x = tile_index % self.width_tiles
        tile_y = tile_index // self.width_tiles
        return tile_x * TILE_SIZE, tile_y * TILE_SIZE

    def clear_tile(self, tile_index: int) -> "Tileset":
        """Set every pixel of one tile to transparent."""
        x, y = self._tile_origin(tile_index)
        pixels = list(self.pixels)
        for pixel_y in range(y, y + TILE_SIZE):
            start = pixel_y * self.width_pixels + x
            pixels[start : start + TILE_SIZE] = [0] * TILE_SIZE
        return replace(self, pixels=tuple(pixels))

    def import_pixels(
        self, new_pixels: list[int], import_width: int, import_height: int, tile_index: int
    ) -> "Tileset":
        """
        Paste a rectangle of pixels with its top-left corner at a tile.

        Transparent (0) source pixels leave the destination pixel as is.
        The rectangle is clipped to the sheet.
        """
        x, y = self._tile_origin(tile_index)
        end_x = min(x + import_width, self.width_pixels)
        end_y = min(y + import_height, self.height_pixels)

        pixels = list(self.pixels)
        for pixel_y in range(y, end_y):
            for pixel_x in range(x, end_x):
                src = new_pixels[(pixel_y - y) * import_width + (pixel_x - x)]
                if src != 0:
                    if not 0 <= src <= 7:
                        raise InvalidColorError(f"Invalid color: {src}")
                    pixels[pixel_y * self.width_pixels + pixel_x] = src
        return replace(self, pixels=tuple(pixels))

    def update_pixel(self, color: int, x: int, y: int) -> "Tileset":
        if not 0 <= color <= 7:
            raise InvalidColorError(f"Invalid color: {color}")
        pixels = list(self.pixels)
        pixels[self._pixel_index(x, y)] = color
        return replace(self, pixels=tuple(pixels))

    def update_pixels(self, new_pixels: list[int]) -> "Tileset":
        return replace(self, pixels=tuple(new_pixels))

    def encode(self) -> bytes:
        """Packed pixel bits, as stored at the start of the save file."""
        return compress_pixels(self.pixels)

    def encode_entry(self) -> bytes:
        """Self-describing block: Uint8 width, Uint8 height, packed pixels."""
        for label, value in (("width", self.width_tiles), ("height", self.height_tiles)):
            if not 0 <= value <= 0xFF:
                raise ValueError(f"Tileset {label} must be 0-255 tiles, got {value}")
        return bytes([self.width_tiles, self.height_tiles]) + self.encode()


def create_blank_tileset(width_tiles: int, height_tiles: int) -> Tileset:
    pixel_count = width_tiles * TILE_SIZE * height_tiles * TILE_SIZE
    return Tileset(width_tiles, height_tiles, (0,) * pixel_count)


def load_tileset(data: bytes, width_tiles: int, height_tiles: int) -> DecodedTileset:
    """
    Decode a fixed-size tileset block from the start of a buffer.

    Args:
        data: Buffer starting with packed tileset pixels
        width_tiles: Sheet width in tiles
        height_tiles: Sheet height in tiles

    Returns:
        DecodedTileset with the tileset and the bytes after it

    Raises:
        BufferUnderrunError: If data is shorter than the tileset block
        InvalidTilesetDataError: If the block does not split into whole pixels
    """
    pixel_count = width_tiles * TILE_SIZE * height_tiles * TILE_SIZE
    reader = ByteReader(data)
    block = reader.read_bytes(pixel_data_size(pixel_count))
    pixels = decompress_pixels(block)
    return DecodedTileset(
        tileset=Tileset(width_tiles, height_tiles, pixels[:pixel_count]),
        remaining_bytes=reader.remaining_bytes(),
    )


def load_tileset_entry(data: bytes) -> DecodedTileset:
    """Decode a self-describing tileset block (see Tileset.encode_entry)."""
    reader = ByteReader(data)
    width_tiles = reader.read(WireType.UINT8)
    height_tiles = reader.read(WireType.UINT8)
    return load_tileset(reader.remaining_bytes(), width_tiles, height_tiles)


# Sheet order inside an export file
GRAPHICS_ENTRIES = ("blocks", "overworld", "sprites")


class DecodedGraphics(NamedTuple):
    graphics: "Graphics"
    remaining_bytes: bytes


@dataclass(frozen=True)
class Graphics:
    """The block, overworld and sprite sheets edited together."""

    blocks: Tileset
    overworld: Tileset
    sprites: Tileset

    def entry(self, name: str) -> Tileset:
        if name not in GRAPHICS_ENTRIES:
            raise KeyError(f"Unknown graphics entry: {name}")
        return getattr(self, name)

    def entries(self) -> list[tuple[str, Tileset]]:
        return [(name, getattr(self, name)) for name in GRAPHICS_ENTRIES]

    def update_entry(self, name: str, tileset: Tileset) -> "Graphics":
        if name not in GRAPHICS_ENTRIES:
            raise KeyError(f"Unknown graphics entry: {name}")
        return replace(self, **{name: tileset})

    def encode(self) -> bytes:
        """Every sheet as a self-describing entry, blocks first."""
        return b"".join(tileset.encode_entry() for _, tileset in self.entries())


def create_new_graphics() -> Graphics:
    return Graphics(
        blocks=create_blank_tileset(TILESET_WIDTH_TILES, TILESET_HEIGHT_TILES),
        overworld=create_blank_tileset(OVERWORLD_TILESET_WIDTH_TILES, OVERWORLD_TILESET_HEIGHT_TILES),
        sprites=create_blank_tileset(SPRITE_TILESET_WIDTH_TILES, SPRITE_TILESET_HEIGHT_TILES),
    )


def load_graphics_from_data(data: bytes) -> DecodedGraphics:
    """
    Decode the three graphics entries from the start of a buffer.

    Each entry carries its own size, so sheets of any size load back.

    Raises:
        BufferUnderrunError: If an entry is truncated
        InvalidTilesetDataError: If an entry does not split into whole pixels
    """
    sheets = {}
    for name in GRAPHICS_ENTRIES:
        decoded = load_tileset_entry(data)
        sheets[name] = decoded.tileset
        data = decoded.remaining_bytes
    return DecodedGraphics(Graphics(**sheets), data)
