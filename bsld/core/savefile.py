"""
Boskeopolis Land Data - Save and Export Files

Save file layout:
    <packed tileset pixels, ceil(pixel_count * 3 / 8) bytes> | <level>*

Export file layout:
    <palette block> | <blocks entry> | <overworld entry> | <sprites entry>
    | <level>*

A graphics entry is Uint8 width_tiles | Uint8 height_tiles | packed pixels.

In both files the level count is not stored. Levels are read until the data
runs out and the list is padded with blank levels up to the game's level
count.
"""

from dataclasses import dataclass, field, replace

from .constants import LEVEL_COUNT, TILESET_HEIGHT_TILES, TILESET_WIDTH_TILES
from .graphics import (
    Graphics,
    Tileset,
    create_blank_tileset,
    create_new_graphics,
    load_graphics_from_data,
    load_tileset,
)
from .levels import Level, encode_levels, load_levels
from .objects import ObjectTypeTable
from .palettes import PaletteList, create_blank_palette_list, decode_palette_data


def _pad_levels(levels: list[Level], level_count: int) -> tuple[Level, ...]:
    if len(levels) > level_count:
        raise ValueError(f"Too many levels: save data has {len(levels)}, maximum is {level_count}")
    levels.extend(Level() for _ in range(level_count - len(levels)))
    return tuple(levels)


@dataclass(frozen=True)
class SaveData:
    tileset: Tileset
    levels: tuple[Level, ...]

    def __post_init__(self):
        object.__setattr__(self, "levels", tuple(self.levels))

    def update_tileset(self, tileset: Tileset) -> "SaveData":
        return replace(self, tileset=tileset)

    def update_level(self, index: int, level: Level) -> "SaveData":
        levels = list(self.levels)
        levels[index] = level
        return replace(self, levels=tuple(levels))


def create_new_save_data(
    width_tiles: int = TILESET_WIDTH_TILES,
    height_tiles: int = TILESET_HEIGHT_TILES,
    level_count: int = LEVEL_COUNT,
) -> SaveData:
    return SaveData(
        create_blank_tileset(width_tiles, height_tiles),
        tuple(Level() for _ in range(level_count)),
    )


def load_save_data(
    data: bytes,
    width_tiles: int = TILESET_WIDTH_TILES,
    height_tiles: int = TILESET_HEIGHT_TILES,
    level_count: int = LEVEL_COUNT,
    types: ObjectTypeTable | None = None,
) -> SaveData:
    """
    Decode a full save file.

    Args:
        data: Save file bytes
        width_tiles: Tileset width in tiles
        height_tiles: Tileset height in tiles
        level_count: Number of levels the game expects
        types: Object type table (default table if None)

    Returns:
        SaveData with exactly level_count levels

    Raises:
        ValueError: If the file holds more than level_count levels
        BufferUnderrunError: If the tileset or a level record is truncated
    """
    decoded = load_tileset(data, width_tiles, height_tiles)
    levels = load_levels(decoded.remaining_bytes, types)
    return SaveData(decoded.tileset, _pad_levels(levels, level_count))


def encode_save_data(save: SaveData) -> bytes:
    """Encode the tileset followed by every level."""
    return save.tileset.encode() + encode_levels(save.levels)


@dataclass(frozen=True)
class ExportData:
    """Everything the game reads from an export file."""

    palettes: PaletteList = field(default_factory=create_blank_palette_list)
    graphics: Graphics = field(default_factory=create_new_graphics)
    levels: tuple[Level, ...] = field(
        default_factory=lambda: tuple(Level() for _ in range(LEVEL_COUNT))
    )

    def __post_init__(self):
        object.__setattr__(self, "levels", tuple(self.levels))

    def to_save_data(self) -> SaveData:
        """The block sheet and levels, as stored in a save file."""
        return SaveData(self.graphics.blocks, self.levels)


def encode_export_data(export: ExportData) -> bytes:
    """Encode palettes, then the three graphics entries, then every level."""
    return export.palettes.encode() + export.graphics.encode() + encode_levels(export.levels)


def load_export_data(
    data: bytes,
    level_count: int = LEVEL_COUNT,
    types: ObjectTypeTable | None = None,
) -> ExportData:
    """
    Decode a full export file.

    Returns:
        ExportData with exactly level_count levels

    Raises:
        ValueError: If the file holds more than level_count levels
        BufferUnderrunError: If any block is truncated
        TextDecodeError: If a palette or level name cannot be decoded
    """
    palettes = decode_palette_data(data)
    graphics = load_graphics_from_data(palettes.remaining_bytes)
    levels = load_levels(graphics.remaining_bytes, types)
    return ExportData(palettes.palettes, graphics.graphics, _pad_levels(levels, level_count))
