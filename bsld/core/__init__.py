"""
Core save data codecs.

This package contains the byte and bit primitives, the Huffman text codec,
tileset and palette packing, and the map, level, overworld, save file and
export file formats for Boskeopolis Land.
"""

from .errors import (
    BufferUnderrunError,
    CodecError,
    InvalidColorError,
    InvalidTilesetDataError,
    InvalidTypeError,
    TextDecodeError,
    TextEncodeError,
    UnknownGoalError,
    UnknownObjectTypeError,
)
from .graphics import Graphics, Tileset, compress_pixels, decompress_pixels, load_graphics_from_data
from .levels import Level, encode_levels, load_level_from_data
from .maps import Layer, LevelMap, bytes_to_map, map_to_bytes, split_map_bytes
from .overworld import Overworld, encode_overworld, load_overworld_from_data
from .palettes import Color, Palette, PaletteList
from .savefile import (
    ExportData,
    SaveData,
    encode_export_data,
    encode_save_data,
    load_export_data,
    load_save_data,
)
from .text import decode_text, encode_text, test_characters

__all__ = [
    "BufferUnderrunError",
    "CodecError",
    "InvalidColorError",
    "InvalidTilesetDataError",
    "InvalidTypeError",
    "TextDecodeError",
    "TextEncodeError",
    "UnknownGoalError",
    "UnknownObjectTypeError",
    "Graphics",
    "Tileset",
    "compress_pixels",
    "decompress_pixels",
    "load_graphics_from_data",
    "Level",
    "encode_levels",
    "load_level_from_data",
    "Layer",
    "LevelMap",
    "bytes_to_map",
    "map_to_bytes",
    "split_map_bytes",
    "Overworld",
    "encode_overworld",
    "load_overworld_from_data",
    "Color",
    "Palette",
    "PaletteList",
    "ExportData",
    "SaveData",
    "encode_export_data",
    "encode_save_data",
    "load_export_data",
    "load_save_data",
    "decode_text",
    "encode_text",
    "test_characters",
]
