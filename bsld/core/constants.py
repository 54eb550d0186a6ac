"""
Boskeopolis Land Data - Game Constants

Shared constants for level counts and tile dimensions used by the
level, map and graphics codecs.
"""

# Level structure
CIRCLES_PER_GAME = 5
LEVELS_PER_CIRCLE = 16
LEVELS_PER_GAME = CIRCLES_PER_GAME * LEVELS_PER_CIRCLE  # 80
LEVEL_COUNT = 2 * LEVELS_PER_GAME  # 160 (two games)

# Tile dimensions
TILE_SIZE = 8  # 8x8 pixels per tile
TILES_PER_BLOCK = 2  # A map block is 2x2 tiles
PIXELS_PER_BLOCK = 16

# Block tileset sheet stored at the start of the save file
TILESET_WIDTH_TILES = 64
TILESET_HEIGHT_TILES = 64

# Overworld and sprite sheets, exported after the block sheet
OVERWORLD_TILESET_WIDTH_TILES = 128
OVERWORLD_TILESET_HEIGHT_TILES = 128
SPRITE_TILESET_WIDTH_TILES = 64
SPRITE_TILESET_HEIGHT_TILES = 64

# Pixel color indices (0 is transparent)
BITS_PER_PIXEL = 3
MAX_COLOR_INDEX = 7

# High color channels
BITS_PER_CHANNEL = 5
MAX_CHANNEL_VALUE = 31
PALETTE_SIZE = 8  # Colors per palette, index 0 implicit

# Map defaults
DEFAULT_MAP_WIDTH = 20
DEFAULT_MAP_HEIGHT = 20
DEFAULT_OVERWORLD_WIDTH = 20
DEFAULT_OVERWORLD_HEIGHT = 20
LAYER_TERMINATOR = 0xFFFF
