"""
Boskeopolis Land Data - JSON Project Document

Manages a whole editor project (palettes, graphics, levels) and handles
loading from and saving to JSON files.

Maps are stored decoded, so a project file can be edited by hand. Each
graphics sheet (blocks, overworld, sprites) is stored as its size in tiles
plus base64 of the packed 3-bit pixel stream.
"""

import base64
import binascii
from typing import Any, Dict, List, Optional

from . import compact_json as json
from ..core.constants import LEVEL_COUNT
from ..core.errors import CodecError
from ..core.goals import GOALS, create_goal
from ..core.graphics import (
    GRAPHICS_ENTRIES,
    Graphics,
    Tileset,
    compress_pixels,
    create_new_graphics,
    decompress_pixels,
)
from ..core.levels import Level
from ..core.maps import Layer, LevelMap, map_to_bytes
from ..core.objects import LayerType, MapObject, ObjectTypeTable, get_type_factory
from ..core.palettes import Color, Palette, PaletteList, create_blank_palette_list
from ..core.savefile import ExportData, SaveData
from ..core.text import test_characters


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_color(raw: Any, i: int, j: int) -> Color:
    where = f"color #{j} of palette #{i}"
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid color data for {where}")
    for key, label in (("r", "red"), ("g", "green"), ("b", "blue"), ("a", "alpha")):
        if not isinstance(raw.get(key), int) or isinstance(raw.get(key), bool):
            raise ValueError(f"Invalid color {label} for {where}")
    try:
        return Color(raw["r"], raw["g"], raw["b"], raw["a"])
    except CodecError as e:
        raise ValueError(f"Invalid color data for {where}: {e}") from e


def _parse_palettes(raw: Any) -> PaletteList:
    if not isinstance(raw, list):
        raise ValueError("Invalid palettes data")

    palettes = []
    for i, palette in enumerate(raw):
        if not isinstance(palette, dict):
            raise ValueError(f"Invalid palette data for palette #{i}")
        name = palette.get("name")
        if not isinstance(name, str) or not test_characters(name):
            raise ValueError(f"Invalid palette name for palette #{i}")
        colors = palette.get("colors")
        if not isinstance(colors, list):
            raise ValueError(f"Invalid palette colors for palette #{i}")
        if len(colors) != 8:
            raise ValueError(f"Invalid palette color count for palette #{i}")
        palettes.append(Palette(name, tuple(_parse_color(c, i, j) for j, c in enumerate(colors))))

    return PaletteList(tuple(palettes))


def _parse_graphics_entry(raw: Any, name: str) -> Tileset:
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid graphics {name} data")
    width = raw.get("widthTiles")
    height = raw.get("heightTiles")
    if not isinstance(width, int) or isinstance(width, bool) or width <= 0:
        raise ValueError("Invalid graphics width")
    if not isinstance(height, int) or isinstance(height, bool) or height <= 0:
        raise ValueError("Invalid graphics height")
    if not isinstance(raw.get("pixels"), str):
        raise ValueError("Invalid graphics pixels")

    try:
        pixels = decompress_pixels(base64.b64decode(raw["pixels"], validate=True))
        return Tileset(width, height, pixels)
    except (binascii.Error, CodecError, ValueError) as e:
        raise ValueError(f"Invalid graphics pixels for {name}: {e}") from e


def _parse_graphics(raw: Any) -> Graphics:
    if not isinstance(raw, dict):
        raise ValueError("Invalid graphics data")
    return Graphics(**{name: _parse_graphics_entry(raw.get(name), name) for name in GRAPHICS_ENTRIES})


def _graphics_entry_to_json(tileset: Tileset) -> Dict[str, Any]:
    return {
        "widthTiles": tileset.width_tiles,
        "heightTiles": tileset.height_tiles,
        "pixels": base64.b64encode(compress_pixels(tileset.pixels)).decode("ascii"),
    }


def _parse_object(raw: Any, types: ObjectTypeTable, where: str) -> MapObject:
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid object data for {where}")
    tag = raw.get("type")
    if not isinstance(tag, int) or not 0 <= tag < len(types):
        raise ValueError(f"Invalid object type for {where}")
    for key in ("x", "y"):
        if not _is_number(raw.get(key)):
            raise ValueError(f"Invalid object {key} for {where}")
    for key in ("width", "height"):
        if key in raw and not _is_number(raw[key]):
            raise ValueError(f"Invalid object {key} for {where}")

    props = {key: value for key, value in raw.items() if key != "type"}
    return MapObject(tag, {**types.lookup(tag).defaults, **props})


def _parse_layer(raw: Any, types: ObjectTypeTable, where: str) -> Layer:
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid layer data for {where}")
    if raw.get("type") not in [layer_type.value for layer_type in LayerType]:
        raise ValueError(f"Invalid layer type for {where}")
    if not isinstance(raw.get("objects"), list):
        raise ValueError(f"Invalid layer objects for {where}")
    if not _is_number(raw.get("scrollX")):
        raise ValueError(f"Invalid layer scrollX for {where}")

    objects = tuple(
        _parse_object(obj, types, f"object #{n} of {where}") for n, obj in enumerate(raw["objects"])
    )
    return Layer(LayerType(raw["type"]), objects, float(raw["scrollX"]))


def _parse_map(raw: Any, types: ObjectTypeTable, where: str) -> bytes:
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid map data for {where}")
    for key in ("width", "height"):
        if not isinstance(raw.get(key), int):
            raise ValueError(f"Invalid map {key} for {where}")
    if not isinstance(raw.get("layers"), list):
        raise ValueError(f"Invalid map layers for {where}")

    layers = tuple(
        _parse_layer(layer, types, f"layer #{k} of {where}") for k, layer in enumerate(raw["layers"])
    )
    try:
        return map_to_bytes(LevelMap(raw["width"], raw["height"], layers), types)
    except (CodecError, KeyError, ValueError) as e:
        raise ValueError(f"Invalid map data for {where}: {e}") from e


def _parse_level(raw: Any, i: int, types: ObjectTypeTable) -> Level:
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid level data for level #{i}")
    name = raw.get("name")
    if not isinstance(name, str) or not test_characters(name):
        raise ValueError(f"Invalid level name for level #{i}")
    goal = raw.get("goal")
    if not isinstance(goal, dict):
        raise ValueError(f"Invalid level goal for level #{i}")
    goal_id = goal.get("id")
    if not isinstance(goal_id, int) or not 0 <= goal_id < len(GOALS):
        raise ValueError(f"Invalid goal ID for level #{i}")
    if not isinstance(goal.get("options"), dict):
        raise ValueError(f"Invalid goal options for level #{i}")
    if not isinstance(raw.get("maps"), list):
        raise ValueError(f"Invalid level maps for level #{i}")

    options = {slug: str(value) for slug, value in goal["options"].items()}
    maps = tuple(_parse_map(m, types, f"map #{j} of level #{i}") for j, m in enumerate(raw["maps"]))
    return Level(name, create_goal(goal_id, options), maps)


class ProjectData:
    """Manages a project: palettes, graphics, and levels."""

    def __init__(self, types: Optional[ObjectTypeTable] = None):
        self.types = types if types is not None else get_type_factory(LayerType.BLOCK)
        self.palettes: PaletteList = create_blank_palette_list()
        self.graphics: Graphics = create_new_graphics()
        self.levels: List[Level] = [Level() for _ in range(LEVEL_COUNT)]
        self.filepath: Optional[str] = None
        self.modified: bool = False

    def load(self, path: str):
        """Load a project from a JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        self.load_dict(data)
        self.filepath = path
        self.modified = False

    def load_dict(self, data: Dict[str, Any]):
        """
        Replace project contents with a parsed JSON document.

        Sections missing from the document are reset to their defaults.
        Nothing is changed if any section is invalid.

        Raises:
            ValueError: Naming the first invalid element found
        """
        if not isinstance(data, dict):
            raise ValueError("Invalid project data")

        palettes = create_blank_palette_list()
        if "palettes" in data:
            palettes = _parse_palettes(data["palettes"])

        graphics = create_new_graphics()
        if "graphics" in data:
            graphics = _parse_graphics(data["graphics"])

        levels = []
        if "levels" in data:
            if not isinstance(data["levels"], list):
                raise ValueError("Invalid levels data")
            if len(data["levels"]) > LEVEL_COUNT:
                raise ValueError("Too many levels")
            levels = [_parse_level(level, i, self.types) for i, level in enumerate(data["levels"])]
        levels.extend(Level() for _ in range(LEVEL_COUNT - len(levels)))

        self.palettes = palettes
        self.graphics = graphics
        self.levels = levels
        self.modified = True

    def save(self, path: Optional[str] = None):
        """Save the project to a JSON file."""
        if path is None:
            path = self.filepath
        if path is None:
            raise ValueError("No save path specified")

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

        self.filepath = path
        self.modified = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "palettes": self.palettes.to_json(),
            "graphics": {
                name: _graphics_entry_to_json(tileset) for name, tileset in self.graphics.entries()
            },
            "levels": [level.to_json(self.types) for level in self.levels],
        }

    def set_level(self, index: int, level: Level):
        self.levels[index] = level
        self.modified = True

    def set_graphics(self, graphics: Graphics):
        self.graphics = graphics
        self.modified = True

    def set_palettes(self, palettes: PaletteList):
        self.palettes = palettes
        self.modified = True

    def to_save_data(self) -> SaveData:
        """The block sheet and levels, as stored in a save file."""
        return SaveData(self.graphics.blocks, tuple(self.levels))

    def to_export_data(self) -> ExportData:
        return ExportData(self.palettes, self.graphics, tuple(self.levels))

    @classmethod
    def from_save_data(
        cls,
        save: SaveData,
        palettes: Optional[PaletteList] = None,
        types: Optional[ObjectTypeTable] = None,
    ) -> "ProjectData":
        """Build a project from decoded save data (and an optional palette block)."""
        project = cls(types)
        project.graphics = project.graphics.update_entry("blocks", save.tileset)
        project.levels = list(save.levels)
        if palettes is not None:
            project.palettes = palettes
        return project

    @classmethod
    def from_export_data(
        cls, export: ExportData, types: Optional[ObjectTypeTable] = None
    ) -> "ProjectData":
        """Build a project from a decoded export file."""
        project = cls(types)
        project.palettes = export.palettes
        project.graphics = export.graphics
        project.levels = list(export.levels)
        return project
