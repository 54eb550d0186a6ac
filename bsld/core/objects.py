"""
Boskeopolis Land Data - Map Objects

Object type tables and the immutable MapObject model.

The object type table is external data (bsld/data/object_types.json): an
ordered list of object types per layer type, where a type's index is its
wire type tag. Each type lists the (wire type, field key) pairs written
after the tag, in order.
The "overworld" section holds the overworld tile table, shared by every
overworld layer type.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

from .byte_utils import FieldSpec, wire_type
from .constants import PIXELS_PER_BLOCK, TILES_PER_BLOCK
from .errors import UnknownObjectTypeError


class LayerType(Enum):
    BLOCK = "block"


OVERWORLD_SECTION = "overworld"


@dataclass(frozen=True)
class MapObject:
    """
    A placed object: its type tag plus a record of named fields.

    Positions and sizes are in blocks. Edits return a new MapObject.
    """

    type: int
    props: Mapping = field(default_factory=dict)

    def __post_init__(self):
        # Read-only view over a private copy
        object.__setattr__(self, "props", MappingProxyType(dict(self.props)))

    def __hash__(self):
        return hash((self.type, frozenset(self.props.items())))

    def get_prop(self, key: str):
        if key not in self.props:
            raise KeyError(f"Key {key} not found in object.")
        return self.props[key]

    def update(self, **changes) -> "MapObject":
        new_type = changes.pop("type", self.type)
        return MapObject(new_type, {**self.props, **changes})

    def to_json(self) -> dict:
        return {"type": self.type, **self.props}

    def x_blocks(self) -> int:
        return self.props.get("x", 0)

    def y_blocks(self) -> int:
        return self.props.get("y", 0)

    def width_blocks(self) -> int:
        return self.props.get("width", 1)

    def height_blocks(self) -> int:
        return self.props.get("height", 1)

    def right_blocks(self) -> int:
        return self.x_blocks() + self.width_blocks()

    def bottom_blocks(self) -> int:
        return self.y_blocks() + self.height_blocks()

    def x_tiles(self) -> int:
        return self.x_blocks() * TILES_PER_BLOCK

    def y_tiles(self) -> int:
        return self.y_blocks() * TILES_PER_BLOCK

    def right_tiles(self) -> int:
        return self.right_blocks() * TILES_PER_BLOCK

    def bottom_tiles(self) -> int:
        return self.bottom_blocks() * TILES_PER_BLOCK

    def x_pixels(self) -> int:
        return self.x_blocks() * PIXELS_PER_BLOCK

    def y_pixels(self) -> int:
        return self.y_blocks() * PIXELS_PER_BLOCK

    def right_pixels(self) -> int:
        return self.right_blocks() * PIXELS_PER_BLOCK

    def bottom_pixels(self) -> int:
        return self.bottom_blocks() * PIXELS_PER_BLOCK


@dataclass(frozen=True)
class ObjectType:
    """Schema for one object type tag."""

    name: str
    defaults: Mapping
    fields: tuple[FieldSpec, ...]

    def __post_init__(self):
        object.__setattr__(self, "defaults", MappingProxyType(dict(self.defaults)))
        object.__setattr__(self, "fields", tuple(self.fields))

    @property
    def size(self) -> int:
        """Bytes of field data following the type tag."""
        return sum(spec.wire_type.size for spec in self.fields)

    def create(self, tag: int, x: int, y: int) -> MapObject:
        """Create an object of this type at (x, y) with the type's defaults."""
        return MapObject(tag, {"x": x, "y": y, **self.defaults})


class ObjectTypeTable:
    """Ordered, read-only list of object types; the index is the type tag."""

    def __init__(self, types: list[ObjectType]):
        self._types = tuple(types)

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[ObjectType]:
        return iter(self._types)

    def lookup(self, tag: int) -> ObjectType:
        """
        Get the object type for a type tag.

        Raises:
            UnknownObjectTypeError: If tag is not in the table
        """
        if not 0 <= tag < len(self._types):
            raise UnknownObjectTypeError(f"Unknown object type: {tag}")
        return self._types[tag]

    def create(self, tag: int, x: int, y: int) -> MapObject:
        return self.lookup(tag).create(tag, x, y)

    def names(self) -> list[str]:
        return [object_type.name for object_type in self._types]


def _get_default_types_path() -> Path:
    """Get default path to object_types.json."""
    return Path(__file__).parent.parent / "data" / "object_types.json"


def _read_type_file(types_path: str | None) -> dict:
    if types_path is None:
        types_path = _get_default_types_path()
    else:
        types_path = Path(types_path)

    if not types_path.exists():
        raise FileNotFoundError(f"Object type table not found: {types_path}")

    with open(types_path, encoding="utf-8") as f:
        return json.load(f)


def _parse_table(raw: dict, section: str) -> ObjectTypeTable:
    if section not in raw:
        raise ValueError(f"Missing '{section}' section in object types")

    types = []
    for idx, entry in enumerate(raw[section]):
        for key in ("name", "fields"):
            if key not in entry:
                raise ValueError(f"Missing '{key}' in {section} object type #{idx}")
        fields = tuple(FieldSpec(wire_type(type_name), key) for type_name, key in entry["fields"])
        types.append(ObjectType(entry["name"], dict(entry.get("defaults", {})), fields))

    return ObjectTypeTable(types)


def load_object_types(types_path: str | None = None) -> dict[LayerType, ObjectTypeTable]:
    """Load object type tables from JSON.

    Args:
        types_path: Path to object_types.json. If None, uses default path.

    Returns:
        Dict mapping each LayerType to its ObjectTypeTable

    Raises:
        FileNotFoundError: If types file not found
        ValueError: If table structure is invalid
        InvalidTypeError: If a field names an unknown wire type
    """
    raw = _read_type_file(types_path)
    return {layer_type: _parse_table(raw, layer_type.value) for layer_type in LayerType}


def load_overworld_types(types_path: str | None = None) -> ObjectTypeTable:
    """Load the overworld tile table (the "overworld" section) from JSON."""
    return _parse_table(_read_type_file(types_path), OVERWORLD_SECTION)


@lru_cache(maxsize=None)
def _default_tables() -> dict[LayerType, ObjectTypeTable]:
    return load_object_types()


@lru_cache(maxsize=None)
def _default_overworld_table() -> ObjectTypeTable:
    return load_overworld_types()


def get_type_factory(layer_type: LayerType = LayerType.BLOCK) -> ObjectTypeTable:
    """Get the default object type table for a layer type."""
    return _default_tables()[layer_type]


def get_overworld_type_factory() -> ObjectTypeTable:
    """Get the default overworld tile table. Block and sprite layers share it."""
    return _default_overworld_table()
