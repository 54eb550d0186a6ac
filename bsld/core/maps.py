"""
Boskeopolis Land Data - Map Binary Format

Immutable Layer / LevelMap models and the map blob codec.

Map blob layout:
    Uint16 width | Uint16 height | Uint8 layer_count | <layer> * layer_count

Layer layout:
    Float32 scroll_x | (Uint16 type_tag, <type fields>)* | Uint16 0xFFFF

A map is parsed by a three-state machine (see ParseState). The same walk
drives the full decode and the skip-only scan used to split concatenated
map blobs, so split boundaries always match where a decode stops.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple

from .byte_utils import ByteReader, TypedValue, WireType, pack_values
from .constants import DEFAULT_MAP_HEIGHT, DEFAULT_MAP_WIDTH, LAYER_TERMINATOR
from .objects import LayerType, MapObject, ObjectTypeTable, get_type_factory

MAP_HEADER = (WireType.UINT16, WireType.UINT16, WireType.UINT8)
MAP_HEADER_SIZE = sum(wtype.size for wtype in MAP_HEADER)


class ParseState(Enum):
    READING_LAYER_OPTIONS = "reading_layer_options"
    READING_TYPE = "reading_type"
    READING_OBJECT_DATA = "reading_object_data"


@dataclass(frozen=True)
class Layer:
    """An ordered list of objects plus the layer's horizontal scroll speed."""

    type: LayerType = LayerType.BLOCK
    objects: tuple[MapObject, ...] = ()
    scroll_x: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "objects", tuple(self.objects))

    def add_object(self, obj: MapObject) -> "Layer":
        return replace(self, objects=self.objects + (obj,))

    def insert_object(self, index: int, obj: MapObject) -> "Layer":
        objects = list(self.objects)
        objects.insert(index, obj)
        return replace(self, objects=tuple(objects))

    def remove_object(self, index: int) -> "Layer":
        objects = list(self.objects)
        del objects[index]
        return replace(self, objects=tuple(objects))

    def update_object(self, index: int, **changes) -> "Layer":
        objects = list(self.objects)
        objects[index] = objects[index].update(**changes)
        return replace(self, objects=tuple(objects))

    def move_object(self, from_index: int, to_index: int) -> "Layer":
        """Move one object to a new position in the draw order."""
        objects = list(self.objects)
        obj = objects.pop(from_index)
        objects.insert(to_index, obj)
        return replace(self, objects=tuple(objects))

    def update_scroll_x(self, scroll_x: float) -> "Layer":
        return replace(self, scroll_x=scroll_x)

    def to_json(self) -> dict:
        return {
            "type": self.type.value,
            "scrollX": self.scroll_x,
            "objects": [obj.to_json() for obj in self.objects],
        }


@dataclass(frozen=True)
class LevelMap:
    """
    Working representation of one map.

    The persisted form is the byte blob produced by map_to_bytes().
    Width and height are in blocks.
    """

    width: int = DEFAULT_MAP_WIDTH
    height: int = DEFAULT_MAP_HEIGHT
    layers: tuple[Layer, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "layers", tuple(self.layers))

    def add_layer(self, layer_type: LayerType = LayerType.BLOCK) -> "LevelMap":
        return replace(self, layers=self.layers + (Layer(layer_type),))

    def remove_layer(self, index: int) -> "LevelMap":
        layers = list(self.layers)
        del layers[index]
        return replace(self, layers=tuple(layers))

    def switch_layers(self, a: int, b: int) -> "LevelMap":
        layers = list(self.layers)
        layers[a], layers[b] = layers[b], layers[a]
        return replace(self, layers=tuple(layers))

    def update_layer(self, index: int, new_layer: Layer) -> "LevelMap":
        layers = list(self.layers)
        layers[index] = new_layer
        return replace(self, layers=tuple(layers))

    def update_width(self, width: int) -> "LevelMap":
        return replace(self, width=width)

    def update_height(self, height: int) -> "LevelMap":
        return replace(self, height=height)

    def to_json(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "layers": [layer.to_json() for layer in self.layers],
        }


class SplitMaps(NamedTuple):
    maps: tuple[bytes, ...]
    remaining_bytes: bytes


def _walk_map(
    data: bytes, offset: int, types: ObjectTypeTable, materialize: bool
) -> tuple[int, LevelMap | None]:
    """
    Run the map state machine over one map blob starting at offset.

    Returns the offset just past the map, plus the decoded LevelMap when
    materialize is set. In skip mode field values are read for bounds
    checking and then discarded.
    """
    reader = ByteReader(data, offset)
    width, height, layer_count = (reader.read(wtype) for wtype in MAP_HEADER)

    layers = []
    objects: list[MapObject] = []
    scroll_x = 0.0
    object_tag = 0
    current_layer = 0
    state = ParseState.READING_LAYER_OPTIONS

    while current_layer < layer_count:
        if state is ParseState.READING_LAYER_OPTIONS:
            scroll_x = reader.read(WireType.FLOAT32)
            state = ParseState.READING_TYPE

        elif state is ParseState.READING_TYPE:
            tag = reader.read(WireType.UINT16)
            if tag == LAYER_TERMINATOR:
                if materialize:
                    layers.append(Layer(LayerType.BLOCK, tuple(objects), scroll_x))
                objects = []
                current_layer += 1
                state = ParseState.READING_LAYER_OPTIONS
            else:
                object_tag = tag
                state = ParseState.READING_OBJECT_DATA

        else:
            object_type = types.lookup(object_tag)
            props = {spec.key: reader.read(spec.wire_type) for spec in object_type.fields}
            if materialize:
                objects.append(MapObject(object_tag, {**object_type.defaults, **props}))
            state = ParseState.READING_TYPE

    if not materialize:
        return reader.offset, None
    return reader.offset, LevelMap(width, height, tuple(layers))


def map_to_bytes(level_map: LevelMap, types: ObjectTypeTable | None = None) -> bytes:
    """
    Encode a map into its byte blob.

    Object fields are written in the order the type table declares them.

    Raises:
        ValueError: If a header or field value does not fit its wire type
        UnknownObjectTypeError: If an object's type tag is not in the table
        KeyError: If an object lacks a field its type declares
    """
    if types is None:
        types = get_type_factory(LayerType.BLOCK)

    values = [
        TypedValue(WireType.UINT16, level_map.width),
        TypedValue(WireType.UINT16, level_map.height),
        TypedValue(WireType.UINT8, len(level_map.layers)),
    ]

    for layer in level_map.layers:
        values.append(TypedValue(WireType.FLOAT32, layer.scroll_x))
        for obj in layer.objects:
            if obj.type == LAYER_TERMINATOR:
                raise ValueError(f"Object type {obj.type:#06x} is reserved as the layer terminator")
            object_type = types.lookup(obj.type)
            values.append(TypedValue(WireType.UINT16, obj.type))
            values.extend(
                TypedValue(spec.wire_type, obj.get_prop(spec.key)) for spec in object_type.fields
            )
        values.append(TypedValue(WireType.UINT16, LAYER_TERMINATOR))

    return pack_values(values)


def bytes_to_map(data: bytes, types: ObjectTypeTable | None = None) -> LevelMap:
    """
    Decode a map byte blob.

    Bytes after the last layer terminator are ignored.

    Raises:
        BufferUnderrunError: If the blob is truncated
        UnknownObjectTypeError: If an object type tag is not in the table
    """
    if types is None:
        types = get_type_factory(LayerType.BLOCK)
    _, level_map = _walk_map(data, 0, types, materialize=True)
    return level_map


def find_map_end(data: bytes, offset: int = 0, types: ObjectTypeTable | None = None) -> int:
    """
    Find the offset just past the map blob that starts at offset.

    Raises:
        BufferUnderrunError: If the map runs past the end of data
        UnknownObjectTypeError: If an object type tag is not in the table
    """
    if types is None:
        types = get_type_factory(LayerType.BLOCK)
    end, _ = _walk_map(data, offset, types, materialize=False)
    return end


def split_map_bytes(data: bytes, count: int, types: ObjectTypeTable | None = None) -> SplitMaps:
    """
    Carve count consecutive map blobs off the front of a buffer.

    Args:
        data: Buffer starting with the first map blob
        count: Number of maps to read
        types: Object type table (default table if None)

    Returns:
        SplitMaps with each map's bytes and the bytes after the last map
    """
    data = bytes(data)
    maps = []
    start = 0
    for _ in range(count):
        end = find_map_end(data, start, types)
        maps.append(data[start:end])
        start = end
    return SplitMaps(tuple(maps), data[start:])
