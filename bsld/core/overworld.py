"""
Boskeopolis Land Data - Overworld

Immutable Overworld / OverworldMap / OverworldLayer models and the overworld
binary codec.

Overworld layout:
    Uint8 map_count | <map> * map_count

Map layout:
    Uint8 width | Uint8 height | Uint8 layer_count | <layer> * layer_count

Layer layout:
    Uint8 layer_type | (Uint16 type_tag, <type fields>)* | Uint16 0xFFFF

Layer type byte 0 is a block layer; any other byte decodes as a sprite
layer. Every layer type uses the overworld tile table.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, NamedTuple

from .byte_utils import ByteReader, TypedValue, WireType, pack_values
from .constants import (
    DEFAULT_OVERWORLD_HEIGHT,
    DEFAULT_OVERWORLD_WIDTH,
    LAYER_TERMINATOR,
    PIXELS_PER_BLOCK,
    TILES_PER_BLOCK,
)
from .errors import UnknownObjectTypeError
from .objects import MapObject, ObjectTypeTable, get_overworld_type_factory


class OverworldLayerType(Enum):
    BLOCK = "block"
    SPRITE = "sprite"


_LAYER_TYPE_BYTES = {OverworldLayerType.BLOCK: 0, OverworldLayerType.SPRITE: 1}


class DecodedOverworld(NamedTuple):
    overworld: "Overworld"
    remaining_bytes: bytes


@dataclass(frozen=True)
class OverworldLayer:
    type: OverworldLayerType = OverworldLayerType.BLOCK
    objects: tuple[MapObject, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "objects", tuple(self.objects))

    def get_object(self, index: int) -> MapObject:
        if not 0 <= index < len(self.objects):
            raise IndexError(f"Object index out of bounds: {index}")
        return self.objects[index]

    def add_object(self, obj: MapObject) -> "OverworldLayer":
        return replace(self, objects=self.objects + (obj,))

    def remove_object(self, index: int) -> "OverworldLayer":
        self.get_object(index)
        objects = list(self.objects)
        del objects[index]
        return replace(self, objects=tuple(objects))

    def update_object(self, index: int, **changes) -> "OverworldLayer":
        objects = list(self.objects)
        objects[index] = self.get_object(index).update(**changes)
        return replace(self, objects=tuple(objects))

    def to_json(self) -> dict:
        return {
            "objects": [obj.to_json() for obj in self.objects],
            "type": self.type.value,
        }


def _swap(items: tuple, a: int, b: int) -> tuple:
    swapped = list(items)
    swapped[a], swapped[b] = swapped[b], swapped[a]
    return tuple(swapped)


@dataclass(frozen=True)
class OverworldMap:
    """One overworld map. Width and height are in blocks."""

    width: int = DEFAULT_OVERWORLD_WIDTH
    height: int = DEFAULT_OVERWORLD_HEIGHT
    layers: tuple[OverworldLayer, ...] = field(default_factory=lambda: (OverworldLayer(),))

    def __post_init__(self):
        object.__setattr__(self, "layers", tuple(self.layers))

    @property
    def width_tiles(self) -> int:
        return self.width * TILES_PER_BLOCK

    @property
    def height_tiles(self) -> int:
        return self.height * TILES_PER_BLOCK

    @property
    def width_pixels(self) -> int:
        return self.width * PIXELS_PER_BLOCK

    @property
    def height_pixels(self) -> int:
        return self.height * PIXELS_PER_BLOCK

    def add_layer(self, layer_type: OverworldLayerType = OverworldLayerType.BLOCK) -> "OverworldMap":
        return replace(self, layers=self.layers + (OverworldLayer(layer_type),))

    def remove_layer(self, index: int) -> "OverworldMap":
        if len(self.layers) <= 1:
            raise ValueError("Cannot remove the last layer.")
        layers = list(self.layers)
        del layers[index]
        return replace(self, layers=tuple(layers))

    def move_layer_up(self, index: int) -> "OverworldMap":
        if not 0 < index < len(self.layers):
            raise IndexError("Cannot move layer up: index out of bounds.")
        return replace(self, layers=_swap(self.layers, index, index - 1))

    def move_layer_down(self, index: int) -> "OverworldMap":
        if not 0 <= index < len(self.layers) - 1:
            raise IndexError("Cannot move layer down: index out of bounds.")
        return replace(self, layers=_swap(self.layers, index, index + 1))

    def update_layer(self, index: int, new_layer: OverworldLayer) -> "OverworldMap":
        layers = list(self.layers)
        layers[index] = new_layer
        return replace(self, layers=tuple(layers))

    def update_width(self, width: int) -> "OverworldMap":
        return replace(self, width=width)

    def update_height(self, height: int) -> "OverworldMap":
        return replace(self, height=height)

    def to_json(self) -> dict:
        return {
            "height": self.height,
            "layers": [layer.to_json() for layer in self.layers],
            "width": self.width,
        }


@dataclass(frozen=True)
class Overworld:
    """Every overworld map, in order. There is always at least one."""

    maps: tuple[OverworldMap, ...] = field(default_factory=lambda: (OverworldMap(),))

    def __post_init__(self):
        object.__setattr__(self, "maps", tuple(self.maps))

    def add_map(self) -> "Overworld":
        return replace(self, maps=self.maps + (OverworldMap(),))

    def remove_map(self, index: int) -> "Overworld":
        if len(self.maps) <= 1:
            raise ValueError("Cannot remove the last map.")
        maps = list(self.maps)
        del maps[index]
        return replace(self, maps=tuple(maps))

    def move_map_up(self, index: int) -> "Overworld":
        if not 0 < index < len(self.maps):
            raise IndexError("Cannot move map up: index out of bounds.")
        return replace(self, maps=_swap(self.maps, index, index - 1))

    def move_map_down(self, index: int) -> "Overworld":
        if not 0 <= index < len(self.maps) - 1:
            raise IndexError("Cannot move map down: index out of bounds.")
        return replace(self, maps=_swap(self.maps, index, index + 1))

    def update_map(self, index: int, new_map: OverworldMap) -> "Overworld":
        maps = list(self.maps)
        maps[index] = new_map
        return replace(self, maps=tuple(maps))

    def encode(self, types: ObjectTypeTable | None = None) -> bytes:
        return encode_overworld(self, types)

    def to_json(self) -> dict:
        return {"maps": [overworld_map.to_json() for overworld_map in self.maps]}


def create_blank_overworld() -> Overworld:
    """One 20x20 map holding one empty block layer."""
    return Overworld()


def create_overworld_object(
    tag: int, x: int, y: int, types: ObjectTypeTable | None = None
) -> MapObject:
    """
    Place a new overworld tile object with its type's defaults.

    Raises:
        UnknownObjectTypeError: If tag is not in the overworld tile table
    """
    if types is None:
        types = get_overworld_type_factory()
    if not 0 <= tag < len(types):
        raise UnknownObjectTypeError(f"Invalid overworld tile type: {tag}")
    return types.create(tag, x, y)


def encode_overworld(overworld: Overworld, types: ObjectTypeTable | None = None) -> bytes:
    """
    Encode every map, layer and object.

    Raises:
        ValueError: If a count, size or field value does not fit its wire type
        UnknownObjectTypeError: If an object's type tag is not in the table
        KeyError: If an object lacks a field its type declares
    """
    if types is None:
        types = get_overworld_type_factory()

    values = [TypedValue(WireType.UINT8, len(overworld.maps))]
    for overworld_map in overworld.maps:
        values.append(TypedValue(WireType.UINT8, overworld_map.width))
        values.append(TypedValue(WireType.UINT8, overworld_map.height))
        values.append(TypedValue(WireType.UINT8, len(overworld_map.layers)))

        for layer in overworld_map.layers:
            values.append(TypedValue(WireType.UINT8, _LAYER_TYPE_BYTES[layer.type]))
            for obj in layer.objects:
                if obj.type == LAYER_TERMINATOR:
                    raise ValueError(
                        f"Object type {obj.type:#06x} is reserved as the layer terminator"
                    )
                object_type = types.lookup(obj.type)
                values.append(TypedValue(WireType.UINT16, obj.type))
                values.extend(
                    TypedValue(spec.wire_type, obj.get_prop(spec.key))
                    for spec in object_type.fields
                )
            values.append(TypedValue(WireType.UINT16, LAYER_TERMINATOR))

    return pack_values(values)


def load_overworld_from_data(
    data: bytes, types: ObjectTypeTable | None = None
) -> DecodedOverworld:
    """
    Decode an overworld from the start of a buffer.

    Fields of any wire type the table names are read, including the signed
    Int8 and Int16 types.

    Raises:
        BufferUnderrunError: If the data is truncated
        UnknownObjectTypeError: If an object type tag is not in the table
    """
    if types is None:
        types = get_overworld_type_factory()

    reader = ByteReader(data)
    maps = []
    for _ in range(reader.read(WireType.UINT8)):
        width = reader.read(WireType.UINT8)
        height = reader.read(WireType.UINT8)
        layers = []
        for _ in range(reader.read(WireType.UINT8)):
            layer_type = (
                OverworldLayerType.BLOCK
                if reader.read(WireType.UINT8) == 0
                else OverworldLayerType.SPRITE
            )
            objects = []
            while True:
                tag = reader.read(WireType.UINT16)
                if tag == LAYER_TERMINATOR:
                    break
                object_type = types.lookup(tag)
                props = {spec.key: reader.read(spec.wire_type) for spec in object_type.fields}
                objects.append(MapObject(tag, {**object_type.defaults, **props}))
            layers.append(OverworldLayer(layer_type, tuple(objects)))
        maps.append(OverworldMap(width, height, tuple(layers)))

    return DecodedOverworld(Overworld(tuple(maps)), reader.remaining_bytes())


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _layer_from_json(raw: Any, types: ObjectTypeTable) -> OverworldLayer:
    if (
        not isinstance(raw, dict)
        or not isinstance(raw.get("objects"), list)
        or raw.get("type") not in [layer_type.value for layer_type in OverworldLayerType]
    ):
        raise ValueError("Invalid overworld layer data")

    objects = []
    for obj in raw["objects"]:
        if not isinstance(obj, dict) or not _is_int(obj.get("type")):
            raise ValueError("Invalid overworld object data")
        if not 0 <= obj["type"] < len(types):
            raise ValueError(f"Invalid overworld tile type: {obj['type']}")
        props = {key: value for key, value in obj.items() if key != "type"}
        objects.append(MapObject(obj["type"], {**types.lookup(obj["type"]).defaults, **props}))
    return OverworldLayer(OverworldLayerType(raw["type"]), tuple(objects))


def create_overworld_from_json(data: Any, types: ObjectTypeTable | None = None) -> Overworld:
    """
    Build an overworld from the document produced by Overworld.to_json().

    Raises:
        ValueError: Naming the first invalid element found
    """
    if types is None:
        types = get_overworld_type_factory()

    if not isinstance(data, dict) or not isinstance(data.get("maps"), list):
        raise ValueError("Invalid overworld data")

    maps = []
    for raw in data["maps"]:
        if (
            not isinstance(raw, dict)
            or not _is_int(raw.get("width"))
            or not _is_int(raw.get("height"))
            or not isinstance(raw.get("layers"), list)
        ):
            raise ValueError("Invalid overworld map data")
        layers = tuple(_layer_from_json(layer, types) for layer in raw["layers"])
        maps.append(OverworldMap(raw["width"], raw["height"], layers))

    return Overworld(tuple(maps))
