"""
Boskeopolis Land Data - Levels

The immutable Level model and the level record codec.

Level record layout:
    <Huffman name> | Uint8 goal_id | <goal export fields> | Uint8 map_count
    | <map blob> * map_count

Maps are kept as raw byte blobs; decode one with Level.decode_map().
"""

from dataclasses import dataclass, field, replace
from typing import NamedTuple

from .byte_utils import ByteReader, TypedValue, WireType, pack_values
from .errors import TextEncodeError
from .goals import Goal, create_goal, get_goal_template
from .maps import LevelMap, bytes_to_map, map_to_bytes, split_map_bytes
from .objects import ObjectTypeTable
from .text import decode_text, encode_text, test_characters

DEFAULT_LEVEL_NAME = "Unnamed Level"


@dataclass(frozen=True)
class Level:
    name: str = DEFAULT_LEVEL_NAME
    goal: Goal = field(default_factory=lambda: create_goal(0))
    maps: tuple[bytes, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "maps", tuple(bytes(m) for m in self.maps))

    def update_name(self, new_name: str) -> "Level":
        return replace(self, name=new_name)

    def update_goal(self, new_goal: Goal) -> "Level":
        return replace(self, goal=new_goal)

    def update_maps(self, new_maps) -> "Level":
        return replace(self, maps=tuple(new_maps))

    def is_blank(self) -> bool:
        """True for a level with the default name and goal and no maps."""
        return (
            self.name.upper() == DEFAULT_LEVEL_NAME.upper()
            and self.goal == create_goal(0)
            and not self.maps
        )

    def decode_map(self, index: int, types: ObjectTypeTable | None = None) -> LevelMap:
        return bytes_to_map(self.maps[index], types)

    def with_map(self, index: int, level_map: LevelMap, types: ObjectTypeTable | None = None) -> "Level":
        """Replace one map blob with the encoding of level_map."""
        maps = list(self.maps)
        maps[index] = map_to_bytes(level_map, types)
        return replace(self, maps=tuple(maps))

    def to_json(self, types: ObjectTypeTable | None = None) -> dict:
        return {
            "name": self.name,
            "goal": self.goal.to_json(),
            "maps": [bytes_to_map(m, types).to_json() for m in self.maps],
        }


class DecodedLevel(NamedTuple):
    level: Level
    remaining_bytes: bytes


def encode_level(level: Level) -> bytes:
    """
    Encode one level record.

    Raises:
        TextEncodeError: If the name has characters outside the text alphabet
        UnknownGoalError: If the goal id does not select a template
        ValueError: If a goal option is not an integer, a value does not fit
            its wire type, or there are more than 255 maps
    """
    if not test_characters(level.name):
        raise TextEncodeError(f"Invalid level name: {level.name!r}")

    template = get_goal_template(level.goal.id)
    values = [TypedValue(WireType.UINT8, level.goal.id)]
    for spec in template.export_data:
        raw = level.goal.get_option(spec.key)
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"Goal option '{spec.key}' must be an integer, got {raw!r}") from None
        values.append(TypedValue(spec.wire_type, value))
    values.append(TypedValue(WireType.UINT8, len(level.maps)))

    return encode_text(level.name) + pack_values(values) + b"".join(level.maps)


def encode_levels(levels) -> bytes:
    """Encode levels back to back."""
    return b"".join(encode_level(level) for level in levels)


def load_level_from_data(data: bytes, types: ObjectTypeTable | None = None) -> DecodedLevel:
    """
    Decode one level record from the start of a buffer.

    Goal option values are stored as decimal strings.

    Returns:
        DecodedLevel with the level and the bytes after its record

    Raises:
        TextDecodeError: If the name cannot be decoded
        UnknownGoalError: If the goal id does not select a template
        BufferUnderrunError: If the record is truncated
        UnknownObjectTypeError: If a map holds an unknown object type
    """
    name_data = decode_text(data)

    reader = ByteReader(name_data.remaining_bytes)
    goal_id = reader.read(WireType.UINT8)
    template = get_goal_template(goal_id)
    options = {spec.key: str(reader.read(spec.wire_type)) for spec in template.export_data}
    goal = create_goal(goal_id, options)

    map_count = reader.read(WireType.UINT8)
    map_data = split_map_bytes(reader.remaining_bytes(), map_count, types)

    return DecodedLevel(
        level=Level(name_data.text, goal, map_data.maps),
        remaining_bytes=map_data.remaining_bytes,
    )


def load_levels(data: bytes, types: ObjectTypeTable | None = None) -> list[Level]:
    """Decode level records until the buffer is exhausted."""
    levels = []
    remaining = bytes(data)
    while remaining:
        decoded = load_level_from_data(remaining, types)
        levels.append(decoded.level)
        remaining = decoded.remaining_bytes
    return levels
