"""Shared pytest fixtures for save data codec tests."""

import json

import pytest

from bsld.core.goals import create_goal
from bsld.core.graphics import create_blank_tileset
from bsld.core.levels import Level
from bsld.core.maps import Layer, LevelMap, map_to_bytes
from bsld.core.objects import LayerType, get_type_factory


@pytest.fixture
def block_types():
    """Default block object type table."""
    return get_type_factory(LayerType.BLOCK)


@pytest.fixture
def simple_map(block_types):
    """20x15 map with one layer holding a single Ground object."""
    ground = block_types.create(0, 1, 2).update(width=3, height=4)
    return LevelMap(20, 15, (Layer(LayerType.BLOCK, (ground,), 1.0),))


@pytest.fixture
def busy_map(block_types):
    """Map with two layers using every default object type."""
    back = Layer(
        LayerType.BLOCK,
        (
            block_types.create(0, 0, 10).update(width=40, height=2),
            block_types.create(1, 5, 9),
            block_types.create(4, 12, 7),
        ),
        0.5,
    )
    front = Layer(
        LayerType.BLOCK,
        (
            block_types.create(2, 3, 3),
            block_types.create(3, 20, 4).update(door=5),
        ),
        1.0,
    )
    return LevelMap(64, 16, (back, front))


@pytest.fixture
def sample_levels(simple_map, busy_map):
    """Three levels covering both goal types and 0-2 maps."""
    return [
        Level("CITY LIMITS", create_goal(0), (map_to_bytes(simple_map),)),
        Level("GEM HUNT", create_goal(1, {"amount": "2500"}), (map_to_bytes(busy_map), map_to_bytes(simple_map))),
        Level("EMPTY LOT", create_goal(0), ()),
    ]


@pytest.fixture
def small_tileset():
    """2x1 tile sheet with a few colored pixels."""
    tileset = create_blank_tileset(2, 1)
    for x, color in enumerate(range(8)):
        tileset = tileset.update_pixel(color, x, 0)
    return tileset.update_pixel(5, 15, 7)


@pytest.fixture
def object_types_file(tmp_path):
    """Write an object type table to a temp file and return its path."""

    def write(data):
        path = tmp_path / "object_types.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return write
