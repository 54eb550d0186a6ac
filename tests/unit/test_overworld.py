"""Unit tests for the overworld binary format and models."""

import pytest

from bsld.core.errors import BufferUnderrunError, UnknownObjectTypeError
from bsld.core.objects import get_overworld_type_factory, load_overworld_types
from bsld.core.overworld import (
    Overworld,
    OverworldLayer,
    OverworldLayerType,
    OverworldMap,
    create_blank_overworld,
    create_overworld_from_json,
    create_overworld_object,
    encode_overworld,
    load_overworld_from_data,
)

BLANK_OVERWORLD_BYTES = bytes.fromhex(
    "01"  # 1 map
    "14 14 01"  # width 20, height 20, 1 layer
    "00"  # block layer
    "ffff"  # layer terminator
)


@pytest.fixture
def ow_types():
    return get_overworld_type_factory()


@pytest.fixture
def grass_overworld(ow_types):
    """Two maps; the second has a block layer and a sprite layer."""
    grass = ow_types.create(0, 3, 4).update(width=5, height=2)
    top = ow_types.create(1, 6, 1).update(width=7)
    left = ow_types.create(2, 0, 9).update(height=3)
    second = OverworldMap(
        30,
        12,
        (
            OverworldLayer(OverworldLayerType.BLOCK, (grass, top)),
            OverworldLayer(OverworldLayerType.SPRITE, (left,)),
        ),
    )
    return Overworld((OverworldMap(), second))


class TestOverworldTypes:
    """Test the overworld tile table."""

    def test_names_in_tag_order(self, ow_types):
        assert ow_types.names() == ["Grass", "Grass Top", "Grass Left"]

    def test_field_sizes(self, ow_types):
        assert [object_type.size for object_type in ow_types] == [6, 5, 5]

    def test_create_object(self):
        obj = create_overworld_object(1, 2, 3)
        assert obj.to_json() == {"type": 1, "x": 2, "y": 3, "width": 1, "height": 1}

    def test_create_unknown_tile(self):
        with pytest.raises(UnknownObjectTypeError, match="Invalid overworld tile type: 3"):
            create_overworld_object(3, 0, 0)


class TestEncodeOverworld:
    """Test encode_overworld() layout."""

    def test_blank(self):
        assert encode_overworld(create_blank_overworld()) == BLANK_OVERWORLD_BYTES
        assert create_blank_overworld().encode() == BLANK_OVERWORLD_BYTES

    def test_known_layout(self, grass_overworld):
        expected = bytes.fromhex(
            "02"  # 2 maps
            "14 14 01 00 ffff"  # blank first map
            "1e 0c 02"  # width 30, height 12, 2 layers
            "00"  # block layer
            "0000 0003 0004 05 02"  # Grass x=3 y=4 width=5 height=2
            "0001 0006 0001 07"  # Grass Top x=6 y=1 width=7
            "ffff"
            "01"  # sprite layer
            "0002 0000 0009 03"  # Grass Left x=0 y=9 height=3
            "ffff"
        )
        assert grass_overworld.encode() == expected

    def test_width_out_of_range(self):
        overworld = Overworld((OverworldMap(256, 1),))
        with pytest.raises(ValueError, match=r"\[0, 255\]"):
            overworld.encode()

    def test_unknown_object_type(self):
        layer = OverworldLayer(objects=(create_overworld_object(0, 0, 0).update(type=9),))
        with pytest.raises(UnknownObjectTypeError):
            Overworld((OverworldMap(layers=(layer,)),)).encode()


class TestLoadOverworld:
    """Test load_overworld_from_data()."""

    def test_round_trip(self, grass_overworld):
        decoded = load_overworld_from_data(grass_overworld.encode() + b"\xaa")
        assert decoded.overworld == grass_overworld
        assert decoded.remaining_bytes == b"\xaa"

    def test_defaults_fill_unstored_fields(self, grass_overworld):
        decoded = load_overworld_from_data(grass_overworld.encode()).overworld
        top = decoded.maps[1].layers[0].get_object(1)
        assert top.get_prop("height") == 1

    def test_nonzero_layer_byte_is_sprite(self):
        data = bytes.fromhex("01 01 01 01 07 ffff")
        layer = load_overworld_from_data(data).overworld.maps[0].layers[0]
        assert layer.type is OverworldLayerType.SPRITE

    def test_truncated(self, grass_overworld):
        with pytest.raises(BufferUnderrunError):
            load_overworld_from_data(grass_overworld.encode()[:-1])

    def test_unknown_tile_type(self):
        with pytest.raises(UnknownObjectTypeError):
            load_overworld_from_data(bytes.fromhex("01 01 01 01 00 0005"))

    def test_signed_fields(self, object_types_file):
        """Int8 and Int16 fields decode with their sign."""
        path = object_types_file(
            {
                "overworld": [
                    {"name": "Marker", "fields": [["Int16", "x"], ["Int8", "y"], ["Uint8", "z"]]}
                ]
            }
        )
        types = load_overworld_types(path)
        data = bytes.fromhex("01 01 01 01 00 0000 fffe 80 ff ffff")
        obj = load_overworld_from_data(data, types).overworld.maps[0].layers[0].get_object(0)
        assert obj.props == {"x": -2, "y": -128, "z": 255}
        assert encode_overworld(load_overworld_from_data(data, types).overworld, types) == data


class TestOverworldEdits:
    """Test copy-on-write edits and their bounds checks."""

    def test_add_and_remove_map(self):
        overworld = create_blank_overworld().add_map()
        assert len(overworld.maps) == 2
        assert len(overworld.remove_map(0).maps) == 1

    def test_cannot_remove_last_map(self):
        with pytest.raises(ValueError, match="Cannot remove the last map."):
            create_blank_overworld().remove_map(0)

    def test_move_map(self, grass_overworld):
        moved = grass_overworld.move_map_up(1)
        assert moved.maps[0].width == 30
        assert moved.move_map_down(0) == grass_overworld

    def test_move_map_out_of_bounds(self, grass_overworld):
        with pytest.raises(IndexError, match="Cannot move map up"):
            grass_overworld.move_map_up(0)
        with pytest.raises(IndexError, match="Cannot move map down"):
            grass_overworld.move_map_down(1)

    def test_layer_edits(self):
        overworld_map = OverworldMap().add_layer(OverworldLayerType.SPRITE)
        assert [layer.type for layer in overworld_map.layers] == [
            OverworldLayerType.BLOCK,
            OverworldLayerType.SPRITE,
        ]
        assert overworld_map.move_layer_up(1).layers[0].type is OverworldLayerType.SPRITE
        assert len(overworld_map.remove_layer(0).layers) == 1

    def test_layer_bounds(self):
        overworld_map = OverworldMap()
        with pytest.raises(ValueError, match="Cannot remove the last layer."):
            overworld_map.remove_layer(0)
        with pytest.raises(IndexError, match="Cannot move layer down"):
            overworld_map.move_layer_down(0)

    def test_object_edits(self, ow_types):
        layer = OverworldLayer().add_object(ow_types.create(0, 1, 1))
        updated = layer.update_object(0, width=4)
        assert updated.get_object(0).width_blocks() == 4
        assert layer.get_object(0).width_blocks() == 1
        assert updated.remove_object(0).objects == ()

    def test_object_index_out_of_bounds(self):
        with pytest.raises(IndexError, match="Object index out of bounds: 2"):
            OverworldLayer().get_object(2)

    def test_map_size_helpers(self):
        overworld_map = OverworldMap().update_width(3).update_height(4)
        assert (overworld_map.width_tiles, overworld_map.height_tiles) == (6, 8)
        assert (overworld_map.width_pixels, overworld_map.height_pixels) == (48, 64)


class TestOverworldJson:
    """Test to_json() / create_overworld_from_json()."""

    def test_round_trip(self, grass_overworld):
        assert create_overworld_from_json(grass_overworld.to_json()) == grass_overworld

    def test_layout(self):
        assert create_blank_overworld().to_json() == {
            "maps": [{"height": 20, "layers": [{"objects": [], "type": "block"}], "width": 20}]
        }

    def test_invalid_overworld(self):
        with pytest.raises(ValueError, match="Invalid overworld data"):
            create_overworld_from_json({"maps": {}})

    def test_invalid_map(self):
        with pytest.raises(ValueError, match="Invalid overworld map data"):
            create_overworld_from_json({"maps": [{"width": 1, "layers": []}]})

    def test_invalid_layer(self):
        data = {"maps": [{"width": 1, "height": 1, "layers": [{"type": "water", "objects": []}]}]}
        with pytest.raises(ValueError, match="Invalid overworld layer data"):
            create_overworld_from_json(data)

    def test_invalid_tile_type(self):
        layer = {"type": "block", "objects": [{"type": 7, "x": 0, "y": 0}]}
        data = {"maps": [{"width": 1, "height": 1, "layers": [layer]}]}
        with pytest.raises(ValueError, match="Invalid overworld tile type: 7"):
            create_overworld_from_json(data)
