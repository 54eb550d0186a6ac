"""Integration tests for full save file round-trips."""

import pytest

from bsld.core.constants import LEVEL_COUNT
from bsld.core.graphics import pixel_data_size
from bsld.core.levels import Level, encode_level
from bsld.core.savefile import SaveData, create_new_save_data, encode_save_data, load_save_data


def test_new_save_roundtrip():
    """A fresh 64x64 tileset with 160 blank levels survives encode/decode."""
    save = create_new_save_data()
    data = encode_save_data(save)

    blank_record = len(encode_level(Level()))
    assert len(data) == pixel_data_size(64 * 64 * 64) + LEVEL_COUNT * blank_record

    decoded = load_save_data(data)
    assert decoded.tileset == save.tileset
    assert len(decoded.levels) == LEVEL_COUNT
    assert all(level.is_blank() for level in decoded.levels)


def test_populated_save_roundtrip(small_tileset, sample_levels, block_types):
    """Levels with goals and maps decode to the same records and maps."""
    save = SaveData(small_tileset, sample_levels)
    data = encode_save_data(save)

    decoded = load_save_data(data, 2, 1, level_count=len(sample_levels))
    assert decoded.tileset == small_tileset
    assert decoded.levels == tuple(sample_levels)

    gem_hunt = decoded.levels[1]
    assert gem_hunt.goal.get_option("amount") == "2500"
    first = gem_hunt.decode_map(0, block_types)
    assert [len(layer.objects) for layer in first.layers] == [3, 2]


def test_encoding_is_idempotent(small_tileset, sample_levels):
    """decode(encode(x)) re-encodes to identical bytes."""
    data = encode_save_data(SaveData(small_tileset, sample_levels))
    decoded = load_save_data(data, 2, 1, level_count=LEVEL_COUNT)
    again = encode_save_data(decoded)

    # Padding levels are appended, so the original is a prefix
    assert again.startswith(data)
    assert encode_save_data(load_save_data(again, 2, 1)) == again


def test_level_edit_roundtrip(small_tileset, sample_levels, busy_map, block_types):
    """Editing one map of a decoded save only changes that level."""
    data = encode_save_data(SaveData(small_tileset, sample_levels))
    save = load_save_data(data, 2, 1, level_count=3)

    edited_map = busy_map.update_layer(1, busy_map.layers[1].remove_object(0))
    edited = save.update_level(1, save.levels[1].with_map(0, edited_map, block_types))
    reloaded = load_save_data(encode_save_data(edited), 2, 1, level_count=3)

    assert reloaded.levels[0] == save.levels[0]
    assert reloaded.levels[2] == save.levels[2]
    assert reloaded.levels[1].decode_map(0, block_types) == edited_map


def test_too_many_levels_rejected(small_tileset, sample_levels):
    data = encode_save_data(SaveData(small_tileset, sample_levels))
    with pytest.raises(ValueError, match="Too many levels"):
        load_save_data(data, 2, 1, level_count=2)
