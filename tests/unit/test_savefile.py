"""Unit tests for the save file assembler."""

import pytest

from bsld.core.errors import BufferUnderrunError
from bsld.core.goals import create_goal
from bsld.core.graphics import Graphics, create_blank_tileset, create_new_graphics
from bsld.core.levels import Level, encode_level
from bsld.core.palettes import PaletteList, create_blank_palette, create_blank_palette_list
from bsld.core.savefile import (
    ExportData,
    SaveData,
    create_new_save_data,
    encode_export_data,
    encode_save_data,
    load_export_data,
    load_save_data,
)


class TestSaveFile:
    """Test load_save_data() / encode_save_data()."""

    def test_new_save_data(self):
        save = create_new_save_data(1, 1, 4)
        assert save.tileset == create_blank_tileset(1, 1)
        assert save.levels == (Level(),) * 4

    def test_default_sizes(self):
        save = create_new_save_data()
        assert save.tileset.width_tiles == 64
        assert save.tileset.height_tiles == 64
        assert len(save.levels) == 160

    def test_layout(self, small_tileset, sample_levels):
        save = SaveData(small_tileset, sample_levels[:1])
        data = encode_save_data(save)
        assert data[:48] == small_tileset.encode()
        assert data[48:] == encode_level(sample_levels[0])

    def test_round_trip_pads_levels(self, small_tileset, sample_levels):
        data = encode_save_data(SaveData(small_tileset, sample_levels))
        save = load_save_data(data, 2, 1, level_count=5)
        assert save.tileset == small_tileset
        assert list(save.levels[:3]) == sample_levels
        assert save.levels[3:] == (Level(), Level())

    def test_tileset_only(self, small_tileset):
        save = load_save_data(small_tileset.encode(), 2, 1, level_count=2)
        assert save.levels == (Level(), Level())

    def test_too_many_levels(self, small_tileset):
        data = encode_save_data(SaveData(small_tileset, [Level("A"), Level("B")]))
        with pytest.raises(ValueError, match="Too many levels"):
            load_save_data(data, 2, 1, level_count=1)

    def test_truncated_tileset(self, small_tileset):
        with pytest.raises(BufferUnderrunError):
            load_save_data(small_tileset.encode()[:-1], 2, 1)

    def test_update_level(self):
        save = create_new_save_data(1, 1, 2)
        updated = save.update_level(1, Level("KEYCANE", create_goal(0)))
        assert updated.levels[1].name == "KEYCANE"
        assert save.levels[1] == Level()


@pytest.fixture
def small_graphics(small_tileset):
    """Three tiny sheets of different sizes."""
    return Graphics(
        blocks=small_tileset,
        overworld=create_blank_tileset(1, 2).update_pixel(7, 3, 12),
        sprites=create_blank_tileset(1, 1),
    )


class TestExportFile:
    """Test load_export_data() / encode_export_data()."""

    def test_default_export_data(self):
        export = ExportData()
        assert export.palettes == create_blank_palette_list()
        assert export.graphics == create_new_graphics()
        assert len(export.levels) == 160

    def test_layout(self, small_graphics, sample_levels):
        palettes = PaletteList((create_blank_palette(),))
        data = encode_export_data(ExportData(palettes, small_graphics, sample_levels[:1]))

        palette_size = len(palettes.encode())
        assert data[:palette_size] == palettes.encode()
        rest = data[palette_size:]
        # blocks entry: 2 header bytes + 48 pixel bytes
        assert rest[:2] == b"\x02\x01"
        assert rest[50:52] == b"\x01\x02"
        assert rest[100:102] == b"\x01\x01"
        assert rest[126:] == encode_level(sample_levels[0])

    def test_round_trip_pads_levels(self, small_graphics, sample_levels):
        export = ExportData(create_blank_palette_list(), small_graphics, sample_levels)
        decoded = load_export_data(encode_export_data(export), level_count=5)
        assert decoded.palettes == export.palettes
        assert decoded.graphics == small_graphics
        assert list(decoded.levels[:3]) == sample_levels
        assert decoded.levels[3:] == (Level(), Level())

    def test_too_many_levels(self, small_graphics):
        export = ExportData(create_blank_palette_list(), small_graphics, [Level("A"), Level("B")])
        with pytest.raises(ValueError, match="Too many levels"):
            load_export_data(encode_export_data(export), level_count=1)

    def test_truncated_graphics(self, small_graphics):
        data = create_blank_palette_list().encode() + small_graphics.encode()[:-1]
        with pytest.raises(BufferUnderrunError):
            load_export_data(data)

    def test_to_save_data_uses_block_sheet(self, small_graphics, sample_levels):
        export = ExportData(create_blank_palette_list(), small_graphics, sample_levels)
        assert export.to_save_data() == SaveData(small_graphics.blocks, sample_levels)
