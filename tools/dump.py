#!/usr/bin/env python3
"""
Boskeopolis Land - Save Data Dumper

Decodes a .bsld save file (or, with --export, an export file) and saves it
as a human-readable JSON project.
"""

import sys
from pathlib import Path

from bsld.core.constants import LEVEL_COUNT
from bsld.core.errors import CodecError
from bsld.core.levels import encode_level
from bsld.core.palettes import decode_palette_data
from bsld.core.savefile import load_export_data, load_save_data
from bsld.formats import compact_json as json
from bsld.formats.hex_utils import format_hex_dump
from bsld.formats.project_json import ProjectData


def build_debug_section(project: ProjectData) -> list:
    """Per-level record sizes and raw map bytes, for non-blank levels."""
    debug = []
    for index, level in enumerate(project.levels):
        if level.is_blank():
            continue
        debug.append(
            {
                "level": index,
                "record_size": len(encode_level(level)),
                "maps": [format_hex_dump(m) for m in level.maps],
            }
        )
    return debug


def main():
    args = [arg for arg in sys.argv[1:] if arg != "--export"]
    is_export = len(args) < len(sys.argv) - 1

    if not args:
        print("Usage: python dump.py [--export] <save_file> [output_file] [palette_file]")
        print("\nDumps a Boskeopolis Land save file to a JSON project.")
        print("With --export the input is an export file, which carries its own palettes.")
        sys.exit(1)

    save_path = Path(args[0])
    output_path = Path(args[1]) if len(args) > 1 else save_path.with_suffix(".json")

    print(f"Loading {'export' if is_export else 'save'} file: {save_path}")
    try:
        if is_export:
            project = ProjectData.from_export_data(load_export_data(save_path.read_bytes()))
        else:
            save = load_save_data(save_path.read_bytes())

            palettes = None
            if len(args) > 2:
                print(f"Loading palettes: {args[2]}")
                palettes = decode_palette_data(Path(args[2]).read_bytes()).palettes
            project = ProjectData.from_save_data(save, palettes)
    except (OSError, CodecError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    used = 0
    for index, level in enumerate(project.levels):
        if level.is_blank():
            continue
        used += 1
        print(f"  Level {index:3d}: {level.name} ({len(level.maps)} maps)")

    data = project.to_dict()
    data["_debug"] = build_debug_section(project)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)

    print(f"\n{used} of {LEVEL_COUNT} levels in use")
    print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()
