#!/usr/bin/env python3
"""
Boskeopolis Land - Save Data Writer

Encodes a JSON project back into a .bsld save file, and optionally its
palette block or a full export file (palettes, graphics, levels).
"""

import argparse
import sys
from pathlib import Path

from bsld.core.errors import CodecError
from bsld.core.levels import encode_level
from bsld.core.savefile import encode_export_data, encode_save_data
from bsld.formats.project_json import ProjectData


def report_sizes(project: ProjectData, verbose: bool) -> int:
    """Print the block sheet and level record sizes; return the save file total."""
    blocks = project.graphics.blocks
    tileset_size = blocks.data_size
    print(f"Tileset: {blocks.width_tiles}x{blocks.height_tiles} tiles, {tileset_size} bytes")

    level_total = 0
    for index, level in enumerate(project.levels):
        size = len(encode_level(level))
        level_total += size
        if verbose and not level.is_blank():
            print(f"  Level {index:3d}: {level.name:<24} {size:6d} bytes ({len(level.maps)} maps)")

    print(f"Levels: {len(project.levels)} records, {level_total} bytes")
    return tileset_size + level_total


def main():
    parser = argparse.ArgumentParser(
        description="Write a Boskeopolis Land JSON project to a save file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Write project to a save file
  python write.py project.json -o game.bsld

  # Also write the palette block
  python write.py project.json -o game.bsld --palettes palettes.bin

  # Also write an export file with palettes and all three graphics sheets
  python write.py project.json -o game.bsld --export game.bslx

  # Validate without writing
  python write.py project.json --validate-only --verbose
""",
    )

    parser.add_argument("project_file", help="JSON project file")
    parser.add_argument(
        "-o",
        "--output",
        help="Output save file (default: <project>.bsld)",
        default=None,
    )
    parser.add_argument(
        "--palettes",
        metavar="PATH",
        help="Also write the palette block to PATH",
        default=None,
    )
    parser.add_argument(
        "--export",
        metavar="PATH",
        help="Also write an export file (palettes, graphics, levels) to PATH",
        default=None,
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Encode and validate without writing",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Show per-level record sizes"
    )

    args = parser.parse_args()

    project_path = Path(args.project_file)
    if not project_path.exists():
        print(f"Error: Project file not found: {project_path}")
        sys.exit(1)

    output_path = Path(args.output) if args.output else project_path.with_suffix(".bsld")

    try:
        project = ProjectData()
        project.load(str(project_path))

        total = report_sizes(project, args.verbose)
        data = encode_save_data(project.to_save_data())
        palette_data = project.palettes.encode()
        export_data = encode_export_data(project.to_export_data()) if args.export else b""

        if args.validate_only:
            print(f"Validation PASSED - {total} bytes")
            sys.exit(0)

        output_path.write_bytes(data)
        print(f"Wrote {len(data)} bytes to {output_path}")

        if args.palettes:
            Path(args.palettes).write_bytes(palette_data)
            print(f"Wrote {len(palette_data)} bytes to {args.palettes} "
                  f"({len(project.palettes)} palettes)")

        if args.export:
            Path(args.export).write_bytes(export_data)
            print(f"Wrote {len(export_data)} bytes to {args.export} (export)")

    except CodecError as e:
        print(f"Encoding error: {e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
