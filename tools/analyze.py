#!/usr/bin/env python3
"""
Boskeopolis Land - Save Data Analyzer

Reports statistics about one or more save files: tileset color usage,
goal usage, map sizes and object type counts.
Usage: python analyze.py <save_file> [additional_save_files...]
"""

import sys
from collections import Counter
from pathlib import Path

import numpy as np

from bsld.core.constants import MAX_COLOR_INDEX
from bsld.core.errors import CodecError
from bsld.core.goals import get_goal_template
from bsld.core.levels import encode_level
from bsld.core.objects import LayerType, get_type_factory
from bsld.core.savefile import load_save_data


def percentile_stats(values):
    """Return min/25th/50th/75th/max statistics."""
    if not values:
        raise ValueError("values cannot be empty in percentile_stats call")
    arr = np.array(values)
    return {
        "min": float(np.min(arr)),
        "25th": float(np.percentile(arr, 25)),
        "50th": float(np.percentile(arr, 50)),
        "75th": float(np.percentile(arr, 75)),
        "max": float(np.max(arr)),
        "count": len(values),
    }


def color_histogram(pixels):
    """Count pixels per color index 0-7."""
    return np.bincount(np.asarray(pixels, dtype=np.int64), minlength=MAX_COLOR_INDEX + 1)


def print_stats(label, values, fmt=".1f"):
    if not values:
        print(f"\n{label}: no data")
        return
    stats = percentile_stats(values)
    print(f"\n{label} (n={stats['count']}):")
    print(f"  Min:  {stats['min']:.0f}")
    print(f"  25th: {stats['25th']:{fmt}}")
    print(f"  50th: {stats['50th']:{fmt}}")
    print(f"  75th: {stats['75th']:{fmt}}")
    print(f"  Max:  {stats['max']:.0f}")


def analyze_saves(paths):
    """Analyze all given save files."""
    types = get_type_factory(LayerType.BLOCK)

    histogram = np.zeros(MAX_COLOR_INDEX + 1, dtype=np.int64)
    goal_counts = Counter()
    object_counts = Counter()
    map_widths = []
    map_heights = []
    objects_per_map = []
    record_sizes = []
    unique_tiles = set()
    used_levels = 0

    for path in paths:
        print(f"Loading {path}")
        save = load_save_data(Path(path).read_bytes())
        histogram += color_histogram(save.tileset.pixels)

        tile_count = save.tileset.width_tiles * save.tileset.height_tiles
        for tile in range(tile_count):
            tile_x = (tile % save.tileset.width_tiles) * 8
            tile_y = (tile // save.tileset.width_tiles) * 8
            rows = tuple(
                bytes(save.tileset.get_pixel(tile_x + x, tile_y + y) for x in range(8))
                for y in range(8)
            )
            unique_tiles.add(rows)

        for level in save.levels:
            if level.is_blank():
                continue
            used_levels += 1
            goal_counts[get_goal_template(level.goal.id).name] += 1
            record_sizes.append(len(encode_level(level)))

            for index in range(len(level.maps)):
                level_map = level.decode_map(index, types)
                map_widths.append(level_map.width)
                map_heights.append(level_map.height)
                count = 0
                for layer in level_map.layers:
                    for obj in layer.objects:
                        object_counts[types.lookup(obj.type).name] += 1
                        count += 1
                objects_per_map.append(count)

    # === Report ===
    print("\n" + "=" * 60)
    print("TILESET COLOR USAGE")
    print("=" * 60)
    total = int(histogram.sum())
    for color, count in enumerate(histogram):
        share = count / total if total else 0.0
        print(f"  Color {color}: {int(count):8d} ({share:6.2%})")
    print(f"\nUnique tiles: {len(unique_tiles)}")

    print("\n" + "=" * 60)
    print("LEVELS")
    print("=" * 60)
    print(f"\nLevels in use: {used_levels}")
    for name, count in goal_counts.most_common():
        print(f"  {name}: {count}")
    print_stats("Level record size (bytes)", record_sizes)

    print("\n" + "=" * 60)
    print("MAPS")
    print("=" * 60)
    print_stats("Map width (blocks)", map_widths)
    print_stats("Map height (blocks)", map_heights)
    print_stats("Objects per map", objects_per_map)

    print("\nObject type counts:")
    for name in types.names():
        print(f"  {name:<16} {object_counts[name]:6d}")


def main():
    if len(sys.argv) < 2:
        print("Usage: python analyze.py <save_file> [additional_save_files...]")
        sys.exit(1)

    try:
        analyze_saves(sys.argv[1:])
    except (OSError, CodecError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
