#!/usr/bin/env python3
"""
Render a generated dungeon layout as ASCII art for debugging.

Usage:
    uv run tools/render_dungeon_ascii.py [--size N] [--rounds N] [--seed S] [--count N]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import aidungeon
sys.path.insert(0, str(Path(__file__).parent.parent))

from aidungeon import DungeonGenerator, DungeonLayout, GenerationConfig, RoomType, spawn_seeds


# One character per room type
ROOM_TO_ASCII = {
    RoomType.EMPTY: " ",
    RoomType.NORMAL: ".",
    RoomType.ENTRANCE: "E",
    RoomType.TREASURE: "$",
    RoomType.TRAP: "^",
    RoomType.BOSS: "B",
}


def render_layout_ascii(layout: DungeonLayout) -> str:
    """Convert a layout to an ASCII string, one text line per y, framed in #."""
    border = "#" * (layout.size + 2)
    lines = [border]
    for y in range(layout.size):
        line = "".join(
            ROOM_TO_ASCII.get(layout.get_room_type(x, y), "?") for x in range(layout.size)
        )
        lines.append(f"#{line}#")
    lines.append(border)
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(description="Render dungeon layout as ASCII art")
    parser.add_argument("--size", type=int, help="Grid size (default: random size tier)")
    parser.add_argument("--rounds", type=int, help="Evolutionary rounds for the optimizer")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible generation")
    parser.add_argument("--count", type=int, default=1, help="Number of dungeons to render")
    parser.add_argument("--strict", action="store_true", help="Validate the layout after every stage")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log pipeline details")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # A single dungeon uses the seed as given so it matches DungeonGenerator(seed=...)
    seeds = [args.seed] if args.count == 1 else spawn_seeds(args.seed, args.count)

    generator = DungeonGenerator(GenerationConfig(check_invariants=args.strict))
    layouts = generator.generate_many(
        seeds,
        size=args.size,
        evolutionary_rounds=args.rounds,
    )

    for layout in layouts:
        print(render_layout_ascii(layout))

        # Print some debug info
        print(f"\n--- Debug Info ---")
        print(f"Map size: {layout.size}x{layout.size} cells")
        print(f"Entrance: {layout.entrance}")
        for room_type in RoomType:
            if room_type != RoomType.EMPTY:
                print(f"{room_type.name.title()} rooms: {layout.count(room_type)}")
        print()


if __name__ == "__main__":
    main()
