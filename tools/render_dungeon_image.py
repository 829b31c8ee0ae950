#!/usr/bin/env python3
"""
Render a generated dungeon layout to an image file for visual inspection.

Each cell is drawn as a colored square. Useful for:
- Tuning the cellular automaton and optimizer settings
- Checking where the boss, treasure and traps end up
- Debugging connectivity repair corridors

Usage:
    uv run tools/render_dungeon_image.py                    # Random size tier, random seed
    uv run tools/render_dungeon_image.py --size 40          # 40x40 grid
    uv run tools/render_dungeon_image.py --seed 42          # Reproducible dungeon
    uv run tools/render_dungeon_image.py --output my.png    # Custom output path
"""

import argparse
import logging
import sys
from pathlib import Path

import cv2
import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from aidungeon import DungeonGenerator, DungeonLayout, GenerationConfig, RoomType

# BGR colors, as cv2 expects
ROOM_COLORS = {
    RoomType.EMPTY: (24, 24, 24),
    RoomType.NORMAL: (170, 170, 170),
    RoomType.ENTRANCE: (0, 200, 0),
    RoomType.TREASURE: (0, 215, 255),
    RoomType.TRAP: (200, 0, 200),
    RoomType.BOSS: (0, 0, 220),
}


def render_layout_image(layout: DungeonLayout, cell_size: int, show_grid: bool = False) -> np.ndarray:
    """Draw the layout as a BGR image with one cell_size square per cell."""
    pixels = layout.size * cell_size
    image = np.zeros((pixels, pixels, 3), dtype=np.uint8)

    # Image rows follow y, columns follow x
    for x in range(layout.size):
        for y in range(layout.size):
            color = ROOM_COLORS[layout.get_room_type(x, y)]
            top_left = (x * cell_size, y * cell_size)
            bottom_right = ((x + 1) * cell_size - 1, (y + 1) * cell_size - 1)
            cv2.rectangle(image, top_left, bottom_right, color, -1)

    if show_grid:
        for i in range(layout.size + 1):
            offset = i * cell_size
            cv2.line(image, (offset, 0), (offset, pixels), (64, 64, 64), 1)
            cv2.line(image, (0, offset), (pixels, offset), (64, 64, 64), 1)

    return image


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render a dungeon layout to an image file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--size", "-n",
        type=int,
        default=None,
        help="Grid size (default: random size tier)",
    )
    parser.add_argument(
        "--rounds", "-r",
        type=int,
        default=None,
        help="Evolutionary rounds for the optimizer (default: from config)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducible dungeons",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=12,
        help="Pixel width of one cell (default: 12)",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default="dungeon_render.png",
        help="Output image path (default: dungeon_render.png)",
    )
    parser.add_argument(
        "--show-grid",
        action="store_true",
        help="Overlay a cell grid on the image",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log pipeline details",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.seed is not None:
        print(f"Using random seed: {args.seed}")

    generator = DungeonGenerator(GenerationConfig(), seed=args.seed)
    layout = generator.generate(evolutionary_rounds=args.rounds, size=args.size)
    print(f"Dungeon size: {layout.size}x{layout.size} cells")

    image = render_layout_image(layout, args.cell_size, show_grid=args.show_grid)

    output_path = Path(args.output)
    cv2.imwrite(str(output_path), image)
    print(f"Saved to: {output_path.absolute()}")

    print(f"\nEntrance: {layout.entrance}")
    for room_type in (RoomType.BOSS, RoomType.TREASURE, RoomType.TRAP):
        positions = layout.get_room_positions(room_type)
        print(f"  {room_type.name.title()} ({len(positions)}): {positions}")


if __name__ == "__main__":
    main()
