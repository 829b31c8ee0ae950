"""
Layout reachability and connectivity repair.

A layout is connected when every non-empty cell can be reached from the
entrance by 4-directional steps through non-empty cells.
"""

import logging
import random
from typing import Set

import numpy as np

from .layout import Coord, DungeonLayout
from .pathfinding import flood_fill, l_shaped_path, mask_checker, nearest_cell
from .room_type import RoomType

logger = logging.getLogger(__name__)


def traversable_mask(grid: np.ndarray) -> np.ndarray:
    """Boolean array marking every non-empty cell of a grid."""
    return grid != RoomType.EMPTY


def reachable_cells(grid: np.ndarray, start: Coord) -> Set[Coord]:
    """Cells of a raw grid reachable from start through non-empty cells."""
    return flood_fill(start[0], start[1], mask_checker(traversable_mask(grid)))


def reachable_from_entrance(layout: DungeonLayout) -> Set[Coord]:
    return reachable_cells(layout.grid, layout.entrance)


def is_connected(layout: DungeonLayout) -> bool:
    """Check that every non-empty cell is reachable from the entrance."""
    total = int(np.count_nonzero(traversable_mask(layout.grid)))
    return len(reachable_from_entrance(layout)) == total


def carve_corridor(
    layout: DungeonLayout,
    start: Coord,
    goal: Coord,
    horizontal_first: bool,
) -> int:
    """
    Carve an L-shaped corridor of NORMAL rooms from start to goal.

    The start cell is left as it is and the entrance is never overwritten.

    Returns:
        Number of cells whose type changed
    """
    changed = 0
    for x, y in l_shaped_path(start, goal, horizontal_first):
        if (x, y) == layout.entrance:
            continue
        if layout.get_room_type(x, y) != RoomType.NORMAL:
            layout.set_room_type(x, y, RoomType.NORMAL)
            changed += 1
    return changed


def repair_connectivity(layout: DungeonLayout, rng: random.Random) -> int:
    """
    Join every disconnected room region to the entrance region.

    Scans the grid in row-major order. Each non-empty cell that is not yet
    connected gets an L-shaped corridor to its nearest connected cell
    (Manhattan distance, first in scan order on ties). The region behind the
    corridor is then flooded into the connected set, so each region costs one
    corridor.

    Args:
        layout: Layout to repair in place
        rng: Random source deciding the corridor orientation

    Returns:
        Number of corridors carved
    """
    connected = np.zeros((layout.size, layout.size), dtype=bool)
    for x, y in reachable_from_entrance(layout):
        connected[x, y] = True

    corridors = 0
    for x in range(layout.size):
        for y in range(layout.size):
            if connected[x, y] or not layout.is_room(x, y):
                continue

            target = nearest_cell((x, y), connected)
            if target is None:
                # Only possible when the entrance itself is missing
                raise RuntimeError(f"No connected cell to attach ({x}, {y}) to")

            horizontal_first = rng.random() < 0.5
            carved = carve_corridor(layout, (x, y), target, horizontal_first)
            corridors += 1
            logger.debug(
                f"Carved corridor {(x, y)} -> {target} "
                f"({'horizontal' if horizontal_first else 'vertical'} first, {carved} new cells)"
            )

            def is_new_room(cx: int, cy: int) -> bool:
                return layout.is_room(cx, cy) and not connected[cx, cy]

            for cx, cy in flood_fill(x, y, is_new_room):
                connected[cx, cy] = True

    if corridors:
        logger.debug(f"Connectivity repair carved {corridors} corridors")
    return corridors
