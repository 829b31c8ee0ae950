"""
Grid traversal helpers shared by the carver, the optimizer and the fitness
function: flood fill, L-shaped corridor paths and nearest-cell search.
"""

from collections import deque
from typing import Callable, Deque, List, Optional, Set, Tuple

import numpy as np

# A path is a list of cell coordinates (x, y), ordered from start to goal
Path = List[Tuple[int, int]]

# 4-directional neighbors: (delta_x, delta_y)
CARDINALS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


def flood_fill(
    start_x: int,
    start_y: int,
    is_traversable: Callable[[int, int], bool],
) -> Set[Tuple[int, int]]:
    """
    Find every cell reachable from (start_x, start_y) through 4-directional steps.

    Uses an explicit queue, so grid size is not limited by the recursion depth.

    Args:
        start_x: Starting cell x
        start_y: Starting cell y
        is_traversable: Callback that returns True if cell (x, y) may be entered.
            It must return False for cells outside the grid.

    Returns:
        Set of reachable cells including the start, or an empty set if the
        start itself is not traversable.
    """
    if not is_traversable(start_x, start_y):
        return set()

    visited: Set[Tuple[int, int]] = {(start_x, start_y)}
    queue: Deque[Tuple[int, int]] = deque([(start_x, start_y)])

    while queue:
        x, y = queue.popleft()
        for dx, dy in CARDINALS:
            neighbor = (x + dx, y + dy)
            if neighbor in visited:
                continue
            if not is_traversable(neighbor[0], neighbor[1]):
                continue
            visited.add(neighbor)
            queue.append(neighbor)

    return visited


def mask_checker(mask: np.ndarray) -> Callable[[int, int], bool]:
    """Build an is_traversable callback from a boolean array indexed [x, y]."""
    size_x, size_y = mask.shape

    def is_traversable(x: int, y: int) -> bool:
        return 0 <= x < size_x and 0 <= y < size_y and bool(mask[x, y])

    return is_traversable


def l_shaped_path(
    start: Tuple[int, int],
    goal: Tuple[int, int],
    horizontal_first: bool,
) -> Path:
    """
    Cells of an L-shaped corridor from start to goal.

    The corridor moves along x then y when horizontal_first is set, otherwise
    along y then x. The path excludes start and includes goal, so its length
    always equals the Manhattan distance between the two cells.
    """
    x, y = start
    goal_x, goal_y = goal
    path: Path = []

    def walk_x() -> None:
        nonlocal x
        while x != goal_x:
            x += 1 if x < goal_x else -1
            path.append((x, y))

    def walk_y() -> None:
        nonlocal y
        while y != goal_y:
            y += 1 if y < goal_y else -1
            path.append((x, y))

    if horizontal_first:
        walk_x()
        walk_y()
    else:
        walk_y()
        walk_x()

    return path


def manhattan_distance(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def nearest_cell(origin: Tuple[int, int], candidates: np.ndarray) -> Optional[Tuple[int, int]]:
    """
    Find the candidate cell closest to origin by Manhattan distance.

    Args:
        origin: Cell to measure from
        candidates: Boolean array indexed [x, y] marking eligible cells

    Returns:
        The nearest eligible cell, the first in row-major order on ties,
        or None if no cell is eligible.
    """
    if not candidates.any():
        return None
    xs, ys = np.indices(candidates.shape)
    distances = np.abs(xs - origin[0]) + np.abs(ys - origin[1])
    distances = np.where(candidates, distances, np.iinfo(distances.dtype).max)
    flat_index = int(np.argmin(distances))
    x, y = np.unravel_index(flat_index, candidates.shape)
    return int(x), int(y)
