"""
Structural checks for dungeon layouts.

Used by the test suite and by the generator's strict mode, which validates
the layout after every pipeline stage.
"""

from typing import List

import numpy as np

from .connectivity import reachable_from_entrance, traversable_mask
from .layout import DungeonLayout
from .room_type import RoomType

_VALID_VALUES = np.array([int(room_type) for room_type in RoomType])


def find_violations(layout: DungeonLayout) -> List[str]:
    """
    Check a layout's structural invariants.

    Returns:
        Human-readable descriptions of every violated invariant, empty if the
        layout is valid
    """
    problems: List[str] = []
    grid = layout.grid

    if grid.shape != (layout.size, layout.size):
        problems.append(f"grid shape {grid.shape} does not match size {layout.size}")
        return problems

    unknown = ~np.isin(grid, _VALID_VALUES)
    if unknown.any():
        problems.append(f"{int(np.count_nonzero(unknown))} cells hold unknown room types")

    entrances = list(zip(*np.nonzero(grid == RoomType.ENTRANCE)))
    if len(entrances) != 1:
        problems.append(f"expected exactly one entrance, found {len(entrances)}")
    elif tuple(int(v) for v in entrances[0]) != layout.entrance:
        problems.append(f"entrance found at {entrances[0]}, expected {layout.entrance}")

    for room_type in RoomType:
        indexed = set(layout.get_room_positions(room_type))
        actual = {(int(x), int(y)) for x, y in zip(*np.nonzero(grid == room_type))}
        if indexed != actual:
            problems.append(
                f"{room_type.name} index out of sync: "
                f"{len(indexed - actual)} stale, {len(actual - indexed)} missing"
            )

    total = int(np.count_nonzero(traversable_mask(grid)))
    reachable = len(reachable_from_entrance(layout))
    if reachable != total:
        problems.append(f"{total - reachable} of {total} rooms are unreachable from the entrance")

    return problems


def check_layout(layout: DungeonLayout, stage: str) -> None:
    """
    Raise if the layout violates any invariant.

    Raises:
        RuntimeError: Listing every violation, tagged with the stage name
    """
    problems = find_violations(layout)
    if problems:
        raise RuntimeError(f"Layout invalid after {stage}: " + "; ".join(problems))
