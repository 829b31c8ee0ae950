"""
Cellular Automaton Room Carver
==============================

Carves organic cave-like room regions into an empty layout.

1. Seed: every cell is filled at random with a fixed chance. Cells close to
   the entrance are always filled, so the entrance starts inside a room.
2. Relax: a few synchronous simulation steps smooth the noise into blobs.
   Each cell counts its 8 neighbors, with cells beyond the edge counting
   as filled. A filled cell survives with at least death_limit filled
   neighbors, an empty cell is born with more than birth_limit.
3. Materialise: filled cells become NORMAL rooms, the rest EMPTY.
4. Repair: disconnected regions are joined to the entrance with corridors.
"""

import logging
import random
from typing import Optional

import numpy as np

from .config import CellularConfig
from .connectivity import repair_connectivity
from .layout import DungeonLayout
from .rng import get_rng
from .room_type import RoomType

logger = logging.getLogger(__name__)

# (dx, dy) offsets of the 8 surrounding cells
_NEIGHBOR_OFFSETS = tuple(
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)
)


def count_filled_neighbors(filled: np.ndarray) -> np.ndarray:
    """Count filled 8-neighbors of every cell, treating the outside as filled."""
    padded = np.pad(filled, 1, mode="constant", constant_values=True).astype(np.int8)
    size_x, size_y = filled.shape
    counts = np.zeros(filled.shape, dtype=np.int8)
    for dx, dy in _NEIGHBOR_OFFSETS:
        counts += padded[1 + dx:1 + dx + size_x, 1 + dy:1 + dy + size_y]
    return counts


def simulation_step(filled: np.ndarray, birth_limit: int = 4, death_limit: int = 3) -> np.ndarray:
    """
    Run one synchronous automaton step.

    Every cell's next state depends only on the previous array, which is
    never modified.

    Args:
        filled: Boolean array, True where a room is
        birth_limit: Empty cells with more filled neighbors than this become rooms
        death_limit: Rooms with fewer filled neighbors than this become empty

    Returns:
        New boolean array of the same shape
    """
    counts = count_filled_neighbors(filled)
    return np.where(filled, counts >= death_limit, counts > birth_limit)


class CellularAutomata:
    """Carves NORMAL rooms into a layout with a cellular automaton."""

    def __init__(self, config: Optional[CellularConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or CellularConfig()
        self.rng = rng or get_rng()

    def seed_map(self, layout: DungeonLayout) -> np.ndarray:
        """Initial random fill, with the area around the entrance forced filled."""
        size = layout.size
        clearance = self.config.entrance_clearance
        entrance_x, entrance_y = layout.entrance
        filled = np.zeros((size, size), dtype=bool)

        for x in range(size):
            for y in range(size):
                if abs(x - entrance_x) <= clearance and abs(y - entrance_y) <= clearance:
                    filled[x, y] = True
                else:
                    filled[x, y] = self.rng.randrange(100) < self.config.initial_fill_percent

        return filled

    def carve(self, layout: DungeonLayout) -> None:
        """
        Replace the layout's cells with automaton-generated rooms.

        The entrance stays where it is. Afterwards every room is reachable
        from the entrance.
        """
        filled = self.seed_map(layout)
        for _ in range(self.config.iterations):
            filled = simulation_step(filled, self.config.birth_limit, self.config.death_limit)

        for x in range(layout.size):
            for y in range(layout.size):
                if (x, y) == layout.entrance:
                    continue
                layout.set_room_type(x, y, RoomType.NORMAL if filled[x, y] else RoomType.EMPTY)

        corridors = repair_connectivity(layout, self.rng)
        logger.debug(
            f"Carved {layout.count(RoomType.NORMAL)} rooms into a {layout.size}x{layout.size} grid "
            f"with {corridors} repair corridors"
        )
