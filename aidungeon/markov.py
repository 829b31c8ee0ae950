"""
Markov Chain Room Theming
=========================

Turns part of a carved layout's NORMAL rooms into treasure, trap and boss
rooms. Each room looks at its surrounding cells, picks the most common
neighbor type and draws its new type from that type's row of a fixed
transition table. All rooms read from the same snapshot taken before the
pass, so the result does not depend on scan order beyond the random draws.

A top-up afterwards guarantees at least one room of each feature type.
"""

import logging
import random
from collections import Counter
from typing import Dict, List, Optional, Tuple

import numpy as np

from .config import MarkovConfig
from .layout import DungeonLayout
from .rng import get_rng
from .room_type import RoomType

logger = logging.getLogger(__name__)

# A destination of None leaves the room unchanged
Transition = Tuple[Optional[RoomType], float]

_SPECIAL_ROW: List[Transition] = [(RoomType.NORMAL, 0.9), (None, 0.1)]

# Most common neighbor type -> destination distribution.
# EMPTY has no row: rooms surrounded mostly by rock stay as they are.
TRANSITIONS: Dict[RoomType, List[Transition]] = {
    RoomType.NORMAL: [
        (RoomType.NORMAL, 0.7),
        (RoomType.TREASURE, 0.1),
        (RoomType.TRAP, 0.15),
        (RoomType.BOSS, 0.05),
    ],
    RoomType.ENTRANCE: _SPECIAL_ROW,
    RoomType.TREASURE: _SPECIAL_ROW,
    RoomType.TRAP: _SPECIAL_ROW,
    RoomType.BOSS: _SPECIAL_ROW,
}


def most_common_neighbor(snapshot: np.ndarray, x: int, y: int) -> RoomType:
    """
    Most frequent type among the up to 8 in-grid neighbors of (x, y).

    Ties go to the type seen first in scan order. A cell without neighbors
    reports NORMAL.
    """
    size_x, size_y = snapshot.shape
    counts: Counter = Counter()
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            nx, ny = x + dx, y + dy
            if 0 <= nx < size_x and 0 <= ny < size_y:
                counts[RoomType(int(snapshot[nx, ny]))] += 1
    if not counts:
        return RoomType.NORMAL
    # most_common keeps insertion order among equal counts
    return counts.most_common(1)[0][0]


def draw_transition(row: List[Transition], roll: float) -> Optional[RoomType]:
    """Walk the cumulative distribution of a transition row with a uniform roll."""
    cumulative = 0.0
    for destination, probability in row:
        cumulative += probability
        if roll <= cumulative:
            return destination
    # Rounding can leave the total a hair under 1
    return row[-1][0]


class MarkovChainModel:
    """Neighbor-driven room type relaxation with a minimum-feature top-up."""

    def __init__(self, config: Optional[MarkovConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or MarkovConfig()
        self.rng = rng or get_rng()

    def relax(self, layout: DungeonLayout) -> int:
        """
        Retype NORMAL rooms based on their neighborhoods, then top up features.

        Only NORMAL rooms change and nothing is ever turned into EMPTY, so the
        layout's connectivity is unaffected.

        Returns:
            Number of rooms whose type changed during the relaxation pass
        """
        snapshot = layout.snapshot()
        converted = 0

        for x in range(layout.size):
            for y in range(layout.size):
                if snapshot[x, y] != RoomType.NORMAL:
                    continue
                row = TRANSITIONS.get(most_common_neighbor(snapshot, x, y))
                if row is None:
                    continue
                destination = draw_transition(row, self.rng.random())
                if destination is None or destination == RoomType.NORMAL:
                    continue
                layout.set_room_type(x, y, destination)
                converted += 1

        logger.debug(f"Markov relaxation converted {converted} rooms")

        if self.config.ensure_minimums:
            self.ensure_minimums(layout)
        return converted

    def ensure_minimums(self, layout: DungeonLayout) -> None:
        """Add a boss, treasure and traps where the relaxation produced none."""
        if layout.count(RoomType.BOSS) == 0:
            farthest = layout.farthest_from_entrance(RoomType.NORMAL)
            if farthest is not None:
                layout.set_room_type(farthest[0], farthest[1], RoomType.BOSS)
                logger.debug(f"Top-up placed boss at {farthest}")

        if layout.count(RoomType.TREASURE) == 0:
            wanted = max(self.config.min_treasure, layout.size // self.config.treasure_divisor)
            self._convert_random_rooms(layout, RoomType.TREASURE, wanted)

        if layout.count(RoomType.TRAP) == 0:
            wanted = max(self.config.min_traps, layout.size // self.config.trap_divisor)
            self._convert_random_rooms(layout, RoomType.TRAP, wanted)

    def _convert_random_rooms(self, layout: DungeonLayout, room_type: RoomType, count: int) -> int:
        remaining = count
        attempts = 0
        while attempts < self.config.placement_attempts and remaining > 0:
            attempts += 1
            x = self.rng.randrange(layout.size)
            y = self.rng.randrange(layout.size)
            if layout.get_room_type(x, y) == RoomType.NORMAL:
                layout.set_room_type(x, y, room_type)
                remaining -= 1

        placed = count - remaining
        logger.debug(f"Top-up placed {placed}/{count} {room_type.name} rooms")
        return placed
