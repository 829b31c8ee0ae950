"""
Terminal feature placement.

This is the last pipeline stage and the single authority on feature rooms:
any boss, treasure or trap rooms left by earlier stages are demoted to NORMAL
first, then exactly one boss and bounded numbers of treasure and trap rooms
are placed. Only NORMAL rooms are ever retyped, so connectivity is unchanged.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from .config import FeatureConfig
from .layout import Coord, DungeonLayout
from .room_type import FEATURE_ROOM_TYPES, RoomType

logger = logging.getLogger(__name__)


@dataclass
class PlacementReport:
    """What the feature pass placed, next to what it wanted to place."""
    boss: Optional[Coord]
    treasure_placed: int
    treasure_wanted: int
    traps_placed: int
    traps_wanted: int
    demoted: int = 0


def demote_features(layout: DungeonLayout) -> int:
    """Turn every boss, treasure and trap room back into a NORMAL room."""
    demoted = 0
    for room_type in FEATURE_ROOM_TYPES:
        for x, y in layout.get_room_positions(room_type):
            layout.set_room_type(x, y, RoomType.NORMAL)
            demoted += 1
    return demoted


def place_boss(layout: DungeonLayout) -> Optional[Coord]:
    """Make the NORMAL room farthest from the entrance the boss room."""
    farthest = layout.farthest_from_entrance(RoomType.NORMAL)
    if farthest is not None:
        layout.set_room_type(farthest[0], farthest[1], RoomType.BOSS)
    return farthest


def place_random(
    layout: DungeonLayout,
    room_type: RoomType,
    count: int,
    attempts: int,
    rng: random.Random,
    min_distance: Optional[int] = None,
) -> int:
    """
    Probe random cells, retyping NORMAL rooms until count are placed.

    Args:
        layout: Layout to modify
        room_type: Type to place
        count: Number of rooms wanted
        attempts: Maximum number of probes
        rng: Random source
        min_distance: If given, only rooms strictly further than this from
            the entrance qualify

    Returns:
        Number of rooms placed, at most count
    """
    placed = 0
    for _ in range(attempts):
        if placed >= count:
            break
        x = rng.randrange(layout.size)
        y = rng.randrange(layout.size)
        if layout.get_room_type(x, y) != RoomType.NORMAL:
            continue
        if min_distance is not None and layout.distance_from_entrance(x, y) <= min_distance:
            continue
        layout.set_room_type(x, y, room_type)
        placed += 1
    return placed


def place_features(
    layout: DungeonLayout,
    rng: random.Random,
    config: Optional[FeatureConfig] = None,
) -> PlacementReport:
    """
    Place the final boss, treasure and trap rooms.

    Returns:
        PlacementReport with the placed and wanted counts
    """
    config = config or FeatureConfig()
    size = layout.size

    demoted = demote_features(layout)
    boss = place_boss(layout)
    if boss is None:
        logger.warning(f"No NORMAL room available for the boss in a {size}x{size} layout")

    treasure_wanted = config.treasure_quota(size)
    treasure_placed = place_random(
        layout, RoomType.TREASURE, treasure_wanted, config.placement_attempts, rng
    )

    traps_wanted = config.trap_quota(size)
    traps_placed = place_random(
        layout,
        RoomType.TRAP,
        traps_wanted,
        config.placement_attempts,
        rng,
        min_distance=size // config.trap_distance_divisor,
    )

    if treasure_placed < treasure_wanted or traps_placed < traps_wanted:
        logger.warning(
            f"Feature quota not met: treasure {treasure_placed}/{treasure_wanted}, "
            f"traps {traps_placed}/{traps_wanted}"
        )

    return PlacementReport(
        boss=boss,
        treasure_placed=treasure_placed,
        treasure_wanted=treasure_wanted,
        traps_placed=traps_placed,
        traps_wanted=traps_wanted,
        demoted=demoted,
    )
