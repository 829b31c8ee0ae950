from enum import IntEnum
from typing import FrozenSet


class RoomType(IntEnum):
    """
    Room types that a dungeon layout cell can hold.

    Stored directly in the layout's numpy grid, so the values are small ints.
    """

    EMPTY = 0  # solid rock, not a room
    NORMAL = 1
    ENTRANCE = 2
    TREASURE = 3
    TRAP = 4
    BOSS = 5

    def is_traversable(self) -> bool:
        """Returns True if this cell can be walked through."""
        return self != RoomType.EMPTY

    def is_special(self) -> bool:
        """Returns True for treasure, trap, boss and entrance rooms."""
        return self in SPECIAL_ROOM_TYPES


SPECIAL_ROOM_TYPES: FrozenSet[RoomType] = frozenset(
    {RoomType.TREASURE, RoomType.TRAP, RoomType.BOSS, RoomType.ENTRANCE}
)

# Types the final feature pass is the authority for.
FEATURE_ROOM_TYPES: FrozenSet[RoomType] = frozenset(
    {RoomType.TREASURE, RoomType.TRAP, RoomType.BOSS}
)
