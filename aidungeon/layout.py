"""
Dungeon Layout Grid
===================

A DungeonLayout is a square grid of RoomType cells plus a fixed entrance.

Every algorithm in the generation pipeline acts on a layout by calling
set_room_type(), which is the only way to change a cell. That method also
keeps the per-type position index in sync, so get_room_positions() always
reflects exactly what is on the grid.

The grid is a numpy array indexed [x, y]. The `grid` property hands out a
read-only view; use snapshot() for a writable copy.
"""

import math
from typing import Dict, List, Optional, Tuple

import numpy as np

from .room_type import RoomType

# A cell coordinate in the layout grid, (x, y)
Coord = Tuple[int, int]

# Type Definition
LayoutGrid = np.ndarray

GRID_DTYPE = np.int8


class DungeonLayout:
    """A size x size grid of typed rooms with a single fixed entrance."""

    def __init__(self, size: int, entrance: Optional[Coord] = None) -> None:
        """
        Create an empty layout with the entrance already placed.

        Args:
            size: Width and height of the grid, must be positive
            entrance: Entrance cell, defaults to the center of the grid

        Raises:
            ValueError: If size is not positive or the entrance is off the grid
        """
        if size <= 0:
            raise ValueError(f"Layout size must be positive, got {size}")

        self._size: int = size
        self._grid: LayoutGrid = np.full((size, size), RoomType.EMPTY, dtype=GRID_DTYPE)

        # room type -> insertion-ordered set of cells (dict keys, values unused)
        self._positions: Dict[RoomType, Dict[Coord, None]] = {
            room_type: {} for room_type in RoomType
        }
        for x in range(size):
            for y in range(size):
                self._positions[RoomType.EMPTY][(x, y)] = None

        if entrance is None:
            entrance = (size // 2, size // 2)
        if not self.in_bounds(*entrance):
            raise ValueError(f"Entrance {entrance} is outside a {size}x{size} grid")

        self._entrance: Coord = (int(entrance[0]), int(entrance[1]))
        self._assign(self._entrance[0], self._entrance[1], RoomType.ENTRANCE)

    @property
    def size(self) -> int:
        return self._size

    @property
    def entrance(self) -> Coord:
        return self._entrance

    @property
    def entrance_x(self) -> int:
        return self._entrance[0]

    @property
    def entrance_y(self) -> int:
        return self._entrance[1]

    @property
    def grid(self) -> LayoutGrid:
        """Read-only view of the grid, indexed [x, y]."""
        view = self._grid.view()
        view.flags.writeable = False
        return view

    def snapshot(self) -> LayoutGrid:
        """Returns a writable copy of the grid."""
        return self._grid.copy()

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._size and 0 <= y < self._size

    def get_room_type(self, x: int, y: int) -> RoomType:
        """Room type at (x, y). Cells outside the grid read as EMPTY."""
        if not self.in_bounds(x, y):
            return RoomType.EMPTY
        return RoomType(int(self._grid[x, y]))

    def is_room(self, x: int, y: int) -> bool:
        """Check if (x, y) holds any non-empty room."""
        return self.get_room_type(x, y).is_traversable()

    def get_room_positions(self, room_type: RoomType) -> List[Coord]:
        """All cells currently holding room_type, in the order they were assigned."""
        return list(self._positions[RoomType(room_type)])

    def count(self, room_type: RoomType) -> int:
        return len(self._positions[RoomType(room_type)])

    def set_room_type(self, x: int, y: int, room_type: RoomType) -> None:
        """
        Assign a room type to a cell, keeping the position index in sync.

        Raises:
            IndexError: If (x, y) is outside the grid
            ValueError: If the call would move, remove or duplicate the entrance
        """
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside a {self._size}x{self._size} grid")

        room_type = RoomType(room_type)
        if (x, y) == self._entrance:
            if room_type != RoomType.ENTRANCE:
                raise ValueError(f"Cannot overwrite the entrance at {self._entrance}")
            return
        if room_type == RoomType.ENTRANCE:
            raise ValueError(f"Layout already has its entrance at {self._entrance}")

        self._assign(x, y, room_type)

    def _assign(self, x: int, y: int, room_type: RoomType) -> None:
        old_type = RoomType(int(self._grid[x, y]))
        if old_type == room_type:
            return
        del self._positions[old_type][(x, y)]
        self._grid[x, y] = room_type
        self._positions[room_type][(x, y)] = None

    def distance_from_entrance(self, x: int, y: int) -> float:
        """Euclidean distance from the entrance to (x, y)."""
        return math.hypot(x - self._entrance[0], y - self._entrance[1])

    def farthest_from_entrance(self, room_type: RoomType = RoomType.NORMAL) -> Optional[Coord]:
        """
        Find the cell of room_type with the greatest Euclidean distance from
        the entrance. Ties go to the first cell in row-major (x, then y) order.

        Returns None if no cell of that type exists.
        """
        farthest: Optional[Coord] = None
        max_distance = 0.0
        for x in range(self._size):
            for y in range(self._size):
                if self._grid[x, y] != room_type:
                    continue
                distance = self.distance_from_entrance(x, y)
                if distance > max_distance:
                    max_distance = distance
                    farthest = (x, y)
        return farthest

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{room_type.name}={self.count(room_type)}"
            for room_type in RoomType
            if room_type != RoomType.EMPTY
        )
        return f"DungeonLayout(size={self._size}, entrance={self._entrance}, {counts})"
