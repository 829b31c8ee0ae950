"""Unit tests for layout reachability and connectivity repair."""

import random
from collections import deque

import pytest

from aidungeon.connectivity import (
    carve_corridor,
    is_connected,
    reachable_from_entrance,
    repair_connectivity,
)
from aidungeon.layout import DungeonLayout
from aidungeon.pathfinding import manhattan_distance
from aidungeon.room_type import RoomType
from aidungeon.validation import find_violations


def bfs_distance(layout: DungeonLayout, start, goal):
    """Shortest 4-directional step count between two rooms, or None."""
    distances = {start: 0}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        if (x, y) == goal:
            return distances[(x, y)]
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            neighbor = (x + dx, y + dy)
            if neighbor not in distances and layout.is_room(*neighbor):
                distances[neighbor] = distances[(x, y)] + 1
                queue.append(neighbor)
    return None


def traversable_count(layout: DungeonLayout) -> int:
    return sum(layout.count(room_type) for room_type in RoomType if room_type != RoomType.EMPTY)


class TestReachability:
    """Tests for reachable_from_entrance and is_connected."""

    def test_lone_entrance_is_connected(self):
        """A layout holding only its entrance is connected."""
        layout = DungeonLayout(5)
        assert reachable_from_entrance(layout) == {(2, 2)}
        assert is_connected(layout)

    def test_detached_room_breaks_connectivity(self):
        """A room with no path to the entrance is detected."""
        layout = DungeonLayout(5)
        layout.set_room_type(2, 3, RoomType.NORMAL)
        layout.set_room_type(0, 0, RoomType.TRAP)

        assert reachable_from_entrance(layout) == {(2, 2), (2, 3)}
        assert not is_connected(layout)


class TestCarveCorridor:
    """Tests for carve_corridor."""

    def test_corridor_skips_entrance(self):
        """A corridor crossing the entrance leaves it in place."""
        layout = DungeonLayout(5)
        changed = carve_corridor(layout, (0, 2), (4, 2), horizontal_first=True)

        assert layout.get_room_type(2, 2) == RoomType.ENTRANCE
        assert layout.get_room_positions(RoomType.NORMAL) == [(1, 2), (3, 2), (4, 2)]
        assert changed == 3

    def test_corridor_turns_features_into_normal_rooms(self):
        """Every traversed cell except the entrance becomes NORMAL."""
        layout = DungeonLayout(5)
        layout.set_room_type(1, 0, RoomType.TREASURE)
        carve_corridor(layout, (0, 0), (1, 1), horizontal_first=True)

        assert layout.get_room_type(1, 0) == RoomType.NORMAL
        assert layout.get_room_type(1, 1) == RoomType.NORMAL
        # The start cell is not part of the corridor
        assert layout.get_room_type(0, 0) == RoomType.EMPTY


class TestRepairConnectivity:
    """Tests for repair_connectivity."""

    def test_single_corridor_is_as_short_as_possible(self):
        """Joining one far room carves exactly the Manhattan path."""
        layout = DungeonLayout(15, entrance=(2, 2))
        layout.set_room_type(10, 7, RoomType.NORMAL)

        corridors = repair_connectivity(layout, random.Random(3))

        distance = manhattan_distance((2, 2), (10, 7))
        assert corridors == 1
        assert is_connected(layout)
        assert traversable_count(layout) == distance + 1
        assert bfs_distance(layout, (2, 2), (10, 7)) == distance

    def test_connected_layout_needs_no_repair(self):
        """Nothing is carved when every room already reaches the entrance."""
        layout = DungeonLayout(5)
        layout.set_room_type(2, 3, RoomType.NORMAL)
        assert repair_connectivity(layout, random.Random(0)) == 0
        assert layout.count(RoomType.NORMAL) == 1

    def test_one_corridor_per_region(self):
        """A multi-cell region is joined with a single corridor."""
        layout = DungeonLayout(12, entrance=(1, 1))
        for x in range(8, 11):
            for y in range(8, 11):
                layout.set_room_type(x, y, RoomType.NORMAL)

        assert repair_connectivity(layout, random.Random(5)) == 1
        assert is_connected(layout)

    @pytest.mark.parametrize("seed", range(5))
    def test_scattered_rooms_end_up_connected(self, seed):
        """Random scattered rooms are all joined and the layout stays valid."""
        rng = random.Random(seed)
        layout = DungeonLayout(20)
        for _ in range(40):
            x, y = rng.randrange(20), rng.randrange(20)
            if (x, y) != layout.entrance:
                layout.set_room_type(x, y, rng.choice([RoomType.NORMAL, RoomType.TRAP]))

        repair_connectivity(layout, rng)

        assert is_connected(layout)
        assert find_violations(layout) == []
