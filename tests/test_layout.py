"""Unit tests for RoomType and the DungeonLayout grid model."""

import numpy as np
import pytest

from aidungeon.layout import DungeonLayout
from aidungeon.room_type import RoomType, SPECIAL_ROOM_TYPES
from aidungeon.validation import find_violations


class TestRoomType:
    """Tests for RoomType predicates."""

    def test_only_empty_is_not_traversable(self):
        """Every type except EMPTY can be walked through."""
        for room_type in RoomType:
            assert room_type.is_traversable() == (room_type != RoomType.EMPTY)

    def test_special_types(self):
        """Treasure, trap, boss and entrance are special; normal and empty are not."""
        assert RoomType.TREASURE.is_special()
        assert RoomType.TRAP.is_special()
        assert RoomType.BOSS.is_special()
        assert RoomType.ENTRANCE.is_special()
        assert not RoomType.NORMAL.is_special()
        assert not RoomType.EMPTY.is_special()
        assert len(SPECIAL_ROOM_TYPES) == 4


class TestDungeonLayoutConstruction:
    """Tests for creating a layout."""

    def test_new_layout_is_empty_except_entrance(self):
        """A fresh layout holds only EMPTY cells and the entrance."""
        layout = DungeonLayout(9)

        assert layout.size == 9
        assert layout.entrance == (4, 4)
        assert layout.entrance_x == 4
        assert layout.entrance_y == 4
        assert layout.get_room_type(4, 4) == RoomType.ENTRANCE
        assert layout.count(RoomType.EMPTY) == 80
        assert layout.get_room_positions(RoomType.ENTRANCE) == [(4, 4)]
        assert find_violations(layout) == []

    def test_custom_entrance(self):
        """The entrance can be placed anywhere on the grid."""
        layout = DungeonLayout(5, entrance=(0, 3))
        assert layout.entrance == (0, 3)
        assert layout.get_room_type(0, 3) == RoomType.ENTRANCE

    @pytest.mark.parametrize("size", [0, -3])
    def test_rejects_non_positive_size(self, size):
        """Sizes below 1 raise ValueError."""
        with pytest.raises(ValueError):
            DungeonLayout(size)

    def test_rejects_entrance_off_grid(self):
        """An entrance outside the grid raises ValueError."""
        with pytest.raises(ValueError):
            DungeonLayout(5, entrance=(5, 0))


class TestDungeonLayoutMutation:
    """Tests for set_room_type and the position index."""

    def test_set_room_type_updates_grid_and_index(self):
        """Assigning a type moves the cell between position lists."""
        layout = DungeonLayout(5)
        layout.set_room_type(1, 2, RoomType.NORMAL)
        layout.set_room_type(1, 2, RoomType.TRAP)

        assert layout.get_room_type(1, 2) == RoomType.TRAP
        assert layout.get_room_positions(RoomType.TRAP) == [(1, 2)]
        assert (1, 2) not in layout.get_room_positions(RoomType.NORMAL)
        assert (1, 2) not in layout.get_room_positions(RoomType.EMPTY)
        assert layout.count(RoomType.EMPTY) == 23

    def test_positions_keep_insertion_order(self):
        """Position lists come back in assignment order."""
        layout = DungeonLayout(5)
        for cell in [(4, 4), (0, 0), (3, 1)]:
            layout.set_room_type(cell[0], cell[1], RoomType.NORMAL)
        assert layout.get_room_positions(RoomType.NORMAL) == [(4, 4), (0, 0), (3, 1)]

    def test_positions_are_a_copy(self):
        """Mutating the returned list does not touch the layout."""
        layout = DungeonLayout(5)
        positions = layout.get_room_positions(RoomType.ENTRANCE)
        positions.clear()
        assert layout.get_room_positions(RoomType.ENTRANCE) == [(2, 2)]

    def test_out_of_bounds_write_raises(self):
        """Writes outside the grid raise IndexError."""
        layout = DungeonLayout(5)
        with pytest.raises(IndexError):
            layout.set_room_type(5, 0, RoomType.NORMAL)
        with pytest.raises(IndexError):
            layout.set_room_type(0, -1, RoomType.NORMAL)

    def test_out_of_bounds_read_is_empty(self):
        """Reads outside the grid report EMPTY."""
        layout = DungeonLayout(5)
        assert layout.get_room_type(-1, 2) == RoomType.EMPTY
        assert layout.get_room_type(2, 99) == RoomType.EMPTY
        assert not layout.is_room(-1, 2)

    def test_entrance_cannot_be_overwritten(self):
        """Writing another type onto the entrance raises ValueError."""
        layout = DungeonLayout(5)
        with pytest.raises(ValueError):
            layout.set_room_type(2, 2, RoomType.NORMAL)
        assert layout.get_room_type(2, 2) == RoomType.ENTRANCE

    def test_second_entrance_is_rejected(self):
        """Assigning ENTRANCE to another cell raises ValueError."""
        layout = DungeonLayout(5)
        with pytest.raises(ValueError):
            layout.set_room_type(0, 0, RoomType.ENTRANCE)
        assert layout.count(RoomType.ENTRANCE) == 1

    def test_rewriting_entrance_type_is_a_no_op(self):
        """Assigning ENTRANCE to the entrance itself is allowed."""
        layout = DungeonLayout(5)
        layout.set_room_type(2, 2, RoomType.ENTRANCE)
        assert layout.get_room_positions(RoomType.ENTRANCE) == [(2, 2)]


class TestDungeonLayoutQueries:
    """Tests for read-only queries."""

    def test_grid_view_is_read_only(self):
        """The grid property cannot be written through."""
        layout = DungeonLayout(5)
        with pytest.raises(ValueError):
            layout.grid[0, 0] = RoomType.NORMAL

    def test_snapshot_is_independent(self):
        """Changing a snapshot leaves the layout alone."""
        layout = DungeonLayout(5)
        snapshot = layout.snapshot()
        snapshot[0, 0] = RoomType.BOSS
        assert layout.get_room_type(0, 0) == RoomType.EMPTY
        assert np.count_nonzero(layout.grid == RoomType.BOSS) == 0

    def test_distance_from_entrance_is_euclidean(self):
        """Distances use the straight-line metric."""
        layout = DungeonLayout(9)
        assert layout.distance_from_entrance(7, 8) == pytest.approx(5.0)

    def test_farthest_from_entrance(self):
        """The farthest cell of the requested type is found, first in scan order on ties."""
        layout = DungeonLayout(9)
        for cell in [(5, 4), (0, 4), (8, 4), (4, 0)]:
            layout.set_room_type(cell[0], cell[1], RoomType.NORMAL)

        # (0, 4), (8, 4) and (4, 0) are all 4 away; (0, 4) comes first
        assert layout.farthest_from_entrance(RoomType.NORMAL) == (0, 4)
        assert layout.farthest_from_entrance(RoomType.BOSS) is None

    def test_repr_lists_counts(self):
        """repr shows the size and per-type counts."""
        layout = DungeonLayout(3)
        text = repr(layout)
        assert "size=3" in text
        assert "ENTRANCE=1" in text
