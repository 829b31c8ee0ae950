"""Unit tests for layout invariant checking."""

import pytest

from aidungeon.layout import DungeonLayout
from aidungeon.room_type import RoomType
from aidungeon.validation import check_layout, find_violations


class TestFindViolations:
    """Tests for find_violations."""

    def test_valid_layout(self):
        """A connected layout with a synced index has no violations."""
        layout = DungeonLayout(5)
        layout.set_room_type(2, 3, RoomType.NORMAL)
        layout.set_room_type(2, 4, RoomType.BOSS)
        assert find_violations(layout) == []

    def test_unreachable_room(self):
        """A room cut off from the entrance is reported."""
        layout = DungeonLayout(5)
        layout.set_room_type(0, 0, RoomType.NORMAL)
        problems = find_violations(layout)
        assert len(problems) == 1
        assert "unreachable" in problems[0]

    def test_index_out_of_sync(self):
        """A grid change that bypassed set_room_type is reported."""
        layout = DungeonLayout(5)
        layout._grid[2, 3] = RoomType.NORMAL
        problems = find_violations(layout)
        assert any("NORMAL index out of sync" in problem for problem in problems)

    def test_missing_entrance(self):
        """A grid without its entrance is reported."""
        layout = DungeonLayout(5)
        layout._grid[2, 2] = RoomType.EMPTY
        problems = find_violations(layout)
        assert any("exactly one entrance" in problem for problem in problems)


class TestCheckLayout:
    """Tests for check_layout."""

    def test_valid_layout_passes(self):
        """Nothing is raised for a valid layout."""
        check_layout(DungeonLayout(5), "carve")

    def test_invalid_layout_raises_with_stage(self):
        """Violations raise RuntimeError naming the stage."""
        layout = DungeonLayout(5)
        layout.set_room_type(0, 0, RoomType.NORMAL)
        with pytest.raises(RuntimeError, match="after relax"):
            check_layout(layout, "relax")
