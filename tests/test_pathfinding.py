"""Unit tests for flood fill, L-shaped paths and nearest-cell search."""

import numpy as np
import pytest
from typing import Set, Tuple

from aidungeon.pathfinding import (
    flood_fill,
    l_shaped_path,
    manhattan_distance,
    mask_checker,
    nearest_cell,
)


def make_traversability_checker(open_cells: Set[Tuple[int, int]]):
    """Create a traversability checker function for testing."""
    def is_traversable(x: int, y: int) -> bool:
        return (x, y) in open_cells
    return is_traversable


class TestFloodFill:
    """Tests for the flood_fill function."""

    def test_fills_connected_region(self):
        """Every 4-connected cell is found, diagonal neighbors are not."""
        open_cells = {(0, 0), (1, 0), (1, 1), (3, 3), (2, 2)}
        reached = flood_fill(0, 0, make_traversability_checker(open_cells))
        assert reached == {(0, 0), (1, 0), (1, 1)}

    def test_blocked_start_returns_empty_set(self):
        """A start cell that cannot be entered reaches nothing."""
        reached = flood_fill(0, 0, make_traversability_checker({(1, 0)}))
        assert reached == set()

    def test_handles_large_open_grid(self):
        """Large regions do not hit a recursion limit."""
        mask = np.ones((200, 200), dtype=bool)
        reached = flood_fill(0, 0, mask_checker(mask))
        assert len(reached) == 200 * 200


class TestMaskChecker:
    """Tests for mask_checker."""

    def test_out_of_bounds_is_blocked(self):
        """Cells beyond the mask edges are never traversable."""
        is_traversable = mask_checker(np.ones((3, 3), dtype=bool))
        assert is_traversable(2, 2)
        assert not is_traversable(3, 0)
        assert not is_traversable(0, -1)


class TestLShapedPath:
    """Tests for l_shaped_path."""

    def test_horizontal_first(self):
        """The path walks x first, excludes the start and includes the goal."""
        path = l_shaped_path((0, 0), (2, 2), horizontal_first=True)
        assert path == [(1, 0), (2, 0), (2, 1), (2, 2)]

    def test_vertical_first(self):
        """The path walks y first when horizontal_first is off."""
        path = l_shaped_path((3, 3), (1, 2), horizontal_first=False)
        assert path == [(3, 2), (2, 2), (1, 2)]

    @pytest.mark.parametrize("horizontal_first", [True, False])
    def test_length_equals_manhattan_distance(self, horizontal_first):
        """Each step moves one cell, so the path is as long as the Manhattan distance."""
        start, goal = (2, 9), (11, 4)
        path = l_shaped_path(start, goal, horizontal_first)
        assert len(path) == manhattan_distance(start, goal)
        assert path[-1] == goal

    def test_same_cell_is_empty_path(self):
        """No steps are needed to reach the start itself."""
        assert l_shaped_path((4, 4), (4, 4), True) == []


class TestNearestCell:
    """Tests for nearest_cell."""

    def test_finds_nearest_by_manhattan_distance(self):
        """The closest eligible cell wins."""
        candidates = np.zeros((6, 6), dtype=bool)
        candidates[5, 5] = True
        candidates[1, 3] = True
        assert nearest_cell((0, 0), candidates) == (1, 3)

    def test_ties_go_to_first_in_scan_order(self):
        """Equidistant cells resolve to the lowest x, then lowest y."""
        candidates = np.zeros((5, 5), dtype=bool)
        candidates[2, 4] = True
        candidates[4, 2] = True
        candidates[0, 2] = True
        assert nearest_cell((2, 2), candidates) == (0, 2)

    def test_no_candidates(self):
        """An all-False mask has no nearest cell."""
        assert nearest_cell((0, 0), np.zeros((3, 3), dtype=bool)) is None
