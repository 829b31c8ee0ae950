"""
Layout fitness for the genetic optimizer.

Scores a raw grid plus entrance on four terms, each in [0, 1]:

- connectivity: share of rooms reachable from the entrance
- distribution: treasure, trap and boss counts against ideal counts
- aesthetics: number of distinct room cluster shapes against an ideal
- challenge: boss distance from the entrance and trap spread with distance

The fitness is the weighted sum of the terms.
"""

import math
from typing import Dict, Optional, Set, Tuple

import numpy as np

from .config import FitnessWeights
from .connectivity import reachable_cells, traversable_mask
from .layout import Coord
from .pathfinding import flood_fill, mask_checker
from .room_type import RoomType

# Share of the grid size the boss should ideally sit from the entrance
BOSS_DISTANCE_FACTOR = 0.7


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def connectivity_score(grid: np.ndarray, entrance: Coord) -> float:
    total = int(np.count_nonzero(traversable_mask(grid)))
    if total == 0:
        return 0.0
    return _clamp(len(reachable_cells(grid, entrance)) / total)


def distribution_score(grid: np.ndarray) -> float:
    """
    Compare feature room counts with ideals derived from the room total.

    The total counts the entrance once on top of the other rooms.
    """
    treasure = int(np.count_nonzero(grid == RoomType.TREASURE))
    traps = int(np.count_nonzero(grid == RoomType.TRAP))
    bosses = int(np.count_nonzero(grid == RoomType.BOSS))
    total = int(np.count_nonzero(grid == RoomType.NORMAL)) + treasure + traps + bosses + 1
    if total <= 1:
        return 0.0

    ideal_treasure = max(1, total // 10)
    ideal_traps = max(1, total // 8)

    treasure_score = _clamp(1.0 - abs(treasure - ideal_treasure) / ideal_treasure)
    trap_score = _clamp(1.0 - abs(traps - ideal_traps) / ideal_traps)
    boss_score = 1.0 if bosses == 1 else 0.0
    return 0.4 * treasure_score + 0.3 * trap_score + 0.3 * boss_score


def cluster_shapes(grid: np.ndarray) -> Set[Tuple[Coord, ...]]:
    """
    Distinct shapes of the grid's 4-connected room clusters.

    A shape is the sorted tuple of cell offsets relative to the cluster's
    first cell in row-major order, so equal shapes at different places match.
    """
    mask = traversable_mask(grid)
    is_room = mask_checker(mask)
    visited = np.zeros(grid.shape, dtype=bool)
    shapes: Set[Tuple[Coord, ...]] = set()

    size_x, size_y = grid.shape
    for x in range(size_x):
        for y in range(size_y):
            if visited[x, y] or not mask[x, y]:
                continue
            cluster = flood_fill(x, y, is_room)
            for cx, cy in cluster:
                visited[cx, cy] = True
            shapes.add(tuple(sorted((cx - x, cy - y) for cx, cy in cluster)))

    return shapes


def aesthetics_score(grid: np.ndarray) -> float:
    ideal = max(1, grid.shape[0] // 5)
    return _clamp(1.0 - abs(len(cluster_shapes(grid)) - ideal) / ideal)


def boss_distance_score(grid: np.ndarray, entrance: Coord) -> float:
    """Reward the first boss in scan order for sitting 70% of the grid size away."""
    bosses = np.argwhere(grid == RoomType.BOSS)
    if len(bosses) == 0:
        return 0.0
    boss_x, boss_y = bosses[0]
    distance = math.hypot(boss_x - entrance[0], boss_y - entrance[1])
    ideal = grid.shape[0] * BOSS_DISTANCE_FACTOR
    return _clamp(1.0 - abs(distance - ideal) / ideal)


def trap_distribution_score(grid: np.ndarray, entrance: Coord) -> float:
    """
    Reward traps that get more frequent further from the entrance.

    Traps are binned by truncated Euclidean distance. The deviation of each
    bin's share from the ideal i / size is weighted by i / size.
    """
    size = grid.shape[0]
    traps = np.argwhere(grid == RoomType.TRAP)
    if len(traps) == 0:
        return 0.0

    distances = np.hypot(traps[:, 0] - entrance[0], traps[:, 1] - entrance[1]).astype(int)
    distances = distances[distances < size]
    if len(distances) == 0:
        return 0.0
    histogram = np.bincount(distances, minlength=size)
    total = histogram.sum()

    deviation = 0.0
    for i in range(size):
        ideal = i / size
        deviation += abs(histogram[i] / total - ideal) * ideal
    return 1.0 - min(1.0, deviation)


def challenge_score(grid: np.ndarray, entrance: Coord) -> float:
    return 0.6 * boss_distance_score(grid, entrance) + 0.4 * trap_distribution_score(grid, entrance)


class LayoutFitness:
    """Weighted sum of the four fitness terms."""

    def __init__(self, weights: Optional[FitnessWeights] = None):
        self.weights = weights or FitnessWeights()

    def breakdown(self, grid: np.ndarray, entrance: Coord) -> Dict[str, float]:
        """Each unweighted term, keyed by name."""
        return {
            "connectivity": connectivity_score(grid, entrance),
            "distribution": distribution_score(grid),
            "aesthetics": aesthetics_score(grid),
            "challenge": challenge_score(grid, entrance),
        }

    def evaluate(self, grid: np.ndarray, entrance: Coord) -> float:
        terms = self.breakdown(grid, entrance)
        return (
            self.weights.connectivity * terms["connectivity"]
            + self.weights.distribution * terms["distribution"]
            + self.weights.aesthetics * terms["aesthetics"]
            + self.weights.challenge * terms["challenge"]
        )
