"""
Genetic Layout Optimizer
========================

Refines a themed layout with a small generational genetic algorithm.

Individuals are copies of the layout's grid. The population starts as the
unchanged layout plus mutated variants of it. Every round the population is
scored with LayoutFitness and sorted, the best few survive unchanged, and the
rest is refilled with children bred by tournament selection, one-point row
crossover and mutation. After the last round the best grid is written back
into the layout and any region it cut off is reconnected.

The entrance cell is never touched by crossover or mutation.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from .config import GeneticConfig
from .connectivity import repair_connectivity, traversable_mask
from .fitness import LayoutFitness
from .layout import Coord, DungeonLayout
from .pathfinding import CARDINALS, l_shaped_path, nearest_cell
from .rng import get_rng
from .room_type import RoomType

logger = logging.getLogger(__name__)

# Types the retype mutation picks from
_RETYPE_CHOICES = (RoomType.NORMAL, RoomType.TREASURE, RoomType.TRAP)


@dataclass
class Individual:
    """A candidate layout grid with its cached fitness."""
    grid: np.ndarray
    entrance: Coord
    fitness: Optional[float] = None

    def clone(self) -> "Individual":
        return Individual(self.grid.copy(), self.entrance, self.fitness)


class GeneticOptimizer:
    """
    Generational genetic algorithm over layout grids.

    Example:
        optimizer = GeneticOptimizer(rng=random.Random(7))
        optimizer.optimize(layout, evolutionary_rounds=10)
        print(optimizer.get_statistics()["final_best_fitness"])
    """

    def __init__(
        self,
        config: Optional[GeneticConfig] = None,
        rng: Optional[random.Random] = None,
        fitness: Optional[LayoutFitness] = None,
    ):
        self.config = config or GeneticConfig()
        self.rng = rng or get_rng()
        self.fitness = fitness or LayoutFitness(self.config.weights)

        self.best_fitness_history: List[float] = []
        self.average_fitness_history: List[float] = []

    def optimize(self, layout: DungeonLayout, evolutionary_rounds: int) -> Optional[float]:
        """
        Run the optimizer and write the best grid found back into the layout.

        Args:
            layout: Layout to optimize in place
            evolutionary_rounds: Number of rounds; zero or less leaves the
                layout untouched

        Returns:
            Fitness of the written-back grid, or None if no round ran
        """
        self.best_fitness_history = []
        self.average_fitness_history = []
        if evolutionary_rounds <= 0:
            return None

        population = self._initial_population(layout)
        best: Optional[Individual] = None

        for round_index in range(evolutionary_rounds):
            self._evaluate(population)
            population.sort(key=lambda individual: individual.fitness, reverse=True)

            fitnesses = [individual.fitness for individual in population]
            self.best_fitness_history.append(fitnesses[0])
            self.average_fitness_history.append(float(np.mean(fitnesses)))
            logger.debug(
                f"Round {round_index + 1}/{evolutionary_rounds}: "
                f"best_fitness={fitnesses[0]:.4f}, avg_fitness={np.mean(fitnesses):.4f}"
            )

            if round_index == evolutionary_rounds - 1:
                best = population[0]
                break

            population = self._next_generation(population)

        self._write_back(best, layout)
        logger.info(
            f"Optimization complete after {evolutionary_rounds} rounds, "
            f"best fitness {best.fitness:.4f}"
        )
        return best.fitness

    def _initial_population(self, layout: DungeonLayout) -> List[Individual]:
        """The unchanged layout followed by mutated copies of it."""
        original = Individual(layout.snapshot(), layout.entrance)
        population = [original]
        for _ in range(1, self.config.population_size):
            variant = original.clone()
            for _ in range(self.config.seed_mutation_passes):
                self.mutate(variant)
            population.append(variant)
        return population

    def _evaluate(self, population: List[Individual]) -> None:
        for individual in population:
            if individual.fitness is None:
                individual.fitness = self.fitness.evaluate(individual.grid, individual.entrance)

    def _next_generation(self, population: List[Individual]) -> List[Individual]:
        """Elites from a population sorted best first, then bred children."""
        next_population = population[:self.config.elite_count]

        while len(next_population) < self.config.population_size:
            parent1 = self.tournament_select(population)
            parent2 = self.tournament_select(population)

            if self.rng.random() < self.config.crossover_rate:
                child = self.crossover(parent1, parent2)
            else:
                child = parent1.clone()

            if self.rng.random() < self.config.mutation_rate:
                self.mutate(child)

            next_population.append(child)

        return next_population

    def tournament_select(self, population: List[Individual]) -> Individual:
        """Best of tournament_size individuals drawn with replacement."""
        tournament = [self.rng.choice(population) for _ in range(self.config.tournament_size)]
        return max(tournament, key=lambda individual: individual.fitness)

    def crossover(self, parent1: Individual, parent2: Individual) -> Individual:
        """
        One-point crossover on rows: rows below a random index come from
        parent1, the rest from parent2. The entrance is parent1's.
        """
        size = parent1.grid.shape[0]
        point = self.rng.randrange(size)
        grid = np.concatenate((parent1.grid[:point], parent2.grid[point:]))
        child = Individual(grid, parent1.entrance)
        child.grid[child.entrance] = RoomType.ENTRANCE
        return child

    def mutate(self, individual: Individual) -> None:
        """
        Apply size // mutation_divisor random point operations.

        Each operation picks a random cell (the entrance is skipped) and one of:
        toggle EMPTY and NORMAL, retype a room to NORMAL, TREASURE or TRAP,
        or join an isolated room to its nearest neighbor room with a corridor.
        """
        grid = individual.grid
        size = grid.shape[0]
        individual.fitness = None

        for _ in range(size // self.config.mutation_divisor):
            x = self.rng.randrange(size)
            y = self.rng.randrange(size)
            if (x, y) == individual.entrance:
                continue

            operation = self.rng.randrange(3)
            current = grid[x, y]
            if operation == 0:
                if current == RoomType.EMPTY:
                    grid[x, y] = RoomType.NORMAL
                elif current == RoomType.NORMAL:
                    grid[x, y] = RoomType.EMPTY
            elif operation == 1:
                if current != RoomType.EMPTY:
                    grid[x, y] = self.rng.choice(_RETYPE_CHOICES)
            elif current != RoomType.EMPTY and _is_isolated(grid, x, y):
                self._connect_to_nearest_room(individual, x, y)

    def _connect_to_nearest_room(self, individual: Individual, x: int, y: int) -> None:
        candidates = traversable_mask(individual.grid)
        candidates[x, y] = False
        target = nearest_cell((x, y), candidates)
        if target is None:
            return
        horizontal_first = self.rng.random() < 0.5
        for cx, cy in l_shaped_path((x, y), target, horizontal_first):
            if (cx, cy) != individual.entrance:
                individual.grid[cx, cy] = RoomType.NORMAL

    def _write_back(self, individual: Individual, layout: DungeonLayout) -> None:
        for x in range(layout.size):
            for y in range(layout.size):
                if (x, y) == layout.entrance:
                    continue
                layout.set_room_type(x, y, RoomType(int(individual.grid[x, y])))

        if self.config.repair_connectivity:
            corridors = repair_connectivity(layout, self.rng)
            if corridors:
                logger.debug(f"Reconnected {corridors} regions after write-back")

    def get_statistics(self) -> Dict[str, Any]:
        """Fitness history of the last optimize() call."""
        return {
            'best_fitness_history': list(self.best_fitness_history),
            'average_fitness_history': list(self.average_fitness_history),
            'final_best_fitness': self.best_fitness_history[-1] if self.best_fitness_history else 0.0,
            'rounds_run': len(self.best_fitness_history),
        }


def _is_isolated(grid: np.ndarray, x: int, y: int) -> bool:
    """True if none of the 4 in-grid neighbors of (x, y) is a room."""
    size_x, size_y = grid.shape
    for dx, dy in CARDINALS:
        nx, ny = x + dx, y + dy
        if 0 <= nx < size_x and 0 <= ny < size_y and grid[nx, ny] != RoomType.EMPTY:
            return False
    return True
