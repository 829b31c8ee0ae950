"""
Dungeon Layout Generation Pipeline
==================================

DungeonGenerator turns a size (or a random size tier) into a finished
layout in four stages:

1. carve: cellular automaton rooms, joined to the entrance
2. relax: Markov chain room theming
3. optimize: genetic refinement of the grid
4. features: one boss, treasure and traps at their final places

Each request builds its own random.Random and hands it to every stage, so
requests with the same seed produce the same layout and concurrent requests
never share random state.
"""

import logging
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Iterable, List, Optional

from .cellular import CellularAutomata
from .config import GenerationConfig, SizeTiers
from .features import place_features
from .genetic import GeneticOptimizer
from .layout import DungeonLayout
from .markov import MarkovChainModel
from .rng import fresh_seed, get_rng
from .room_type import RoomType
from .validation import check_layout

logger = logging.getLogger(__name__)


class DungeonGenerator:
    """
    Orchestrates the layout generation pipeline.

    Example:
        generator = DungeonGenerator(seed=42)
        layout = generator.generate(size=25, evolutionary_rounds=5)
    """

    def __init__(self, config: Optional[GenerationConfig] = None, seed: Optional[int] = None):
        self.config = config or GenerationConfig()
        self.seed = seed

    def generate(
        self,
        size_tiers: Optional[SizeTiers] = None,
        evolutionary_rounds: Optional[int] = None,
        *,
        size: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> DungeonLayout:
        """
        Generate a complete layout.

        Args:
            size_tiers: Sizes to pick from, defaults to the configured tiers
            evolutionary_rounds: Optimizer rounds, defaults to the configured count
            size: Explicit grid size, skips tier sampling
            seed: Seed for this request, defaults to the generator's seed

        Returns:
            A connected layout with its entrance at the grid center

        Raises:
            ValueError: If size is not positive or evolutionary_rounds is negative
            RuntimeError: If invariant checking is enabled and a stage
                produced an invalid layout
        """
        rng = get_rng(seed if seed is not None else self.seed)
        tiers = size_tiers or self.config.sizes
        rounds = self.config.evolutionary_rounds if evolutionary_rounds is None else evolutionary_rounds
        if rounds < 0:
            raise ValueError(f"evolutionary_rounds must not be negative, got {rounds}")

        if size is None:
            size = tiers.pick(rng.random())
        layout = DungeonLayout(size, entrance=(size // 2, size // 2))

        carver = CellularAutomata(self.config.cellular, rng)
        relaxer = MarkovChainModel(self.config.markov, rng)
        optimizer = GeneticOptimizer(self.config.genetic, rng)

        start = time.perf_counter()
        self._run_stage("carve", layout, lambda: carver.carve(layout))
        self._run_stage("relax", layout, lambda: relaxer.relax(layout))
        self._run_stage("optimize", layout, lambda: optimizer.optimize(layout, rounds))
        self._run_stage(
            "features", layout, lambda: place_features(layout, rng, self.config.features)
        )
        elapsed = time.perf_counter() - start

        logger.info(
            f"Generated {size}x{size} dungeon in {elapsed:.3f}s: "
            f"{layout.count(RoomType.NORMAL)} normal, {layout.count(RoomType.TREASURE)} treasure, "
            f"{layout.count(RoomType.TRAP)} trap, {layout.count(RoomType.BOSS)} boss rooms"
        )
        return layout

    def _run_stage(self, label: str, layout: DungeonLayout, stage: Callable[[], Any]) -> Any:
        stage_start = time.perf_counter()
        result = stage()
        logger.debug(f"Stage {label} finished in {(time.perf_counter() - stage_start) * 1000:.1f}ms")
        if self.config.check_invariants:
            check_layout(layout, label)
        return result

    def generate_async(self, executor: Executor, **kwargs: Any) -> "Future[DungeonLayout]":
        """Submit a generate() call to an executor and return its future."""
        return executor.submit(self.generate, **kwargs)

    def generate_many(
        self,
        seeds: Iterable[Optional[int]],
        max_workers: int = 4,
        **kwargs: Any,
    ) -> List[DungeonLayout]:
        """
        Generate one layout per seed, running at most max_workers at a time.

        A None seed gets a fresh OS-drawn seed, so unseeded entries are
        independent of each other and of the generator's own seed.

        Returns:
            Layouts in the same order as seeds
        """
        if max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                self.generate_async(executor, seed=fresh_seed() if seed is None else seed, **kwargs)
                for seed in seeds
            ]
            return [future.result() for future in futures]


def generate_dungeon(
    size: Optional[int] = None,
    seed: Optional[int] = None,
    evolutionary_rounds: Optional[int] = None,
    config: Optional[GenerationConfig] = None,
) -> DungeonLayout:
    """Generate a single layout with a throwaway DungeonGenerator."""
    return DungeonGenerator(config, seed).generate(evolutionary_rounds=evolutionary_rounds, size=size)
