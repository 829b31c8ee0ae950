"""Numeric knobs for dungeon layout generation.

Every field has a default, so a generator built without any configuration
behaves exactly like one built from an empty mapping.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional, Tuple


def _check_probability(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must lie between 0 and 1, got {value}")


def _check_positive(name: str, value: int) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class CellularConfig:
    """Parameters for the cellular automaton room carver."""

    initial_fill_percent: int = 45
    iterations: int = 4
    birth_limit: int = 4
    death_limit: int = 3
    # Chebyshev radius around the entrance that is always seeded as rooms
    entrance_clearance: int = 2

    def __post_init__(self) -> None:
        if not 0 <= self.initial_fill_percent <= 100:
            raise ValueError(
                f"initial_fill_percent must lie between 0 and 100, got {self.initial_fill_percent}"
            )
        if self.iterations < 0:
            raise ValueError(f"iterations must not be negative, got {self.iterations}")
        for name in ("birth_limit", "death_limit"):
            value = getattr(self, name)
            if not 0 <= value <= 8:
                raise ValueError(f"{name} must lie between 0 and 8, got {value}")
        if self.entrance_clearance < 0:
            raise ValueError(
                f"entrance_clearance must not be negative, got {self.entrance_clearance}"
            )


@dataclass(frozen=True)
class MarkovConfig:
    """Parameters for the room type relaxation pass and its top-up."""

    ensure_minimums: bool = True
    treasure_divisor: int = 10
    min_treasure: int = 1
    trap_divisor: int = 8
    min_traps: int = 2
    placement_attempts: int = 100

    def __post_init__(self) -> None:
        _check_positive("treasure_divisor", self.treasure_divisor)
        _check_positive("trap_divisor", self.trap_divisor)
        if self.placement_attempts < 0:
            raise ValueError(
                f"placement_attempts must not be negative, got {self.placement_attempts}"
            )


@dataclass(frozen=True)
class FitnessWeights:
    """Weights of the four fitness terms. They should sum to 1."""

    connectivity: float = 0.4
    distribution: float = 0.3
    aesthetics: float = 0.2
    challenge: float = 0.1

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise ValueError(f"{f.name} weight must not be negative, got {value}")


@dataclass(frozen=True)
class GeneticConfig:
    """Parameters for the genetic layout optimizer."""

    population_size: int = 10
    mutation_rate: float = 0.2
    crossover_rate: float = 0.7
    tournament_size: int = 3
    # population_size // elite_divisor individuals (at least one) survive each round unchanged
    elite_divisor: int = 5
    # Each mutation pass performs size // mutation_divisor point operations
    mutation_divisor: int = 5
    seed_mutation_passes: int = 2
    repair_connectivity: bool = True
    weights: FitnessWeights = field(default_factory=FitnessWeights)

    def __post_init__(self) -> None:
        _check_positive("population_size", self.population_size)
        _check_positive("tournament_size", self.tournament_size)
        _check_positive("mutation_divisor", self.mutation_divisor)
        _check_positive("elite_divisor", self.elite_divisor)
        _check_probability("mutation_rate", self.mutation_rate)
        _check_probability("crossover_rate", self.crossover_rate)
        if self.seed_mutation_passes < 0:
            raise ValueError(
                f"seed_mutation_passes must not be negative, got {self.seed_mutation_passes}"
            )

    @property
    def elite_count(self) -> int:
        return max(1, self.population_size // self.elite_divisor)


@dataclass(frozen=True)
class SizeTiers:
    """Grid sizes to pick from, with the chance of picking each tier."""

    small: int = 25
    medium: int = 40
    large: int = 60
    small_chance: float = 0.5
    medium_chance: float = 0.3

    def __post_init__(self) -> None:
        for name in ("small", "medium", "large"):
            _check_positive(name, getattr(self, name))
        _check_probability("small_chance", self.small_chance)
        _check_probability("medium_chance", self.medium_chance)
        if self.small_chance + self.medium_chance > 1.0:
            raise ValueError("small_chance and medium_chance must not add up to more than 1")

    def pick(self, roll: float) -> int:
        """Map a uniform roll in [0, 1) to a grid size."""
        if roll < self.small_chance:
            return self.small
        if roll < self.small_chance + self.medium_chance:
            return self.medium
        return self.large


@dataclass(frozen=True)
class FeatureConfig:
    """Quotas for the final boss/treasure/trap placement."""

    treasure_divisor: int = 15
    min_treasure: int = 1
    trap_divisor: int = 10
    min_traps: int = 2
    # Traps only go further than size / trap_distance_divisor from the entrance
    trap_distance_divisor: int = 5
    placement_attempts: int = 100

    def __post_init__(self) -> None:
        _check_positive("treasure_divisor", self.treasure_divisor)
        _check_positive("trap_divisor", self.trap_divisor)
        _check_positive("trap_distance_divisor", self.trap_distance_divisor)
        if self.placement_attempts < 0:
            raise ValueError(
                f"placement_attempts must not be negative, got {self.placement_attempts}"
            )

    def treasure_quota(self, size: int) -> int:
        return max(self.min_treasure, size // self.treasure_divisor)

    def trap_quota(self, size: int) -> int:
        return max(self.min_traps, size // self.trap_divisor)


@dataclass(frozen=True)
class GenerationConfig:
    """Everything the pipeline orchestrator needs, with defaults throughout."""

    cellular: CellularConfig = field(default_factory=CellularConfig)
    markov: MarkovConfig = field(default_factory=MarkovConfig)
    genetic: GeneticConfig = field(default_factory=GeneticConfig)
    sizes: SizeTiers = field(default_factory=SizeTiers)
    features: FeatureConfig = field(default_factory=FeatureConfig)
    evolutionary_rounds: int = 10
    # Validate layout invariants after every stage and raise on violation
    check_invariants: bool = False

    def __post_init__(self) -> None:
        if self.evolutionary_rounds < 0:
            raise ValueError(
                f"evolutionary_rounds must not be negative, got {self.evolutionary_rounds}"
            )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "GenerationConfig":
        """
        Build a config from a plain nested mapping.

        Missing sections and keys fall back to defaults, unknown keys are
        ignored. Values that are present but invalid raise ValueError.

        Example:
            GenerationConfig.from_dict({
                "cellular": {"iterations": 5},
                "genetic": {"weights": {"connectivity": 0.5}},
                "evolutionary_rounds": 20,
            })
        """
        data = data or {}
        genetic_data = dict(data.get("genetic") or {})
        weights = _build(FitnessWeights, genetic_data.pop("weights", None))
        return cls(
            cellular=_build(CellularConfig, data.get("cellular")),
            markov=_build(MarkovConfig, data.get("markov")),
            genetic=_build(GeneticConfig, genetic_data, weights=weights),
            sizes=_build(SizeTiers, data.get("sizes")),
            features=_build(FeatureConfig, data.get("features")),
            **_known_fields(cls, data, exclude=("cellular", "markov", "genetic", "sizes", "features")),
        )


def _known_fields(cls: type, data: Mapping[str, Any], exclude: Tuple[str, ...] = ()) -> dict:
    names = {f.name for f in fields(cls)} - set(exclude)
    return {key: value for key, value in data.items() if key in names}


def _build(cls: type, data: Optional[Mapping[str, Any]], **overrides: Any) -> Any:
    kwargs = _known_fields(cls, data or {})
    kwargs.update(overrides)
    return cls(**kwargs)
