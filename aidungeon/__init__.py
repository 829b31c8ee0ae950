"""Procedural dungeon layout generation."""

from aidungeon.room_type import RoomType, SPECIAL_ROOM_TYPES, FEATURE_ROOM_TYPES
from aidungeon.layout import DungeonLayout, Coord
from aidungeon.config import (
    CellularConfig,
    MarkovConfig,
    FitnessWeights,
    GeneticConfig,
    SizeTiers,
    FeatureConfig,
    GenerationConfig,
)
from aidungeon.rng import get_rng, spawn_seeds
from aidungeon.connectivity import is_connected, repair_connectivity
from aidungeon.validation import find_violations, check_layout
from aidungeon.cellular import CellularAutomata
from aidungeon.markov import MarkovChainModel
from aidungeon.fitness import LayoutFitness
from aidungeon.genetic import GeneticOptimizer, Individual
from aidungeon.features import place_features, PlacementReport
from aidungeon.generator import DungeonGenerator, generate_dungeon
