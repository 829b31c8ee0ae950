"""Random sources for dungeon generation.

Each generation request owns its own random.Random, which is handed to every
pipeline component. Nothing in the package touches the module-level random
state, so concurrent requests never share a generator.
"""

import random
from typing import List, Optional

_SEED_BITS = 63


def get_rng(seed: Optional[int] = None) -> random.Random:
    """Return a random.Random, seeded if a seed is given."""
    rng = random.Random()
    if seed is not None:
        rng.seed(seed)
    return rng


def spawn_seeds(seed: Optional[int], count: int) -> List[Optional[int]]:
    """
    Derive independent per-request seeds from one parent seed.

    With no parent seed every request gets None, i.e. an OS-seeded generator.
    """
    if seed is None:
        return [None] * count
    parent = get_rng(seed)
    return [parent.getrandbits(_SEED_BITS) for _ in range(count)]


def fresh_seed() -> int:
    """A new seed drawn from an OS-seeded generator."""
    return get_rng().getrandbits(_SEED_BITS)
