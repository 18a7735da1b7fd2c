# samc/utils/seed.py
from __future__ import annotations

from typing import Optional, Union

import numpy as np
from numpy.random import Generator, default_rng

SeedLike = Union[None, int, np.integer, Generator]


def make_rng(seed: SeedLike = None) -> Generator:
    """Return a numpy Generator; an existing Generator is passed through unchanged."""
    if isinstance(seed, Generator):
        return seed
    if seed is not None and not isinstance(seed, (int, np.integer)):
        raise TypeError(f"seed must be an int, a numpy Generator or None; got {type(seed).__name__}")
    return default_rng(seed)


def spawn_seed(rng: Generator) -> int:
    """Draw a fresh integer seed from ``rng`` (for recording a run's effective seed)."""
    return int(rng.integers(0, 2**31 - 1))


def resolve_seed(seed: Optional[int]) -> int:
    """Fix an unset seed to a concrete integer so runs can be reproduced from their summary."""
    if seed is None:
        return spawn_seed(default_rng())
    return int(seed)
