"""Gaussian random-walk proposals."""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from numpy.random import Generator

from samc.inference.domain import DomainGuard
from samc.utils.errors import DegenerateConfiguration


class RandomWalkProposal:
    """Independent ``Normal(x_i, stepsize_i)`` perturbation of every coordinate.

    The kernel is symmetric, so the Metropolis ratio needs no proposal-density term.
    """

    def __init__(self, stepsize, nv: Optional[int] = None):
        s = np.atleast_1d(np.asarray(stepsize, dtype=float)).ravel()
        if nv is not None:
            if s.size == 1:
                s = np.full(int(nv), s[0])
            elif s.size != nv:
                raise DegenerateConfiguration(
                    f"stepsize must be a scalar or have length nv={nv}; got length {s.size}."
                )
        if not np.all(np.isfinite(s)) or np.any(s <= 0):
            raise DegenerateConfiguration("stepsize entries must be positive and finite.")
        self.stepsize = s

    def propose(self, current_point: np.ndarray, rng: Generator) -> np.ndarray:
        x = np.asarray(current_point, dtype=float)
        return rng.normal(loc=x, scale=np.broadcast_to(self.stepsize, x.shape))

    def propose_within(
        self, current_point: np.ndarray, guard: DomainGuard, rng: Generator
    ) -> Tuple[np.ndarray, bool]:
        """Draw a candidate and report whether it lies inside ``guard``."""
        candidate = self.propose(current_point, rng)
        return candidate, guard.clamp_or_resample(candidate) is not None
