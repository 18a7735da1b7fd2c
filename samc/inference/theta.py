"""Stochastic-approximation update of the per-partition bias vector ``theta``."""
from __future__ import annotations

import numpy as np

from samc.inference.gain import GainSchedule
from samc.utils.errors import DegenerateConfiguration


class ThetaUpdater:
    """Applies ``theta_j += gamma_t * (1[j == J_t] - pi_j)`` followed by clipping to ``trange``."""

    def __init__(self, vecpi, trange, schedule: GainSchedule):
        pi = np.asarray(vecpi, dtype=float).ravel()
        tr = np.asarray(trange, dtype=float)
        if tr.ndim != 2 or tr.shape != (pi.size, 2):
            raise DegenerateConfiguration(
                f"trange must have shape (m, 2) with m={pi.size}; got {tr.shape}."
            )
        if np.any(tr[:, 0] > tr[:, 1]):
            raise DegenerateConfiguration("trange rows must satisfy low <= high.")
        self.vecpi = pi
        self.low = tr[:, 0].copy()
        self.high = tr[:, 1].copy()
        self.schedule = schedule

    @property
    def m(self) -> int:
        return int(self.vecpi.size)

    def initial(self) -> np.ndarray:
        return np.zeros(self.m)

    def apply(self, theta: np.ndarray, gain: float, visited_index: int) -> np.ndarray:
        """Return the updated copy of ``theta`` for a given step size."""
        new = np.asarray(theta, dtype=float) - gain * self.vecpi
        new[int(visited_index)] += gain
        return np.clip(new, self.low, self.high)

    def update(self, theta: np.ndarray, t: int, visited_index: int) -> np.ndarray:
        return self.apply(theta, self.schedule.gain(t), visited_index)
