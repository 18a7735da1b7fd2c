"""Gain-factor sequences for the stochastic-approximation step."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from samc.utils.errors import DegenerateConfiguration


@dataclass(frozen=True)
class GainSchedule:
    """Gain ``gamma_t = t0 / max(t0, t) ** xi``.

    For ``t <= t0`` the sequence is flat at ``t0 ** (1 - xi)``; afterwards it
    decays like ``t ** -xi``. With ``xi`` in (0.5, 1] the gains sum to infinity
    while their squares have a finite sum, the usual conditions under which the
    ``theta`` recursion converges.
    """

    t0: float
    xi: float

    def __post_init__(self):
        if not self.t0 > 0:
            raise DegenerateConfiguration("t0 must be positive.")
        if not 0.5 < self.xi <= 1.0:
            raise DegenerateConfiguration("xi must lie in (0.5, 1].")

    def gain(self, t: int) -> float:
        if t < 1:
            raise ValueError(f"iteration index must be >= 1; got {t}")
        return self.t0 / max(self.t0, float(t)) ** self.xi

    def __call__(self, t: int) -> float:
        return self.gain(t)

    def gains(self, n: int) -> np.ndarray:
        """Gains for ``t = 1..n`` as an array."""
        t = np.arange(1, int(n) + 1, dtype=float)
        return self.t0 / np.maximum(self.t0, t) ** self.xi


@dataclass(frozen=True)
class RatioGainSchedule(GainSchedule):
    """Alternative form ``gamma_t = (t0 / max(t0, t)) ** xi``, equal to 1 for ``t <= t0``."""

    def gain(self, t: int) -> float:
        if t < 1:
            raise ValueError(f"iteration index must be >= 1; got {t}")
        return (self.t0 / max(self.t0, float(t))) ** self.xi

    def gains(self, n: int) -> np.ndarray:
        t = np.arange(1, int(n) + 1, dtype=float)
        return (self.t0 / np.maximum(self.t0, t)) ** self.xi


GAIN_SCHEDULES = {
    "power": GainSchedule,
    "ratio": RatioGainSchedule,
}


def make_gain_schedule(kind: str, t0: float, xi: float) -> GainSchedule:
    try:
        cls = GAIN_SCHEDULES[str(kind).lower()]
    except KeyError:
        raise DegenerateConfiguration(
            f"Unknown gain schedule '{kind}'. Expected one of {sorted(GAIN_SCHEDULES)}."
        ) from None
    return cls(t0=float(t0), xi=float(xi))
