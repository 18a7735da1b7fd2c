"""Box-shaped sampling domains with optionally infinite bounds."""
from __future__ import annotations

from typing import Optional

import numpy as np

from samc.utils.errors import DegenerateConfiguration

# Distance from a single finite bound used for the starting point
INIT_OFFSET = 10.0


class DomainGuard:
    """Per-dimension ``[low, high]`` constraint on proposed points.

    A proposal leaving a finite bound is rejected as a whole rather than
    reflected, so the random-walk kernel stays symmetric. Bounds are inclusive
    and an infinite bound constrains nothing on its side.
    """

    def __init__(self, domain):
        d = np.asarray(domain, dtype=float)
        if d.ndim != 2 or d.shape[1] != 2 or d.shape[0] < 1:
            raise DegenerateConfiguration(f"domain must have shape (nv, 2); got {d.shape}.")
        if np.any(np.isnan(d)):
            raise DegenerateConfiguration("domain bounds must not be NaN.")
        if np.any(d[:, 0] > d[:, 1]):
            raise DegenerateConfiguration("domain rows must satisfy low <= high.")
        self.low = d[:, 0].copy()
        self.high = d[:, 1].copy()

    @property
    def nv(self) -> int:
        return int(self.low.size)

    def contains(self, point) -> bool:
        x = np.asarray(point, dtype=float)
        # NaN coordinates compare False and are therefore outside
        return bool(np.all((x >= self.low) & (x <= self.high)))

    def clamp_or_resample(self, point) -> Optional[np.ndarray]:
        """Return ``point`` if it is admissible, ``None`` if the proposal must be rejected."""
        if self.contains(point):
            return np.asarray(point, dtype=float)
        return None

    def initial_point(self) -> np.ndarray:
        init = np.zeros(self.nv, dtype=float)
        lo_fin = np.isfinite(self.low)
        hi_fin = np.isfinite(self.high)
        both = lo_fin & hi_fin
        init[both] = 0.5 * (self.low[both] + self.high[both])
        only_hi = hi_fin & ~lo_fin
        init[only_hi] = self.high[only_hi] - INIT_OFFSET
        only_lo = lo_fin & ~hi_fin
        init[only_lo] = self.low[only_lo] + INIT_OFFSET
        return init

    def __repr__(self) -> str:
        return f"DomainGuard(nv={self.nv})"
