"""Energy partitioning: map an energy value to the index of its bin."""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from samc.utils.errors import DegenerateConfiguration, InvalidEnergyResult


def _as_energy(value) -> float:
    try:
        energy = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidEnergyResult(value) from exc
    if math.isnan(energy):
        raise InvalidEnergyResult(value)
    return energy


class EnergyPartition:
    """Sorted breakpoints ``b_0 < ... < b_m`` defining ``m`` left-closed energy bins.

    Bin ``i`` covers ``[b_i, b_{i+1})``. Energies below ``b_0`` fall into bin 0 and
    energies at or above ``b_{m-1}`` fall into bin ``m - 1``, so the outer
    breakpoints may be finite without leaving any energy unclassified.
    """

    def __init__(self, breakpoints: Sequence[float]):
        b = np.array(breakpoints, dtype=float).ravel()
        if b.size < 2:
            raise DegenerateConfiguration("partition needs at least two breakpoints (one bin).")
        if np.any(np.isnan(b)):
            raise DegenerateConfiguration("partition breakpoints must not be NaN.")
        with np.errstate(invalid="ignore"):
            steps = np.diff(b)
        if not np.all(steps > 0):
            raise DegenerateConfiguration("partition breakpoints must be strictly increasing.")
        self.breakpoints = b
        self.breakpoints.setflags(write=False)

    @property
    def m(self) -> int:
        return int(self.breakpoints.size - 1)

    def __len__(self) -> int:
        return self.m

    def index_of(self, energy: float) -> int:
        e = _as_energy(energy)
        idx = int(np.searchsorted(self.breakpoints, e, side="right")) - 1
        return min(max(idx, 0), self.m - 1)

    def indices_of(self, energies) -> np.ndarray:
        """Vectorised :meth:`index_of` for an array of energies."""
        e = np.asarray(energies, dtype=float)
        if np.any(np.isnan(e)):
            raise InvalidEnergyResult(float("nan"))
        idx = np.searchsorted(self.breakpoints, e, side="right") - 1
        return np.clip(idx, 0, self.m - 1).astype(int)

    def __repr__(self) -> str:
        return f"EnergyPartition(m={self.m}, breakpoints={self.breakpoints.tolist()!r})"
