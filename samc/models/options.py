# samc/models/options.py
"""Validated, fully populated sampler options.

``build_options`` turns a loose mapping (typically the ``sampler`` block of a
YAML config) into a frozen :class:`SAMCOptions`. Missing keys receive the
defaults below; vector shorthands for ``domain`` and ``trange`` are broadcast
to full matrices and every row is sorted.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import numpy as np

from samc.inference.gain import GAIN_SCHEDULES
from samc.utils.errors import DegenerateConfiguration

DEFAULTS: Dict[str, Any] = {
    "domain": [-math.inf, math.inf],
    "partition": np.linspace(-100.0, 100.0, 9).tolist(),
    "vecpi": None,  # uniform over the partition bins
    "tau": 1.0,
    "niter": 20000,
    "t0": 200.0,
    "xi": 2.0 / 3.0,
    "stepsize": 1.0,
    "trange": [-math.inf, math.inf],
    "gain": "power",
}

_VECPI_TOL = 1e-10


@dataclass(frozen=True)
class SAMCOptions:
    nv: int
    domain: np.ndarray      # [nv, 2]
    partition: np.ndarray   # [m + 1]
    vecpi: np.ndarray       # [m]
    tau: float
    niter: int
    t0: float
    xi: float
    stepsize: np.ndarray    # [nv]
    trange: np.ndarray      # [m, 2]
    gain: str = "power"
    m: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "m", int(np.asarray(self.vecpi).size))
        for name in ("domain", "partition", "vecpi", "stepsize", "trange"):
            arr = np.array(getattr(self, name), dtype=float)
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)
        check_options(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nv": self.nv,
            "domain": self.domain.tolist(),
            "partition": self.partition.tolist(),
            "vecpi": self.vecpi.tolist(),
            "tau": self.tau,
            "niter": self.niter,
            "t0": self.t0,
            "xi": self.xi,
            "stepsize": self.stepsize.tolist(),
            "trange": self.trange.tolist(),
            "gain": self.gain,
        }


def check_options(opts: SAMCOptions) -> None:
    """Verify the shape and range invariants the sampling loop relies on."""
    if opts.nv < 1:
        raise DegenerateConfiguration("nv must be a positive integer.")
    if opts.domain.shape != (opts.nv, 2):
        raise DegenerateConfiguration(f"domain must have shape ({opts.nv}, 2); got {opts.domain.shape}.")
    if opts.partition.ndim != 1 or opts.partition.size != opts.m + 1:
        raise DegenerateConfiguration(
            f"partition must have m + 1 = {opts.m + 1} breakpoints; got {opts.partition.size}."
        )
    if opts.trange.shape != (opts.m, 2):
        raise DegenerateConfiguration(f"trange must have shape ({opts.m}, 2); got {opts.trange.shape}.")
    if opts.stepsize.shape != (opts.nv,):
        raise DegenerateConfiguration(f"stepsize must have length {opts.nv}; got {opts.stepsize.shape}.")
    if np.any(opts.vecpi <= 0) or abs(float(opts.vecpi.sum()) - 1.0) > _VECPI_TOL:
        raise DegenerateConfiguration("vecpi must be positive and sum to 1.")
    if not opts.tau > 0:
        raise DegenerateConfiguration("tau must be positive.")
    if opts.niter < 1:
        raise DegenerateConfiguration("niter must be a positive integer.")
    if opts.gain not in GAIN_SCHEDULES:
        raise DegenerateConfiguration(f"gain must be one of {sorted(GAIN_SCHEDULES)}; got '{opts.gain}'.")


def _as_float(name: str, value: Any) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise DegenerateConfiguration(f"'{name}' must be a number; got {value!r}.") from None
    if math.isnan(out):
        raise DegenerateConfiguration(f"'{name}' must not be NaN.")
    return out


def _as_array(name: str, value: Any) -> np.ndarray:
    try:
        arr = np.asarray(value, dtype=float)
    except (TypeError, ValueError):
        raise DegenerateConfiguration(f"'{name}' must be numeric; got {value!r}.") from None
    if np.any(np.isnan(arr)):
        raise DegenerateConfiguration(f"'{name}' must not contain NaN.")
    return arr


def _bounds_matrix(name: str, value: Any, rows: int) -> np.ndarray:
    """Broadcast a length-2 vector to ``rows`` rows, or check a (rows, 2) matrix; sort each row."""
    arr = _as_array(name, value)
    if arr.ndim == 1:
        if arr.size != 2:
            raise DegenerateConfiguration(f"'{name}' should be a vector of length 2.")
        arr = np.tile(np.sort(arr), (rows, 1))
    elif arr.ndim == 2:
        if arr.shape != (rows, 2):
            raise DegenerateConfiguration(f"'{name}' should be a matrix of size ({rows}, 2); got {arr.shape}.")
        arr = np.sort(arr, axis=1)
    else:
        raise DegenerateConfiguration(f"'{name}' should be either a vector or a matrix.")
    return arr


def build_options(nv: int, options: Optional[Mapping[str, Any]] = None) -> SAMCOptions:
    """Validate ``options`` against ``nv`` and fill in defaults."""
    if isinstance(nv, bool) or not isinstance(nv, (int, np.integer)) or nv < 1:
        raise DegenerateConfiguration("'nv' should be a positive integer.")
    nv = int(nv)
    options = dict(options or {})
    unknown = sorted(set(options) - set(DEFAULTS))
    if unknown:
        raise DegenerateConfiguration(f"Unknown sampler option(s): {unknown}.")
    merged = {**DEFAULTS, **{k: v for k, v in options.items() if v is not None}}

    domain = _bounds_matrix("domain", merged["domain"], nv)

    partition = _as_array("partition", merged["partition"]).ravel()
    if partition.size < 2:
        raise DegenerateConfiguration("'partition' should be a vector whose length is greater than 1.")
    partition = np.sort(partition)
    if not np.all(np.diff(partition) > 0):
        raise DegenerateConfiguration("'partition' breakpoints must be distinct.")
    m = partition.size - 1

    if merged["vecpi"] is None:
        vecpi = np.full(m, 1.0 / m)
    else:
        vecpi = _as_array("vecpi", merged["vecpi"]).ravel()
        if vecpi.size != m or np.any(vecpi <= 0) or abs(float(vecpi.sum()) - 1.0) > _VECPI_TOL:
            raise DegenerateConfiguration("desired sampling distribution 'vecpi' is invalid.")

    tau = _as_float("tau", merged["tau"])
    if not (tau > 0 and math.isfinite(tau)):
        raise DegenerateConfiguration("'tau' should be a positive number.")

    niter_raw = _as_float("niter", merged["niter"])
    if not math.isfinite(niter_raw) or niter_raw < 1 or niter_raw != int(niter_raw):
        raise DegenerateConfiguration("'niter' should be a positive integer as an iteration number.")
    niter = int(niter_raw)

    t0 = _as_float("t0", merged["t0"])
    if not (t0 > 0 and math.isfinite(t0)):
        raise DegenerateConfiguration("'t0' should be a positive number.")
    xi = _as_float("xi", merged["xi"])
    if not 0.5 < xi <= 1.0:
        raise DegenerateConfiguration("'xi' should be in (0.5, 1].")

    stepsize = np.atleast_1d(_as_array("stepsize", merged["stepsize"])).ravel()
    if stepsize.size == 1:
        stepsize = np.full(nv, stepsize[0])
    if stepsize.size != nv or not np.all(np.isfinite(stepsize)) or np.any(stepsize <= 0):
        raise DegenerateConfiguration(
            "'stepsize' is a standard deviation for the normal proposal: a positive scalar or one value per variable."
        )

    trange = _bounds_matrix("trange", merged["trange"], m)

    gain = str(merged["gain"]).lower()

    return SAMCOptions(
        nv=nv,
        domain=domain,
        partition=partition,
        vecpi=vecpi,
        tau=tau,
        niter=niter,
        t0=t0,
        xi=xi,
        stepsize=stepsize,
        trange=trange,
        gain=gain,
    )
