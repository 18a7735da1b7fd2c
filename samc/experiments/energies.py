"""Reference energy functions (negative log-densities) for examples and tests."""
from __future__ import annotations

import importlib
import math
from typing import Callable, Dict

import numpy as np


def quadratic(x: np.ndarray) -> float:
    """``sum(x ** 2)``; the standard normal with variance 1/2 per coordinate."""
    x = np.asarray(x, dtype=float)
    return float(np.dot(x, x))


def gaussian_mixture_1d(x: np.ndarray, centers=(-6.0, 0.0, 6.0), scale: float = 0.5) -> float:
    """Equal-weight mixture of narrow Gaussians, a density with well separated modes."""
    v = float(np.asarray(x, dtype=float).ravel()[0])
    c = np.asarray(centers, dtype=float)
    log_terms = -0.5 * ((v - c) / scale) ** 2
    top = float(np.max(log_terms))
    return -(top + math.log(float(np.sum(np.exp(log_terms - top)))))


def multimodal_2d(x: np.ndarray) -> float:
    """Rugged two-dimensional surface with many local modes on [-1.1, 1.1]^2."""
    x1, x2 = float(x[0]), float(x[1])
    val1 = -((x1 * math.sin(20 * x2) + x2 * math.sin(20 * x1)) ** 2) * math.cosh(math.sin(10 * x1) * x1)
    val2 = -((x1 * math.cos(10 * x2) - x2 * math.sin(10 * x1)) ** 2) * math.cosh(math.cos(20 * x2) * x2)
    return val1 + val2


ENERGIES: Dict[str, Callable[[np.ndarray], float]] = {
    "quadratic": quadratic,
    "gaussian_mixture_1d": gaussian_mixture_1d,
    "multimodal_2d": multimodal_2d,
}


def resolve_energy(spec) -> Callable[[np.ndarray], float]:
    """Return a callable for a registry name or a ``package.module:function`` path."""
    if callable(spec):
        return spec
    name = str(spec)
    if name in ENERGIES:
        return ENERGIES[name]
    if ":" in name:
        module_name, attr = name.split(":", 1)
        module = importlib.import_module(module_name)
        fn = getattr(module, attr)
        if not callable(fn):
            raise TypeError(f"'{name}' does not refer to a callable")
        return fn
    raise KeyError(f"Unknown energy '{name}'. Known: {sorted(ENERGIES)} or use 'module:function'.")
