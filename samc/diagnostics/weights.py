"""Post-processing of ``theta``: partition weights and importance reweighting.

At convergence ``theta_i = log(g_i / pi_i) + c`` where ``g_i`` is the mass of
the (unnormalised) density in energy bin ``i``. Samples drawn from bin ``i``
are therefore reweighted by ``exp(theta_i)`` to recover expectations under
the target density.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import numpy as np
from scipy.special import logsumexp


def log_partition_weights(theta, vecpi, visited=None) -> np.ndarray:
    """Estimate ``log g_i`` normalised over visited bins; unvisited bins get ``-inf``."""
    theta = np.asarray(theta, dtype=float)
    vecpi = np.asarray(vecpi, dtype=float)
    if theta.shape != vecpi.shape:
        raise ValueError("theta and vecpi must have the same length")
    log_g = theta + np.log(vecpi)
    mask = np.ones(theta.shape, dtype=bool) if visited is None else np.asarray(visited) > 0
    if not np.any(mask):
        raise ValueError("no visited partitions")
    out = np.full(theta.shape, -np.inf)
    out[mask] = log_g[mask] - logsumexp(log_g[mask])
    return out


def importance_weights(result, burn_in: int = 0, theta=None) -> np.ndarray:
    """Self-normalised weights ``exp(theta[J(x_t)])`` for samples after ``burn_in``."""
    theta = result.theta if theta is None else np.asarray(theta, dtype=float)
    idx = result.indices[burn_in:]
    if idx.size == 0:
        raise ValueError("no samples left after burn-in")
    logw = theta[idx]
    return np.exp(logw - logsumexp(logw))


def weighted_mean(result, func: Optional[Callable[[np.ndarray], Any]] = None,
                  burn_in: int = 0) -> np.ndarray:
    """Importance-weighted estimate of ``E[func(x)]`` under the target density (``func`` defaults to identity)."""
    w = importance_weights(result, burn_in=burn_in)
    x = result.samples[burn_in:]
    values = x if func is None else np.asarray([func(row) for row in x], dtype=float)
    return np.tensordot(w, values, axes=(0, 0))


def partition_summary(result) -> Dict[str, Any]:
    """Per-bin desired vs observed visiting frequency alongside ``theta`` and ``log g``."""
    opts = result.options
    freq = np.asarray(result.frequency, dtype=float)
    total = freq.sum()
    observed = freq / total if total > 0 else np.zeros_like(freq)
    with np.errstate(divide="ignore", invalid="ignore"):
        rel_error = (observed - opts.vecpi) / opts.vecpi
    return {
        "lower": opts.partition[:-1].tolist(),
        "upper": opts.partition[1:].tolist(),
        "desired": opts.vecpi.tolist(),
        "observed": observed.tolist(),
        "relative_error": rel_error.tolist(),
        "count": result.frequency.astype(int).tolist(),
        "theta": result.theta.tolist(),
        "log_weight": log_partition_weights(result.theta, opts.vecpi, visited=result.frequency).tolist(),
        "unvisited": int(np.sum(result.frequency == 0)),
    }
