"""Chain diagnostics: autocorrelation, effective sample size, acceptance."""
from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np

Array = np.ndarray


def _as_draws(samples: Array) -> Array:
    arr = np.asarray(samples, dtype=float)
    if arr.ndim == 0:
        raise ValueError("samples must have at least one dimension (draws)")
    if arr.ndim == 1:
        arr = arr[:, None]
    elif arr.ndim > 2:
        raise ValueError("expected samples of shape (draws,) or (draws, nv)")
    return arr


def autocorrelation(chain: Array, max_lag: Optional[int] = None) -> Array:
    """Normalised autocorrelation per column via FFT; shape (lags, nv) (or (lags,) for 1-D input)."""
    squeeze = np.asarray(chain).ndim == 1
    x = _as_draws(chain)
    n = x.shape[0]
    centered = x - x.mean(axis=0)
    size = 1 << int(2 * n - 1).bit_length()
    f = np.fft.rfft(centered, n=size, axis=0)
    acov = np.fft.irfft(f * np.conj(f), n=size, axis=0)[:n] / n
    var0 = acov[0]
    flat = var0 <= 1e-12
    ac = np.divide(acov, np.where(flat, 1.0, var0))
    # constant columns carry no correlation information
    ac[:, flat] = 0.0
    ac[0, flat] = 1.0
    if max_lag is not None:
        ac = ac[: max_lag + 1]
    return ac[:, 0] if squeeze else ac


def effective_sample_size(samples: Array) -> Array:
    """ESS per dimension using Geyer's initial positive sequence of paired autocorrelations."""
    squeeze = np.asarray(samples).ndim == 1
    x = _as_draws(samples)
    n = x.shape[0]
    if n < 4:
        raise ValueError("need at least 4 draws for effective sample size")
    rho = autocorrelation(x)
    ess = np.empty(x.shape[1], dtype=float)
    for j in range(x.shape[1]):
        total = 0.0
        for k in range(1, n - 1, 2):
            pair = rho[k, j] + rho[k + 1, j]
            if pair < 0:
                break
            total += pair
        ess[j] = min(n / max(1.0, 1.0 + 2.0 * total), float(n))
    return ess[0] if squeeze else ess


def acceptance_rate(accepted: Array, window: Optional[int] = None) -> Array | float:
    """Overall acceptance rate, or a trailing moving average when ``window`` is given."""
    acc = np.asarray(accepted, dtype=float)
    if acc.size == 0:
        return float("nan")
    if window is None:
        return float(acc.mean())
    if window < 1:
        raise ValueError("window must be a positive integer")
    csum = np.concatenate([[0.0], np.cumsum(acc)])
    idx = np.arange(1, acc.size + 1)
    lo = np.maximum(idx - window, 0)
    return (csum[idx] - csum[lo]) / (idx - lo)


def summarize_chain(result, burn_in: int = 0, thin: int = 1) -> Dict[str, Any]:
    """Acceptance, ESS and moments of the recorded samples after burn-in and thinning."""
    if thin < 1:
        raise ValueError("thin must be a positive integer")
    samples = result.samples[burn_in::thin]
    summary: Dict[str, Any] = {
        "niter": int(result.niter),
        "kept": int(samples.shape[0]),
        "acceptance_rate": float(result.acceptance_rate),
        "n_energy_evals": int(result.n_energy_evals),
    }
    if samples.shape[0] == 0:
        return summary
    summary["mean"] = samples.mean(axis=0).tolist()
    summary["std"] = samples.std(axis=0).tolist()
    try:
        summary["ess"] = np.atleast_1d(effective_sample_size(samples)).tolist()
    except ValueError as exc:
        summary["ess"] = {"error": str(exc)}
    return summary
