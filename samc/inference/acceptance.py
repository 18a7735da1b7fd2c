"""Theta-corrected Metropolis acceptance for SAMC."""
from __future__ import annotations

import math

import numpy as np
from numpy.random import Generator

# Below this log-ratio exp() underflows; such moves are treated as impossible
LOG_RATIO_FLOOR = float(np.log(np.finfo(float).tiny))


def log_acceptance_ratio(current_energy: float, current_idx: int,
                         candidate_energy: float, candidate_idx: int,
                         theta: np.ndarray, tau: float) -> float:
    """``(theta[i] - theta[j]) + (E_cur - E_cand) / tau``, with ``+inf`` candidate energy giving ``-inf``."""
    if math.isinf(candidate_energy) and candidate_energy > 0:
        return -math.inf
    if math.isinf(current_energy) and current_energy > 0:
        return math.inf
    return float(theta[current_idx] - theta[candidate_idx]) + (current_energy - candidate_energy) / tau


def acceptance_probability(log_ratio: float) -> float:
    if log_ratio >= 0:
        return 1.0
    if log_ratio < LOG_RATIO_FLOOR:
        return 0.0
    return math.exp(log_ratio)


class AcceptanceRule:
    """Accept/reject decisions at temperature ``tau``.

    A uniform variate is drawn only when the decision is actually random, i.e.
    when ``exp(log_ratio)`` lies strictly between 0 and 1.
    """

    def __init__(self, tau: float):
        if not tau > 0:
            raise ValueError("tau must be positive.")
        self.tau = float(tau)

    def accept(self, current_energy: float, current_idx: int,
               candidate_energy: float, candidate_idx: int,
               theta: np.ndarray, rng: Generator, *, in_domain: bool = True) -> bool:
        if not in_domain:
            return False
        log_ratio = log_acceptance_ratio(current_energy, current_idx,
                                         candidate_energy, candidate_idx,
                                         theta, self.tau)
        prob = acceptance_probability(log_ratio)
        if prob >= 1.0:
            return True
        if prob <= 0.0:
            return False
        return bool(rng.uniform() < prob)
