"""Tests for chain diagnostics utilities."""
from __future__ import annotations

import numpy as np
import numpy.testing as npt
import pytest

from samc.diagnostics.convergence import (
    acceptance_rate,
    autocorrelation,
    effective_sample_size,
    summarize_chain,
)
from samc.experiments.energies import quadratic
from samc.models.samc_sampler import samc


def test_autocorrelation_starts_at_one():
    rng = np.random.default_rng(0)
    draws = rng.normal(size=(300, 2))
    ac = autocorrelation(draws, max_lag=10)
    assert ac.shape == (11, 2)
    npt.assert_allclose(ac[0], [1.0, 1.0])
    assert np.all(np.abs(ac[1:]) < 0.2)


def test_autocorrelation_of_constant_column():
    draws = np.column_stack([np.ones(50), np.arange(50.0)])
    ac = autocorrelation(draws)
    assert ac[0, 0] == 1.0
    assert np.all(ac[1:, 0] == 0.0)


def test_effective_sample_size_reasonable():
    rng = np.random.default_rng(1)
    draws = rng.normal(size=(400,))
    ess = effective_sample_size(draws)
    assert 250 < ess <= 400


def test_effective_sample_size_penalises_correlation():
    rng = np.random.default_rng(2)
    n = 2000
    ar = np.empty(n)
    ar[0] = 0.0
    for t in range(1, n):
        ar[t] = 0.95 * ar[t - 1] + rng.normal()
    assert effective_sample_size(ar) < 200
    with pytest.raises(ValueError):
        effective_sample_size(np.ones(3))


def test_acceptance_rate_windowed():
    acc = np.array([1, 0, 1, 1, 0, 0], dtype=bool)
    assert acceptance_rate(acc) == pytest.approx(0.5)
    npt.assert_allclose(acceptance_rate(acc, window=2), [1.0, 0.5, 0.5, 1.0, 0.5, 0.0])


def test_summarize_chain_keys():
    res = samc(1, quadratic, {"domain": [-5.0, 5.0], "partition": [0.0, 1.0, 4.0, 25.0],
                              "niter": 600, "t0": 10.0, "xi": 0.8}, seed=3)
    summary = summarize_chain(res, burn_in=100, thin=5)
    assert summary["niter"] == 600
    assert summary["kept"] == 100
    assert 0.0 < summary["acceptance_rate"] <= 1.0
    assert len(summary["ess"]) == 1
    assert len(summary["mean"]) == 1
