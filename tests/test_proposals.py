from __future__ import annotations

import numpy as np
import numpy.testing as npt
import pytest

from samc.inference.domain import DomainGuard
from samc.inference.proposals import RandomWalkProposal
from samc.utils.errors import DegenerateConfiguration


def test_scalar_stepsize_broadcast():
    prop = RandomWalkProposal(0.5, nv=3)
    npt.assert_array_equal(prop.stepsize, [0.5, 0.5, 0.5])


def test_per_dimension_spread():
    prop = RandomWalkProposal([0.1, 3.0], nv=2)
    rng = np.random.default_rng(0)
    x = np.array([1.0, -2.0])
    draws = np.array([prop.propose(x, rng) for _ in range(4000)])
    npt.assert_allclose(draws.mean(axis=0), x, atol=0.15)
    npt.assert_allclose(draws.std(axis=0), [0.1, 3.0], rtol=0.08)


def test_propose_does_not_mutate_input():
    prop = RandomWalkProposal(1.0, nv=2)
    x = np.zeros(2)
    prop.propose(x, np.random.default_rng(1))
    npt.assert_array_equal(x, [0.0, 0.0])


def test_propose_within_flags_out_of_domain():
    prop = RandomWalkProposal(5.0, nv=1)
    guard = DomainGuard([[0.0, 0.01]])
    rng = np.random.default_rng(3)
    flags = [prop.propose_within(np.array([0.005]), guard, rng)[1] for _ in range(200)]
    assert not all(flags)


@pytest.mark.parametrize("stepsize", [0.0, -1.0, [1.0, 2.0, 3.0], float("inf")])
def test_invalid_stepsize(stepsize):
    with pytest.raises(DegenerateConfiguration):
        RandomWalkProposal(stepsize, nv=2)
