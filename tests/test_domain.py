from __future__ import annotations

import math

import numpy as np
import numpy.testing as npt
import pytest

from samc.inference.domain import DomainGuard
from samc.utils.errors import DegenerateConfiguration

INF = math.inf


def test_contains_respects_finite_bounds_inclusively():
    guard = DomainGuard([[-1.0, 1.0], [-INF, 2.0]])
    assert guard.contains([1.0, 2.0])
    assert guard.contains([-1.0, -1e9])
    assert not guard.contains([1.0001, 0.0])
    assert not guard.contains([0.0, 2.5])
    assert not guard.contains([0.0, float("nan")])


def test_clamp_or_resample_rejects_whole_point():
    guard = DomainGuard([[0.0, 1.0], [0.0, 1.0]])
    assert guard.clamp_or_resample([0.5, 1.5]) is None
    npt.assert_array_equal(guard.clamp_or_resample([0.5, 0.25]), [0.5, 0.25])


def test_initial_point_rules():
    guard = DomainGuard([[-2.0, 4.0], [-INF, 3.0], [5.0, INF], [-INF, INF]])
    npt.assert_allclose(guard.initial_point(), [1.0, -7.0, 15.0, 0.0])
    assert guard.contains(guard.initial_point())


def test_invalid_domain_shapes():
    with pytest.raises(DegenerateConfiguration):
        DomainGuard([0.0, 1.0])
    with pytest.raises(DegenerateConfiguration):
        DomainGuard([[1.0, 0.0]])
    with pytest.raises(DegenerateConfiguration):
        DomainGuard(np.zeros((2, 3)))
