from __future__ import annotations

import numpy as np
import numpy.testing as npt
import pytest

from samc.inference.gain import GainSchedule, RatioGainSchedule, make_gain_schedule
from samc.utils.errors import DegenerateConfiguration


@pytest.mark.parametrize("t0,xi", [(1.0, 0.8), (200.0, 2.0 / 3.0), (10.0, 1.0), (0.7, 0.51)])
def test_gain_positive_and_non_increasing(t0, xi):
    sched = GainSchedule(t0=t0, xi=xi)
    g = sched.gains(5000)
    assert np.all(g > 0)
    assert np.all(np.diff(g) <= 0)
    npt.assert_allclose(g[:10], [sched.gain(t) for t in range(1, 11)])


def test_gain_formula():
    sched = GainSchedule(t0=200.0, xi=0.5 + 0.25)
    assert sched(1) == pytest.approx(200.0 / 200.0 ** 0.75)
    assert sched(200) == pytest.approx(200.0 ** 0.25)
    assert sched(400) == pytest.approx(200.0 / 400.0 ** 0.75)
    assert GainSchedule(t0=1.0, xi=0.8)(32) == pytest.approx(32.0 ** -0.8)


def test_ratio_form_is_one_before_t0():
    sched = RatioGainSchedule(t0=50.0, xi=0.9)
    assert sched(1) == 1.0
    assert sched(50) == 1.0
    assert sched(100) == pytest.approx(0.5 ** 0.9)
    assert np.all(np.diff(sched.gains(300)) <= 0)


def test_invalid_schedules():
    with pytest.raises(DegenerateConfiguration):
        GainSchedule(t0=0.0, xi=0.8)
    with pytest.raises(DegenerateConfiguration):
        GainSchedule(t0=1.0, xi=0.5)
    with pytest.raises(DegenerateConfiguration):
        make_gain_schedule("harmonic", 1.0, 0.8)
    with pytest.raises(ValueError):
        GainSchedule(t0=1.0, xi=0.8).gain(0)
    assert isinstance(make_gain_schedule("RATIO", 2.0, 0.7), RatioGainSchedule)
