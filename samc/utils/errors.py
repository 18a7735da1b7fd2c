# samc/utils/errors.py
"""Exception types raised by the sampler and its configuration layer."""
from __future__ import annotations


class SAMCError(Exception):
    """Base class for sampler errors."""


class DegenerateConfiguration(SAMCError, ValueError):
    """Raised when sampler options are missing, malformed or mutually inconsistent."""


class InvalidEnergyResult(SAMCError, ValueError):
    """Raised when the energy function returns NaN or a non-numeric value.

    A finite value or ``+inf`` (zero density) is always valid. The run is
    aborted because a silently skipped evaluation would bias ``theta``.
    """

    def __init__(self, value, point=None):
        self.value = value
        self.point = point
        where = "" if point is None else f" at x={point!r}"
        super().__init__(f"energy function returned invalid value {value!r}{where}")
