# samc/models/samc_sampler.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

import numpy as np
from numpy.random import Generator

from samc.inference.acceptance import AcceptanceRule
from samc.inference.domain import DomainGuard
from samc.inference.gain import GainSchedule, make_gain_schedule
from samc.inference.partition import EnergyPartition
from samc.inference.proposals import RandomWalkProposal
from samc.inference.theta import ThetaUpdater
from samc.models.options import SAMCOptions, build_options, check_options
from samc.utils.errors import InvalidEnergyResult
from samc.utils.logging_utils import Timer, progress
from samc.utils.seed import make_rng

logger = logging.getLogger(__name__)

EnergyFn = Callable[[np.ndarray], float]


@dataclass(frozen=True, eq=False)
class SAMCResult:
    """Arrays accumulated by a sampler run.

    ``samples[t]``, ``energies[t]``, ``indices[t]`` and ``accepted[t]`` all
    describe the chain after the decision of iteration ``t + 1``.
    """

    samples: np.ndarray     # [T, nv]
    frequency: np.ndarray   # [m]
    theta: np.ndarray       # [m]
    energies: np.ndarray    # [T]
    indices: np.ndarray     # [T]
    accepted: np.ndarray    # [T] bool
    options: SAMCOptions
    n_energy_evals: int = 0

    @property
    def niter(self) -> int:
        return int(self.samples.shape[0])

    @property
    def acceptance_rate(self) -> float:
        if self.accepted.size == 0:
            return float("nan")
        return float(np.mean(self.accepted))

    def as_dict(self) -> Dict[str, np.ndarray]:
        return {"samples": self.samples, "frequency": self.frequency, "theta": self.theta}


@dataclass
class SAMC:
    """Stochastic Approximation Monte Carlo sampler on a box-shaped continuous domain.

    Each iteration draws a Gaussian random-walk candidate, accepts it with the
    Metropolis ratio corrected by ``theta`` of the current and candidate energy
    bins, then moves ``theta`` toward the desired visiting distribution:

        theta_j <- clip(theta_j + gamma_t * (1[j == J_t] - pi_j), trange_j)

    where ``J_t`` is the bin of the chain after the decision. Frequently visited
    bins accumulate a large ``theta`` and become harder to enter, which pushes
    the chain out of local modes.

    Parameters
    ----------
    energy: negative log-density; may return ``+inf`` outside the support.
    options: validated :class:`SAMCOptions` (see ``build_options``).
    seed / rng: seed or numpy Generator driving proposals and acceptance draws.
    log_every: emit a DEBUG checkpoint every ``log_every`` iterations (0 disables).
    """

    energy: EnergyFn
    options: SAMCOptions
    seed: Optional[int] = None
    rng: Optional[Generator] = None
    log_every: int = 0

    # Components
    partition: EnergyPartition = field(init=False)
    guard: DomainGuard = field(init=False)
    schedule: GainSchedule = field(init=False)
    proposal: RandomWalkProposal = field(init=False)
    updater: ThetaUpdater = field(init=False)
    rule: AcceptanceRule = field(init=False)

    # Runtime state (accessible after run)
    t_: int = field(default=0, init=False)
    current_point_: Optional[np.ndarray] = field(default=None, init=False)
    current_energy_: float = field(default=math.nan, init=False)
    current_index_: int = field(default=-1, init=False)
    theta_: Optional[np.ndarray] = field(default=None, init=False)
    frequency_: Optional[np.ndarray] = field(default=None, init=False)
    samples_: Optional[np.ndarray] = field(default=None, init=False)
    energies_: Optional[np.ndarray] = field(default=None, init=False)
    indices_: Optional[np.ndarray] = field(default=None, init=False)
    accepted_: Optional[np.ndarray] = field(default=None, init=False)
    n_energy_evals_: int = field(default=0, init=False)

    def __post_init__(self):
        if not callable(self.energy):
            raise TypeError("'energy' must be a callable.")
        check_options(self.options)
        opts = self.options
        self.rng = make_rng(self.rng if self.rng is not None else self.seed)
        self.partition = EnergyPartition(opts.partition)
        self.guard = DomainGuard(opts.domain)
        self.schedule = make_gain_schedule(opts.gain, opts.t0, opts.xi)
        self.proposal = RandomWalkProposal(opts.stepsize, nv=opts.nv)
        self.updater = ThetaUpdater(opts.vecpi, opts.trange, self.schedule)
        self.rule = AcceptanceRule(opts.tau)

    # ----------
    # Internals
    # ----------
    def _evaluate(self, x: np.ndarray) -> float:
        # Hand the callback a copy so it cannot alter chain state
        value = self.energy(np.array(x, dtype=float))
        self.n_energy_evals_ += 1
        try:
            e = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidEnergyResult(value, x) from exc
        if math.isnan(e) or e == -math.inf:
            raise InvalidEnergyResult(value, x)
        return e

    @property
    def initialized(self) -> bool:
        return self.samples_ is not None

    def initialize(self) -> "SAMC":
        """Allocate buffers and place the chain at the domain's starting point."""
        opts = self.options
        x0 = self.guard.initial_point()
        self.n_energy_evals_ = 0
        e0 = self._evaluate(x0)
        self.current_point_ = x0
        self.current_energy_ = e0
        self.current_index_ = self.partition.index_of(e0)
        self.theta_ = self.updater.initial()
        self.frequency_ = np.zeros(opts.m, dtype=np.int64)
        self.samples_ = np.empty((opts.niter, opts.nv), dtype=float)
        self.energies_ = np.empty(opts.niter, dtype=float)
        self.indices_ = np.empty(opts.niter, dtype=np.int64)
        self.accepted_ = np.zeros(opts.niter, dtype=bool)
        self.t_ = 0
        if math.isinf(e0):
            logger.warning("Initial point %s has zero density (energy=+inf).", x0.tolist())
        logger.debug("Initialized at x=%s, energy=%s, bin=%d.", x0.tolist(), e0, self.current_index_)
        return self

    def step(self) -> bool:
        """Run one iteration; returns whether the candidate was accepted."""
        if not self.initialized:
            self.initialize()
        if self.t_ >= self.options.niter:
            raise RuntimeError("Sampler already completed its configured number of iterations.")
        t = self.t_ + 1

        candidate, in_domain = self.proposal.propose_within(self.current_point_, self.guard, self.rng)
        accepted = False
        if in_domain:
            cand_energy = self._evaluate(candidate)
            cand_index = self.partition.index_of(cand_energy)
            accepted = self.rule.accept(
                self.current_energy_, self.current_index_,
                cand_energy, cand_index,
                self.theta_, self.rng,
            )

        if accepted:
            new_point, new_energy, new_index = candidate, cand_energy, cand_index
        else:
            new_point, new_energy, new_index = self.current_point_, self.current_energy_, self.current_index_
        new_theta = self.updater.update(self.theta_, t, new_index)

        # Commit everything for iteration t together
        row = t - 1
        self.current_point_ = new_point
        self.current_energy_ = new_energy
        self.current_index_ = new_index
        self.theta_ = new_theta
        self.frequency_[new_index] += 1
        self.samples_[row] = new_point
        self.energies_[row] = new_energy
        self.indices_[row] = new_index
        self.accepted_[row] = accepted
        self.t_ = t
        return accepted

    # ----------
    # API
    # ----------
    def run(self, progress_bar: bool = False) -> SAMCResult:
        """Iterate until ``niter`` rows are recorded.

        A run interrupted by the host (e.g. ``KeyboardInterrupt``) keeps every
        committed row; call :meth:`partial_result` to collect them, or ``run``
        again to continue from the last committed iteration.
        """
        opts = self.options
        if not self.initialized:
            self.initialize()
        start = self.t_
        logger.info(
            "SAMC run: nv=%d, m=%d, niter=%d, tau=%g, t0=%g, xi=%g, gain=%s (resuming at t=%d).",
            opts.nv, opts.m, opts.niter, opts.tau, opts.t0, opts.xi, opts.gain, start,
        )
        with Timer(name="samc", logger=logger):
            for _ in progress(range(start, opts.niter), total=opts.niter - start,
                              desc="SAMC sampling", enabled=progress_bar):
                self.step()
                if self.log_every and self.t_ % self.log_every == 0:
                    logger.debug(
                        "t=%d acc=%.3f bin=%d theta_range=[%.3f, %.3f]",
                        self.t_, float(np.mean(self.accepted_[: self.t_])), self.current_index_,
                        float(np.min(self.theta_)), float(np.max(self.theta_)),
                    )
        result = self.partial_result()
        logger.info(
            "SAMC done: acceptance=%.3f, energy evaluations=%d, unvisited bins=%d.",
            result.acceptance_rate, result.n_energy_evals, int(np.sum(result.frequency == 0)),
        )
        return result

    def partial_result(self) -> SAMCResult:
        """Snapshot of the iterations committed so far."""
        if not self.initialized:
            raise RuntimeError("Sampler has not been initialized; call run() first.")
        T = self.t_
        return SAMCResult(
            samples=self.samples_[:T].copy(),
            frequency=self.frequency_.copy(),
            theta=self.theta_.copy(),
            energies=self.energies_[:T].copy(),
            indices=self.indices_[:T].copy(),
            accepted=self.accepted_[:T].copy(),
            options=self.options,
            n_energy_evals=int(self.n_energy_evals_),
        )


def samc(nv: int, energy: EnergyFn, options: Optional[Mapping[str, Any]] = None,
         seed: Optional[int] = None, rng: Optional[Generator] = None,
         progress_bar: bool = False) -> SAMCResult:
    """Build options for ``nv`` variables, run a sampler and return its result."""
    if not callable(energy):
        raise TypeError("'energy' must be a callable.")
    opts = build_options(nv, options)
    return SAMC(energy=energy, options=opts, seed=seed, rng=rng).run(progress_bar=progress_bar)
