"""
Config-driven sampler runs.

:func:`run_sampler` is the entry point used by the CLI
(`python -m samc.cli.run_sampler`). It expects a merged configuration mapping:

* ``nv`` and ``energy`` (registry name or ``module:function``);
* ``sampler``: options passed to :func:`samc.models.options.build_options`;
* optional ``seed``, and ``summary: {burn_in, thin}`` for the diagnostics.

When ``out_dir`` is given the resolved config and a JSON summary are written
there. Sample arrays are returned in memory only.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from samc.diagnostics.convergence import summarize_chain
from samc.diagnostics.weights import partition_summary
from samc.experiments.energies import resolve_energy
from samc.models.options import build_options
from samc.models.samc_sampler import SAMC, SAMCResult
from samc.utils.errors import DegenerateConfiguration
from samc.utils.io import save_json, save_yaml
from samc.utils.seed import resolve_seed

logger = logging.getLogger(__name__)


def _summary_settings(cfg: Mapping[str, Any], niter: int) -> Tuple[int, int]:
    block = cfg.get("summary") or {}
    burn_in = block.get("burn_in")
    burn_in = niter // 10 if burn_in is None else int(burn_in)
    thin = int(block.get("thin", 1))
    if burn_in < 0 or burn_in >= niter:
        raise DegenerateConfiguration(f"summary.burn_in must lie in [0, niter); got {burn_in}.")
    if thin < 1:
        raise DegenerateConfiguration("summary.thin must be a positive integer.")
    return burn_in, thin


def execute(config: Mapping[str, Any], progress_bar: bool = False) -> Tuple[SAMCResult, Dict[str, Any]]:
    """Run the sampler described by ``config``; returns the result and the resolved config."""
    cfg = deepcopy(dict(config))
    if "nv" not in cfg or "energy" not in cfg:
        raise DegenerateConfiguration("config requires 'nv' and 'energy'.")
    energy = resolve_energy(cfg["energy"])
    options = build_options(cfg["nv"], cfg.get("sampler") or {})
    cfg["seed"] = resolve_seed(cfg.get("seed"))
    cfg["sampler"] = options.to_dict()
    sampler = SAMC(energy=energy, options=options, seed=cfg["seed"],
                   log_every=int(cfg.get("log_every", 0) or 0))
    result = sampler.run(progress_bar=progress_bar)
    return result, cfg


def summarize(result: SAMCResult, burn_in: int = 0, thin: int = 1) -> Dict[str, Any]:
    return {
        "chain": summarize_chain(result, burn_in=burn_in, thin=thin),
        "partition": partition_summary(result),
        "burn_in": burn_in,
        "thin": thin,
    }


def run_sampler(config: Mapping[str, Any], out_dir: Optional[Path] = None,
                progress_bar: bool = False) -> Dict[str, Any]:
    """Run, summarise and optionally write ``resolved_config.yaml`` and ``summary.json``."""
    result, resolved = execute(config, progress_bar=progress_bar)
    burn_in, thin = _summary_settings(resolved, result.niter)
    summary = {"status": "OK", "seed": resolved["seed"], **summarize(result, burn_in, thin)}
    if out_dir is not None:
        out_dir = Path(out_dir)
        save_yaml(resolved, out_dir / "resolved_config.yaml")
        save_json(summary, out_dir / "summary.json")
        logger.info("Artifacts written to %s", out_dir)
    return summary
