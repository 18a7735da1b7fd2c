"""Smoke tests for the config-driven runner and CLI."""
from __future__ import annotations

import json
import logging
import math
from pathlib import Path

import numpy as np
import pytest
import yaml

from samc.cli.run_sampler import main
from samc.experiments.energies import ENERGIES, multimodal_2d, resolve_energy
from samc.experiments.runner import execute, run_sampler
from samc.utils.errors import DegenerateConfiguration
from samc.utils.logging_utils import Timer, setup_logging

ROOT = Path(__file__).resolve().parents[1]


def _config(niter=500):
    return {
        "seed": 123,
        "nv": 1,
        "energy": "quadratic",
        "sampler": {
            "domain": [-10.0, 10.0],
            "partition": [-math.inf, -5.0, 0.0, 5.0, math.inf],
            "niter": niter,
            "t0": 1.0,
            "xi": 0.8,
            "trange": [-50.0, 50.0],
        },
        "summary": {"burn_in": 50, "thin": 2},
    }


def test_run_sampler_creates_artifacts(tmp_path):
    out_dir = tmp_path / "run"
    summary = run_sampler(_config(), out_dir)

    assert summary["status"] == "OK"
    assert summary["seed"] == 123
    assert summary["chain"]["kept"] == 225
    assert sum(summary["partition"]["count"]) == 500
    assert summary["partition"]["unvisited"] == 2

    written = json.loads((out_dir / "summary.json").read_text(encoding="utf-8"))
    assert written["partition"]["count"] == summary["partition"]["count"]
    assert written["partition"]["lower"][0] == "-inf"

    resolved = yaml.safe_load((out_dir / "resolved_config.yaml").read_text(encoding="utf-8"))
    assert resolved["sampler"]["vecpi"] == [0.25, 0.25, 0.25, 0.25]
    assert resolved["sampler"]["domain"] == [[-10.0, 10.0]]


def test_execute_is_reproducible_and_records_seed():
    a, _ = execute(_config(200))
    b, _ = execute(_config(200))
    np.testing.assert_array_equal(a.samples, b.samples)

    cfg = _config(200)
    cfg.pop("seed")
    _, resolved = execute(cfg)
    assert isinstance(resolved["seed"], int)


def test_runner_config_errors():
    with pytest.raises(DegenerateConfiguration):
        execute({"energy": "quadratic"})
    with pytest.raises(KeyError):
        execute({"nv": 1, "energy": "no_such_energy"})
    bad = _config(100)
    bad["summary"] = {"burn_in": 100}
    with pytest.raises(DegenerateConfiguration):
        run_sampler(bad)


def test_resolve_energy_by_path():
    fn = resolve_energy("samc.experiments.energies:quadratic")
    assert fn(np.array([1.0, 2.0])) == 5.0
    assert resolve_energy("multimodal_2d") is multimodal_2d
    assert set(ENERGIES) >= {"quadratic", "gaussian_mixture_1d", "multimodal_2d"}


def test_cli_main_runs_example_config(tmp_path, capsys):
    code = main([
        "--config", str(ROOT / "configs" / "quadratic_1d.yaml"),
        "--override", "sampler.niter=300", "summary.burn_in=10",
        "--outdir", str(tmp_path),
        "--name", "cli",
    ])
    assert code == 0
    out = capsys.readouterr().out
    assert "[OK]" in out
    run_dirs = list(tmp_path.glob("cli-*"))
    assert len(run_dirs) == 1
    assert (run_dirs[0] / "summary.json").exists()


def test_logging_setup_and_timer(tmp_path):
    log_file = tmp_path / "logs" / "samc.log"
    logger = setup_logging(logging.DEBUG, log_file=str(log_file))
    with Timer(name="block", logger=logger) as timer:
        pass
    assert timer.elapsed >= 0.0
    for h in logger.handlers:
        h.flush()
    assert "block" in log_file.read_text(encoding="utf-8")
    setup_logging(logging.WARNING)
