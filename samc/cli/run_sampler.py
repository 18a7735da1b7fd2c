# samc/cli/run_sampler.py
from __future__ import annotations

import argparse
import datetime as _dt
import logging
import sys
import traceback
from pathlib import Path
from typing import List

from samc.experiments.runner import run_sampler
from samc.utils.config_parser import deep_update, load_and_merge, parse_overrides
from samc.utils.logging_utils import log_config, setup_logging, verbosity_to_level


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d-%H%M%S")


def _derive_run_dir(base_out: Path, exp_name: str | None) -> Path:
    tag = exp_name if exp_name else "samc"
    return base_out / f"{tag}-{_timestamp()}"


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run a SAMC sampler from YAML config.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        nargs="+",
        type=str,
        required=True,
        help="One or more YAML config files (merged from left to right).",
    )
    parser.add_argument(
        "--override",
        "-o",
        nargs="*",
        default=[],
        help="Override config keys: e.g., seed=7 sampler.niter=5000 sampler.domain=[-5,5]",
    )
    parser.add_argument(
        "--outdir",
        type=str,
        default=None,
        help="Base output directory; when omitted nothing is written to disk.",
    )
    parser.add_argument("--name", type=str, default=None, help="Run name used in the output directory.")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar.")
    parser.add_argument(
        "--verbosity",
        "-v",
        action="count",
        default=0,
        help="Increase logging verbosity (-v INFO, -vv DEBUG).",
    )

    args = parser.parse_args(argv)
    logger = setup_logging(verbosity_to_level(args.verbosity))

    try:
        cfg_paths = [Path(p).expanduser().resolve() for p in args.config]
        for p in cfg_paths:
            if not p.exists():
                raise FileNotFoundError(f"Config not found: {p}")
        cfg = deep_update(load_and_merge(cfg_paths), parse_overrides(args.override or []))
        if logger.isEnabledFor(logging.INFO):
            log_config(logger, cfg)

        run_dir = None
        if args.outdir:
            run_dir = _derive_run_dir(Path(args.outdir).expanduser().resolve(), args.name)

        summary = run_sampler(cfg, run_dir, progress_bar=args.progress)
        chain = summary["chain"]
        part = summary["partition"]
        print(f"[OK] acceptance={chain['acceptance_rate']:.3f} unvisited_bins={part['unvisited']}")
        print("frequency: " + " ".join(str(c) for c in part["count"]))
        print("theta:     " + " ".join(f"{v:.3f}" for v in part["theta"]))
        if run_dir is not None:
            print(f"Artifacts in: {run_dir}")
        return 0
    except Exception:  # pragma: no cover
        print("[FATAL] Sampler run failed:\n", file=sys.stderr)
        traceback.print_exc()
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
