# samc/utils/logging_utils.py
from __future__ import annotations

import logging
import os
import sys
import time
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

_HAS_RICH = False
try:  # Optional colored logging
    from rich.console import Console
    from rich.logging import RichHandler
    _HAS_RICH = True
except Exception:
    Console = None  # type: ignore

_HAS_TQDM = False
try:
    from tqdm import tqdm as _tqdm  # type: ignore
    _HAS_TQDM = True
except Exception:
    _tqdm = None  # type: ignore

ROOT_LOGGER = "samc"


def verbosity_to_level(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level (0 WARNING, 1 INFO, 2+ DEBUG)."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``samc`` logger tree; rich console output when available, optional file."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    if _HAS_RICH:
        rh = RichHandler(console=Console(stderr=True), show_time=True, show_path=False, markup=False)
        rh.setLevel(level)
        logger.addHandler(rh)
    else:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(level)
        ch.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s:%(name)s: %(message)s",
                                          datefmt="%H:%M:%S"))
        logger.addHandler(ch)

    if log_file:
        parent = os.path.dirname(log_file)
        if parent:
            os.makedirs(parent, exist_ok=True)
        fh = logging.FileHandler(log_file)
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(fh)

    logger.debug("Logger initialized.")
    return logger


@dataclass
class Timer:
    """Context timer for a sampler run or any other block."""
    name: str = "task"
    logger: Optional[logging.Logger] = None
    start: float = 0.0
    elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start = time.perf_counter()
        if self.logger:
            self.logger.debug("[%s] started.", self.name)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed = time.perf_counter() - self.start
        if self.logger:
            if exc_type is None:
                self.logger.info("[%s] finished in %.3fs.", self.name, self.elapsed)
            else:
                self.logger.warning("[%s] aborted after %.3fs (%s).", self.name, self.elapsed,
                                    exc_type.__name__)


def progress(iterable: Iterable, total: Optional[int] = None, desc: Optional[str] = None,
             enabled: bool = True):
    """Wrap an iterable with a tqdm progress bar when tqdm is installed and enabled."""
    if enabled and _HAS_TQDM:
        kwargs = {"leave": False}
        if total is not None:
            kwargs["total"] = total
        if desc:
            kwargs["desc"] = desc
        return _tqdm(iterable, **kwargs)
    return iterable


def log_config(logger: logging.Logger, cfg: Mapping) -> None:
    """Log configuration entries as dotted keys."""
    def _walk(d: Mapping, prefix=""):
        for k in sorted(d.keys(), key=str):
            v = d[k]
            key = f"{prefix}.{k}" if prefix else str(k)
            if isinstance(v, Mapping):
                _walk(v, key)
            else:
                logger.info("%s: %r", key, v)
    logger.info("=== Effective Config ===")
    _walk(cfg)
