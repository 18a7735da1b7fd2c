"""I/O helpers for run artifacts."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np
import yaml


def ensure_dir(path: Path) -> Path:
    """Create directory if missing and return the path."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def to_jsonable(value: Any, finite_only: bool = True) -> Any:
    """Convert numpy scalars/arrays to plain Python; non-finite floats become strings when ``finite_only``."""
    if isinstance(value, dict):
        return {str(k): to_jsonable(v, finite_only) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v, finite_only) for v in value]
    if isinstance(value, np.ndarray):
        return to_jsonable(value.tolist(), finite_only)
    if isinstance(value, np.generic):
        return to_jsonable(value.item(), finite_only)
    if finite_only and isinstance(value, float) and not np.isfinite(value):
        return str(value)
    return value


def save_json(data: Any, path: Path) -> None:
    """Write JSON with UTF-8 encoding."""
    ensure_dir(path.parent)
    path.write_text(json.dumps(to_jsonable(data), indent=2), encoding="utf-8")


def save_yaml(data: Any, path: Path) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(to_jsonable(data, finite_only=False), f, sort_keys=False, allow_unicode=True)
