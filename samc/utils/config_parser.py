"""YAML configuration loader with command-line overrides."""
from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import yaml


def load_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file into a dictionary."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must be a YAML mapping at top-level.")
    return data


def deep_update(dst: Dict[str, Any], src: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``src`` into ``dst`` (in place) and return ``dst``."""
    for k, v in src.items():
        if isinstance(v, Mapping) and isinstance(dst.get(k), dict):
            deep_update(dst[k], v)
        else:
            dst[k] = deepcopy(v)
    return dst


def load_and_merge(paths: Sequence[Path]) -> dict[str, Any]:
    """Load several YAML files and merge them from left to right."""
    cfg: Dict[str, Any] = {}
    for p in paths:
        deep_update(cfg, load_config(p))
    return cfg


def _cast_value(v: str) -> Any:
    # YAML scalars cover ints, floats, bools, .inf and inline lists like [-5, 5]
    try:
        out = yaml.safe_load(v)
    except yaml.YAMLError:
        return v
    if isinstance(out, str):
        # PyYAML reads exponent floats without a dot (1e-3) as strings
        try:
            return float(out)
        except ValueError:
            return out
    return out


def parse_overrides(pairs: List[str]) -> Dict[str, Any]:
    """Parse ``key.sub=value`` strings into a nested dictionary."""
    root: Dict[str, Any] = {}
    for item in pairs:
        if "=" not in item:
            raise ValueError(f"Override must be key=value, got: '{item}'")
        k, v = item.split("=", 1)
        keys = k.strip().split(".")
        d = root
        for kk in keys[:-1]:
            d = d.setdefault(kk, {})
            if not isinstance(d, dict):
                raise ValueError(f"Key path conflict at '{k}'")
        d[keys[-1]] = _cast_value(v)
    return root


def merge_overrides(config: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Merge nested or dotted-key overrides into a copy of ``config``."""
    merged = deepcopy(dict(config))
    for key, value in overrides.items():
        if isinstance(key, str) and "." in key:
            nested: Dict[str, Any] = {}
            d = nested
            parts = key.split(".")
            for kk in parts[:-1]:
                d = d.setdefault(kk, {})
            d[parts[-1]] = value
            deep_update(merged, nested)
        elif isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            deep_update(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged
