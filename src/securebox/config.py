from __future__ import annotations

import copy
from pathlib import Path

import yaml

DEFAULTS = {
    "shuffle": {"seed": None, "max_toggles": 1000},
    "solver": {"strategy": "first_fit", "max_nullity": 16},
}


def _merge(base: dict, override: dict, where: str = "securebox") -> dict:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if key not in base:
            raise ValueError(f"Unknown config key: {where}.{key}")
        if isinstance(base[key], dict):
            if not isinstance(value, dict):
                raise ValueError(f"Config section {where}.{key} must be a mapping")
            out[key] = _merge(base[key], value, f"{where}.{key}")
        else:
            out[key] = value
    return out


def load_config(path: str | Path | None = None) -> dict:
    """Load a securebox YAML config, filling in defaults for missing keys."""
    if path is None:
        return copy.deepcopy(DEFAULTS)

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict) or "securebox" not in raw:
        raise ValueError(f"{path}: missing top-level 'securebox' section")
    extra = set(raw) - {"securebox"}
    if extra:
        raise ValueError(f"{path}: unknown top-level keys {sorted(extra)}")
    return _merge(DEFAULTS, raw["securebox"] or {})
