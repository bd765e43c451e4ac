"""
YAML → progression table / scheme definition loader.

User presets file (e.g. ~/.set-rep-planner/progressions.yaml) maps table
names to table definitions.  A definition for a bundled table is
deep-merged over the bundled values, so only changed keys need to be
listed.  A name that does not match a bundled table defines a new table
and must give its ``family`` and every volume's parameters:

    RIR_increment:
      volumes:
        normal:
          rep_start: 1.5
    my_drop:
      family: perc_drop
      fixed_steps: [-2, -1, 0]
      volumes:
        normal: {rep_start: -0.02, rep_step: 0, inc_start: -0.03, inc_step: 0}

Scheme files hold one scheme:

    reps: [5, 5, 5]
    adjustment: 0
    vertical_planning: linear
    vertical_planning_options: {reps_change: [0, -1, -2]}
    progression_table: perc_drop
    progression_table_options: {volume: extensive}

The core never reads these files on its own; callers (the CLI) pass the
loaded values in explicitly.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from .config import USER_CONFIG_DIRNAME, USER_PRESETS_FILENAME
from .errors import InvalidInput
from .models import ProgressionParams, ProgressionTable, SchemeDefinition
from .progression import TABLES

_REQUIRED_PARAMS: frozenset[str] = frozenset(
    {"rep_start", "rep_step", "inc_start", "inc_step"}
)
_OPTIONAL_PARAMS: frozenset[str] = frozenset({"adjustment"})

_SCHEME_FIELDS: frozenset[str] = frozenset(
    {
        "reps",
        "adjustment",
        "vertical_planning",
        "vertical_planning_options",
        "progression_table",
        "progression_table_options",
    }
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping; raise InvalidInput if it is not one."""
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as e:
            raise InvalidInput(f"Cannot parse {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _number(where: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput(f"{where} must be a number, got {value!r}")
    return float(value)


def params_from_dict(d: dict, where: str = "params") -> ProgressionParams:
    """Convert a raw dict to ProgressionParams, raising InvalidInput on bad fields."""
    if not isinstance(d, dict):
        raise InvalidInput(f"{where} must be a mapping, got {d!r}")
    missing = _REQUIRED_PARAMS - set(d)
    if missing:
        raise InvalidInput(f"{where} missing fields: {sorted(missing)}")
    unknown = set(d) - _REQUIRED_PARAMS - _OPTIONAL_PARAMS
    if unknown:
        raise InvalidInput(f"{where} has unknown fields: {sorted(unknown)}")
    return ProgressionParams(
        rep_start=_number(f"{where}.rep_start", d["rep_start"]),
        rep_step=_number(f"{where}.rep_step", d["rep_step"]),
        inc_start=_number(f"{where}.inc_start", d["inc_start"]),
        inc_step=_number(f"{where}.inc_step", d["inc_step"]),
        adjustment=_number(f"{where}.adjustment", d.get("adjustment", 0.0)),
    )


def table_to_dict(table: ProgressionTable) -> dict[str, Any]:
    """Plain-dict form of a ProgressionTable (the shape the YAML file uses)."""
    return {
        "family": table.family,
        "fixed_steps": list(table.fixed_steps) if table.fixed_steps else None,
        "description": table.description,
        "volumes": {
            volume: {
                "rep_start": p.rep_start,
                "rep_step": p.rep_step,
                "inc_start": p.inc_start,
                "inc_step": p.inc_step,
                "adjustment": p.adjustment,
            }
            for volume, p in table.presets.items()
        },
    }


def table_from_dict(name: str, d: dict) -> ProgressionTable:
    """Convert a raw dict to a ProgressionTable."""
    if not isinstance(d, dict):
        raise InvalidInput(f"Table '{name}' must be a mapping, got {d!r}")
    family = d.get("family")
    if family not in ("RIR", "perc_drop"):
        raise InvalidInput(f"Table '{name}' family must be 'RIR' or 'perc_drop', got {family!r}")
    volumes = d.get("volumes")
    if not isinstance(volumes, dict) or not volumes:
        raise InvalidInput(f"Table '{name}' must define at least one volume")

    fixed_raw = d.get("fixed_steps")
    fixed_steps: tuple[int, ...] | None = None
    if fixed_raw:
        if not isinstance(fixed_raw, list) or any(
            isinstance(s, bool) or not isinstance(s, int) for s in fixed_raw
        ):
            raise InvalidInput(f"Table '{name}' fixed_steps must be a list of integers")
        fixed_steps = tuple(fixed_raw)

    return ProgressionTable(
        name=name,
        family=family,
        presets={
            str(volume): params_from_dict(raw, where=f"{name}.volumes.{volume}")
            for volume, raw in volumes.items()
        },
        fixed_steps=fixed_steps,
        description=str(d.get("description") or ""),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def get_user_presets_path() -> Path | None:
    """Return ~/.set-rep-planner/progressions.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / USER_CONFIG_DIRNAME / USER_PRESETS_FILENAME
    return p if p.exists() else None


def load_progression_tables(path: Path | None = None) -> dict[str, ProgressionTable]:
    """
    Return the bundled tables merged with user definitions from ``path``.

    Args:
        path: YAML presets file; None returns the bundled tables only

    Returns:
        {table_name: ProgressionTable}

    Raises:
        FileNotFoundError: If path does not exist
        InvalidInput: If the file or any definition is malformed
    """
    tables = dict(TABLES)
    if path is None:
        return tables

    for name, raw in _load_yaml_file(Path(path)).items():
        name = str(name)
        if name in tables:
            if not isinstance(raw, dict):
                raise InvalidInput(f"Table '{name}' must be a mapping, got {raw!r}")
            raw = _deep_merge(table_to_dict(tables[name]), raw)
        tables[name] = table_from_dict(name, raw)
    return tables


def scheme_from_dict(d: dict) -> SchemeDefinition:
    """Convert a raw dict to a SchemeDefinition."""
    unknown = set(d) - _SCHEME_FIELDS
    if unknown:
        raise InvalidInput(f"Scheme has unknown fields: {sorted(unknown)}")
    if "reps" not in d:
        raise InvalidInput("Scheme missing field: 'reps'")
    reps = d["reps"]
    if not isinstance(reps, list):
        raise InvalidInput(f"Scheme 'reps' must be a list, got {reps!r}")

    adjustment = d.get("adjustment", 0.0)
    if not isinstance(adjustment, (int, float, list)) or isinstance(adjustment, bool):
        raise InvalidInput(f"Scheme 'adjustment' must be a number or list, got {adjustment!r}")

    for key in ("vertical_planning_options", "progression_table_options"):
        if not isinstance(d.get(key) or {}, dict):
            raise InvalidInput(f"Scheme '{key}' must be a mapping")

    table_options = dict(d.get("progression_table_options") or {})
    if isinstance(table_options.get("params"), dict):
        table_options["params"] = params_from_dict(
            table_options["params"], where="progression_table_options.params"
        )

    return SchemeDefinition(
        reps=list(reps),
        adjustment=adjustment,
        vertical_planning=str(d.get("vertical_planning", "constant")),
        vertical_planning_options=dict(d.get("vertical_planning_options") or {}),
        progression_table=str(d.get("progression_table", "RIR_increment")),
        progression_table_options=table_options,
    )


def load_scheme_file(path: Path) -> SchemeDefinition:
    """
    Load a scheme definition from a YAML file.

    Raises:
        FileNotFoundError: If path does not exist
        InvalidInput: If the file is malformed
    """
    return scheme_from_dict(_load_yaml_file(Path(path)))
