"""
Progression table generator.

A progression table turns (reps, step) into an adjustment and a %1RM using
a bilinear model (see ProgressionParams).  Two families exist:

  RIR family:        perc_1RM = max_perc_1RM(reps + adjustment)
                     adjustment is extra reps in reserve; more RIR means a
                     higher effective rep count and therefore a lower %1RM.

  Percent-drop:      perc_1RM = max_perc_1RM(reps) + adjustment
                     adjustment is already a (negative) %1RM delta.

Step 0 is the reference/peak step; steps further below 0 add one
increment each.
"""

from __future__ import annotations

import math
import warnings
from typing import Final, Iterable, Sequence, Union

from .config import (
    DEFAULT_STEP_RANGE,
    FIXED_STEPS,
    LIFT_TYPES,
    MAX_REP_CAP,
    PERC_DROP_FIXED_PRESETS,
    PERC_DROP_PRESETS,
    RIR_INCREMENT_FIXED_PRESETS,
    RIR_INCREMENT_PRESETS,
    VOLUMES,
)
from .errors import ExtrapolationWarning, InvalidInput, LengthMismatch
from .max_perc import max_perc_1RM, validate_lift_type, validate_reps
from .models import DenseTableRow, ProgressionParams, ProgressionTable, ProgressionTableRow

Number = Union[int, float]
NumberOrSeq = Union[Number, Sequence[Number]]

TABLES: Final[dict[str, ProgressionTable]] = {
    "RIR_increment": ProgressionTable(
        name="RIR_increment",
        family="RIR",
        presets=RIR_INCREMENT_PRESETS,
        description="Reps-in-reserve increment per step, growing with reps",
    ),
    "perc_drop": ProgressionTable(
        name="perc_drop",
        family="perc_drop",
        presets=PERC_DROP_PRESETS,
        description="%1RM drop per step, growing with reps",
    ),
    "RIR_increment_fixed": ProgressionTable(
        name="RIR_increment_fixed",
        family="RIR",
        presets=RIR_INCREMENT_FIXED_PRESETS,
        fixed_steps=FIXED_STEPS,
        description="Constant reps-in-reserve increment per step",
    ),
    "perc_drop_fixed": ProgressionTable(
        name="perc_drop_fixed",
        family="perc_drop",
        presets=PERC_DROP_FIXED_PRESETS,
        fixed_steps=FIXED_STEPS,
        description="Constant %1RM drop per step",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------

def get_progression_table(
    table: str | ProgressionTable,
    registry: dict[str, ProgressionTable] | None = None,
) -> ProgressionTable:
    """
    Resolve a table name (or pass through a ProgressionTable).

    Raises:
        InvalidInput: If the name is not in the registry
    """
    if isinstance(table, ProgressionTable):
        return table
    tables = TABLES if registry is None else registry
    if table not in tables:
        valid = ", ".join(tables)
        raise InvalidInput(f"Unknown progression table '{table}'. Valid tables: {valid}")
    return tables[table]


def resolve_params(
    table: ProgressionTable,
    volume: str = "normal",
    params: ProgressionParams | None = None,
) -> ProgressionParams:
    """Return explicit ``params`` or the table preset for ``volume``."""
    if params is not None:
        return params
    if volume not in table.presets:
        valid = ", ".join(table.presets)
        raise InvalidInput(
            f"Unknown volume '{volume}' for table '{table.name}'. Valid volumes: {valid}"
        )
    return table.presets[volume]


def _validate_number(name: str, value: Number) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        raise InvalidInput(f"{name} must be a number, got {value!r}")
    return float(value)


def _as_list(name: str, value: NumberOrSeq) -> list:
    if isinstance(value, (str, bytes)):
        raise InvalidInput(f"{name} must be a number or a sequence of numbers, got {value!r}")
    if isinstance(value, Iterable):
        values = list(value)
        if not values:
            raise InvalidInput(f"{name} must not be empty")
        return values
    return [value]


def broadcast(**columns: NumberOrSeq) -> list[dict[str, Number]]:
    """
    Pair scalar/vector arguments element-wise.

    Scalars and length-1 sequences are repeated; every longer sequence must
    share the same length.

    Raises:
        LengthMismatch: If two sequences longer than 1 differ in length
    """
    lists = {name: _as_list(name, value) for name, value in columns.items()}
    lengths = {name: len(v) for name, v in lists.items() if len(v) > 1}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{k}={v}" for k, v in lengths.items())
        raise LengthMismatch(f"Argument lengths differ ({detail})")
    n = max(lengths.values(), default=1)
    return [
        {name: (v[i] if len(v) > 1 else v[0]) for name, v in lists.items()}
        for i in range(n)
    ]


def snap_step(step: float, fixed_steps: Sequence[int]) -> float:
    """Snap ``step`` to the nearest allowed value (ties resolve toward 0)."""
    return float(min(fixed_steps, key=lambda s: (abs(s - step), -s)))


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

def progression_adjustment(reps: float, step: float, params: ProgressionParams) -> float:
    """
    Bilinear adjustment for one (reps, step) pair.

    adjustment = inc(reps) * (-step) + base(reps) + params.adjustment
    """
    inc = params.inc_start + params.inc_step * (reps - 1)
    base = params.rep_start + params.rep_step * (reps - 1)
    return inc * (-step) + base + params.adjustment


def effective_reps(family: str, reps: float, adjustment: float) -> float:
    """Rep count the max-%1RM model is evaluated at for a table family."""
    if family == "RIR":
        return reps + adjustment
    if family == "perc_drop":
        return reps
    raise InvalidInput(f"Unknown table family '{family}'")


def combine_perc_1RM(
    family: str,
    reps: float,
    adjustment: float,
    type: str,
    warn: bool = True,
) -> float:
    """Apply the family-specific rule linking adjustment and max-%1RM."""
    eff = effective_reps(family, reps, adjustment)
    if eff <= 0:
        raise InvalidInput(
            f"reps + adjustment must be positive, got {reps:g} + {adjustment:g}"
        )
    perc = max_perc_1RM(eff, type, warn=warn)
    return perc + adjustment if family == "perc_drop" else perc


def _lookup_rows(
    tbl: ProgressionTable,
    params: ProgressionParams,
    type: str,
    reps: NumberOrSeq,
    step: NumberOrSeq,
    adjustment: NumberOrSeq,
    warn: bool = True,
) -> list[ProgressionTableRow]:
    rows: list[ProgressionTableRow] = []
    for cell in broadcast(reps=reps, step=step, adjustment=adjustment):
        r = validate_reps(cell["reps"])
        s = _validate_number("step", cell["step"])
        extra = _validate_number("adjustment", cell["adjustment"])
        model_step = snap_step(s, tbl.fixed_steps) if tbl.fixed_steps else s
        adj = progression_adjustment(r, model_step, params) + extra
        rows.append(
            ProgressionTableRow(
                reps=r,
                step=s,
                adjustment=adj,
                perc_1RM=combine_perc_1RM(tbl.family, r, adj, type, warn=warn),
            )
        )
    return rows


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def progression_table(
    reps: NumberOrSeq,
    step: NumberOrSeq = 0,
    table: str | ProgressionTable = "RIR_increment",
    volume: str = "normal",
    type: str = "grinding",
    adjustment: NumberOrSeq = 0.0,
    params: ProgressionParams | None = None,
) -> list[ProgressionTableRow]:
    """
    Look up adjustment and %1RM for (reps, step) pairs.

    ``reps``, ``step`` and ``adjustment`` are broadcast element-wise: equal
    length vectors pair up, scalars repeat.  ``adjustment`` is added on top
    of the preset's own adjustment term.

    Args:
        reps: Rep count(s), > 0
        step: Progression step(s); 0 is the reference/peak step
        table: Table name or ProgressionTable
        volume: "intensive", "normal" or "extensive"
        type: "grinding" or "ballistic"
        adjustment: Extra adjustment (RIR or %1RM units, per table family)
        params: Explicit params overriding the preset

    Returns:
        One ProgressionTableRow per broadcast element

    Raises:
        InvalidInput: Bad reps/step/volume/type/table
        LengthMismatch: Vector arguments of different lengths
    """
    tbl = get_progression_table(table)
    p = resolve_params(tbl, volume, params)
    validate_lift_type(type)
    return _lookup_rows(tbl, p, type, reps, step, adjustment)


def RIR_increment(
    reps: NumberOrSeq,
    step: NumberOrSeq = 0,
    volume: str = "normal",
    type: str = "grinding",
    adjustment: NumberOrSeq = 0.0,
    fixed: bool = False,
) -> list[ProgressionTableRow]:
    """RIR increment progression table (see ``progression_table``)."""
    name = "RIR_increment_fixed" if fixed else "RIR_increment"
    return progression_table(
        reps, step, table=name, volume=volume, type=type, adjustment=adjustment
    )


def perc_drop(
    reps: NumberOrSeq,
    step: NumberOrSeq = 0,
    volume: str = "normal",
    type: str = "grinding",
    adjustment: NumberOrSeq = 0.0,
    fixed: bool = False,
) -> list[ProgressionTableRow]:
    """Percent drop progression table (see ``progression_table``)."""
    name = "perc_drop_fixed" if fixed else "perc_drop"
    return progression_table(
        reps, step, table=name, volume=volume, type=type, adjustment=adjustment
    )


def generate_progression_table(
    step_range: Sequence[Number] = DEFAULT_STEP_RANGE,
    reps_range: Sequence[Number] | None = None,
    tables: Sequence[str | ProgressionTable] | None = None,
    volumes: Sequence[str] = VOLUMES,
    types: Sequence[str] = LIFT_TYPES,
) -> list[DenseTableRow]:
    """
    Enumerate every (table, volume, type, reps, step) combination.

    Rows are ordered table -> volume -> type -> reps -> step.  Rep counts
    that push the RIR tables past the tabulated range are clamped; a single
    summary ExtrapolationWarning is emitted instead of one per cell.

    Returns:
        Flat list of DenseTableRow for inspection or plotting
    """
    if reps_range is None:
        reps_range = range(1, MAX_REP_CAP + 1)
    if tables is None:
        tables = list(TABLES)

    reps_list = _as_list("reps_range", reps_range)
    step_list = _as_list("step_range", step_range)

    rows: list[DenseTableRow] = []
    clamped = 0
    for table in tables:
        tbl = get_progression_table(table)
        for volume in volumes:
            p = resolve_params(tbl, volume)
            for type in types:
                validate_lift_type(type)
                for reps in reps_list:
                    cells = _lookup_rows(tbl, p, type, reps, step_list, 0.0, warn=False)
                    clamped += sum(
                        1 for c in cells
                        if effective_reps(tbl.family, c.reps, c.adjustment) > MAX_REP_CAP
                    )
                    rows.extend(
                        DenseTableRow(
                            table=tbl.name,
                            volume=volume,
                            type=type,
                            reps=c.reps,
                            step=c.step,
                            adjustment=c.adjustment,
                            perc_1RM=c.perc_1RM,
                        )
                        for c in cells
                    )

    if clamped:
        warnings.warn(
            f"{clamped} cells exceeded {MAX_REP_CAP} effective reps and were "
            "clamped to the last tabulated %1RM.",
            ExtrapolationWarning,
            stacklevel=2,
        )
    return rows
