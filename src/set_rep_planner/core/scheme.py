"""
Scheme composer.

A scheme joins a vertical plan (reps, index, step per set) with progression
table lookups keyed by (reps, step) and numbers the sets within each index.
The resulting SchemeRow list is the only thing reporting and plotting code
needs to consume.

Horizontal planning (how intensity varies across the sets of one session)
is expressed as a per-set ``adjustment`` added on top of the table value.
"""

from __future__ import annotations

from typing import Callable, Final, Mapping, Sequence, Union

from .errors import InvalidInput, LengthMismatch
from .models import ProgressionTable, SchemeDefinition, SchemeRow, VerticalPlanRow
from .progression import get_progression_table, progression_table as lookup_table
from .vertical import run_vertical_planning

Number = Union[int, float]
PlanningFunc = Callable[..., list[VerticalPlanRow]]

TABLE_OPTION_KEYS: Final[frozenset[str]] = frozenset({"volume", "type", "params"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _table_options(options: Mapping | None) -> dict:
    options = dict(options or {})
    unknown = set(options) - TABLE_OPTION_KEYS
    if unknown:
        raise InvalidInput(
            f"Unknown progression table options: {sorted(unknown)}. "
            f"Valid options: {sorted(TABLE_OPTION_KEYS)}"
        )
    return options


def _horizontal_adjustment(
    adjustment: Number | Sequence[Number],
    n_reps: int,
) -> list[float]:
    if isinstance(adjustment, (int, float)) and not isinstance(adjustment, bool):
        return [float(adjustment)]
    values = list(adjustment)
    if len(values) not in (1, n_reps):
        raise LengthMismatch(
            f"adjustment must be a scalar or have one value per set "
            f"({n_reps}), got {len(values)}"
        )
    return values


def _set_adjustment(horizontal: list[float], row: VerticalPlanRow, set_number: int) -> float:
    """Horizontal adjustment of the base set a plan row came from."""
    # Rows from custom planning functions carry no position; fall back to set order
    position = row.position if row.position is not None else set_number
    return horizontal[min(position, len(horizontal)) - 1]


def number_sets(plan: Sequence[VerticalPlanRow]) -> list[tuple[VerticalPlanRow, int]]:
    """Stable-sort rows by index and pair each with its 1-based set number."""
    counters: dict[int, int] = {}
    numbered = []
    for row in sorted(plan, key=lambda r: r.index):
        counters[row.index] = counters.get(row.index, 0) + 1
        numbered.append((row, counters[row.index]))
    return numbered


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def scheme(
    reps: Sequence[Number],
    adjustment: Number | Sequence[Number] = 0.0,
    vertical_planning: str | PlanningFunc = "constant",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    """
    Compose a full multi-step scheme.

    Args:
        reps: Base rep prescription, one entry per set
        adjustment: Per-set horizontal adjustment (scalar or one per set);
                    sets added by accumulation reuse the value
                    of the base set they repeat
        vertical_planning: Registered planning name or planning function
        vertical_planning_options: Keyword arguments for the planning function
        progression_table: Table name or ProgressionTable
        progression_table_options: ``volume``, ``type`` and/or ``params``

    Returns:
        SchemeRow list ordered by index, sets numbered from 1 within each index

    Raises:
        InvalidInput: Unknown names/options or out-of-domain values
        LengthMismatch: adjustment length does not match reps
        MissingArgument: Propagated from the generic planner
    """
    table = get_progression_table(progression_table)
    table_opts = _table_options(progression_table_options)

    plan = run_vertical_planning(vertical_planning, reps, vertical_planning_options)
    horizontal = _horizontal_adjustment(adjustment, len(reps))
    numbered = number_sets(plan)
    if not numbered:
        return []

    lookups = lookup_table(
        reps=[row.reps for row, _ in numbered],
        step=[row.step for row, _ in numbered],
        table=table,
        adjustment=[_set_adjustment(horizontal, row, n) for row, n in numbered],
        **table_opts,
    )

    return [
        SchemeRow(
            index=row.index,
            set=set_number,
            reps=row.reps,
            adjustment=cell.adjustment,
            perc_1RM=cell.perc_1RM,
        )
        for (row, set_number), cell in zip(numbered, lookups)
    ]


def scheme_from_definition(
    definition: SchemeDefinition,
    tables: Mapping[str, ProgressionTable] | None = None,
) -> list[SchemeRow]:
    """Compose a scheme from a declarative SchemeDefinition."""
    table: str | ProgressionTable = definition.progression_table
    if tables is not None:
        table = get_progression_table(definition.progression_table, dict(tables))
    return scheme(
        reps=definition.reps,
        adjustment=definition.adjustment,
        vertical_planning=definition.vertical_planning,
        vertical_planning_options=definition.vertical_planning_options,
        progression_table=table,
        progression_table_options=definition.progression_table_options,
    )


# ---------------------------------------------------------------------------
# Named horizontal schemes
# ---------------------------------------------------------------------------
# Default per-set adjustments, in RIR units and in %1RM units

_DEFAULT_ADJUSTMENTS: Final[dict[str, dict[str, tuple[float, ...]]]] = {
    "wave": {
        "RIR": (2, 1, 0, 3, 2, 1),
        "perc_drop": (-0.10, -0.05, 0.0, -0.15, -0.10, -0.05),
    },
    "step": {
        "RIR": (2, 1, 0),
        "perc_drop": (-0.10, -0.05, 0.0),
    },
    "step_reverse": {
        "RIR": (0, 1, 2),
        "perc_drop": (0.0, -0.05, -0.10),
    },
    "wave_descending": {
        "RIR": (1, 2, 3, 0, 1, 2),
        "perc_drop": (-0.05, -0.10, -0.15, 0.0, -0.05, -0.10),
    },
    "light_heavy": {
        "RIR": (2, 0, 2, 0, 2, 0),
        "perc_drop": (-0.075, 0.0, -0.075, 0.0, -0.075, 0.0),
    },
}


def _named_scheme(
    name: str,
    reps: Sequence[Number],
    adjustment: Number | Sequence[Number] | None,
    vertical_planning: str | PlanningFunc,
    vertical_planning_options: Mapping | None,
    progression_table: str | ProgressionTable,
    progression_table_options: Mapping | None,
) -> list[SchemeRow]:
    if adjustment is None:
        family = get_progression_table(progression_table).family
        pattern = _DEFAULT_ADJUSTMENTS.get(name, {}).get(family, (0.0,))
        # Cycle the default pattern over however many sets were given
        adjustment = [pattern[i % len(pattern)] for i in range(len(reps))]
    return scheme(
        reps,
        adjustment=adjustment,
        vertical_planning=vertical_planning,
        vertical_planning_options=vertical_planning_options,
        progression_table=progression_table,
        progression_table_options=progression_table_options,
    )


def scheme_generic(
    reps: Sequence[Number],
    adjustment: Number | Sequence[Number] = 0.0,
    vertical_planning: str | PlanningFunc = "constant",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    """Alias of ``scheme`` kept alongside the named schemes."""
    return scheme(
        reps,
        adjustment=adjustment,
        vertical_planning=vertical_planning,
        vertical_planning_options=vertical_planning_options,
        progression_table=progression_table,
        progression_table_options=progression_table_options,
    )


def scheme_wave(
    reps: Sequence[Number] = (10, 8, 6, 10, 8, 6),
    adjustment: Number | Sequence[Number] | None = None,
    vertical_planning: str | PlanningFunc = "linear",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    """Two waves of descending reps, the second wave slightly lighter."""
    return _named_scheme(
        "wave", reps, adjustment, vertical_planning, vertical_planning_options,
        progression_table, progression_table_options,
    )


def scheme_plateau(
    reps: Sequence[Number] = (5, 5, 5),
    adjustment: Number | Sequence[Number] | None = None,
    vertical_planning: str | PlanningFunc = "constant",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    """Same reps and load on every set."""
    return _named_scheme(
        "plateau", reps, adjustment, vertical_planning, vertical_planning_options,
        progression_table, progression_table_options,
    )


def scheme_step(
    reps: Sequence[Number] = (5, 5, 5),
    adjustment: Number | Sequence[Number] | None = None,
    vertical_planning: str | PlanningFunc = "constant",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    """Load climbs toward the top set."""
    return _named_scheme(
        "step", reps, adjustment, vertical_planning, vertical_planning_options,
        progression_table, progression_table_options,
    )


def scheme_step_reverse(
    reps: Sequence[Number] = (5, 5, 5),
    adjustment: Number | Sequence[Number] | None = None,
    vertical_planning: str | PlanningFunc = "constant",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    """Top set first, then back-off sets."""
    return _named_scheme(
        "step_reverse", reps, adjustment, vertical_planning, vertical_planning_options,
        progression_table, progression_table_options,
    )


def scheme_wave_descending(
    reps: Sequence[Number] = (6, 8, 10, 6, 8, 10),
    adjustment: Number | Sequence[Number] | None = None,
    vertical_planning: str | PlanningFunc = "linear",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    """Two waves of ascending reps, the second wave slightly heavier."""
    return _named_scheme(
        "wave_descending", reps, adjustment, vertical_planning, vertical_planning_options,
        progression_table, progression_table_options,
    )


def scheme_light_heavy(
    reps: Sequence[Number] = (3, 3, 3, 3, 3, 3),
    adjustment: Number | Sequence[Number] | None = None,
    vertical_planning: str | PlanningFunc = "constant",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    """Alternating light and heavy sets of the same reps."""
    return _named_scheme(
        "light_heavy", reps, adjustment, vertical_planning, vertical_planning_options,
        progression_table, progression_table_options,
    )


def scheme_pyramid(
    reps: Sequence[Number] = (12, 10, 8, 10, 12),
    adjustment: Number | Sequence[Number] | None = None,
    vertical_planning: str | PlanningFunc = "constant",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    return _named_scheme(
        "pyramid", reps, adjustment, vertical_planning, vertical_planning_options,
        progression_table, progression_table_options,
    )


def scheme_rep_acc(
    reps: Sequence[Number] = (10, 10, 10),
    adjustment: Number | Sequence[Number] | None = None,
    vertical_planning: str | PlanningFunc = "rep_accumulation",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    """Reps build up to the target over the steps at a fixed step."""
    return _named_scheme(
        "rep_acc", reps, adjustment, vertical_planning, vertical_planning_options,
        progression_table, progression_table_options,
    )


def scheme_ladder(
    reps: Sequence[Number] = (3, 5, 10, 3, 5, 10),
    adjustment: Number | Sequence[Number] | None = None,
    vertical_planning: str | PlanningFunc = "constant",
    vertical_planning_options: Mapping | None = None,
    progression_table: str | ProgressionTable = "RIR_increment",
    progression_table_options: Mapping | None = None,
) -> list[SchemeRow]:
    return _named_scheme(
        "ladder", reps, adjustment, vertical_planning, vertical_planning_options,
        progression_table, progression_table_options,
    )


SCHEMES: Final[dict[str, Callable[..., list[SchemeRow]]]] = {
    "generic": scheme_generic,
    "wave": scheme_wave,
    "plateau": scheme_plateau,
    "step": scheme_step,
    "step_reverse": scheme_step_reverse,
    "wave_descending": scheme_wave_descending,
    "light_heavy": scheme_light_heavy,
    "pyramid": scheme_pyramid,
    "rep_acc": scheme_rep_acc,
    "ladder": scheme_ladder,
}


def get_scheme(name: str) -> Callable[..., list[SchemeRow]]:
    """
    Return the named scheme function.

    Raises:
        InvalidInput: If name is not registered
    """
    if name not in SCHEMES:
        valid = ", ".join(SCHEMES)
        raise InvalidInput(f"Unknown scheme '{name}'. Valid schemes: {valid}")
    return SCHEMES[name]
