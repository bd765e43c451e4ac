"""
Vertical planning: how a base set/rep prescription changes across steps.

The generic planner crosses the base ``reps`` with every progression index
and emits one VerticalPlanRow per (index, base rep).  Rows are index-major:
all base reps for index 1, then index 2, and so on.

Named variants encode common periodization patterns and delegate to the
generic planner, except the two set-accumulation variants which grow the
number of sets instead of changing rep values.
"""

from __future__ import annotations

import inspect
from typing import Callable, Final, Mapping, Sequence, Union

from .errors import InvalidInput, LengthMismatch, MissingArgument
from .models import VerticalPlanRow

Number = Union[int, float]
AccumulateRep = Union[int, Sequence[int]]


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _number_list(name: str, values: Sequence[Number]) -> list[float]:
    if isinstance(values, (str, bytes)):
        raise InvalidInput(f"{name} must be a sequence of numbers, got {values!r}")
    try:
        result = list(values)
    except TypeError as e:
        raise InvalidInput(f"{name} must be a sequence of numbers, got {values!r}") from e
    if not result:
        raise InvalidInput(f"{name} must not be empty")
    for v in result:
        if isinstance(v, bool) or not isinstance(v, (int, float)) or v != v:
            raise InvalidInput(f"{name} must contain only numbers, got {v!r}")
    return result


def _step_list(step: Number | Sequence[Number]) -> list[float]:
    if isinstance(step, (int, float)) and not isinstance(step, bool):
        return [step]
    return _number_list("step", step)


def _accumulate_bounds(reps: Sequence[Number], accumulate_rep: AccumulateRep) -> tuple[int, int]:
    """Return the inclusive 1-based (min, max) positions to accumulate."""
    if isinstance(accumulate_rep, bool):
        raise InvalidInput(f"accumulate_rep must be a position, got {accumulate_rep!r}")
    if isinstance(accumulate_rep, int):
        positions = [accumulate_rep]
    else:
        positions = list(accumulate_rep)
        if not positions or any(
            isinstance(p, bool) or not isinstance(p, int) for p in positions
        ):
            raise InvalidInput(f"accumulate_rep must be integer positions, got {accumulate_rep!r}")

    lo, hi = min(positions), max(positions)
    if lo < 1 or hi > len(reps):
        raise InvalidInput(
            f"accumulate_rep {accumulate_rep!r} is outside 1..{len(reps)}"
        )
    return lo, hi


# ---------------------------------------------------------------------------
# Generic planner
# ---------------------------------------------------------------------------

def vertical_planning(
    reps: Sequence[Number],
    reps_change: Sequence[Number] | None = None,
    step: Number | Sequence[Number] | None = None,
) -> list[VerticalPlanRow]:
    """
    Generic vertical planning.

    Exactly one of ``reps_change``/``step`` may be omitted:

      reps_change omitted → all zeros, one per step (pure relabelling)
      step omitted        → 0, -1, -2, ... one per reps_change entry

    Args:
        reps: Base rep prescription, one entry per set
        reps_change: Change applied to every base rep at each index
        step: Progression step at each index

    Returns:
        len(reps) * len(step) rows, index-major

    Raises:
        MissingArgument: If both reps_change and step are None
        LengthMismatch: If reps_change and step lengths differ
        InvalidInput: If any sequence is empty or non-numeric
    """
    if reps_change is None and step is None:
        raise MissingArgument("Please define either 'reps_change' or 'step' parameters")

    base = _number_list("reps", reps)
    steps = _step_list(step) if step is not None else None
    changes = _number_list("reps_change", reps_change) if reps_change is not None else None

    if changes is None:
        changes = [0] * len(steps)
    if steps is None:
        steps = [-i for i in range(len(changes))]

    if len(changes) != len(steps):
        raise LengthMismatch(
            f"'reps_change' and 'step' lengths differ ({len(changes)} vs {len(steps)})"
        )

    return [
        VerticalPlanRow(reps=r + change, index=index, step=s, position=position)
        for index, (change, s) in enumerate(zip(changes, steps), start=1)
        for position, r in enumerate(base, start=1)
    ]


# ---------------------------------------------------------------------------
# Named variants
# ---------------------------------------------------------------------------

def vertical_constant(reps: Sequence[Number], n_steps: int = 4) -> list[VerticalPlanRow]:
    """Same reps at every step."""
    if isinstance(n_steps, bool) or not isinstance(n_steps, int) or n_steps < 1:
        raise InvalidInput(f"n_steps must be a positive integer, got {n_steps!r}")
    return vertical_planning(reps, reps_change=[0] * n_steps)


def vertical_linear(
    reps: Sequence[Number],
    reps_change: Sequence[Number] = (0, -1, -2, -3),
) -> list[VerticalPlanRow]:
    """Reps drop by a fixed amount each step."""
    return vertical_planning(reps, reps_change=reps_change)


def vertical_linear_reverse(
    reps: Sequence[Number],
    reps_change: Sequence[Number] = (0, 1, 2, 3),
) -> list[VerticalPlanRow]:
    """Reps rise by a fixed amount each step."""
    return vertical_planning(reps, reps_change=reps_change)


def vertical_block(
    reps: Sequence[Number],
    step: Sequence[Number] = (-2, -1, 0, -3),
) -> list[VerticalPlanRow]:
    """Three build-up steps followed by a deload step."""
    return vertical_planning(reps, step=step)


def vertical_block_variant(
    reps: Sequence[Number],
    step: Sequence[Number] = (-2, -1, -3, 0),
) -> list[VerticalPlanRow]:
    return vertical_planning(reps, step=step)


def vertical_undulating(
    reps: Sequence[Number],
    reps_change: Sequence[Number] = (0, -2, -1, -3),
) -> list[VerticalPlanRow]:
    return vertical_planning(reps, reps_change=reps_change)


def vertical_undulating_reverse(
    reps: Sequence[Number],
    reps_change: Sequence[Number] = (0, 2, 1, 3),
) -> list[VerticalPlanRow]:
    return vertical_planning(reps, reps_change=reps_change)


def vertical_volume_intensity(
    reps: Sequence[Number],
    reps_change: Sequence[Number] = (0, 0, -3, -3),
) -> list[VerticalPlanRow]:
    """Two volume steps followed by two intensity steps."""
    return vertical_planning(reps, reps_change=reps_change)


def vertical_rep_accumulation(
    reps: Sequence[Number],
    reps_change: Sequence[Number] = (-3, -2, -1, 0),
    step: Sequence[Number] = (0, 0, 0, 0),
) -> list[VerticalPlanRow]:
    """Reps build toward the target while the step stays fixed."""
    return vertical_planning(reps, reps_change=reps_change, step=step)


# ---------------------------------------------------------------------------
# Set accumulation
# ---------------------------------------------------------------------------

def _accumulate(values: list, lo: int, hi: int, count: int) -> list:
    before = values[: lo - 1]
    block = values[lo - 1 : hi]
    after = values[hi:]
    return before + block * count + after


def _set_accumulation(
    reps: Sequence[Number],
    step: Sequence[Number],
    accumulate_rep: AccumulateRep | None,
    set_increment: int,
    reverse: bool,
) -> list[VerticalPlanRow]:
    base = _number_list("reps", reps)
    steps = _step_list(step)
    if accumulate_rep is None:
        accumulate_rep = len(base)
    lo, hi = _accumulate_bounds(base, accumulate_rep)
    if isinstance(set_increment, bool) or not isinstance(set_increment, int) or set_increment < 0:
        raise InvalidInput(f"set_increment must be a non-negative integer, got {set_increment!r}")

    n = len(steps)
    base_positions = list(range(1, len(base) + 1))
    rows: list[VerticalPlanRow] = []
    for index in range(1, n + 1):
        # Reverse: index 1 carries the largest accumulation
        i = n - index + 1 if reverse else index
        count = set_increment * (i - 1) + 1
        new_reps = _accumulate(base, lo, hi, count)
        positions = _accumulate(base_positions, lo, hi, count)
        rows.extend(
            VerticalPlanRow(reps=row.reps, index=index, step=row.step, position=position)
            for row, position in zip(
                vertical_planning(new_reps, step=[steps[index - 1]]), positions
            )
        )
    return rows


def vertical_set_accumulation(
    reps: Sequence[Number],
    step: Sequence[Number] = (-2, -2, -2, -2),
    accumulate_rep: AccumulateRep | None = None,
    set_increment: int = 1,
) -> list[VerticalPlanRow]:
    """
    Add sets at one rep position across steps, keeping rep values fixed.

    At index i the block ``reps[min..max]`` of ``accumulate_rep`` appears
    ``set_increment * (i - 1) + 1`` times, with the sets before and after
    it left untouched.

    Args:
        reps: Base rep prescription
        step: Progression step at each index
        accumulate_rep: 1-based position, or (min, max) inclusive range;
                        defaults to the last position
        set_increment: Extra repeats added per step

    Raises:
        InvalidInput: Position outside 1..len(reps), negative set_increment
    """
    return _set_accumulation(reps, step, accumulate_rep, set_increment, reverse=False)


def vertical_set_accumulation_reverse(
    reps: Sequence[Number],
    step: Sequence[Number] = (-3, -2, -1, 0),
    accumulate_rep: AccumulateRep | None = None,
    set_increment: int = 1,
) -> list[VerticalPlanRow]:
    """
    Set accumulation worked backward from peak volume.

    Index 1 carries the most accumulated sets and the last index the fewest;
    index k still uses ``step[k]``.
    """
    return _set_accumulation(reps, step, accumulate_rep, set_increment, reverse=True)


VERTICAL_PLANNINGS: Final[dict[str, Callable[..., list[VerticalPlanRow]]]] = {
    "generic": vertical_planning,
    "constant": vertical_constant,
    "linear": vertical_linear,
    "linear_reverse": vertical_linear_reverse,
    "block": vertical_block,
    "block_variant": vertical_block_variant,
    "undulating": vertical_undulating,
    "undulating_reverse": vertical_undulating_reverse,
    "volume_intensity": vertical_volume_intensity,
    "rep_accumulation": vertical_rep_accumulation,
    "set_accumulation": vertical_set_accumulation,
    "set_accumulation_reverse": vertical_set_accumulation_reverse,
}


def get_vertical_planning(name: str) -> Callable[..., list[VerticalPlanRow]]:
    """
    Return the vertical planning function registered under ``name``.

    Raises:
        InvalidInput: If name is not registered
    """
    if name not in VERTICAL_PLANNINGS:
        valid = ", ".join(VERTICAL_PLANNINGS)
        raise InvalidInput(f"Unknown vertical planning '{name}'. Valid plans: {valid}")
    return VERTICAL_PLANNINGS[name]


def run_vertical_planning(
    vertical_planning: str | Callable[..., list[VerticalPlanRow]],
    reps: Sequence[Number],
    options: Mapping | None = None,
) -> list[VerticalPlanRow]:
    """
    Run a named (or given) planning function with an option mapping.

    Options are forwarded verbatim as keyword arguments.

    Raises:
        InvalidInput: Unknown plan name or options the function does not accept
    """
    func = (
        vertical_planning if callable(vertical_planning)
        else get_vertical_planning(vertical_planning)
    )
    options = dict(options or {})
    try:
        inspect.signature(func).bind(reps, **options)
    except TypeError as e:
        raise InvalidInput(f"Invalid vertical planning options {sorted(options)}: {e}") from e
    return func(reps, **options)
