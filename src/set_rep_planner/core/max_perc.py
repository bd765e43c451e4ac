"""
Max-%1RM model.

Returns the estimated fraction of 1RM that can be lifted for a given number
of reps to failure, for grinding or ballistic movements.

Lookup is linear interpolation over the empirical tables in config.py
(integer reps 1..MAX_REP_CAP).  Reps beyond the cap clamp to the last
tabulated value and emit an ExtrapolationWarning; the methodology tolerates
approximate values at high rep counts, so this is never fatal.
"""

from __future__ import annotations

import math
import warnings
from typing import Iterable

from .config import LIFT_TYPES, MAX_PERC_1RM_TABLE, MAX_REP_CAP
from .errors import ExtrapolationWarning, InvalidInput


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def validate_lift_type(type: str) -> str:
    """Return ``type`` if it names a known lift type, else raise InvalidInput."""
    if type not in LIFT_TYPES:
        valid = ", ".join(LIFT_TYPES)
        raise InvalidInput(f"Unknown type '{type}'. Valid types: {valid}")
    return type


def validate_reps(reps: float) -> float:
    """Return ``reps`` as float if it is a positive finite number."""
    if isinstance(reps, bool) or not isinstance(reps, (int, float)):
        raise InvalidInput(f"reps must be a number, got {reps!r}")
    if math.isnan(reps) or reps <= 0:
        raise InvalidInput(f"reps must be positive, got {reps}")
    return float(reps)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def max_perc_1RM(reps: float, type: str = "grinding", warn: bool = True) -> float:
    """
    Estimated %1RM (as a fraction) for ``reps`` performed to failure.

    Args:
        reps: Reps to failure (> 0, may be fractional)
        type: "grinding" or "ballistic"
        warn: Emit ExtrapolationWarning when reps exceed the table

    Returns:
        %1RM fraction in (0, 1]

    Raises:
        InvalidInput: If reps <= 0 or type is unknown
    """
    reps = validate_reps(reps)
    table = MAX_PERC_1RM_TABLE[validate_lift_type(type)]

    if reps <= 1.0:
        return table[0]

    if reps > MAX_REP_CAP:
        if warn:
            warnings.warn(
                f"{reps:g} reps is beyond the tabulated range (1-{MAX_REP_CAP}); "
                f"clamping to the {MAX_REP_CAP}-rep value.",
                ExtrapolationWarning,
                stacklevel=2,
            )
        return table[-1]

    lower = int(math.floor(reps))
    if lower == reps:
        return table[lower - 1]
    alpha = reps - lower
    p0 = table[lower - 1]
    p1 = table[lower]
    return p0 + alpha * (p1 - p0)


def max_perc_1RM_many(reps: Iterable[float], type: str = "grinding") -> list[float]:
    """Vectorised ``max_perc_1RM`` over a sequence of rep counts."""
    validate_lift_type(type)
    return [max_perc_1RM(r, type) for r in reps]
