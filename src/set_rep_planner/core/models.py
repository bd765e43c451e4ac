"""
Data models for set-rep-planner.

All rows produced by the generators are frozen dataclasses so that two
calls with identical arguments compare equal field by field.  Field names
(including the mixed-case ``perc_1RM``) are the public column names that
downstream tabular consumers rely on, so their order must not change.
"""

from dataclasses import dataclass, field
from typing import Literal, Mapping

LiftType = Literal["grinding", "ballistic"]
Volume = Literal["intensive", "normal", "extensive"]
TableFamily = Literal["RIR", "perc_drop"]


@dataclass(frozen=True)
class ProgressionParams:
    """
    Bilinear progression model.

    For a set of ``reps`` performed at progression ``step``:

        inc(reps)  = inc_start + inc_step * (reps - 1)
        base(reps) = rep_start + rep_step * (reps - 1)
        adjustment = inc(reps) * (-step) + base(reps) + adjustment

    The result is an RIR increment or a %1RM drop depending on the table
    family the params belong to.
    """

    rep_start: float
    rep_step: float
    inc_start: float
    inc_step: float
    adjustment: float = 0.0


@dataclass(frozen=True)
class ProgressionTable:
    """
    A named progression table: one ``ProgressionParams`` per volume class.

    ``family`` decides how the adjustment is combined with the max-%1RM
    model.  ``fixed_steps`` (when set) snaps incoming steps to the nearest
    allowed value before the model is evaluated.
    """

    name: str
    family: TableFamily
    presets: Mapping[str, ProgressionParams]
    fixed_steps: tuple[int, ...] | None = None
    description: str = ""


@dataclass(frozen=True)
class ProgressionTableRow:
    """One (reps, step) lookup from a progression table."""

    reps: float
    step: float
    adjustment: float
    perc_1RM: float


@dataclass(frozen=True)
class DenseTableRow:
    """One cell of the dense (reps x step x volume x type) enumeration."""

    table: str
    volume: str
    type: str
    reps: float
    step: float
    adjustment: float
    perc_1RM: float


@dataclass(frozen=True)
class VerticalPlanRow:
    """
    One set of a vertical plan.

    ``index`` is the 1-based progression-step ordinal and the join key
    against week ordering; many rows share an index.  ``position`` is the
    1-based base set the row was expanded from (repeated sets share their
    source position).  It is bookkeeping for the scheme composer, not an
    output column.
    """

    reps: float
    index: int
    step: float
    position: int | None = field(
        default=None, compare=False, repr=False, metadata={"column": False}
    )


@dataclass(frozen=True)
class SchemeRow:
    """
    One set of a composed scheme.

    ``set`` is the 1-based position of the row within its ``index`` group.
    """

    index: int
    set: int
    reps: float
    adjustment: float
    perc_1RM: float


@dataclass
class SchemeDefinition:
    """
    Declarative description of a scheme, as read from a scheme file.

    Option mappings are forwarded verbatim to the vertical planning function
    and to the progression table respectively.
    """

    reps: list[float]
    adjustment: float | list[float] = 0.0
    vertical_planning: str = "constant"
    vertical_planning_options: dict = field(default_factory=dict)
    progression_table: str = "RIR_increment"
    progression_table_options: dict = field(default_factory=dict)
