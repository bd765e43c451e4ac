"""
Configuration constants for the set and rep planning model.

Empirical max-%1RM tables, enumerations and the named progression presets
are centralized here.  Everything is a read-only module constant; nothing
in the core mutates it.
"""

from typing import Final

from .models import ProgressionParams

# =============================================================================
# MAX-%1RM MODEL
# =============================================================================

MAX_REP_CAP: Final[int] = 12  # Highest tabulated rep count

# %1RM that can be lifted for N reps to failure, N = 1..MAX_REP_CAP
MAX_PERC_1RM_TABLE: Final[dict[str, tuple[float, ...]]] = {
    "grinding": (
        1.00, 0.94, 0.91, 0.88, 0.86, 0.83,
        0.81, 0.79, 0.77, 0.75, 0.73, 0.71,
    ),
    # Ballistic lifts lose %1RM capacity more slowly as reps increase
    "ballistic": (
        1.00, 0.97, 0.94, 0.92, 0.90, 0.88,
        0.86, 0.84, 0.82, 0.80, 0.78, 0.76,
    ),
}

LIFT_TYPES: Final[tuple[str, ...]] = ("grinding", "ballistic")
VOLUMES: Final[tuple[str, ...]] = ("intensive", "normal", "extensive")

# =============================================================================
# PROGRESSION PRESETS
# =============================================================================
# Slopes are expressed as (value at 12 reps - value at 1 rep) / 11 so the
# presets read as "from X at 1 rep to Y at 12 reps".

# RIR increment: +1 RIR per step at 1 rep, +2 RIR per step at 12 reps
RIR_INCREMENT_PRESETS: Final[dict[str, ProgressionParams]] = {
    "intensive": ProgressionParams(
        rep_start=0.0,
        rep_step=0.0,
        inc_start=1.0,
        inc_step=(2 - 1) / 11,
    ),
    "normal": ProgressionParams(
        rep_start=1.0,
        rep_step=(3 - 1) / 11,
        inc_start=1.0,
        inc_step=(2 - 1) / 11,
    ),
    "extensive": ProgressionParams(
        rep_start=2.0,
        rep_step=(6 - 2) / 11,
        inc_start=1.0,
        inc_step=(2 - 1) / 11,
    ),
}

# Percent drop: -2.5% per step at 1 rep, -5% per step at 12 reps
PERC_DROP_PRESETS: Final[dict[str, ProgressionParams]] = {
    "intensive": ProgressionParams(
        rep_start=0.0,
        rep_step=0.0,
        inc_start=-0.025,
        inc_step=(-0.05 - -0.025) / 11,
    ),
    "normal": ProgressionParams(
        rep_start=-0.025,
        rep_step=(-0.05 - -0.025) / 11,
        inc_start=-0.025,
        inc_step=(-0.05 - -0.025) / 11,
    ),
    "extensive": ProgressionParams(
        rep_start=-0.05,
        rep_step=(-0.10 - -0.05) / 11,
        inc_start=-0.025,
        inc_step=(-0.05 - -0.025) / 11,
    ),
}

# Fixed variants: same increment regardless of reps
RIR_INCREMENT_FIXED_PRESETS: Final[dict[str, ProgressionParams]] = {
    "intensive": ProgressionParams(rep_start=0.0, rep_step=0.0, inc_start=1.0, inc_step=0.0),
    "normal": ProgressionParams(rep_start=1.0, rep_step=0.0, inc_start=1.0, inc_step=0.0),
    "extensive": ProgressionParams(rep_start=2.0, rep_step=0.0, inc_start=1.0, inc_step=0.0),
}

PERC_DROP_FIXED_PRESETS: Final[dict[str, ProgressionParams]] = {
    "intensive": ProgressionParams(rep_start=0.0, rep_step=0.0, inc_start=-0.025, inc_step=0.0),
    "normal": ProgressionParams(rep_start=-0.025, rep_step=0.0, inc_start=-0.025, inc_step=0.0),
    "extensive": ProgressionParams(rep_start=-0.05, rep_step=0.0, inc_start=-0.025, inc_step=0.0),
}

FIXED_STEPS: Final[tuple[int, ...]] = (-3, -2, -1, 0)  # Granularity of fixed tables

# =============================================================================
# DENSE ENUMERATION
# =============================================================================

DEFAULT_STEP_RANGE: Final[tuple[int, ...]] = (-3, -2, -1, 0)

# =============================================================================
# USER CONFIG
# =============================================================================

USER_CONFIG_DIRNAME: Final[str] = ".set-rep-planner"
USER_PRESETS_FILENAME: Final[str] = "progressions.yaml"
