"""
Formula-focused unit tests for the max-%1RM model and progression tables.

Values are hand-computed from the tables in core/config.py and the
bilinear progression model so the tests double as worked examples.
"""

import math
import warnings

import pytest

from set_rep_planner.core.config import (
    MAX_PERC_1RM_TABLE,
    MAX_REP_CAP,
    RIR_INCREMENT_PRESETS,
)
from set_rep_planner.core.errors import (
    ExtrapolationWarning,
    InvalidInput,
    LengthMismatch,
)
from set_rep_planner.core.models import ProgressionParams


# ===========================================================================
# max_perc.py: max-%1RM model
# ===========================================================================

class TestMaxPerc1RM:

    def test_one_rep_is_full_1rm(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        assert max_perc_1RM(1, "grinding") == 1.0
        assert max_perc_1RM(1, "ballistic") == 1.0

    def test_integer_reps_read_table(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        assert max_perc_1RM(5, "grinding") == pytest.approx(0.86)
        assert max_perc_1RM(12, "grinding") == pytest.approx(0.71)
        assert max_perc_1RM(5, "ballistic") == pytest.approx(0.90)

    def test_fractional_reps_interpolate(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        # halfway between 5 (0.86) and 6 (0.83)
        assert max_perc_1RM(5.5) == pytest.approx(0.845)
        # 6.25 → 0.83 + 0.25 * (0.81 - 0.83)
        assert max_perc_1RM(6.25) == pytest.approx(0.825)

    def test_below_one_rep_caps_at_full_1rm(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        assert max_perc_1RM(0.5) == 1.0

    def test_monotonically_decreasing(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        for lift_type in ("grinding", "ballistic"):
            values = [max_perc_1RM(r / 2, lift_type) for r in range(2, 2 * MAX_REP_CAP + 1)]
            assert all(a >= b for a, b in zip(values, values[1:]))

    def test_ballistic_dominates_grinding(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        for reps in [2, 2.5, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12]:
            assert max_perc_1RM(reps, "ballistic") > max_perc_1RM(reps, "grinding")

    def test_beyond_cap_clamps_with_warning(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        with pytest.warns(ExtrapolationWarning):
            value = max_perc_1RM(15, "grinding")
        assert value == MAX_PERC_1RM_TABLE["grinding"][-1]

    def test_beyond_cap_silent_when_asked(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert max_perc_1RM(15, warn=False) == MAX_PERC_1RM_TABLE["grinding"][-1]

    def test_at_cap_does_not_warn(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert max_perc_1RM(MAX_REP_CAP) == pytest.approx(0.71)

    @pytest.mark.parametrize("reps", [0, -1, float("nan"), "5", None, True])
    def test_invalid_reps_raise(self, reps):
        from set_rep_planner.core.max_perc import max_perc_1RM
        with pytest.raises(InvalidInput):
            max_perc_1RM(reps)

    def test_unknown_type_raises(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        with pytest.raises(InvalidInput, match="Unknown type"):
            max_perc_1RM(5, "explosive")

    def test_invalid_input_is_value_error(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        with pytest.raises(ValueError):
            max_perc_1RM(-3)

    def test_many_matches_scalar(self):
        from set_rep_planner.core.max_perc import max_perc_1RM, max_perc_1RM_many
        reps = [1, 3, 5.5, 8]
        assert max_perc_1RM_many(reps, "ballistic") == [
            max_perc_1RM(r, "ballistic") for r in reps
        ]


# ===========================================================================
# progression.py: bilinear model
# ===========================================================================

class TestProgressionAdjustment:
    """adjustment = (inc_start + inc_step*(reps-1)) * (-step) + rep_start + rep_step*(reps-1) + adjustment"""

    def test_hand_computed_value(self):
        from set_rep_planner.core.progression import progression_adjustment
        params = ProgressionParams(
            rep_start=1.0, rep_step=0.5, inc_start=2.0, inc_step=0.25, adjustment=0.1
        )
        # inc(3) = 2.5, base(3) = 2.0 → 2.5 * 2 + 2.0 + 0.1
        assert progression_adjustment(3, -2, params) == pytest.approx(7.1)

    def test_step_zero_is_baseline_only(self):
        from set_rep_planner.core.progression import progression_adjustment
        params = RIR_INCREMENT_PRESETS["normal"]
        expected = params.rep_start + params.rep_step * 4
        assert progression_adjustment(5, 0, params) == pytest.approx(expected)

    def test_each_step_adds_one_increment(self):
        from set_rep_planner.core.progression import progression_adjustment
        params = RIR_INCREMENT_PRESETS["normal"]
        inc_5 = params.inc_start + params.inc_step * 4
        a0 = progression_adjustment(5, 0, params)
        a1 = progression_adjustment(5, -1, params)
        a3 = progression_adjustment(5, -3, params)
        assert a1 - a0 == pytest.approx(inc_5)
        assert a3 - a0 == pytest.approx(3 * inc_5)


# ===========================================================================
# progression.py: progression_table
# ===========================================================================

class TestProgressionTable:

    @pytest.mark.parametrize("table", ["RIR_increment", "perc_drop"])
    @pytest.mark.parametrize("lift_type", ["grinding", "ballistic"])
    def test_peak_step_reproduces_max_perc(self, table, lift_type):
        from set_rep_planner.core.max_perc import max_perc_1RM
        from set_rep_planner.core.progression import progression_table
        for reps in range(1, MAX_REP_CAP + 1):
            (row,) = progression_table(reps, 0, table=table, volume="intensive", type=lift_type)
            assert row.adjustment == 0.0
            assert row.perc_1RM == max_perc_1RM(reps, lift_type)

    def test_zero_baseline_params_reproduce_max_perc(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        from set_rep_planner.core.progression import progression_table
        params = ProgressionParams(rep_start=0.0, rep_step=0.0, inc_start=1.5, inc_step=0.3)
        rows = progression_table([2, 4, 6], 0, params=params)
        assert [r.perc_1RM for r in rows] == [max_perc_1RM(r) for r in (2, 4, 6)]

    def test_rir_normal_hand_computed(self):
        from set_rep_planner.core.progression import progression_table
        (row,) = progression_table(5, 0, table="RIR_increment", volume="normal")
        # base(5) = 1 + 2/11 * 4 = 1.7273 → effective reps 6.7273
        assert row.adjustment == pytest.approx(1 + 8 / 11)
        assert row.perc_1RM == pytest.approx(0.83 + (8 / 11) * (0.81 - 0.83))

    def test_perc_drop_normal_hand_computed(self):
        from set_rep_planner.core.progression import progression_table
        (row,) = progression_table(1, -1, table="perc_drop", volume="normal")
        # inc(1) = -0.025, base(1) = -0.025
        assert row.adjustment == pytest.approx(-0.05)
        assert row.perc_1RM == pytest.approx(0.95)

    @pytest.mark.parametrize("table", ["RIR_increment", "perc_drop"])
    def test_steps_away_from_peak_lower_perc(self, table):
        from set_rep_planner.core.progression import progression_table
        rows = progression_table(5, [-3, -2, -1, 0], table=table)
        percs = [r.perc_1RM for r in rows]
        assert percs == sorted(percs)
        assert percs[0] < percs[-1]

    def test_extensive_lighter_than_intensive(self):
        from set_rep_planner.core.progression import progression_table
        for table in ("RIR_increment", "perc_drop"):
            intensive = progression_table(5, -1, table=table, volume="intensive")[0]
            normal = progression_table(5, -1, table=table, volume="normal")[0]
            extensive = progression_table(5, -1, table=table, volume="extensive")[0]
            assert intensive.perc_1RM > normal.perc_1RM > extensive.perc_1RM

    def test_scalar_reps_broadcast_over_steps(self):
        from set_rep_planner.core.progression import progression_table
        rows = progression_table(5, [-3, -2, -1, 0])
        assert [r.reps for r in rows] == [5, 5, 5, 5]
        assert [r.step for r in rows] == [-3, -2, -1, 0]

    def test_vectors_pair_up(self):
        from set_rep_planner.core.progression import progression_table
        rows = progression_table([3, 5], [-1, 0])
        assert [(r.reps, r.step) for r in rows] == [(3, -1), (5, 0)]

    def test_length_one_vector_behaves_as_scalar(self):
        from set_rep_planner.core.progression import progression_table
        rows = progression_table([5], [-1, 0])
        assert len(rows) == 2

    def test_vector_length_mismatch(self):
        from set_rep_planner.core.progression import progression_table
        with pytest.raises(LengthMismatch):
            progression_table([3, 5, 7], [-1, 0])

    def test_extra_adjustment_added(self):
        from set_rep_planner.core.max_perc import max_perc_1RM
        from set_rep_planner.core.progression import progression_table
        (row,) = progression_table(5, 0, volume="intensive", adjustment=2)
        assert row.adjustment == pytest.approx(2.0)
        assert row.perc_1RM == pytest.approx(max_perc_1RM(7))

    def test_rir_wrappers_match_generic(self):
        from set_rep_planner.core.progression import RIR_increment, perc_drop, progression_table
        assert RIR_increment(6, -2, volume="extensive") == progression_table(
            6, -2, table="RIR_increment", volume="extensive"
        )
        assert perc_drop(6, -2, fixed=True) == progression_table(6, -2, table="perc_drop_fixed")

    def test_effective_reps_must_stay_positive(self):
        from set_rep_planner.core.progression import progression_table
        with pytest.raises(InvalidInput):
            progression_table(1, 0, volume="intensive", adjustment=-1)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"table": "RIR_decrement"},
            {"volume": "moderate"},
            {"type": "olympic"},
        ],
    )
    def test_unknown_names_raise(self, kwargs):
        from set_rep_planner.core.progression import progression_table
        with pytest.raises(InvalidInput):
            progression_table(5, 0, **kwargs)

    def test_non_positive_reps_raise(self):
        from set_rep_planner.core.progression import progression_table
        with pytest.raises(InvalidInput):
            progression_table([5, 0], [-1, 0])

    def test_idempotent(self):
        from set_rep_planner.core.progression import progression_table
        a = progression_table([3, 6, 9], [-2, -1, 0], table="perc_drop", type="ballistic")
        b = progression_table([3, 6, 9], [-2, -1, 0], table="perc_drop", type="ballistic")
        assert a == b


# ===========================================================================
# progression.py: fixed-granularity tables
# ===========================================================================

class TestFixedTables:

    def test_increment_independent_of_reps(self):
        from set_rep_planner.core.progression import progression_table
        rows = progression_table([1, 6, 12], -2, table="perc_drop_fixed", volume="intensive")
        assert {round(r.adjustment, 10) for r in rows} == {-0.05}

    def test_step_snaps_to_nearest_allowed(self):
        from set_rep_planner.core.progression import progression_table
        (row,) = progression_table(5, -1.4, table="RIR_increment_fixed", volume="normal")
        # snapped to -1: 1 * 1 + 1
        assert row.adjustment == pytest.approx(2.0)
        assert row.step == -1.4

    def test_tie_snaps_toward_peak(self):
        from set_rep_planner.core.progression import snap_step
        assert snap_step(-0.5, (-3, -2, -1, 0)) == 0
        assert snap_step(-2.5, (-3, -2, -1, 0)) == -2

    def test_out_of_range_steps_clamp(self):
        from set_rep_planner.core.progression import snap_step
        assert snap_step(-7, (-3, -2, -1, 0)) == -3
        assert snap_step(2, (-3, -2, -1, 0)) == 0


# ===========================================================================
# progression.py: dense enumeration
# ===========================================================================

class TestGenerateProgressionTable:

    def test_full_cross_product_size_and_order(self):
        from set_rep_planner.core.progression import TABLES, generate_progression_table
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ExtrapolationWarning)
            rows = generate_progression_table()
        assert len(rows) == len(TABLES) * 3 * 2 * MAX_REP_CAP * 4
        first = rows[0]
        assert (first.table, first.volume, first.type, first.reps, first.step) == (
            "RIR_increment", "intensive", "grinding", 1, -3,
        )
        assert [r.step for r in rows[:4]] == [-3, -2, -1, 0]
        assert rows[4].reps == 2

    def test_clamping_reported_once(self):
        from set_rep_planner.core.progression import generate_progression_table
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            generate_progression_table(tables=["RIR_increment"])
        clamped = [w for w in caught if issubclass(w.category, ExtrapolationWarning)]
        assert len(clamped) == 1
        assert "clamped" in str(clamped[0].message)

    def test_clamped_count_matches_effective_reps(self):
        from set_rep_planner.core.progression import generate_progression_table
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            rows = generate_progression_table(tables=["RIR_increment"], volumes=["extensive"])
        expected = sum(1 for r in rows if r.reps + r.adjustment > MAX_REP_CAP)
        assert expected > 0
        (summary,) = [w for w in caught if issubclass(w.category, ExtrapolationWarning)]
        assert str(summary.message).startswith(f"{expected} cells")

    def test_concurrent_enumerations_agree(self):
        from concurrent.futures import ThreadPoolExecutor

        from set_rep_planner.core.progression import generate_progression_table
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ExtrapolationWarning)
            serial = generate_progression_table()
            with ThreadPoolExecutor(max_workers=4) as pool:
                results = list(pool.map(lambda _: generate_progression_table(), range(4)))
        assert all(r == serial for r in results)

    def test_restricted_enumeration(self):
        from set_rep_planner.core.progression import generate_progression_table
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            rows = generate_progression_table(
                step_range=[0], reps_range=[1, 2], tables=["perc_drop"]
            )
        assert len(rows) == 3 * 2 * 2
        assert {r.table for r in rows} == {"perc_drop"}

    def test_dense_rows_match_point_lookups(self):
        from set_rep_planner.core.progression import generate_progression_table, progression_table
        rows = generate_progression_table(
            step_range=[-1, 0], reps_range=[3], tables=["perc_drop"],
            volumes=["normal"], types=["ballistic"],
        )
        expected = progression_table(3, [-1, 0], table="perc_drop", type="ballistic")
        assert [(r.adjustment, r.perc_1RM) for r in rows] == [
            (e.adjustment, e.perc_1RM) for e in expected
        ]
        assert not any(math.isnan(r.perc_1RM) for r in rows)
