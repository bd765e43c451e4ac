"""
Tests for YAML progression presets and scheme files.
"""

import pytest

from set_rep_planner.core.config import RIR_INCREMENT_PRESETS
from set_rep_planner.core.errors import InvalidInput


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


# ===========================================================================
# Progression presets
# ===========================================================================

class TestLoadProgressionTables:

    def test_no_path_returns_bundled(self):
        from set_rep_planner.core.presets_loader import load_progression_tables
        from set_rep_planner.core.progression import TABLES
        assert load_progression_tables(None) == dict(TABLES)

    def test_override_merges_single_field(self, tmp_path):
        from set_rep_planner.core.presets_loader import load_progression_tables
        path = _write(
            tmp_path, "p.yaml",
            "RIR_increment:\n"
            "  volumes:\n"
            "    normal:\n"
            "      rep_start: 1.5\n",
        )
        tables = load_progression_tables(path)
        normal = tables["RIR_increment"].presets["normal"]
        bundled = RIR_INCREMENT_PRESETS["normal"]
        assert normal.rep_start == 1.5
        assert normal.rep_step == pytest.approx(bundled.rep_step)
        assert normal.inc_start == pytest.approx(bundled.inc_start)
        assert tables["RIR_increment"].presets["intensive"] == RIR_INCREMENT_PRESETS["intensive"]
        assert tables["RIR_increment"].family == "RIR"

    def test_new_table(self, tmp_path):
        from set_rep_planner.core.presets_loader import load_progression_tables
        path = _write(
            tmp_path, "p.yaml",
            "my_drop:\n"
            "  family: perc_drop\n"
            "  fixed_steps: [-2, -1, 0]\n"
            "  volumes:\n"
            "    normal: {rep_start: -0.02, rep_step: 0, inc_start: -0.03, inc_step: 0}\n",
        )
        tables = load_progression_tables(path)
        table = tables["my_drop"]
        assert table.family == "perc_drop"
        assert table.fixed_steps == (-2, -1, 0)
        assert table.presets["normal"].inc_start == pytest.approx(-0.03)
        assert "perc_drop" in tables

    def test_loaded_table_drives_lookup(self, tmp_path):
        from set_rep_planner.core.presets_loader import load_progression_tables
        from set_rep_planner.core.progression import progression_table
        path = _write(
            tmp_path, "p.yaml",
            "flat:\n"
            "  family: perc_drop\n"
            "  volumes:\n"
            "    normal: {rep_start: 0, rep_step: 0, inc_start: -0.1, inc_step: 0}\n",
        )
        table = load_progression_tables(path)["flat"]
        (row,) = progression_table(1, -2, table=table)
        assert row.perc_1RM == pytest.approx(0.8)

    def test_empty_file(self, tmp_path):
        from set_rep_planner.core.presets_loader import load_progression_tables
        from set_rep_planner.core.progression import TABLES
        path = _write(tmp_path, "p.yaml", "")
        assert load_progression_tables(path) == dict(TABLES)

    def test_missing_file(self, tmp_path):
        from set_rep_planner.core.presets_loader import load_progression_tables
        with pytest.raises(FileNotFoundError):
            load_progression_tables(tmp_path / "nope.yaml")

    @pytest.mark.parametrize(
        "text",
        [
            "- just\n- a list\n",
            "x: [unclosed\n",
            "new_table:\n  volumes:\n    normal: {rep_start: 0, rep_step: 0, inc_start: 0, inc_step: 0}\n",
            "new_table:\n  family: RIR\n",
            "new_table:\n  family: RIR\n  volumes:\n    normal: {rep_start: 0}\n",
            "new_table:\n  family: RIR\n  volumes:\n"
            "    normal: {rep_start: 0, rep_step: 0, inc_start: 0, inc_step: 0, slope: 1}\n",
            "RIR_increment:\n  volumes:\n    normal: {rep_start: fast}\n",
            "RIR_increment:\n  fixed_steps: [-1.5, 0]\n",
            "RIR_increment: [1, 2]\n",
            "perc_drop: 0.5\n",
        ],
    )
    def test_malformed(self, tmp_path, text):
        from set_rep_planner.core.presets_loader import load_progression_tables
        path = _write(tmp_path, "p.yaml", text)
        with pytest.raises(InvalidInput):
            load_progression_tables(path)

    def test_round_trip_dict(self):
        from set_rep_planner.core.presets_loader import table_from_dict, table_to_dict
        from set_rep_planner.core.progression import TABLES
        for name, table in TABLES.items():
            rebuilt = table_from_dict(name, table_to_dict(table))
            assert rebuilt.family == table.family
            assert dict(rebuilt.presets) == dict(table.presets)
            assert rebuilt.fixed_steps == table.fixed_steps


# ===========================================================================
# Scheme files
# ===========================================================================

class TestLoadSchemeFile:

    def test_full_definition(self, tmp_path):
        from set_rep_planner.core.presets_loader import load_scheme_file
        path = _write(
            tmp_path, "s.yaml",
            "reps: [5, 5, 5]\n"
            "adjustment: [0, -0.025, -0.05]\n"
            "vertical_planning: linear\n"
            "vertical_planning_options: {reps_change: [0, -1, -2]}\n"
            "progression_table: perc_drop\n"
            "progression_table_options: {volume: extensive}\n",
        )
        definition = load_scheme_file(path)
        assert definition.reps == [5, 5, 5]
        assert definition.vertical_planning == "linear"
        assert definition.vertical_planning_options == {"reps_change": [0, -1, -2]}
        assert definition.progression_table_options == {"volume": "extensive"}

    def test_defaults(self, tmp_path):
        from set_rep_planner.core.presets_loader import load_scheme_file
        definition = load_scheme_file(_write(tmp_path, "s.yaml", "reps: [3, 3]\n"))
        assert definition.adjustment == 0.0
        assert definition.vertical_planning == "constant"
        assert definition.progression_table == "RIR_increment"

    def test_params_become_progression_params(self, tmp_path):
        from set_rep_planner.core.models import ProgressionParams
        from set_rep_planner.core.presets_loader import load_scheme_file
        path = _write(
            tmp_path, "s.yaml",
            "reps: [5]\n"
            "progression_table_options:\n"
            "  params: {rep_start: 0, rep_step: 0, inc_start: 1, inc_step: 0}\n",
        )
        params = load_scheme_file(path).progression_table_options["params"]
        assert params == ProgressionParams(0.0, 0.0, 1.0, 0.0)

    def test_file_composes(self, tmp_path):
        from set_rep_planner.core.presets_loader import load_scheme_file
        from set_rep_planner.core.scheme import scheme, scheme_from_definition
        path = _write(
            tmp_path, "s.yaml",
            "reps: [6, 6]\nvertical_planning: block\nprogression_table: perc_drop\n",
        )
        rows = scheme_from_definition(load_scheme_file(path))
        assert rows == scheme([6, 6], vertical_planning="block", progression_table="perc_drop")

    @pytest.mark.parametrize(
        "text",
        [
            "adjustment: 1\n",
            "reps: 5\n",
            "reps: [5]\ncolour: red\n",
            "reps: [5]\nadjustment: high\n",
            "reps: [5]\nvertical_planning_options: [1, 2]\n",
        ],
    )
    def test_malformed(self, tmp_path, text):
        from set_rep_planner.core.presets_loader import load_scheme_file
        with pytest.raises(InvalidInput):
            load_scheme_file(_write(tmp_path, "s.yaml", text))
