"""Table commands: max-perc, progression, table, presets."""

import json
from typing import Annotated, Optional

import typer

from ...core.config import DEFAULT_STEP_RANGE, LIFT_TYPES, VOLUMES
from ...core.max_perc import max_perc_1RM_many
from ...core.models import ProgressionTableRow
from ...core.progression import (
    generate_progression_table,
    get_progression_table,
    progression_table,
)
from ...io.serializers import table_summary
from .. import views
from ..app import (
    CsvOption,
    JsonOption,
    PresetsOption,
    TypeOption,
    VolumeOption,
    app,
    emit_rows,
    get_tables,
    parse_list_option,
    run_generator,
)


@app.command("max-perc")
def max_perc(
    reps: Annotated[
        str,
        typer.Argument(help="Comma-separated rep counts, e.g. 1,3,5"),
    ],
    lift_type: TypeOption = "grinding",
    json_out: JsonOption = False,
) -> None:
    """
    Show the max-%1RM model for the given rep counts.
    """
    values = parse_list_option("reps", reps)
    perc = run_generator(lambda: max_perc_1RM_many(values, lift_type))

    if json_out:
        print(json.dumps([
            {"reps": r, "type": lift_type, "perc_1RM": p} for r, p in zip(values, perc)
        ], indent=2))
        return

    for r, p in zip(values, perc):
        views.console.print(f"{r:g} reps ({lift_type}): [green]{p * 100:.1f}%[/green]")


@app.command()
def progression(
    reps: Annotated[
        str,
        typer.Option("--reps", "-r", help="Comma-separated rep counts"),
    ] = "5",
    step: Annotated[
        str,
        typer.Option("--step", "-s", help="Comma-separated steps (0 = peak step)"),
    ] = "-3,-2,-1,0",
    table_name: Annotated[
        str,
        typer.Option("--table", help="Progression table name"),
    ] = "RIR_increment",
    volume: VolumeOption = "normal",
    lift_type: TypeOption = "grinding",
    adjustment: Annotated[
        float,
        typer.Option("--adjustment", "-a", help="Extra adjustment added to every row"),
    ] = 0.0,
    presets_path: PresetsOption = None,
    json_out: JsonOption = False,
    csv_out: CsvOption = False,
) -> None:
    """
    Look up adjustment and %1RM for every (reps, step) combination.
    """
    tables = get_tables(presets_path)
    reps_values = parse_list_option("--reps", reps)
    step_values = parse_list_option("--step", step)

    def build() -> list[ProgressionTableRow]:
        tbl = get_progression_table(table_name, tables)
        rows: list[ProgressionTableRow] = []
        for r in reps_values:
            rows.extend(
                progression_table(
                    r, step_values, table=tbl, volume=volume,
                    type=lift_type, adjustment=adjustment,
                )
            )
        return rows

    rows = run_generator(build)
    emit_rows(rows, json_out, csv_out, title=f"{table_name} ({volume}, {lift_type})")


@app.command()
def table(
    step: Annotated[
        str,
        typer.Option("--step", "-s", help="Comma-separated step range"),
    ] = ",".join(str(s) for s in DEFAULT_STEP_RANGE),
    table_names: Annotated[
        Optional[list[str]],
        typer.Option("--table", help="Restrict to table (repeatable)"),
    ] = None,
    volumes: Annotated[
        Optional[list[str]],
        typer.Option("--volume", "-v", help="Restrict to volume (repeatable)"),
    ] = None,
    types: Annotated[
        Optional[list[str]],
        typer.Option("--type", "-t", help="Restrict to lift type (repeatable)"),
    ] = None,
    presets_path: PresetsOption = None,
    json_out: JsonOption = False,
    csv_out: CsvOption = False,
) -> None:
    """
    Enumerate the dense reps x step x volume x type progression table.
    """
    tables = get_tables(presets_path)
    step_values = parse_list_option("--step", step)
    selected = [tables[n] if n in tables else n for n in (table_names or list(tables))]

    rows = run_generator(lambda: generate_progression_table(
        step_range=step_values,
        tables=selected,
        volumes=volumes or list(VOLUMES),
        types=types or list(LIFT_TYPES),
    ))
    emit_rows(rows, json_out, csv_out, title="Progression tables")


@app.command()
def presets(
    presets_path: PresetsOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List progression tables and their volume presets.
    """
    tables = get_tables(presets_path)
    if json_out:
        print(json.dumps([table_summary(t) for t in tables.values()], indent=2))
        return
    views.console.print(views.format_tables_overview(tables))
