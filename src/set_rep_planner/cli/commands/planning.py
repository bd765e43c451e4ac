"""Planning commands: vertical and scheme."""

import inspect
from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from ...core.errors import PlanningError
from ...core.presets_loader import load_scheme_file
from ...core.progression import get_progression_table
from ...core.scheme import get_scheme, scheme_from_definition
from ...core.vertical import VERTICAL_PLANNINGS, run_vertical_planning
from .. import views
from ..app import (
    CsvOption,
    JsonOption,
    PresetsOption,
    app,
    emit_rows,
    get_tables,
    parse_list_option,
    run_generator,
)

# Planning options shared by `vertical` and `scheme`
RepsChangeOption = Annotated[
    Optional[str],
    typer.Option("--reps-change", help="Comma-separated rep change per step"),
]
StepOption = Annotated[
    Optional[str],
    typer.Option("--step", "-s", help="Comma-separated progression steps"),
]
NStepsOption = Annotated[
    Optional[int],
    typer.Option("--n-steps", help="Number of steps (constant planning)"),
]
AccumulateRepOption = Annotated[
    Optional[str],
    typer.Option(
        "--accumulate-rep",
        help="1-based set position to accumulate, or 'min,max' range",
    ),
]
SetIncrementOption = Annotated[
    Optional[int],
    typer.Option("--set-increment", help="Sets added per step (set accumulation)"),
]


def _planning_options(
    reps_change: str | None,
    step: str | None,
    n_steps: int | None,
    accumulate_rep: str | None,
    set_increment: int | None,
) -> dict[str, Any]:
    """Collect only the planning options the user actually gave."""
    options: dict[str, Any] = {}
    if reps_change is not None:
        options["reps_change"] = parse_list_option("--reps-change", reps_change)
    if step is not None:
        options["step"] = parse_list_option("--step", step)
    if n_steps is not None:
        options["n_steps"] = n_steps
    if accumulate_rep is not None:
        positions = parse_list_option("--accumulate-rep", accumulate_rep)
        if not all(isinstance(p, int) for p in positions):
            views.print_error(f"--accumulate-rep: positions must be integers, got {accumulate_rep!r}")
            raise typer.Exit(1)
        options["accumulate_rep"] = positions[0] if len(positions) == 1 else positions
    if set_increment is not None:
        options["set_increment"] = set_increment
    return options


@app.command()
def vertical(
    reps: Annotated[
        str,
        typer.Argument(help="Comma-separated base reps, one per set, e.g. 5,5,5"),
    ],
    plan: Annotated[
        str,
        typer.Option("--plan", "-p", help=f"Vertical planning: {', '.join(VERTICAL_PLANNINGS)}"),
    ] = "constant",
    reps_change: RepsChangeOption = None,
    step: StepOption = None,
    n_steps: NStepsOption = None,
    accumulate_rep: AccumulateRepOption = None,
    set_increment: SetIncrementOption = None,
    json_out: JsonOption = False,
    csv_out: CsvOption = False,
) -> None:
    """
    Expand base reps across progression steps (reps, index, step per set).
    """
    base = parse_list_option("reps", reps)
    options = _planning_options(reps_change, step, n_steps, accumulate_rep, set_increment)

    rows = run_generator(lambda: run_vertical_planning(plan, base, options))
    emit_rows(rows, json_out, csv_out, title=f"Vertical planning: {plan}")


@app.command()
def scheme(
    reps: Annotated[
        Optional[str],
        typer.Option("--reps", "-r", help="Comma-separated base reps (named schemes have defaults)"),
    ] = None,
    name: Annotated[
        str,
        typer.Option("--scheme", help="Named scheme: generic, wave, plateau, step, ..."),
    ] = "generic",
    adjustment: Annotated[
        Optional[str],
        typer.Option("--adjustment", "-a", help="Per-set adjustment, scalar or one per set"),
    ] = None,
    plan: Annotated[
        Optional[str],
        typer.Option("--plan", "-p", help="Vertical planning name"),
    ] = None,
    reps_change: RepsChangeOption = None,
    step: StepOption = None,
    n_steps: NStepsOption = None,
    accumulate_rep: AccumulateRepOption = None,
    set_increment: SetIncrementOption = None,
    table_name: Annotated[
        Optional[str],
        typer.Option("--table", help="Progression table name"),
    ] = None,
    volume: Annotated[
        Optional[str],
        typer.Option("--volume", "-v", help="Volume class"),
    ] = None,
    lift_type: Annotated[
        Optional[str],
        typer.Option("--type", "-t", help="Lift type: grinding or ballistic"),
    ] = None,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="YAML scheme file (overrides the other options)"),
    ] = None,
    presets_path: PresetsOption = None,
    json_out: JsonOption = False,
    csv_out: CsvOption = False,
) -> None:
    """
    Compose a full scheme: index, set, reps, adjustment and %1RM per set.
    """
    tables = get_tables(presets_path)

    if file is not None:
        try:
            definition = load_scheme_file(file)
        except (FileNotFoundError, PlanningError) as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        rows = run_generator(lambda: scheme_from_definition(definition, tables))
        emit_rows(rows, json_out, csv_out, title=f"Scheme: {file.name}")
        return

    kwargs: dict[str, Any] = {}
    if reps is not None:
        kwargs["reps"] = parse_list_option("--reps", reps)
    elif name == "generic":
        views.print_error("--reps is required for the generic scheme")
        raise typer.Exit(1)
    if adjustment is not None:
        values = parse_list_option("--adjustment", adjustment)
        kwargs["adjustment"] = values[0] if len(values) == 1 else values
    if plan is not None:
        kwargs["vertical_planning"] = plan

    plan_options = _planning_options(reps_change, step, n_steps, accumulate_rep, set_increment)
    if plan_options:
        kwargs["vertical_planning_options"] = plan_options

    table_options: dict[str, Any] = {}
    if volume is not None:
        table_options["volume"] = volume
    if lift_type is not None:
        table_options["type"] = lift_type
    if table_options:
        kwargs["progression_table_options"] = table_options

    def build():
        func = get_scheme(name)
        # Resolve the scheme's own default table too, so preset overrides apply
        default_table = inspect.signature(func).parameters["progression_table"].default
        kwargs["progression_table"] = get_progression_table(table_name or default_table, tables)
        return func(**kwargs)

    rows = run_generator(build)
    emit_rows(rows, json_out, csv_out, title=f"Scheme: {name}")
