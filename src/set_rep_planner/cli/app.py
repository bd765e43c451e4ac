"""Shared Typer app object, shared option types, and output utilities."""

import warnings
from pathlib import Path
from typing import Annotated, Any, Callable, Optional, Sequence

import typer

from ..core.errors import PlanningError
from ..core.models import ProgressionTable
from ..core.presets_loader import get_user_presets_path, load_progression_tables
from ..io.serializers import parse_number_list, rows_to_csv, rows_to_json
from . import views

# Shared options used across commands
PresetsOption = Annotated[
    Optional[Path],
    typer.Option(
        "--presets",
        help="YAML file with extra/overridden progression presets "
        "(default: ~/.set-rep-planner/progressions.yaml if present)",
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]
CsvOption = Annotated[
    bool,
    typer.Option("--csv", help="Output as CSV"),
]
TypeOption = Annotated[
    str,
    typer.Option("--type", "-t", help="Lift type: grinding (default) or ballistic"),
]
VolumeOption = Annotated[
    str,
    typer.Option("--volume", "-v", help="Volume class: intensive, normal (default), extensive"),
]

app = typer.Typer(
    name="set-rep-planner",
    help="Generate set and rep schemes from parametrized progression models.",
    no_args_is_help=True,
)


def parse_list_option(option: str, text: str) -> list[float]:
    """Parse a comma-separated number option, exiting with an error message if invalid."""
    try:
        return parse_number_list(text)
    except PlanningError as e:
        views.print_error(f"{option}: {e}")
        raise typer.Exit(1)


def get_tables(presets_path: Path | None) -> dict[str, ProgressionTable]:
    """Load progression tables, merging user presets from path or the default location."""
    if presets_path is None:
        presets_path = get_user_presets_path()
    try:
        return load_progression_tables(presets_path)
    except (FileNotFoundError, PlanningError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def run_generator(func: Callable[[], Sequence[Any]]) -> Sequence[Any]:
    """
    Run a generator callable, reporting planning errors and soft warnings.

    PlanningError exits with status 1; ExtrapolationWarning and friends are
    shown as yellow warnings once each.
    """
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            rows = func()
        except PlanningError as e:
            views.print_error(str(e))
            raise typer.Exit(1)

    seen: set[str] = set()
    for w in caught:
        message = str(w.message)
        if message not in seen:
            seen.add(message)
            views.print_warning(message)
    return rows


def emit_rows(
    rows: Sequence[Any],
    json_out: bool = False,
    csv_out: bool = False,
    title: str | None = None,
) -> None:
    """Write rows as JSON, CSV or a Rich table."""
    if json_out and csv_out:
        views.print_error("Choose either --json or --csv, not both")
        raise typer.Exit(1)
    if json_out:
        print(rows_to_json(rows))
    elif csv_out:
        print(rows_to_csv(rows), end="")
    else:
        views.print_rows(rows, title=title)
