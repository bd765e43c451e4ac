"""
CLI view formatters using Rich for pretty console output.

Turns generated row lists into Rich tables.  %1RM columns are shown as
percentages; everything else is shown with trimmed decimals.
"""

from typing import Any, Sequence

from rich.console import Console
from rich.table import Table

from ..core.models import ProgressionTable
from ..io.serializers import row_columns, row_to_dict

console = Console()
# Warnings and errors go to stderr
err_console = Console(stderr=True)

# Column → (header, style)
_COLUMN_STYLES: dict[str, tuple[str, str]] = {
    "index": ("Index", "cyan"),
    "set": ("Set", "cyan"),
    "reps": ("Reps", "bold"),
    "step": ("Step", "magenta"),
    "adjustment": ("Adjustment", "yellow"),
    "perc_1RM": ("%1RM", "green"),
    "table": ("Table", ""),
    "volume": ("Volume", ""),
    "type": ("Type", ""),
}


def _format_value(column: str, value: Any) -> str:
    if column == "perc_1RM":
        return f"{value * 100:.1f}%"
    if isinstance(value, float):
        if value.is_integer():
            return f"{value:.0f}"
        return f"{value:.2f}"
    return str(value)


def build_rows_table(rows: Sequence[Any], title: str | None = None) -> Table:
    """
    Build a Rich table for a homogeneous list of row dataclasses.

    Args:
        rows: Rows to show (all the same dataclass type)
        title: Optional table title

    Returns:
        Rich Table
    """
    table = Table(title=title)
    columns = row_columns(rows)
    for col in columns:
        header, style = _COLUMN_STYLES.get(col, (col, ""))
        justify = "left" if col in ("table", "volume", "type") else "right"
        table.add_column(header, style=style or None, justify=justify)

    previous_index: int | None = None
    for row in rows:
        data = row_to_dict(row)
        # Visually separate index groups in schemes and vertical plans
        index = data.get("index")
        if index is not None and previous_index is not None and index != previous_index:
            table.add_section()
        previous_index = index
        table.add_row(*(_format_value(c, data[c]) for c in columns))
    return table


def print_rows(rows: Sequence[Any], title: str | None = None) -> None:
    """Print rows as a Rich table, or a notice if there are none."""
    if not rows:
        console.print("[yellow]No rows generated.[/yellow]")
        return
    console.print(build_rows_table(rows, title=title))


def format_tables_overview(tables: dict[str, ProgressionTable]) -> Table:
    """Rich table listing every progression table and its volume presets."""
    table = Table(title="Progression Tables")
    table.add_column("Table", style="bold")
    table.add_column("Family")
    table.add_column("Volume")
    table.add_column("rep_start", justify="right")
    table.add_column("rep_step", justify="right")
    table.add_column("inc_start", justify="right")
    table.add_column("inc_step", justify="right")
    table.add_column("Fixed steps")

    for name, tbl in tables.items():
        fixed = ", ".join(str(s) for s in tbl.fixed_steps) if tbl.fixed_steps else "-"
        for i, (volume, p) in enumerate(tbl.presets.items()):
            table.add_row(
                name if i == 0 else "",
                tbl.family if i == 0 else "",
                volume,
                f"{p.rep_start:.3f}",
                f"{p.rep_step:.3f}",
                f"{p.inc_start:.3f}",
                f"{p.inc_step:.4f}",
                fixed if i == 0 else "",
                end_section=i == len(tbl.presets) - 1,
            )
    return table


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[yellow]Warning: {message}[/yellow]")

