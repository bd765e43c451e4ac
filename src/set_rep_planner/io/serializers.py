"""
Serialization for generated tables.

Rows are flat dataclasses; these helpers turn them into JSON-compatible
dicts, JSON text or CSV text.  Column order always follows the dataclass
field order so downstream consumers can rely on it.
"""

import csv
import io
import json
from dataclasses import asdict, fields, is_dataclass
from typing import Any, Sequence

from ..core.errors import InvalidInput
from ..core.models import ProgressionParams, ProgressionTable


def _columns(row_type: type) -> list[str]:
    # Fields marked column=False are internal bookkeeping
    return [f.name for f in fields(row_type) if f.metadata.get("column", True)]


def row_columns(rows: Sequence[Any]) -> list[str]:
    """
    Column names of a homogeneous row list.

    Raises:
        TypeError: If rows are not dataclass instances of a single type
    """
    if not rows:
        return []
    row_type = type(rows[0])
    if not is_dataclass(row_type):
        raise TypeError(f"Expected dataclass rows, got {row_type.__name__}")
    if any(type(r) is not row_type for r in rows):
        raise TypeError("All rows must be of the same type")
    return _columns(row_type)


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert one row dataclass to an ordered dict of its output columns."""
    return {name: getattr(row, name) for name in _columns(type(row))}


def rows_to_dicts(rows: Sequence[Any]) -> list[dict[str, Any]]:
    """Convert a row list to a list of ordered dicts."""
    row_columns(rows)
    return [row_to_dict(r) for r in rows]


def rows_to_json(rows: Sequence[Any], indent: int | None = 2) -> str:
    """Serialize rows as a JSON array of objects."""
    return json.dumps(rows_to_dicts(rows), indent=indent)


def rows_to_csv(rows: Sequence[Any]) -> str:
    """Serialize rows as CSV with a header line."""
    columns = row_columns(rows)
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=columns, lineterminator="\n")
    writer.writeheader()
    for r in rows:
        writer.writerow(row_to_dict(r))
    return buf.getvalue()


def params_to_dict(params: ProgressionParams) -> dict[str, float]:
    """Convert ProgressionParams to a JSON-compatible dict."""
    return asdict(params)


def table_summary(table: ProgressionTable) -> dict[str, Any]:
    """JSON-compatible summary of a progression table and its presets."""
    return {
        "name": table.name,
        "family": table.family,
        "fixed_steps": list(table.fixed_steps) if table.fixed_steps else None,
        "description": table.description,
        "presets": {v: params_to_dict(p) for v, p in table.presets.items()},
    }


def parse_number_list(text: str) -> list[float]:
    """
    Parse a comma-separated list of numbers ("5,5,5" or "-2, -1, 0").

    Integral values come back as int so they print without decimals.

    Raises:
        InvalidInput: If any entry is not a number or the list is empty
    """
    items = [t.strip() for t in text.split(",") if t.strip()]
    if not items:
        raise InvalidInput(f"Expected a comma-separated list of numbers, got {text!r}")
    values: list[float] = []
    for item in items:
        try:
            value = float(item)
        except ValueError as e:
            raise InvalidInput(f"Not a number: {item!r}") from e
        values.append(int(value) if value.is_integer() else value)
    return values
