"""
CLI entry point using Typer.

Provides commands for inspecting models and generating schemes:
- max-perc: Max-%1RM model lookup
- progression: Progression table rows for reps x steps
- table: Dense progression table enumeration
- presets: List progression tables and volume presets
- vertical: Vertical planning (reps, index, step)
- scheme: Full scheme (index, set, reps, adjustment, %1RM)
"""

from .app import app
from .commands import planning, tables  # noqa: F401  (registers commands)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
