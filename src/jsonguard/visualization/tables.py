"""Rich-powered tables for parsed records and NDJSON reports."""
from __future__ import annotations

from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

_console = Console()


def _cell(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return f"<{type(value).__name__}, {len(value)} items>"
    return str(value)


def print_records_table(
    records: list[Any],
    title: str = "Records",
    max_rows: int = 100,
    console: Console | None = None,
) -> None:
    """Render parsed records as a Rich table.

    Dict records get one column per key (union of keys, first-seen order);
    anything else is shown in a single ``value`` column.
    """
    out = console or _console
    if not records:
        out.print("[yellow]No records to display.[/yellow]")
        return

    cols: list[str] = []
    for record in records[:max_rows]:
        if isinstance(record, dict):
            cols.extend(k for k in record if k not in cols)
    if not cols:
        cols = ["value"]

    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    table.add_column("#", style="dim", justify="right")
    for col in cols:
        table.add_column(col, overflow="fold", max_width=60)

    shown = records[:max_rows]
    for index, record in enumerate(shown, start=1):
        if isinstance(record, dict):
            row = [_cell(record.get(c, "")) for c in cols]
        else:
            row = [_cell(record)] + [""] * (len(cols) - 1)
        table.add_row(str(index), *row)

    out.print(table)
    if len(records) > max_rows:
        out.print(f"[dim]... and {len(records) - max_rows} more rows (use --limit to adjust)[/dim]")


def print_line_errors_table(
    errors: list[tuple[int, str]],
    title: str = "Rejected lines",
    console: Console | None = None,
) -> None:
    """Render ``(line_number, message)`` pairs as a Rich table."""
    out = console or _console
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Line", justify="right", style="cyan")
    table.add_column("Error", style="red", overflow="fold")

    for line_number, message in errors:
        table.add_row(str(line_number), message)

    out.print(table)
