"""Rich table rendering helpers."""

from __future__ import annotations

from typing import Any, Sequence

from rich.markup import escape
from rich.table import Table

STATUS_STYLES = {"deleted": "green", "dry-run": "cyan", "failed": "bold red"}


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        return ", ".join(f"{k}={_text(v)}" for k, v in value.items())
    return escape(str(value))


def make_table(
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
) -> Table:
    """Build a Rich Table from column headers and row data.

    Cells are escaped, so ids and names containing ``[...]`` print as-is.
    A ``Status`` column is colored by value.
    """
    table = Table(title=title)
    for col in columns:
        table.add_column(col, no_wrap=col in ("Kind", "Status"))
    status_idx = list(columns).index("Status") if "Status" in columns else None
    for row in rows:
        cells = [_text(cell) for cell in row]
        if status_idx is not None and cells[status_idx] in STATUS_STYLES:
            style = STATUS_STYLES[cells[status_idx]]
            cells[status_idx] = f"[{style}]{cells[status_idx]}[/]"
        table.add_row(*cells)
    return table


def kv_table(data: dict[str, Any], *, title: str | None = None) -> Table:
    """Two-column key/value table; nested dicts collapse to ``k=v`` pairs."""
    table = Table(title=title, show_header=False)
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(escape(key), _text(value))
    return table
