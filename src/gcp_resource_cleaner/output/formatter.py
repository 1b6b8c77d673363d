"""Output dispatcher — renders trees and reports as table, JSON, YAML, or CSV."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from typing import Any

from rich.console import Console

from gcp_resource_cleaner.client.errors import ConfigurationError
from gcp_resource_cleaner.core.deleter import DeletionResult
from gcp_resource_cleaner.models.tree import Tree
from gcp_resource_cleaner.output.tables import kv_table, make_table
from gcp_resource_cleaner.output.tree import render_tree, tree_summary

console = Console()

FORMATS = ("table", "json", "yaml", "csv")
TREE_COLUMNS = ["Kind", "ID", "Name", "Parent"]
REPORT_COLUMNS = ["Kind", "ID", "Name", "Status", "Error"]


def _plain(data: Any) -> Any:
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    return data


def tree_rows(tree: Tree) -> list[list[str]]:
    """One row per entry, folders before their contents."""
    if tree.root is None:
        return []
    rows = [["folder", tree.root.current.id, tree.root.current.name, ""]]
    for node in tree.root.iter_nodes():
        parent = node.current.id
        rows.extend(["project", p.id, p.name, parent] for p in node.direct_projects)
        rows.extend(["folder", c.current.id, c.current.name, parent] for c in node.children)
    return rows


def output_json(data: Any) -> None:
    console.print_json(json.dumps(_plain(data), indent=2, default=str))


def output_yaml(data: Any) -> None:
    import yaml

    console.print(
        yaml.safe_dump(_plain(data), default_flow_style=False, sort_keys=False),
        end="",
        markup=False,
    )


def output_csv(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(columns)
    writer.writerows([["" if v is None else str(v) for v in row] for row in rows])
    console.print(buf.getvalue(), end="", markup=False, highlight=False)


def output_table(
    data: Any,
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
    kv: bool = False,
) -> None:
    """Print data as a Rich table, or as a Rich tree for a ``Tree``."""
    if isinstance(data, Tree):
        console.print(render_tree(data))
        console.print(f"[dim]{tree_summary(data)}[/]")
    elif isinstance(data, dict) and (kv or not columns):
        console.print(kv_table(data, title=title))
    elif columns and rows is not None:
        console.print(make_table(title, columns, rows))
    else:
        console.print(data)


def output(
    data: Any,
    fmt: str = "table",
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
    kv: bool = False,
) -> None:
    """Dispatch output to the appropriate formatter."""
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise ConfigurationError(
            f"Unknown output format '{fmt}'. Must be one of: {', '.join(FORMATS)}"
        )
    if isinstance(data, Tree) and rows is None:
        columns, rows = TREE_COLUMNS, tree_rows(data)

    if fmt == "json":
        output_json(data)
    elif fmt == "yaml":
        output_yaml(data)
    elif fmt == "csv":
        if columns and rows is not None:
            output_csv(columns, rows)
        else:
            output_json(data)
    else:
        output_table(data, columns=columns, rows=rows, title=title, kv=kv)


def result_status(result: DeletionResult, dry_run: bool) -> str:
    if not result.ok:
        return "failed"
    return "dry-run" if dry_run else "deleted"


def report_rows(results: Sequence[DeletionResult], dry_run: bool) -> list[list[str]]:
    return [
        [
            r.entry.kind.value,
            r.entry.id,
            r.entry.name,
            result_status(r, dry_run),
            str(r.error) if r.error else "",
        ]
        for r in results
    ]


def output_report(
    results: Sequence[DeletionResult],
    fmt: str = "table",
    *,
    dry_run: bool = False,
) -> None:
    """Print one line per attempted deletion."""
    rows = report_rows(results, dry_run)
    keys = [c.lower() for c in REPORT_COLUMNS]
    data = [dict(zip(keys, row)) for row in rows]
    title = "Deletion report (dry run)" if dry_run else "Deletion report"
    output(data, fmt, columns=REPORT_COLUMNS, rows=rows, title=title)
