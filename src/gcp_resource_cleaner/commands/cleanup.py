"""Cleanup commands — print and delete the resource tree under a folder."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.prompt import Confirm

from gcp_resource_cleaner.client.context import Context
from gcp_resource_cleaner.client.errors import DeletionFailedError, error_handler
from gcp_resource_cleaner.commands._common import (
    ConcurrencyLimitOpt,
    ConcurrencyOpt,
    DryRunOpt,
    FolderOpt,
    FormatOpt,
    LogFormatOpt,
    LogLevelOpt,
    ProfileOpt,
    cancel_on_interrupt,
    discover,
    make_executor,
    resolve_run,
)
from gcp_resource_cleaner.core.deleter import delete_all, failures
from gcp_resource_cleaner.output.formatter import output, output_report
from gcp_resource_cleaner.output.tree import tree_summary

console = Console()


@error_handler
def print_tree(
    folder_id: FolderOpt = None,
    concurrency: ConcurrencyOpt = None,
    concurrency_limit: ConcurrencyLimitOpt = None,
    profile: ProfileOpt = None,
    log_level: LogLevelOpt = None,
    log_format: LogFormatOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Print the resource tree under a folder."""
    settings = resolve_run(
        profile,
        folder_id=folder_id,
        concurrency=concurrency,
        concurrency_limit=concurrency_limit,
        log_level=log_level,
        log_format=log_format,
    )
    executor = make_executor(settings)
    with Context.background() as ctx, cancel_on_interrupt(ctx):
        tree = discover(ctx, settings, executor)
    output(tree, fmt)


@error_handler
def delete(
    folder_id: FolderOpt = None,
    dry_run: DryRunOpt = False,
    concurrency: ConcurrencyOpt = None,
    concurrency_limit: ConcurrencyLimitOpt = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation"),
    ] = False,
    profile: ProfileOpt = None,
    log_level: LogLevelOpt = None,
    log_format: LogFormatOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Delete every project and folder under a folder, bottom up."""
    settings = resolve_run(
        profile,
        folder_id=folder_id,
        dry_run=dry_run,
        concurrency=concurrency,
        concurrency_limit=concurrency_limit,
        log_level=log_level,
        log_format=log_format,
    )
    executor = make_executor(settings)
    with Context.background() as ctx, cancel_on_interrupt(ctx):
        tree = discover(ctx, settings, executor)
        if fmt == "table":
            output(tree, fmt)

        if not settings.dry_run and not yes:
            prompt = (
                f"Delete {tree_summary(tree)} under folder '{settings.folder_id}'? "
                "This cannot be undone"
            )
            if not Confirm.ask(prompt):
                console.print("Cancelled.")
                return

        results = delete_all(
            ctx,
            tree,
            executor,
            settings.dry_run,
            settings.concurrency,
            gcloud=settings.gcloud,
        )

    output_report(results, fmt, dry_run=settings.dry_run)
    failed = failures(results)
    if failed:
        raise DeletionFailedError(len(failed), len(results))
    if fmt == "table":
        verb = "would be deleted" if settings.dry_run else "deleted"
        console.print(f"[green]{len(results)} resources {verb}.[/]")
