"""Health and version commands."""

from __future__ import annotations

from rich.console import Console

from gcp_resource_cleaner import __git_commit__, __version__
from gcp_resource_cleaner.client.catalog import GCloudCatalog
from gcp_resource_cleaner.client.context import Context
from gcp_resource_cleaner.client.errors import error_handler
from gcp_resource_cleaner.client.executor import GCloudExecutor
from gcp_resource_cleaner.commands._common import (
    LogFormatOpt,
    LogLevelOpt,
    ProfileOpt,
    cancel_on_interrupt,
    resolve_run,
)

console = Console()


@error_handler
def check_health(
    profile: ProfileOpt = None,
    log_level: LogLevelOpt = None,
    log_format: LogFormatOpt = None,
) -> None:
    """Check that gcloud is installed and responding."""
    settings = resolve_run(profile, log_level=log_level, log_format=log_format)
    catalog = GCloudCatalog(
        GCloudExecutor(timeout=settings.command_timeout), gcloud=settings.gcloud,
    )
    with Context.background() as ctx, cancel_on_interrupt(ctx):
        lines = catalog.check_health(ctx)
    for line in lines:
        console.print(f"  {line}", markup=False)
    console.print(f"[green]{settings.gcloud} is installed and working.[/]")


def version() -> None:
    """Show the application version and git commit."""
    console.print(f"gcp-resource-cleaner {__version__} (commit {__git_commit__})", markup=False)
