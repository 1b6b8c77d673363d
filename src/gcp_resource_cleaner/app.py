"""Root Typer app — global options and command registration."""

from __future__ import annotations

from typing import Optional

import typer

from gcp_resource_cleaner import __version__
from gcp_resource_cleaner.commands import cleanup, config_cmd, health

app = typer.Typer(
    name="gcp-resource-cleaner",
    help=(
        "Delete every project and folder under a GCP folder, bottom up.\n\n"
        "GCP refuses to delete a folder that still has contents, so the tree "
        "is discovered first and then removed from the leaves to the root."
    ),
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"gcp-resource-cleaner {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    """Discover and delete GCP folder trees."""


# Register commands
app.command("delete")(cleanup.delete)
app.command("print")(cleanup.print_tree)
app.command("check-health")(health.check_health)
app.command("version")(health.version)
app.add_typer(config_cmd.app, name="config")


def main() -> None:
    app()
