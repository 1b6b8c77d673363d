"""Config commands — manage cleaner profiles and inspect resolved settings."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.prompt import Confirm

from gcp_resource_cleaner.client.errors import ConfigurationError, error_handler
from gcp_resource_cleaner.commands._common import (
    ConcurrencyLimitOpt,
    ConcurrencyOpt,
    FolderOpt,
    FormatOpt,
    LogFormatOpt,
    LogLevelOpt,
    ProfileOpt,
)
from gcp_resource_cleaner.config.manager import ConfigManager
from gcp_resource_cleaner.config.models import CleanerProfile
from gcp_resource_cleaner.output.formatter import output

app = typer.Typer(name="config", help="Manage cleaner profiles and CLI configuration.")
console = Console()

PROFILE_COLUMNS = ["Name", "Folder", "Concurrency", "Limit", "Log level", "Default"]

NameArg = Annotated[str, typer.Argument(help="Profile name")]


def _get_manager() -> ConfigManager:
    return ConfigManager()


def _require(mgr: ConfigManager, name: str) -> CleanerProfile:
    profile = mgr.get_profile(name)
    if profile is None:
        raise ConfigurationError(f"Profile '{name}' not found.")
    return profile


def _cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


@app.command()
@error_handler
def add(
    name: NameArg,
    folder_id: FolderOpt = None,
    concurrency: ConcurrencyOpt = None,
    concurrency_limit: ConcurrencyLimitOpt = None,
    log_level: LogLevelOpt = None,
    log_format: LogFormatOpt = None,
    gcloud: Annotated[str | None, typer.Option("--gcloud", help="Path to the gcloud binary")] = None,
    command_timeout: Annotated[
        float | None, typer.Option("--command-timeout", help="Seconds before a gcloud call is killed"),
    ] = None,
    make_default: Annotated[bool, typer.Option("--default", help="Use this profile by default")] = False,
) -> None:
    """Add or replace a cleaner profile."""
    mgr = _get_manager()
    profile = CleanerProfile(
        name=name,
        folder_id=folder_id,
        concurrency=concurrency,
        concurrency_limit=concurrency_limit,
        log_level=log_level,
        log_format=log_format,
        gcloud=gcloud,
        command_timeout=command_timeout,
    )
    replaced = mgr.get_profile(name) is not None
    mgr.add_profile(profile)
    if make_default:
        mgr.set_default(name)
    console.print(f"[green]Profile '{name}' {'updated' if replaced else 'added'}.[/]")


@app.command("list")
@error_handler
def list_profiles(fmt: FormatOpt = "table") -> None:
    """List all configured profiles."""
    mgr = _get_manager()
    profiles = mgr.config.profiles
    if not profiles:
        console.print(
            "[yellow]No profiles configured. "
            "Run 'gcp-resource-cleaner config add' to create one.[/]"
        )
        return

    default = mgr.config.default_profile
    rows = [
        [
            p.name,
            _cell(p.folder_id),
            _cell(p.concurrency),
            _cell(p.concurrency_limit),
            _cell(p.log_level),
            "*" if p.name == default else "",
        ]
        for p in profiles.values()
    ]
    output(
        {
            "default_profile": default,
            "profiles": [p.model_dump(exclude_none=True) for p in profiles.values()],
        },
        fmt,
        columns=PROFILE_COLUMNS,
        rows=rows,
        title="Cleaner Profiles",
    )


@app.command()
@error_handler
def show(name: NameArg, fmt: FormatOpt = "table") -> None:
    """Show one profile."""
    profile = _require(_get_manager(), name)
    output(profile.model_dump(exclude_none=True), fmt, kv=True, title=f"Profile: {name}")


@app.command()
@error_handler
def resolve(
    profile: ProfileOpt = None,
    folder_id: FolderOpt = None,
    concurrency: ConcurrencyOpt = None,
    concurrency_limit: ConcurrencyLimitOpt = None,
    log_level: LogLevelOpt = None,
    log_format: LogFormatOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show the settings a run would use after flags, env and profile are merged."""
    settings = _get_manager().resolve_settings(
        profile,
        folder_id=folder_id,
        concurrency=concurrency,
        concurrency_limit=concurrency_limit,
        log_level=log_level,
        log_format=log_format,
    )
    data = settings.model_dump(exclude={"dry_run"})
    data["concurrency"] = (
        f"on (limit {settings.concurrency.limit})" if settings.concurrency.active else "off"
    )
    output(data, fmt, kv=True, title="Effective settings")


@app.command("set-default")
@error_handler
def set_default(name: NameArg) -> None:
    """Set the default profile."""
    mgr = _get_manager()
    _require(mgr, name)
    mgr.set_default(name)
    console.print(f"[green]Default profile set to '{name}'.[/]")


@app.command()
@error_handler
def remove(
    name: NameArg,
    force: Annotated[bool, typer.Option("--force", help="Skip confirmation")] = False,
) -> None:
    """Remove a profile."""
    mgr = _get_manager()
    _require(mgr, name)
    if not force and not Confirm.ask(f"Remove profile '{name}'?"):
        console.print("Cancelled.")
        return
    mgr.remove_profile(name)
    default = mgr.config.default_profile
    suffix = f" Default is now '{default}'." if default else ""
    console.print(f"[green]Profile '{name}' removed.[/]{suffix}")
