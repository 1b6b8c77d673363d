"""Shared option types and helpers for the CLI commands."""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated, Any

import typer

from gcp_resource_cleaner.client.context import Context
from gcp_resource_cleaner.client.errors import DiscoveryError
from gcp_resource_cleaner.client.executor import (
    BoundedExecutor,
    CommandExecutor,
    GCloudExecutor,
)
from gcp_resource_cleaner.config.manager import ConfigManager
from gcp_resource_cleaner.config.models import RunSettings
from gcp_resource_cleaner.core.builder import build_tree
from gcp_resource_cleaner.models.tree import Tree
from gcp_resource_cleaner.utils.log import configure_logging

logger = logging.getLogger(__name__)

# Shared Typer option type aliases
ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-p", help="Config profile"),
]
FolderOpt = Annotated[
    str | None,
    typer.Option("--folder-id", "-F", help="Root folder id to start from"),
]
DryRunOpt = Annotated[
    bool,
    typer.Option("--dry-run", help="Log what would be deleted without deleting"),
]
ConcurrencyOpt = Annotated[
    bool | None,
    typer.Option("--concurrency/--no-concurrency", help="Enable concurrency"),
]
ConcurrencyLimitOpt = Annotated[
    int | None,
    typer.Option("--concurrency-limit", help="Max concurrent gcloud processes"),
]
LogLevelOpt = Annotated[
    str | None,
    typer.Option("--log-level", help="trace, debug, info, warn, error, fatal, panic"),
]
LogFormatOpt = Annotated[
    str | None,
    typer.Option("--log-format", help="pretty or json"),
]
FormatOpt = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format"),
]


def _get_manager() -> ConfigManager:
    return ConfigManager()


def resolve_run(profile: str | None = None, **flags: Any) -> RunSettings:
    """Resolve settings from flags, env and profile, then set up logging."""
    settings = _get_manager().resolve_settings(profile, **flags)
    configure_logging(settings.log_level, settings.log_format)
    return settings


def make_executor(settings: RunSettings) -> CommandExecutor:
    """Bounded executor when concurrency is active, plain gcloud otherwise."""
    base = GCloudExecutor(timeout=settings.command_timeout)
    if settings.concurrency.active:
        logger.debug(
            "Creating concurrent executor",
            extra={"max_concurrent": settings.concurrency.limit},
        )
        return BoundedExecutor(base, settings.concurrency.limit)
    logger.debug("Creating sequential executor")
    return base


def discover(ctx: Context, settings: RunSettings, executor: CommandExecutor) -> Tree:
    """Build the tree for ``settings.folder_id``; fail if nothing was found."""
    tree = build_tree(
        ctx, settings.folder_id, executor, settings.concurrency, gcloud=settings.gcloud,
    )
    if tree.is_empty:
        raise DiscoveryError(
            f"Could not list the contents of folder '{settings.folder_id}'."
        )
    return tree


@contextmanager
def cancel_on_interrupt(ctx: Context) -> Iterator[Context]:
    """Turn the first Ctrl-C into a cancellation of *ctx*.

    A second Ctrl-C falls through to the default handler.
    """
    if threading.current_thread() is not threading.main_thread():
        yield ctx
        return

    previous = signal.getsignal(signal.SIGINT)

    def handler(signum: int, frame: Any) -> None:
        signal.signal(signal.SIGINT, signal.default_int_handler)
        logger.warning("Interrupted, cancelling outstanding work")
        ctx.cancel("interrupted")

    signal.signal(signal.SIGINT, handler)
    try:
        yield ctx
    finally:
        signal.signal(signal.SIGINT, previous)
