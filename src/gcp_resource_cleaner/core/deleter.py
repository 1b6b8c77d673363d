"""Delete every resource in a tree, bottom up."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from gcp_resource_cleaner.client.catalog import GCloudCatalog
from gcp_resource_cleaner.client.context import Context
from gcp_resource_cleaner.client.errors import CommandError
from gcp_resource_cleaner.client.executor import CommandExecutor
from gcp_resource_cleaner.config.constants import DEFAULT_GCLOUD
from gcp_resource_cleaner.config.models import ConcurrencySettings
from gcp_resource_cleaner.core.fanout import fan_out
from gcp_resource_cleaner.models.tree import Entry, EntryKind, Tree

logger = logging.getLogger(__name__)


class DeletionResult(BaseModel):
    """Outcome of one delete attempt."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    entry: Entry
    error: CommandError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def partition(entries: Iterable[Entry]) -> tuple[list[Entry], list[Entry]]:
    """Split entries into ``(projects, folders)``, keeping relative order."""
    projects: list[Entry] = []
    folders: list[Entry] = []
    for entry in entries:
        if entry.kind is EntryKind.PROJECT:
            projects.append(entry)
        else:
            folders.append(entry)
    return projects, folders


def failures(results: Iterable[DeletionResult]) -> list[DeletionResult]:
    return [r for r in results if not r.ok]


class Deleter:
    """Deletes all projects, then all folders in post-order.

    Projects may be deleted in parallel; folders never are, since a folder
    can only go once everything inside it is gone.
    """

    def __init__(
        self,
        catalog: GCloudCatalog,
        *,
        dry_run: bool = False,
        concurrency: ConcurrencySettings | None = None,
    ) -> None:
        self.catalog = catalog
        self.dry_run = dry_run
        self.concurrency = concurrency or ConcurrencySettings()

    def delete_all(self, ctx: Context, tree: Tree) -> list[DeletionResult]:
        ordered = tree.post_order()
        logger.debug(
            "Deletion order", extra={"entries": [f"{e.kind.value}:{e.id}" for e in ordered]},
        )
        projects, folders = partition(ordered)
        results = self._delete_projects(ctx, projects)
        for folder in folders:
            results.append(self._delete_one(ctx, folder))
        return results

    def _delete_projects(self, ctx: Context, projects: list[Entry]) -> list[DeletionResult]:
        if not self.concurrency.active or len(projects) < 2:
            return [self._delete_one(ctx, p) for p in projects]

        return fan_out(
            ctx,
            projects,
            self._delete_one,
            max_workers=self.concurrency.limit,
            name="project-deleter",
        )

    def _delete_one(self, ctx: Context, entry: Entry) -> DeletionResult:
        ctx.raise_if_cancelled()
        try:
            self.catalog.delete(ctx, entry, self.dry_run)
        except CommandError as exc:
            logger.error(
                "Failed to delete %s %s: %s", entry.kind.value, entry.id, exc,
                extra={"resource_id": entry.id, "kind": entry.kind.value},
            )
            return DeletionResult(entry=entry, error=exc)
        return DeletionResult(entry=entry)


def delete_all(
    ctx: Context,
    tree: Tree,
    executor: CommandExecutor,
    dry_run: bool = False,
    concurrency: ConcurrencySettings | None = None,
    *,
    gcloud: str = DEFAULT_GCLOUD,
) -> list[DeletionResult]:
    """Delete everything in *tree*; returns one result per entry."""
    deleter = Deleter(
        GCloudCatalog(executor, gcloud=gcloud),
        dry_run=dry_run,
        concurrency=concurrency,
    )
    return deleter.delete_all(ctx, tree)
