"""Tree builder — walk the folder hierarchy and assemble the resource tree.

Listing is best-effort per subtree: a folder whose projects cannot be listed
is dropped from its parent, and a folder whose subfolders cannot be listed
keeps its projects but loses its children. Cancellation always propagates.
"""

from __future__ import annotations

import logging
from enum import Enum

from gcp_resource_cleaner.client.catalog import GCloudCatalog
from gcp_resource_cleaner.client.context import Context
from gcp_resource_cleaner.client.errors import CommandError, EmptyInputError
from gcp_resource_cleaner.client.executor import CommandExecutor
from gcp_resource_cleaner.config.constants import DEFAULT_GCLOUD
from gcp_resource_cleaner.config.models import ConcurrencySettings
from gcp_resource_cleaner.core.fanout import fan_out
from gcp_resource_cleaner.models.tree import Entry, Node, Tree

logger = logging.getLogger(__name__)


class TraversalStrategy(str, Enum):
    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"

    @classmethod
    def for_settings(cls, concurrency: ConcurrencySettings) -> TraversalStrategy:
        return cls.CONCURRENT if concurrency.active else cls.SEQUENTIAL


class TreeBuilder:
    """Builds a ``Tree`` from catalog listings.

    With ``CONCURRENT``, the direct subfolders of each folder are walked in
    parallel, one thread per subfolder. Global process concurrency is bounded
    by the catalog's executor, not here.
    """

    def __init__(
        self,
        catalog: GCloudCatalog,
        strategy: TraversalStrategy = TraversalStrategy.SEQUENTIAL,
    ) -> None:
        self.catalog = catalog
        self.strategy = strategy

    def build(self, ctx: Context, root_folder_id: str) -> Tree:
        if not root_folder_id or not root_folder_id.strip():
            raise EmptyInputError("Root folder id is empty.")
        root = Entry.folder(root_folder_id, root_folder_id)
        logger.debug(
            "Building resource tree",
            extra={"folder_id": root_folder_id, "strategy": self.strategy.value},
        )
        return Tree(root=self._build_node(ctx, root))

    def _build_node(self, ctx: Context, folder: Entry) -> Node | None:
        ctx.raise_if_cancelled()
        try:
            projects = self.catalog.list_projects(ctx, folder.id)
        except CommandError as exc:
            logger.error(
                "Failed to list projects, skipping folder %s: %s", folder.id, exc,
                extra={"folder_id": folder.id},
            )
            return None

        node = Node(current=folder, direct_projects=projects)

        try:
            subfolders = self.catalog.list_folders(ctx, folder.id)
        except CommandError as exc:
            logger.warning(
                "Failed to list subfolders of %s, subtree pruned: %s", folder.id, exc,
                extra={"folder_id": folder.id, "projects": len(projects)},
            )
            return node

        for child in self._build_children(ctx, subfolders):
            if child is not None:
                node.add_child(child)
        return node

    def _build_children(self, ctx: Context, folders: list[Entry]) -> list[Node | None]:
        if self.strategy is TraversalStrategy.SEQUENTIAL or len(folders) < 2:
            return [self._build_node(ctx, folder) for folder in folders]

        def work(group: Context, folder: Entry) -> Node | None:
            logger.debug("Processing subfolder", extra={"folder_id": folder.id})
            return self._build_node(group, folder)

        # One thread per subfolder; the executor bounds the gcloud processes
        return fan_out(ctx, folders, work, max_workers=len(folders), name="tree-builder")


def build_tree(
    ctx: Context,
    root_folder_id: str,
    executor: CommandExecutor,
    concurrency: ConcurrencySettings | None = None,
    *,
    gcloud: str = DEFAULT_GCLOUD,
) -> Tree:
    """Discover the resource tree under *root_folder_id*."""
    concurrency = concurrency or ConcurrencySettings()
    builder = TreeBuilder(
        GCloudCatalog(executor, gcloud=gcloud),
        TraversalStrategy.for_settings(concurrency),
    )
    return builder.build(ctx, root_folder_id)
