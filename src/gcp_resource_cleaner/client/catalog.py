"""List and delete folders and projects through gcloud."""

from __future__ import annotations

import csv
import io
import logging

from gcp_resource_cleaner.client.context import Context
from gcp_resource_cleaner.client.errors import HealthCheckError
from gcp_resource_cleaner.client.executor import CommandExecutor
from gcp_resource_cleaner.config.constants import DEFAULT_GCLOUD
from gcp_resource_cleaner.models.tree import Entry, EntryKind

logger = logging.getLogger(__name__)

FOLDERS_FORMAT = "csv[no-heading](ID,DISPLAY_NAME)"
PROJECTS_FORMAT = "csv[no-heading](projectId,name)"


def output_lines(out: bytes) -> list[str]:
    """Split command output into non-blank, stripped lines."""
    text = out.decode("utf-8", errors="replace")
    return [line.strip() for line in text.splitlines() if line.strip()]


def parse_entries(out: bytes, kind: EntryKind) -> list[Entry]:
    """Parse ``id[,name]`` CSV rows into entries of *kind*."""
    entries: list[Entry] = []
    for row in csv.reader(io.StringIO("\n".join(output_lines(out)))):
        if not row or not row[0].strip():
            continue
        name = row[1].strip() if len(row) > 1 else ""
        entries.append(Entry(kind=kind, id=row[0].strip(), name=name))
    return entries


class GCloudCatalog:
    """Turns folder/project operations into gcloud invocations."""

    def __init__(self, executor: CommandExecutor, gcloud: str = DEFAULT_GCLOUD) -> None:
        self.executor = executor
        self.gcloud = gcloud

    def _run(self, ctx: Context, *args: str) -> bytes:
        return self.executor.execute(ctx, self.gcloud, *args)

    def list_folders(self, ctx: Context, parent_id: str) -> list[Entry]:
        out = self._run(
            ctx,
            "resource-manager", "folders", "list",
            "--folder", parent_id,
            "--format", FOLDERS_FORMAT,
        )
        folders = parse_entries(out, EntryKind.FOLDER)
        if not folders:
            logger.debug("No folders under folder", extra={"folder_id": parent_id})
        return folders

    def list_projects(self, ctx: Context, parent_id: str) -> list[Entry]:
        out = self._run(
            ctx,
            "projects", "list",
            "--filter", f"parent.id:{parent_id}",
            "--format", PROJECTS_FORMAT,
        )
        projects = parse_entries(out, EntryKind.PROJECT)
        if not projects:
            logger.debug("No projects under folder", extra={"folder_id": parent_id})
        return projects

    def _delete(self, ctx: Context, entry_id: str, dry_run: bool, *args: str) -> None:
        logger.info(
            "Would delete %s" if dry_run else "Deleting %s",
            entry_id,
            extra={"command": [self.gcloud, *args], "dry_run": dry_run},
        )
        if dry_run:
            return
        out = self._run(ctx, *args)
        lines = output_lines(out)
        if lines:
            logger.debug("gcloud output", extra={"resource_id": entry_id, "output": lines})

    def delete_folder(self, ctx: Context, folder_id: str, dry_run: bool = False) -> None:
        self._delete(
            ctx, folder_id, dry_run,
            "resource-manager", "folders", "delete", folder_id, "--quiet",
        )

    def delete_project(self, ctx: Context, project_id: str, dry_run: bool = False) -> None:
        self._delete(ctx, project_id, dry_run, "projects", "delete", project_id, "--quiet")

    def delete(self, ctx: Context, entry: Entry, dry_run: bool = False) -> None:
        if entry.kind is EntryKind.FOLDER:
            self.delete_folder(ctx, entry.id, dry_run)
        else:
            self.delete_project(ctx, entry.id, dry_run)

    def check_health(self, ctx: Context) -> list[str]:
        """Run ``gcloud version`` and return its output lines."""
        lines = output_lines(self._run(ctx, "version"))
        if not lines:
            raise HealthCheckError("gcloud version returned no output")
        logger.debug("gcloud version", extra={"output": lines})
        return lines
