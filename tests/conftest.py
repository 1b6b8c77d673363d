"""Shared test fixtures."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path

import pytest

from gcp_resource_cleaner.client.context import Context
from gcp_resource_cleaner.client.errors import CommandError
from gcp_resource_cleaner.config.manager import ConfigManager
from gcp_resource_cleaner.config.models import CleanerProfile


class FakeGCloud:
    """In-memory stand-in for the gcloud binary.

    Folders map to their subfolders and projects. Deleting a folder that
    still has live contents fails, like the real API.
    """

    def __init__(
        self,
        folders: dict[str, list[str]] | None = None,
        projects: dict[str, list[str]] | None = None,
        *,
        names: dict[str, str] | None = None,
        fail_list_projects: set[str] | None = None,
        fail_list_folders: set[str] | None = None,
        fail_delete: set[str] | None = None,
        delay: float = 0.0,
        version_output: bytes = b"Google Cloud SDK 400.0.0\nbq 2.0.75\ncore 2022.08.19\n",
    ) -> None:
        self.folders = folders or {}
        self.projects = projects or {}
        self.names = names or {}
        self.fail_list_projects = fail_list_projects or set()
        self.fail_list_folders = fail_list_folders or set()
        self.fail_delete = fail_delete or set()
        self.delay = delay
        self.version_output = version_output
        self.calls: list[tuple[str, ...]] = []
        self.deleted: list[str] = []
        self._lock = threading.Lock()
        self._active = 0
        self.max_active = 0

    def _rows(self, ids: list[str]) -> bytes:
        return "".join(f"{i},{self.names.get(i, i.upper())}\n" for i in ids).encode()

    def _fail(self, args: tuple[str, ...], msg: str) -> CommandError:
        return CommandError(["gcloud", *args], 1, f"ERROR: {msg}\n".encode())

    def execute(self, ctx: Context, name: str, *args: str) -> bytes:
        ctx.raise_if_cancelled()
        with self._lock:
            self.calls.append(args)
            self._active += 1
            self.max_active = max(self.max_active, self._active)
        try:
            if self.delay:
                time.sleep(self.delay)
            return self._dispatch(args)
        finally:
            with self._lock:
                self._active -= 1

    def _dispatch(self, args: tuple[str, ...]) -> bytes:
        if args == ("version",):
            return self.version_output
        if args[:2] == ("projects", "list"):
            parent = args[3].split(":", 1)[1]
            if parent in self.fail_list_projects:
                raise self._fail(args, f"cannot list projects in {parent}")
            return self._rows(self.projects.get(parent, []))
        if args[:3] == ("resource-manager", "folders", "list"):
            parent = args[4]
            if parent in self.fail_list_folders:
                raise self._fail(args, f"cannot list folders in {parent}")
            return self._rows(self.folders.get(parent, []))
        if args[:2] == ("projects", "delete"):
            return self._delete(args, args[2])
        if args[:3] == ("resource-manager", "folders", "delete"):
            folder = args[3]
            with self._lock:
                live = [
                    c for c in self.folders.get(folder, []) + self.projects.get(folder, [])
                    if c not in self.deleted
                ]
            if live:
                raise self._fail(args, f"folder {folder} is not empty")
            return self._delete(args, folder)
        raise AssertionError(f"unexpected gcloud call: {args}")

    def _delete(self, args: tuple[str, ...], resource_id: str) -> bytes:
        if resource_id in self.fail_delete:
            raise self._fail(args, f"permission denied on {resource_id}")
        with self._lock:
            self.deleted.append(resource_id)
        return b""

    def delete_calls(self) -> list[tuple[str, ...]]:
        return [c for c in self.calls if "delete" in c]


@pytest.fixture
def ctx():
    with Context.background() as c:
        yield c


@pytest.fixture
def make_cloud() -> type[FakeGCloud]:
    return FakeGCloud


@pytest.fixture
def nested_cloud() -> FakeGCloud:
    """root → {p1, p2; f1 → {p3; f3 → {p5}}, f2 → {p4}}."""
    return FakeGCloud(
        folders={"root": ["f1", "f2"], "f1": ["f3"]},
        projects={"root": ["p1", "p2"], "f1": ["p3"], "f2": ["p4"], "f3": ["p5"]},
    )


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)


@pytest.fixture
def sample_profile() -> CleanerProfile:
    """Return a sample cleaner profile for testing."""
    return CleanerProfile(
        name="sandbox",
        folder_id="123456789",
        concurrency=True,
        concurrency_limit=4,
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (
        "GCP_CLEANER_PROFILE",
        "GCP_CLEANER_FOLDER_ID",
        "GCP_CLEANER_LOG_LEVEL",
        "GCP_CLEANER_LOG_FORMAT",
        "GCP_CLEANER_CONCURRENCY",
        "GCP_CLEANER_CONCURRENCY_LIMIT",
        "GCP_CLEANER_GCLOUD",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() from CLI tests so caplog sees records."""
    yield
    logger = logging.getLogger("gcp_resource_cleaner")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
