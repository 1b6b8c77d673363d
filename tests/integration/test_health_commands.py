"""Integration tests for check-health and version."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from gcp_resource_cleaner import __version__
from gcp_resource_cleaner.app import app
from gcp_resource_cleaner.client.errors import CommandError
from gcp_resource_cleaner.config.manager import ConfigManager

runner = CliRunner()


@pytest.fixture(autouse=True)
def manager(tmp_path: Path):
    with patch(
        "gcp_resource_cleaner.commands._common._get_manager",
        return_value=ConfigManager(config_path=tmp_path / "config.toml"),
    ):
        yield


def _patch_executor(cloud):
    return patch("gcp_resource_cleaner.commands.health.GCloudExecutor", return_value=cloud)


class TestCheckHealth:
    def test_healthy(self, make_cloud):
        cloud = make_cloud()
        with _patch_executor(cloud):
            result = runner.invoke(app, ["check-health"])
        assert result.exit_code == 0, result.output
        assert "Google Cloud SDK 400.0.0" in result.output
        assert "gcloud is installed and working" in result.output
        assert cloud.calls == [("version",)]

    def test_empty_output(self, make_cloud):
        with _patch_executor(make_cloud(version_output=b"\n")):
            result = runner.invoke(app, ["check-health"])
        assert result.exit_code == 5

    def test_not_installed(self):
        class Missing:
            def execute(self, ctx, name, *args):
                raise CommandError([name, *args], reason="No such file or directory")

        with _patch_executor(Missing()):
            result = runner.invoke(app, ["check-health"])
        assert result.exit_code == 2
        assert "No such file" in result.output

    def test_custom_gcloud_from_env(self, make_cloud, monkeypatch):
        monkeypatch.setenv("GCP_CLEANER_GCLOUD", "/opt/sdk/gcloud")
        seen: list[str] = []
        cloud = make_cloud()

        class Capture:
            def execute(self, ctx, name, *args):
                seen.append(name)
                return cloud.execute(ctx, name, *args)

        with _patch_executor(Capture()):
            result = runner.invoke(app, ["check-health"])
        assert result.exit_code == 0, result.output
        assert seen == ["/opt/sdk/gcloud"]


class TestVersion:
    def test_version_command(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output
        assert "commit" in result.output

    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"gcp-resource-cleaner {__version__}" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "delete" in result.output
        assert "check-health" in result.output
