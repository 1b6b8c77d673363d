"""Integration tests for config commands."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from gcp_resource_cleaner.app import app
from gcp_resource_cleaner.config.manager import ConfigManager

runner = CliRunner()


def _patch_manager(tmp_path: Path):
    """Patch ConfigManager to use a temp config file."""
    config_path = tmp_path / "config.toml"
    return patch(
        "gcp_resource_cleaner.commands.config_cmd._get_manager",
        return_value=ConfigManager(config_path=config_path),
    )


class TestConfigCommands:
    def test_list_empty(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "list"])
            assert result.exit_code == 0
            assert "No profiles configured" in result.output

    def test_add_and_list(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "add", "sandbox", "--folder-id", "123", "--concurrency"])
            assert result.exit_code == 0
            assert "added" in result.output

            result = runner.invoke(app, ["config", "list"])
            assert result.exit_code == 0
            assert "sandbox" in result.output
            assert "123" in result.output

    def test_add_invalid_log_level(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "add", "bad", "--log-level", "loud"])
            assert result.exit_code == 1

    def test_show_profile(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "sandbox", "--folder-id", "4242", "--concurrency-limit", "3"])
            result = runner.invoke(app, ["config", "show", "sandbox"])
            assert result.exit_code == 0
            assert "4242" in result.output
            assert "concurrency_limit" in result.output

    def test_show_nonexistent(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "show", "nope"])
            assert result.exit_code == 4

    def test_set_default(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "a"])
            runner.invoke(app, ["config", "add", "b"])
            result = runner.invoke(app, ["config", "set-default", "b"])
            assert result.exit_code == 0
            assert "b" in result.output

    def test_set_default_nonexistent(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "set-default", "nope"])
            assert result.exit_code == 4

    def test_remove_profile(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "dev"])
            result = runner.invoke(app, ["config", "remove", "dev", "--force"])
            assert result.exit_code == 0
            assert "removed" in result.output

    def test_remove_cancelled(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "dev"])
            result = runner.invoke(app, ["config", "remove", "dev"], input="n\n")
            assert result.exit_code == 0
            assert "Cancelled" in result.output

    def test_remove_nonexistent(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "remove", "nope", "--force"])
            assert result.exit_code == 4

    def test_list_json_format(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "dev", "--folder-id", "1"])
            result = runner.invoke(app, ["config", "list", "--format", "json"])
            assert result.exit_code == 0
            assert "profiles" in result.output

    def test_add_existing_reports_update(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "dev"])
            result = runner.invoke(app, ["config", "add", "dev", "--folder-id", "9"])
            assert result.exit_code == 0
            assert "updated" in result.output

    def test_remove_default_moves_default(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "a"])
            runner.invoke(app, ["config", "add", "b"])
            result = runner.invoke(app, ["config", "remove", "a", "--force"])
            assert result.exit_code == 0
            assert "Default is now 'b'" in result.output


class TestResolveCommand:
    def test_defaults(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "resolve", "--format", "json"])
            assert result.exit_code == 0, result.output
            data = json.loads(result.output)
            assert data["folder_id"] == ""
            assert data["concurrency"] == "off"
            assert data["log_level"] == "info"
            assert data["gcloud"] == "gcloud"

    def test_precedence(self, tmp_path: Path, monkeypatch):
        with _patch_manager(tmp_path):
            runner.invoke(
                app,
                ["config", "add", "dev", "--folder-id", "1", "--concurrency", "--log-level", "debug"],
            )
            monkeypatch.setenv("GCP_CLEANER_FOLDER_ID", "2")
            result = runner.invoke(
                app, ["config", "resolve", "--concurrency-limit", "9", "--format", "json"],
            )
            assert result.exit_code == 0, result.output
            data = json.loads(result.output)
            assert data["profile"] == "dev"
            assert data["folder_id"] == "2"
            assert data["concurrency"] == "on (limit 9)"
            assert data["log_level"] == "debug"

    def test_unknown_profile(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "resolve", "-p", "ghost"])
            assert result.exit_code == 4
