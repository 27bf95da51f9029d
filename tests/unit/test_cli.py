"""Unit tests for the CLI commands."""

from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from testgen.config.schema import AppConfig, StorageConfig
from testgen.interfaces.cli import _sync_async, app

from tests.fakes import SAMPLE_TREE, FakeGitHubClient, remote_repository

runner = CliRunner()


class TestInfoAndTemplates:
    @patch("testgen.interfaces.cli._load_config")
    def test_info(self, mock_load_config):
        mock_load_config.return_value = AppConfig()

        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "gpt-4o-mini" in result.output
        assert "node_modules" in result.output

    def test_templates_filtered(self):
        result = runner.invoke(app, ["templates", "--framework", "Cypress"])

        assert result.exit_code == 0
        assert "cypress/e2e" in result.output
        assert "Pytest" not in result.output

    def test_templates_none_found(self):
        result = runner.invoke(app, ["templates", "--framework", "Nothing"])

        assert result.exit_code == 0
        assert "No templates found" in result.output


@pytest.mark.asyncio
class TestSyncCommand:
    """Test the one-off sync command."""

    @patch("testgen.interfaces.cli._load_config")
    @patch("testgen.clients.github.GitHubClient")
    async def test_sync_lists_files(self, mock_client_class, mock_load_config):
        mock_load_config.return_value = AppConfig(storage=StorageConfig())
        github = FakeGitHubClient(files=SAMPLE_TREE, repositories=[remote_repository()])
        mock_client_class.return_value = github

        await _sync_async("octo/app", "token-123", None)

        assert github.closed
        assert github.content_calls == {}
        assert "src" in github.listed_dirs

    @patch("testgen.interfaces.cli._load_config")
    @patch("testgen.clients.github.GitHubClient")
    async def test_sync_unknown_repository(self, mock_client_class, mock_load_config):
        mock_load_config.return_value = AppConfig()
        mock_client_class.return_value = FakeGitHubClient(repositories=[remote_repository()])

        with pytest.raises(typer.Exit):
            await _sync_async("octo/missing", "token-123", None)
