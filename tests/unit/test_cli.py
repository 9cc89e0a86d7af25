"""Tests for the tcm command line."""
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from tcmclient import SQLiteSession, TestCaseClient, UnauthorizedError, UploadProgress
from tcmclient.cli import main as cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def session_path(tmp_path, monkeypatch):
    """Keep the CLI session file inside the test directory."""
    path = tmp_path / "session.session"
    monkeypatch.setattr(cli, 'get_session_path', lambda: path)
    return path


def stored_token(path):
    with SQLiteSession(str(path)) as session:
        return session.get()


class TestLoginLogout:

    def test_login_with_option(self, session_path):
        result = runner.invoke(cli.app, ["login", "--token", "abc"])

        assert result.exit_code == 0
        assert "Token stored" in result.output
        assert stored_token(session_path) == "abc"

    def test_login_prompts(self, session_path):
        result = runner.invoke(cli.app, ["login"], input="secret\n")

        assert result.exit_code == 0
        assert stored_token(session_path) == "secret"

    def test_login_rejects_blank_token(self, session_path):
        result = runner.invoke(cli.app, ["login", "--token", "   "])

        assert result.exit_code == 1
        assert stored_token(session_path) is None

    def test_logout(self, session_path):
        runner.invoke(cli.app, ["login", "--token", "abc"])

        result = runner.invoke(cli.app, ["logout"])

        assert result.exit_code == 0
        assert "Logged out" in result.output
        assert stored_token(session_path) is None

    def test_logout_without_session(self):
        result = runner.invoke(cli.app, ["logout"])

        assert result.exit_code == 0
        assert "No active session" in result.output


class TestApiCommands:

    def test_menus_table(self, monkeypatch):
        fetch = AsyncMock(return_value={'menus': [{'id': 'm1', 'name': 'Login flow'}]})
        monkeypatch.setattr(TestCaseClient, 'get_menus_by_level', fetch)

        result = runner.invoke(cli.app, ["menus", "--level", "2"])

        assert result.exit_code == 0
        assert "Login flow" in result.output
        fetch.assert_awaited_once_with(2)

    def test_menus_children(self, monkeypatch):
        fetch = AsyncMock(return_value={'menus': []})
        monkeypatch.setattr(TestCaseClient, 'get_smoke_menu_children', fetch)

        result = runner.invoke(cli.app, ["menus", "--parent", "m1", "--smoke"])

        assert result.exit_code == 0
        fetch.assert_awaited_once_with("m1")

    def test_stats_json(self, monkeypatch):
        monkeypatch.setattr(TestCaseClient, 'get_stats', AsyncMock(return_value={'passed': 3, 'failed': 1}))

        result = runner.invoke(cli.app, ["stats"])

        assert result.exit_code == 0
        assert '"passed": 3' in result.output

    def test_unauthorized_hint(self, monkeypatch):
        monkeypatch.setattr(TestCaseClient, 'get_current_user', AsyncMock(side_effect=UnauthorizedError()))

        result = runner.invoke(cli.app, ["whoami"])

        assert result.exit_code == 1
        assert UnauthorizedError.MESSAGE in result.output
        assert "tcm login" in result.output

    def test_network_error(self):
        result = runner.invoke(cli.app, ["--base-url", "http://127.0.0.1:9/api", "cases", "m1"])

        assert result.exit_code == 1
        assert "Network error" in result.output

    def test_base_url_from_env(self, monkeypatch):
        monkeypatch.setattr(TestCaseClient, 'get_stats', AsyncMock(return_value={}))

        result = runner.invoke(cli.app, ["stats"], env={"TCM_BASE_URL": "http://localhost:3000/api"})

        assert result.exit_code == 0
        assert cli.state['base_url'] == "http://localhost:3000/api"


class TestUploadCommand:

    def test_upload_reports_retries(self, monkeypatch, sample_file):
        seen = {}

        async def fake_upload(self, menu_id, file, options):
            seen.update(menu_id=menu_id, file=file, options=options)
            options.on_progress(UploadProgress.retrying(1, 2))
            return {'imported': 42}

        monkeypatch.setattr(TestCaseClient, 'upload_test_cases', fake_upload)

        result = runner.invoke(cli.app, ["upload", "menu_1", str(sample_file), "--retries", "2", "--timeout-ms", "1000"])

        assert result.exit_code == 0
        assert "Retrying upload (1/2)..." in result.output
        assert '"imported": 42' in result.output
        assert seen['menu_id'] == "menu_1"
        assert seen['options'].max_retries == 2
        assert seen['options'].timeout_ms == 1000

    def test_upload_rejects_bad_options(self, sample_file):
        result = runner.invoke(cli.app, ["upload", "menu_1", str(sample_file), "--retries=-1"])

        assert result.exit_code == 1
        assert "max_retries" in result.output

    def test_upload_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_bytes(b"")

        result = runner.invoke(cli.app, ["upload", "menu_1", str(path)])

        assert result.exit_code == 1
        assert "Cannot upload empty file" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_upload_missing_file(self, tmp_path):
        result = runner.invoke(cli.app, ["upload", "menu_1", str(tmp_path / "missing.csv")])

        assert result.exit_code != 0
