"""Tests for the CLI module."""

from datetime import timedelta
from unittest.mock import MagicMock

from click.testing import CliRunner

import gmail_digest.cli as cli_module
from gmail_digest.cli import cli
from gmail_digest.constants import CREDENTIALS_ENV_VAR
from gmail_digest.errors import TokenError
from gmail_digest.report import group_messages


def test_cli_help():
    """CLI --help should work and show commands."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "today" in result.output
    assert "recent" in result.output
    assert "auth" in result.output


def test_cli_version():
    """CLI --version should show version."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_today_without_credentials_env(tmp_path, monkeypatch):
    """Missing credentials env var should show a clear error."""
    monkeypatch.delenv(CREDENTIALS_ENV_VAR, raising=False)

    runner = CliRunner()
    result = runner.invoke(cli, ["--token-file", str(tmp_path / "token.json"), "today"])
    assert result.exit_code != 0
    assert CREDENTIALS_ENV_VAR in result.output
    assert not (tmp_path / "token.json").exists()


def test_today_with_unreadable_credentials(tmp_path, monkeypatch):
    monkeypatch.setenv(CREDENTIALS_ENV_VAR, str(tmp_path / "missing.json"))

    runner = CliRunner()
    result = runner.invoke(cli, ["today"])
    assert result.exit_code != 0
    assert "Unable to read credentials file" in result.output


def test_today_prints_subjects_and_validity(monkeypatch):
    monkeypatch.setattr(cli_module, "_connect", lambda token_file: (MagicMock(), timedelta(seconds=3599.6)))
    monkeypatch.setattr(cli_module, "list_todays_subjects", lambda service: ["Lunch?", "[JIRA] ABC-1 updated"])

    runner = CliRunner()
    result = runner.invoke(cli, ["today"])

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "Lunch?",
        "[JIRA] ABC-1 updated",
        "Token valid for: 1:00:00",
    ]


def test_recent_prints_grouped_report(monkeypatch):
    report = group_messages([("Hi", "Jane <jane@example.com>"), ("Bill", "billing@shop.io")])
    monkeypatch.setattr(cli_module, "_connect", lambda token_file: (MagicMock(), timedelta(minutes=5)))
    monkeypatch.setattr(cli_module, "recent_non_subscription_report", lambda service: report)

    runner = CliRunner()
    result = runner.invoke(cli, ["recent"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[:3] == ["example.com", "  Jane <jane@example.com>", "    - Hi"]
    assert "shop.io" in lines
    assert lines[-1] == "Token valid for: 0:05:00"


def test_token_error_is_reported(monkeypatch):
    def fail(token_file):
        raise TokenError("Unable to refresh token: invalid_grant")

    monkeypatch.setattr(cli_module, "_connect", fail)

    runner = CliRunner()
    result = runner.invoke(cli, ["recent"])

    assert result.exit_code == 1
    assert "Unable to refresh token" in result.output
    assert "Token valid for" not in result.output
