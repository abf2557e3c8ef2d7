"""Tests for the cookie-scout command."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from cookie_scout.cli.main import cli
from cookie_scout.core.base import Cookie, PageSnapshot
from cookie_scout.core.config import Settings
from cookie_scout.core.exceptions import FetchError


@pytest.fixture
def snapshot() -> PageSnapshot:
    return PageSnapshot(
        url="https://example.com",
        cookies=(
            Cookie(name="session_id", secure=True, http_only=True, same_site="Strict"),
            Cookie(name="_fbp", domain=".example.com", same_site="None"),
        ),
        resources=(
            "https://www.google-analytics.com/analytics.js",
            *(f"https://cdn{i}.thirdparty{i}.net/x.js" for i in range(20)),
        ),
    )


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _invoke(runner, snapshot, *args):
    fetch = AsyncMock(return_value=snapshot)
    with (
        patch("cookie_scout.cli.main.fetch_snapshot", fetch),
        patch("cookie_scout.cli.main.load_settings", return_value=Settings()),
    ):
        result = runner.invoke(cli, list(args))
    return result, fetch


def test_rich_output(runner, snapshot):
    result, fetch = _invoke(runner, snapshot, "example.com")
    assert result.exit_code == 0, result.output
    assert fetch.await_args.args[0] == "https://example.com"
    assert "PRIVACY SCORE" in result.output
    assert "COOKIES DETECTED" in result.output
    assert "session_id" in result.output
    assert "google-analytics" in result.output
    assert "THIRD-PARTY DOMAINS" in result.output
    assert "... and" in result.output  # 21 domains, only 15 listed
    assert "Tip:" in result.output


def test_verbose_output(runner, snapshot):
    result, _ = _invoke(runner, snapshot, "-v", "https://example.com")
    assert result.exit_code == 0, result.output
    assert "SameSite:" in result.output
    assert "Purpose:" in result.output
    assert "Privacy Impact" in result.output
    assert "... and" not in result.output
    assert "Verbose mode:" in result.output


def test_json_output(runner, snapshot):
    result, _ = _invoke(runner, snapshot, "--format", "json", "example.com")
    assert result.exit_code == 0, result.output
    report = json.loads(result.output)
    # cookies 0 + 7, trackers 2 * 5, domains (21 - 5) * 1
    assert report["score"] == 67
    assert report["rating"] == "Moderate"
    assert report["third_party_count"] == 21
    assert [c["category"] for c in report["cookies"]] == ["Essential", "Marketing"]


def test_timeout_option_is_passed_to_fetch(runner, snapshot):
    result, fetch = _invoke(runner, snapshot, "--timeout", "3", "--format", "json", "example.com")
    assert result.exit_code == 0, result.output
    assert fetch.await_args.kwargs["timeout"] == 3.0


def test_fetch_failure_exits_non_zero(runner):
    fetch = AsyncMock(side_effect=FetchError("https://down.example", "connection refused"))
    with (
        patch("cookie_scout.cli.main.fetch_snapshot", fetch),
        patch("cookie_scout.cli.main.load_settings", return_value=Settings()),
    ):
        result = runner.invoke(cli, ["down.example"])
    assert result.exit_code == 1


def test_missing_config_file_exits_non_zero(runner, tmp_path):
    result = runner.invoke(cli, ["--config", str(tmp_path / "absent.toml"), "example.com"])
    assert result.exit_code == 2


def test_missing_url_is_usage_error(runner):
    result = runner.invoke(cli, [])
    assert result.exit_code == 2


def test_short_help_flag(runner):
    result = runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "--verbose" in result.output
    assert "URL" in result.output


def test_invalid_timeout_is_rejected(runner):
    result = runner.invoke(cli, ["--timeout", "0", "example.com"])
    assert result.exit_code == 2


def test_version_flag(runner):
    result = runner.invoke(cli, ["-V"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_help_describes_format_option(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Output format." in result.output
