"""Tests for configuration loading."""

from pathlib import Path

import pytest

from cookie_scout.core import config
from cookie_scout.core.config import DEFAULT_TIMEOUT, load_config, load_settings
from cookie_scout.core.exceptions import ConfigError
from cookie_scout.core.scoring import DEFAULT_WEIGHTS


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep user config files and env vars out of these tests."""
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATHS", [tmp_path / "absent.toml"])
    monkeypatch.delenv("COOKIE_SCOUT_TIMEOUT", raising=False)
    monkeypatch.delenv("COOKIE_SCOUT_USER_AGENT", raising=False)


def test_defaults_without_config():
    settings = load_settings()
    assert settings.timeout == DEFAULT_TIMEOUT
    assert "Mozilla" in settings.user_agent
    assert settings.signatures is None
    assert settings.weights == DEFAULT_WEIGHTS


def test_load_config_missing_default_is_empty():
    assert load_config() == {}


def test_explicit_missing_config_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.toml")


def test_config_file_values(tmp_path):
    path = tmp_path / "cookie-scout.toml"
    path.write_text(
        'timeout = 5\nuser_agent = "scout/1.0"\nsignatures = "sigs.yaml"\n'
        "\n[weights]\ntracker_signature = 8\n"
    )
    settings = load_settings(path)
    assert settings.timeout == 5.0
    assert settings.user_agent == "scout/1.0"
    assert settings.signatures == Path("sigs.yaml")
    assert settings.weights.tracker_signature == 8
    assert settings.weights.marketing_cookie == DEFAULT_WEIGHTS.marketing_cookie


def test_env_overrides_config(tmp_path, monkeypatch):
    path = tmp_path / "cookie-scout.toml"
    path.write_text("timeout = 5\n")
    monkeypatch.setenv("COOKIE_SCOUT_TIMEOUT", "12.5")
    monkeypatch.setenv("COOKIE_SCOUT_USER_AGENT", "env-agent")
    settings = load_settings(path)
    assert settings.timeout == 12.5
    assert settings.user_agent == "env-agent"


def test_invalid_toml_raises(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("timeout = = 3\n")
    with pytest.raises(ConfigError):
        load_settings(path)


def test_weights_must_be_a_table(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("weights = 3\n")
    with pytest.raises(ConfigError):
        load_settings(path)


def test_invalid_timeout_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("COOKIE_SCOUT_TIMEOUT", "-1")
    with pytest.raises(ConfigError):
        load_settings()


def test_invalid_weight_raises(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[weights]\nunknown_cookie = 100\n")
    with pytest.raises(ConfigError):
        load_settings(path)
