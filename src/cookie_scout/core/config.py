"""Configuration loading: optional TOML file plus environment overrides."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cookie_scout.core.exceptions import ConfigError
from cookie_scout.core.scoring import DEFAULT_WEIGHTS, PenaltyWeights

DEFAULT_CONFIG_PATHS = [
    Path.home() / ".config" / "cookie-scout" / "config.toml",
    Path("cookie-scout.toml"),
]

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    signatures: Path | None = None  # alternative signature table
    weights: PenaltyWeights = DEFAULT_WEIGHTS


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Searches default paths if no explicit path is given.
    Returns an empty dict if no config file is found.
    """
    paths = [path] if path is not None else DEFAULT_CONFIG_PATHS

    for p in paths:
        if p.exists():
            try:
                with open(p, "rb") as f:
                    return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid config file {p}: {e}") from e

    if path is not None:
        raise ConfigError(f"Config file not found: {path}")
    return {}


def load_settings(path: Path | None = None) -> Settings:
    """Build settings: COOKIE_SCOUT_* env vars → config.toml → defaults."""
    config = load_config(path)

    values: dict[str, Any] = {}
    for key in ("timeout", "user_agent", "signatures"):
        if key in config:
            values[key] = config[key]

    env_timeout = os.environ.get("COOKIE_SCOUT_TIMEOUT")
    if env_timeout:
        values["timeout"] = env_timeout
    env_agent = os.environ.get("COOKIE_SCOUT_USER_AGENT")
    if env_agent:
        values["user_agent"] = env_agent

    overrides = config.get("weights", {})
    if not isinstance(overrides, dict):
        raise ConfigError("[weights] must be a table")
    if overrides:
        values["weights"] = DEFAULT_WEIGHTS.with_overrides(overrides)

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
