"""Settings loading and logging setup."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml  # type: ignore[import-untyped]
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from game.state import BOARD_HEIGHT, BOARD_WIDTH, TICK_RATE

# Environment variable -> settings field
ENV_VARS = {
    "SNAKE_LOG_LEVEL": "log_level",
    "SNAKE_LOG_FILE": "log_file",
    "SNAKE_SEED": "seed",
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    """Runtime settings.

    Only ambient concerns are configurable. Board size and tick rate are
    fixed for every run and exposed read-only.
    """

    model_config = ConfigDict(extra="forbid")

    log_level: str = "WARNING"
    log_file: Optional[Path] = None
    seed: Optional[int] = None

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def width(self) -> int:
        return BOARD_WIDTH

    @property
    def height(self) -> int:
        return BOARD_HEIGHT

    @property
    def tick_rate(self) -> int:
        return TICK_RATE

    @property
    def tick_interval(self) -> float:
        """Seconds between ticks."""
        return 1.0 / TICK_RATE


def load_config(config_path: str | Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    with open(config_path) as f:
        try:
            result = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"{config_path}: {e}") from e
    if not isinstance(result, dict):
        raise ValueError(f"{config_path}: expected a mapping at top level")
    return result


def load_settings(
    config_path: str | Path | None = None,
    env_file: str | Path | None = ".env",
    **overrides: Any,
) -> Settings:
    """Build Settings from a .env file, an optional YAML file and the environment.

    Later sources win: YAML file, then environment, then keyword overrides
    whose value is not None.
    """
    if env_file is not None:
        load_dotenv(env_file)

    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(load_config(config_path))

    for var, name in ENV_VARS.items():
        if os.environ.get(var):
            values[name] = os.environ[var]

    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)


def configure_logging(settings: Settings) -> None:
    """Send logs to the configured file, or nowhere.

    Stdout carries the game frames, so logs never go to the terminal.

    Raises:
        OSError: If the log file can't be opened; existing handlers are kept
    """
    if settings.log_file is None:
        handler: logging.Handler = logging.NullHandler()
    else:
        handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(settings.log_level)
