"""Filesystem path utilities for Common Ground."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

APP_NAME = "common-ground"
HOME_ENV_VAR = "COMMON_GROUND_HOME"
POLICY_FILENAME = "policy.json"
LOG_FILENAME = "common-ground.log"


def default_app_data_dir() -> Path:
    return Path.home() / f".{APP_NAME}"


@lru_cache(maxsize=1)
def app_data_dir() -> Path:
    """Return the base application data directory, ensuring it exists."""
    override = os.environ.get(HOME_ENV_VAR)
    base = Path(override).expanduser() if override else default_app_data_dir()
    base.mkdir(parents=True, exist_ok=True)
    return base


def reset_app_data_dir() -> None:
    """Forget the cached directory so ``COMMON_GROUND_HOME`` is re-read."""
    app_data_dir.cache_clear()


def policy_path() -> Path:
    return app_data_dir() / POLICY_FILENAME


def log_path() -> Path:
    return app_data_dir() / LOG_FILENAME


def ensure_app_structure() -> None:
    app_data_dir()
