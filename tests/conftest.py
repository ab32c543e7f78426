from __future__ import annotations

import logging

import pytest

from common_ground.core import logging_config, paths


@pytest.fixture(autouse=True)
def isolated_app_home(tmp_path, monkeypatch):
    monkeypatch.setenv(paths.HOME_ENV_VAR, str(tmp_path / "home"))
    paths.reset_app_data_dir()
    yield tmp_path / "home"
    logging_config.reset_logging(reconfigure=False)
    # configure_logging detaches the app logger from root; caplog needs it back.
    logging.getLogger(logging_config.LOGGER_NAME).propagate = True
    paths.reset_app_data_dir()
