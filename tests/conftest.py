"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem and desktop
state: every platformdirs location points into *tmp_path*, desktop
notifications are stubbed, and time comes from a controllable clock.
"""

from __future__ import annotations

import logging
import logging.handlers
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from tomato_cli.models.config_models import PomodoroSettings
from tomato_cli.models.focus.state import SessionStore
from tomato_cli.services.notification_service import DesktopNotifier


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float = 0, **kwargs) -> datetime:
        self.current += timedelta(seconds=seconds, **kwargs)
        return self.current


# ---------------------------------------------------------------------------
# Filesystem / desktop isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Redirect config, data and log directories into *tmp_path*."""
    import tomato_cli.utils.logger as logger_mod
    from tomato_cli.services.config_service import get_settings_service

    def _reset_logger():
        logger_mod._logger = None
        existing = logging.getLogger("tomato_cli")
        for handler in list(existing.handlers):
            if isinstance(handler, logging.handlers.RotatingFileHandler):
                existing.removeHandler(handler)
                handler.close()

    _reset_logger()
    get_settings_service.cache_clear()
    with patch(
        "tomato_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")
    ), patch(
        "tomato_cli.services.config_service.user_config_dir",
        return_value=str(tmp_path / "config"),
    ), patch("platformdirs.user_data_dir", return_value=str(tmp_path / "data")):
        yield tmp_path
    get_settings_service.cache_clear()
    _reset_logger()


@pytest.fixture(autouse=True)
def notify_mock():
    """Never pop real desktop notifications from tests."""
    with patch.object(DesktopNotifier, "notify", return_value=True) as mock:
        yield mock


# ---------------------------------------------------------------------------
# Timer building blocks
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 5, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture()
def settings() -> PomodoroSettings:
    return PomodoroSettings()


@pytest.fixture()
def store(tmp_path, clock) -> SessionStore:
    return SessionStore(tmp_path / "state", clock=clock)
