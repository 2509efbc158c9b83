"""Configuration service for the Pomodoro settings.

This module provides the SettingsService class, the single source of truth
for the four timer settings. It handles:

- Loading and saving config.json under the platform config directory
- Partial updates that silently skip zero, negative, or missing values
- Resetting back to the defaults
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import user_config_dir
from pydantic import ValidationError

from tomato_cli.models.config_models import PomodoroSettings
from tomato_cli.utils.logger import get_logger

# CLI option name -> settings field
SETTING_FIELDS = {
    "work": "work_minutes",
    "short_break": "short_break_minutes",
    "long_break": "long_break_minutes",
    "cycles": "cycles_before_long_break",
}


class SettingsService:
    """Loads, updates, and persists :class:`PomodoroSettings`.

    Settings live in their own file and are independent of the saved
    session, so changing a duration never touches a running timer's record.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize the settings service."""
        self.config_dir = config_dir or Path(user_config_dir("tomato_cli"))
        self.config_path = self.config_dir / "config.json"
        self.logger = get_logger()

        self._settings: PomodoroSettings | None = None

    def get(self) -> PomodoroSettings:
        """Get or load the current settings."""
        if self._settings is None:
            self._settings = self._load()
        return self._settings

    def _load(self) -> PomodoroSettings:
        try:
            with open(self.config_path, encoding="utf-8") as f:
                return PomodoroSettings.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            return PomodoroSettings()
        except (OSError, ValidationError) as e:
            self.logger.warning("using default settings, cannot read config: %s", e)
            return PomodoroSettings()

    def save(self) -> None:
        """Save the current settings to disk."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.get().model_dump_json(indent=4))

            # Set file permissions
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def set(
        self,
        work: int | None = None,
        short_break: int | None = None,
        long_break: int | None = None,
        cycles: int | None = None,
    ) -> list[str]:
        """Apply positive values and return the names of those applied."""
        requested = {
            "work": work,
            "short_break": short_break,
            "long_break": long_break,
            "cycles": cycles,
        }
        updates = {
            SETTING_FIELDS[name]: value
            for name, value in requested.items()
            if value is not None and value > 0
        }
        if not updates:
            return []

        self._settings = self.get().model_copy(update=updates)
        self.save()
        self.logger.info("settings updated: %s", updates)
        return [name for name, field in SETTING_FIELDS.items() if field in updates]

    def reset(self) -> PomodoroSettings:
        """Reset settings to defaults."""
        try:
            self.config_path.unlink(missing_ok=True)
        except OSError as e:
            raise RuntimeError(f"Failed to reset config: {e}") from e
        self._settings = PomodoroSettings()
        self.logger.info("settings reset to defaults")
        return self._settings


@lru_cache(maxsize=1)
def get_settings_service() -> SettingsService:
    """Get a cached SettingsService instance."""
    return SettingsService()
