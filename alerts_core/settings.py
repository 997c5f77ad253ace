"""
File-backed configuration for the screen alerts runtime.
"""

from __future__ import annotations

import json
import numbers
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from screen_alerts.screen_alerts import logger as app_logger

_LOGGER = app_logger.get_logger()

CONFIG_ENV_VAR = "SCREEN_ALERTS_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "screen-alerts" / "settings.json"

DEFAULT_DURATION_SECONDS = 2.0
DEFAULT_FADE_SECONDS = 0.15
_MAX_DURATION = 3600.0
_MAX_FADE = 10.0


class SettingsError(ValueError):
    """Raised when a settings file cannot be read or is malformed."""


@dataclass(eq=True)
class AlertSettings:
    default_duration: float = DEFAULT_DURATION_SECONDS
    fade_in_seconds: float = DEFAULT_FADE_SECONDS
    fade_out_seconds: float = DEFAULT_FADE_SECONDS
    style_overrides: Dict[str, Any] = field(default_factory=dict)


def load_settings_file(path: Path) -> Dict[str, Any]:
    """Read the raw settings object, raising :class:`SettingsError` on bad input."""
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Unable to read settings: {path}") from exc

    try:
        raw = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise SettingsError(f"Settings file is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise SettingsError("Settings root must be a JSON object.")
    return raw


class AlertSettingsManager:
    """Loads persisted settings from a JSON file and clamps invalid data."""

    def __init__(self, path: Optional[Path] = None) -> None:
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
        self.path = Path(path)

    def read_settings(self) -> AlertSettings:
        if not self.path.exists():
            return AlertSettings()

        try:
            raw = load_settings_file(self.path)
        except SettingsError as exc:
            _LOGGER.warning("Using default settings: {}", exc)
            return AlertSettings()

        return AlertSettings(
            default_duration=self._read_seconds(raw, "default_duration", DEFAULT_DURATION_SECONDS, _MAX_DURATION),
            fade_in_seconds=self._read_seconds(raw, "fade_in_seconds", DEFAULT_FADE_SECONDS, _MAX_FADE),
            fade_out_seconds=self._read_seconds(raw, "fade_out_seconds", DEFAULT_FADE_SECONDS, _MAX_FADE),
            style_overrides=self._read_style(raw),
        )

    def _read_seconds(self, raw: Mapping[str, Any], name: str, default: float, maximum: float) -> float:
        value = raw.get(name)
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            _LOGGER.warning("Setting {} has unexpected type {}.", name, type(value).__name__)
            return default
        if value < 0 or value > maximum:
            _LOGGER.warning("Invalid {} {} found in settings. Clamping to safe bounds.", name, value)
        return max(0.0, min(maximum, float(value)))

    def _read_style(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        value = raw.get("style")
        if value is None:
            return {}
        if not isinstance(value, dict):
            _LOGGER.warning("Setting style has unexpected type {}.", type(value).__name__)
            return {}
        return dict(value)
