"""Persistent engine settings.

Settings are stored as JSON in an OS-appropriate config directory. Loading
never fails: missing, unreadable or malformed files fall back to defaults
with a logged warning.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EngineConstants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSettings:
    """User-adjustable layout defaults."""
    viewport_width: int = EngineConstants.DEFAULT_VIEWPORT_WIDTH
    font_name: str = EngineConstants.DEFAULT_FONT_NAME
    font_size: float = EngineConstants.DEFAULT_FONT_SIZE
    info_box_padding: int = EngineConstants.INFO_BOX_PADDING


_FIELD_TYPES = {
    "viewport_width": int,
    "font_name": str,
    "font_size": (int, float),
    "info_box_padding": int,
}


class SettingsStore:
    """Reads and writes ``EngineSettings`` as ``settings.json``."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir) if config_dir else Path(platformdirs.user_config_dir("textengine"))
        self._settings_file = self._config_dir / "settings.json"

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _read(self) -> Dict[str, Any]:
        if not self._settings_file.exists():
            return {}
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return {}
        return data

    def load(self) -> EngineSettings:
        """Load settings, using defaults for anything missing or invalid."""
        data = self._read()
        updates = {}
        for name, expected in _FIELD_TYPES.items():
            if name not in data:
                continue
            value = data[name]
            # bool is an int subclass but never a valid setting value
            if isinstance(value, bool) or not isinstance(value, expected):
                logger.warning(f"Ignoring setting {name}={value!r}")
                continue
            updates[name] = value
        return replace(EngineSettings(), **updates)

    def save(self, settings: EngineSettings) -> bool:
        """Save settings atomically.

        Returns:
            True if save was successful, False otherwise.
        """
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")
            return False

        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(asdict(settings), f, indent=2)
            temp_file.replace(self._settings_file)
            return True
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False


def load_settings() -> EngineSettings:
    return SettingsStore().load()


def save_settings(settings: EngineSettings) -> bool:
    return SettingsStore().save(settings)
