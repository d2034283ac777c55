"""Settings persistence for the modeline.

Stores user settings, user-defined presets and major-mode preset bindings in
a JSON file in the OS-appropriate config directory:

    {
      "settings": {"bar_width": 2, ...},
      "presets": {"mine": {"left": [...], "right": [...]}},
      "modes": {"python": "mine"}
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import platformdirs

from .constants import ModelineConstants

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
PRESETS_KEY = "presets"
MODES_KEY = "modes"


class SettingsPersistence:
    """Manages persistent storage of modeline settings.

    Everything lives in a single JSON file that is cached in memory after
    the first read and written atomically.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize settings persistence.

        Args:
            config_dir: Directory for the settings file; defaults to the
                platform config directory for "modeline"
        """
        self._config_dir = Path(config_dir or platformdirs.user_config_dir("modeline"))
        self._settings_file = self._config_dir / "settings.json"
        self._cache: Optional[Dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._settings_file

    def _ensure_config_dir(self) -> None:
        """Ensure the config directory exists."""
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except (OSError, PermissionError) as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")

    def _load_all(self) -> Dict[str, Any]:
        """Load the whole settings document from disk.

        Returns:
            The parsed document, or an empty dict if the file doesn't
            exist or can't be read.
        """
        if self._cache is not None:
            return self._cache

        if not self._settings_file.exists():
            self._cache = {}
            return self._cache

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, PermissionError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            self._cache = {}
            return self._cache

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}
        self._cache = data
        return self._cache

    def _save_all(self, data: Dict[str, Any]) -> bool:
        """Save the whole settings document atomically.

        Returns:
            True if save was successful, False otherwise.
        """
        self._ensure_config_dir()

        # Temp file + rename so a crash never leaves a half-written file
        temp_file = self._settings_file.with_suffix('.tmp')

        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            temp_file.replace(self._settings_file)
            self._cache = data
            return True

        except (OSError, PermissionError) as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

    def _section(self, key: str) -> Dict[str, Any]:
        section = self._load_all().get(key, {})
        if not isinstance(section, dict):
            logger.warning(f"Settings section {key!r} is not a dict, ignoring")
            return {}
        return section

    def load_settings(self) -> Dict[str, Any]:
        """Load the validated settings.

        Invalid values are dropped with a warning so defaults apply.
        """
        valid = {}
        for key, value in self._section(SETTINGS_KEY).items():
            if self.validate_setting(key, value):
                valid[key] = value
            else:
                logger.warning(f"Ignoring invalid value for setting {key}: {value!r}")
        return valid

    def save_settings(self, settings: Dict[str, Any]) -> bool:
        """Replace the stored settings.

        Returns:
            False if any value is invalid or the file can't be written.
        """
        for key, value in settings.items():
            if not self.validate_setting(key, value):
                logger.warning(f"Refusing to save invalid value for setting {key}: {value!r}")
                return False
        data = dict(self._load_all())
        data[SETTINGS_KEY] = dict(settings)
        return self._save_all(data)

    def load_presets(self) -> Dict[str, Dict[str, List[str]]]:
        """Load user presets as {name: {"left": [...], "right": [...]}}.

        Malformed presets are skipped.
        """
        presets = {}
        for name, layout in self._section(PRESETS_KEY).items():
            if not self._valid_layout(layout):
                logger.warning(f"Ignoring malformed preset {name!r}")
                continue
            presets[name] = {
                'left': list(layout.get('left', [])),
                'right': list(layout.get('right', [])),
            }
        return presets

    def save_preset(self, name: str, left: List[str], right: List[str]) -> bool:
        """Store one user preset, replacing any preset of that name."""
        layout = {'left': list(left), 'right': list(right)}
        if not self._valid_layout(layout):
            return False
        data = dict(self._load_all())
        presets = dict(data.get(PRESETS_KEY) or {})
        presets[name] = layout
        data[PRESETS_KEY] = presets
        return self._save_all(data)

    def load_mode_presets(self) -> Dict[str, str]:
        """Load major-mode -> preset bindings."""
        return {
            mode: preset
            for mode, preset in self._section(MODES_KEY).items()
            if isinstance(preset, str)
        }

    def save_mode_preset(self, mode: str, preset: str) -> bool:
        data = dict(self._load_all())
        modes = dict(data.get(MODES_KEY) or {})
        modes[mode] = preset
        data[MODES_KEY] = modes
        return self._save_all(data)

    @staticmethod
    def _valid_layout(layout: Any) -> bool:
        if not isinstance(layout, dict):
            return False
        for side in ('left', 'right'):
            names = layout.get(side, [])
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                return False
        return True

    def validate_setting(self, key: str, value: Any) -> bool:
        """Validate a setting value.

        Args:
            key: Setting key name.
            value: Setting value to validate.

        Returns:
            True if setting is valid, False otherwise.
        """
        # Integer settings (bar geometry)
        if key in ('bar_width', 'bar_height'):
            if not isinstance(value, int) or isinstance(value, bool):
                return False
            low = 0 if key == 'bar_width' else 1
            return low <= value <= 16

        if key == 'bar_position':
            return value in ModelineConstants.BAR_POSITIONS

        if key == 'buffer_file_name_style':
            return value in ModelineConstants.BUFFER_FILE_NAME_STYLES

        # Boolean settings
        if key in ('bar_visible', 'icons', 'hide_default_encoding', 'auto_presets'):
            return isinstance(value, bool)

        # String settings (colours, faces, preset names)
        if key in ('bar_active_color', 'bar_inactive_color', 'active_face',
                   'inactive_face', 'default_preset'):
            return isinstance(value, str) and bool(value)

        if key == 'word_count_modes':
            return isinstance(value, list) and all(isinstance(m, str) for m in value)

        # Unknown settings are considered valid (forward compatibility)
        return True

    def clear_cache(self) -> None:
        """Clear the in-memory cache of settings."""
        self._cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the shared settings persistence instance.

    Returns:
        The process-wide SettingsPersistence instance.
    """
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
