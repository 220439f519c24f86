"""User settings for the editor.

Settings live in a JSON file in the OS-appropriate config directory.
A missing file means defaults; a broken one is logged and ignored.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)

APP_NAME = "rawpad"


@dataclass
class EditorSettings:
    """Options that change how the editor behaves."""
    show_status_bar: bool = True
    show_welcome: bool = True
    confirm_quit: bool = True
    escape_timeout: float = EditorConstants.ESCAPE_SEQUENCE_TIMEOUT

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def default_settings_path() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME)) / "settings.json"


def validate_setting(key: str, value: Any) -> bool:
    """Validate a setting value.

    Args:
        key: Setting key name.
        value: Setting value to validate.

    Returns:
        True if the value may be used for ``key``.
    """
    if key in ("show_status_bar", "show_welcome", "confirm_quit"):
        return isinstance(value, bool)
    if key == "escape_timeout":
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return 0 <= value <= 1
    return False


def load_settings(path: Optional[Path] = None) -> EditorSettings:
    """Load settings, falling back to defaults key by key.

    Args:
        path: Settings file; defaults to the user config directory.

    Returns:
        The settings to use. Never raises for a bad or missing file.
    """
    path = path or default_settings_path()
    settings = EditorSettings()
    if not path.exists():
        return settings

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not load settings from {path}: {e}")
        return settings

    if not isinstance(data, dict):
        logger.warning("Settings file has invalid format (not a dict), ignoring")
        return settings

    known = {f.name for f in fields(EditorSettings)}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Unknown setting {key!r} ignored")
        elif not validate_setting(key, value):
            logger.warning(f"Invalid value {value!r} for setting {key!r} ignored")
        else:
            setattr(settings, key, value)
    return settings


def save_settings(settings: EditorSettings, path: Optional[Path] = None) -> bool:
    """Write settings atomically (temp file + rename).

    Returns:
        True if save was successful, False otherwise.
    """
    path = path or default_settings_path()
    temp_file = path.with_suffix('.tmp')
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(settings.to_dict(), f, indent=2)
        temp_file.replace(path)
        return True
    except OSError as e:
        logger.warning(f"Could not save settings to {path}: {e}")
        try:
            if temp_file.exists():
                temp_file.unlink()
        except OSError:
            pass
        return False
