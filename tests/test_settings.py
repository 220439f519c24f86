"""Unit tests for user settings."""

import json
import logging
import unittest
import tempfile
import shutil
from pathlib import Path
from unittest.mock import patch

from rawpad.constants import EditorConstants
from rawpad.settings import (
    EditorSettings, default_settings_path, load_settings, save_settings,
    validate_setting,
)


class TestSettings(unittest.TestCase):
    """Test loading and saving the settings file."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = Path(self.temp_dir) / "settings.json"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write(self, data):
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def test_missing_file_gives_defaults(self):
        settings = load_settings(self.path)
        self.assertEqual(settings, EditorSettings())
        self.assertTrue(settings.show_status_bar)
        self.assertEqual(settings.escape_timeout, EditorConstants.ESCAPE_SEQUENCE_TIMEOUT)

    def test_save_and_load(self):
        settings = EditorSettings(show_status_bar=False, escape_timeout=0.2)
        self.assertTrue(save_settings(settings, self.path))
        self.assertEqual(load_settings(self.path), settings)
        self.assertFalse(self.path.with_suffix('.tmp').exists())

    def test_save_creates_directory(self):
        nested = Path(self.temp_dir) / "a" / "b" / "settings.json"
        self.assertTrue(save_settings(EditorSettings(), nested))
        self.assertTrue(nested.exists())

    def test_invalid_values_fall_back_per_key(self):
        self.write({"show_welcome": False, "confirm_quit": "yes", "escape_timeout": 5})
        with self.assertLogs("rawpad.settings", level=logging.WARNING) as logs:
            settings = load_settings(self.path)
        self.assertFalse(settings.show_welcome)
        self.assertTrue(settings.confirm_quit)
        self.assertEqual(settings.escape_timeout, EditorConstants.ESCAPE_SEQUENCE_TIMEOUT)
        self.assertEqual(len(logs.records), 2)

    def test_unknown_keys_are_ignored(self):
        self.write({"font_name": "Courier"})
        with self.assertLogs("rawpad.settings", level=logging.WARNING):
            settings = load_settings(self.path)
        self.assertEqual(settings, EditorSettings())

    def test_corrupt_file_gives_defaults(self):
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("rawpad.settings", level=logging.WARNING):
            self.assertEqual(load_settings(self.path), EditorSettings())

    def test_non_dict_file_gives_defaults(self):
        self.write([1, 2, 3])
        with self.assertLogs("rawpad.settings", level=logging.WARNING):
            self.assertEqual(load_settings(self.path), EditorSettings())

    def test_save_failure_returns_false(self):
        with patch("rawpad.settings.json.dump", side_effect=OSError("disk gone")):
            with self.assertLogs("rawpad.settings", level=logging.WARNING):
                self.assertFalse(save_settings(EditorSettings(), self.path))
        self.assertFalse(self.path.with_suffix('.tmp').exists())

    def test_default_path_uses_platformdirs(self):
        with patch("rawpad.settings.platformdirs.user_config_dir", return_value=self.temp_dir):
            self.assertEqual(default_settings_path(), self.path)


def test_validate_setting():
    assert validate_setting("show_status_bar", True)
    assert not validate_setting("show_status_bar", 1)
    assert validate_setting("escape_timeout", 0)
    assert validate_setting("escape_timeout", 0.5)
    assert not validate_setting("escape_timeout", True)
    assert not validate_setting("escape_timeout", -0.1)
    assert not validate_setting("escape_timeout", "0.1")
    assert not validate_setting("unknown", 1)
