"""Unit tests for settings persistence."""

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from textengine.constants import EngineConstants
from textengine.settings import EngineSettings, SettingsStore, load_settings, save_settings


class TestSettingsStore(unittest.TestCase):
    """Test loading and saving engine settings."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_dir = Path(self._tmp.name) / "config"
        self.store = SettingsStore(self.config_dir)

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, content: str):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.store.settings_file.write_text(content, encoding="utf-8")

    def test_defaults_when_missing(self):
        settings = self.store.load()
        self.assertEqual(settings, EngineSettings())
        self.assertEqual(settings.info_box_padding, EngineConstants.INFO_BOX_PADDING)

    def test_save_and_load(self):
        settings = EngineSettings(viewport_width=80, font_name="Courier", font_size=10.5, info_box_padding=4)
        self.assertTrue(self.store.save(settings))
        self.assertEqual(self.store.load(), settings)
        self.assertFalse(self.store.settings_file.with_suffix(".tmp").exists())

    def test_invalid_json_falls_back_to_defaults(self):
        self._write("{not json")
        with self.assertLogs("textengine.settings", level="WARNING"):
            self.assertEqual(self.store.load(), EngineSettings())

    def test_non_dict_falls_back_to_defaults(self):
        self._write(json.dumps([1, 2, 3]))
        with self.assertLogs("textengine.settings", level="WARNING"):
            self.assertEqual(self.store.load(), EngineSettings())

    def test_wrong_types_are_ignored(self):
        self._write(json.dumps({
            "viewport_width": "wide",
            "font_size": 10.5,
            "info_box_padding": True,
            "unknown": 1,
        }))
        with self.assertLogs("textengine.settings", level="WARNING"):
            settings = self.store.load()
        self.assertEqual(settings.viewport_width, EngineConstants.DEFAULT_VIEWPORT_WIDTH)
        self.assertEqual(settings.font_size, 10.5)
        self.assertEqual(settings.info_box_padding, EngineConstants.INFO_BOX_PADDING)

    def test_save_failure_returns_false(self):
        # A file where the config directory should be makes mkdir fail
        self.config_dir.parent.mkdir(parents=True, exist_ok=True)
        self.config_dir.write_text("in the way")
        with self.assertLogs("textengine.settings", level="WARNING"):
            self.assertFalse(self.store.save(EngineSettings()))

    def test_module_helpers_use_platform_config_dir(self):
        with patch("textengine.settings.platformdirs.user_config_dir", return_value=str(self.config_dir)):
            self.assertEqual(SettingsStore().settings_file, self.config_dir / "settings.json")
            self.assertTrue(save_settings(EngineSettings(viewport_width=40)))
            self.assertEqual(load_settings().viewport_width, 40)


if __name__ == '__main__':
    unittest.main()
