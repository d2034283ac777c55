"""Unit tests for settings persistence."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from modeline.settings import ModelineSettings
from modeline.settings_persistence import SettingsPersistence, get_persistence


class TestSettingsPersistence(unittest.TestCase):
    """Test settings persistence functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.persistence = SettingsPersistence(config_dir=Path(self.temp_dir))

    def tearDown(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_save_and_load_settings(self):
        """Test saving and loading settings."""
        settings = {"bar_width": 2, "icons": False, "bar_position": "end"}

        self.assertTrue(self.persistence.save_settings(settings))

        # Fresh instance reads from disk
        reloaded = SettingsPersistence(config_dir=Path(self.temp_dir))
        self.assertEqual(reloaded.load_settings(), settings)

    def test_load_without_file(self):
        self.assertEqual(self.persistence.load_settings(), {})
        self.assertEqual(self.persistence.load_presets(), {})
        self.assertEqual(self.persistence.load_mode_presets(), {})

    def test_settings_round_trip_through_dataclass(self):
        settings = ModelineSettings(bar_height=2, word_count_modes=("text",))
        self.assertTrue(self.persistence.save_settings(settings.to_dict()))

        loaded = ModelineSettings.from_dict(self.persistence.load_settings())
        self.assertEqual(loaded, settings)

    def test_save_rejects_invalid_settings(self):
        self.assertFalse(self.persistence.save_settings({"bar_width": "wide"}))
        self.assertFalse(self.persistence.path.exists())

    def test_invalid_values_dropped_on_load(self):
        with open(self.persistence.path, 'w', encoding='utf-8') as f:
            json.dump({"settings": {"bar_width": -1, "icons": True}}, f)

        self.assertEqual(self.persistence.load_settings(), {"icons": True})

    def test_corrupted_file(self):
        with open(self.persistence.path, 'w', encoding='utf-8') as f:
            f.write("{ invalid json }")

        with self.assertLogs('modeline.settings_persistence', level='WARNING'):
            self.assertEqual(self.persistence.load_settings(), {})

    def test_non_dict_file(self):
        with open(self.persistence.path, 'w', encoding='utf-8') as f:
            json.dump(["not", "a", "dict"], f)

        self.assertEqual(self.persistence.load_settings(), {})

    def test_presets(self):
        self.assertTrue(self.persistence.save_preset("mine", ["buffer-info"], ["vcs"]))
        self.assertTrue(self.persistence.save_settings({"icons": False}))

        self.persistence.clear_cache()
        self.assertEqual(
            self.persistence.load_presets(),
            {"mine": {"left": ["buffer-info"], "right": ["vcs"]}},
        )
        # Saving settings kept the preset and vice versa
        self.assertEqual(self.persistence.load_settings(), {"icons": False})

    def test_malformed_presets_skipped(self):
        with open(self.persistence.path, 'w', encoding='utf-8') as f:
            json.dump({"presets": {
                "good": {"left": ["a"]},
                "bad": {"left": "a"},
                "worse": ["a"],
            }}, f)

        self.assertEqual(self.persistence.load_presets(), {"good": {"left": ["a"], "right": []}})

    def test_mode_presets(self):
        self.assertTrue(self.persistence.save_mode_preset("python", "prog"))
        self.assertEqual(self.persistence.load_mode_presets(), {"python": "prog"})

    def test_validate_settings(self):
        v = self.persistence.validate_setting
        self.assertTrue(v("bar_width", 0))
        self.assertFalse(v("bar_height", 0))
        self.assertFalse(v("bar_width", True))
        self.assertFalse(v("bar_width", 100))
        self.assertTrue(v("bar_position", "end"))
        self.assertFalse(v("bar_position", "middle"))
        self.assertTrue(v("buffer_file_name_style", "file-name"))
        self.assertFalse(v("buffer_file_name_style", "full"))
        self.assertTrue(v("icons", False))
        self.assertFalse(v("icons", "yes"))
        self.assertTrue(v("bar_active_color", "green"))
        self.assertFalse(v("bar_active_color", ""))
        self.assertTrue(v("word_count_modes", ["text"]))
        self.assertFalse(v("word_count_modes", "text"))
        # Unknown settings are allowed
        self.assertTrue(v("future_setting", object()))

    def test_atomic_save_leaves_no_temp_file(self):
        self.persistence.save_settings({"icons": True})
        leftovers = [p for p in os.listdir(self.temp_dir) if p.endswith('.tmp')]
        self.assertEqual(leftovers, [])

    def test_global_instance(self):
        self.assertIs(get_persistence(), get_persistence())


if __name__ == '__main__':
    unittest.main()
