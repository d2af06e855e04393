"""JSON config loading, field-by-field fallback, and settings persistence."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from ils.runtime import config
from ils.runtime.config import (
    DEFAULT_KEYBINDINGS,
    AppConfig,
    Settings,
    is_valid_key_token,
    load_app_config,
    parse_config,
    save_settings,
)


class AppConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "ils" / "config.json"
        patcher = mock.patch.object(config, "CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, data) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(json.dumps(data), encoding="utf-8")

    def test_first_run_writes_defaults(self) -> None:
        result = load_app_config()
        self.assertTrue(result.first_run)
        self.assertIsNone(result.warning)
        self.assertEqual(result.config, AppConfig())
        saved = json.loads(self.config_path.read_text(encoding="utf-8"))
        self.assertEqual(saved["keybindings"]["quit"], ["q"])
        self.assertEqual(saved["settings"]["preview_split_ratio"], 0.5)

        second = load_app_config()
        self.assertFalse(second.first_run)
        self.assertEqual(second.config, AppConfig())

    def test_malformed_json_falls_back_to_defaults(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text("{not json", encoding="utf-8")
        result = load_app_config()
        self.assertEqual(result.config, AppConfig())
        self.assertTrue(result.warning.startswith("Config error, using defaults"))
        self.assertFalse(result.first_run)

    def test_non_object_json_falls_back_to_defaults(self) -> None:
        self._write([1, 2, 3])
        result = load_app_config()
        self.assertEqual(result.config, AppConfig())
        self.assertIn("not a JSON object", result.warning)

    def test_invalid_values_fall_back_field_by_field(self) -> None:
        self._write(
            {
                "keybindings": {"quit": ["x"], "up": [""], "nonsense": ["k"]},
                "colors": {"directory_fg": "green", "status_fg": "sparkly"},
                "settings": {"jump_amount": 3, "preview_scroll_amount": -1, "layout": "list", "show_hidden": "yes"},
            }
        )
        result = load_app_config()
        cfg = result.config
        self.assertEqual(cfg.keybindings.keys_for("quit"), ("x",))
        self.assertEqual(cfg.keybindings.keys_for("up"), DEFAULT_KEYBINDINGS["up"])
        self.assertEqual(cfg.keybindings.keys_for("nonsense"), ())
        self.assertEqual(cfg.colors.directory_fg, "green")
        self.assertEqual(cfg.colors.status_fg, "yellow")
        self.assertEqual(cfg.settings.jump_amount, 3)
        self.assertEqual(cfg.settings.preview_scroll_amount, 10)
        self.assertEqual(cfg.settings.layout, "list")
        self.assertFalse(cfg.settings.show_hidden)
        self.assertTrue(result.warning.startswith("Invalid config values ignored: "))
        for name in ("keybindings.up", "colors.status_fg", "settings.preview_scroll_amount", "settings.show_hidden"):
            self.assertIn(name, result.warning)

    def test_single_string_binding_is_accepted(self) -> None:
        cfg, problems = parse_config({"keybindings": {"help": "h"}})
        self.assertEqual(problems, [])
        self.assertEqual(cfg.keybindings.keys_for("help"), ("h",))

    def test_preview_ratio_is_clamped(self) -> None:
        cfg, problems = parse_config({"settings": {"preview_split_ratio": 0.05}})
        self.assertEqual(problems, [])
        self.assertEqual(cfg.settings.preview_split_ratio, 0.2)

    def test_wrong_section_types_are_reported(self) -> None:
        cfg, problems = parse_config({"keybindings": [], "colors": "red", "settings": 3})
        self.assertEqual(cfg, AppConfig())
        self.assertEqual(len(problems), 3)

    def test_save_settings_keeps_other_sections(self) -> None:
        self._write({"keybindings": {"quit": ["x"]}, "extra": True})
        save_settings(Settings(preview_split_ratio=0.7))
        saved = json.loads(self.config_path.read_text(encoding="utf-8"))
        self.assertEqual(saved["keybindings"], {"quit": ["x"]})
        self.assertTrue(saved["extra"])
        self.assertEqual(saved["settings"]["preview_split_ratio"], 0.7)

    def test_key_token_validation(self) -> None:
        for token in ("a", "?", "ESC", "CTRL_F", "TAB"):
            self.assertTrue(is_valid_key_token(token), token)
        for token in ("", "ab", "CTRL_", "CTRL_FF", "\x01", 3):
            self.assertFalse(is_valid_key_token(token), token)


if __name__ == "__main__":
    unittest.main()
