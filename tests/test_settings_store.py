import json
import tempfile
import unittest
from pathlib import Path

from symhl.settings_models import (
    SettingsPaths,
    default_symbol_highlight_settings,
    normalize_symbol_highlight_settings,
)
from symhl.settings_store import (
    JsonSettingsStore,
    deep_merge_defaults,
    dot_get,
    dot_set,
)


class DotKeyTests(unittest.TestCase):
    def test_get_and_set(self):
        data = {}
        dot_set(data, "a.b.c", 3)
        self.assertEqual(data, {"a": {"b": {"c": 3}}})
        self.assertEqual(dot_get(data, "a.b.c"), 3)
        self.assertEqual(dot_get(data, "a.x", "missing"), "missing")

    def test_empty_key_is_rejected(self):
        with self.assertRaises(ValueError):
            dot_set({}, "", 1)

    def test_merge_keeps_explicit_values(self):
        merged = deep_merge_defaults({"a": {"x": 1}}, {"a": {"x": 0, "y": 2}, "b": 3})
        self.assertEqual(merged, {"a": {"x": 1, "y": 2}, "b": 3})


class StoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.paths = SettingsPaths(app_dir=Path(self._tmp.name))

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_loads_defaults(self):
        store = JsonSettingsStore.for_paths(self.paths)
        store.load()
        self.assertTrue(store.dirty)
        self.assertEqual(store.get("symbol_highlight.idle_delay"), 1.5)
        self.assertEqual(store.get("window.recent_files"), [])

    def test_round_trip(self):
        store = JsonSettingsStore.for_paths(self.paths)
        store.load()
        self.assertTrue(store.set("symbol_highlight.idle_delay", 0.25))
        self.assertFalse(store.set("symbol_highlight.idle_delay", 0.25))
        store.save()
        self.assertFalse(store.dirty)

        reloaded = JsonSettingsStore.for_paths(self.paths)
        reloaded.load()
        self.assertFalse(reloaded.dirty)
        self.assertEqual(reloaded.symbol_highlight_settings()["idle_delay"], 0.25)

    def test_invalid_json_falls_back(self):
        self.paths.settings_file.write_text("{not json", encoding="utf-8")
        store = JsonSettingsStore.for_paths(self.paths)
        with self.assertLogs("symhl.settings_store", level="WARNING"):
            store.load()
        self.assertIsNotNone(store.last_error)
        self.assertEqual(store.get("symbol_highlight.color_mode"), "hash")
        self.assertEqual(self.paths.settings_file.read_text(encoding="utf-8"), "{not json")

    def test_non_object_root(self):
        self.paths.settings_file.write_text(json.dumps([1, 2]), encoding="utf-8")
        store = JsonSettingsStore.for_paths(self.paths)
        with self.assertLogs("symhl.settings_store", level="WARNING"):
            store.load()
        self.assertIn("JSON object", store.last_error)

    def test_non_persistent_store_never_writes(self):
        store = JsonSettingsStore.for_paths(self.paths, persistent=False)
        store.load()
        store.set("window.font_size", 14)
        store.save()
        self.assertFalse(self.paths.settings_file.exists())


class NormalizeTests(unittest.TestCase):
    def test_defaults(self):
        settings = normalize_symbol_highlight_settings(None)
        self.assertEqual(settings, default_symbol_highlight_settings())
        self.assertEqual(settings["occurrence_message"], ["explicit", "navigation"])
        self.assertTrue(settings["highlight_single_occurrence"])
        self.assertFalse(settings["highlight_on_navigation"])

    def test_coercion(self):
        settings = normalize_symbol_highlight_settings(
            {
                "idle_delay": "-3",
                "highlight_on_navigation": "yes",
                "occurrence_message": ["navigation", "bogus", "transient"],
                "color_mode": "PALETTE",
                "palette": ["#123456", 7],
                "ignore_list": "^self$",
            }
        )
        self.assertEqual(settings["idle_delay"], 0.0)
        self.assertTrue(settings["highlight_on_navigation"])
        self.assertEqual(settings["occurrence_message"], ["transient", "navigation"])
        self.assertEqual(settings["color_mode"], "palette")
        self.assertEqual(settings["palette"], ["#123456"])
        self.assertEqual(settings["ignore_list"], ["^self$"])

    def test_bad_values_fall_back(self):
        settings = normalize_symbol_highlight_settings({"idle_delay": "soon", "color_mode": "rainbow"})
        self.assertEqual(settings["idle_delay"], 1.5)
        self.assertEqual(settings["color_mode"], "hash")


if __name__ == "__main__":
    unittest.main()
