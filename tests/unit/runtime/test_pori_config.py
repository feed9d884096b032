"""Tests for config persistence and input sanitization.

Malformed config data must fall back to defaults instead of failing the session.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from pori.runtime import config


class ConfigBehaviorTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "nested" / "config.json"
        patcher = mock.patch("pori.runtime.config.CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def test_missing_file_yields_defaults(self) -> None:
        self.assertEqual(config.load_config(), {})
        self.assertEqual(config.load_poll_interval_ms(), config.DEFAULT_POLL_INTERVAL_MS)
        self.assertEqual(config.load_fetch_timeout_seconds(), config.DEFAULT_FETCH_TIMEOUT_SECONDS)
        self.assertEqual(config.load_model_name(), config.DEFAULT_MODEL)
        self.assertEqual(config.load_key_overrides(), {})
        self.assertIsNone(config.load_last_location())

    def test_malformed_json_and_non_object_fall_back_to_empty(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        for text in ("{not json", "[1, 2]", '"text"'):
            with self.subTest(text=text):
                self.config_path.write_text(text, encoding="utf-8")
                self.assertEqual(config.load_config(), {})

    def test_poll_interval_is_clamped(self) -> None:
        cases = [(0, 10), (5, 10), (250, 250), (60_000, 1000), (True, 100), ("50", 100)]
        for raw, expected in cases:
            with self.subTest(raw=raw):
                config.save_config({"poll_interval_ms": raw})
                self.assertEqual(config.load_poll_interval_ms(), expected)

    def test_fetch_timeout_rejects_non_positive_values(self) -> None:
        config.save_config({"fetch_timeout_seconds": 15})
        self.assertEqual(config.load_fetch_timeout_seconds(), 15.0)
        config.save_config({"fetch_timeout_seconds": -1})
        self.assertEqual(config.load_fetch_timeout_seconds(), config.DEFAULT_FETCH_TIMEOUT_SECONDS)

    def test_model_name_is_stripped_and_blank_ignored(self) -> None:
        config.save_config({"model": "  claude-sonnet-4-5  "})
        self.assertEqual(config.load_model_name(), "claude-sonnet-4-5")
        config.save_config({"model": "   "})
        self.assertEqual(config.load_model_name(), config.DEFAULT_MODEL)

    def test_key_overrides_are_sanitized(self) -> None:
        config.save_config(
            {
                "keys": {
                    "next": "n",
                    "previous": "pp",
                    "refresh": " ",
                    "quit": 7,
                    "jump": "x",
                    "navigate": ":",
                }
            }
        )
        self.assertEqual(config.load_key_overrides(), {"next": "n", "navigate": ":"})

    def test_last_location_round_trip_keeps_other_keys(self) -> None:
        config.save_config({"poll_interval_ms": 50})
        config.save_last_location("  news.example  ")

        self.assertEqual(config.load_last_location(), "news.example")
        self.assertEqual(config.load_config()["poll_interval_ms"], 50)

    def test_blank_last_location_is_not_saved(self) -> None:
        config.save_last_location("   ")
        self.assertFalse(self.config_path.exists())

    def test_unchanged_last_location_is_not_rewritten(self) -> None:
        config.save_last_location("a.example")
        with mock.patch("pori.runtime.config.save_config") as save:
            config.save_last_location("a.example")
        save.assert_not_called()

    def test_write_failure_is_not_fatal(self) -> None:
        with mock.patch.object(Path, "write_text", side_effect=OSError("read-only")):
            config.save_config({"model": "x"})
        self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
