from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from pori import logging_utils


class ConfigureLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        self._close_handlers()

    def _close_handlers(self) -> None:
        for handler in list(logging_utils.BASE_LOGGER.handlers):
            logging_utils.BASE_LOGGER.removeHandler(handler)
            handler.close()

    def test_records_from_package_modules_reach_log_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "logs" / "pori.log"
            self.assertEqual(logging_utils.configure_logging(log_path), log_path)

            logging.getLogger("pori.runtime.fetch").info("fetch %d launched", 7)
            logging.getLogger("pori.runtime.fetch").debug("hidden at info level")
            for handler in logging_utils.BASE_LOGGER.handlers:
                handler.flush()

            text = log_path.read_text(encoding="utf-8")
            self.assertIn("INFO", text)
            self.assertIn("pori.runtime.fetch: fetch 7 launched", text)
            self.assertNotIn("hidden", text)
            self._close_handlers()

    def test_verbose_enables_debug(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            logging_utils.configure_logging(Path(tmp) / "pori.log", verbose=True)
            self.assertEqual(logging_utils.BASE_LOGGER.level, logging.DEBUG)
            self._close_handlers()

    def test_reconfiguring_replaces_previous_handler(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            logging_utils.configure_logging(Path(tmp) / "a.log")
            logging_utils.configure_logging(Path(tmp) / "b.log")
            self.assertEqual(len(logging_utils.BASE_LOGGER.handlers), 1)
            self._close_handlers()

    def test_unwritable_location_installs_null_handler(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("x", encoding="utf-8")
            self.assertIsNone(logging_utils.configure_logging(blocker / "sub" / "pori.log"))
        self.assertIsInstance(logging_utils.BASE_LOGGER.handlers[0], logging.NullHandler)


if __name__ == "__main__":
    unittest.main()
