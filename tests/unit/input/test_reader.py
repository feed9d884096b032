"""Regression tests for raw-key decoding.

Covers ESC timing, arrow sequences, control-key tokens, and the bounded
wait the session loop relies on.
"""

import os
import time
import unittest

from pori.input import reader


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        reader._PENDING_BYTES.clear()
        self.read_fd, self.write_fd = os.pipe()

    def tearDown(self) -> None:
        reader._PENDING_BYTES.clear()
        os.close(self.read_fd)
        os.close(self.write_fd)

    def _read(self, data: bytes, count: int = 1) -> list[str]:
        os.write(self.write_fd, data)
        return [reader.read_key(self.read_fd, timeout_ms=20) for _ in range(count)]

    def test_timeout_returns_empty_token_without_blocking(self) -> None:
        started = time.monotonic()
        key = reader.read_key(self.read_fd, timeout_ms=30)
        elapsed = time.monotonic() - started

        self.assertEqual(key, "")
        self.assertLess(elapsed, 0.5)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        self.assertEqual(self._read(b"\x1b"), ["ESC"])
        self.assertLess(time.monotonic() - started, 0.2)

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._read(b"\x1ba", count=2), ["ESC", "a"])

    def test_arrow_sequences(self) -> None:
        cases = {
            b"\x1b[A": "UP",
            b"\x1b[B": "DOWN",
            b"\x1bOA": "UP",
            b"\x1b[H": "HOME",
            b"\x1b[3~": "DELETE",
        }
        for data, expected in cases.items():
            with self.subTest(data=data):
                self.assertEqual(self._read(data), [expected])

    def test_control_keys(self) -> None:
        cases = {
            b"\x7f": "BACKSPACE",
            b"\x08": "BACKSPACE",
            b"\x15": "CTRL_U",
            b"\x03": "CTRL_C",
            b"\t": "TAB",
            b"\r": "ENTER_CR",
            b"\n": "ENTER_LF",
        }
        for data, expected in cases.items():
            with self.subTest(data=data):
                self.assertEqual(self._read(data), [expected])

    def test_multibyte_utf8_character_is_one_token(self) -> None:
        self.assertEqual(self._read("é".encode("utf-8")), ["é"])


if __name__ == "__main__":
    unittest.main()
