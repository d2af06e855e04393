"""Byte-to-token decoding in the raw key reader."""

from __future__ import annotations

import os
import unittest

from ils.input import reader
from ils.input.reader import RESIZE_TOKEN, drain_pending_keys, read_key


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        reader._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        for fd in (self.read_fd, self.write_fd):
            try:
                os.close(fd)
            except OSError:
                pass
        reader._PENDING_BYTES.clear()

    def _feed(self, data: bytes) -> None:
        os.write(self.write_fd, data)

    def _read_all(self, count: int) -> list[str]:
        return [read_key(self.read_fd, timeout_ms=200) for _ in range(count)]

    def test_printable_and_named_keys(self) -> None:
        self._feed(b"a\r\n\t\x7f\x08?")
        self.assertEqual(self._read_all(7), ["a", "ENTER", "ENTER", "TAB", "BACKSPACE", "BACKSPACE", "?"])

    def test_arrow_sequences(self) -> None:
        self._feed(b"\x1b[A\x1b[B\x1b[C\x1b[D\x1bOA")
        self.assertEqual(self._read_all(5), ["UP", "DOWN", "RIGHT", "LEFT", "UP"])

    def test_lone_escape(self) -> None:
        self._feed(b"\x1b")
        self.assertEqual(read_key(self.read_fd, timeout_ms=200), "ESC")

    def test_escape_followed_by_plain_key_keeps_that_key(self) -> None:
        self._feed(b"\x1bx")
        self.assertEqual(self._read_all(2), ["ESC", "x"])

    def test_unknown_csi_sequence_is_swallowed(self) -> None:
        self._feed(b"\x1b[3~z")
        self.assertEqual(self._read_all(2), ["ESC", "z"])

    def test_control_letters(self) -> None:
        self._feed(b"\x06\x01\x1a")
        self.assertEqual(self._read_all(3), ["CTRL_F", "CTRL_A", "CTRL_Z"])

    def test_multibyte_utf8(self) -> None:
        self._feed("é€".encode("utf-8"))
        self.assertEqual(self._read_all(2), ["é", "€"])

    def test_timeout_returns_empty(self) -> None:
        self.assertEqual(read_key(self.read_fd, timeout_ms=10), "")

    def test_eof_returns_empty(self) -> None:
        os.close(self.write_fd)
        self.assertEqual(read_key(self.read_fd, timeout_ms=100), "")

    def test_wakeup_pipe_yields_resize_and_is_drained(self) -> None:
        wake_read, wake_write = os.pipe()
        try:
            os.write(wake_write, b"\0\0\0")
            self.assertEqual(read_key(self.read_fd, timeout_ms=100, wakeup_fd=wake_read), RESIZE_TOKEN)
            self.assertEqual(read_key(self.read_fd, timeout_ms=10, wakeup_fd=wake_read), "")
        finally:
            os.close(wake_read)
            os.close(wake_write)

    def test_drain_discards_buffered_input(self) -> None:
        self._feed(b"abc")
        self.assertEqual(drain_pending_keys(self.read_fd, window_ms=50), 3)
        self.assertEqual(read_key(self.read_fd, timeout_ms=10), "")


if __name__ == "__main__":
    unittest.main()
