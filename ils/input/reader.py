"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens:
printable characters as themselves, plus ``UP``/``DOWN``/``LEFT``/``RIGHT``,
``ENTER``, ``BACKSPACE``, ``TAB``, ``ESC`` and ``CTRL_<X>``. A readable
wakeup descriptor (the resize self-pipe) yields ``RESIZE``.
"""

from __future__ import annotations

import os
import select
import time

ESC_SEQUENCE_TIMEOUT_MS = 25
DRAIN_WINDOW_MS = 500
RESIZE_TOKEN = "RESIZE"
_PENDING_BYTES: list[bytes] = []

_ARROWS = {b"A": "UP", b"B": "DOWN", b"C": "RIGHT", b"D": "LEFT"}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _drain_fd(fd: int) -> None:
    while True:
        ready, _, _ = select.select([fd], [], [], 0)
        if not ready or not os.read(fd, 1024):
            return


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _decode_char(fd: int, first: bytes) -> str:
    data = first
    for _ in range(_utf8_length(first[0]) - 1):
        more = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        data += more
    return data.decode("utf-8", errors="replace")


def _decode_escape(fd: int) -> str:
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq not in {b"[", b"O"}:
        _PENDING_BYTES.append(seq)
        return "ESC"
    code = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if code is None:
        return "ESC"
    if code in _ARROWS:
        return _ARROWS[code]
    # Swallow the rest of an unknown CSI sequence up to its final byte.
    while code is not None and not (0x40 <= code[0] <= 0x7E):
        code = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    return "ESC"


def read_key(fd: int, timeout_ms: int | None = None, wakeup_fd: int | None = None) -> str:
    """Block for the next key token.

    Returns ``""`` when ``timeout_ms`` elapses or stdin reaches EOF, and
    ``RESIZE`` when ``wakeup_fd`` becomes readable first.
    """
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        watched = [fd] if wakeup_fd is None else [fd, wakeup_fd]
        timeout = None if timeout_ms is None else max(0.0, timeout_ms / 1000.0)
        ready, _, _ = select.select(watched, [], [], timeout)
        if wakeup_fd is not None and wakeup_fd in ready:
            _drain_fd(wakeup_fd)
            return RESIZE_TOKEN
        if fd not in ready:
            return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch == b"\t":
        return "TAB"
    if ch in {b"\r", b"\n"}:
        return "ENTER"
    if ch in {b"\x08", b"\x7f"}:
        return "BACKSPACE"
    if ch == b"\x1b":
        return _decode_escape(fd)
    if 0x01 <= ch[0] <= 0x1A:
        return f"CTRL_{chr(ch[0] + 0x40)}"
    return _decode_char(fd, ch)


def drain_pending_keys(fd: int, window_ms: int = DRAIN_WINDOW_MS) -> int:
    """Discard input arriving within ``window_ms``; returns bytes dropped."""
    dropped = len(_PENDING_BYTES)
    _PENDING_BYTES.clear()
    deadline = time.monotonic() + window_ms / 1000.0
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return dropped
        ready, _, _ = select.select([fd], [], [], remaining)
        if not ready:
            return dropped
        chunk = os.read(fd, 1024)
        if not chunk:
            return dropped
        dropped += len(chunk)
