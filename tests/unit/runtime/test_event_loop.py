"""Main loop driven by scripted keys against a real directory."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from ils.runtime.config import AppConfig
from ils.runtime.controller import BrowserController
from ils.runtime.exit import EXIT_NONE, ExitTarget
from ils.runtime.loop import PENDING_PREVIEW_POLL_MS, RuntimeLoopIO, run_main_loop


class ScriptedKeys:
    """Replays keys and records the timeout each read was made with."""

    def __init__(self, keys: list[str]) -> None:
        self.keys = list(keys)
        self.timeouts: list[int | None] = []

    def __call__(self, timeout_ms: int | None) -> str:
        self.timeouts.append(timeout_ms)
        if not self.keys:
            return ""
        return self.keys.pop(0)


class RunMainLoopTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "alpha").mkdir()
        (self.root / "beta.txt").write_text("b\n", encoding="utf-8")
        self.frames: list[str] = []
        self.controller = BrowserController(AppConfig(), self.root, terminal_size=lambda: (66, 12), home_dir=self.root)
        self.controller.start()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_runs_until_an_exit_intent(self) -> None:
        keys = ScriptedKeys(["s", "w", "ESC"])
        intent = run_main_loop(self.controller, RuntimeLoopIO(read_key=keys, write=self.frames.append))
        self.assertEqual(intent, ExitTarget(self.root))
        self.assertEqual(len(self.frames), 3)
        self.assertEqual(keys.timeouts, [None, None, None])

    def test_end_of_input_is_a_plain_quit(self) -> None:
        intent = run_main_loop(self.controller, RuntimeLoopIO(read_key=ScriptedKeys([]), write=self.frames.append))
        self.assertEqual(intent, EXIT_NONE)
        self.assertEqual(len(self.frames), 1)

    def test_polls_while_preview_is_loading(self) -> None:
        pending = [True, True, False]
        self.controller.has_pending_previews = lambda: pending.pop(0) if pending else False
        keys = ScriptedKeys(["", "", "q"])
        intent = run_main_loop(self.controller, RuntimeLoopIO(read_key=keys, write=self.frames.append))
        self.assertEqual(intent, EXIT_NONE)
        self.assertEqual(keys.timeouts, [PENDING_PREVIEW_POLL_MS, PENDING_PREVIEW_POLL_MS, None])
        self.assertEqual(len(self.frames), 3)

    def test_frames_show_current_directory(self) -> None:
        run_main_loop(self.controller, RuntimeLoopIO(read_key=ScriptedKeys(["q"]), write=self.frames.append))
        self.assertIn("alpha", self.frames[0])
        self.assertIn("beta.txt", self.frames[0])


if __name__ == "__main__":
    unittest.main()
