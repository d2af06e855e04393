"""Preview cache state transitions and single-claim loading."""

from __future__ import annotations

import threading
import unittest
from pathlib import Path

from ils.preview.cache import LOADING, NOT_LOADED, BackgroundTextLoader, Loaded, LoadError, PreviewCache


class PreviewCacheTests(unittest.TestCase):
    def test_unknown_path_is_not_loaded(self) -> None:
        self.assertEqual(PreviewCache().get(Path("/x.pdf")), NOT_LOADED)

    def test_claim_succeeds_once(self) -> None:
        cache = PreviewCache()
        path = Path("/doc.pdf")
        self.assertTrue(cache.claim(path))
        self.assertFalse(cache.claim(path))
        self.assertEqual(cache.get(path), LOADING)
        self.assertTrue(cache.has_pending())

    def test_complete_only_applies_to_loading_entries(self) -> None:
        cache = PreviewCache()
        path = Path("/doc.pdf")
        self.assertFalse(cache.complete(path, Loaded(("x",))))
        cache.claim(path)
        self.assertTrue(cache.complete(path, Loaded(("x",))))
        self.assertFalse(cache.complete(path, LoadError("late")))
        self.assertEqual(cache.get(path), Loaded(("x",)))
        self.assertFalse(cache.claim(path))
        self.assertFalse(cache.has_pending())

    def test_concurrent_claims_have_one_winner(self) -> None:
        cache = PreviewCache()
        path = Path("/race.pdf")
        barrier = threading.Barrier(8)
        wins: list[bool] = []
        lock = threading.Lock()

        def contend() -> None:
            barrier.wait()
            won = cache.claim(path)
            with lock:
                wins.append(won)

        threads = [threading.Thread(target=contend) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(2.0)
        self.assertEqual(sorted(wins), [False] * 7 + [True])

    def test_loader_spawns_one_worker_per_path(self) -> None:
        cache = PreviewCache()
        started = threading.Event()
        release = threading.Event()
        calls: list[Path] = []

        def extract(path: Path) -> str:
            calls.append(path)
            started.set()
            release.wait(2.0)
            return "a\nb"

        loader = BackgroundTextLoader(cache, extract)
        path = Path("/slow.pdf")
        self.assertEqual(loader.request(path), LOADING)
        self.assertTrue(started.wait(2.0))
        self.assertEqual(loader.request(path), LOADING)
        release.set()
        for thread in threading.enumerate():
            if thread.name.startswith("ils-preview:"):
                thread.join(2.0)
        self.assertEqual(loader.request(path), Loaded(("a", "b")))
        self.assertEqual(calls, [path])


if __name__ == "__main__":
    unittest.main()
