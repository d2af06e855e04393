"""Selection model: sorting, bounded moves, scroll window, transactional reload."""

from __future__ import annotations

import errno
import random
import tempfile
import unittest
from pathlib import Path

from ils.browser.entries import LocalFileSystem
from ils.browser.layout import CELL_WIDTH
from ils.browser.selection import DIRECTIONS, DOWN, LEFT, RIGHT, UP, SelectionModel
from ils.errors import DirectoryLoadError


class DenyingFileSystem(LocalFileSystem):
    """Real filesystem except that listing ``denied`` raises ``PermissionError``."""

    def __init__(self, denied: Path) -> None:
        self.denied = denied

    def list_dir(self, directory: Path) -> list[Path]:
        if directory == self.denied:
            raise PermissionError(errno.EACCES, "Permission denied", str(directory))
        return super().list_dir(directory)


def _populate(root: Path, files: list[str], dirs: list[str] = ()) -> None:
    for name in dirs:
        (root / name).mkdir()
    for name in files:
        (root / name).write_text(name, encoding="utf-8")


class SelectionModelTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _model(self, width: int = CELL_WIDTH * 3, rows: int = 10, **kwargs) -> SelectionModel:
        model = SelectionModel(self.root, **kwargs)
        model.set_viewport(width, rows, list_mode=False)
        model.reload()
        return model

    def test_directories_sort_first_then_by_name(self) -> None:
        _populate(self.root, ["b.txt", "a.txt"], dirs=["z"])
        model = self._model()
        self.assertEqual(model.names(), ["z", "a.txt", "b.txt"])
        self.assertEqual(model.selected, 0)
        self.assertEqual(model.scroll_offset, 0)

    def test_hidden_entries_follow_flag(self) -> None:
        _populate(self.root, [".secret", "plain"])
        self.assertEqual(self._model().names(), ["plain"])
        self.assertEqual(self._model(show_hidden=True).names(), [".secret", "plain"])

    def test_moves_are_row_major_and_stop_at_edges(self) -> None:
        _populate(self.root, [f"f{i}" for i in range(7)])
        model = self._model()
        self.assertEqual(model.num_cols, 3)

        self.assertTrue(model.move(RIGHT))
        self.assertTrue(model.move(RIGHT))
        self.assertEqual(model.selected, 2)
        self.assertFalse(model.move(RIGHT))
        self.assertTrue(model.move(DOWN))
        self.assertEqual(model.selected, 5)
        self.assertFalse(model.move(DOWN))
        self.assertTrue(model.move(LEFT))
        self.assertEqual(model.selected, 4)
        self.assertFalse(model.move(DOWN))

        model.select(6)
        self.assertFalse(model.move(RIGHT))
        self.assertFalse(model.move(LEFT))
        self.assertTrue(model.move(UP))
        self.assertEqual(model.selected, 3)

    def test_jump_moves_stop_silently_at_boundary(self) -> None:
        _populate(self.root, [f"f{i}" for i in range(7)])
        model = self._model()
        self.assertTrue(model.move(DOWN, 5))
        self.assertEqual(model.selected, 6)
        self.assertFalse(model.move(DOWN, 5))

    def test_unknown_direction_is_rejected(self) -> None:
        _populate(self.root, ["a", "b"])
        model = self._model()
        with self.assertRaises(ValueError):
            model.move("sideways")

    def test_selected_row_stays_inside_scroll_window(self) -> None:
        _populate(self.root, [f"f{i:02d}" for i in range(7)])
        model = self._model(rows=1)
        self.assertEqual(model.visible_rows, 1)
        model.select(6)
        self.assertEqual(model.scroll_offset, 2)
        model.select(0)
        self.assertEqual(model.scroll_offset, 0)

    def test_random_moves_keep_selection_valid_and_visible(self) -> None:
        _populate(self.root, [f"f{i:02d}" for i in range(23)])
        model = self._model(width=CELL_WIDTH * 4, rows=2)
        rng = random.Random(7)
        for _ in range(300):
            model.move(rng.choice(DIRECTIONS), rng.choice((1, 1, 3)))
            self.assertTrue(0 <= model.selected < len(model.entries))
            row = model.row_of(model.selected)
            self.assertTrue(model.scroll_offset <= row < model.scroll_offset + model.visible_rows)

    def test_viewport_change_rescrolls_selection_into_view(self) -> None:
        _populate(self.root, [f"f{i:02d}" for i in range(30)])
        model = self._model(width=CELL_WIDTH * 3, rows=20)
        model.select(29)
        model.set_viewport(CELL_WIDTH * 3, 2, list_mode=True)
        self.assertEqual(model.num_cols, 1)
        row = model.row_of(model.selected)
        self.assertTrue(model.scroll_offset <= row < model.scroll_offset + model.visible_rows)

    def test_reload_failure_leaves_state_untouched(self) -> None:
        locked = self.root / "locked"
        _populate(self.root, ["a.txt", "b.txt"], dirs=["locked"])
        model = SelectionModel(self.root, filesystem=DenyingFileSystem(locked))
        model.set_viewport(CELL_WIDTH * 3, 10, list_mode=False)
        model.reload()
        model.select(2)
        before_state = model.state
        before_dir = model.current_dir

        with self.assertRaises(DirectoryLoadError) as caught:
            model.reload(locked)

        self.assertIs(model.state, before_state)
        self.assertEqual(model.current_dir, before_dir)
        self.assertTrue(caught.exception.permission_denied)
        self.assertIn("Permission denied", caught.exception.user_message)
        self.assertIn(str(locked), caught.exception.user_message)

    def test_missing_directory_gives_generic_message(self) -> None:
        model = self._model()
        with self.assertRaises(DirectoryLoadError) as caught:
            model.reload(self.root / "nope")
        self.assertFalse(caught.exception.permission_denied)
        self.assertTrue(caught.exception.user_message.startswith("Cannot open"))

    def test_sibling_cycles_through_parent_subdirectories(self) -> None:
        _populate(self.root, ["file.txt"], dirs=["alpha", "beta", "gamma"])
        model = SelectionModel(self.root / "alpha")
        model.set_viewport(CELL_WIDTH * 3, 10, list_mode=False)
        model.reload()

        self.assertEqual(model.sibling(1), self.root / "beta")
        self.assertEqual(model.current_dir, self.root / "beta")
        model.sibling(1)
        self.assertEqual(model.current_dir, self.root / "gamma")
        model.sibling(1)
        self.assertEqual(model.current_dir, self.root / "alpha")
        model.sibling(-1)
        self.assertEqual(model.current_dir, self.root / "gamma")

    def test_sibling_is_noop_without_other_directories(self) -> None:
        (self.root / "only").mkdir()
        model = SelectionModel(self.root / "only")
        model.reload()
        self.assertIsNone(model.sibling(1))
        self.assertEqual(model.current_dir, self.root / "only")


if __name__ == "__main__":
    unittest.main()
