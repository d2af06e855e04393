"""Copy naming, rename/create validation, trash, delete, and the executable bit."""

from __future__ import annotations

import os
import stat
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from ils.errors import FileOperationError
from ils.fileops import CopyAction, CreateAction, FileOperations, RenameAction, unique_copy_path


class FileOperationsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.ops = FileOperations()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_copy_picks_unused_name_next_to_source(self) -> None:
        src = self.root / "notes.txt"
        src.write_text("hello", encoding="utf-8")

        first = self.ops.copy(src)
        second = self.ops.copy(src)

        self.assertEqual(first, CopyAction(src=src, dest=self.root / "notes copy.txt"))
        self.assertEqual(second.dest, self.root / "notes copy 2.txt")
        self.assertEqual(second.dest.read_text(encoding="utf-8"), "hello")

    def test_copy_directory_is_recursive(self) -> None:
        src = self.root / "pkg"
        (src / "inner").mkdir(parents=True)
        (src / "inner" / "a.py").write_text("x = 1\n", encoding="utf-8")

        action = self.ops.copy(src)

        self.assertEqual(action.dest, self.root / "pkg copy")
        self.assertEqual((action.dest / "inner" / "a.py").read_text(encoding="utf-8"), "x = 1\n")

    @unittest.skipUnless(hasattr(os, "mkfifo"), "needs named pipes")
    def test_failed_directory_copy_leaves_no_partial_copy(self) -> None:
        src = self.root / "pkg"
        src.mkdir()
        (src / "a.txt").write_text("a", encoding="utf-8")
        os.mkfifo(src / "pipe")

        with self.assertRaises(FileOperationError):
            self.ops.copy(src)

        self.assertEqual(sorted(p.name for p in self.root.iterdir()), ["pkg"])

    def test_unique_copy_path_for_name_without_suffix(self) -> None:
        self.assertEqual(unique_copy_path(self.root / "Makefile"), self.root / "Makefile copy")

    def test_copy_of_vanished_source_fails_cleanly(self) -> None:
        with self.assertRaises(FileOperationError) as caught:
            self.ops.copy(self.root / "gone.txt")
        self.assertEqual(caught.exception.message, "gone.txt no longer exists.")

    def test_rename_moves_entry(self) -> None:
        old = self.root / "a.txt"
        old.write_text("a", encoding="utf-8")
        action = self.ops.rename(old, " b.txt ")
        self.assertEqual(action, RenameAction(old=old, new=self.root / "b.txt"))
        self.assertFalse(old.exists())
        self.assertTrue((self.root / "b.txt").exists())

    def test_rename_refuses_to_overwrite(self) -> None:
        (self.root / "a.txt").write_text("a", encoding="utf-8")
        (self.root / "b.txt").write_text("b", encoding="utf-8")
        with self.assertRaises(FileOperationError) as caught:
            self.ops.rename(self.root / "a.txt", "b.txt")
        self.assertEqual(caught.exception.message, "b.txt already exists.")
        self.assertEqual((self.root / "b.txt").read_text(encoding="utf-8"), "b")

    def test_rename_rejects_bad_names(self) -> None:
        old = self.root / "a.txt"
        old.touch()
        for bad in ("", "   ", "..", "x/y"):
            with self.subTest(name=bad), self.assertRaises(FileOperationError):
                self.ops.rename(old, bad)
        with self.assertRaises(FileOperationError) as caught:
            self.ops.rename(old, "a.txt")
        self.assertEqual(caught.exception.message, "Name unchanged.")

    def test_create_file_and_directory(self) -> None:
        file_action = self.ops.create(self.root, "new.txt", is_dir=False)
        dir_action = self.ops.create(self.root, "newdir", is_dir=True)
        self.assertEqual(file_action, CreateAction(path=self.root / "new.txt", is_dir=False))
        self.assertTrue((self.root / "new.txt").is_file())
        self.assertEqual(dir_action, CreateAction(path=self.root / "newdir", is_dir=True))
        self.assertTrue((self.root / "newdir").is_dir())

    def test_create_refuses_existing_name(self) -> None:
        (self.root / "taken").touch()
        with self.assertRaises(FileOperationError):
            self.ops.create(self.root, "taken", is_dir=True)

    def test_delete_removes_files_and_trees(self) -> None:
        tree = self.root / "tree"
        (tree / "deep").mkdir(parents=True)
        (tree / "deep" / "f").touch()
        single = self.root / "single.txt"
        single.touch()

        self.ops.delete(tree)
        self.ops.delete(single)

        self.assertFalse(tree.exists())
        self.assertFalse(single.exists())
        with self.assertRaises(FileOperationError):
            self.ops.delete(single)

    def test_trash_hands_path_to_send2trash(self) -> None:
        target = self.root / "old.log"
        target.touch()
        with mock.patch("ils.fileops.operations.send2trash") as fake:
            self.ops.trash(target)
        fake.assert_called_once_with(str(target))

    def test_trash_failure_is_reported(self) -> None:
        target = self.root / "old.log"
        target.touch()
        with mock.patch("ils.fileops.operations.send2trash", side_effect=OSError("no trash")):
            with self.assertRaises(FileOperationError) as caught:
                self.ops.trash(target)
        self.assertIn("Trash failed", caught.exception.message)

    def test_toggle_executable_flips_owner_bit(self) -> None:
        script = self.root / "run.sh"
        script.touch()
        os.chmod(script, 0o644)

        self.assertTrue(self.ops.toggle_executable(script))
        self.assertEqual(stat.S_IMODE(script.stat().st_mode), 0o744)
        self.assertFalse(self.ops.toggle_executable(script))
        self.assertEqual(stat.S_IMODE(script.stat().st_mode), 0o644)


if __name__ == "__main__":
    unittest.main()
