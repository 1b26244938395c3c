"""Tests for the ``os.scandir``-backed filesystem provider."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazybrowse.entries import EntryKind
from lazybrowse.providers import LocalEnvironmentProvider, LocalFileSystemProvider
from lazybrowse.providers import local
from lazybrowse.results import ErrorKind, Ok


class LocalFileSystemProviderTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)
        (self.root / "src").mkdir()
        (self.root / "main.py").write_text("print('hi')\n", encoding="utf-8")
        (self.root / ".env").write_text("SECRET=1\n", encoding="utf-8")
        self.provider = LocalFileSystemProvider()

    def _by_name(self, result):
        self.assertIsInstance(result, Ok)
        return {entry.name: entry for entry in result.value}

    def test_read_directory_lists_children(self) -> None:
        entries = self._by_name(self.provider.read_directory(self.root))

        self.assertEqual(set(entries), {"src", "main.py", ".env"})
        self.assertIs(entries["src"].kind, EntryKind.DIRECTORY)
        self.assertEqual(entries["src"].size, 0)
        self.assertIs(entries["main.py"].kind, EntryKind.FILE)
        self.assertEqual(entries["main.py"].size, len("print('hi')\n"))
        self.assertEqual(entries["main.py"].extension, "py")
        self.assertTrue(entries[".env"].hidden)
        self.assertGreater(entries["main.py"].mtime_ns, 0)

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_symlink_is_reported_as_symlink(self) -> None:
        try:
            os.symlink(self.root / "src", self.root / "link")
        except OSError:
            self.skipTest("cannot create symlinks here")

        entries = self._by_name(self.provider.read_directory(self.root))

        self.assertIs(entries["link"].kind, EntryKind.SYMLINK)
        self.assertTrue(self.provider.is_directory(self.root / "link"))

    def test_unreadable_entry_is_skipped(self) -> None:
        real_entry_kind = local._entry_kind

        def flaky(child):
            if child.name == "main.py":
                raise PermissionError(13, "Permission denied")
            return real_entry_kind(child)

        with mock.patch("lazybrowse.providers.local._entry_kind", side_effect=flaky):
            with self.assertLogs("lazybrowse.providers.local", level="WARNING"):
                entries = self._by_name(self.provider.read_directory(self.root))

        self.assertEqual(set(entries), {"src", ".env"})

    def test_missing_directory_fails(self) -> None:
        missing = self.root / "nope"

        result = self.provider.read_directory(missing)

        self.assertFalse(result.ok)
        self.assertIs(result.error.kind, ErrorKind.DIRECTORY_READ_FAILED)
        self.assertEqual(result.error.message, f"Cannot read {missing}: not found")

    def test_file_is_not_a_directory(self) -> None:
        result = self.provider.read_directory(self.root / "main.py")

        self.assertIs(result.error.kind, ErrorKind.DIRECTORY_READ_FAILED)
        self.assertTrue(result.error.message.endswith("not a directory"))

    def test_read_file_preview_returns_text(self) -> None:
        result = self.provider.read_file_preview(self.root / "main.py", 1024)
        self.assertEqual(result.value, "print('hi')\n")

    def test_read_file_preview_rejects_large_file(self) -> None:
        (self.root / "big.txt").write_text("x" * 2048, encoding="utf-8")

        result = self.provider.read_file_preview(self.root / "big.txt", 1024)

        self.assertIs(result.error.kind, ErrorKind.PREVIEW_TOO_LARGE)
        self.assertEqual(result.error.message, "File too large (2.0 KB > 1.0 KB)")

    def test_read_file_preview_caps_file_that_grew_after_stat(self) -> None:
        target = self.root / "growing.log"
        target.write_text("x" * 4096, encoding="utf-8")
        real = os.stat(target)
        stale = os.stat_result(
            (real.st_mode, real.st_ino, real.st_dev, real.st_nlink, real.st_uid, real.st_gid, 10,
             int(real.st_atime), int(real.st_mtime), int(real.st_ctime))
        )

        with mock.patch.object(Path, "stat", return_value=stale):
            result = self.provider.read_file_preview(target, 1024)

        self.assertIs(result.error.kind, ErrorKind.PREVIEW_TOO_LARGE)
        self.assertEqual(result.error.message, "File too large (> 1.0 KB)")

    def test_read_file_preview_accepts_file_at_limit(self) -> None:
        (self.root / "exact.txt").write_text("y" * 1024, encoding="utf-8")

        result = self.provider.read_file_preview(self.root / "exact.txt", 1024)

        self.assertEqual(result.value, "y" * 1024)

    def test_read_file_preview_rejects_directory(self) -> None:
        result = self.provider.read_file_preview(self.root / "src", 1024)
        self.assertIs(result.error.kind, ErrorKind.PREVIEW_NOT_A_FILE)

    def test_read_file_preview_rejects_binary(self) -> None:
        (self.root / "blob.bin").write_bytes(b"abc\x00def")

        result = self.provider.read_file_preview(self.root / "blob.bin", 1024)

        self.assertIs(result.error.kind, ErrorKind.PREVIEW_READ_FAILED)
        self.assertEqual(result.error.message, "blob.bin is a binary file")

    def test_read_file_preview_escapes_control_characters(self) -> None:
        (self.root / "bell.txt").write_bytes(b"ring\x07\tok\n")

        result = self.provider.read_file_preview(self.root / "bell.txt", 1024)

        self.assertEqual(result.value, "ring\\x07\tok\n")

    def test_decode_text_falls_back_to_latin1(self) -> None:
        self.assertEqual(local.decode_text("café".encode("latin-1")), "café")
        self.assertEqual(local.decode_text(b"\xef\xbb\xbfhello"), "hello")

    def test_path_predicates(self) -> None:
        self.assertTrue(self.provider.path_exists(self.root / "main.py"))
        self.assertFalse(self.provider.path_exists(self.root / "missing"))
        self.assertTrue(self.provider.is_file(self.root / "main.py"))
        self.assertFalse(self.provider.is_directory(self.root / "main.py"))


class LocalEnvironmentProviderTests(unittest.TestCase):
    def test_terminal_size_uses_shutil(self) -> None:
        with mock.patch("lazybrowse.providers.local.shutil.get_terminal_size", return_value=os.terminal_size((120, 40))):
            size = LocalEnvironmentProvider().terminal_size()

        self.assertEqual((size.width, size.height), (120, 40))

    def test_working_directory_is_cwd(self) -> None:
        self.assertEqual(LocalEnvironmentProvider().current_working_directory(), Path.cwd())


if __name__ == "__main__":
    unittest.main()
