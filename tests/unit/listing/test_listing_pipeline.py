"""Tests for the listing pipeline: filter, sort, partition, parent row.

Covers determinism, hidden-file handling, stable ordering, and the
directories-first partition.
"""

from __future__ import annotations

import locale
import unicodedata
import unittest
from pathlib import Path
from unittest import mock

from lazybrowse.entries import Entry, EntryKind, FilterOptions, SortConfig, SortKey, SortOrder, make_entry
from lazybrowse.listing import (
    filter_entries,
    partition_directories_first,
    process,
    sort_entries,
    with_parent_entry,
)

ROOT = Path("/")
HOME = Path("/home/user")


def _dir(name: str, mtime_ns: int = 0) -> Entry:
    return make_entry(name, EntryKind.DIRECTORY, mtime_ns=mtime_ns)


def _file(name: str, size: int = 0, mtime_ns: int = 0) -> Entry:
    return make_entry(name, EntryKind.FILE, size=size, mtime_ns=mtime_ns)


def _names(entries: list[Entry]) -> list[str]:
    return [entry.name for entry in entries]


def _sample() -> list[Entry]:
    return [
        _dir("scripts"),
        _file("app.js", 2048),
        _dir("documents"),
        _file("readme.txt", 1024),
        _dir("subdir"),
        _file("config.json", 512),
    ]


class ListingPipelineTests(unittest.TestCase):
    def test_name_ascending_with_directories_first(self) -> None:
        result = process(_sample(), FilterOptions(directories_first=True), SortConfig(), ROOT)

        self.assertEqual(
            _names(result),
            ["documents", "scripts", "subdir", "app.js", "config.json", "readme.txt"],
        )

    def test_parent_entry_prepended_outside_root(self) -> None:
        result = process(_sample(), FilterOptions(directories_first=False), SortConfig(), HOME)

        self.assertEqual(result[0].name, "..")
        self.assertTrue(result[0].is_dir)
        self.assertEqual(result[0].size, 0)
        self.assertEqual(_names(result).count(".."), 1)

    def test_no_parent_entry_at_root(self) -> None:
        result = process(_sample(), FilterOptions(), SortConfig(), ROOT)
        self.assertNotIn("..", _names(result))

    def test_process_is_deterministic_and_leaves_input_untouched(self) -> None:
        raw = _sample()
        snapshot = list(raw)
        options = FilterOptions(show_hidden=False, directories_first=True, search_query="s")
        config = SortConfig(SortKey.SIZE, SortOrder.DESC)

        first = process(raw, options, config, HOME)
        second = process(raw, options, config, HOME)

        self.assertEqual(first, second)
        self.assertEqual(raw, snapshot)

    def test_hidden_entries_dropped_unless_enabled(self) -> None:
        raw = [_file(".env"), _dir(".git"), _file("main.py")]

        hidden_off = process(raw, FilterOptions(show_hidden=False), SortConfig(), HOME)
        hidden_on = process(raw, FilterOptions(show_hidden=True), SortConfig(), HOME)

        for entry in hidden_off:
            self.assertTrue(entry.name == ".." or not entry.name.startswith("."))
        self.assertEqual(_names(hidden_off), ["..", "main.py"])
        self.assertEqual(_names(hidden_on), ["..", ".git", ".env", "main.py"])

    def test_extension_allow_list_applies_to_files_only(self) -> None:
        raw = [_dir("src"), _file("IMAGE.PNG"), _file("notes"), _file("a.py"), _file("b.txt")]
        options = FilterOptions.create(directories_first=True, extensions={".png", "PY"})

        result = filter_entries(raw, options)

        self.assertEqual(_names(result), ["src", "IMAGE.PNG", "a.py"])

    def test_empty_extension_set_disables_filter(self) -> None:
        raw = [_file("a.py"), _file("b.txt")]
        result = filter_entries(raw, FilterOptions(extensions=frozenset()))
        self.assertEqual(_names(result), ["a.py", "b.txt"])

    def test_search_is_case_insensitive_substring(self) -> None:
        raw = [_dir("Docs"), _file("README.md"), _file("main.py"), _file("readme.txt")]

        result = filter_entries(raw, FilterOptions(search_query="ReAd"))

        self.assertEqual(_names(result), ["README.md", "readme.txt"])

    def test_search_keeps_whitespace_as_typed(self) -> None:
        raw = [_file("my notes.txt"), _file("vnotes.txt"), _file("a v.md")]

        result = filter_entries(raw, FilterOptions(search_query=" v"))

        self.assertEqual(_names(result), ["a v.md"])

    def test_blank_search_keeps_everything(self) -> None:
        raw = _sample()
        self.assertEqual(filter_entries(raw, FilterOptions(search_query="")), raw)

    def test_name_sort_ignores_case(self) -> None:
        raw = [_file("beta"), _file("Alpha"), _file("gamma"), _file("Delta")]
        result = sort_entries(raw, SortConfig(SortKey.NAME, SortOrder.ASC))
        self.assertEqual(_names(result), ["Alpha", "beta", "Delta", "gamma"])

    def test_name_sort_uses_locale_collation(self) -> None:
        def accent_folding(text: str) -> str:
            decomposed = unicodedata.normalize("NFKD", text)
            return "".join(ch for ch in decomposed if not unicodedata.combining(ch))

        raw = [_file("zebra"), _file("éclair"), _file("apple")]
        with mock.patch("lazybrowse.listing.locale.strxfrm", side_effect=accent_folding):
            result = process(raw, FilterOptions(), SortConfig(), ROOT)

        self.assertEqual(_names(result), ["apple", "éclair", "zebra"])

    def test_name_sort_with_user_locale(self) -> None:
        previous = locale.setlocale(locale.LC_COLLATE)
        self.addCleanup(locale.setlocale, locale.LC_COLLATE, previous)
        try:
            locale.setlocale(locale.LC_COLLATE, "en_US.UTF-8")
        except locale.Error:
            self.skipTest("en_US.UTF-8 locale not available")

        raw = [_file("zebra"), _file("éclair"), _file("Apple")]
        result = sort_entries(raw, SortConfig(SortKey.NAME, SortOrder.ASC))

        self.assertEqual(_names(result), ["Apple", "éclair", "zebra"])

    def test_descending_reverses_name_order(self) -> None:
        raw = [_file("b"), _file("a"), _file("c")]
        result = sort_entries(raw, SortConfig(SortKey.NAME, SortOrder.DESC))
        self.assertEqual(_names(result), ["c", "b", "a"])

    def test_size_sort_treats_directories_as_empty(self) -> None:
        big_dir = Entry(name="huge", kind=EntryKind.DIRECTORY, size=10_000_000)
        raw = [_file("small", 10), big_dir, _file("large", 5000)]

        result = sort_entries(raw, SortConfig(SortKey.SIZE))

        self.assertEqual(_names(result), ["huge", "small", "large"])

    def test_size_ties_fall_back_to_name(self) -> None:
        raw = [_file("zeta", 100), _file("alpha", 100), _file("mid", 50)]
        result = sort_entries(raw, SortConfig(SortKey.SIZE))
        self.assertEqual(_names(result), ["mid", "alpha", "zeta"])

    def test_modified_sort_compares_timestamps(self) -> None:
        raw = [_file("new", mtime_ns=300), _file("old", mtime_ns=100), _file("middle", mtime_ns=200)]

        ascending = sort_entries(raw, SortConfig(SortKey.MODIFIED, SortOrder.ASC))
        descending = sort_entries(raw, SortConfig(SortKey.MODIFIED, SortOrder.DESC))

        self.assertEqual(_names(ascending), ["old", "middle", "new"])
        self.assertEqual(_names(descending), ["new", "middle", "old"])

    def test_kind_sort_groups_directories_files_then_others(self) -> None:
        raw = [
            make_entry("link", EntryKind.SYMLINK),
            _file("b.txt"),
            make_entry("socket", EntryKind.UNKNOWN),
            _dir("zdir"),
            _file("a.txt"),
            _dir("adir"),
        ]

        result = sort_entries(raw, SortConfig(SortKey.KIND))

        self.assertEqual(_names(result), ["adir", "zdir", "a.txt", "b.txt", "link", "socket"])

    def test_sort_is_stable_for_equal_keys(self) -> None:
        upper = _file("README", 5)
        lower = _file("readme", 5)

        forward = sort_entries([upper, _file("a", 1), lower], SortConfig(SortKey.SIZE))
        backward = sort_entries([lower, _file("a", 1), upper], SortConfig(SortKey.SIZE))

        self.assertEqual(_names(forward), ["a", "README", "readme"])
        self.assertEqual(_names(backward), ["a", "readme", "README"])

    def test_partition_is_stable(self) -> None:
        raw = [_file("z"), _dir("b"), _file("a"), _dir("a")]
        self.assertEqual(_names(partition_directories_first(raw)), ["b", "a", "z", "a"])

    def test_directories_first_holds_for_every_sort_key(self) -> None:
        raw = _sample() + [make_entry("link", EntryKind.SYMLINK)]
        options = FilterOptions(directories_first=True)
        for key in SortKey:
            for order in SortOrder:
                with self.subTest(key=key, order=order):
                    result = process(raw, options, SortConfig(key, order), ROOT)
                    kinds = [entry.is_dir for entry in result]
                    self.assertEqual(kinds, sorted(kinds, reverse=True))

    def test_parent_entry_precedes_directories_first_partition(self) -> None:
        result = process(_sample(), FilterOptions(directories_first=True), SortConfig(SortKey.NAME, SortOrder.DESC), HOME)
        self.assertEqual(_names(result)[:4], ["..", "subdir", "scripts", "documents"])

    def test_with_parent_entry_returns_new_list(self) -> None:
        raw = [_file("a")]
        result = with_parent_entry(raw, ROOT)
        self.assertEqual(result, raw)
        self.assertIsNot(result, raw)


if __name__ == "__main__":
    unittest.main()
