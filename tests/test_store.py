"""Tests for the result store and the identifier reader."""

import pytest

from charcheck.store import ResultStore, parse_lines, read_identifiers
from charcheck.utils import InputError


class TestParseLines:

    def test_mixed_line_endings_and_blanks(self):
        text = "alice\r\nbob\n\n  carol  \r\n\t\nDave\r"
        assert parse_lines(text) == ["alice", "bob", "carol", "Dave"]

    def test_keeps_order_and_repeats(self):
        assert parse_lines("b\na\nb\n") == ["b", "a", "b"]


class TestReadIdentifiers:

    def test_reads_file(self, write_lines):
        path = write_lines("names.txt", ["alice", " bob ", ""], ending="\r\n")
        assert read_identifiers(str(path)) == ["alice", "bob"]

    def test_missing_file_is_input_error(self, tmp_path):
        with pytest.raises(InputError):
            read_identifiers(str(tmp_path / "nope.txt"))

    def test_directory_is_input_error(self, tmp_path):
        with pytest.raises(InputError):
            read_identifiers(str(tmp_path))


class TestResultStore:

    def test_load_absent_file_is_empty(self, tmp_path):
        store = ResultStore(str(tmp_path / "available_usernames.txt"))
        assert store.load() == set()

    def test_load_unreadable_is_empty(self, tmp_path):
        # a directory in place of the file
        store = ResultStore(str(tmp_path))
        assert store.load() == set()

    def test_load_trims_and_skips_blanks(self, write_lines):
        path = write_lines("known.txt", ["bob", "", " carol "], ending="\r\n")
        assert ResultStore(str(path)).load() == {"bob", "carol"}

    def test_append_creates_file(self, tmp_path):
        path = tmp_path / "available_usernames.txt"
        store = ResultStore(str(path))

        assert store.append_new(["carol", "eve"]) == 2
        assert path.read_text(encoding="utf-8") == "carol\neve\n"

    def test_append_keeps_existing_lines(self, write_lines):
        path = write_lines("known.txt", ["bob", "zed"])
        before = path.read_text(encoding="utf-8")

        ResultStore(str(path)).append_new(["carol"])

        after = path.read_text(encoding="utf-8")
        assert after.startswith(before)
        assert after.splitlines() == ["bob", "zed", "carol"]

    def test_append_after_missing_trailing_newline(self, tmp_path):
        path = tmp_path / "known.txt"
        path.write_text("bob", encoding="utf-8")

        ResultStore(str(path)).append_new(["carol"])

        assert path.read_text(encoding="utf-8").splitlines() == ["bob", "carol"]

    def test_append_nothing_does_not_touch_file(self, tmp_path):
        path = tmp_path / "known.txt"
        store = ResultStore(str(path))

        assert store.append_new([]) == 0
        assert not path.exists()

    def test_append_failure_raises(self, tmp_path):
        store = ResultStore(str(tmp_path / "missing-dir" / "known.txt"))
        with pytest.raises(OSError):
            store.append_new(["carol"])
