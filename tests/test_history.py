import os

import pytest

from kubeswitch.history import (
    HistoryError,
    append_to_history,
    history_file_path,
    parse_history_entry,
    read_history,
)


def test_parse_entry_with_namespace():
    assert parse_history_entry("store/ctx:: kube-system") == ("store/ctx", "kube-system")


def test_parse_entry_without_namespace():
    assert parse_history_entry("store/ctx") == ("store/ctx", None)


def test_parse_entry_with_too_many_separators():
    with pytest.raises(HistoryError):
        parse_history_entry("a::b::c")


def test_read_missing_history_raises(tmp_path):
    with pytest.raises(HistoryError):
        read_history(str(tmp_path / "history"))


def test_append_and_read_newest_first(tmp_path):
    path = str(tmp_path / "history")
    append_to_history("one", "ns-a", path)
    append_to_history("two", "ns-b", path)
    assert read_history(path) == ["two:: ns-b", "one:: ns-a"]


def test_identical_consecutive_entries_are_skipped(tmp_path):
    path = str(tmp_path / "history")
    append_to_history("one", "ns-a", path)
    append_to_history("one", "ns-a", path)
    append_to_history("two", "ns-b", path)
    append_to_history("one", "ns-a", path)
    assert read_history(path) == ["one:: ns-a", "two:: ns-b", "one:: ns-a"]


def test_entries_round_trip_through_parse(tmp_path):
    path = str(tmp_path / "history")
    append_to_history("store/ctx", "default", path)
    assert parse_history_entry(read_history(path)[0]) == ("store/ctx", "default")


def test_default_path_uses_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    os.mkdir(tmp_path / ".kube")
    assert history_file_path() == os.path.join(str(tmp_path), ".kube", ".switch_history")
    append_to_history("ctx", "ns", None)
    assert read_history() == ["ctx:: ns"]