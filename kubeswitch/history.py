"""The history of switched contexts and namespaces."""

from __future__ import annotations

import os

__all__ = [
    "HistoryError",
    "history_file_path",
    "read_history",
    "append_to_history",
    "parse_history_entry",
]


class HistoryError(Exception):
    """Raised when the history cannot be read or an entry cannot be parsed."""


def history_file_path() -> str:
    """Path of the history file in the user's home directory."""
    return os.path.join(os.environ.get("HOME", ""), ".kube", ".switch_history")


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_history(path: str | None = None) -> list[str]:
    """Return the history entries, newest first."""
    path = path or history_file_path()
    try:
        with open(path, "r", encoding="utf-8") as handle:
            text = handle.read()
    except FileNotFoundError as err:
        raise HistoryError(
            "no history entries yet - please run `switch` first"
        ) from err
    return list(reversed(_split_lines(text)))


def _last_line(path: str) -> str:
    """Last line of the file including its trailing newline, if any."""
    with open(path, "rb") as handle:
        data = handle.read()
    if not data:
        return ""
    end = len(data) - 1
    start = max(data.rfind(b"\n", 0, end), data.rfind(b"\r", 0, end))
    return data[start + 1:].decode("utf-8", errors="replace")


def append_to_history(context: str, namespace: str, path: str | None = None) -> None:
    """Append ``context:: namespace`` unless it repeats the last entry."""
    path = path or history_file_path()
    entry = f"{context}:: {namespace}\n"
    with open(path, "a", encoding="utf-8") as handle:
        if _last_line(path) == entry:
            return
        handle.write(entry)


def parse_history_entry(entry: str) -> tuple[str, str | None]:
    """Split a history entry into its context and namespace (None for old entries)."""
    parts = entry.split("::")
    if len(parts) == 1:
        return parts[0], None
    if len(parts) == 2:
        return parts[0], parts[1].replace(" ", "")
    raise HistoryError("history entry with unrecognized format")