"""Per-context cache of namespace names in the switch state directory."""

from __future__ import annotations

import os

__all__ = ["NamespaceCache"]

_NAMESPACE_SUBDIRECTORY = "namespace"


class NamespaceCache:
    """Namespaces last seen for one context, stored one per line."""

    def __init__(self, state_directory: str, context_name: str) -> None:
        directory = f"{state_directory}/{_NAMESPACE_SUBDIRECTORY}"
        if not os.path.exists(directory):
            os.mkdir(directory, 0o755)
        # the prefix separator must not create sub-directories
        self.path = f"{directory}/{context_name.replace('/', '')}"
        self._content = self._load()

    def _load(self) -> list[str] | None:
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                text = handle.read()
        except FileNotFoundError:
            return None
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        lines = [line[:-1] if line.endswith("\r") else line for line in lines]
        return list(reversed(lines)) or None

    def has_content(self) -> bool:
        """Whether the cache can supply content; a missing file counts as empty."""
        return self._content is not None or not self._content

    @property
    def content(self) -> list[str]:
        """The cached namespaces, in reverse order of the file's lines."""
        return list(self._content or [])

    def write(self, namespaces: list[str]) -> None:
        """Replace the cache file with the given namespaces, one per line."""
        with open(self.path, "w", encoding="utf-8") as handle:
            handle.writelines(f"{name}\n" for name in namespaces)