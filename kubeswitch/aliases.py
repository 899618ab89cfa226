"""Alias records kept in the switch state directory."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass, field

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from tabulate import tabulate

from kubeswitch.types import ContextAlias

__all__ = [
    "AliasStore",
    "get_context_for_alias",
    "list_aliases",
    "remove_alias",
]

_ALIAS_FILE_NAME = "alias"


def _yaml() -> YAML:
    yaml = YAML(typ="safe", pure=True)
    yaml.default_flow_style = False
    return yaml


def _ensure_dir(state_dir: str) -> None:
    if not os.path.exists(state_dir):
        os.mkdir(state_dir, 0o755)


@dataclass
class AliasStore:
    """The alias state file and its content."""

    path: str
    content: ContextAlias = field(default_factory=ContextAlias)

    @classmethod
    def load(cls, state_dir: str) -> AliasStore:
        """Load the alias file of ``state_dir``; a missing file means no aliases."""
        store = cls(path=f"{state_dir}/switch.{_ALIAS_FILE_NAME}")
        try:
            with open(store.path, "r", encoding="utf-8") as handle:
                text = handle.read()
        except FileNotFoundError:
            return store
        if not text:
            return store
        try:
            store.content = ContextAlias.from_dict(_yaml().load(text))
        except (YAMLError, ValueError) as err:
            raise ValueError(
                f"could not unmarshal index file with path '{store.path}': {err}"
            ) from err
        return store

    def find_context(self, alias: str) -> str | None:
        """Return the context currently mapped to ``alias``, if any."""
        for context, existing in (self.content.context_to_alias_mapping or {}).items():
            if existing == alias:
                return context
        return None

    def write_alias(self, alias_name: str, context_name: str) -> str | None:
        """Map ``context_name`` to ``alias_name`` and save.

        Returns the context that held this alias before, or None.
        """
        if self.content.context_to_alias_mapping is None:
            self.content.context_to_alias_mapping = {}
        replaced = self.find_context(alias_name)
        if replaced is not None:
            del self.content.context_to_alias_mapping[replaced]
        self.content.context_to_alias_mapping[context_name] = alias_name
        self.write_all()
        return replaced

    def write_all(self) -> None:
        """Overwrite the alias file with the current content."""
        buffer = io.StringIO()
        _yaml().dump(self.content.to_dict(), buffer)
        with open(self.path, "w", encoding="utf-8") as handle:
            handle.write(buffer.getvalue())


def get_context_for_alias(context: str, mapping: dict[str, str]) -> str:
    """Look up ``context`` in an alias-to-context mapping; empty if absent."""
    return mapping.get(context, "")


def list_aliases(state_dir: str) -> None:
    """Print a table of all registered aliases."""
    _ensure_dir(state_dir)
    store = AliasStore.load(state_dir)
    mapping = store.content.context_to_alias_mapping
    if mapping is None:
        print("No aliases registered")
        return

    rows = [(alias, context) for context, alias in mapping.items()]
    rows.append(("TOTAL", str(len(mapping))))
    print(tabulate(rows, headers=["ALIAS", "CONTEXT"], tablefmt="psql"))


def remove_alias(alias_to_remove: str, state_dir: str) -> None:
    """Delete an alias; raises LookupError if it does not exist."""
    _ensure_dir(state_dir)
    store = AliasStore.load(state_dir)
    mapping = store.content.context_to_alias_mapping
    if mapping is None:
        print("No aliases registered")
        return

    remaining = {ctx: alias for ctx, alias in mapping.items() if alias != alias_to_remove}
    if len(remaining) == len(mapping):
        raise LookupError(f'alias with name "{alias_to_remove}" does not exist')

    store.content.context_to_alias_mapping = remaining
    try:
        store.write_all()
    except OSError as err:
        raise OSError(f"failed to write aliases: {err}") from err
    print(
        f'Removed alias "{alias_to_remove}". '
        f"There are now {len(remaining)} alias(es) defined. "
    )