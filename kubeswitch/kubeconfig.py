"""Editing of kubeconfig files that keeps every field, including credentials."""

from __future__ import annotations

import io
import os
import tempfile
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

__all__ = [
    "DEFAULT_NAMESPACE",
    "KubeconfigError",
    "Kubeconfig",
    "temporary_kubeconfig_dir",
]

DEFAULT_NAMESPACE = "default"

_KUBESWITCH_CONTEXT = "kubeswitch-context"
_CURRENT_CONTEXT = "current-context"
_LANDSCAPE_IDENTITY = "gardener-landscape-identity"
_GARDENER_PROJECT = "gardener-project"
_GARDENER_CLUSTER_NAME = "gardener-cluster-name"
_GARDENER_CLUSTER_TYPE = "gardener-cluster-type"

_MISSING = object()


class KubeconfigError(Exception):
    """Raised when a kubeconfig cannot be read, edited or written."""


def temporary_kubeconfig_dir() -> str:
    """Directory that holds the temporary kubeconfig files written on a switch."""
    return os.path.join(os.environ.get("HOME", ""), ".kube", ".switch_tmp")


def _yaml() -> YAML:
    yaml = YAML(typ="rt")
    yaml.preserve_quotes = True
    yaml.allow_duplicate_keys = True
    return yaml


def _value_of(node: Any, key: str) -> Any:
    """Return the value stored under ``key`` in a mapping, or ``_MISSING``."""
    if not isinstance(node, dict):
        return _MISSING
    return node.get(key, _MISSING)


def _scalar_text(value: Any) -> str:
    if value is _MISSING or value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Kubeconfig:
    """A kubeconfig document that can be edited and written back."""

    def __init__(self, data: bytes | str, path: str, use_tmp_file: bool) -> None:
        text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
        try:
            root = _yaml().load(text)
        except YAMLError as err:
            raise KubeconfigError(f"could not parse kubeconfig: {err}") from err
        if not isinstance(root, dict):
            raise KubeconfigError("kubeconfig file does not have expected format")
        self._root = root
        self.path = path
        self.use_tmp_file = use_tmp_file

    @classmethod
    def for_path(cls, path: str) -> Kubeconfig:
        """Load the kubeconfig at ``path``; writing replaces that file."""
        try:
            with open(path, "rb") as handle:
                data = handle.read()
        except OSError as err:
            raise KubeconfigError(f"failed to read kubeconfig file: {err}") from err
        return cls(data, path, False)

    @classmethod
    def temporary(cls, data: bytes | str) -> Kubeconfig:
        """Wrap kubeconfig data that is written to a new temporary file."""
        return cls(data, temporary_kubeconfig_dir(), True)

    # ------------------------------------------------------------------
    # reading
    # ------------------------------------------------------------------

    def _top_level(self, key: str) -> str:
        return _scalar_text(_value_of(self._root, key))

    @property
    def current_context(self) -> str:
        """The current context, or an empty string when unset."""
        return self._top_level(_CURRENT_CONTEXT)

    @property
    def kubeswitch_context(self) -> str:
        """The context name as known to the switcher, or an empty string."""
        return self._top_level(_KUBESWITCH_CONTEXT)

    @property
    def gardener_landscape_identity(self) -> str:
        return self._top_level(_LANDSCAPE_IDENTITY)

    @property
    def gardener_project(self) -> str:
        return self._top_level(_GARDENER_PROJECT)

    @property
    def gardener_cluster_name(self) -> str:
        return self._top_level(_GARDENER_CLUSTER_NAME)

    @property
    def gardener_cluster_type(self) -> str:
        return self._top_level(_GARDENER_CLUSTER_TYPE)

    @property
    def is_gardener_kubeconfig(self) -> bool:
        """Whether the Gardener store added its meta information."""
        return _value_of(self._root, _LANDSCAPE_IDENTITY) is not _MISSING

    def _contexts(self, missing: str, not_sequence: str) -> list[Any]:
        contexts = _value_of(self._root, "contexts")
        if contexts is _MISSING:
            raise KubeconfigError(missing)
        if not isinstance(contexts, list):
            raise KubeconfigError(not_sequence)
        return contexts

    def _contexts_node(self) -> list[Any]:
        return self._contexts(
            '"contexts" entry is nil', '"contexts" is not a sequence node'
        )

    @staticmethod
    def _name_of(context_node: Any) -> str | None:
        name = _value_of(context_node, "name")
        if name is _MISSING or isinstance(name, (dict, list)):
            return None
        return _scalar_text(name)

    def _context_node(self, name: str) -> CommentedMap:
        for context_node in self._contexts_node():
            if self._name_of(context_node) == name:
                return context_node
        raise KubeconfigError(f'context with name "{name}" not found')

    def context_names(self) -> list[str]:
        """Names of all contexts in the kubeconfig."""
        return [_scalar_text(_value_of(c, "name")) for c in self._contexts_node()]

    def namespace_of_context(self, context_name: str) -> str:
        """Namespace of the given context, ``default`` when none is set."""
        body = _value_of(self._context_node(context_name), "context")
        if body is _MISSING:
            return DEFAULT_NAMESPACE
        namespace = _scalar_text(_value_of(body, "namespace"))
        return namespace or DEFAULT_NAMESPACE

    # ------------------------------------------------------------------
    # editing
    # ------------------------------------------------------------------

    def _set_top_level(self, key: str, value: str) -> None:
        self._root[key] = value

    def modify_current_context(self, name: str) -> None:
        self._set_top_level(_CURRENT_CONTEXT, name)

    def modify_context_name(self, old: str, new: str) -> None:
        """Rename the first context called ``old`` to ``new``."""
        for context_node in self._contexts_node():
            if self._name_of(context_node) == old:
                context_node["name"] = new
                return
        raise KubeconfigError(f'context with name "{old}" not found')

    def remove_context(self, name: str) -> None:
        """Remove every context called ``name``."""
        contexts = self._contexts(
            "contexts entry is nil", "contexts is not a sequence node"
        )
        matching = [
            position
            for position, context_node in enumerate(contexts)
            if _scalar_text(_value_of(context_node, "name")) == name
        ]
        for position in reversed(matching):
            del contexts[position]

    def set_context(
        self, current_context: str, original_context_before_alias: str, prefix: str
    ) -> None:
        """Make ``current_context`` current, renaming the aliased context if given."""
        if original_context_before_alias:
            original = original_context_before_alias
            if prefix and original.startswith(prefix):
                trimmed = f"{prefix}/"
                if original.startswith(trimmed):
                    original = original[len(trimmed):]
            try:
                self.modify_context_name(original, current_context)
            except KubeconfigError as err:
                raise KubeconfigError(
                    f"failed to set currentContext on selected kubeconfig: {err}"
                ) from err
        self.modify_current_context(current_context)

    def set_kubeswitch_context(self, context: str) -> None:
        """Record the context name as the switcher knows it."""
        self._set_top_level(_KUBESWITCH_CONTEXT, context)

    def set_gardener_store_meta_information(
        self, landscape_identity: str, cluster_type: str, project: str, name: str
    ) -> None:
        """Add the meta information later runs need for Gardener clusters."""
        self._set_top_level(_LANDSCAPE_IDENTITY, landscape_identity)
        self._set_top_level(_GARDENER_CLUSTER_TYPE, cluster_type)
        self._set_top_level(_GARDENER_PROJECT, project)
        self._set_top_level(_GARDENER_CLUSTER_NAME, name)

    def set_namespace(self, context_name: str, namespace: str) -> None:
        """Set the namespace of the named context."""
        context_node = self._context_node(context_name)
        body = _value_of(context_node, "context")
        if body is _MISSING or body is None:
            body = CommentedMap()
            context_node["context"] = body
        elif not isinstance(body, dict):
            raise KubeconfigError(
                f'context body of "{context_name}" is not a mapping node'
            )
        body["namespace"] = namespace

    def set_namespace_for_current_context(self, namespace: str) -> None:
        current = self.current_context
        if not current:
            raise KubeconfigError("current-context is not set")
        try:
            self.set_namespace(current, namespace)
        except KubeconfigError as err:
            raise KubeconfigError(
                f'failed to set namespace "{namespace}": {err}'
            ) from err

    # ------------------------------------------------------------------
    # output
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        """The kubeconfig serialised as YAML."""
        buffer = io.StringIO()
        _yaml().dump(self._root, buffer)
        return buffer.getvalue().encode("utf-8")

    def write(self) -> str:
        """Write the kubeconfig and return the path of the written file."""
        content = self.to_bytes()
        if self.use_tmp_file:
            try:
                os.mkdir(self.path, 0o700)
            except FileExistsError:
                pass
            except OSError as err:
                raise KubeconfigError(
                    f"failed to create directory {self.path}: {err}"
                ) from err
            try:
                fd, file_path = tempfile.mkstemp(
                    prefix="config.", suffix=".tmp", dir=self.path
                )
                with os.fdopen(fd, "wb") as handle:
                    handle.write(content)
            except OSError as err:
                raise KubeconfigError(
                    f"failed to write temporary kubeconfig file: {err}"
                ) from err
            return file_path

        try:
            with open(self.path, "wb") as handle:
                handle.write(content)
        except OSError as err:
            raise KubeconfigError(
                f"failed to open existing kubeconfig file: {err}"
            ) from err
        return self.path