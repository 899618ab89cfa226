"""Helpers for reading sanitized kubeconfigs and expanding paths."""

from __future__ import annotations

import io
import os
import re

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from kubeswitch.types import KubeConfig

__all__ = [
    "parse_sanitized_kubeconfig",
    "get_context_names_from_kubeconfig",
    "expand_env",
]

_ENV_REFERENCE = re.compile(
    r"\$(?:\{([^}]*)\}|([*#$@!?\-0-9])|([A-Za-z0-9_]+))"
)


def _yaml() -> YAML:
    yaml = YAML(typ="safe", pure=True)
    yaml.default_flow_style = False
    return yaml


def parse_sanitized_kubeconfig(data: bytes | str) -> KubeConfig:
    """Parse kubeconfig data into a model that carries no credentials."""
    text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
    try:
        raw = _yaml().load(text)
        return KubeConfig.from_dict(raw)
    except (YAMLError, ValueError) as err:
        raise ValueError(f"could not unmarshal kubeconfig: {err}") from err


def _context_names(config: KubeConfig, prefix: str) -> list[str]:
    if prefix:
        prefix = f"{prefix}/"
    return [f"{prefix}{context.name}" for context in config.contexts]


def get_context_names_from_kubeconfig(
    kubeconfig_bytes: bytes | str, context_prefix: str
) -> tuple[str, list[str]]:
    """Return the sanitized kubeconfig as YAML and its prefixed context names."""
    try:
        config = parse_sanitized_kubeconfig(kubeconfig_bytes)
    except ValueError as err:
        raise ValueError(f"could not parse Kubeconfig: {err}") from err

    buffer = io.StringIO()
    _yaml().dump(config.to_dict(), buffer)
    return buffer.getvalue(), _context_names(config, context_prefix)


def expand_env(path: str) -> str:
    """Replace ``~`` with ``$HOME`` and substitute environment variables.

    Variables that are not set expand to an empty string.
    """
    path = path.replace("~", "$HOME")

    def substitute(match: re.Match[str]) -> str:
        name = next(group for group in match.groups() if group is not None)
        return os.environ.get(name, "")

    return _ENV_REFERENCE.sub(substitute, path)