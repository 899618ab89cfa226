"""Kubeconfig editing, configuration model, context aliases, switch history and namespace caching."""

__version__ = "0.1.0"

__all__ = ["types", "kubeconfig", "util", "aliases", "history", "namespace_cache"]