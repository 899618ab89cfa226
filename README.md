# kubeswitch

A library for switching between Kubernetes contexts and namespaces. It works
on copies of kubeconfig files, so the files you keep on disk stay as they are.
It also keeps aliases, a switch history and a per-context namespace cache.

## Installation

    pip install kubeswitch

To run the tests, install the `test` extra and run `pytest`.

## Modules

### `kubeswitch.kubeconfig`

`Kubeconfig` loads a kubeconfig document and edits it. Every field is kept,
credentials included. There are two ways to create one:

- `Kubeconfig.for_path(path)` loads a file. `write()` then overwrites that file.
- `Kubeconfig.temporary(data)` wraps bytes or text. `write()` then creates a
  new `config.*.tmp` file in `temporary_kubeconfig_dir()`, which is
  `$HOME/.kube/.switch_tmp`.

Either way, `write()` returns the path it wrote to. `to_bytes()` returns the
YAML without writing anything.

Reading, all properties that return `""` when the field is absent:

- `current_context`
- `kubeswitch_context`
- `gardener_landscape_identity`, `gardener_project`,
  `gardener_cluster_name`, `gardener_cluster_type`

`is_gardener_kubeconfig` reports whether the landscape identity is present.

Other reads:

- `context_names()` returns the names of all contexts.
- `namespace_of_context(name)` returns the namespace of a context, or
  `"default"` when it has none.

Editing:

- `modify_current_context(name)` sets the current context.
- `modify_context_name(old, new)` renames the first context called `old`.
- `remove_context(name)` removes every context with that name.
- `set_context(current, original_before_alias, prefix)` makes `current` the
  current context. If `original_before_alias` is given, the context with that
  name (minus a `prefix/`) is renamed to `current` first.
- `set_kubeswitch_context(context)` stores the context name as the switcher
  knows it.
- `set_gardener_store_meta_information(landscape_identity, cluster_type,
  project, name)` stores the Gardener metadata.
- `set_namespace(context, namespace)` sets the namespace of a context.
- `set_namespace_for_current_context(namespace)` does the same for the
  current context.

Every failure raises `KubeconfigError`. This covers a document that is not a
mapping, a missing or malformed `contexts` list, an unknown context, no
current context, and a file that cannot be read or written.

### `kubeswitch.types`

Dataclasses for the configuration file and the state files:

- configuration: `Config`, `KubeconfigStore`, `Cache`, `Hook`,
  `HookExecution`, and the older `ConfigOld` / `KubeconfigPath`
- state: `HookState`, `Index`, `IndexState`, `ContextAlias`
- store settings: `StoreConfigVault`, `StoreConfigGardener`,
  `StoreConfigGKE`, `GKEAuthentication`, `StoreConfigAzure`,
  `StoreConfigEKS`, `StoreConfigRancher`
- a kubeconfig without credentials: `KubeConfig`, with `KubeContext`,
  `Context`, `KubeCluster`, `Cluster`, `KubeUser`, `User`, `AuthProvider`,
  `ExecProvider`, `EnvMap` and `TypeMeta`

The enums are `StoreKind`, `HookType` and `GCPAuthenticationType`.

The classes that are read from YAML have `from_dict`. The state classes and
`KubeConfig` also have `to_dict`. Malformed input raises `ValueError`.

`parse_duration("1h30m")` returns seconds as a float. `format_duration(5400)`
returns `"1h30m0s"`.

### `kubeswitch.util`

- `parse_sanitized_kubeconfig(data)` returns a `KubeConfig`.
- `get_context_names_from_kubeconfig(data, prefix)` returns a pair: the
  sanitized kubeconfig as YAML text, and its context names, each written as
  `prefix/name` when a prefix is given.
- `expand_env(path)` turns `~` into `$HOME` and substitutes environment
  variables. Unset variables become empty.

### `kubeswitch.aliases`

`AliasStore.load(state_dir)` reads `<state_dir>/switch.alias`. A missing file
means no aliases.

- `write_alias(alias, context)` maps a context to an alias, saves the file,
  and returns the context that held the alias before, if any.
- `find_context(alias)` looks up the context for an alias.
- `write_all()` saves the current content.

Module functions:

- `list_aliases(state_dir)` prints a table of aliases and contexts.
- `remove_alias(alias, state_dir)` deletes an alias. It raises `LookupError`
  if the alias does not exist.
- `get_context_for_alias(name, mapping)` returns the value for `name`, or
  `""`.

### `kubeswitch.history`

The history file is `$HOME/.kube/.switch_history` by default. It has one
`context:: namespace` line per switch.

- `append_to_history(context, namespace)` adds a line, unless it would repeat
  the last one.
- `read_history()` returns the entries, newest first. It raises
  `HistoryError` if there is no history file yet.
- `parse_history_entry(entry)` returns `(context, namespace)`. The namespace
  is `None` for entries that hold only a context.

Each of the first two functions takes an optional `path` argument in place of
the default file.

### `kubeswitch.namespace_cache`

`NamespaceCache(state_dir, context)` stores namespace names in
`<state_dir>/namespace/<context without slashes>`.

- `content` returns them in reverse order of the file's lines.
- `write(namespaces)` replaces the file.

## Example

```python
from kubeswitch.kubeconfig import Kubeconfig
from kubeswitch.history import append_to_history

with open("dev-config", "rb") as fh:
    kubeconfig = Kubeconfig.temporary(fh.read())

kubeconfig.set_context("dev", "", "")
kubeconfig.set_kubeswitch_context("team/dev")
kubeconfig.set_namespace_for_current_context("monitoring")
path = kubeconfig.write()

append_to_history("team/dev", kubeconfig.namespace_of_context("dev"))
print(path)
```

Point `KUBECONFIG` at the printed path to use the selected context.

```python
from kubeswitch.aliases import AliasStore

store = AliasStore.load("/home/me/.kube/switch-state")
replaced = store.write_alias("prod", "team/prod-eu")
```

## What it does not do

This is a library only. It has:

- no command-line program
- no interactive selection
- no search across kubeconfig stores

It does not talk to any store backend: filesystem search, Vault, Gardener,
GKE, Azure, EKS or Rancher. The store settings classes only describe their
configuration.

It does not contact a Kubernetes API server, so it cannot list namespaces or
check that they exist.

`Hook` and `HookState` describe hooks, but nothing here runs them.