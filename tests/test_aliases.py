import os

import pytest

from kubeswitch.aliases import (
    AliasStore,
    get_context_for_alias,
    list_aliases,
    remove_alias,
)


def test_load_without_file_has_no_mapping(tmp_path):
    store = AliasStore.load(str(tmp_path))
    assert store.content.context_to_alias_mapping is None
    assert store.path == f"{tmp_path}/switch.alias"


def test_load_empty_file_has_no_mapping(tmp_path):
    (tmp_path / "switch.alias").write_text("")
    assert AliasStore.load(str(tmp_path)).content.context_to_alias_mapping is None


def test_load_corrupt_file_raises(tmp_path):
    (tmp_path / "switch.alias").write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        AliasStore.load(str(tmp_path))


def test_write_alias_round_trip(tmp_path):
    store = AliasStore.load(str(tmp_path))
    assert store.write_alias("dev", "store/dev-cluster") is None
    reloaded = AliasStore.load(str(tmp_path))
    assert reloaded.content.context_to_alias_mapping == {"store/dev-cluster": "dev"}


def test_write_alias_replaces_existing_alias(tmp_path):
    store = AliasStore.load(str(tmp_path))
    store.write_alias("dev", "ctx-one")
    replaced = store.write_alias("dev", "ctx-two")
    assert replaced == "ctx-one"
    reloaded = AliasStore.load(str(tmp_path))
    assert reloaded.content.context_to_alias_mapping == {"ctx-two": "dev"}


def test_find_context(tmp_path):
    store = AliasStore.load(str(tmp_path))
    store.write_alias("prod", "ctx-prod")
    assert store.find_context("prod") == "ctx-prod"
    assert store.find_context("missing") is None


def test_get_context_for_alias():
    mapping = {"dev": "ctx-dev"}
    assert get_context_for_alias("dev", mapping) == "ctx-dev"
    assert get_context_for_alias("other", mapping) == ""


def test_remove_alias_missing_raises(tmp_path):
    AliasStore.load(str(tmp_path)).write_alias("dev", "ctx-dev")
    with pytest.raises(LookupError):
        remove_alias("nope", str(tmp_path))


def test_remove_alias_keeps_others(tmp_path, capsys):
    store = AliasStore.load(str(tmp_path))
    store.write_alias("dev", "ctx-dev")
    store.write_alias("prod", "ctx-prod")
    remove_alias("dev", str(tmp_path))
    assert AliasStore.load(str(tmp_path)).content.context_to_alias_mapping == {
        "ctx-prod": "prod"
    }
    assert 'Removed alias "dev"' in capsys.readouterr().out


def test_remove_alias_without_aliases(tmp_path, capsys):
    remove_alias("dev", str(tmp_path))
    assert "No aliases registered" in capsys.readouterr().out


def test_list_aliases_creates_state_dir(tmp_path, capsys):
    state = tmp_path / "state"
    list_aliases(str(state))
    assert os.path.isdir(state)
    assert "No aliases registered" in capsys.readouterr().out


def test_list_aliases_prints_table(tmp_path, capsys):
    store = AliasStore.load(str(tmp_path))
    store.write_alias("dev", "ctx-dev")
    list_aliases(str(tmp_path))
    out = capsys.readouterr().out
    assert "ALIAS" in out
    assert "dev" in out
    assert "ctx-dev" in out
    assert "TOTAL" in out