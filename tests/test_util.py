import pytest

from kubeswitch.util import (
    expand_env,
    get_context_names_from_kubeconfig,
    parse_sanitized_kubeconfig,
)

KUBECONFIG = b"""
apiVersion: v1
kind: Config
current-context: first
contexts:
- name: first
  context:
    cluster: cluster-a
    user: user-a
- name: second
  context:
    cluster: cluster-b
    user: user-b
clusters:
- name: cluster-a
  cluster:
    server: https://a.example.com
users:
- name: user-a
  user:
    token: token
"""


def test_parse_sanitized_kubeconfig_reads_contexts():
    config = parse_sanitized_kubeconfig(KUBECONFIG)
    assert [c.name for c in config.contexts] == ["first", "second"]
    assert config.current_context == "first"
    assert config.clusters[0].cluster.server == "https://a.example.com"


def test_parse_sanitized_kubeconfig_rejects_invalid_yaml():
    with pytest.raises(ValueError):
        parse_sanitized_kubeconfig(b"contexts: [")


def test_parse_sanitized_kubeconfig_rejects_non_mapping():
    with pytest.raises(ValueError):
        parse_sanitized_kubeconfig(b"- a\n- b\n")


def test_context_names_with_prefix():
    _, names = get_context_names_from_kubeconfig(KUBECONFIG, "store")
    assert names == ["store/first", "store/second"]


def test_context_names_without_prefix():
    _, names = get_context_names_from_kubeconfig(KUBECONFIG, "")
    assert names == ["first", "second"]


def test_sanitized_output_has_no_credentials_and_round_trips():
    data, _ = get_context_names_from_kubeconfig(KUBECONFIG, "")
    assert "token" not in data
    reparsed = parse_sanitized_kubeconfig(data)
    assert reparsed == parse_sanitized_kubeconfig(KUBECONFIG)


def test_context_names_error_on_bad_data():
    with pytest.raises(ValueError):
        get_context_names_from_kubeconfig(b"contexts: [", "x")


def test_expand_env_home(monkeypatch):
    monkeypatch.setenv("HOME", "/home/someone")
    assert expand_env("~/.kube/config") == "/home/someone/.kube/config"


def test_expand_env_braces_and_unset(monkeypatch):
    monkeypatch.setenv("SWITCH_DIR", "/opt/switch")
    monkeypatch.delenv("SWITCH_UNSET", raising=False)
    assert expand_env("${SWITCH_DIR}/a$SWITCH_UNSET") == "/opt/switch/a"


def test_expand_env_lone_dollar_is_kept():
    assert expand_env("cost$") == "cost$"