import os

from kubeswitch.namespace_cache import NamespaceCache


def test_creates_namespace_directory(tmp_path):
    cache = NamespaceCache(str(tmp_path), "ctx")
    assert os.path.isdir(tmp_path / "namespace")
    assert cache.path == f"{tmp_path}/namespace/ctx"


def test_empty_when_no_file(tmp_path):
    cache = NamespaceCache(str(tmp_path), "ctx")
    assert cache.content == []
    assert cache.has_content() is True


def test_context_name_is_sanitized(tmp_path):
    cache = NamespaceCache(str(tmp_path), "store/ctx")
    cache.write(["default"])
    assert os.path.isfile(tmp_path / "namespace" / "storectx")
    assert cache.path == f"{tmp_path}/namespace/storectx"


def test_write_then_load_reverses_order(tmp_path):
    NamespaceCache(str(tmp_path), "ctx").write(["a", "b", "c"])
    assert NamespaceCache(str(tmp_path), "ctx").content == ["c", "b", "a"]


def test_write_overwrites_previous_content(tmp_path):
    cache = NamespaceCache(str(tmp_path), "ctx")
    cache.write(["a", "b"])
    cache.write(["z"])
    assert NamespaceCache(str(tmp_path), "ctx").content == ["z"]
    assert (tmp_path / "namespace" / "ctx").read_text() == "z\n"


def test_empty_file_gives_empty_content(tmp_path):
    NamespaceCache(str(tmp_path), "ctx").write([])
    assert NamespaceCache(str(tmp_path), "ctx").content == []


def test_content_is_a_copy(tmp_path):
    NamespaceCache(str(tmp_path), "ctx").write(["a"])
    cache = NamespaceCache(str(tmp_path), "ctx")
    cache.content.append("b")
    assert cache.content == ["a"]