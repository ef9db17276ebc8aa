from __future__ import annotations

import datetime as dt

import pytest

from yodel.domain.errors import EmptyConfig, InvalidConfig, InvalidStructure
from yodel.domain.path import ROOT, PropertyPath
from yodel.domain.properties import Properties, ValueKind, insert, kind_of, merge


def p(text: str) -> PropertyPath:
    return PropertyPath.parse(text)


def test_from_native_walks_objects_and_arrays_depth_first() -> None:
    tree = Properties.from_native(
        {"database": {"servers": [{"host": "a", "port": 1}, {"host": "b"}]}, "debug": True}
    )
    assert [str(path) for path in tree] == [
        "database.servers[0].host",
        "database.servers[0].port",
        "database.servers[1].host",
        "debug",
    ]
    assert tree[p("database.servers[1].host")] == "b"


def test_from_native_skips_empty_containers() -> None:
    assert len(Properties.from_native({"a": {}, "b": []})) == 0


def test_from_native_keeps_null_leaves() -> None:
    tree = Properties.from_native({"optional": None})
    assert tree[p("optional")] is None


def test_from_native_stringifies_non_string_keys() -> None:
    tree = Properties.from_native({1: "one", None: "nothing", False: "no"})
    assert {str(path) for path in tree} == {"1", "null", "false"}


def test_dates_become_iso_strings() -> None:
    tree = Properties.from_native({"released": dt.date(2024, 5, 1), "at": dt.datetime(2024, 5, 1, 12, 30)})
    assert tree[p("released")] == "2024-05-01"
    assert tree[p("at")] == "2024-05-01T12:30:00"


def test_integers_outside_64_bits_are_rejected() -> None:
    with pytest.raises(InvalidStructure, match="64 bits"):
        Properties.from_native({"huge": 2**63})


def test_unsupported_native_values_are_rejected() -> None:
    with pytest.raises(InvalidStructure, match="unsupported value at 'blob'"):
        Properties.from_native({"blob": b"bytes"})


def test_merge_is_right_biased_and_keeps_disjoint_paths() -> None:
    left = Properties.from_native({"a": 1, "b": 2})
    right = Properties.from_native({"b": 3, "c": 4})
    merged = merge(left, right)
    assert dict((str(k), v) for k, v in merged.items()) == {"a": 1, "b": 3, "c": 4}


def test_merge_does_not_mutate_operands() -> None:
    left = Properties.from_native({"a": 1})
    right = Properties.from_native({"a": 2})
    left.merge(right)
    assert left[p("a")] == 1


def test_insert_is_merge_with_singleton() -> None:
    tree = Properties.from_native({"a": 1})
    assert insert(tree, p("b"), "x") == tree.merge(Properties.singleton(p("b"), "x"))


def test_array_elements_merge_by_full_path() -> None:
    base = Properties.from_native({"servers": [{"host": "a", "port": 1}]})
    overlay = Properties.from_native({"servers": [{"port": 2}]})
    merged = base.merge(overlay)
    assert merged[p("servers[0].host")] == "a"
    assert merged[p("servers[0].port")] == 2


def test_validate_rejects_empty_tree() -> None:
    with pytest.raises(EmptyConfig):
        Properties().validate()


def test_validate_rejects_bare_scalar() -> None:
    with pytest.raises(InvalidConfig, match="value without key"):
        Properties.from_native("bare").validate()


def test_validate_rejects_leaf_that_is_also_a_branch() -> None:
    tree = Properties.from_native({"db": "sqlite"}).merge(Properties.from_native({"db": {"host": "x"}}))
    with pytest.raises(InvalidConfig, match="'db' holds a value"):
        tree.validate()


def test_validate_rejects_node_used_as_object_and_array() -> None:
    nested = Properties.from_native({"a": [1]}).merge(Properties.from_native({"a": {"b": 2}}))
    with pytest.raises(InvalidConfig, match="'a' is used both as an object and as an array"):
        nested.validate()

    top_level = Properties.from_native([1, 2]).merge(Properties.from_native({"name": "x"}))
    with pytest.raises(InvalidConfig, match="document root is used both"):
        top_level.validate()


def test_validate_accepts_consistent_arrays_of_objects() -> None:
    tree = Properties.from_native({"a": [{"b": 1}]}).merge(Properties.from_native({"a": [{"c": 2}, {"b": 3}]}))
    assert tree.validate() is tree


def test_from_native_rejects_self_referencing_containers() -> None:
    loop: list[object] = [1]
    loop.append({"again": loop})
    with pytest.raises(InvalidStructure, match=r"recursive reference at '\[1\]\.again'"):
        Properties.from_native(loop)


def test_from_native_allows_shared_non_recursive_containers() -> None:
    shared = {"host": "a"}
    tree = Properties.from_native({"primary": shared, "replica": shared})
    assert [str(path) for path in tree] == ["primary.host", "replica.host"]


def test_validate_accepts_single_key_document() -> None:
    tree = Properties.from_native({"name": "demo"})
    assert tree.validate() is tree


def test_root_path_is_a_storable_key() -> None:
    tree = Properties.singleton(ROOT, 1)
    assert ROOT in tree


def test_paths_under_prefix() -> None:
    tree = Properties.from_native({"db": {"host": "x", "port": 1}, "dbx": 2})
    assert sorted(str(path) for path in tree.paths_under(p("db"))) == ["db.host", "db.port"]


def test_kind_of_separates_bool_from_int() -> None:
    assert kind_of(True) is ValueKind.BOOL
    assert kind_of(1) is ValueKind.INT
    with pytest.raises(TypeError):
        kind_of([1])


def test_repr_renders_paths() -> None:
    assert repr(Properties.from_native({"a": [1]})) == "Properties({'a[0]': 1})"
