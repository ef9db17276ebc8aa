from __future__ import annotations

import pytest

from yodel.domain.context import EMPTY_CONTEXT, Context, SourceInfo
from yodel.domain.errors import InvalidConfig, PathNotFound, TypeMismatch
from yodel.domain.properties import Properties


def make_context(data: object, meta: dict[str, SourceInfo] | None = None) -> Context:
    return Context(Properties.from_native(data), meta or {})


@pytest.fixture()
def context() -> Context:
    return make_context(
        {
            "server": {"host": "0.0.0.0", "port": 8080, "ratio": 0.5, "debug": False},
            "text": {"port": " 9090 ", "ratio": "2.5", "flag": "TRUE", "off": "false", "word": "eighty"},
            "numbers": {"one": 1, "two": 2, "whole": 3.0},
            "nothing": None,
            "servers": [{"host": "a"}, {"host": "b"}],
        }
    )


def test_mapping_interface_uses_rendered_paths(context: Context) -> None:
    assert context["server.port"] == 8080
    assert context["servers[1].host"] == "b"
    assert "server.host" in context
    assert "server.missing" not in context
    assert 42 not in context
    assert "servers[0].host" in list(context)
    assert len(context) == 15


def test_missing_path_raises_path_not_found(context: Context) -> None:
    with pytest.raises(PathNotFound, match="property not found: server.name"):
        context.get_string("server.name")
    assert context.get("server.name") is None


def test_exact_getters(context: Context) -> None:
    assert context.get_string("server.host") == "0.0.0.0"
    assert context.get_int("server.port") == 8080
    assert context.get_float("server.ratio") == 0.5
    assert context.get_bool("server.debug") is False


def test_get_float_widens_ints(context: Context) -> None:
    assert context.get_float("server.port") == 8080.0


def test_bool_is_never_an_int(context: Context) -> None:
    with pytest.raises(TypeMismatch) as excinfo:
        context.get_int("server.debug")
    assert excinfo.value.expected == "int"
    assert excinfo.value.actual is False


def test_type_mismatch_reports_kind_and_value(context: Context) -> None:
    with pytest.raises(TypeMismatch, match="expected int, found string 'eighty'"):
        context.get_int("text.word")


def test_null_fails_every_typed_getter(context: Context) -> None:
    for getter in (context.get_string, context.get_int, context.get_float, context.get_bool):
        with pytest.raises(TypeMismatch):
            getter("nothing")


def test_defaulting_getters(context: Context) -> None:
    assert context.get_string_or("server.name", "demo") == "demo"
    assert context.get_int_or("server.host", 1) == 1
    assert context.get_float_or("missing", 1.5) == 1.5
    assert context.get_bool_or("server.debug", True) is False


def test_defaulting_getters_tolerate_malformed_paths(context: Context) -> None:
    assert context.get_int_or("servers[²]", 5) == 5
    assert context.get_string_or("server..host", "fallback") == "fallback"


def test_get_returns_default_for_missing_or_malformed_keys(context: Context) -> None:
    assert context.get("server.port") == 8080
    assert context.get("server.missing") is None
    assert context.get("server.missing", 1) == 1
    assert context.get("server..port", "bad") == "bad"
    assert context.get("servers[²].host") is None


def test_parse_getters_coerce(context: Context) -> None:
    assert context.parse_int("text.port") == 9090
    assert context.parse_int("numbers.whole") == 3
    assert context.parse_float("text.ratio") == 2.5
    assert context.parse_float("numbers.two") == 2.0
    assert context.parse_bool("text.flag") is True
    assert context.parse_bool("text.off") is False
    assert context.parse_bool("numbers.one") is True
    assert context.parse_string("server.port") == "8080"
    assert context.parse_string("server.debug") == "false"


def test_parse_getters_still_fail_on_incompatible_values(context: Context) -> None:
    with pytest.raises(TypeMismatch):
        context.parse_int("text.word")
    with pytest.raises(TypeMismatch):
        context.parse_bool("numbers.two")
    with pytest.raises(TypeMismatch):
        context.parse_int("server.ratio")
    with pytest.raises(TypeMismatch):
        context.parse_string("nothing")


def test_with_overrides_returns_new_context(context: Context) -> None:
    updated = context.with_overrides({"server.port": 9000, "server.tags": ["a", "b"]})
    assert updated.get_int("server.port") == 9000
    assert updated["server.tags[1]"] == "b"
    assert context.get_int("server.port") == 8080
    assert updated.origin("server.port") == {"profile": None, "path": None, "key": "server.port"}


def test_with_overrides_rejects_leaf_branch_conflicts(context: Context) -> None:
    with pytest.raises(InvalidConfig):
        context.with_overrides({"server": "flat"})


def test_origin_reads_provenance() -> None:
    meta = {"db.host": SourceInfo(profile="dev", path="/etc/config-dev.yaml", key="db.host")}
    ctx = make_context({"db": {"host": "x"}}, meta)
    assert ctx.origin("db.host") == meta["db.host"]
    assert ctx.origin("db.port") is None


def test_meta_is_read_only() -> None:
    ctx = make_context({"a": 1}, {"a": SourceInfo(profile=None, path=None, key="a")})
    with pytest.raises(TypeError):
        ctx.meta["b"] = SourceInfo(profile=None, path=None, key="b")  # type: ignore[index]


def test_as_dict_rebuilds_nested_containers(context: Context) -> None:
    rebuilt = context.as_dict()
    assert rebuilt["servers"] == [{"host": "a"}, {"host": "b"}]
    assert rebuilt["server"]["port"] == 8080
    assert rebuilt["nothing"] is None


def test_as_dict_top_level_array() -> None:
    assert make_context([{"a": 1}, {"a": 2}]).as_dict() == [{"a": 1}, {"a": 2}]


def test_empty_context() -> None:
    assert len(EMPTY_CONTEXT) == 0
    assert EMPTY_CONTEXT.as_dict() == {}
