from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from yodel.adapters.env.process import ProcessEnvironment
from yodel.application.resolver import resolve, resolve_text
from yodel.domain.errors import UnresolvedPlaceholder
from yodel.domain.options import Options, ResolveMode

LENIENT = Options()
STRICT = Options().with_resolve_mode(ResolveMode.STRICT)


def env(**values: str) -> ProcessEnvironment:
    return ProcessEnvironment(environ=values)


@pytest.mark.parametrize("options", [LENIENT, STRICT], ids=["lenient", "strict"])
def test_present_variable_substitutes(options: Options) -> None:
    assert resolve("name: ${FOO}", options, env(FOO="fooey")) == "name: fooey"


@pytest.mark.parametrize("options", [LENIENT, STRICT], ids=["lenient", "strict"])
def test_default_used_when_absent(options: Options) -> None:
    assert resolve("name: ${BAR:default}", options, env()) == "name: default"


def test_lenient_keeps_unresolved_token() -> None:
    assert resolve("name: ${BAZ}", LENIENT, env()) == "name: ${BAZ}"


def test_strict_names_unresolved_variable() -> None:
    with pytest.raises(UnresolvedPlaceholder) as excinfo:
        resolve("a: 1\nname: ${BAZ}\n", STRICT, env())
    assert excinfo.value.name == "BAZ"
    assert excinfo.value.value == "name: ${BAZ}"


def test_nested_default_prefers_inner_variable() -> None:
    assert resolve("${OUTER:${INNER:0}}", LENIENT, env(INNER="7")) == "7"


def test_nested_default_falls_through_to_literal() -> None:
    assert resolve("${OUTER:${INNER:0}}", LENIENT, env()) == "0"


def test_outer_value_skips_default_branch() -> None:
    assert resolve("${OUTER:${MISSING}}", STRICT, env(OUTER="x")) == "x"


def test_deeply_nested_defaults() -> None:
    assert resolve("${A:${B:${C:${D:deep}}}}", LENIENT, env()) == "deep"


def test_colon_inside_nested_token_does_not_split_outer_default() -> None:
    assert resolve("${A:${B:http://x}/path}", LENIENT, env()) == "http://x/path"


def test_default_may_contain_colons() -> None:
    assert resolve("url: ${URL:https://api.example.com:8443}", LENIENT, env()) == "url: https://api.example.com:8443"


def test_empty_default_is_allowed() -> None:
    assert resolve("v=${MISSING:}", STRICT, env()) == "v="


def test_looked_up_values_are_not_rescanned() -> None:
    assert resolve("${FOO}", STRICT, env(FOO="${BAR}")) == "${BAR}"


def test_empty_environment_value_counts_as_present() -> None:
    assert resolve("${FOO:fallback}", LENIENT, env(FOO="")) == ""


def test_name_whitespace_is_trimmed() -> None:
    assert resolve("${ FOO }", LENIENT, env(FOO="x")) == "x"


def test_lenient_unresolved_nested_token_inside_default_is_kept() -> None:
    assert resolve("${A:${B}}", LENIENT, env()) == "${B}"


def test_strict_unresolved_inside_default_reports_inner_name() -> None:
    with pytest.raises(UnresolvedPlaceholder) as excinfo:
        resolve("key: ${A:${B}}", STRICT, env())
    assert excinfo.value.name == "B"
    assert excinfo.value.value == "key: ${A:${B}}"


def test_unterminated_opener_is_literal_and_scanning_continues() -> None:
    assert resolve("a: ${OPEN\nb: ${FOO}", LENIENT, env(FOO="x")) == "a: ${OPEN\nb: x"


def test_multiple_tokens_on_one_line() -> None:
    assert resolve("${A:1}-${B:2}-${C}", LENIENT, env(C="3")) == "1-2-3"


def test_disabled_resolution_is_identity() -> None:
    text = "name: ${FOO}"
    assert resolve(text, Options().with_placeholders(False), env(FOO="x")) == text


def test_resolve_text_defaults_to_lenient() -> None:
    assert resolve_text("${X}", environment=env()) == "${X}"


@given(st.text(alphabet=st.characters(exclude_characters="${}"), max_size=40))
def test_text_without_tokens_passes_through(text: str) -> None:
    assert resolve(text, STRICT, env()) == text


@given(
    st.from_regex(r"[A-Z][A-Z0-9_]{0,8}", fullmatch=True),
    st.text(alphabet=st.characters(exclude_characters="${}"), max_size=10),
)
def test_environment_value_inserted_verbatim(name: str, value: str) -> None:
    assert resolve(f"<${{{name}}}>", STRICT, env(**{name: value})) == f"<{value}>"
