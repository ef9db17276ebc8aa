from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from yodel.application.merge import merge_layers
from yodel.domain.path import PropertyPath
from yodel.domain.properties import Properties, merge

KEY = st.sampled_from(["a", "b", "c", "d"])
SCALAR = st.one_of(st.booleans(), st.integers(min_value=-(2**63), max_value=2**63 - 1), st.text(max_size=5), st.none())
PATH = st.lists(KEY, min_size=1, max_size=3).map(lambda keys: PropertyPath.parse(".".join(keys)))
TREE = st.dictionaries(PATH, SCALAR, max_size=6).map(Properties)


def test_precedence_overwrites() -> None:
    layers = [
        (None, Properties.from_native({"feature": {"enabled": False}}), "config.yaml"),
        ("dev", Properties.from_native({"feature": {"enabled": True}}), "config-dev.yaml"),
        ("local", Properties.from_native({"feature": {"level": "debug"}}), "config-local.toml"),
    ]
    merged, meta = merge_layers(layers)
    assert merged[PropertyPath.parse("feature.enabled")] is True
    assert merged[PropertyPath.parse("feature.level")] == "debug"
    assert meta["feature.enabled"] == {"profile": "dev", "path": "config-dev.yaml", "key": "feature.enabled"}
    assert meta["feature.level"]["profile"] == "local"


def test_untouched_leaves_keep_base_provenance() -> None:
    layers = [
        (None, Properties.from_native({"db": {"host": "localhost", "port": 5432}}), "config.yaml"),
        ("dev", Properties.from_native({"db": {"port": 6543}}), "config-dev.yaml"),
    ]
    _, meta = merge_layers(layers)
    assert meta["db.host"]["profile"] is None
    assert meta["db.host"]["path"] == "config.yaml"


def test_no_layers_yield_empty_tree() -> None:
    merged, meta = merge_layers([])
    assert len(merged) == 0
    assert meta == {}


@given(TREE, TREE)
def test_right_bias(left: Properties, right: Properties) -> None:
    merged = merge(left, right)
    for path in right:
        assert merged[path] == right[path]
    for path in left:
        if path not in right:
            assert merged[path] == left[path]
    assert set(merged) == set(left) | set(right)


@given(TREE, TREE, TREE)
def test_left_fold_matches_stepwise_merge(base: Properties, dev: Properties, staging: Properties) -> None:
    folded, _ = merge_layers([(None, base, None), ("dev", dev, None), ("staging", staging, None)])
    stepwise = merge(merge(base, dev), staging)
    assert folded == stepwise


@given(TREE, TREE, TREE)
def test_merge_is_associative(lhs: Properties, mid: Properties, rhs: Properties) -> None:
    assert merge(merge(lhs, mid), rhs) == merge(lhs, merge(mid, rhs))


@given(TREE, TREE)
def test_disjoint_merge_commutes(left: Properties, right: Properties) -> None:
    right_only = Properties({path: value for path, value in right.items() if path not in left})
    assert merge(left, right_only) == merge(right_only, left)
