"""Normalised property tree shared by every format parser.

Purpose
-------
Hold configuration as a flat mapping from :class:`~yodel.domain.path.PropertyPath`
to scalar leaves. Composite structure is implied by the set of paths sharing a
prefix, never stored as a nested container, which reduces merging to a
key-wise right-biased overwrite.

Contents
--------
* :class:`ValueKind` / :func:`kind_of` – closed set of leaf kinds.
* :class:`Properties` – immutable tree with ``merge`` / ``insert`` /
  ``singleton`` / ``from_native`` and the post-load :meth:`Properties.validate`.
* :func:`merge` / :func:`insert` – functional aliases used by the application
  layer.

System Role
-----------
Parsers produce :class:`Properties` via :meth:`Properties.from_native`; the merge
policy folds per-file trees; the final tree is frozen inside
:class:`~yodel.domain.context.Context`.
"""

from __future__ import annotations

import datetime as _dt
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Union

from .errors import EmptyConfig, InvalidConfig, InvalidStructure
from .path import ROOT, PropertyPath

Leaf = Union[str, int, float, bool, None]
"""Closed leaf variant: ``String | Int | Float | Bool | Null``."""

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


class ValueKind(str, Enum):
    """Kind tag for a stored leaf."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    NULL = "null"


def kind_of(value: Any) -> ValueKind:
    """Return the :class:`ValueKind` of *value*.

    ``bool`` is checked before ``int`` because it subclasses ``int`` in Python.

    Examples
    --------
    >>> [kind_of(v).value for v in (True, 3, 2.5, "x", None)]
    ['bool', 'int', 'float', 'string', 'null']
    """

    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    raise TypeError(f"unsupported leaf type: {type(value).__name__}")


class Properties(Mapping[PropertyPath, Leaf]):
    """Immutable path-keyed map of leaves.

    Why
    ----
    A flat ``{path: leaf}`` map makes the merge primitive trivial and keeps
    insertion order for deterministic debugging output.

    Examples
    --------
    >>> base = Properties.from_native({"db": {"host": "localhost", "port": 5432}})
    >>> overlay = Properties.singleton(PropertyPath.parse("db.port"), 6543)
    >>> merged = base.merge(overlay)
    >>> merged[PropertyPath.parse("db.port")], merged[PropertyPath.parse("db.host")]
    (6543, 'localhost')
    >>> [str(path) for path in merged]
    ['db.host', 'db.port']
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[PropertyPath, Leaf] | Iterable[tuple[PropertyPath, Leaf]] = ()) -> None:
        self._entries: Mapping[PropertyPath, Leaf] = MappingProxyType(dict(entries))

    # ------------------------------------------------------------------ Mapping

    def __getitem__(self, path: PropertyPath) -> Leaf:
        return self._entries[path]

    def __iter__(self) -> Iterator[PropertyPath]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        body = ", ".join(f"{str(path)!r}: {value!r}" for path, value in self._entries.items())
        return f"Properties({{{body}}})"

    # ------------------------------------------------------------------ construction

    @classmethod
    def singleton(cls, path: PropertyPath, value: Leaf) -> Properties:
        """Return a tree holding exactly one leaf."""

        return cls(((path, value),))

    @classmethod
    def from_native(cls, document: Any) -> Properties:
        """Walk a parsed document depth-first and emit one leaf per scalar.

        Objects extend the path with a key segment per field, arrays with an
        index segment per element. Empty objects and arrays emit nothing.
        Non-string mapping keys (YAML allows them) are rendered with ``str``.

        Raises
        ------
        InvalidStructure
            For native values outside the closed leaf variant.

        Examples
        --------
        >>> tree = Properties.from_native({"servers": [{"host": "a"}, {"host": "b"}]})
        >>> [str(path) for path in tree]
        ['servers[0].host', 'servers[1].host']
        >>> Properties.from_native(42)
        Properties({'': 42})
        """

        collected: dict[PropertyPath, Leaf] = {}
        _walk(document, ROOT, collected)
        return cls(collected)

    # ------------------------------------------------------------------ algebra

    def merge(self, other: Mapping[PropertyPath, Leaf]) -> Properties:
        """Return the right-biased union of ``self`` and *other*.

        Paths present in both take *other*'s leaf; paths present in only one
        side are copied through unchanged.
        """

        combined = dict(self._entries)
        combined.update(other)
        return Properties(combined)

    def insert(self, path: PropertyPath, value: Leaf) -> Properties:
        """Sugar for ``self.merge(Properties.singleton(path, value))``."""

        return self.merge(Properties.singleton(path, value))

    # ------------------------------------------------------------------ validation

    def validate(self, source: str | None = None) -> Properties:
        """Return ``self`` when the tree is usable, otherwise raise.

        Rules
        -----
        * no leaves at all → :class:`EmptyConfig`;
        * a leaf at the root path → :class:`InvalidConfig` (``value without key``);
        * a leaf whose path is also the prefix of another stored path →
          :class:`InvalidConfig` (ambiguous leaf-vs-branch);
        * a node with both key and index children → :class:`InvalidConfig`
          (layers disagree on object versus array).

        Examples
        --------
        >>> Properties().validate()
        Traceback (most recent call last):
        ...
        yodel.domain.errors.EmptyConfig: configuration is empty
        >>> Properties.from_native("bare").validate()
        Traceback (most recent call last):
        ...
        yodel.domain.errors.InvalidConfig: invalid configuration: value without key
        """

        if not self._entries:
            raise EmptyConfig(source)
        if ROOT in self._entries:
            raise InvalidConfig("value without key")
        for path in self._entries:
            for ancestor in path.ancestors():
                if not ancestor.is_root and ancestor in self._entries:
                    raise InvalidConfig(
                        f"'{ancestor}' holds a value and is also the parent of '{path}'"
                    )
        _check_container_kinds(self._entries)
        return self

    def paths_under(self, prefix: PropertyPath) -> Iterator[PropertyPath]:
        """Yield stored paths that equal or lie below *prefix*."""

        for path in self._entries:
            if path == prefix or prefix.is_prefix_of(path):
                yield path


def merge(left: Mapping[PropertyPath, Leaf], right: Mapping[PropertyPath, Leaf]) -> Properties:
    """Functional alias for :meth:`Properties.merge`."""

    base = left if isinstance(left, Properties) else Properties(left)
    return base.merge(right)


def insert(tree: Properties, path: PropertyPath, value: Leaf) -> Properties:
    """Functional alias for :meth:`Properties.insert`."""

    return tree.insert(path, value)


def _check_container_kinds(paths: Iterable[PropertyPath]) -> None:
    """Reject a node that has both key and index children (an object and an array at once)."""

    kinds: dict[PropertyPath, type] = {}
    for path in paths:
        prefix = ROOT
        for segment in path.segments:
            seen = kinds.setdefault(prefix, type(segment))
            if seen is not type(segment):
                where = "the document root" if prefix.is_root else f"'{prefix}'"
                raise InvalidConfig(f"{where} is used both as an object and as an array")
            prefix = PropertyPath((*prefix.segments, segment))


def _walk(
    node: Any,
    path: PropertyPath,
    collected: dict[PropertyPath, Leaf],
    ancestors: frozenset[int] = frozenset(),
) -> None:
    """Depth-first conversion of a native parser node into leaves.

    *ancestors* holds the ids of the containers on the current descent path;
    YAML aliases can make a container its own descendant.
    """

    if isinstance(node, (Mapping, list, tuple)):
        if id(node) in ancestors:
            raise InvalidStructure(f"recursive reference at '{path}'")
        ancestors = ancestors | {id(node)}
    if isinstance(node, Mapping):
        for key, value in node.items():
            _walk(value, path.key(_key_text(key)), collected, ancestors)
        return
    if isinstance(node, (list, tuple)):
        for position, value in enumerate(node):
            _walk(value, path.index(position), collected, ancestors)
        return
    collected[path] = _leaf(node, path)


def _key_text(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _leaf(value: Any, path: PropertyPath) -> Leaf:
    """Map a native scalar onto the closed leaf variant."""

    if value is None or isinstance(value, (str, bool)):
        return value
    if isinstance(value, int):
        if not _I64_MIN <= value <= _I64_MAX:
            raise InvalidStructure(f"integer at '{path}' does not fit in 64 bits: {value}")
        return value
    if isinstance(value, float):
        return value
    if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
        return value.isoformat()
    raise InvalidStructure(f"unsupported value at '{path}': {type(value).__name__}")
