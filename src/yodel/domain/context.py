"""Frozen configuration context handed to consumers.

Purpose
-------
Wrap the validated :class:`~yodel.domain.properties.Properties` tree together
with provenance metadata and expose typed, dot-addressable accessors. This is
the only type end consumers receive from :func:`yodel.load`.

Contents
--------
* :class:`SourceInfo` – which file/profile produced a leaf.
* :class:`Context` – immutable ``Mapping[str, Leaf]`` keyed by rendered paths,
  with ``get_*`` / ``get_*_or`` / ``parse_*`` accessors, :meth:`Context.origin`,
  :meth:`Context.with_overrides`, and :meth:`Context.as_dict`.
* :data:`EMPTY_CONTEXT` – canonical empty instance.

System Role
-----------
Domain layer, no I/O. Lookups raise the :class:`~yodel.domain.errors.PropertiesError`
family; loading errors never originate here.
"""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterator, TypedDict, TypeVar

from .errors import PathNotFound, PropertiesError, TypeMismatch
from .path import Index, PropertyPath
from .properties import Leaf, Properties, ValueKind, kind_of


class SourceInfo(TypedDict):
    """Describe the origin of a resolved leaf.

    Attributes
    ----------
    profile:
        Profile name that supplied the leaf, ``None`` for the base file, inline
        content, and overrides.
    path:
        Filesystem path of the supplying file, ``None`` for in-memory sources.
    key:
        Rendered property path (for example ``"server.port"``).
    """

    profile: str | None
    path: str | None
    key: str


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Context(MappingABC[str, Leaf]):
    """Immutable, validated configuration with typed accessors.

    Why
    ----
    Callers need a read-only structure that behaves like a dictionary of
    dotted keys yet reports precise diagnostics on missing or mistyped values.

    Parameters
    ----------
    properties:
        The merged and validated property tree.
    meta:
        Mapping from rendered path to :class:`SourceInfo`.

    Examples
    --------
    >>> ctx = Context(Properties.from_native({"server": {"port": 8080, "host": "0.0.0.0"}}))
    >>> ctx.get_int("server.port")
    8080
    >>> ctx["server.host"]
    '0.0.0.0'
    >>> ctx.get_string_or("server.name", "demo")
    'demo'
    >>> ctx.with_overrides({"server.port": 9090}).get_int("server.port")
    9090
    """

    properties: Properties
    meta: Mapping[str, SourceInfo] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))

    # ------------------------------------------------------------------ Mapping

    def __getitem__(self, key: str) -> Leaf:
        """Return the leaf stored at dotted path *key* or raise :class:`PathNotFound`."""

        return self._lookup(key)

    def __iter__(self) -> Iterator[str]:
        return (str(path) for path in self.properties)

    def __len__(self) -> int:
        return len(self.properties)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        try:
            self._lookup(key)
        except PropertiesError:
            return False
        return True

    def get(self, key: str, default: Any = None) -> Any:  # type: ignore[override]
        """Return the leaf at *key*, or *default* when it is absent or *key* is malformed.

        Examples
        --------
        >>> ctx = Context(Properties.from_native({"a": {"b": 1}}))
        >>> ctx.get("a.b"), ctx.get("a.c", 0), ctx.get("a..b", "bad")
        (1, 0, 'bad')
        """

        try:
            return self._lookup(key)
        except PropertiesError:
            return default

    # ------------------------------------------------------------------ typed getters

    def get_string(self, key: str) -> str:
        """Return the ``String`` leaf at *key*.

        Raises
        ------
        PathNotFound
            When nothing is stored at *key*.
        TypeMismatch
            When the stored leaf is not a string.
        """

        value = self._lookup(key)
        if kind_of(value) is not ValueKind.STRING:
            raise TypeMismatch(key, ValueKind.STRING.value, value)
        return value  # type: ignore[return-value]

    def get_int(self, key: str) -> int:
        value = self._lookup(key)
        if kind_of(value) is not ValueKind.INT:
            raise TypeMismatch(key, ValueKind.INT.value, value)
        return value  # type: ignore[return-value]

    def get_float(self, key: str) -> float:
        """Return a ``Float`` leaf; ``Int`` leaves are widened to ``float``."""

        value = self._lookup(key)
        kind = kind_of(value)
        if kind is ValueKind.FLOAT:
            return value  # type: ignore[return-value]
        if kind is ValueKind.INT:
            return float(value)  # type: ignore[arg-type]
        raise TypeMismatch(key, ValueKind.FLOAT.value, value)

    def get_bool(self, key: str) -> bool:
        value = self._lookup(key)
        if kind_of(value) is not ValueKind.BOOL:
            raise TypeMismatch(key, ValueKind.BOOL.value, value)
        return value  # type: ignore[return-value]

    def get_string_or(self, key: str, default: str) -> str:
        return _or_default(self.get_string, key, default)

    def get_int_or(self, key: str, default: int) -> int:
        return _or_default(self.get_int, key, default)

    def get_float_or(self, key: str, default: float) -> float:
        return _or_default(self.get_float, key, default)

    def get_bool_or(self, key: str, default: bool) -> bool:
        return _or_default(self.get_bool, key, default)

    # ------------------------------------------------------------------ coercing getters

    def parse_string(self, key: str) -> str:
        """Render any non-null scalar as text.

        Examples
        --------
        >>> ctx = Context(Properties.from_native({"port": 80, "debug": False}))
        >>> ctx.parse_string("port"), ctx.parse_string("debug")
        ('80', 'false')
        """

        value = self._lookup(key)
        kind = kind_of(value)
        if kind is ValueKind.STRING:
            return value  # type: ignore[return-value]
        if kind is ValueKind.BOOL:
            return "true" if value else "false"
        if kind in (ValueKind.INT, ValueKind.FLOAT):
            return str(value)
        raise TypeMismatch(key, ValueKind.STRING.value, value)

    def parse_int(self, key: str) -> int:
        """Coerce numeric text and integral floats to ``int``.

        Examples
        --------
        >>> ctx = Context(Properties.from_native({"port": " 8080 ", "ratio": 2.0}))
        >>> ctx.parse_int("port"), ctx.parse_int("ratio")
        (8080, 2)
        """

        value = self._lookup(key)
        kind = kind_of(value)
        if kind is ValueKind.INT:
            return value  # type: ignore[return-value]
        if kind is ValueKind.FLOAT and float(value).is_integer():  # type: ignore[arg-type]
            return int(value)  # type: ignore[arg-type]
        if kind is ValueKind.STRING:
            try:
                return int(value.strip())  # type: ignore[union-attr]
            except ValueError:
                pass
        raise TypeMismatch(key, ValueKind.INT.value, value)

    def parse_float(self, key: str) -> float:
        value = self._lookup(key)
        kind = kind_of(value)
        if kind in (ValueKind.FLOAT, ValueKind.INT):
            return float(value)  # type: ignore[arg-type]
        if kind is ValueKind.STRING:
            try:
                return float(value.strip())  # type: ignore[union-attr]
            except ValueError:
                pass
        raise TypeMismatch(key, ValueKind.FLOAT.value, value)

    def parse_bool(self, key: str) -> bool:
        """Coerce ``"true"``/``"false"`` (any case) and ``0``/``1`` to ``bool``."""

        value = self._lookup(key)
        kind = kind_of(value)
        if kind is ValueKind.BOOL:
            return value  # type: ignore[return-value]
        if kind is ValueKind.INT and value in (0, 1):
            return bool(value)
        if kind is ValueKind.STRING:
            lowered = value.strip().lower()  # type: ignore[union-attr]
            if lowered == "true":
                return True
            if lowered == "false":
                return False
        raise TypeMismatch(key, ValueKind.BOOL.value, value)

    # ------------------------------------------------------------------ provenance & helpers

    def origin(self, key: str) -> SourceInfo | None:
        """Return provenance for *key* or ``None`` when unknown."""

        return self.meta.get(str(PropertyPath.parse(key)))

    def with_overrides(self, overrides: Mapping[str, Leaf]) -> Context:
        """Return a new context with dotted-path *overrides* merged on top.

        The result is validated again so an override cannot introduce an
        ambiguous leaf-vs-branch shape.
        """

        overlay = Properties((PropertyPath.parse(key), value) for key, value in overrides.items())
        normalised = _normalise_leaves(overlay)
        merged = self.properties.merge(normalised)
        meta = dict(self.meta)
        for path in normalised:
            meta[str(path)] = SourceInfo(profile=None, path=None, key=str(path))
        return Context(merged.validate(), meta)

    def as_dict(self) -> Any:
        """Rebuild nested ``dict``/``list`` containers from the flat tree.

        A document whose top level is an array rebuilds into a ``list``.

        Examples
        --------
        >>> ctx = Context(Properties.from_native({"db": {"replicas": ["a", "b"]}, "debug": True}))
        >>> ctx.as_dict()
        {'db': {'replicas': ['a', 'b']}, 'debug': True}
        """

        top_level_array = any(path.segments and isinstance(path.segments[0], Index) for path in self.properties)
        root: Any = [] if top_level_array else {}
        for path, value in self.properties.items():
            _assign(root, path, value)
        return root

    def _lookup(self, key: str) -> Leaf:
        path = PropertyPath.parse(key)
        try:
            return self.properties[path]
        except KeyError:
            raise PathNotFound(key) from None


def _or_default(getter: Callable[[str], T], key: str, default: T) -> T:
    try:
        return getter(key)
    except PropertiesError:
        return default


def _normalise_leaves(overlay: Properties) -> Properties:
    """Re-run overlay values through the native walk so only valid leaves enter."""

    collected: dict[PropertyPath, Leaf] = {}
    for path, value in overlay.items():
        for sub_path, leaf in Properties.from_native(value).items():
            collected[PropertyPath((*path.segments, *sub_path.segments))] = leaf
    return Properties(collected)


def _assign(root: Any, path: PropertyPath, value: Leaf) -> None:
    """Place *value* at *path* inside nested containers, creating them on demand."""

    container: Any = root
    segments = path.segments
    for position, segment in enumerate(segments):
        last = position == len(segments) - 1
        nxt = None if last else segments[position + 1]
        empty: Any = [] if isinstance(nxt, Index) else {}
        if isinstance(segment, Index):
            while len(container) <= segment.position:
                container.append(None)
            if last:
                container[segment.position] = value
            else:
                if container[segment.position] is None:
                    container[segment.position] = empty
                container = container[segment.position]
        else:
            if last:
                container[segment.name] = value
            else:
                container = container.setdefault(segment.name, empty)


EMPTY_CONTEXT = Context(Properties())
"""Canonical empty context; safe to share because :class:`Context` is immutable."""
