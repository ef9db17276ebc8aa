"""Property path value objects.

Purpose
-------
Describe one coordinate into the property tree as an immutable sequence of
segments. Every parser, the merge policy, and the :class:`Context` accessors
address leaves through :class:`PropertyPath`, so rendering and parsing rules
live in exactly one place.

Contents
--------
* :class:`Key` – object field segment (``database``).
* :class:`Index` – array element segment (``[0]``).
* :class:`PropertyPath` – ordered, hashable tuple of segments with helpers for
  extension, prefix checks, rendering, and parsing.
* :data:`ROOT` – the empty path (a bare scalar document lands here).

System Role
-----------
Pure domain code: no I/O, no logging. Rendering contract is
``database.servers[0].host``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from .errors import InvalidPath


@dataclass(frozen=True, slots=True)
class Key:
    """Object field segment."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Index:
    """Array element segment (non-negative position)."""

    position: int

    def __post_init__(self) -> None:
        if self.position < 0:
            raise ValueError(f"Index segments must be non-negative, got {self.position}")

    def __str__(self) -> str:
        return f"[{self.position}]"


Segment = Union[Key, Index]


@dataclass(frozen=True, slots=True)
class PropertyPath:
    """Immutable ordered sequence of :class:`Key` / :class:`Index` segments.

    Why
    ----
    Storing leaves under full paths (instead of nested containers) turns merge
    into a key-wise overwrite. Equality and hashing are structural so paths can
    key a ``dict`` directly.

    Examples
    --------
    >>> path = PropertyPath.parse("database.servers[0].host")
    >>> path.segments
    (Key(name='database'), Key(name='servers'), Index(position=0), Key(name='host'))
    >>> str(path)
    'database.servers[0].host'
    >>> str(ROOT.key("items").index(2))
    'items[2]'
    """

    segments: tuple[Segment, ...] = ()

    def key(self, name: str) -> PropertyPath:
        """Return a new path extended with a key segment."""

        return PropertyPath((*self.segments, Key(name)))

    def index(self, position: int) -> PropertyPath:
        """Return a new path extended with an index segment."""

        return PropertyPath((*self.segments, Index(position)))

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def parent(self) -> PropertyPath | None:
        if not self.segments:
            return None
        return PropertyPath(self.segments[:-1])

    def ancestors(self) -> Iterator[PropertyPath]:
        """Yield every proper prefix, nearest first, ending with the root path.

        Examples
        --------
        >>> [str(p) for p in PropertyPath.parse("a.b[1]").ancestors()]
        ['a.b', 'a', '']
        """

        for length in range(len(self.segments) - 1, -1, -1):
            yield PropertyPath(self.segments[:length])

    def is_prefix_of(self, other: PropertyPath) -> bool:
        """Return ``True`` when *other* lies strictly below this path.

        Examples
        --------
        >>> PropertyPath.parse("a").is_prefix_of(PropertyPath.parse("a.b"))
        True
        >>> PropertyPath.parse("a").is_prefix_of(PropertyPath.parse("a"))
        False
        """

        size = len(self.segments)
        return len(other.segments) > size and other.segments[:size] == self.segments

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __str__(self) -> str:
        rendered: list[str] = []
        for segment in self.segments:
            if isinstance(segment, Index):
                rendered.append(str(segment))
            elif rendered:
                rendered.append(f".{segment.name}")
            else:
                rendered.append(segment.name)
        return "".join(rendered)

    @classmethod
    def parse(cls, text: str) -> PropertyPath:
        """Parse dotted/bracket notation into a :class:`PropertyPath`.

        The empty string parses to :data:`ROOT`. Malformed input (empty key
        segments, unbalanced brackets, non-numeric indices) raises
        :class:`~yodel.domain.errors.InvalidPath`.

        Examples
        --------
        >>> PropertyPath.parse("[0].name")
        PropertyPath(segments=(Index(position=0), Key(name='name')))
        >>> PropertyPath.parse("a..b")
        Traceback (most recent call last):
        ...
        yodel.domain.errors.InvalidPath: invalid property path 'a..b': empty key segment
        """

        return PropertyPath(tuple(_parse_segments(text)))


ROOT = PropertyPath()
"""The empty path; only a bare scalar document stores a leaf here."""


def _parse_segments(text: str) -> Iterator[Segment]:
    """Scan *text* left to right yielding segments."""

    position = 0
    length = len(text)
    expect_key = True
    while position < length:
        char = text[position]
        if char == "[":
            close = text.find("]", position)
            if close < 0:
                raise InvalidPath(text, "unterminated index")
            digits = text[position + 1 : close]
            if not (digits.isascii() and digits.isdigit()):
                raise InvalidPath(text, f"index must be a non-negative integer, got {digits!r}")
            yield Index(int(digits))
            position = close + 1
            expect_key = False
            continue
        if char == ".":
            if expect_key:
                raise InvalidPath(text, "empty key segment")
            position += 1
            expect_key = True
            if position == length:
                raise InvalidPath(text, "empty key segment")
            continue
        if not expect_key:
            raise InvalidPath(text, "expected '.' or '[' after index")
        end = position
        while end < length and text[end] not in ".[":
            if text[end] == "]":
                raise InvalidPath(text, "unbalanced ']'")
            end += 1
        yield Key(text[position:end])
        position = end
        expect_key = False
