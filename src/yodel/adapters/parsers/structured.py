"""Structured grammar parsers.

Purpose
-------
Convert resolved configuration text into :class:`~yodel.domain.properties.Properties`.
Adapters are small wrappers around ``json``/``yaml``/``tomllib`` so error
translation, duplicate-key screening, and observability live in one place.

Contents
--------
* :class:`BaseParser` – shared helpers: blank-text shortcut, tree conversion,
  logging.
* :class:`JSONParser` – ``json`` with duplicate-key detection.
* :class:`YAMLParser` – PyYAML safe loader with duplicate-key detection.
* :class:`TOMLParser` – ``tomllib`` (``tomli`` below Python 3.11).

System Role
-----------
Registered by :mod:`yodel.core` and reached through
:func:`yodel.application.detection.parse`. Every parser satisfies the
:class:`yodel.application.ports.Parser` protocol.
"""

from __future__ import annotations

import json
import re
from collections.abc import Hashable
from typing import Any

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from ...domain.errors import InvalidStructure, InvalidSyntax
from ...domain.options import Format
from ...domain.properties import Properties
from ...observability import log_debug, log_error

_TOML_LOCATION = re.compile(r"\s*\(at line (\d+), column (\d+)\)\s*$")
_YAML_MERGE_TAG = "tag:yaml.org,2002:merge"


class BaseParser:
    """Common utilities shared by the grammar parsers."""

    format: Format = Format.AUTO
    extensions: tuple[str, ...] = ()

    def parse(self, text: str) -> Properties:
        """Return the property tree for *text*.

        Blank text yields an empty tree so the validator reports
        ``EmptyConfig`` instead of a grammar-specific syntax error.
        """

        if not text.strip():
            return Properties()
        document = self._load(text)
        tree = Properties.from_native(document)
        log_debug("config_parsed", stage="parse", path=None, format=self.format.value, leaves=len(tree))
        return tree

    def _load(self, text: str) -> Any:  # pragma: no cover - abstract
        raise NotImplementedError

    def _syntax_error(self, line: int | None, column: int | None, message: str) -> InvalidSyntax:
        log_error("config_invalid", stage="parse", path=None, format=self.format.value, error=message)
        return InvalidSyntax(self.format.value, line, column, message)

    def _duplicate_key(self, key: Any) -> InvalidStructure:
        message = f"duplicate key '{key}' in {self.format.value} document"
        log_error("config_invalid", stage="parse", path=None, format=self.format.value, error=message)
        return InvalidStructure(message)


class JSONParser(BaseParser):
    """Parse JSON documents.

    Examples
    --------
    >>> tree = JSONParser().parse('{"server": {"port": 8080}}')
    >>> [(str(path), value) for path, value in tree.items()]
    [('server.port', 8080)]
    """

    format = Format.JSON
    extensions = ("json",)

    def _load(self, text: str) -> Any:
        try:
            return json.loads(text, object_pairs_hook=self._unique_object)
        except json.JSONDecodeError as exc:
            raise self._syntax_error(exc.lineno, exc.colno, exc.msg) from exc

    def _unique_object(self, pairs: list[tuple[str, Any]]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in pairs:
            if key in result:
                raise self._duplicate_key(key)
            result[key] = value
        return result


class _UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader that refuses repeated mapping keys."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            if key_node.tag == _YAML_MERGE_TAG:
                continue
            key = self.construct_object(key_node, deep=deep)  # type: ignore[no-untyped-call]
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise _DuplicateYAMLKey(key)
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


class _DuplicateYAMLKey(Exception):
    def __init__(self, key: Any) -> None:
        super().__init__(key)
        self.key = key


class YAMLParser(BaseParser):
    """Parse YAML documents with PyYAML's safe constructor.

    An empty document (only comments or ``---``) yields an empty tree.

    Examples
    --------
    >>> tree = YAMLParser().parse('servers:\\n  - host: a\\n  - host: b\\n')
    >>> [str(path) for path in tree]
    ['servers[0].host', 'servers[1].host']
    """

    format = Format.YAML
    extensions = ("yaml", "yml")

    def _load(self, text: str) -> Any:
        try:
            document = yaml.load(text, Loader=_UniqueKeyLoader)  # noqa: S506 - SafeLoader subclass
        except _DuplicateYAMLKey as exc:
            raise self._duplicate_key(exc.key) from None
        except yaml.MarkedYAMLError as exc:
            mark = exc.problem_mark or exc.context_mark
            line = mark.line + 1 if mark is not None else None
            column = mark.column + 1 if mark is not None else None
            raise self._syntax_error(line, column, exc.problem or str(exc)) from exc
        except yaml.YAMLError as exc:
            raise self._syntax_error(None, None, str(exc)) from exc
        return {} if document is None else document


class TOMLParser(BaseParser):
    """Parse TOML documents.

    Dates and times become ISO-8601 strings.

    Examples
    --------
    >>> tree = TOMLParser().parse('[server]\\nport = 8080\\n')
    >>> [(str(path), value) for path, value in tree.items()]
    [('server.port', 8080)]
    """

    format = Format.TOML
    extensions = ("toml", "tml")

    def _load(self, text: str) -> Any:
        try:
            return tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            line, column, message = _toml_location(exc)
            raise self._syntax_error(line, column, message) from exc


def _toml_location(exc: Exception) -> tuple[int | None, int | None, str]:
    """Pull ``(line, column, message)`` out of a ``TOMLDecodeError``.

    Newer interpreters expose ``lineno``/``colno``/``msg``; older ones and
    ``tomli`` only embed ``(at line X, column Y)`` in the message.
    """

    line = getattr(exc, "lineno", None)
    column = getattr(exc, "colno", None)
    message = getattr(exc, "msg", None) or str(exc)
    match = _TOML_LOCATION.search(message)
    if match is not None:
        message = message[: match.start()]
        if line is None or column is None:
            line, column = int(match.group(1)), int(match.group(2))
    return line, column, message
