"""Environment placeholder resolver.

Purpose
-------
Rewrite ``${NAME}`` and ``${NAME:DEFAULT}`` tokens in raw configuration text
before any grammar sees it. Defaults may themselves contain tokens to any
depth, so the scanner tracks brace nesting instead of splitting on the first
colon.

Contents
--------
* :func:`resolve` – public entry point driven by :class:`~yodel.domain.options.Options`.
* :func:`resolve_text` – the same pass with explicit mode arguments.
* ``_scan`` / ``_closing_brace`` / ``_substitute`` – cursor-based recursive
  descent helpers.

System Role
-----------
Called by :mod:`yodel.core` between reading and parsing. Looked-up values are
inserted verbatim and never rescanned; only default branches recurse.
"""

from __future__ import annotations

from ..domain.errors import UnresolvedPlaceholder
from ..domain.options import Options, ResolveMode
from ..observability import log_debug
from .ports import Environment

_OPEN = "${"
_CLOSE = "}"
_DEFAULT_SEPARATOR = ":"


def resolve(text: str, options: Options, environment: Environment) -> str:
    """Resolve placeholders in *text* according to *options*.

    When ``options.resolve_placeholders`` is ``False`` the text is returned
    unchanged.

    Examples
    --------
    >>> class Env:
    ...     def __init__(self, values):
    ...         self.values = values
    ...     def lookup(self, name):
    ...         return self.values.get(name)
    >>> resolve("host: ${HOST:localhost}", Options(), Env({}))
    'host: localhost'
    >>> resolve("port: ${PORT:${FALLBACK_PORT:80}}", Options(), Env({"FALLBACK_PORT": "8080"}))
    'port: 8080'
    >>> resolve("${MISSING}", Options(), Env({}))
    '${MISSING}'
    """

    if not options.resolve_placeholders:
        return text
    return resolve_text(text, environment=environment, mode=options.resolve_mode)


def resolve_text(text: str, *, environment: Environment, mode: ResolveMode = ResolveMode.LENIENT) -> str:
    """Resolve every placeholder in *text*, scanning left to right.

    Raises
    ------
    UnresolvedPlaceholder
        In :attr:`ResolveMode.STRICT` when a token has neither an environment
        value nor a default.
    """

    resolved, count = _scan(text, environment, mode, context=None)
    if count:
        log_debug("placeholders_resolved", stage="resolve", path=None, tokens=count, mode=mode.value)
    return resolved


def _scan(text: str, environment: Environment, mode: ResolveMode, context: str | None) -> tuple[str, int]:
    """Return ``(resolved_text, token_count)`` for *text*.

    *context* is the source line used in error messages; at the top level it
    is derived from the token position, inside defaults it is inherited from
    the enclosing token.
    """

    parts: list[str] = []
    position = 0
    tokens = 0
    while True:
        start = text.find(_OPEN, position)
        if start < 0:
            break
        end = _closing_brace(text, start)
        if end < 0:
            # unterminated opener stays literal; later tokens still resolve
            parts.append(text[position : start + len(_OPEN)])
            position = start + len(_OPEN)
            continue
        parts.append(text[position:start])
        line = context if context is not None else _line_at(text, start)
        replacement, nested = _substitute(text[start : end + 1], environment, mode, line)
        parts.append(replacement)
        tokens += 1 + nested
        position = end + 1
    parts.append(text[position:])
    return "".join(parts), tokens


def _closing_brace(text: str, start: int) -> int:
    """Return the index of the ``}`` closing the token opened at *start*, or ``-1``.

    Nested ``${`` openings raise the depth so a ``}`` belonging to an inner
    token never terminates the outer one.

    Examples
    --------
    >>> _closing_brace("${A:${B:x}}!", 0)
    10
    >>> _closing_brace("${A:${B}", 0)
    -1
    """

    depth = 0
    position = start
    length = len(text)
    while position < length:
        if text.startswith(_OPEN, position):
            depth += 1
            position += len(_OPEN)
            continue
        if text[position] == _CLOSE:
            depth -= 1
            if depth == 0:
                return position
        position += 1
    return -1


def _substitute(token: str, environment: Environment, mode: ResolveMode, line: str) -> tuple[str, int]:
    """Resolve one complete ``${...}`` token."""

    body = token[len(_OPEN) : -len(_CLOSE)]
    name, separator, default = body.partition(_DEFAULT_SEPARATOR)
    name = name.strip()
    value = environment.lookup(name) if name else None
    if value is not None:
        return value, 0
    if separator:
        return _scan(default, environment, mode, context=line)
    if mode is ResolveMode.STRICT:
        log_debug("placeholder_unresolved", stage="resolve", path=None, name=name)
        raise UnresolvedPlaceholder(name, line)
    return token, 0


def _line_at(text: str, offset: int) -> str:
    """Return the stripped source line containing *offset*."""

    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end < 0:
        line_end = len(text)
    return text[line_start:line_end].strip()
