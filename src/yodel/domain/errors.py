"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the composition root, and
consuming applications. The hierarchy lives in the domain layer so inner
modules never import adapter code to raise a meaningful error.

Contents
--------
* :class:`ConfigError` – umbrella base class for every error the library raises.
* :class:`FileError` family – reading or listing the filesystem failed.
* :class:`ParseError` family – grammar, structure, or format-detection failures.
* :class:`ResolverError` family – placeholder resolution failures (strict mode).
* :class:`ValidationError` family – a parsed tree is empty or ambiguous.
* :class:`PropertiesError` family – lookup-time failures on a loaded
  :class:`~yodel.domain.context.Context`.
* :func:`describe_error` – human-readable renderer for logs and UIs.

System Role
-----------
Every pipeline stage short-circuits by raising one of these types. Callers catch
:class:`ConfigError` to handle all library failures uniformly.
"""

from __future__ import annotations

from typing import Any


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``yodel``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """

    category = "configuration error"


# --------------------------------------------------------------------------- files


class FileError(ConfigError):
    """Reading a configuration source from the filesystem failed."""

    category = "file error"

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class NotFound(FileError):
    """The requested file or directory does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(path, f"configuration source not found: {path}")


class PermissionDenied(FileError):
    """The process lacks permission to read the path."""

    def __init__(self, path: str) -> None:
        super().__init__(path, f"permission denied: {path}")


class ReadFailure(FileError):
    """Generic I/O or decoding failure while reading *path*."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, f"failed to read {path}: {reason}")
        self.reason = reason


class IsDirectory(FileError):
    """A directory was found where a regular file was expected."""

    def __init__(self, path: str) -> None:
        super().__init__(path, f"expected a file but found a directory: {path}")


# --------------------------------------------------------------------------- parsing


class ParseError(ConfigError):
    """Raised when content cannot be turned into a property tree."""

    category = "parse error"


class InvalidSyntax(ParseError):
    """Grammar-level failure carrying a 1-based location when the parser reports one.

    Examples
    --------
    >>> str(InvalidSyntax("json", 2, 5, "Expecting value"))
    'invalid json syntax at line 2, column 5: Expecting value'
    >>> str(InvalidSyntax("toml", None, None, "Unexpected end"))
    'invalid toml syntax: Unexpected end'
    """

    def __init__(self, grammar: str, line: int | None, column: int | None, message: str) -> None:
        location = f" at line {line}, column {column}" if line is not None and column is not None else ""
        super().__init__(f"invalid {grammar} syntax{location}: {message}")
        self.grammar = grammar
        self.line = line
        self.column = column
        self.message = message


class InvalidStructure(ParseError):
    """Syntactically valid content with an unsupported shape (duplicate keys, odd types)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnknownFormat(ParseError):
    """Format detection stayed ``Format.AUTO`` all the way to parse dispatch.

    *hint* is appended to the message, e.g. when literal text looks like a
    path that does not exist.
    """

    def __init__(self, source: str | None = None, *, hint: str | None = None) -> None:
        suffix = f" for {source}" if source else ""
        detail = f" ({hint})" if hint else ""
        super().__init__(f"unable to determine configuration format{suffix}{detail}")
        self.source = source
        self.hint = hint


# --------------------------------------------------------------------------- placeholders


class ResolverError(ConfigError):
    """Placeholder resolution failed."""

    category = "resolver error"


class UnresolvedPlaceholder(ResolverError):
    """Strict mode met ``${NAME}`` with no environment value and no default.

    Attributes
    ----------
    name:
        The placeholder variable name.
    value:
        The original source text (the line holding the token) for context.
    """

    def __init__(self, name: str, value: str) -> None:
        super().__init__(f"unresolved placeholder '{name}' in value: {value}")
        self.name = name
        self.value = value


# --------------------------------------------------------------------------- validation


class ValidationError(ConfigError):
    """Signifies that a syntactically valid configuration failed semantic checks."""

    category = "validation error"


class EmptyConfig(ValidationError):
    """The configuration produced no leaves at all."""

    def __init__(self, source: str | None = None) -> None:
        suffix = f": {source}" if source else ""
        super().__init__(f"configuration is empty{suffix}")
        self.source = source


class InvalidConfig(ValidationError):
    """The configuration is structurally ambiguous (free-text *reason*)."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"invalid configuration: {reason}")
        self.reason = reason


# --------------------------------------------------------------------------- lookups


class PropertiesError(ConfigError):
    """Lookup-time failure on a loaded context."""

    category = "property error"


class PathNotFound(PropertiesError, KeyError):
    """No leaf is stored at the requested path.

    Subclasses :class:`KeyError` so :class:`~yodel.domain.context.Context`
    honours the ``Mapping`` contract.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"property not found: {path}")
        self.path = path

    def __str__(self) -> str:
        return str(self.args[0])


class TypeMismatch(PropertiesError):
    """A leaf exists but has a different kind than requested.

    Examples
    --------
    >>> str(TypeMismatch("server.port", "int", "eighty"))
    "type mismatch at server.port: expected int, found string 'eighty'"
    """

    def __init__(self, path: str, expected: str, actual: Any) -> None:
        from .properties import kind_of

        found = kind_of(actual).value
        super().__init__(f"type mismatch at {path}: expected {expected}, found {found} {actual!r}")
        self.path = path
        self.expected = expected
        self.actual = actual


class InvalidPath(PropertiesError, ValueError):
    """Dotted path text could not be parsed."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"invalid property path {text!r}: {reason}")
        self.text = text
        self.reason = reason


def describe_error(error: BaseException) -> str:
    """Render *error* as one human-readable line prefixed with its category.

    Examples
    --------
    >>> describe_error(EmptyConfig())
    'validation error: configuration is empty'
    >>> describe_error(UnresolvedPlaceholder("BAZ", "key: ${BAZ}"))
    "resolver error: unresolved placeholder 'BAZ' in value: key: ${BAZ}"
    >>> describe_error(RuntimeError("boom"))
    'unexpected error: boom'
    """

    if isinstance(error, ConfigError):
        return f"{error.category}: {error}"
    return f"unexpected error: {error}"
