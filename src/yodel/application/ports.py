"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts adapters must satisfy so the composition root
can orchestrate the pipeline without depending on concrete implementations.

Contents
--------
* :class:`FileSystem` – read files, list directories, classify paths.
* :class:`Environment` – read-only lookup of environment variables.
* :class:`Parser` – turn resolved text into a :class:`Properties` tree.
* :class:`FormatDetector` – guess a grammar from an extension or content.

System Role
-----------
These protocols enforce Dependency Inversion. Each adapter implements one
protocol; tests substitute in-memory doubles (for example a fixed environment
mapping) without touching the real process state.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from ..domain.options import Format
from ..domain.properties import Properties


@runtime_checkable
class FileSystem(Protocol):
    """Minimal filesystem capability used by the pipeline and discovery."""

    def read(self, path: str) -> str:
        """Return the UTF-8 text at *path* or raise a ``FileError``."""

    def list_files(self, directory: str) -> Sequence[str]:
        """Return regular files directly inside *directory* (non-recursive)."""

    def is_directory(self, path: str) -> bool:
        """Return ``True`` when *path* names an existing directory."""

    def is_file(self, path: str) -> bool:
        """Return ``True`` when *path* names an existing regular file."""


@runtime_checkable
class Environment(Protocol):
    """Side-effect-free environment variable lookup."""

    def lookup(self, name: str) -> str | None:
        """Return the value of *name* or ``None`` when unset."""


@runtime_checkable
class Parser(Protocol):
    """Grammar-specific parser emitting the normalised property tree.

    Attributes
    ----------
    format:
        The :class:`Format` this parser handles.
    extensions:
        Lower-case file extensions (without dot) the parser claims.
    """

    format: Format
    extensions: tuple[str, ...]

    def parse(self, text: str) -> Properties:
        """Parse *text* or raise ``InvalidSyntax`` / ``InvalidStructure``."""


@runtime_checkable
class FormatDetector(Protocol):
    """Guess a grammar; returning ``Format.AUTO`` means inconclusive."""

    def from_extension(self, extension: str) -> Format:
        """Inspect a lower-case extension without the leading dot."""

    def from_content(self, content: str) -> Format:
        """Inspect raw text."""
