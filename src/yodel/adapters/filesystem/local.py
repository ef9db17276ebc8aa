"""Local filesystem adapter.

Purpose
-------
Implement the :class:`yodel.application.ports.FileSystem` protocol on top of
:mod:`pathlib`, translating :class:`OSError` subclasses into the domain
:class:`~yodel.domain.errors.FileError` family.

Contents
--------
* :class:`LocalFileSystem` – read, list, and classify paths.
"""

from __future__ import annotations

from pathlib import Path

from ...domain.errors import IsDirectory, NotFound, PermissionDenied, ReadFailure
from ...observability import log_debug, log_error


class LocalFileSystem:
    """Read-only access to the local filesystem."""

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def read(self, path: str) -> str:
        """Return the decoded text of *path*.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> target = Path(tmp.name) / "config.toml"
        >>> _ = target.write_text("key = 'value'", encoding="utf-8")
        >>> LocalFileSystem().read(str(target))
        "key = 'value'"
        >>> tmp.cleanup()
        """

        file_path = Path(path)
        if file_path.is_dir():
            raise IsDirectory(path)
        try:
            payload = file_path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFound(path) from exc
        except IsADirectoryError as exc:
            raise IsDirectory(path) from exc
        except PermissionError as exc:
            raise PermissionDenied(path) from exc
        except OSError as exc:
            log_error("config_file_unreadable", stage="read", path=path, error=str(exc))
            raise ReadFailure(path, exc.strerror or str(exc)) from exc
        try:
            text = payload.decode(self.encoding)
        except UnicodeDecodeError as exc:
            log_error("config_file_unreadable", stage="read", path=path, error=str(exc))
            raise ReadFailure(path, f"not valid {self.encoding} text ({exc.reason})") from exc
        log_debug("config_file_read", stage="read", path=path, size=len(payload))
        return text.removeprefix("﻿")

    def list_files(self, directory: str) -> list[str]:
        """Return regular files directly inside *directory*, sorted by name."""

        root = Path(directory)
        try:
            entries = sorted(root.iterdir())
        except FileNotFoundError as exc:
            raise NotFound(directory) from exc
        except PermissionError as exc:
            raise PermissionDenied(directory) from exc
        except OSError as exc:
            raise ReadFailure(directory, exc.strerror or str(exc)) from exc
        return [str(entry) for entry in entries if entry.is_file()]

    def is_directory(self, path: str) -> bool:
        try:
            return Path(path).is_dir()
        except (OSError, ValueError):
            return False

    def is_file(self, path: str) -> bool:
        try:
            return Path(path).is_file()
        except (OSError, ValueError):
            return False
