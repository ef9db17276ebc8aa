from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from yodel.adapters.filesystem.local import LocalFileSystem
from yodel.domain.errors import FileError, IsDirectory, NotFound, PermissionDenied, ReadFailure


@pytest.fixture()
def fs() -> LocalFileSystem:
    return LocalFileSystem()


def test_read_returns_text(fs: LocalFileSystem, tmp_path: Path) -> None:
    target = tmp_path / "config.yaml"
    target.write_text("name: démo\n", encoding="utf-8")
    assert fs.read(str(target)) == "name: démo\n"


def test_read_strips_utf8_bom(fs: LocalFileSystem, tmp_path: Path) -> None:
    target = tmp_path / "config.json"
    target.write_bytes(b'\xef\xbb\xbf{"a": 1}')
    assert fs.read(str(target)) == '{"a": 1}'


def test_read_missing_file(fs: LocalFileSystem, tmp_path: Path) -> None:
    with pytest.raises(NotFound) as excinfo:
        fs.read(str(tmp_path / "absent.toml"))
    assert excinfo.value.path.endswith("absent.toml")


def test_read_directory(fs: LocalFileSystem, tmp_path: Path) -> None:
    with pytest.raises(IsDirectory):
        fs.read(str(tmp_path))


def test_read_invalid_utf8(fs: LocalFileSystem, tmp_path: Path) -> None:
    target = tmp_path / "config.toml"
    target.write_bytes(b"name = '\xff'")
    with pytest.raises(ReadFailure, match="not valid utf-8"):
        fs.read(str(target))


@pytest.mark.skipif(sys.platform.startswith("win") or os.geteuid() == 0, reason="POSIX permissions as non-root")
def test_read_permission_denied(fs: LocalFileSystem, tmp_path: Path) -> None:
    target = tmp_path / "secret.yaml"
    target.write_text("a: 1\n", encoding="utf-8")
    target.chmod(0)
    try:
        with pytest.raises(PermissionDenied):
            fs.read(str(target))
    finally:
        target.chmod(0o600)


def test_list_files_is_sorted_and_non_recursive(fs: LocalFileSystem, tmp_path: Path) -> None:
    (tmp_path / "b.yaml").write_text("", encoding="utf-8")
    (tmp_path / "a.json").write_text("", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.toml").write_text("", encoding="utf-8")
    assert fs.list_files(str(tmp_path)) == [str(tmp_path / "a.json"), str(tmp_path / "b.yaml")]


def test_list_files_missing_directory(fs: LocalFileSystem, tmp_path: Path) -> None:
    with pytest.raises(FileError):
        fs.list_files(str(tmp_path / "absent"))


def test_path_classification(fs: LocalFileSystem, tmp_path: Path) -> None:
    target = tmp_path / "config.yaml"
    target.write_text("a: 1\n", encoding="utf-8")
    assert fs.is_file(str(target)) and not fs.is_directory(str(target))
    assert fs.is_directory(str(tmp_path)) and not fs.is_file(str(tmp_path))
    assert not fs.is_file(str(tmp_path / "absent"))


def test_classification_tolerates_unusable_paths(fs: LocalFileSystem) -> None:
    assert fs.is_file("bad\x00path") is False
    assert fs.is_directory("x" * 10_000) is False
