from __future__ import annotations

from pathlib import Path

from yodel.examples.generate import generate_examples


def test_generate_examples_idempotent(tmp_path: Path) -> None:
    written_first = generate_examples(tmp_path)
    assert written_first
    # second call without force should not overwrite
    written_second = generate_examples(tmp_path)
    assert written_second == []


def test_generate_examples_force_overwrites(tmp_path: Path) -> None:
    paths = generate_examples(tmp_path)
    target = paths[0]
    original = target.read_text(encoding="utf-8")
    target.write_text("override", encoding="utf-8")
    generate_examples(tmp_path, force=True)
    assert target.read_text(encoding="utf-8") == original


def test_generate_examples_paths_follow_base_name(tmp_path: Path) -> None:
    paths = generate_examples(tmp_path / "nested", base_name="service")
    relative = [p.relative_to(tmp_path).as_posix() for p in paths]
    assert relative == ["nested/service.yaml", "nested/service-dev.yaml", "nested/service-prod.toml"]


def test_generate_examples_keeps_missing_files_only(tmp_path: Path) -> None:
    paths = generate_examples(tmp_path)
    paths[1].unlink()
    assert generate_examples(tmp_path) == [paths[1]]


def test_generate_examples_reexported() -> None:
    from yodel import generate_examples as exported
    from yodel.examples import generate_examples as helper

    assert exported is helper
