"""Example profile directory generation helpers.

Purpose
-------
Produce a reproducible profile directory (base file plus overlays) for
documentation, onboarding, and smoke tests. This module belongs to the outer
ring of the architecture and has no runtime coupling to the composition root.

Contents
    - ``ExampleSpec``: dataclass capturing a relative path and text content.
    - ``generate_examples``: public orchestration expressed through helper
      verbs.
    - ``_build_specs``: yields the base file and two profile overlays.
    - ``_write_examples`` / ``_should_write``: tiny filesystem helpers that
      narrate how files are written.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ..domain.options import DEFAULT_BASE_NAME, DEFAULT_PROFILE_ENV_VAR


@dataclass(slots=True)
class ExampleSpec:
    """Describe a single example file to be written to disk.

    Attributes
    ----------
    relative_path:
        Path relative to the destination directory.
    content:
        File contents (UTF-8 text) including explanatory comments.
    """

    relative_path: Path
    content: str


def generate_examples(
    destination: str | Path,
    *,
    base_name: str = DEFAULT_BASE_NAME,
    force: bool = False,
) -> list[Path]:
    """Write a base configuration and two profile overlays under *destination*.

    Parameters
    ----------
    destination:
        Directory that will receive the files (created when missing).
    base_name:
        File stem shared by the base file and its overlays.
    force:
        When ``True`` existing files are overwritten; otherwise they are
        skipped.

    Returns
    -------
    list[Path]
        File paths written during this invocation.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> sorted(path.name for path in generate_examples(tmp.name))
    ['config-dev.yaml', 'config-prod.toml', 'config.yaml']
    >>> generate_examples(tmp.name)
    []
    >>> tmp.cleanup()
    """

    dest = Path(destination)
    return _write_examples(dest, _build_specs(base_name), force)


def _write_examples(destination: Path, specs: Iterator[ExampleSpec], force: bool) -> list[Path]:
    written: list[Path] = []
    for spec in specs:
        path = destination / spec.relative_path
        if not _should_write(path, force):
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(spec.content, encoding="utf-8")
        written.append(path)
    return written


def _should_write(path: Path, force: bool) -> bool:
    return force or not path.exists()


def _build_specs(base_name: str) -> Iterator[ExampleSpec]:
    """Yield the base file first, then the ``dev`` and ``prod`` overlays.

    Examples
    --------
    >>> [spec.relative_path.name for spec in _build_specs("app")]
    ['app.yaml', 'app-dev.yaml', 'app-prod.toml']
    """

    yield ExampleSpec(
        Path(f"{base_name}.yaml"),
        f"""# Base configuration; activate overlays with {DEFAULT_PROFILE_ENV_VAR}=dev or =prod
service:
  name: demo
  endpoint: ${{SERVICE_ENDPOINT:https://api.example.com}}
  timeout: 10
  retries: 1
database:
  host: ${{DB_HOST:localhost}}
  port: ${{DB_PORT:5432}}
  replicas:
    - host: replica-a
    - host: replica-b
features:
  tracing: false
""",
    )
    yield ExampleSpec(
        Path(f"{base_name}-dev.yaml"),
        """# Development overrides
service:
  timeout: 30
features:
  tracing: true
""",
    )
    yield ExampleSpec(
        Path(f"{base_name}-prod.toml"),
        """# Production overrides (formats may be mixed inside one directory)
[service]
retries = 5
endpoint = "${SERVICE_ENDPOINT:https://api.example.com/prod}"

[database]
host = "${DB_HOST:db.internal}"
""",
    )
