"""Support ``python -m yodel`` by handing control to :func:`yodel.cli.main`."""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main())
