"""Environment variable adapter.

Purpose
-------
Implement the :class:`yodel.application.ports.Environment` protocol as a
read-only snapshot of the process environment. Tests pass an explicit mapping
instead of mutating :data:`os.environ`.
"""

from __future__ import annotations

import os
from typing import Mapping


class ProcessEnvironment:
    """Snapshot of environment variables taken at construction time.

    Examples
    --------
    >>> env = ProcessEnvironment(environ={"YODEL_PROFILES": "dev"})
    >>> env.lookup("YODEL_PROFILES")
    'dev'
    >>> env.lookup("MISSING") is None
    True
    """

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Copy *environ* (defaults to :data:`os.environ`) so later changes do not leak in."""

        self._environ = dict(os.environ if environ is None else environ)

    def lookup(self, name: str) -> str | None:
        return self._environ.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._environ
