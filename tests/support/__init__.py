"""Shared sandbox helpers for profile-directory tests.

``ProfileSandbox`` owns one temporary directory plus an explicit environment
mapping, so tests never mutate ``os.environ`` to activate profiles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from yodel.adapters.env.process import ProcessEnvironment
from yodel.domain.options import DEFAULT_PROFILE_ENV_VAR


@dataclass(slots=True)
class ProfileSandbox:
    """Temporary profile directory with a private environment."""

    root: Path
    env: dict[str, str] = field(default_factory=dict)

    def write(self, name: str, content: str) -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def activate(self, *profiles: str, variable: str = DEFAULT_PROFILE_ENV_VAR) -> None:
        """Set the profile variable to the comma-joined *profiles* (may be empty)."""

        self.env[variable] = ",".join(profiles)

    def environment(self) -> ProcessEnvironment:
        return ProcessEnvironment(environ=self.env)

    @property
    def directory(self) -> str:
        return str(self.root)


def create_profile_sandbox(
    tmp_path: Path,
    files: Mapping[str, str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ProfileSandbox:
    """Return a sandbox rooted at ``tmp_path / "profiles"`` pre-populated with *files*."""

    root = tmp_path / "profiles"
    root.mkdir(parents=True, exist_ok=True)
    sandbox = ProfileSandbox(root=root, env=dict(env or {}))
    for name, content in (files or {}).items():
        sandbox.write(name, content)
    return sandbox


__all__ = ["ProfileSandbox", "create_profile_sandbox"]
