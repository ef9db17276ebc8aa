"""Loader options value object.

Purpose
-------
Carry every knob of the loader in one immutable value. Each ``with_*`` method
returns a fresh :class:`Options`; nothing mutates in place, so a shared default
instance can be reused safely.

Contents
--------
* :class:`Format` – requested grammar (``AUTO`` means detect).
* :class:`ResolveMode` – behaviour for unresolved placeholders.
* :class:`Options` – frozen dataclass with copy-on-write builders.
* :data:`DEFAULT_BASE_NAME` / :data:`DEFAULT_PROFILE_ENV_VAR`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Final, Iterable

DEFAULT_BASE_NAME: Final[str] = "config"
DEFAULT_PROFILE_ENV_VAR: Final[str] = "YODEL_PROFILES"


class Format(str, Enum):
    """Configuration grammar."""

    AUTO = "auto"
    JSON = "json"
    TOML = "toml"
    YAML = "yaml"


class ResolveMode(str, Enum):
    """How to treat ``${NAME}`` tokens with no value and no default."""

    STRICT = "strict"
    LENIENT = "lenient"


@dataclass(frozen=True, slots=True)
class Options:
    """Immutable loader configuration.

    Examples
    --------
    >>> options = Options().with_format(Format.YAML).with_profiles(["dev", "local"])
    >>> options.format, options.profiles
    (<Format.YAML: 'yaml'>, ('dev', 'local'))
    >>> Options().format
    <Format.AUTO: 'auto'>
    """

    format: Format = Format.AUTO
    resolve_placeholders: bool = True
    resolve_mode: ResolveMode = ResolveMode.LENIENT
    base_name: str = DEFAULT_BASE_NAME
    profile_env_var: str = DEFAULT_PROFILE_ENV_VAR
    profiles: tuple[str, ...] = ()

    def with_format(self, fmt: Format | str) -> Options:
        """Force a grammar instead of detecting one."""

        return replace(self, format=Format(fmt))

    def with_placeholders(self, enabled: bool) -> Options:
        """Enable or disable the placeholder resolution pass."""

        return replace(self, resolve_placeholders=enabled)

    def with_resolve_mode(self, mode: ResolveMode | str) -> Options:
        return replace(self, resolve_mode=ResolveMode(mode))

    def with_base_name(self, base_name: str) -> Options:
        if not base_name:
            raise ValueError("base_name must not be empty")
        return replace(self, base_name=base_name)

    def with_profile_env_var(self, name: str) -> Options:
        return replace(self, profile_env_var=name)

    def with_profiles(self, profiles: Iterable[str]) -> Options:
        """Replace the programmatic profile list (order is merge order)."""

        if isinstance(profiles, str):
            profiles = [profiles]
        return replace(self, profiles=tuple(profiles))

    @property
    def strict(self) -> bool:
        return self.resolve_mode is ResolveMode.STRICT
