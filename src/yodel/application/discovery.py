"""Profile discovery for directory sources.

Purpose
-------
Scan a directory for ``{base_name}[-{profile}].{ext}`` files, classify them as
the base file or profile overlays, reject ambiguous duplicates, and return the
files that should be merged in merge order.

Contents
--------
* :class:`ConfigFile` – one discovered file with its optional profile tag.
* :func:`classify` – filename → ``(matched, profile)``.
* :func:`active_profiles` – environment variable vs. programmatic profile list.
* :func:`discover` – the full scan / validate / order algorithm.

System Role
-----------
Invoked by :mod:`yodel.core` for directory sources. Pure apart from the two
injected capabilities (filesystem listing and one environment lookup).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Collection, Iterable

from ..domain.errors import InvalidConfig
from ..domain.options import Options
from ..observability import log_debug, make_event
from .ports import Environment, FileSystem

_PROFILE_SEPARATOR = "-"


@dataclass(frozen=True, slots=True)
class ConfigFile:
    """A discovered configuration file.

    Attributes
    ----------
    path:
        Path to the file as returned by the filesystem listing.
    profile:
        ``None`` for the base file, otherwise the profile name taken from
        ``{base_name}-{profile}.{ext}``.
    """

    path: str
    profile: str | None = None

    @property
    def is_base(self) -> bool:
        return self.profile is None

    @property
    def label(self) -> str:
        """Short description used in logs (``base`` or ``profile:<name>``)."""

        return "base" if self.profile is None else f"profile:{self.profile}"


def classify(filename: str, base_name: str, extensions: Collection[str]) -> tuple[bool, str | None]:
    """Classify *filename* against the naming convention.

    Returns ``(True, None)`` for the base file, ``(True, profile)`` for a
    profile overlay and ``(False, None)`` for anything else. The profile part is
    everything after the first ``{base_name}-`` and may contain hyphens.

    Examples
    --------
    >>> exts = {"json", "yaml", "yml", "toml", "tml"}
    >>> classify("config.yaml", "config", exts)
    (True, None)
    >>> classify("config-prod-us.toml", "config", exts)
    (True, 'prod-us')
    >>> classify("config.txt", "config", exts)
    (False, None)
    >>> classify("configuration.json", "config", exts)
    (False, None)
    >>> classify("config-.json", "config", exts)
    (False, None)
    """

    pure = PurePath(filename)
    extension = pure.suffix[1:].lower() if pure.suffix else ""
    if extension not in extensions:
        return False, None
    stem = pure.stem
    if stem == base_name:
        return True, None
    prefix = base_name + _PROFILE_SEPARATOR
    if stem.startswith(prefix) and len(stem) > len(prefix):
        return True, stem[len(prefix) :]
    return False, None


def parse_profile_list(raw: str) -> tuple[str, ...]:
    """Split a comma-separated list, trimming whitespace and dropping blanks.

    Examples
    --------
    >>> parse_profile_list(" dev, ,local ,")
    ('dev', 'local')
    >>> parse_profile_list("")
    ()
    """

    return tuple(item.strip() for item in raw.split(",") if item.strip())


def active_profiles(options: Options, environment: Environment) -> tuple[str, ...]:
    """Return the profiles to activate, in merge order.

    When the variable named by ``options.profile_env_var`` is set (even to an
    empty string) its parsed value replaces ``options.profiles`` entirely.
    Repeated names keep their first position.
    """

    raw = environment.lookup(options.profile_env_var) if options.profile_env_var else None
    requested: Iterable[str] = options.profiles if raw is None else parse_profile_list(raw)
    return tuple(dict.fromkeys(requested))


def discover(
    directory: str,
    base_name: str,
    options: Options,
    *,
    filesystem: FileSystem,
    environment: Environment,
    extensions: Collection[str],
) -> list[ConfigFile]:
    """Return the files to load from *directory*: base first, then active profiles.

    Raises
    ------
    InvalidConfig
        When two files claim the base slot or the same profile name.
    FileError
        Propagated from the filesystem listing.

    Examples
    --------
    See ``tests/application/test_discovery.py`` for directory-backed scenarios.
    """

    base: ConfigFile | None = None
    profiles: dict[str, ConfigFile] = {}
    for path in sorted(filesystem.list_files(directory)):
        matched, profile = classify(PurePath(path).name, base_name, extensions)
        if not matched:
            continue
        candidate = ConfigFile(path=path, profile=profile)
        if profile is None:
            if base is not None:
                raise InvalidConfig(f"duplicate base configuration files: {base.path} and {path}")
            base = candidate
            continue
        existing = profiles.get(profile)
        if existing is not None:
            raise InvalidConfig(
                f"duplicate configuration files for profile '{profile}': {existing.path} and {path}"
            )
        profiles[profile] = candidate

    active = active_profiles(options, environment)
    ordered: list[ConfigFile] = [base] if base is not None else []
    ordered.extend(profiles[name] for name in active if name in profiles)
    log_debug(
        "profiles_discovered",
        **make_event(
            "discover",
            directory,
            {
                "base": base.path if base else None,
                "available": sorted(profiles),
                "active": list(active),
                "selected": [item.path for item in ordered],
            },
        ),
    )
    return ordered
