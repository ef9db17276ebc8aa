"""Composition root for ``yodel``.

Purpose
-------
Provide the single entry point that wires adapters (filesystem, environment,
grammar parsers) to the application services (detection, placeholder
resolution, discovery, merge) and returns a frozen
:class:`~yodel.domain.context.Context`.

Contents
--------
* :data:`DEFAULT_PARSERS` – parser registry keyed by :class:`Format`.
* :func:`load` – default-options entry point.
* :func:`load_with_options` – branches to the directory, single-file, or
  literal-content pipeline.
* :func:`load_text` – the single-source pipeline shared by every branch.

System Role
-----------
This module is the canonical place to adjust pipeline order or register new
adapters. Every stage short-circuits by raising a
:class:`~yodel.domain.errors.ConfigError`.
"""

from __future__ import annotations

import os
from pathlib import PurePath
from typing import Mapping, Sequence

from .adapters.env.process import ProcessEnvironment
from .adapters.filesystem.local import LocalFileSystem
from .adapters.parsers.structured import JSONParser, TOMLParser, YAMLParser
from .application.detection import DEFAULT_DETECTORS, InputDescriptor, detect, parse, supported_extensions
from .application.discovery import discover
from .application.merge import Layer, merge_layers
from .application.ports import Environment, FileSystem, FormatDetector, Parser
from .application.resolver import resolve
from .domain.context import Context, SourceInfo
from .domain.errors import EmptyConfig, NotFound, UnknownFormat
from .domain.options import Format, Options
from .domain.properties import Properties
from .observability import bind_trace_id, log_debug, log_info, make_event

Source = str | os.PathLike[str]

# Consumers can pass their own registry to :func:`load_with_options` when they
# need extra grammars.
DEFAULT_PARSERS: Mapping[Format, Parser] = {
    Format.TOML: TOMLParser(),
    Format.JSON: JSONParser(),
    Format.YAML: YAMLParser(),
}


def load(source: Source) -> Context:
    """Load *source* with default :class:`Options`.

    Examples
    --------
    >>> ctx = load('{"server": {"port": 8080}}')
    >>> ctx.get_int("server.port")
    8080
    """

    return load_with_options(Options(), source)


def load_with_options(
    options: Options,
    source: Source,
    *,
    filesystem: FileSystem | None = None,
    environment: Environment | None = None,
    parsers: Mapping[Format, Parser] | None = None,
    detectors: Sequence[FormatDetector] = DEFAULT_DETECTORS,
) -> Context:
    """Return the validated :class:`Context` for *source*.

    Parameters
    ----------
    options:
        Loader options (format, placeholder handling, profile settings).
    source:
        A directory path, a file path, or literal configuration text. An
        ``os.PathLike`` is always treated as a path; a ``str`` is treated as a
        path only when it names an existing directory or file.
    filesystem / environment:
        Injectable adapters; default to :class:`LocalFileSystem` and a fresh
        :class:`ProcessEnvironment` snapshot.
    parsers / detectors:
        Grammar registry and detector priority order.

    Side Effects
    ------------
    Resets the active trace identifier and emits structured log events.

    Examples
    --------
    >>> from yodel.adapters.env.process import ProcessEnvironment
    >>> env = ProcessEnvironment(environ={"PORT": "9090"})
    >>> ctx = load_with_options(Options(), "port = ${PORT:8080}", environment=env)
    >>> ctx.parse_int("port")
    9090
    """

    bind_trace_id(None)
    fs = filesystem if filesystem is not None else LocalFileSystem()
    env = environment if environment is not None else ProcessEnvironment()
    registry = parsers if parsers is not None else DEFAULT_PARSERS

    if isinstance(source, os.PathLike):
        path = os.fspath(source)
        if fs.is_directory(path):
            return _load_directory(path, options, fs, env, registry, detectors)
        if not fs.is_file(path):
            raise NotFound(path)
        return _load_file(path, options, fs, env, registry, detectors)

    if not source.strip():
        raise EmptyConfig()
    if _may_be_path(source) and fs.is_directory(source):
        return _load_directory(source, options, fs, env, registry, detectors)
    if _may_be_path(source) and fs.is_file(source):
        return _load_file(source, options, fs, env, registry, detectors)
    try:
        tree = load_text(source, options, env, registry, detectors).validate()
    except UnknownFormat as exc:
        if _looks_like_path(source, registry):
            raise UnknownFormat(hint=f"no file or directory named '{source}' exists") from exc
        raise
    log_info("configuration_loaded", **make_event("load", None, {"leaves": len(tree), "layers": 1}))
    return Context(tree, _provenance(tree, None, None))


def load_text(
    text: str,
    options: Options,
    environment: Environment,
    parsers: Mapping[Format, Parser] = DEFAULT_PARSERS,
    detectors: Sequence[FormatDetector] = DEFAULT_DETECTORS,
    *,
    path: str | None = None,
) -> Properties:
    """Run detect → resolve → parse over *text* and return the unvalidated tree.

    Detection looks at the raw text so placeholders cannot change the verdict.
    """

    fmt = detect(InputDescriptor(text, path), options, detectors)
    resolved = resolve(text, options, environment)
    return parse(resolved, fmt, parsers, source=path)


def _load_file(
    path: str,
    options: Options,
    fs: FileSystem,
    env: Environment,
    parsers: Mapping[Format, Parser],
    detectors: Sequence[FormatDetector],
) -> Context:
    tree = _read_layer(path, options, fs, env, parsers, detectors)
    log_info("configuration_loaded", **make_event("load", path, {"leaves": len(tree), "layers": 1}))
    return Context(tree, _provenance(tree, None, path))


def _load_directory(
    directory: str,
    options: Options,
    fs: FileSystem,
    env: Environment,
    parsers: Mapping[Format, Parser],
    detectors: Sequence[FormatDetector],
) -> Context:
    files = discover(
        directory,
        options.base_name,
        options,
        filesystem=fs,
        environment=env,
        extensions=supported_extensions(parsers.values()),
    )
    layers: list[Layer] = []
    for config_file in files:
        tree = _read_layer(config_file.path, options, fs, env, parsers, detectors)
        log_debug("layer_loaded", **make_event(config_file.label, config_file.path, {"leaves": len(tree)}))
        layers.append((config_file.profile, tree, config_file.path))

    merged, meta = merge_layers(layers)
    merged.validate(directory)
    log_info(
        "configuration_merged",
        **make_event("merge", directory, {"layers": len(layers), "leaves": len(merged)}),
    )
    log_info("configuration_loaded", **make_event("load", directory, {"leaves": len(merged), "layers": len(layers)}))
    return Context(merged, meta)


def _read_layer(
    path: str,
    options: Options,
    fs: FileSystem,
    env: Environment,
    parsers: Mapping[Format, Parser],
    detectors: Sequence[FormatDetector],
) -> Properties:
    """Read, parse, and validate one file."""

    text = fs.read(path)
    return load_text(text, options, env, parsers, detectors, path=path).validate(path)


def _provenance(tree: Properties, profile: str | None, path: str | None) -> dict[str, SourceInfo]:
    return {str(key): SourceInfo(profile=profile, path=path, key=str(key)) for key in tree}


def _may_be_path(text: str) -> bool:
    """Multi-line text is always content; never look it up on the filesystem."""

    return "\n" not in text and "\x00" not in text


def _looks_like_path(text: str, parsers: Mapping[Format, Parser]) -> bool:
    """Single-line text with a separator or a known config extension."""

    if not _may_be_path(text) or " " in text.strip():
        return False
    extension = PurePath(text).suffix[1:].lower()
    return "/" in text or os.sep in text or extension in supported_extensions(parsers.values())


__all__ = [
    "DEFAULT_PARSERS",
    "Source",
    "load",
    "load_text",
    "load_with_options",
]
