"""Format detection and parse dispatch.

Purpose
-------
Pick the grammar for a configuration source and route resolved text to the
matching parser. Detection is pure: it inspects a file extension first and
falls back to content heuristics only when no extension verdict exists.

Contents
--------
* :class:`InputDescriptor` – structural view of an input (optional path + text).
* :class:`TOMLDetector` / :class:`JSONDetector` / :class:`YAMLDetector` –
  extension and content heuristics.
* :data:`DEFAULT_DETECTORS` – priority order (TOML before JSON before YAML).
* :func:`detect` – resolve the effective :class:`Format`.
* :func:`parse` – dispatch to a registered parser.
* :func:`supported_extensions` – union of parser extensions, used by discovery.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, Mapping, Sequence

from ..domain.errors import UnknownFormat
from ..domain.options import Format, Options
from ..domain.properties import Properties
from ..observability import log_debug
from .ports import FormatDetector, Parser

_YAML_DOCUMENT_MARKER = "---"


@dataclass(frozen=True, slots=True)
class InputDescriptor:
    """What detection may look at: an optional source path and the raw content."""

    content: str
    path: str | None = None

    @property
    def extension(self) -> str | None:
        """Lower-case extension without the dot, or ``None``.

        Examples
        --------
        >>> InputDescriptor("", "conf/config-dev.YAML").extension
        'yaml'
        >>> InputDescriptor("a = 1").extension is None
        True
        """

        if self.path is None:
            return None
        suffix = PurePath(self.path).suffix
        return suffix[1:].lower() if suffix else None


class TOMLDetector:
    """Claim ``.toml`` / ``.tml`` files and ``key = value`` looking text.

    Examples
    --------
    >>> TOMLDetector().from_content('name = "demo"')
    <Format.TOML: 'toml'>
    >>> TOMLDetector().from_content('name: "a=b"')
    <Format.AUTO: 'auto'>
    """

    extensions = ("toml", "tml")

    def from_extension(self, extension: str) -> Format:
        return Format.TOML if extension in self.extensions else Format.AUTO

    def from_content(self, content: str) -> Format:
        if "=" in content and ": " not in content and not content.lstrip().startswith(_YAML_DOCUMENT_MARKER):
            return Format.TOML
        return Format.AUTO


class JSONDetector:
    """Claim ``.json`` files and text opening with ``{`` or ``[``."""

    extensions = ("json",)

    def from_extension(self, extension: str) -> Format:
        return Format.JSON if extension in self.extensions else Format.AUTO

    def from_content(self, content: str) -> Format:
        stripped = content.lstrip()
        if stripped.startswith("{") or stripped.startswith("["):
            return Format.JSON
        return Format.AUTO


class YAMLDetector:
    """Claim ``.yaml`` / ``.yml`` files, document markers, and ``key: value`` text."""

    extensions = ("yaml", "yml")

    def from_extension(self, extension: str) -> Format:
        return Format.YAML if extension in self.extensions else Format.AUTO

    def from_content(self, content: str) -> Format:
        stripped = content.lstrip()
        if stripped.startswith(_YAML_DOCUMENT_MARKER) or stripped.startswith("- "):
            return Format.YAML
        if any(_looks_like_mapping_line(line) for line in stripped.splitlines()):
            return Format.YAML
        return Format.AUTO


def _looks_like_mapping_line(line: str) -> bool:
    text = line.strip()
    if not text or text.startswith("#"):
        return False
    return ": " in text or text.endswith(":")


DEFAULT_DETECTORS: tuple[FormatDetector, ...] = (TOMLDetector(), JSONDetector(), YAMLDetector())
"""Reference priority order; the first non-``AUTO`` verdict wins."""


def detect(
    descriptor: InputDescriptor,
    options: Options,
    detectors: Sequence[FormatDetector] = DEFAULT_DETECTORS,
) -> Format:
    """Return the effective format for *descriptor*.

    An explicit ``options.format`` wins unconditionally. Otherwise every
    detector is asked about the extension, then every detector about the
    content. ``Format.AUTO`` comes back when nothing matched.

    Examples
    --------
    >>> detect(InputDescriptor("a = 1", "settings.json"), Options())
    <Format.JSON: 'json'>
    >>> detect(InputDescriptor("a = 1", "settings.txt"), Options())
    <Format.TOML: 'toml'>
    >>> detect(InputDescriptor("plain"), Options())
    <Format.AUTO: 'auto'>
    """

    if options.format is not Format.AUTO:
        return options.format
    verdict = _first_verdict(detectors, descriptor)
    log_debug("format_detected", stage="detect", path=descriptor.path, format=verdict.value)
    return verdict


def _first_verdict(detectors: Sequence[FormatDetector], descriptor: InputDescriptor) -> Format:
    extension = descriptor.extension
    if extension:
        for detector in detectors:
            verdict = detector.from_extension(extension)
            if verdict is not Format.AUTO:
                return verdict
    for detector in detectors:
        verdict = detector.from_content(descriptor.content)
        if verdict is not Format.AUTO:
            return verdict
    return Format.AUTO


def parse(content: str, fmt: Format, parsers: Mapping[Format, Parser], *, source: str | None = None) -> Properties:
    """Dispatch *content* to the parser registered for *fmt*.

    Raises
    ------
    UnknownFormat
        When *fmt* is still ``Format.AUTO`` or no parser is registered for it.
    """

    if fmt is Format.AUTO:
        raise UnknownFormat(source)
    parser = parsers.get(fmt)
    if parser is None:
        raise UnknownFormat(source)
    return parser.parse(content)


def supported_extensions(parsers: Iterable[Parser]) -> frozenset[str]:
    """Return the union of extensions every registered parser claims."""

    return frozenset(extension for parser in parsers for extension in parser.extensions)
