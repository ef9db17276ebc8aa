"""Public package surface for ``yodel``.

Load JSON, YAML, or TOML configuration from a file, a profile directory, or
literal text, resolve ``${NAME:default}`` placeholders against the environment,
and read the result through a frozen, typed :class:`Context`.
"""

from __future__ import annotations

from .application.detection import InputDescriptor, detect, parse
from .application.discovery import ConfigFile, discover
from .application.resolver import resolve
from .core import load, load_with_options
from .domain.context import Context, SourceInfo
from .domain.errors import (
    ConfigError,
    EmptyConfig,
    FileError,
    InvalidConfig,
    InvalidPath,
    InvalidStructure,
    InvalidSyntax,
    IsDirectory,
    NotFound,
    ParseError,
    PathNotFound,
    PermissionDenied,
    PropertiesError,
    ReadFailure,
    ResolverError,
    TypeMismatch,
    UnknownFormat,
    UnresolvedPlaceholder,
    ValidationError,
    describe_error,
)
from .domain.options import Format, Options, ResolveMode
from .domain.path import PropertyPath
from .domain.properties import Properties
from .examples import generate_examples
from .observability import bind_trace_id, get_logger

__all__ = [
    "ConfigError",
    "ConfigFile",
    "Context",
    "EmptyConfig",
    "FileError",
    "Format",
    "InputDescriptor",
    "InvalidConfig",
    "InvalidPath",
    "InvalidStructure",
    "InvalidSyntax",
    "IsDirectory",
    "NotFound",
    "Options",
    "ParseError",
    "PathNotFound",
    "PermissionDenied",
    "Properties",
    "PropertiesError",
    "PropertyPath",
    "ReadFailure",
    "ResolveMode",
    "ResolverError",
    "SourceInfo",
    "TypeMismatch",
    "UnknownFormat",
    "UnresolvedPlaceholder",
    "ValidationError",
    "bind_trace_id",
    "describe_error",
    "detect",
    "discover",
    "generate_examples",
    "get_logger",
    "load",
    "load_with_options",
    "parse",
    "resolve",
]
