"""CLI adapter for ``yodel`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the configuration loader via a command line interface so operators can
inspect merged profiles, single values, and format verdicts without writing
Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_read` – loads a source and prints it as JSON (optionally with
  provenance).
* :func:`cli_get` – prints one value through the typed getters.
* :func:`cli_profiles` – lists the files a directory load would merge.
* :func:`cli_detect` – prints the detected format of a source.
* :func:`cli_generate_examples` – scaffolds an example profile directory.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It maps flags onto :class:`Options`
builders, invokes the composition root, and turns every
:class:`~yodel.domain.errors.ConfigError` into a ``click.ClickException``
rendered with :func:`describe_error`.
"""

from __future__ import annotations

import json
import sys
from functools import wraps
from importlib import metadata
from pathlib import Path
from typing import Any, Callable, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.process import ProcessEnvironment
from .adapters.filesystem.local import LocalFileSystem
from .application.detection import InputDescriptor, detect, supported_extensions
from .application.discovery import active_profiles, discover
from .core import DEFAULT_PARSERS, load_with_options
from .domain.context import Context
from .domain.errors import ConfigError, UnknownFormat, describe_error
from .domain.options import DEFAULT_BASE_NAME, DEFAULT_PROFILE_ENV_VAR, Format, Options, ResolveMode
from .examples import generate_examples as _generate_examples

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_STDIN_SOURCE: Final[str] = "-"

FORMAT_CHOICES: Final[tuple[str, ...]] = tuple(fmt.value for fmt in Format)
TYPE_CHOICES: Final[tuple[str, ...]] = ("any", "string", "int", "float", "bool")


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when metadata is missing."""

    try:
        return metadata.version("yodel")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _config_errors(func: Callable[..., None]) -> Callable[..., None]:
    """Render :class:`ConfigError` as a one-line Click error (exit code 1)."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        try:
            func(*args, **kwargs)
        except ConfigError as exc:
            raise click.ClickException(describe_error(exc)) from exc

    return wrapper


def _loader_options(func: Callable[..., None]) -> Callable[..., None]:
    """Attach the flags that map onto :class:`Options` builders."""

    decorators = (
        click.option(
            "--format",
            "fmt",
            type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
            default=Format.AUTO.value,
            show_default=True,
            help="Force a grammar instead of detecting it",
        ),
        click.option(
            "--profile",
            "profiles",
            multiple=True,
            help="Profile to activate (repeatable, merge order follows the flags)",
        ),
        click.option(
            "--profile-env-var",
            default=DEFAULT_PROFILE_ENV_VAR,
            show_default=True,
            help="Environment variable whose comma-separated value replaces --profile",
        ),
        click.option("--base-name", default=DEFAULT_BASE_NAME, show_default=True, help="Base file stem"),
        click.option(
            "--strict/--lenient",
            default=False,
            help="Fail on placeholders without value or default",
        ),
        click.option(
            "--placeholders/--no-placeholders",
            default=True,
            help="Resolve ${NAME:default} placeholders before parsing",
        ),
    )
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _build_options(
    fmt: str,
    profiles: Sequence[str],
    profile_env_var: str,
    base_name: str,
    strict: bool,
    placeholders: bool,
) -> Options:
    return (
        Options()
        .with_format(fmt.lower())
        .with_profiles(profiles)
        .with_profile_env_var(profile_env_var)
        .with_base_name(base_name)
        .with_resolve_mode(ResolveMode.STRICT if strict else ResolveMode.LENIENT)
        .with_placeholders(placeholders)
    )


def _load(source: str, options: Options) -> Context:
    if source == _STDIN_SOURCE:
        return load_with_options(options, click.get_text_stream("stdin").read())
    return load_with_options(options, source)


@click.group(
    help="Load JSON, YAML, or TOML configuration with profiles and placeholders",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="yodel",
    message="yodel version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for ``lib_cli_exit_tools``.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("yodel")
    except metadata.PackageNotFoundError:
        click.echo("yodel (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'yodel')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("read", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("source")
@_loader_options
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the file and profile that supplied each key",
)
@_config_errors
def cli_read(
    source: str,
    fmt: str,
    profiles: Sequence[str],
    profile_env_var: str,
    base_name: str,
    strict: bool,
    placeholders: bool,
    indent: Optional[int],
    provenance: bool,
) -> None:
    """Load SOURCE (file, directory, literal text, or ``-`` for stdin) and print JSON."""

    options = _build_options(fmt, profiles, profile_env_var, base_name, strict, placeholders)
    context = _load(source, options)
    if provenance:
        payload = {"config": context.as_dict(), "provenance": {key: dict(info) for key, info in context.meta.items()}}
        click.echo(json.dumps(payload, indent=indent))
        return
    click.echo(json.dumps(context.as_dict(), indent=indent))


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("source")
@click.argument("key")
@_loader_options
@click.option(
    "--type",
    "kind",
    type=click.Choice(TYPE_CHOICES, case_sensitive=False),
    default="any",
    show_default=True,
    help="Require (or with --parse, coerce to) this value kind",
)
@click.option("--parse/--no-parse", "coerce", default=False, help="Coerce compatible values instead of failing")
@_config_errors
def cli_get(
    source: str,
    key: str,
    fmt: str,
    profiles: Sequence[str],
    profile_env_var: str,
    base_name: str,
    strict: bool,
    placeholders: bool,
    kind: str,
    coerce: bool,
) -> None:
    """Print the value stored at dotted KEY (for example ``db.replicas[0].host``)."""

    options = _build_options(fmt, profiles, profile_env_var, base_name, strict, placeholders)
    context = _load(source, options)
    click.echo(json.dumps(_typed_value(context, key, kind.lower(), coerce)))


def _typed_value(context: Context, key: str, kind: str, coerce: bool) -> Any:
    if kind == "any":
        return context[key]
    prefix = "parse" if coerce else "get"
    getter: Callable[[str], Any] = getattr(context, f"{prefix}_{kind}")
    return getter(key)


@cli.command("profiles", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument(
    "directory",
    type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True, readable=True),
)
@click.option("--base-name", default=DEFAULT_BASE_NAME, show_default=True, help="Base file stem")
@click.option("--profile", "profiles", multiple=True, help="Profile to activate (repeatable)")
@click.option("--profile-env-var", default=DEFAULT_PROFILE_ENV_VAR, show_default=True)
@_config_errors
def cli_profiles(directory: Path, base_name: str, profiles: Sequence[str], profile_env_var: str) -> None:
    """List the files a directory load would merge, in merge order."""

    options = Options().with_base_name(base_name).with_profiles(profiles).with_profile_env_var(profile_env_var)
    environment = ProcessEnvironment()
    files = discover(
        str(directory),
        options.base_name,
        options,
        filesystem=LocalFileSystem(),
        environment=environment,
        extensions=supported_extensions(DEFAULT_PARSERS.values()),
    )
    payload = {
        "active": list(active_profiles(options, environment)),
        "files": [{"path": item.path, "profile": item.profile} for item in files],
    }
    click.echo(json.dumps(payload, indent=2))


@cli.command("detect", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("source")
@_config_errors
def cli_detect(source: str) -> None:
    """Print the grammar SOURCE (a file or literal text) would be parsed with."""

    filesystem = LocalFileSystem()
    if filesystem.is_file(source):
        descriptor = InputDescriptor(filesystem.read(source), source)
    else:
        descriptor = InputDescriptor(source)
    verdict = detect(descriptor, Options())
    if verdict is Format.AUTO:
        raise UnknownFormat(descriptor.path)
    click.echo(verdict.value)


@cli.command("generate-examples", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--destination",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True, resolve_path=True),
    required=True,
    help="Directory that will receive the example profile files",
)
@click.option("--base-name", default=DEFAULT_BASE_NAME, show_default=True, help="Base file stem")
@click.option(
    "--force/--no-force",
    default=False,
    help="Overwrite existing example files if set",
    show_default=True,
)
def cli_generate_examples(destination: Path, base_name: str, force: bool) -> None:
    """Generate a base configuration plus ``dev`` and ``prod`` overlays under DESTINATION."""

    created = _generate_examples(destination, base_name=base_name, force=force)
    click.echo(json.dumps([str(path) for path in created], indent=2))


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="yodel",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
