"""Developer check runner: ruff, pyright, then pytest with the configured coverage floor."""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
from pathlib import Path

import click

PROJECT_ROOT = Path(__file__).resolve().parents[1]
PYPROJECT = PROJECT_ROOT / "pyproject.toml"
COVERAGE_TARGET = "yodel"
DEFAULT_FAIL_UNDER = 80

STATIC_CHECKS: tuple[tuple[str, list[str]], ...] = (
    ("Ruff lint", ["ruff", "check", "."]),
    ("Ruff format (check)", ["ruff", "format", "--check", "."]),
    ("Pyright type-check", ["pyright"]),
)


def _subprocess_env(extra: dict[str, str] | None = None) -> dict[str, str]:
    pythonpath = os.pathsep.join(filter(None, [str(PROJECT_ROOT / "src"), os.environ.get("PYTHONPATH")]))
    return os.environ | {"PYTHONPATH": pythonpath} | (extra or {})


def _run(cmd: list[str], *, verbose: bool, extra_env: dict[str, str] | None = None) -> int:
    if verbose:
        click.echo(f"  $ {' '.join(cmd)}")
    completed = subprocess.run(cmd, env=_subprocess_env(extra_env), cwd=PROJECT_ROOT, check=False)
    if verbose:
        click.echo(f"    -> exit={completed.returncode}")
    return completed.returncode


def _read_fail_under(pyproject: Path) -> int:
    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        return int(data["tool"]["coverage"]["report"]["fail_under"])
    except (OSError, KeyError, ValueError):
        return DEFAULT_FAIL_UNDER


@click.command(help="Run lints, type-check, and tests with coverage")
@click.option("--coverage/--no-coverage", default=True, show_default=True)
@click.option("--verbose", "-v", is_flag=True, help="Print executed commands and exit codes")
def main(coverage: bool, verbose: bool) -> None:
    verbose = verbose or os.getenv("TEST_VERBOSE", "").lower() in {"1", "true", "yes", "on"}
    steps = len(STATIC_CHECKS) + 1
    failures: list[str] = []
    for number, (label, cmd) in enumerate(STATIC_CHECKS, start=1):
        click.echo(f"[{number}/{steps}] {label}")
        if _run(cmd, verbose=verbose) != 0:
            failures.append(label)

    click.echo(f"[{steps}/{steps}] Pytest")
    pytest_cmd = [sys.executable, "-m", "pytest", "-vv"]
    if not coverage:
        code = _run(pytest_cmd, verbose=verbose)
    else:
        fail_under = _read_fail_under(PYPROJECT)
        with tempfile.TemporaryDirectory() as tmp:
            cov_file = Path(tmp) / ".coverage"
            click.echo(f"[coverage] fail_under={fail_under}")
            code = _run(
                [*pytest_cmd, f"--cov={COVERAGE_TARGET}", "--cov-report=term-missing", f"--cov-fail-under={fail_under}"],
                verbose=verbose,
                extra_env={"COVERAGE_FILE": str(cov_file)},
            )

    if failures:
        click.echo(f"[checks] failed: {', '.join(failures)}", err=True)
    if code != 0:
        click.echo("[pytest] failed", err=True)
    raise SystemExit(code or (1 if failures else 0))


if __name__ == "__main__":
    main()
