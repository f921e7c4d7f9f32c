"""Command line entry points.

The CI pipeline calls `before-release` before publishing the release and
`after-release` once it is published. Both run in the project root and take
no arguments; the event comes from the environment.
"""

from __future__ import annotations

from pathlib import Path

import typer

from trh import __version__
from trh.core.result import Err
from trh.output.console import ConsoleProtocol, RichConsole
from trh.output.errors import print_release_error, release_error_exit_code
from trh.services.after_release import run_after_release
from trh.services.before_release import run_before_release

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _console() -> ConsoleProtocol:
    return RichConsole()


@app.command("before-release")
def before_release() -> None:
    """Rename the release zip and write publish/release.md."""
    console = _console()
    result = run_before_release(Path.cwd(), console=console)
    if isinstance(result, Err):
        print_release_error(result.error, console)
        raise typer.Exit(code=release_error_exit_code(result.error))


@app.command("after-release")
def after_release() -> None:
    """Write deploy-meta.json, upload to cloud, notify the deploy webhook."""
    console = _console()
    result = run_after_release(Path.cwd(), console=console)
    if isinstance(result, Err):
        print_release_error(result.error, console)
        raise typer.Exit(code=release_error_exit_code(result.error))


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    del version


def main() -> None:
    app()


def before_release_main() -> None:
    typer.run(before_release)


def after_release_main() -> None:
    typer.run(after_release)
