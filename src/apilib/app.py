"""Typer application and CLI entry point for apilib.

Registers the built-in sub-commands (``inspect`` and ``call``) on the root
application. The :func:`main` function is the console-script entry point
declared in ``pyproject.toml``.

See Also:
    :mod:`apilib.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
from typing import Any

import typer

from apilib import __version__
from apilib.commands.call import call_command
from apilib.commands.inspect import inspect_app
from apilib.exit_codes import EXIT_GENERIC_FAILURE
from apilib.output import OutputFormat, OutputManager, set_output

app = typer.Typer(
    name="apilib",
    help="Inspect and call REST APIs described by an apilib definition.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(inspect_app, name="inspect", help="Inspect an API definition.")
app.command("call")(call_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"apilib {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~apilib.output.OutputManager` built from
    the CLI flags and routes library logging to stderr.
    """
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    output.configure_logging()
    set_output(output)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``apilib`` console script.

    Commands report :class:`~apilib.exceptions.ApiLibError` themselves and
    exit with its ``exit_code``; anything that escapes them is reported
    here the same way.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from apilib.exceptions import ApiLibError
        from apilib.output import error

        if isinstance(exc, ApiLibError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
