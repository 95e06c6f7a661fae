"""Options and helpers shared by the CLI sub-commands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

import typer

from apilib.definition import ApiDefinition
from apilib.exceptions import ApiLibError, InvalidUsageError
from apilib.output import debug, error

DEFINITION_OPTION = typer.Option(
    ...,
    "--definition",
    "-d",
    envvar="APILIB_DEFINITION",
    help="API definition file (JSON, YAML, .py) or URL.",
)

VERSION_OPTION = typer.Option(
    None, "--api-version", help="API version to use (defaults to the last declared)."
)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report :class:`ApiLibError` on stderr and exit with its exit code."""
    try:
        yield
    except ApiLibError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def load_cli_definition(source: str, version: Optional[str] = None) -> ApiDefinition:
    """Load the definition named on the command line."""
    debug(f"Loading definition from {source}")
    return ApiDefinition.from_file(source, version)


def parse_pairs(pairs: Optional[list[str]], option: str) -> dict[str, Optional[str]]:
    """Parse ``name=value`` command-line pairs.

    A bare ``name`` maps to ``None``.

    Raises:
        InvalidUsageError: If a pair has an empty name.
    """
    parsed: dict[str, Optional[str]] = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not name:
            raise InvalidUsageError(f"Invalid {option} value '{pair}', expected name=value")
        parsed[name] = value if sep else None
    return parsed


def require_action(definition: ApiDefinition, endpoint: str, action: str) -> None:
    """Raise :class:`InvalidUsageError` unless *endpoint* supports *action*."""
    if not definition.has_endpoint(endpoint):
        raise InvalidUsageError(f"The endpoint '{endpoint}' does not exist")
    if not definition.endpoint_has_action(endpoint, action):
        raise InvalidUsageError(f"The endpoint '{endpoint}' does not support '{action}'")
