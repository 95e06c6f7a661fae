"""The ``apilib call`` command -- send one request from the shell.

Positional values after ENDPOINT and ACTION bind to the action's path
parameters in order, exactly as they would in ``api.users().show(23)``.
Query values and the body are passed as options::

    apilib call -d reqres.yaml users index -q page=2 -q delay=3
    apilib call -d reqres.yaml users update 23 --body '{"job": "zion resident"}'
    apilib call -d reqres.yaml users show 23 --dry-run
"""

from __future__ import annotations

import json
from typing import Any, Optional

import typer

from apilib.builder.json_api import JsonApi
from apilib.commands.common import (
    DEFINITION_OPTION,
    VERSION_OPTION,
    handle_errors,
    load_cli_definition,
    parse_pairs,
)
from apilib.exceptions import InvalidUsageError
from apilib.output import debug, format_response, print_data


def call_command(
    endpoint: str = typer.Argument(help="Endpoint name."),
    action: str = typer.Argument(help="Action name."),
    args: Optional[list[str]] = typer.Argument(None, help="Path parameter values, in order."),
    definition: str = DEFINITION_OPTION,
    version: Optional[str] = VERSION_OPTION,
    query: Optional[list[str]] = typer.Option(
        None, "--query", "-q", help="Query value as name=value, or a bare name for true (repeatable)."
    ),
    body: Optional[str] = typer.Option(
        None, "--body", "-b", help="Request body. Parsed as JSON when possible."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra request header as name=value (repeatable)."
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds."),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the request instead of sending it."
    ),
) -> None:
    """Call an action of the API and print the decoded response.

    Example::

        apilib call -d reqres.json users show 2
    """
    with handle_errors():
        api_definition = load_cli_definition(definition, version)

        options: dict[str, Any] = {}
        headers = parse_pairs(header, "--header")
        if headers:
            options["headers"] = {name: value or "" for name, value in headers.items()}
        if timeout is not None:
            options["timeout"] = timeout

        with JsonApi(api_definition, options=options) as api:
            api.dispatch(endpoint, action, *(args or []))

            if body is not None:
                if not api.has_body():
                    raise InvalidUsageError(
                        f"The action '{endpoint}.{action}' does not send a request body"
                    )
                api.dispatch("body", _parse_body(body))

            for name, value in parse_pairs(query, "--query").items():
                if value is None:
                    api.dispatch(name)
                else:
                    api.dispatch(name, value)

            if dry_run:
                request = api.build_request()
                api.reset()
                print_data(f"{request.method} {request.url}")
                if request.content:
                    print_data(request.content.decode("utf-8", errors="replace"))
                return

            debug(f"Calling {endpoint}.{action}")
            format_response(api.call())


def _parse_body(body: str) -> Any:
    """Parse *body* as JSON if possible, returning the raw string on failure."""
    try:
        return json.loads(body)
    except ValueError:
        return body
