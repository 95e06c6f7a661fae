"""Inspect commands -- examine an API definition.

Provides the ``apilib inspect`` sub-command group with read-only commands
for viewing a definition: its versions, every endpoint/action pair with
the HTTP method, path template, parameters and accepted queries, and the
path a given set of parameter values builds.
"""

from __future__ import annotations

from typing import Optional

import typer

from apilib.builder.dispatcher import Dispatcher
from apilib.commands.common import (
    DEFINITION_OPTION,
    VERSION_OPTION,
    handle_errors,
    load_cli_definition,
    parse_pairs,
    require_action,
)
from apilib.output import get_output, info, print_data, warning

inspect_app = typer.Typer(no_args_is_help=True)


@inspect_app.command("versions")
def inspect_versions(
    definition: str = DEFINITION_OPTION,
) -> None:
    """List the versions of a versioned API.

    The version in use by default (the last declared) is marked.

    Example::

        apilib inspect versions -d reqres.json
    """
    with handle_errors():
        api = load_cli_definition(definition)

        if not api.is_versioned():
            info("This API is not versioned.")
            return

        current = api.current_version()
        rows: list[list[str]] = []
        for version in api.get_versions():
            api.use_version(version)
            rows.append([version, "yes" if version == current else "", str(api.get_base_uri())])
        get_output().print_table(["Version", "Default", "Base URI"], rows, title="Versions")


@inspect_app.command("endpoints")
def inspect_endpoints(
    definition: str = DEFINITION_OPTION,
    version: Optional[str] = VERSION_OPTION,
) -> None:
    """List every endpoint and action of the active version.

    Example::

        apilib inspect endpoints -d reqres.yaml
        apilib inspect endpoints -d reqres.json --api-version 1
    """
    with handle_errors():
        api = load_cli_definition(definition, version)
        dispatcher = Dispatcher(api)

        headers = ["Endpoint", "Action", "Method", "Path", "Parameters", "Query"]
        rows: list[list[str]] = []
        for endpoint in api.get_endpoints():
            for action in api.get_actions_for_endpoint(endpoint):
                rows.append([
                    endpoint,
                    action,
                    dispatcher.method_for(action),
                    api.get_path_template(endpoint, action) or "",
                    ", ".join(api.get_parameters_for_action(endpoint, action)),
                    ", ".join(api.get_queries_for_action(endpoint, action)),
                ])

        title = f"Endpoints ({api.current_version()})" if api.is_versioned() else "Endpoints"
        get_output().print_table(headers, rows, title=title)


@inspect_app.command("path")
def inspect_path(
    endpoint: str = typer.Argument(help="Endpoint name."),
    action: str = typer.Argument(help="Action name."),
    definition: str = DEFINITION_OPTION,
    version: Optional[str] = VERSION_OPTION,
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-p", help="Path parameter as name=value (repeatable)."
    ),
) -> None:
    """Print the path an action resolves to.

    Parameters that are not given are substituted with an empty string.
    Names the action does not declare are ignored with a warning.

    Example::

        apilib inspect path -d reqres.yaml users show -p userId=23
    """
    with handle_errors():
        api = load_cli_definition(definition, version)
        require_action(api, endpoint, action)
        values = parse_pairs(param, "--param")
        declared = api.get_parameters_for_action(endpoint, action)
        for name in values:
            if name not in declared:
                warning(f"Ignoring '{name}': not a parameter of {endpoint}.{action}")
        print_data(api.build_path(endpoint, action, values))
