"""apilib -- Declarative REST API clients built from a definition.

Describe an API once (base URI, optional versions, endpoints with their
path templates and actions, accepted query names) and call it through a
fluent, validated chain::

    from apilib import JsonApi

    class ReqRes(JsonApi):
        definition = "reqres.yaml"

    ReqRes().users().show(23).call()
    ReqRes().colors().store({"name": "cerulean"}).call()

Every link of the chain is checked against the definition before any
request is sent.

Modules:
    definition: Loading, validating and compiling API definitions.
    builder: The ``Api`` base class and its call-chain dispatcher.
    client: The ``httpx``-based HTTP client.
    config: Client option resolution with environment overrides.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes for the ``apilib`` command.
    output: stdout/stderr formatting for the CLI with Rich support.
    app: Typer application and CLI entry point.
"""

__version__ = "0.1.0"

from apilib.builder import Api, JsonApi  # noqa: E402
from apilib.definition import ApiDefinition  # noqa: E402

__all__ = ["Api", "ApiDefinition", "JsonApi", "__version__"]
