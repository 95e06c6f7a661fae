"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apilib.exceptions.ApiLibError` subclass.
The ``apilib`` CLI exits with the code of the error that stopped it, so
shell wrappers can tell a broken definition from a refused request
without parsing stderr.

Example::

    $ apilib call -d api.json users show 23
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""A call chain referenced an unknown member or was given bad arguments."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the request as unauthenticated or forbidden."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DEFINITION_ERROR = 7
"""The API definition could not be loaded or failed validation."""
