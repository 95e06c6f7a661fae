"""Exception hierarchy for apilib.

All exceptions inherit from :class:`ApiLibError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apilib.exit_codes`.
The CLI entry point in :func:`apilib.app.main` catches ``ApiLibError`` and
exits with the appropriate code; library callers catch the narrower
classes.

Errors raised while interpreting a call chain also subclass the matching
built-in (``AttributeError`` for unknown members, ``TypeError`` for bad
arguments) so that they read like the errors Python itself raises for
ordinary method calls.

Subclass hierarchy::

    ApiLibError (exit 1)
    +-- DefinitionError          (exit 7)
    +-- ConfigError              (exit 1)
    +-- InvalidUsageError        (exit 2)
    |   +-- DispatchError
    |   |   +-- UndefinedMethodError
    |   |   |   +-- UnknownEndpointError
    |   |   |   +-- UnsupportedActionError
    |   |   |   +-- UnsupportedQueryError
    |   |   +-- ArgumentError
    |   |   |   +-- MissingArgumentError
    |   |   |   +-- TypeMismatchError
    |   |   +-- InvalidBodyError
    |   +-- PreconditionError
    +-- TransportError           (exit 6)
    +-- AuthError                (exit 3)
    +-- NotFoundError            (exit 4)
    +-- ClientError              (exit 1)
    +-- ServerError              (exit 5)
    +-- ConnectionError_         (exit 6)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from apilib.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DEFINITION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)

if TYPE_CHECKING:
    import httpx


class ApiLibError(Exception):
    """Base exception for all apilib errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`apilib.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class DefinitionError(ApiLibError, ValueError):
    """Raised when an API definition is malformed, incomplete, or cannot be loaded."""

    exit_code = EXIT_DEFINITION_ERROR


class ConfigError(ApiLibError):
    """Raised for configuration problems (bad environment values, invalid client options)."""

    exit_code = EXIT_GENERIC_FAILURE


class InvalidUsageError(ApiLibError):
    """Raised when the builder is driven in a way the definition does not allow."""

    exit_code = EXIT_INVALID_USAGE


class PreconditionError(InvalidUsageError, RuntimeError):
    """Raised when ``call()`` is invoked before the endpoint or action is set."""


# --- Call chain errors ---


def _chain(owner: str, *members: Optional[str]) -> str:
    """Render ``Owner.users().show()`` for the given chain members."""
    calls = "".join(f"{m}()" if i == 0 else f".{m}()" for i, m in enumerate(members) if m)
    return f"{owner}.{calls}"


class DispatchError(InvalidUsageError):
    """Base class for errors raised while interpreting a dynamic call chain.

    The dispatcher raises these with a plain message describing what is
    missing from the definition. :class:`~apilib.builder.api.Api`
    re-raises them through :meth:`qualify`, which produces the same error
    type with a message positioned in the caller's chain.
    """

    def qualify(self, owner: str) -> DispatchError:
        """Return a copy of this error whose message names *owner*'s call chain."""
        return self

    def _copy(self, message: str) -> DispatchError:
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        ApiLibError.__init__(clone, message)
        return clone


class UndefinedMethodError(DispatchError, AttributeError):
    """A call referenced an endpoint, action, or query name that does not exist."""


class UnknownEndpointError(UndefinedMethodError):
    """The endpoint is not defined in the active API version."""

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        super().__init__(f"The endpoint '{endpoint}' does not exist")

    def qualify(self, owner: str) -> DispatchError:
        return self._copy(f"Call to undefined method {_chain(owner, self.endpoint)}")


class UnsupportedActionError(UndefinedMethodError):
    """The endpoint exists but does not support the action."""

    def __init__(self, endpoint: str, action: str):
        self.endpoint = endpoint
        self.action = action
        super().__init__(f"The endpoint '{endpoint}' does not support '{action}'")

    def qualify(self, owner: str) -> DispatchError:
        return self._copy(
            f"Call to undefined method {_chain(owner, self.endpoint, self.action)}"
        )


class UnsupportedQueryError(UndefinedMethodError):
    """The name is neither a parameter nor a query accepted by the action."""

    def __init__(self, endpoint: str, action: str, name: str):
        self.endpoint = endpoint
        self.action = action
        self.query = name
        super().__init__(
            f"The query '{name}' is not supported by '{endpoint}.{action}'"
        )

    def qualify(self, owner: str) -> DispatchError:
        return self._copy(
            "Call to undefined method "
            + _chain(owner, self.endpoint, self.action, self.query)
        )


class ArgumentError(DispatchError, TypeError):
    """The arguments passed to a chain member do not fit its signature."""


class MissingArgumentError(ArgumentError):
    """Fewer arguments were supplied than the member requires.

    Attributes:
        position: 1-based position of the first missing argument.
    """

    def __init__(self, endpoint: str, action: str, position: int, member: Optional[str] = None):
        self.endpoint = endpoint
        self.action = action
        self.position = position
        self.member = member
        target = f"{endpoint}.{action}" + (f".{member}" if member else "")
        super().__init__(f"Missing argument {position} for '{target}'")

    def qualify(self, owner: str) -> DispatchError:
        return self._copy(
            f"Missing argument {self.position} for "
            + _chain(owner, self.endpoint, self.action, self.member)
        )


class TypeMismatchError(ArgumentError):
    """An argument has the wrong type, or there is no slot for it."""

    def __init__(
        self,
        endpoint: str,
        action: str,
        position: int,
        expected: str = "",
        given: str = "",
        detail: Optional[str] = None,
        member: Optional[str] = None,
    ):
        self.endpoint = endpoint
        self.action = action
        self.position = position
        self.expected = expected
        self.given = given
        self.detail = detail
        self.member = member
        target = ".".join(part for part in (endpoint, action, member) if part)
        super().__init__(self._render(f"'{target}'"))

    def _render(self, target: str) -> str:
        if self.detail:
            return f"{target} {self.detail}"
        return (
            f"Argument {self.position} passed to {target} must be of type "
            f"{self.expected}, {self.given} given"
        )

    def qualify(self, owner: str) -> DispatchError:
        return self._copy(
            self._render(_chain(owner, self.endpoint, self.action, self.member))
        )


class InvalidBodyError(DispatchError, ValueError):
    """The request body is not a value the HTTP client can send."""

    def __init__(self, given: str):
        self.given = given
        super().__init__(f"Provide a valid request body, {given} given")


# --- Transport and HTTP status errors ---


class TransportError(ApiLibError):
    """Raised by the HTTP client when a request fails.

    Wraps the underlying :class:`httpx.HTTPError`. ``response`` is set when
    the server answered with an error status, and ``None`` for
    network-level failures.

    Attributes:
        request: The :class:`httpx.Request` that failed.
        response: The error :class:`httpx.Response`, if any.
    """

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(
        self,
        message: str,
        request: Optional[httpx.Request] = None,
        response: Optional[httpx.Response] = None,
    ):
        super().__init__(message)
        self.request = request
        self.response = response


class AuthError(ApiLibError):
    """Raised when the API returns HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ApiLibError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ClientError(ApiLibError):
    """Raised when the API returns any other HTTP 4xx status."""

    exit_code = EXIT_GENERIC_FAILURE


class ServerError(ApiLibError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(ApiLibError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR
