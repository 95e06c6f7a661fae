"""State machine that interprets a chain of dynamically named calls.

A chain such as ``api.users().show(23).delay(3)`` reaches the dispatcher as
a sequence of ``(name, args, kwargs)`` steps. What a name means depends on
how far the current :class:`~apilib.builder.draft.RequestDraft` has
progressed:

1. **No endpoint yet** -- the name is an endpoint. A first positional
   argument is taken as the action name (``api.users("index")``) and the
   remaining arguments are handled as in step 2.
2. **No action yet** -- the name is an action of the endpoint. Positional
   arguments bind, in order, to the action's path parameters, then (for
   actions that send a body) to the body, then to a query mapping.
   Keyword arguments bind path parameters by name; other keywords are
   query values.
3. **``body``** on an action that sends a body -- sets the body.
4. **A path parameter of the action** -- sets that parameter.
5. **Anything else** -- a query value for the action, ``True`` when no
   value is given.

Each step validates against the :class:`~apilib.definition.ApiDefinition`
and raises a :class:`~apilib.exceptions.DispatchError` subclass on
failure. Steps run against a copy of the draft, so the live draft only
changes when the whole step succeeds.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from apilib.builder.draft import RequestDraft
from apilib.client.http_client import RequestOptions
from apilib.definition import ApiDefinition
from apilib.exceptions import (
    InvalidBodyError,
    MissingArgumentError,
    PreconditionError,
    TypeMismatchError,
    UnknownEndpointError,
    UnsupportedActionError,
    UnsupportedQueryError,
)

logger = logging.getLogger(__name__)

DEFAULT_METHODS: dict[str, str] = {
    "index": "GET",
    "show": "GET",
    "store": "POST",
    "update": "PUT",
    "delete": "DELETE",
}
"""HTTP method for each conventional action. Other actions use ``GET``."""

METHODS_WITH_BODY = frozenset({"POST", "PUT", "PATCH"})

_SCALAR_BODIES = (str, bytes, bytearray, int, float, bool)


@dataclass
class PreparedRequest:
    """Everything the HTTP client needs to send a finished draft."""

    method: str
    path: str
    options: RequestOptions


class Dispatcher:
    """Interpret dynamic calls against one API definition.

    Args:
        definition: The compiled definition to validate calls against.
        methods: Action to HTTP method table. Defaults to
            :data:`DEFAULT_METHODS`.

    Example::

        dispatcher = Dispatcher(definition)
        dispatcher.dispatch("users")
        dispatcher.dispatch("show", (23,))
        dispatcher.prepare()   # PreparedRequest(method='GET', path='users/23', ...)
    """

    def __init__(
        self,
        definition: ApiDefinition,
        methods: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.definition = definition
        self.methods = dict(DEFAULT_METHODS if methods is None else methods)
        self.draft = RequestDraft()

    def reset(self) -> None:
        """Discard the current draft."""
        self.draft = RequestDraft()

    # ------------------------------------------------------------------ #
    # Method table
    # ------------------------------------------------------------------ #

    def method_for(self, action: str) -> str:
        return self.methods.get(action, "GET").upper()

    def action_has_body(self, action: str) -> bool:
        return self.method_for(action) in METHODS_WITH_BODY

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def dispatch(
        self,
        name: str,
        args: Iterable[Any] = (),
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> RequestDraft:
        """Apply one call of the chain and return the updated draft.

        Raises:
            DispatchError: If the call is not valid at this point of the
                chain. The draft is left unchanged.
        """
        draft = self.draft.copy()
        args = list(args)
        kwargs = dict(kwargs or {})

        if draft.endpoint is None:
            self._handle_endpoint(draft, name, args, kwargs)
        elif draft.action is None:
            self._handle_action(draft, name, args, kwargs)
        elif name == "body" and self.action_has_body(draft.action):
            self._handle_body(draft, args, kwargs)
        elif self.definition.action_has_parameter(draft.endpoint, draft.action, name):
            self._handle_parameter(draft, name, args, kwargs)
        else:
            self._handle_query(draft, name, args, kwargs)

        logger.debug("%s -> %s", name, draft)
        self.draft = draft
        return draft

    def prepare(self) -> PreparedRequest:
        """Turn the current draft into a :class:`PreparedRequest`.

        Mappings and lists are sent as JSON; any other body is sent raw.

        Raises:
            PreconditionError: If no endpoint or no action has been set.
        """
        draft = self.draft
        if draft.endpoint is None:
            raise PreconditionError("An endpoint must be set before calling the API")
        if draft.action is None:
            raise PreconditionError("An action must be set before calling the API")

        options = RequestOptions(query=dict(draft.query))
        if isinstance(draft.body, (Mapping, list, tuple)):
            options.json_body = _jsonable(draft.body)
        elif draft.body is not None:
            options.body = draft.body

        return PreparedRequest(
            method=self.method_for(draft.action),
            path=self.definition.build_path(draft.endpoint, draft.action, draft.parameters),
            options=options,
        )

    # ------------------------------------------------------------------ #
    # Steps
    # ------------------------------------------------------------------ #

    def _handle_endpoint(
        self,
        draft: RequestDraft,
        endpoint: str,
        args: list[Any],
        kwargs: dict[str, Any],
    ) -> None:
        if not self.definition.has_endpoint(endpoint):
            raise UnknownEndpointError(endpoint)

        draft.endpoint = endpoint

        if not args:
            if kwargs:
                raise TypeMismatchError(
                    endpoint, "", 1,
                    detail="needs an action name before keyword arguments",
                )
            return

        action, *rest = args
        if not isinstance(action, str):
            raise TypeMismatchError(endpoint, "", 1, "str", type(action).__name__)
        self._handle_action(draft, action, rest, kwargs)

    def _handle_action(
        self,
        draft: RequestDraft,
        action: str,
        args: list[Any],
        kwargs: dict[str, Any],
    ) -> None:
        endpoint = draft.endpoint
        assert endpoint is not None

        if not self.definition.endpoint_has_action(endpoint, action):
            raise UnsupportedActionError(endpoint, action)

        draft.action = action
        names = self.definition.get_parameters_for_action(endpoint, action)
        has_body = self.action_has_body(action)

        max_args = len(names) + (1 if has_body else 0) + 1
        if len(args) > max_args:
            raise TypeMismatchError(
                endpoint, action, max_args + 1,
                detail=f"takes at most {max_args} arguments ({len(args)} given)",
            )

        parameters: dict[str, Any] = {}
        for index, name in enumerate(names):
            if index < len(args):
                if name in kwargs:
                    raise TypeMismatchError(
                        endpoint, action, index + 1,
                        detail=f"got multiple values for argument '{name}'",
                    )
                parameters[name] = args[index]
            elif name in kwargs:
                parameters[name] = kwargs.pop(name)
            else:
                raise MissingArgumentError(endpoint, action, index + 1)

        rest = args[len(names):]
        position = len(names)

        if has_body and rest:
            position += 1
            draft.body = _validate_body(rest.pop(0))

        if rest:
            position += 1
            query = rest.pop(0)
            if not isinstance(query, Mapping):
                raise TypeMismatchError(
                    endpoint, action, position, "mapping", type(query).__name__
                )
            self._set_query(draft, query)

        self._set_query(draft, kwargs)
        draft.parameters.update(parameters)

    def _handle_body(self, draft: RequestDraft, args: list[Any], kwargs: dict[str, Any]) -> None:
        self._single_value(draft, "body", args, kwargs)
        draft.body = _validate_body(args[0])

    def _handle_parameter(
        self,
        draft: RequestDraft,
        name: str,
        args: list[Any],
        kwargs: dict[str, Any],
    ) -> None:
        self._single_value(draft, name, args, kwargs)
        draft.parameters[name] = args[0]

    def _handle_query(
        self,
        draft: RequestDraft,
        name: str,
        args: list[Any],
        kwargs: dict[str, Any],
    ) -> None:
        assert draft.endpoint is not None and draft.action is not None
        if not self.definition.action_has_query(draft.endpoint, draft.action, name):
            raise UnsupportedQueryError(draft.endpoint, draft.action, name)

        if args or kwargs:
            self._single_value(draft, name, args, kwargs)
            draft.query[name] = args[0]
        else:
            draft.query[name] = True

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _set_query(self, draft: RequestDraft, values: Mapping[str, Any]) -> None:
        assert draft.endpoint is not None and draft.action is not None
        for name, value in values.items():
            if not self.definition.action_has_query(draft.endpoint, draft.action, name):
                raise UnsupportedQueryError(draft.endpoint, draft.action, name)
            draft.query[name] = value

    @staticmethod
    def _single_value(
        draft: RequestDraft,
        member: str,
        args: list[Any],
        kwargs: dict[str, Any],
    ) -> None:
        """Check that a member call carries exactly one positional value."""
        endpoint, action = draft.endpoint or "", draft.action or ""
        if kwargs:
            raise TypeMismatchError(
                endpoint, action, 1,
                detail="takes no keyword arguments",
                member=member,
            )
        if not args:
            raise MissingArgumentError(endpoint, action, 1, member=member)
        if len(args) > 1:
            raise TypeMismatchError(
                endpoint, action, 2,
                detail=f"takes 1 argument ({len(args)} given)",
                member=member,
            )


def _validate_body(body: Any) -> Any:
    """Return *body* if the HTTP client can send it, else raise :class:`InvalidBodyError`."""
    if body is None or isinstance(body, _SCALAR_BODIES):
        return body
    if isinstance(body, (Mapping, list, tuple)):
        return body
    if callable(getattr(body, "read", None)):
        return body
    raise InvalidBodyError(type(body).__name__)


def _jsonable(body: Any) -> Any:
    if isinstance(body, Mapping):
        return dict(body)
    return list(body)
