"""Base class for declarative API clients.

Subclass :class:`Api`, declare the API as the ``definition`` class
attribute, and implement the two hooks that turn responses and failures
into whatever your application wants::

    class ReqRes(Api):
        definition = {
            "base": "https://reqres.in/api/",
            "endpoints": {
                "users": {
                    "users": ["index"],
                    "users/{userId}": ["show"],
                },
            },
            "global_query": {"page": ["index"], "delay": ["index", "show"]},
        }

        def process_response(self, response):
            return response.json()

        def process_http_exception(self, error):
            return None

    api = ReqRes()
    api.users().index().page(2).call()
    api.users("show", 23).call()

Endpoint, action, parameter and query names are not real attributes:
attribute lookups that fail are routed through :meth:`Api.dispatch`, which
hands them to a :class:`~apilib.builder.dispatcher.Dispatcher`. Names that
collide with a method of this class, or that are not valid identifiers,
can be dispatched explicitly with ``api.dispatch("name", *args)``.

An instance holds one draft at a time and is not safe to share between
threads that compose requests concurrently; give each thread its own
instance.
"""

from __future__ import annotations

import abc
import functools
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar, Optional, Union

import httpx

from apilib.builder.dispatcher import DEFAULT_METHODS, Dispatcher, PreparedRequest
from apilib.builder.draft import RequestDraft
from apilib.client.http_client import HttpClient
from apilib.config import merge_options, resolve_client_options
from apilib.definition import ApiDefinition
from apilib.exceptions import DefinitionError, DispatchError, TransportError

logger = logging.getLogger(__name__)

DefinitionSource = Union[ApiDefinition, Mapping[str, Any], str, Path]


class Api(abc.ABC):
    """Fluent, definition-driven API client.

    Args:
        definition: The API definition, overriding the class attribute. An
            :class:`ApiDefinition`, a raw mapping, or a path / URL accepted
            by :meth:`ApiDefinition.from_file`.
        version: Version to activate on a versioned API.
        options: Client options merged over the ``options`` class
            attribute (see :class:`~apilib.models.ClientOptions`).

    Raises:
        DefinitionError: If no definition is given or it is invalid.
    """

    definition: ClassVar[Optional[DefinitionSource]] = None
    """The API definition used when none is passed to the constructor."""

    options: ClassVar[dict[str, Any]] = {}
    """Default client options for every instance of the class."""

    methods: ClassVar[dict[str, str]] = dict(DEFAULT_METHODS)
    """HTTP method for each action. Unlisted actions use ``GET``."""

    def __init__(
        self,
        definition: Optional[DefinitionSource] = None,
        *,
        version: Optional[Union[str, int]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        source = definition if definition is not None else type(self).definition
        self._definition = _load(source, version, type(self).__name__)
        self._dispatcher = Dispatcher(self._definition, self.methods)
        self._client_options = merge_options(type(self).options, options)
        self._clients: dict[Optional[str], HttpClient] = {}
        self._clients_lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # Hooks
    # ------------------------------------------------------------------ #

    @abc.abstractmethod
    def process_response(self, response: httpx.Response) -> Any:
        """Turn a successful response into the result of :meth:`call`."""

    @abc.abstractmethod
    def process_http_exception(self, error: TransportError) -> Any:
        """Turn a failed request into the result of :meth:`call`.

        May raise instead of returning; the draft is reset either way.
        """

    # ------------------------------------------------------------------ #
    # Versions
    # ------------------------------------------------------------------ #

    def api(self) -> ApiDefinition:
        """Return the compiled :class:`ApiDefinition`."""
        return self._definition

    def is_versioned(self) -> bool:
        return self._definition.is_versioned()

    def has_version(self, version: Union[str, int]) -> bool:
        return self._definition.has_version(version)

    def get_versions(self) -> list[str]:
        return self._definition.get_versions()

    def current_version(self) -> Optional[str]:
        return self._definition.current_version()

    def use_version(self, version: Union[str, int]) -> bool:
        """Switch the active API version. See :meth:`ApiDefinition.use_version`."""
        return self._definition.use_version(version)

    def get_base_uri(self) -> httpx.URL:
        return self._definition.get_base_uri()

    # ------------------------------------------------------------------ #
    # Introspection of the current chain
    # ------------------------------------------------------------------ #

    @property
    def draft(self) -> RequestDraft:
        """The request being composed (a live view; do not mutate)."""
        return self._dispatcher.draft

    def has_endpoint(self, endpoint: str) -> bool:
        return self._definition.has_endpoint(endpoint)

    def get_endpoints(self) -> list[str]:
        return self._definition.get_endpoints()

    def has_action(self, action: str) -> bool:
        """Whether the current endpoint supports *action* (``False`` without an endpoint)."""
        endpoint = self.draft.endpoint
        if endpoint is None:
            return False
        return self._definition.endpoint_has_action(endpoint, action)

    def get_actions(self) -> list[str]:
        endpoint = self.draft.endpoint
        if endpoint is None:
            return []
        return self._definition.get_actions_for_endpoint(endpoint)

    def has_body(self) -> bool:
        """Whether the current action sends a request body."""
        if self.draft.endpoint is None or self.draft.action is None:
            return False
        return self._dispatcher.action_has_body(self.draft.action)

    def has_parameter(self, parameter: str) -> bool:
        draft = self.draft
        if draft.endpoint is None or draft.action is None:
            return False
        return self._definition.action_has_parameter(draft.endpoint, draft.action, parameter)

    def get_parameters(self) -> list[str]:
        draft = self.draft
        if draft.endpoint is None or draft.action is None:
            return []
        return self._definition.get_parameters_for_action(draft.endpoint, draft.action)

    def has_query(self, query: str) -> bool:
        draft = self.draft
        if draft.endpoint is None or draft.action is None:
            return False
        return self._definition.action_has_query(draft.endpoint, draft.action, query)

    def get_queries(self) -> list[str]:
        draft = self.draft
        if draft.endpoint is None or draft.action is None:
            return []
        return self._definition.get_queries_for_action(draft.endpoint, draft.action)

    # ------------------------------------------------------------------ #
    # Call chain
    # ------------------------------------------------------------------ #

    def dispatch(self, name: str, *args: Any, **kwargs: Any) -> Api:
        """Apply one step of the call chain and return ``self``.

        ``api.users("show", 23)`` is ``api.dispatch("users", "show", 23)``.

        Raises:
            UndefinedMethodError: If *name* is not an endpoint, action,
                parameter or query valid at this point of the chain.
            ArgumentError: If the arguments do not fit the member.
            InvalidBodyError: If a body cannot be sent.
        """
        try:
            self._dispatcher.dispatch(name, args, kwargs)
        except DispatchError as exc:
            raise exc.qualify(type(self).__name__) from None
        return self

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails. Private and dunder names
        # must keep raising so copy, pickle and introspection still work.
        if name.startswith("_"):
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        return functools.partial(self.dispatch, name)

    def reset(self) -> None:
        """Discard the request being composed."""
        self._dispatcher.reset()

    def prepare(self) -> PreparedRequest:
        """Return the method, path and options the current draft would send.

        The draft is left as is.

        Raises:
            PreconditionError: If no endpoint or action is set.
        """
        return self._dispatcher.prepare()

    def build_request(self) -> httpx.Request:
        """Build, without sending, the :class:`httpx.Request` for the current draft."""
        prepared = self.prepare()
        return self.get_client().build_request(prepared.method, prepared.path, prepared.options)

    def call(self) -> Any:
        """Send the composed request.

        Returns:
            The result of :meth:`process_response`, or of
            :meth:`process_http_exception` when the request failed.

        Raises:
            PreconditionError: If no endpoint or action is set.

        The draft is reset before this method returns or raises.
        """
        try:
            prepared = self._dispatcher.prepare()
            client = self.get_client()
            try:
                response = client.request(prepared.method, prepared.path, prepared.options)
            except TransportError as exc:
                logger.debug("Request failed: %s", exc)
                return self.process_http_exception(exc)
            return self.process_response(response)
        finally:
            self.reset()

    # ------------------------------------------------------------------ #
    # HTTP clients
    # ------------------------------------------------------------------ #

    def get_client(self) -> HttpClient:
        """Return the HTTP client for the current version, creating it on first use."""
        key = self.current_version()
        with self._clients_lock:
            client = self._clients.get(key)
            if client is None:
                client = self._create_client()
                self._clients[key] = client
        return client

    def _create_client(self) -> HttpClient:
        options = resolve_client_options(self._client_options)
        base_uri = self.get_base_uri()
        logger.debug("Creating client for %s (version %s)", base_uri, self.current_version())
        return HttpClient(base_uri, options)

    def close(self) -> None:
        """Close every HTTP client created by this instance."""
        with self._clients_lock:
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            client.close()

    def __enter__(self) -> Api:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._definition!r} state={self.draft.state.value}>"


def _load(
    source: Optional[DefinitionSource],
    version: Optional[Union[str, int]],
    owner: str,
) -> ApiDefinition:
    if source is None:
        raise DefinitionError(f"{owner}.definition must be set to an API definition")
    if isinstance(source, ApiDefinition):
        if version is not None:
            source.use_version(version)
        return source
    if isinstance(source, Mapping):
        return ApiDefinition.create(source, version)
    if isinstance(source, (str, Path)):
        return ApiDefinition.from_file(source, version)
    raise DefinitionError(
        f"{owner}.definition must be a mapping, a path or an ApiDefinition, "
        f"{type(source).__name__} given"
    )
