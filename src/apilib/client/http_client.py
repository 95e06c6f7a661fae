"""Synchronous HTTP client used by the call builder.

:class:`HttpClient` wraps :class:`httpx.Client` and exposes the single
operation the builder needs::

    client.request(method, path, RequestOptions(query=..., json_body=...))

Every transport failure surfaces as a
:class:`~apilib.exceptions.TransportError` carrying the original
:class:`httpx.Request`. With ``http_errors`` enabled (the default), 4xx and
5xx responses are failures too and the error also carries the
:class:`httpx.Response`. The builder never inspects these errors; it hands
them to the ``process_http_exception`` hook of the concrete API class.

One client is created per API version, so ``base_url`` already includes
the version segment and ``path`` is relative to it.
"""

from __future__ import annotations

import logging
import platform
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import httpx

from apilib import __version__
from apilib.exceptions import TransportError
from apilib.models import ClientOptions

logger = logging.getLogger(__name__)


def default_user_agent() -> str:
    """Return the identifying ``User-Agent`` sent with every request."""
    return (
        f"apilib/{__version__} httpx/{httpx.__version__} "
        f"Python/{platform.python_version()}"
    )


def default_headers() -> dict[str, str]:
    return {
        "Accept": "application/json",
        "User-Agent": default_user_agent(),
    }


@dataclass
class RequestOptions:
    """Per-request options assembled by the builder.

    Attributes:
        query: Query string parameters.
        json_body: Body to serialise as JSON (mappings and lists).
        body: Raw body (str, bytes, or a file-like / iterable stream).
    """

    query: dict[str, Any] = field(default_factory=dict)
    json_body: Any = None
    body: Any = None


class HttpClient:
    """Blocking HTTP client bound to one API base URL.

    Args:
        base_url: Base URL all request paths are resolved against.
        options: Timeout, SSL, redirect, header and transport settings.

    Example::

        with HttpClient("https://reqres.in/api/", ClientOptions()) as client:
            response = client.request("GET", "users", RequestOptions(query={"page": 2}))
    """

    def __init__(self, base_url: Union[str, httpx.URL], options: Optional[ClientOptions] = None) -> None:
        self._options = options or ClientOptions()
        self.base_url = httpx.URL(str(base_url))
        self.headers = {**default_headers(), **self._options.headers}

        kwargs: dict[str, Any] = {
            "base_url": self.base_url,
            "headers": self.headers,
            "timeout": self._options.timeout,
            "verify": self._options.verify_ssl,
            "follow_redirects": self._options.follow_redirects,
        }
        if self._options.transport is not None:
            kwargs["transport"] = self._options.transport

        self._client = httpx.Client(**kwargs)
        logger.debug("Created HTTP client for %s", self.base_url)

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def build_request(
        self,
        method: str,
        path: str,
        options: Optional[RequestOptions] = None,
    ) -> httpx.Request:
        """Build (without sending) the :class:`httpx.Request` for *path*."""
        options = options or RequestOptions()
        kwargs: dict[str, Any] = {"params": options.query or None}
        if options.json_body is not None:
            kwargs["json"] = options.json_body
        elif options.body is not None:
            kwargs["content"] = _as_content(options.body)
        return self._client.build_request(method.upper(), path, **kwargs)

    def request(
        self,
        method: str,
        path: str,
        options: Optional[RequestOptions] = None,
    ) -> httpx.Response:
        """Send a request and return the response.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            path: Path relative to :attr:`base_url`.
            options: Query string and body.

        Returns:
            The :class:`httpx.Response` from the server.

        Raises:
            TransportError: On network errors and, when ``http_errors`` is
                enabled, on 4xx/5xx responses.
        """
        request = self.build_request(method, path, options)
        logger.debug("%s %s", request.method, request.url)

        try:
            response = self._client.send(request)
        except httpx.HTTPError as exc:
            raise TransportError(f"{request.method} {request.url} failed: {exc}", request=request) from exc

        if self._options.http_errors and response.is_error:
            raise TransportError(
                f"HTTP {response.status_code} for {request.method} {request.url}",
                request=request,
                response=response,
            )
        return response


def _as_content(body: Any) -> Any:
    """Convert a raw body into something ``httpx`` accepts as ``content``.

    Binary files and byte iterators are passed through and streamed.
    """
    if isinstance(body, (str, bytes)):
        return body
    if isinstance(body, bytearray):
        return bytes(body)
    if isinstance(body, bool):
        return "true" if body else "false"
    if isinstance(body, (int, float)):
        return str(body)
    if isinstance(body, Mapping):
        raise TypeError("Mapping bodies must be sent as json_body")
    return body
