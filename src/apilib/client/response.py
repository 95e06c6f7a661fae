"""Response helpers shared by :class:`~apilib.builder.json_api.JsonApi` and the CLI.

:func:`extract_response_data` decodes a response body, and
:func:`error_for_response` maps a failed request onto the typed errors of
:mod:`apilib.exceptions`.
"""

from __future__ import annotations

from typing import Any

import httpx

from apilib.exceptions import (
    ApiLibError,
    AuthError,
    ClientError,
    ConnectionError_,
    NotFoundError,
    ServerError,
    TransportError,
)


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first.  If that fails (e.g. the
    response is HTML or plain text), returns the raw text.  Returns
    ``None`` for responses with no content.

    Args:
        response: The :class:`httpx.Response` to extract data from.

    Returns:
        A JSON-decoded object (``dict``, ``list``, etc.), a ``str`` of raw
        text, or ``None`` if the body is empty.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return response.text


def error_for_response(error: TransportError) -> ApiLibError:
    """Build the typed error for a failed request.

    Status mapping: 401/403 -> :class:`AuthError`, 404 ->
    :class:`NotFoundError`, other 4xx -> :class:`ClientError`, 5xx ->
    :class:`ServerError`. Errors without a response (network failures)
    become :class:`ConnectionError_`.
    """
    response = error.response
    if response is None:
        return ConnectionError_(str(error))

    status = response.status_code
    msg = _error_detail(response)
    full_msg = f"HTTP {status}: {msg}" if msg else f"HTTP {status}"

    if status in (401, 403):
        return AuthError(full_msg)
    if status == 404:
        return NotFoundError(full_msg)
    if status >= 500:
        return ServerError(full_msg)
    return ClientError(full_msg)


def _error_detail(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error response body."""
    try:
        detail = response.json()
    except ValueError:
        return response.text[:200] if response.text else ""

    if isinstance(detail, dict):
        return str(detail.get("message") or detail.get("error") or detail.get("detail") or "")
    return str(detail)
