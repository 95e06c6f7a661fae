"""Ready-to-use :class:`~apilib.builder.api.Api` for JSON services."""

from __future__ import annotations

from typing import Any

import httpx

from apilib.builder.api import Api
from apilib.client.response import error_for_response, extract_response_data
from apilib.exceptions import TransportError


class JsonApi(Api):
    """An :class:`Api` that returns decoded bodies and raises typed errors.

    ``call()`` returns the JSON-decoded body (text for non-JSON responses,
    ``None`` when empty). Failed requests raise
    :class:`~apilib.exceptions.AuthError`,
    :class:`~apilib.exceptions.NotFoundError`,
    :class:`~apilib.exceptions.ClientError`,
    :class:`~apilib.exceptions.ServerError` or
    :class:`~apilib.exceptions.ConnectionError_`.

    Example::

        class ReqRes(JsonApi):
            definition = "reqres.yaml"

        users = ReqRes().users().index().page(2).call()["data"]
    """

    def process_response(self, response: httpx.Response) -> Any:
        return extract_response_data(response)

    def process_http_exception(self, error: TransportError) -> Any:
        raise error_for_response(error) from error
