"""HTTP client module for apilib.

Provides :class:`HttpClient`, a thin wrapper over :class:`httpx.Client`
that turns every failure into a :class:`~apilib.exceptions.TransportError`,
and the :class:`RequestOptions` the builder assembles for each call.

Example::

    from apilib.client import HttpClient, RequestOptions

    with HttpClient("https://reqres.in/api/") as client:
        resp = client.request("GET", "users", RequestOptions(query={"page": 2}))
"""

from apilib.client.http_client import HttpClient, RequestOptions
from apilib.client.response import error_for_response, extract_response_data

__all__ = ["HttpClient", "RequestOptions", "error_for_response", "extract_response_data"]
