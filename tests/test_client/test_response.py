"""Tests for response decoding and status-to-error mapping."""

from __future__ import annotations

import httpx
import pytest

from apilib.client.response import error_for_response, extract_response_data
from apilib.exceptions import (
    AuthError,
    ClientError,
    ConnectionError_,
    NotFoundError,
    ServerError,
    TransportError,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _request() -> httpx.Request:
    return httpx.Request("GET", "https://reqres.in/api/users/23")


def _error(status_code: int, **kwargs) -> TransportError:
    response = httpx.Response(status_code, request=_request(), **kwargs)
    return TransportError(f"HTTP {status_code}", request=response.request, response=response)


# ---------------------------------------------------------------------------
# extract_response_data
# ---------------------------------------------------------------------------


class TestExtractResponseData:
    def test_json(self) -> None:
        response = httpx.Response(200, json={"data": [1, 2]})
        assert extract_response_data(response) == {"data": [1, 2]}

    def test_json_list(self) -> None:
        assert extract_response_data(httpx.Response(200, json=[1, 2])) == [1, 2]

    def test_text(self) -> None:
        assert extract_response_data(httpx.Response(200, text="<html></html>")) == "<html></html>"

    def test_empty(self) -> None:
        assert extract_response_data(httpx.Response(204)) is None


# ---------------------------------------------------------------------------
# error_for_response
# ---------------------------------------------------------------------------


class TestErrorForResponse:
    @pytest.mark.parametrize(
        "status,error_type",
        [(401, AuthError), (403, AuthError), (404, NotFoundError), (409, ClientError),
         (500, ServerError), (502, ServerError)],
    )
    def test_status_mapping(self, status, error_type) -> None:
        assert type(error_for_response(_error(status))) is error_type

    def test_message_from_json(self) -> None:
        error = error_for_response(_error(404, json={"message": "User not found"}))
        assert str(error) == "HTTP 404: User not found"

    def test_message_from_detail_key(self) -> None:
        error = error_for_response(_error(422, json={"detail": "bad page"}))
        assert str(error) == "HTTP 422: bad page"

    def test_message_from_text(self) -> None:
        error = error_for_response(_error(500, text="upstream timeout"))
        assert str(error) == "HTTP 500: upstream timeout"

    def test_message_without_body(self) -> None:
        assert str(error_for_response(_error(404))) == "HTTP 404"

    def test_long_text_is_truncated(self) -> None:
        error = error_for_response(_error(500, text="x" * 500))
        assert str(error) == "HTTP 500: " + "x" * 200

    def test_no_response(self) -> None:
        error = error_for_response(TransportError("GET failed: refused", request=_request()))
        assert isinstance(error, ConnectionError_)
        assert str(error) == "GET failed: refused"
