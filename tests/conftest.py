"""Shared test fixtures for apilib.

Provides the reqres-style definitions used across the suite, a recording
``httpx.MockTransport`` so builder tests never touch the network, and
output state management.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from apilib.builder.json_api import JsonApi
from apilib.definition import ApiDefinition
from apilib.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams the
    cached references go stale once the test finishes.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    """Keep APILIB_* variables from the developer's shell out of the tests."""
    for name in ("APILIB_TIMEOUT", "APILIB_VERIFY_SSL", "APILIB_FOLLOW_REDIRECTS", "APILIB_DEFINITION"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_apilib_logger():
    """Drop handlers the CLI callback installs on the ``apilib`` logger.

    They write to CliRunner streams that are closed once the test ends.
    """
    logger = logging.getLogger("apilib")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


# ---------------------------------------------------------------------------
# Raw definitions
# ---------------------------------------------------------------------------


@pytest.fixture
def definition_data() -> dict[str, Any]:
    """Unversioned reqres definition as a plain dict."""
    with open(FIXTURES_DIR / "definition.json") as f:
        return json.load(f)


@pytest.fixture
def versioned_data() -> dict[str, Any]:
    """Versioned reqres definition (v1, v2) as a plain dict."""
    with open(FIXTURES_DIR / "versioned.json") as f:
        return json.load(f)


@pytest.fixture
def definition(definition_data: dict[str, Any]) -> ApiDefinition:
    return ApiDefinition.create(definition_data)


@pytest.fixture
def versioned(versioned_data: dict[str, Any]) -> ApiDefinition:
    return ApiDefinition.create(versioned_data)


# ---------------------------------------------------------------------------
# HTTP mocking
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """Mock transport that records every request it receives.

    Responds with ``{"ok": true}`` unless a handler is given.
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._respond = handler or (lambda request: httpx.Response(200, json={"ok": True}))
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


class ReqRes(JsonApi):
    definition = FIXTURES_DIR / "definition.json"


class VersionedReqRes(JsonApi):
    definition = FIXTURES_DIR / "versioned.json"


@pytest.fixture
def reqres(transport: RecordingTransport):
    """``JsonApi`` over the unversioned definition, wired to the recording transport."""
    with ReqRes(options={"transport": transport}) as api:
        yield api


@pytest.fixture
def versioned_reqres(transport: RecordingTransport):
    with VersionedReqRes(options={"transport": transport}) as api:
        yield api


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
