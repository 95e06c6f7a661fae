"""Tests for the ``apilib`` command line interface."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from apilib import __version__
from apilib.app import app
from apilib.builder.json_api import JsonApi
from apilib.commands import call as call_module
from apilib.exit_codes import (
    EXIT_DEFINITION_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SUCCESS,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"
DEFINITION = str(FIXTURES_DIR / "definition.json")
VERSIONED = str(FIXTURES_DIR / "versioned.json")


@pytest.fixture
def mock_api(monkeypatch):
    """Route ``apilib call`` through a MockTransport and record the requests."""
    seen: list[httpx.Request] = []
    responses: dict[str, httpx.Response] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return responses.get(request.url.path, httpx.Response(200, json={"data": {"id": 2}}))

    class MockedJsonApi(JsonApi):
        options = {"transport": httpx.MockTransport(handler)}

    monkeypatch.setattr(call_module, "JsonApi", MockedJsonApi)
    return seen, responses


class TestRoot:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == EXIT_SUCCESS
        assert result.output.strip() == f"apilib {__version__}"

    def test_no_args_shows_help(self, cli_runner) -> None:
        result = cli_runner.invoke(app, [])
        assert "inspect" in result.output
        assert "call" in result.output


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


class TestInspectVersions:
    def test_versioned(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--plain", "inspect", "versions", "-d", VERSIONED])
        assert result.exit_code == EXIT_SUCCESS
        assert result.stdout.splitlines() == [
            "Version\tDefault\tBase URI",
            "v1\t\thttps://reqres.in/api/v1",
            "v2\tyes\thttps://reqres.in/api/v2",
        ]

    def test_unversioned(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--no-color", "inspect", "versions", "-d", DEFINITION])
        assert result.exit_code == EXIT_SUCCESS
        assert "This API is not versioned." in result.output

    def test_definition_from_env(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app, ["--json", "inspect", "versions"], env={"APILIB_DEFINITION": VERSIONED}
        )
        assert result.exit_code == EXIT_SUCCESS
        assert [row["Version"] for row in json.loads(result.stdout)] == ["v1", "v2"]

    def test_missing_file(self, cli_runner, tmp_path) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "inspect", "versions", "-d", str(tmp_path / "nope.json")]
        )
        assert result.exit_code == EXIT_DEFINITION_ERROR
        assert "Definition file not found" in result.output


class TestInspectEndpoints:
    def test_json(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--json", "inspect", "endpoints", "-d", DEFINITION])
        assert result.exit_code == EXIT_SUCCESS
        rows = json.loads(result.stdout)
        assert len(rows) == 10
        assert {
            "Endpoint": "users",
            "Action": "index",
            "Method": "GET",
            "Path": "users",
            "Parameters": "",
            "Query": "page, per_page, delay, name, job",
        } in rows
        assert {
            "Endpoint": "colors",
            "Action": "update",
            "Method": "PUT",
            "Path": "colors/{colorId}",
            "Parameters": "colorId",
            "Query": "delay",
        } in rows

    def test_api_version(self, cli_runner) -> None:
        latest = cli_runner.invoke(app, ["--json", "inspect", "endpoints", "-d", VERSIONED])
        v1 = cli_runner.invoke(
            app, ["--json", "inspect", "endpoints", "-d", VERSIONED, "--api-version", "1"]
        )
        assert {row["Endpoint"] for row in json.loads(latest.stdout)} == {"hexcodes", "users"}
        assert {row["Endpoint"] for row in json.loads(v1.stdout)} == {"colors", "users"}

    def test_unknown_version(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "inspect", "endpoints", "-d", VERSIONED, "--api-version", "9"]
        )
        assert result.exit_code == EXIT_DEFINITION_ERROR
        assert "There is no version v9" in result.output


class TestInspectPath:
    def test_build(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app, ["inspect", "path", "users", "show", "-d", DEFINITION, "-p", "userId=23"]
        )
        assert result.exit_code == EXIT_SUCCESS
        assert result.stdout.strip() == "users/23"

    def test_missing_parameter_is_empty(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["inspect", "path", "users", "show", "-d", DEFINITION])
        assert result.stdout.strip() == "users/"

    def test_unknown_action(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "inspect", "path", "users", "patch", "-d", DEFINITION]
        )
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "does not support 'patch'" in result.output

    def test_undeclared_parameter_warns(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--no-color", "inspect", "path", "users", "show", "-d", DEFINITION,
                "-p", "userId=2", "-p", "colorId=1",
            ],
        )
        assert result.exit_code == EXIT_SUCCESS
        assert "Warning: Ignoring 'colorId': not a parameter of users.show" in result.output
        assert result.stdout.strip().splitlines()[-1] == "users/2"

    def test_bad_pair(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "inspect", "path", "users", "show", "-d", DEFINITION, "-p", "=1"]
        )
        assert result.exit_code == EXIT_INVALID_USAGE


# ---------------------------------------------------------------------------
# call
# ---------------------------------------------------------------------------


class TestCallDryRun:
    def test_get(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app, ["call", "users", "show", "23", "-d", DEFINITION, "-q", "delay=3", "--dry-run"]
        )
        assert result.exit_code == EXIT_SUCCESS
        assert result.stdout.strip() == "GET https://reqres.in/api/users/23?delay=3"

    def test_bare_query_is_true(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app, ["call", "users", "index", "-d", DEFINITION, "-q", "name", "--dry-run"]
        )
        assert result.stdout.strip() == "GET https://reqres.in/api/users?name=true"

    def test_json_body(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app,
            ["call", "users", "store", "-d", DEFINITION, "--body", '{"name": "neo"}', "--dry-run"],
        )
        assert result.exit_code == EXIT_SUCCESS
        first, body = result.stdout.strip().splitlines()
        assert first == "POST https://reqres.in/api/users"
        assert json.loads(body) == {"name": "neo"}

    def test_versioned(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app, ["call", "hexcodes", "show", "ff0000", "-d", VERSIONED, "--dry-run"]
        )
        assert result.stdout.strip() == "GET https://reqres.in/api/v2/hexcodes/ff0000"


class TestCall:
    def test_prints_response(self, cli_runner, mock_api) -> None:
        seen, _ = mock_api
        result = cli_runner.invoke(app, ["--json", "call", "users", "show", "2", "-d", DEFINITION])
        assert result.exit_code == EXIT_SUCCESS
        assert json.loads(result.stdout) == {"data": {"id": 2}}
        assert str(seen[0].url) == "https://reqres.in/api/users/2"

    def test_headers_and_timeout(self, cli_runner, mock_api) -> None:
        seen, _ = mock_api
        result = cli_runner.invoke(
            app,
            ["call", "users", "index", "-d", DEFINITION, "-H", "X-Api-Key=secret", "--timeout", "3"],
        )
        assert result.exit_code == EXIT_SUCCESS
        assert seen[0].headers["x-api-key"] == "secret"

    def test_not_found_exit_code(self, cli_runner, mock_api) -> None:
        _, responses = mock_api
        responses["/api/users/23"] = httpx.Response(404, json={"error": "missing"})
        result = cli_runner.invoke(
            app, ["--no-color", "call", "users", "show", "23", "-d", DEFINITION]
        )
        assert result.exit_code == EXIT_NOT_FOUND
        assert "HTTP 404: missing" in result.output

    def test_missing_argument(self, cli_runner, mock_api) -> None:
        seen, _ = mock_api
        result = cli_runner.invoke(app, ["--no-color", "call", "users", "show", "-d", DEFINITION])
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Missing argument 1" in result.output
        assert seen == []

    def test_undeclared_query(self, cli_runner, mock_api) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "call", "colors", "index", "-d", DEFINITION, "-q", "offset=1"]
        )
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "colors().index().offset()" in result.output

    def test_body_on_get_action(self, cli_runner, mock_api) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "call", "users", "index", "-d", DEFINITION, "--body", "{}"]
        )
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "does not send a request body" in result.output
