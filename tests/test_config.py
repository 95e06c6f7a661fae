"""Tests for client option resolution."""

from __future__ import annotations

import httpx
import pytest

from apilib.config import load_env_options, merge_options, resolve_client_options
from apilib.exceptions import ConfigError
from apilib.models import ClientOptions


class TestEnvOptions:
    def test_empty_env(self) -> None:
        assert load_env_options() == {}

    def test_timeout(self, monkeypatch) -> None:
        monkeypatch.setenv("APILIB_TIMEOUT", "2.5")
        assert load_env_options() == {"timeout": 2.5}

    @pytest.mark.parametrize("raw,expected", [("0", False), ("no", False), ("TRUE", True), ("on", True)])
    def test_booleans(self, monkeypatch, raw, expected) -> None:
        monkeypatch.setenv("APILIB_VERIFY_SSL", raw)
        monkeypatch.setenv("APILIB_FOLLOW_REDIRECTS", raw)
        assert load_env_options() == {"verify_ssl": expected, "follow_redirects": expected}

    def test_empty_value_is_unset(self, monkeypatch) -> None:
        monkeypatch.setenv("APILIB_TIMEOUT", "")
        assert load_env_options() == {}

    def test_invalid_number(self, monkeypatch) -> None:
        monkeypatch.setenv("APILIB_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="APILIB_TIMEOUT must be a number"):
            load_env_options()

    def test_invalid_boolean(self, monkeypatch) -> None:
        monkeypatch.setenv("APILIB_VERIFY_SSL", "maybe")
        with pytest.raises(ConfigError, match="APILIB_VERIFY_SSL must be a boolean"):
            load_env_options()


class TestMergeOptions:
    def test_later_layers_win(self) -> None:
        assert merge_options({"timeout": 1}, {"timeout": 2}) == {"timeout": 2}

    def test_headers_merge_by_key(self) -> None:
        merged = merge_options({"headers": {"A": "1", "B": "1"}}, {"headers": {"B": "2"}})
        assert merged == {"headers": {"A": "1", "B": "2"}}

    def test_none_layers_are_skipped(self) -> None:
        assert merge_options(None, {"timeout": 3}, None) == {"timeout": 3}

    def test_inputs_are_not_mutated(self) -> None:
        base = {"headers": {"A": "1"}}
        merge_options(base, {"headers": {"B": "2"}})
        assert base == {"headers": {"A": "1"}}


class TestResolveClientOptions:
    def test_defaults(self) -> None:
        options = resolve_client_options()
        assert options == ClientOptions()
        assert options.timeout == 30.0
        assert options.verify_ssl is True
        assert options.http_errors is True

    def test_env_over_defaults(self, monkeypatch) -> None:
        monkeypatch.setenv("APILIB_VERIFY_SSL", "false")
        assert resolve_client_options().verify_ssl is False

    def test_overrides_over_env(self, monkeypatch) -> None:
        monkeypatch.setenv("APILIB_TIMEOUT", "5")
        assert resolve_client_options({"timeout": 1}).timeout == 1.0

    def test_transport_passes_through(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200))
        assert resolve_client_options({"transport": transport}).transport is transport

    def test_invalid_override(self) -> None:
        with pytest.raises(ConfigError, match="Invalid client options"):
            resolve_client_options({"timeout": "forever"})
