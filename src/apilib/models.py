"""Canonical Pydantic models shared across all apilib modules.

The models fall into two groups:

**Definition models** -- the shape of a raw API definition and its
compiled form:
    :class:`VersionBody` validates one (possibly unversioned) body of a
    raw definition, and :class:`CompiledVersion` holds the flattened
    lookup tables the compiler produces from it.

**Client models** -- settings for the HTTP client built for each API
version:
    :class:`ClientOptions`.

All models use Pydantic v2. Definition bodies use ``extra="allow"`` so
that keys apilib does not interpret are preserved in ``model_extra``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _empty_list_as_mapping(value: Any) -> Any:
    """Treat ``[]`` as an empty mapping.

    Definitions exported from array-based languages serialise an empty
    map as an empty JSON array.
    """
    if isinstance(value, list) and not value:
        return {}
    return value


def _as_action_list(value: Any) -> Any:
    """Accept a bare action name where a list of action names is expected."""
    if isinstance(value, str):
        return [value]
    return value


def _coerce_actions(mapping: Any) -> Any:
    """Normalise a name -> actions mapping."""
    mapping = _empty_list_as_mapping(mapping)
    if isinstance(mapping, dict):
        return {name: _as_action_list(actions) for name, actions in mapping.items()}
    return mapping


# --- Definition models ---


class VersionBody(BaseModel):
    """One body of a raw API definition.

    An unversioned definition has a single body at its top level; a
    versioned one has a body per entry under ``versions``.

    Example::

        VersionBody.model_validate({
            "endpoints": {
                "colors": {
                    "colors": ["index", "store"],
                    "colors/{colorId}": ["show", "update", "delete"],
                },
            },
            "global_query": {"page": ["index"]},
        })
    """

    model_config = ConfigDict(extra="allow")

    endpoints: dict[str, dict[str, list[str]]] = Field(
        default_factory=dict,
        description="Endpoint name -> path template -> actions served by that template",
    )
    query: dict[str, dict[str, list[str]]] = Field(
        default_factory=dict,
        description="Endpoint name -> query name -> actions accepting it",
    )
    global_query: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Query name -> actions accepting it on every endpoint",
    )

    @field_validator("endpoints", "query", mode="before")
    @classmethod
    def _coerce_nested(cls, value: Any) -> Any:
        if value is None:
            return {}
        value = _empty_list_as_mapping(value)
        if isinstance(value, dict):
            return {name: _coerce_actions(inner) for name, inner in value.items()}
        return value

    @field_validator("global_query", mode="before")
    @classmethod
    def _coerce_global(cls, value: Any) -> Any:
        if value is None:
            return {}
        return _coerce_actions(value)


class CompiledVersion(BaseModel):
    """Flattened lookup tables for one API version.

    Every action found under an endpoint has an entry in all three tables,
    so a lookup never has to fall back to scanning the raw definition.

    Attributes:
        endpoints: ``endpoints[endpoint][action]`` is the path template.
        parameters: ``parameters[endpoint][action]`` lists the template's
            placeholder names in left-to-right order.
        query: ``query[endpoint][action]`` lists the accepted query names,
            without duplicates, in the order they were declared.
        extra: Keys of the raw body that apilib does not interpret.
    """

    endpoints: dict[str, dict[str, str]] = Field(default_factory=dict)
    parameters: dict[str, dict[str, list[str]]] = Field(default_factory=dict)
    query: dict[str, dict[str, list[str]]] = Field(default_factory=dict)
    extra: dict[str, Any] = Field(default_factory=dict)


# --- Client models ---


class ClientOptions(BaseModel):
    """Settings for the :class:`~apilib.client.HttpClient` of one API version.

    Resolved by :func:`~apilib.config.resolve_client_options` from the
    ``options`` of an :class:`~apilib.builder.api.Api` subclass,
    environment variables, and these defaults.

    ``headers`` are merged over apilib's defaults (``Accept`` and
    ``User-Agent``). ``transport`` is handed to :class:`httpx.Client`
    unchanged; tests use it to install an :class:`httpx.MockTransport`.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True)
    http_errors: bool = Field(
        default=True,
        description="Raise TransportError for 4xx/5xx responses",
    )
    transport: Optional[Any] = Field(
        default=None, description="Custom httpx transport", exclude=True
    )
