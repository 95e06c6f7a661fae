"""The compiled, queryable model of an API definition.

:class:`ApiDefinition` validates a raw definition, compiles each of its
versions with :func:`~apilib.definition.compiler.compile_version`, and
answers every question the builder asks while a call chain is composed:
which endpoints exist, which actions an endpoint supports, which path
parameters and query names an action accepts, and what concrete path a set
of parameter values produces.

A definition is *versioned* when it has a non-empty ``versions`` mapping.
All lookups then go through the current version, which defaults to the
last declared one and can be switched with :meth:`ApiDefinition.use_version`.
Apart from that pointer the model is read-only once constructed.

Example::

    definition = ApiDefinition.create({
        "base": "https://reqres.in/api/",
        "endpoints": {
            "colors": {
                "colors": ["index", "store"],
                "colors/{colorId}": ["show", "update", "delete"],
            },
        },
    })
    definition.build_path("colors", "show", {"colorId": 1})   # 'colors/1'
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

import httpx

from apilib.definition import loader
from apilib.definition.compiler import compile_version
from apilib.definition.templates import substitute_placeholders
from apilib.exceptions import DefinitionError
from apilib.models import CompiledVersion

logger = logging.getLogger(__name__)


def normalize_version(version: Union[str, int]) -> str:
    """Prefix *version* with ``v`` unless it already starts with one.

    Lets callers write ``1``, ``"1"`` or ``"v1"`` interchangeably.
    """
    text = str(version)
    return text if text.startswith("v") else f"v{text}"


class ApiDefinition:
    """Validated and compiled API definition.

    Use :meth:`create` or one of the ``from_*`` constructors rather than
    instantiating directly.

    Args:
        definition: The raw definition mapping.
        version: Version to activate for a versioned definition. Normalized
            with :func:`normalize_version`. Defaults to the last declared
            version.

    Raises:
        DefinitionError: If the definition is not a mapping, its base URI
            is missing or invalid, a body has the wrong shape, or *version*
            is not declared.
    """

    def __init__(
        self,
        definition: Mapping[str, Any],
        version: Optional[Union[str, int]] = None,
    ) -> None:
        if not isinstance(definition, Mapping):
            raise DefinitionError(
                f"The API definition must be a mapping, {type(definition).__name__} given"
            )

        self._definition = definition
        self._base = self._validate_base(definition.get("base"))
        self._versions: dict[str, CompiledVersion] = {}
        self._unversioned: Optional[CompiledVersion] = None
        self._version: Optional[str] = None

        if self.is_versioned():
            for name, body in definition["versions"].items():
                self._versions[normalize_version(name)] = compile_version(
                    body, label=f"version '{name}'"
                )

            if version is None:
                self._version = list(self._versions)[-1]
            else:
                self._version = normalize_version(version)
                if self._version not in self._versions:
                    raise DefinitionError(f"There is no version {self._version}")
        else:
            self._unversioned = compile_version(definition)

        logger.debug(
            "Loaded API definition for %s (versions: %s, current: %s)",
            self._base,
            ", ".join(self._versions) or "none",
            self._version,
        )

    # ------------------------------------------------------------------ #
    # Constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def create(
        cls,
        data: Mapping[str, Any],
        version: Optional[Union[str, int]] = None,
    ) -> ApiDefinition:
        """Create an :class:`ApiDefinition` from an in-memory mapping."""
        return cls(data, version)

    @classmethod
    def from_json(cls, path: Union[str, Path], version: Optional[Union[str, int]] = None) -> ApiDefinition:
        """Create an :class:`ApiDefinition` from a JSON file."""
        return cls(loader.load_json(path), version)

    @classmethod
    def from_yaml(cls, path: Union[str, Path], version: Optional[Union[str, int]] = None) -> ApiDefinition:
        """Create an :class:`ApiDefinition` from a YAML file."""
        return cls(loader.load_yaml(path), version)

    @classmethod
    def from_python(cls, path: Union[str, Path], version: Optional[Union[str, int]] = None) -> ApiDefinition:
        """Create an :class:`ApiDefinition` from a Python file defining ``DEFINITION``."""
        return cls(loader.load_python(path), version)

    @classmethod
    def from_url(cls, url: str, version: Optional[Union[str, int]] = None) -> ApiDefinition:
        """Create an :class:`ApiDefinition` from a JSON or YAML document served over HTTP."""
        return cls(loader.load_url(url), version)

    @classmethod
    def from_file(cls, source: Union[str, Path], version: Optional[Union[str, int]] = None) -> ApiDefinition:
        """Create an :class:`ApiDefinition` from any source :func:`~apilib.definition.loader.load_definition` accepts."""
        return cls(loader.load_definition(source), version)

    # ------------------------------------------------------------------ #
    # Versions
    # ------------------------------------------------------------------ #

    def is_versioned(self) -> bool:
        """Return ``True`` when the definition declares a non-empty ``versions`` mapping."""
        versions = self._definition.get("versions")
        return isinstance(versions, Mapping) and len(versions) > 0

    def has_version(self, version: Union[str, int]) -> bool:
        return normalize_version(version) in self._versions

    def get_versions(self) -> list[str]:
        """Return the declared versions, normalized, in declaration order."""
        return list(self._versions)

    def current_version(self) -> Optional[str]:
        """Return the active version, or ``None`` for an unversioned API."""
        return self._version

    def use_version(self, version: Union[str, int]) -> bool:
        """Switch the active version.

        Returns:
            ``True`` when the version was switched, ``False`` when the API is
            unversioned (nothing is changed).

        Raises:
            DefinitionError: If the API is versioned but does not declare
                *version*. The current version is left unchanged.
        """
        if not self.is_versioned():
            return False

        normalized = normalize_version(version)
        if normalized not in self._versions:
            raise DefinitionError(f"There is no version {normalized}")

        self._version = normalized
        return True

    def get_base_uri(self) -> httpx.URL:
        """Return the base URI, with the current version appended when versioned.

        ``https://reqres.in/api/`` becomes ``https://reqres.in/api/v2`` when
        ``v2`` is active.
        """
        if not self.is_versioned():
            return self._base

        path = self._base.path.rstrip("/") + "/" + self._version
        return self._base.copy_with(path=path)

    # ------------------------------------------------------------------ #
    # Endpoints and actions
    # ------------------------------------------------------------------ #

    def has_endpoint(self, endpoint: str) -> bool:
        return endpoint in self._current().endpoints

    def get_endpoints(self) -> list[str]:
        return list(self._current().endpoints)

    def endpoint_has_action(self, endpoint: str, action: str) -> bool:
        return action in self._current().endpoints.get(endpoint, {})

    def get_actions_for_endpoint(self, endpoint: str) -> list[str]:
        """Return the actions of *endpoint* in declaration order (empty if unknown)."""
        return list(self._current().endpoints.get(endpoint, {}))

    def get_path_template(self, endpoint: str, action: str) -> Optional[str]:
        return self._current().endpoints.get(endpoint, {}).get(action)

    # ------------------------------------------------------------------ #
    # Parameters and query
    # ------------------------------------------------------------------ #

    def action_has_parameter(self, endpoint: str, action: str, parameter: str) -> bool:
        return parameter in self.get_parameters_for_action(endpoint, action)

    def get_parameters_for_action(self, endpoint: str, action: str) -> list[str]:
        """Return the path parameters of an action, in template order."""
        return list(self._current().parameters.get(endpoint, {}).get(action, []))

    def action_has_query(self, endpoint: str, action: str, query: str) -> bool:
        return query in self.get_queries_for_action(endpoint, action)

    def get_queries_for_action(self, endpoint: str, action: str) -> list[str]:
        return list(self._current().query.get(endpoint, {}).get(action, []))

    def build_path(
        self,
        endpoint: str,
        action: str,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Build the request path for an action.

        Each ``{name}`` in the action's template is replaced with the
        matching value from *parameters*; missing values become empty
        strings. Required parameters are enforced by the builder before
        this is called.

        Raises:
            KeyError: If the endpoint does not support the action.
        """
        template = self.get_path_template(endpoint, action)
        if template is None:
            raise KeyError(f"{endpoint}.{action}")
        return substitute_placeholders(template, parameters or {})

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _current(self) -> CompiledVersion:
        if self._unversioned is not None:
            return self._unversioned
        return self._versions[self._version]

    @staticmethod
    def _validate_base(base: Any) -> httpx.URL:
        if not base:
            raise DefinitionError("The base URI must be set")

        if not isinstance(base, str):
            raise DefinitionError("The base URI must be a valid URI")

        try:
            url = httpx.URL(base)
        except (httpx.InvalidURL, TypeError) as exc:
            raise DefinitionError("The base URI must be a valid URI") from exc

        if not url.scheme or not url.host:
            raise DefinitionError("The base URI must be a valid URI")
        return url

    def __repr__(self) -> str:
        version = f", version={self._version!r}" if self._version else ""
        return f"ApiDefinition(base={str(self._base)!r}{version})"
