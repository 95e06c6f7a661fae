"""Client option resolution with environment-variable overrides.

Every :class:`~apilib.builder.api.Api` builds its HTTP clients from a
:class:`~apilib.models.ClientOptions` resolved here. Precedence (high to
low):

1. Explicit options (the ``options`` class attribute of the ``Api``
   subclass merged with options passed to its constructor).
2. Environment variables:

   * ``APILIB_TIMEOUT`` -- request timeout in seconds.
   * ``APILIB_VERIFY_SSL`` -- ``0``/``false``/``no`` disables certificate
     verification.
   * ``APILIB_FOLLOW_REDIRECTS`` -- same boolean syntax.

3. Model defaults.

The CLI additionally reads the definition source from
``APILIB_DEFINITION`` (see :mod:`apilib.app`).
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from apilib.exceptions import ConfigError
from apilib.models import ClientOptions

ENV_PREFIX = "APILIB_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_bool(name: str) -> Optional[bool]:
    """Read a boolean environment variable, ``None`` when unset."""
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"Environment variable {name} must be a boolean, got '{raw}'")


def _env_float(name: str) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name} must be a number, got '{raw}'") from exc


def load_env_options() -> dict[str, Any]:
    """Return the client options set through ``APILIB_*`` environment variables."""
    options: dict[str, Any] = {}

    timeout = _env_float(f"{ENV_PREFIX}TIMEOUT")
    if timeout is not None:
        options["timeout"] = timeout

    verify = _env_bool(f"{ENV_PREFIX}VERIFY_SSL")
    if verify is not None:
        options["verify_ssl"] = verify

    follow = _env_bool(f"{ENV_PREFIX}FOLLOW_REDIRECTS")
    if follow is not None:
        options["follow_redirects"] = follow

    return options


def merge_options(*layers: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Merge option mappings left to right; later layers win.

    ``headers`` are merged key by key rather than replaced.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if key == "headers" and isinstance(value, Mapping):
                merged["headers"] = {**merged.get("headers", {}), **value}
            else:
                merged[key] = value
    return merged


def resolve_client_options(overrides: Optional[Mapping[str, Any]] = None) -> ClientOptions:
    """Resolve the effective client options.

    Args:
        overrides: Explicit options, highest precedence.

    Returns:
        The validated :class:`~apilib.models.ClientOptions`.

    Raises:
        ConfigError: If an environment variable or override has an invalid
            value.
    """
    merged = merge_options(load_env_options(), overrides)
    try:
        return ClientOptions.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid client options: {exc}") from exc
