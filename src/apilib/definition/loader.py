"""Load raw API definitions from a URL or local file.

This module handles all I/O for fetching definition documents and turning
them into plain Python mappings. Supported sources:

* ``.json`` files -- must contain a JSON object.
* ``.yaml`` / ``.yml`` files -- must contain a YAML mapping.
* ``.py`` files -- executed with :func:`runpy.run_path`; the module must
  bind a mapping to ``DEFINITION`` (or ``definition``).
* ``http://`` / ``https://`` URLs -- fetched with :mod:`httpx`, parsed as
  JSON or YAML depending on the response content type.

Files with any other extension are parsed by content (JSON first, then
YAML).

The result is untrusted: pass it to
:meth:`~apilib.definition.ApiDefinition.create`, which validates it.
"""

from __future__ import annotations

import json
import runpy
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Union

import httpx
import yaml

from apilib.exceptions import DefinitionError

_PYTHON_NAMES = ("DEFINITION", "definition")


def load_definition(source: Union[str, Path]) -> dict[str, Any]:
    """Load a raw definition from a URL or file path.

    Args:
        source: An ``http(s)`` URL or a path to a JSON, YAML or Python file.

    Returns:
        The raw definition as a dictionary.

    Raises:
        DefinitionError: If the source cannot be read or does not hold a
            mapping.
    """
    text = str(source)
    if text.startswith(("http://", "https://")):
        return load_url(text)

    path = Path(source)
    suffix = path.suffix.lower()
    if suffix == ".json":
        return load_json(path)
    if suffix in (".yaml", ".yml"):
        return load_yaml(path)
    if suffix == ".py":
        return load_python(path)

    return _parse_content(_read_file(path))


def load_json(path: Union[str, Path]) -> dict[str, Any]:
    """Load a definition from a JSON file.

    Raises:
        DefinitionError: If the file cannot be read, is not valid JSON, or
            does not contain an object.
    """
    content = _read_file(Path(path))
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise DefinitionError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise DefinitionError("The JSON file must be an object")
    return data


def load_yaml(path: Union[str, Path]) -> dict[str, Any]:
    """Load a definition from a YAML file.

    Raises:
        DefinitionError: If the file cannot be read, is not valid YAML, or
            does not contain a mapping.
    """
    content = _read_file(Path(path))
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise DefinitionError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise DefinitionError("The YAML file must be a mapping")
    return data


def load_python(path: Union[str, Path]) -> dict[str, Any]:
    """Load a definition from a Python source file.

    The file is executed as a module. Its ``DEFINITION`` global (or
    ``definition``, checked second) must be a mapping.

    Raises:
        DefinitionError: If the file does not exist, or does not define a
            mapping under either name.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DefinitionError(f"Definition file not found: {path}")

    namespace = runpy.run_path(str(file_path))
    for name in _PYTHON_NAMES:
        data = namespace.get(name)
        if isinstance(data, Mapping):
            return dict(data)

    raise DefinitionError("The Python file must define a DEFINITION mapping")


def load_url(url: str) -> dict[str, Any]:
    """Fetch a definition over HTTP. Supports JSON and YAML responses.

    Raises:
        DefinitionError: If the URL cannot be fetched or the content cannot
            be parsed into a mapping.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DefinitionError(
            f"HTTP {exc.response.status_code} fetching definition from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DefinitionError(f"Failed to fetch definition from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _read_file(path: Path) -> str:
    if not path.is_file():
        raise DefinitionError(f"Definition file not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DefinitionError(f"Failed to read definition file {path}: {exc}") from exc


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hinted as YAML), then falls back to YAML,
    since any JSON document is also a YAML document.
    """
    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise DefinitionError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise DefinitionError("The JSON document must be an object")
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise DefinitionError(f"Failed to parse definition as JSON or YAML: {exc}") from exc

    if not isinstance(result, dict):
        raise DefinitionError("The definition document must be a mapping")
    return result
