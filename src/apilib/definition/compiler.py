"""Compile one body of a raw API definition into flat lookup tables.

The raw shape is written for people: one path template can serve several
actions, and query names are declared either per endpoint or once for all
endpoints of a version. The builder, on the other hand, looks up
``endpoint -> action`` several times for every call in a chain. This
module does the reshaping once, up front, producing a
:class:`~apilib.models.CompiledVersion` in which every lookup is a plain
dict access.

Compilation happens in three passes:

1. **Endpoints** -- each ``(template, actions)`` pair is flattened into
   ``endpoints[endpoint][action] = template``, the template's placeholders
   are recorded as the action's parameters, and an empty query list is
   created for the action.
2. **Global query** -- each global query name is added to every endpoint
   that has one of the listed actions. Endpoints without the action are
   left alone.
3. **Endpoint query** -- endpoint-scoped query names are added to the
   lists built so far, skipping names already present.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from apilib.definition.templates import extract_placeholders
from apilib.exceptions import DefinitionError
from apilib.models import CompiledVersion, VersionBody

logger = logging.getLogger(__name__)


def compile_version(body: Mapping[str, Any], label: str = "definition") -> CompiledVersion:
    """Compile a raw version body into a :class:`CompiledVersion`.

    Args:
        body: The raw body, with ``endpoints`` and the optional ``query``
            and ``global_query`` keys. Other keys are kept in
            :attr:`CompiledVersion.extra`.
        label: Name used in error and log messages (the version key, or
            ``"definition"`` for an unversioned API).

    Returns:
        The compiled lookup tables.

    Raises:
        DefinitionError: If *body* does not have the expected shape.
    """
    if not isinstance(body, Mapping):
        raise DefinitionError(
            f"The {label} body must be a mapping, {type(body).__name__} given"
        )

    try:
        parsed = VersionBody.model_validate(dict(body))
    except ValidationError as exc:
        raise DefinitionError(f"Invalid {label} body: {exc}") from exc

    compiled = CompiledVersion(extra=dict(parsed.model_extra or {}))

    _compile_endpoints(compiled, parsed.endpoints)
    _apply_global_query(compiled, parsed.global_query)
    _apply_endpoint_query(compiled, parsed.query, label)

    logger.debug(
        "Compiled %s: %d endpoints, %d actions",
        label,
        len(compiled.endpoints),
        sum(len(actions) for actions in compiled.endpoints.values()),
    )
    return compiled


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------


def _compile_endpoints(
    compiled: CompiledVersion,
    endpoints: dict[str, dict[str, list[str]]],
) -> None:
    for endpoint, templates in endpoints.items():
        paths: dict[str, str] = {}
        parameters: dict[str, list[str]] = {}
        query: dict[str, list[str]] = {}

        for template, actions in templates.items():
            names = extract_placeholders(template)
            for action in actions:
                paths[action] = template
                parameters[action] = list(names)
                query[action] = []

        compiled.endpoints[endpoint] = paths
        compiled.parameters[endpoint] = parameters
        compiled.query[endpoint] = query


def _apply_global_query(
    compiled: CompiledVersion,
    global_query: dict[str, list[str]],
) -> None:
    for name, actions in global_query.items():
        for action in actions:
            for endpoint, queries in compiled.query.items():
                if action not in queries:
                    continue
                _add_unique(queries[action], name)


def _apply_endpoint_query(
    compiled: CompiledVersion,
    endpoint_query: dict[str, dict[str, list[str]]],
    label: str,
) -> None:
    for endpoint, names in endpoint_query.items():
        queries = compiled.query.get(endpoint)
        for name, actions in names.items():
            for action in actions:
                if queries is None or action not in queries:
                    logger.warning(
                        "Ignoring query '%s' in %s: '%s.%s' is not a defined action",
                        name,
                        label,
                        endpoint,
                        action,
                    )
                    continue
                _add_unique(queries[action], name)


def _add_unique(names: list[str], name: str) -> None:
    if name not in names:
        names.append(name)
