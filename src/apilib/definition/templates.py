"""Path template helpers.

A path template is a relative URL path with ``{name}`` placeholders, such
as ``colors/{colorId}``. The order in which placeholders appear is
significant: it is the order in which positional arguments bind to path
parameters when an action is called.

Both helpers are pure functions with no state.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

_PLACEHOLDER_RE = re.compile(r"\{([^}]+)\}")


def extract_placeholders(template: str) -> list[str]:
    """Return the placeholder names in *template*, left to right.

    A name repeated in the template is returned once per occurrence.

    Example::

        >>> extract_placeholders("users/{userId}/posts/{postId}")
        ['userId', 'postId']
    """
    return _PLACEHOLDER_RE.findall(template)


def substitute_placeholders(template: str, values: Mapping[str, Any]) -> str:
    """Replace every ``{name}`` in *template* with ``str(values[name])``.

    Placeholders without a value are replaced by an empty string.

    Example::

        >>> substitute_placeholders("colors/{colorId}", {"colorId": 1})
        'colors/1'
    """

    def _replace(match: re.Match[str]) -> str:
        value = values.get(match.group(1))
        return "" if value is None else str(value)

    return _PLACEHOLDER_RE.sub(_replace, template)
