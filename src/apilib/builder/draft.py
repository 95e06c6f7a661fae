"""The in-progress request composed by a call chain."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Optional


class DraftState(str, enum.Enum):
    """Where a call chain currently stands.

    ``EMPTY -> ENDPOINT_SET -> ACTION_SET -> COMPOSING``; a chain has to
    reach ``ACTION_SET`` before it can be sent, and returns to ``EMPTY``
    after every ``call()``.
    """

    EMPTY = "empty"
    ENDPOINT_SET = "endpoint_set"
    ACTION_SET = "action_set"
    COMPOSING = "composing"


@dataclass
class RequestDraft:
    """Value object holding the request being composed.

    The dispatcher never mutates the live draft in place: it works on a
    :meth:`copy` and swaps it in only when the whole step succeeded, so a
    failed step leaves the previous draft untouched. Resetting replaces
    the draft with a fresh instance.

    Attributes:
        endpoint: Selected endpoint name.
        action: Selected action name.
        parameters: Path parameter values by name.
        query: Query string values by name.
        body: Request body (scalar, bytes, mapping, list, or stream).
    """

    endpoint: Optional[str] = None
    action: Optional[str] = None
    parameters: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    body: Any = None

    def copy(self) -> RequestDraft:
        return replace(self, parameters=dict(self.parameters), query=dict(self.query))

    @property
    def state(self) -> DraftState:
        if self.endpoint is None:
            return DraftState.EMPTY
        if self.action is None:
            return DraftState.ENDPOINT_SET
        if self.parameters or self.query or self.body is not None:
            return DraftState.COMPOSING
        return DraftState.ACTION_SET

    @property
    def is_empty(self) -> bool:
        return self == RequestDraft()
