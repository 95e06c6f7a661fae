"""Fluent call builder.

:class:`Api` turns attribute chains such as
``api.colors().update(3, {"name": "red"})`` into HTTP requests validated
against an :class:`~apilib.definition.ApiDefinition`. :class:`JsonApi` is
the concrete variant most callers want.
"""

from apilib.builder.api import Api
from apilib.builder.dispatcher import DEFAULT_METHODS, Dispatcher, PreparedRequest
from apilib.builder.draft import DraftState, RequestDraft
from apilib.builder.json_api import JsonApi

__all__ = [
    "Api",
    "DEFAULT_METHODS",
    "Dispatcher",
    "DraftState",
    "JsonApi",
    "PreparedRequest",
    "RequestDraft",
]
