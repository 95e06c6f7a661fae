"""API definitions -- load, validate, and compile endpoint declarations.

This sub-package turns a raw, human-written API definition into the
:class:`ApiDefinition` model the builder queries on every call.

Typical usage::

    from apilib.definition import ApiDefinition

    definition = ApiDefinition.from_file("reqres.json", version=2)
    definition.get_actions_for_endpoint("users")     # ['index', 'show']

Sub-modules:

* :mod:`~apilib.definition.loader` -- I/O layer (JSON, YAML, Python files
  and URLs).
* :mod:`~apilib.definition.templates` -- ``{placeholder}`` extraction and
  substitution for path templates.
* :mod:`~apilib.definition.compiler` -- flattens one version body into a
  :class:`~apilib.models.CompiledVersion`.
* :mod:`~apilib.definition.api_definition` -- the :class:`ApiDefinition`
  read model.
"""

from apilib.definition.api_definition import ApiDefinition, normalize_version
from apilib.definition.compiler import compile_version
from apilib.definition.loader import load_definition

__all__ = ["ApiDefinition", "compile_version", "load_definition", "normalize_version"]
