"""Built-in CLI sub-commands for apilib.

* :mod:`~apilib.commands.inspect` -- list versions, endpoints and actions
  of a definition, and build paths from it.
* :mod:`~apilib.commands.call` -- send one request through
  :class:`~apilib.builder.JsonApi`.

Both read the definition from ``--definition`` / ``APILIB_DEFINITION``
through the helpers in :mod:`~apilib.commands.common`.
"""
