"""Built-in CLI sub-commands for svcschema.

* :mod:`~svcschema.commands.build` -- build and persist schema documents.
* :mod:`~svcschema.commands.validate` -- validate persisted documents.
* :mod:`~svcschema.commands.inspect` -- read-only views over a raw spec.
* :mod:`~svcschema.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for single commands like
``build``).
"""
