"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~svcschema.exceptions.SvcSchemaError` subclass.
CI scripts can inspect the exit code to tell a fetch failure from an
invalid schema without parsing stderr.

Example::

    $ svcschema build s3 --fail-fast
    $ echo $?
    9   # EXIT_BATCH_ABORTED -- the build stopped at its first failure
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_FETCH_ERROR = 6
"""The raw specification could not be fetched (network or missing file)."""

EXIT_SPEC_PARSE_ERROR = 7
"""The raw specification could not be parsed as a JSON/YAML object."""

EXIT_SCHEMA_INVALID = 8
"""An assembled or persisted schema document failed structural validation."""

EXIT_BATCH_ABORTED = 9
"""A batch build stopped at its first failure (``--continue-on-error`` not set)."""
