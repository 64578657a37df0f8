"""Exception hierarchy for svcschema.

All exceptions inherit from :class:`SvcSchemaError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`svcschema.exit_codes`.
The top-level error handler in :func:`svcschema.app.main` catches
``SvcSchemaError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The resolution engine itself never raises for malformed shapes; these
exceptions belong to the boundaries around it (fetch, persistence, batch).

Subclass hierarchy::

    SvcSchemaError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- FetchError             (exit 6)
    +-- SpecParseError         (exit 7)
    +-- SchemaValidationError  (exit 8)
    +-- BatchAbortedError      (exit 9)
    +-- ConfigError            (exit 1)
"""

from __future__ import annotations

from svcschema.exit_codes import (
    EXIT_BATCH_ABORTED,
    EXIT_FETCH_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SCHEMA_INVALID,
    EXIT_SPEC_PARSE_ERROR,
)


class SvcSchemaError(Exception):
    """Base exception for all svcschema errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`svcschema.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SvcSchemaError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class FetchError(SvcSchemaError):
    """Raised when a service's raw specification cannot be retrieved."""

    exit_code = EXIT_FETCH_ERROR


class SpecParseError(SvcSchemaError):
    """Raised when raw specification content is not a JSON/YAML object."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class SchemaValidationError(SvcSchemaError):
    """Raised when an assembled schema document fails structural validation.

    Args:
        message: Summary line.
        errors: Every violation collected by the validator.
    """

    exit_code = EXIT_SCHEMA_INVALID

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = list(errors or [])


class BatchAbortedError(SvcSchemaError):
    """Raised when a batch build stops at its first failing service.

    Args:
        service: Name of the service whose build failed.
        message: Description of the underlying failure.
    """

    exit_code = EXIT_BATCH_ABORTED

    def __init__(self, service: str, message: str):
        super().__init__(f"Build aborted at '{service}': {message}")
        self.service = service


class ConfigError(SvcSchemaError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
