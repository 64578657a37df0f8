"""Validate command -- structurally check persisted schema documents."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from svcschema.exit_codes import EXIT_SCHEMA_INVALID, EXIT_SPEC_PARSE_ERROR
from svcschema.output import error, format_response, success


def validate_command(
    files: list[Path] = typer.Argument(help="Schema JSON files to validate."),
) -> None:
    """Validate one or more schema documents, reporting every violation.

    Exits with code 8 when any document is invalid.

    Example::

        svcschema validate schemas/*.json
    """
    from svcschema.engine import validate_schema

    invalid = 0
    for path in files:
        try:
            doc = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            error(f"Cannot read {path}: {exc}")
            raise typer.Exit(code=EXIT_SPEC_PARSE_ERROR) from None

        result = validate_schema(doc)
        if result.valid:
            success(f"{path}: valid")
            continue

        invalid += 1
        error(f"{path}: {len(result.errors)} problem(s)")
        format_response({"file": str(path), "errors": result.errors})

    if invalid:
        raise typer.Exit(code=EXIT_SCHEMA_INVALID)
