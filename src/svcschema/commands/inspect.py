"""Inspect commands -- examine what the engine derives from a raw spec.

Provides the ``svcschema inspect`` sub-command group with read-only views
over a raw specification file or URL: canonical operations with their
pagination, the error taxonomy, inferred resources, and the resolved type
tree of a single shape. Nothing is written to disk.
"""

from __future__ import annotations

from typing import Any

import typer

from svcschema.exit_codes import EXIT_INVALID_USAGE
from svcschema.output import error, format_response, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)


def _load_raw(spec: str) -> dict[str, Any]:
    """Load a raw spec for inspection, exiting with EXIT_INVALID_USAGE on failure."""
    from svcschema.exceptions import SvcSchemaError
    from svcschema.fetch import load_spec

    try:
        return load_spec(spec)
    except SvcSchemaError as exc:
        error(f"Failed to load spec: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None


@inspect_app.command("operations")
def inspect_operations(
    spec: str = typer.Argument(help="Raw spec file, URL, or '-' for stdin."),
) -> None:
    """List canonical operations with their HTTP binding and pagination.

    Example::

        svcschema inspect operations specs/s3.json
    """
    from svcschema.engine import detect_pagination, extract_operations

    raw = _load_raw(spec)
    rows: list[list[str]] = []
    for op in extract_operations(raw):
        pagination = detect_pagination(op, raw)
        rows.append([
            op.name,
            op.original_name,
            op.http_method,
            op.http_path,
            "yes" if pagination.paginated else "",
            "yes" if op.deprecated else "",
        ])

    get_output().print_table(
        ["Name", "Original", "Method", "URI", "Paginated", "Deprecated"],
        rows,
        title=f"Operations ({len(rows)})",
    )


@inspect_app.command("errors")
def inspect_errors(
    spec: str = typer.Argument(help="Raw spec file, URL, or '-' for stdin."),
) -> None:
    """List exception shapes with status, retryability, and fault side."""
    from svcschema.engine import extract_errors

    errors = extract_errors(_load_raw(spec))
    if not errors:
        info("No exception shapes defined in this spec.")
        return

    rows = [
        [
            e.name,
            str(e.http_status),
            "yes" if e.retryable else "",
            "client" if e.sender_fault else "server",
        ]
        for e in errors
    ]
    get_output().print_table(
        ["Error", "Status", "Throttling", "Fault"], rows, title=f"Errors ({len(rows)})"
    )


@inspect_app.command("resources")
def inspect_resources(
    spec: str = typer.Argument(help="Raw spec file, URL, or '-' for stdin."),
) -> None:
    """List heuristically inferred resources."""
    from svcschema.engine import extract_operations, infer_resources

    resources = infer_resources(extract_operations(_load_raw(spec)))
    if not resources:
        info("No resources could be inferred.")
        return

    rows = [[r.name, r.kind.value, ", ".join(r.operations)] for r in resources]
    get_output().print_table(
        ["Resource", "Kind", "Operations"], rows, title=f"Resources ({len(rows)})"
    )


@inspect_app.command("shape")
def inspect_shape(
    spec: str = typer.Argument(help="Raw spec file, URL, or '-' for stdin."),
    name: str = typer.Argument(help="Shape name to resolve."),
) -> None:
    """Print the resolved, cycle-safe type tree of one shape.

    Example::

        svcschema inspect shape specs/s3.json ListBucketsOutput --json
    """
    from svcschema.engine import resolve_shape

    raw = _load_raw(spec)
    shapes = raw.get("shapes") if isinstance(raw.get("shapes"), dict) else {}
    if name not in shapes:
        error(f"Shape '{name}' not found")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    format_response(resolve_shape(name, shapes).model_dump(mode="json", exclude_defaults=True))
