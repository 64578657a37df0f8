"""Build, validate, and persist schema documents -- one service or many.

:func:`build_service` runs the full pipeline for a single service: fetch the
raw spec, assemble the document, validate it, and write
``{output_dir}/{service}.json``. Invalid documents are never written.

:func:`build_many` fans services out over a
:class:`~concurrent.futures.ThreadPoolExecutor`, one schema build per
worker with no shared engine state. Results come back in input order. The
``continue_on_error`` option picks the failure policy:

* ``True`` -- every failure is recorded in its
  :class:`~svcschema.models.ServiceBuildResult` and the batch carries on.
* ``False`` -- the first failure (in input order) cancels pending builds
  and raises :class:`~svcschema.exceptions.BatchAbortedError`.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from svcschema.config import atomic_write
from svcschema.engine import build_schema, document_to_json, validate_schema
from svcschema.exceptions import (
    BatchAbortedError,
    InvalidUsageError,
    SchemaValidationError,
    SvcSchemaError,
)
from svcschema.fetch import SpecFetcher
from svcschema.models import BuildConfig, SchemaDocument, ServiceBuildResult
from svcschema.output import debug, info, warning


_SEPARATORS = ("/", "\\")


def check_service_name(service: str) -> None:
    """Reject a name that cannot be used as a bare output file name.

    Raises:
        InvalidUsageError: If *service* is empty, is ``.`` or ``..``, or
            contains a path separator.
    """
    if service in ("", ".", "..") or any(sep in service for sep in _SEPARATORS):
        raise InvalidUsageError(f"Invalid service name: '{service}'")


def write_schema(doc: SchemaDocument, output_dir: str | Path) -> Path:
    """Persist *doc* atomically as ``{output_dir}/{service}.json``.

    Returns:
        The path written.

    Raises:
        InvalidUsageError: If the service name would escape *output_dir*.
    """
    check_service_name(doc.service)
    path = Path(output_dir) / f"{doc.service}.json"
    atomic_write(path, document_to_json(doc))
    return path


def build_service(
    service: str, fetcher: SpecFetcher, output_dir: str | Path
) -> ServiceBuildResult:
    """Fetch, assemble, validate, and persist the schema for one service.

    Args:
        service: Service name.
        fetcher: Source of raw specifications.
        output_dir: Directory the document is written into.

    Returns:
        A successful :class:`~svcschema.models.ServiceBuildResult`.

    Raises:
        FetchError: If the raw spec is unavailable.
        SchemaValidationError: If the assembled document is structurally
            incomplete. Nothing is written in that case.
    """
    raw = fetcher.fetch(service)
    doc = build_schema(service, raw)

    result = validate_schema(doc)
    if not result.valid:
        raise SchemaValidationError(
            f"Schema for '{service}' failed validation with {len(result.errors)} error(s)",
            result.errors,
        )

    path = write_schema(doc, output_dir)
    debug(f"Wrote {path}")
    return ServiceBuildResult(
        service=service,
        success=True,
        path=str(path),
        operations=len(doc.operations),
        errors=len(doc.errors),
        resources=len(doc.resources),
    )


def build_many(
    services: list[str], fetcher: SpecFetcher, options: BuildConfig
) -> list[ServiceBuildResult]:
    """Build schemas for *services* in parallel.

    Args:
        services: Service names, in the order results should be reported.
        fetcher: Shared source of raw specifications.
        options: ``output_dir``, ``workers`` and ``continue_on_error``.

    Returns:
        One :class:`~svcschema.models.ServiceBuildResult` per service, in
        input order.

    Raises:
        InvalidUsageError: If a service is listed more than once or
            has an unusable name.
        BatchAbortedError: When ``continue_on_error`` is off and a build
            fails.
    """
    for service in services:
        check_service_name(service)

    duplicates = sorted({s for s in services if services.count(s) > 1})
    if duplicates:
        raise InvalidUsageError(f"Service listed more than once: {', '.join(duplicates)}")

    results: list[ServiceBuildResult] = []
    executor = ThreadPoolExecutor(max_workers=options.workers)
    try:
        futures: list[tuple[str, Future[ServiceBuildResult]]] = [
            (service, executor.submit(_build_one, service, fetcher, options.output_dir))
            for service in services
        ]
        for service, future in futures:
            result = future.result()
            results.append(result)
            if result.success:
                info(f"Built {service}: {result.operations} operations -> {result.path}")
                continue
            if not options.continue_on_error:
                executor.shutdown(wait=True, cancel_futures=True)
                raise BatchAbortedError(service, result.error or "unknown error")
            warning(f"Failed {service}: {result.error}")
    finally:
        executor.shutdown(wait=True)
    return results


def _build_one(service: str, fetcher: SpecFetcher, output_dir: str) -> ServiceBuildResult:
    """Worker body: turn any build failure into a failed result."""
    try:
        return build_service(service, fetcher, output_dir)
    except SchemaValidationError as exc:
        detail = "; ".join(exc.errors)
        return ServiceBuildResult(service=service, success=False, error=f"{exc}: {detail}")
    except (SvcSchemaError, OSError) as exc:
        return ServiceBuildResult(service=service, success=False, error=str(exc))
