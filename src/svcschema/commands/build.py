"""Build command -- turn raw service specs into persisted schema documents.

``svcschema build SERVICE...`` resolves the effective configuration, builds
every named service in parallel, prints a per-service result table, and
exits non-zero when anything failed.
"""

from __future__ import annotations

from typing import Optional

import typer

from svcschema.exit_codes import EXIT_GENERIC_FAILURE
from svcschema.output import error, get_output, progress, success, suggest


def build_command(
    services: list[str] = typer.Argument(help="Service names to build."),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Directory for {service}.json files."
    ),
    source: Optional[str] = typer.Option(
        None, "--source", "-s", help="Spec URL/path template with {service} and {version}."
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", min=1, help="Parallel builds."
    ),
    continue_on_error: Optional[bool] = typer.Option(
        None,
        "--continue-on-error/--fail-fast",
        help="Record failures and keep going, or stop at the first one.",
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the raw spec cache."),
) -> None:
    """Build schema documents for one or more services.

    Example::

        svcschema build s3 dynamodb --output-dir schemas/
        svcschema build s3 --source 'specs/{service}.yaml' --continue-on-error
    """
    from svcschema.builder import build_many
    from svcschema.config import resolve_config
    from svcschema.exceptions import SvcSchemaError
    from svcschema.fetch import SpecCache, SpecFetcher

    try:
        config = resolve_config(
            cli_output_dir=output_dir,
            cli_source=source,
            cli_workers=workers,
            cli_continue_on_error=continue_on_error,
            cli_no_cache=no_cache,
        )
        assert config.cache.directory is not None  # resolve_config guarantees this
        progress(f"Building {len(services)} service(s) with {config.build.workers} worker(s)...")
        with SpecCache(config.cache.directory, config.cache) as cache:
            fetcher = SpecFetcher(config.source, cache)
            results = build_many(services, fetcher, config.build)
    except SvcSchemaError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    rows = [
        [
            r.service,
            "ok" if r.success else "failed",
            str(r.operations),
            str(r.errors),
            str(r.resources),
            r.path or (r.error or "-"),
        ]
        for r in results
    ]
    get_output().print_table(
        ["Service", "Status", "Operations", "Errors", "Resources", "Output"],
        rows,
        title=f"Schema build ({len(results)})",
    )

    failures = [r for r in results if not r.success]
    if failures:
        error(f"{len(failures)} of {len(results)} service(s) failed.")
        suggest("Re-run with --verbose for fetch details.")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)
    success(f"Built {len(results)} schema(s) into {config.build.output_dir}")
