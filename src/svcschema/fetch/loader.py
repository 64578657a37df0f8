"""Load raw service specifications from a URL, local file, or stdin.

This module handles the I/O of turning a spec location into a Python dict.
JSON and YAML are both accepted with automatic format detection.

Two failure classes are kept apart so callers (and exit codes) can tell them
apart:

* :class:`~svcschema.exceptions.FetchError` -- the content could not be
  retrieved at all (missing file, HTTP error, network failure).
* :class:`~svcschema.exceptions.SpecParseError` -- content was retrieved
  but is not a JSON/YAML object.

The single public function is :func:`load_spec`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from svcschema.exceptions import FetchError, SpecParseError


def load_spec(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load a raw spec from URL, file path, or stdin (``'-'``).

    Args:
        source: A URL (http/https), file path, or ``'-'`` for stdin.
        timeout: HTTP timeout in seconds (URLs only).

    Returns:
        The parsed spec as a dictionary.

    Raises:
        FetchError: If the source cannot be read.
        SpecParseError: If the content is not a JSON/YAML object.
    """
    if source == "-":
        return _load_from_stdin()
    if source.startswith(("http://", "https://")):
        return _load_from_url(source, timeout)
    return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise FetchError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content, hint="")


def _load_from_url(url: str, timeout: float) -> dict[str, Any]:
    """Fetch a spec over HTTP(S); the content type is used as a format hint."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise FetchError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a spec from disk, using the file extension as a format hint."""
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise FetchError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FetchError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    JSON is tried first unless the hint says YAML. An explicit JSON hint
    does not fall back to YAML.

    Raises:
        SpecParseError: If the content cannot be parsed or is not an object.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return _require_object(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            json_error = exc

    try:
        return _require_object(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        msg = "Failed to parse spec as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SpecParseError(msg) from exc


def _require_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return result
