"""Extract canonical operation descriptors from a raw service specification.

Each entry in the raw ``operations`` map becomes one
:class:`~svcschema.models.OperationDescriptor`. Only shallow metadata is
read here -- input/output shape *names*, the HTTP binding, declared errors,
documentation -- so this module never touches the shape resolver.

Canonical names are kebab-case, derived deterministically by
:func:`canonical_name` (``ListBuckets`` -> ``list-buckets``).
"""

from __future__ import annotations

import re
from typing import Any

from svcschema.models import OperationDescriptor

_DEFAULT_HTTP_METHOD = "POST"
_DEFAULT_HTTP_PATH = "/"

_UPPER_RE = re.compile(r"(?<!^)([A-Z])")


def canonical_name(name: str) -> str:
    """Convert an upstream operation name to its kebab-case canonical form.

    A hyphen is inserted before every uppercase letter except the first
    character, the result is lowercased, and leading hyphens are trimmed.
    Runs of capitals are not grouped: ``DescribeDBInstances`` becomes
    ``describe-d-b-instances``.

    Args:
        name: The operation name as declared upstream.

    Returns:
        The canonical name.
    """
    return _UPPER_RE.sub(r"-\1", name).lower().lstrip("-")


def extract_operations(raw_spec: dict[str, Any]) -> list[OperationDescriptor]:
    """Build an :class:`~svcschema.models.OperationDescriptor` for every raw operation.

    Args:
        raw_spec: The raw specification dict.

    Returns:
        Descriptors in raw declaration order. A missing, empty, or malformed
        ``operations`` map yields ``[]``.
    """
    operations = raw_spec.get("operations") if isinstance(raw_spec, dict) else None
    if not isinstance(operations, dict):
        return []

    descriptors: list[OperationDescriptor] = []
    for original_name, raw_op in operations.items():
        if not isinstance(raw_op, dict):
            raw_op = {}
        descriptors.append(_extract_operation(str(original_name), raw_op))
    return descriptors


def _extract_operation(original_name: str, raw_op: dict[str, Any]) -> OperationDescriptor:
    """Convert a single raw operation entry."""
    http = raw_op.get("http")
    if not isinstance(http, dict):
        http = {}

    method = http.get("method")
    http_method = method.upper() if isinstance(method, str) and method else _DEFAULT_HTTP_METHOD
    request_uri = http.get("requestUri")
    http_path = request_uri if isinstance(request_uri, str) and request_uri else _DEFAULT_HTTP_PATH

    documentation = raw_op.get("documentation")

    return OperationDescriptor(
        name=canonical_name(original_name),
        original_name=original_name,
        http_method=http_method,
        http_path=http_path,
        input_shape=_shape_name(raw_op.get("input")),
        output_shape=_shape_name(raw_op.get("output")),
        errors=_error_names(raw_op.get("errors")),
        documentation=documentation if isinstance(documentation, str) else None,
        deprecated=raw_op.get("deprecated") is True,
    )


def _shape_name(ref: Any) -> str | None:
    """Return the ``shape`` name of an input/output binding, or ``None``."""
    if isinstance(ref, dict) and isinstance(ref.get("shape"), str):
        return ref["shape"]
    return None


def _error_names(errors: Any) -> list[str]:
    """Declared error shape names in raw order, duplicates preserved."""
    if not isinstance(errors, list):
        return []
    return [name for name in (_shape_name(ref) for ref in errors) if name is not None]
