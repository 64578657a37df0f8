"""Build the service's error taxonomy from exception-marked shapes."""

from __future__ import annotations

from typing import Any

from svcschema.models import ErrorDescriptor

_DEFAULT_HTTP_STATUS = 500


def extract_errors(raw_spec: dict[str, Any]) -> list[ErrorDescriptor]:
    """Return an :class:`~svcschema.models.ErrorDescriptor` per exception shape.

    A shape qualifies only when its ``exception`` flag is literally ``True``.
    ``retryable`` is taken from ``retryable.throttling`` alone; no broader
    retryability is inferred.

    Args:
        raw_spec: The raw specification dict.

    Returns:
        Descriptors in shape declaration order.
    """
    shapes = raw_spec.get("shapes") if isinstance(raw_spec, dict) else None
    if not isinstance(shapes, dict):
        return []

    descriptors: list[ErrorDescriptor] = []
    for name, shape in shapes.items():
        if not isinstance(shape, dict) or shape.get("exception") is not True:
            continue

        error = shape.get("error")
        if not isinstance(error, dict):
            error = {}
        retryable = shape.get("retryable")
        if not isinstance(retryable, dict):
            retryable = {}

        status = error.get("httpStatusCode")
        if not isinstance(status, int) or isinstance(status, bool):
            status = _DEFAULT_HTTP_STATUS
        code = error.get("code")
        documentation = shape.get("documentation")

        descriptors.append(
            ErrorDescriptor(
                name=str(name),
                http_status=status,
                retryable=retryable.get("throttling") is True,
                sender_fault=error.get("senderFault") is True,
                code=code if isinstance(code, str) else None,
                documentation=documentation if isinstance(documentation, str) else None,
            )
        )
    return descriptors
