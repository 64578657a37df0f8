"""Assemble a versioned :class:`~svcschema.models.SchemaDocument` for one service.

:func:`build_schema` is the engine's main entry point. It runs every
extractor over the raw specification, attaches pagination descriptors to the
operations, applies metadata defaults, and stamps the build time. Nothing in
the pipeline raises on malformed content; the worst case is a sparse
document, which :func:`~svcschema.engine.validator.validate_schema` will
then report on.

Serialisation helpers (:func:`document_to_dict`, :func:`document_to_json`)
always dump by alias so the persisted keys match what downstream generators
and the validator expect.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Optional

from svcschema.engine.errors import extract_errors
from svcschema.engine.operations import extract_operations
from svcschema.engine.pagination import detect_pagination
from svcschema.engine.resources import infer_resources
from svcschema.models import SchemaDocument, ServiceMetadata

SCHEMA_VERSION = "1.0.0"
"""Version of the persisted document layout."""

_METADATA_KEYS = (
    "apiVersion",
    "protocol",
    "serviceFullName",
    "endpointPrefix",
    "signatureVersion",
)


def build_schema(
    service: str,
    raw_spec: dict[str, Any],
    generated_at: Optional[datetime] = None,
) -> SchemaDocument:
    """Build the schema document for *service* from its raw specification.

    Args:
        service: Service name; used as the document identity and as the
            fallback for ``serviceFullName`` and ``endpointPrefix``.
        raw_spec: The raw specification dict (``operations``, ``shapes``,
            ``metadata``, optional ``pagination``).
        generated_at: Build timestamp. Defaults to the current UTC time.

    Returns:
        An immutable :class:`~svcschema.models.SchemaDocument`.

    Example::

        doc = build_schema("s3", raw)
        print(document_to_json(doc))
    """
    if not isinstance(raw_spec, dict):
        raw_spec = {}

    operations = [
        op.model_copy(update={"pagination": detect_pagination(op, raw_spec)})
        for op in extract_operations(raw_spec)
    ]
    stamp = generated_at or datetime.now(timezone.utc)

    return SchemaDocument(
        service=service,
        operations=operations,
        errors=extract_errors(raw_spec),
        resources=infer_resources(operations),
        metadata=_build_metadata(service, raw_spec.get("metadata")),
        generated_at=stamp.isoformat(),
        schema_version=SCHEMA_VERSION,
    )


def _build_metadata(service: str, raw_metadata: Any) -> ServiceMetadata:
    """Apply defaults to the raw ``metadata`` block.

    Known keys are kept only when they carry a non-empty string; any other
    upstream keys are preserved as extras.
    """
    if not isinstance(raw_metadata, dict):
        raw_metadata = {}

    extras = {
        key: value
        for key, value in raw_metadata.items()
        if key not in _METADATA_KEYS and key not in ServiceMetadata.model_fields
    }
    known = {
        key: raw_metadata[key]
        for key in _METADATA_KEYS
        if isinstance(raw_metadata.get(key), str) and raw_metadata[key]
    }
    known.setdefault("serviceFullName", service)
    known.setdefault("endpointPrefix", service)

    return ServiceMetadata.model_validate({**extras, **known})


def document_to_dict(doc: SchemaDocument) -> dict[str, Any]:
    """Dump *doc* to a JSON-compatible dict using the persisted key names."""
    return doc.model_dump(mode="json", by_alias=True)


def document_to_json(doc: SchemaDocument) -> str:
    """Serialise *doc* to indented JSON with a trailing newline."""
    return json.dumps(document_to_dict(doc), indent=2, ensure_ascii=False) + "\n"
