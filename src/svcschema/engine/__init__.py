"""The schema resolution engine -- pure functions over an in-memory raw spec.

Nothing in this sub-package performs I/O or holds state between builds.
Data flows leaves-first:

* :mod:`~svcschema.engine.resolver` -- cycle-safe shape resolution.
* :mod:`~svcschema.engine.operations` -- canonical operation descriptors.
* :mod:`~svcschema.engine.pagination` -- explicit or heuristic pagination.
* :mod:`~svcschema.engine.errors` -- error taxonomy from exception shapes.
* :mod:`~svcschema.engine.resources` -- best-effort resource inference.
* :mod:`~svcschema.engine.assembler` -- combines the above into a
  :class:`~svcschema.models.SchemaDocument`.
* :mod:`~svcschema.engine.validator` -- collects structural violations.

Typical usage::

    from svcschema.engine import build_schema, validate_schema

    doc = build_schema("s3", raw)
    result = validate_schema(doc)
"""

from svcschema.engine.assembler import (
    SCHEMA_VERSION,
    build_schema,
    document_to_dict,
    document_to_json,
)
from svcschema.engine.errors import extract_errors
from svcschema.engine.operations import canonical_name, extract_operations
from svcschema.engine.pagination import detect_pagination
from svcschema.engine.resolver import resolve_ref, resolve_shape
from svcschema.engine.resources import infer_resources
from svcschema.engine.validator import validate_schema

__all__ = [
    "SCHEMA_VERSION",
    "build_schema",
    "canonical_name",
    "detect_pagination",
    "document_to_dict",
    "document_to_json",
    "extract_errors",
    "extract_operations",
    "infer_resources",
    "resolve_ref",
    "resolve_shape",
    "validate_schema",
]
