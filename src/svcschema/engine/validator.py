"""Structural validation of assembled or persisted schema documents.

:func:`validate_schema` checks that the keys downstream generators rely on
are present. It never stops at the first problem: every violation is
collected so a single run reports everything that is wrong.

The validator works on the serialised form (the dict you get from
``json.load``), so it can check documents read back from disk as well as
freshly assembled :class:`~svcschema.models.SchemaDocument` instances.
"""

from __future__ import annotations

from typing import Any, Union

from svcschema.models import SchemaDocument, ValidationResult

_DOCUMENT_FIELDS = ("service", "operations", "metadata")
_OPERATION_FIELDS = ("name", "originalName", "httpMethod", "httpUri")
_ERROR_FIELDS = ("name", "httpStatus")


def validate_schema(doc: Union[SchemaDocument, dict[str, Any]]) -> ValidationResult:
    """Validate the structure of a schema document.

    Checks:

    * top level: ``service``, ``operations``, ``metadata``;
    * every operation: ``name``, ``originalName``, ``httpMethod``,
      ``httpUri``;
    * every error: ``name``, ``httpStatus``.

    A key counts as missing when it is absent or ``null``.

    Args:
        doc: A :class:`~svcschema.models.SchemaDocument` or its parsed JSON
            form.

    Returns:
        A :class:`~svcschema.models.ValidationResult`; ``valid`` is ``True``
        only when ``errors`` is empty.
    """
    if isinstance(doc, SchemaDocument):
        doc = doc.model_dump(mode="json", by_alias=True)

    if not isinstance(doc, dict):
        return ValidationResult(
            valid=False,
            errors=[f"Document must be an object, got {type(doc).__name__}"],
        )

    errors: list[str] = []
    errors.extend(
        f"Missing required field '{field}'"
        for field in _missing(doc, _DOCUMENT_FIELDS)
    )
    errors.extend(_check_entries(doc, "operations", _OPERATION_FIELDS))
    errors.extend(_check_entries(doc, "errors", _ERROR_FIELDS))

    return ValidationResult(valid=not errors, errors=errors)


def _missing(obj: dict[str, Any], fields: tuple[str, ...]) -> list[str]:
    return [field for field in fields if obj.get(field) is None]


def _check_entries(
    doc: dict[str, Any], section: str, fields: tuple[str, ...]
) -> list[str]:
    """Collect violations for every entry of a list-valued *section*."""
    entries = doc.get(section)
    if entries is None:
        return []
    if not isinstance(entries, list):
        return [f"'{section}' must be a list, got {type(entries).__name__}"]

    errors: list[str] = []
    for index, entry in enumerate(entries):
        location = f"{section}[{index}]"
        if not isinstance(entry, dict):
            errors.append(f"{location}: must be an object")
            continue
        if isinstance(entry.get("name"), str):
            location = f"{location} ({entry['name']})"
        errors.extend(
            f"{location}: missing required field '{field}'"
            for field in _missing(entry, fields)
        )
    return errors
