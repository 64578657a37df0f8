"""Tests for svcschema.engine.validator."""

from __future__ import annotations

from typing import Any

from svcschema.engine.assembler import build_schema, document_to_dict
from svcschema.engine.validator import validate_schema


def _valid_doc() -> dict[str, Any]:
    return {
        "service": "demo",
        "operations": [
            {
                "name": "list-things",
                "originalName": "ListThings",
                "httpMethod": "GET",
                "httpUri": "/things",
            }
        ],
        "errors": [{"name": "Boom", "httpStatus": 500}],
        "metadata": {"serviceFullName": "Demo", "endpointPrefix": "demo"},
    }


class TestValidateSchema:
    def test_assembled_document_is_valid(self, widgets_raw: dict[str, Any]) -> None:
        result = validate_schema(build_schema("widgets", widgets_raw))
        assert result.valid is True
        assert result.errors == []

    def test_minimal_dict_is_valid(self) -> None:
        assert validate_schema(_valid_doc()).valid is True

    def test_errors_section_is_optional(self) -> None:
        doc = _valid_doc()
        del doc["errors"]
        assert validate_schema(doc).valid is True

    def test_all_violations_reported(self) -> None:
        doc = _valid_doc()
        del doc["metadata"]
        del doc["operations"][0]["httpMethod"]
        result = validate_schema(doc)
        assert result.valid is False
        assert len(result.errors) == 2
        assert "Missing required field 'metadata'" in result.errors
        assert (
            "operations[0] (list-things): missing required field 'httpMethod'"
            in result.errors
        )

    def test_null_counts_as_missing(self) -> None:
        doc = _valid_doc()
        doc["service"] = None
        result = validate_schema(doc)
        assert result.errors == ["Missing required field 'service'"]

    def test_error_entry_fields(self) -> None:
        doc = _valid_doc()
        doc["errors"] = [{"name": "Boom"}, {"httpStatus": 400}]
        result = validate_schema(doc)
        assert result.errors == [
            "errors[0] (Boom): missing required field 'httpStatus'",
            "errors[1]: missing required field 'name'",
        ]

    def test_non_list_section(self) -> None:
        doc = _valid_doc()
        doc["operations"] = {"list-things": {}}
        result = validate_schema(doc)
        assert result.errors == ["'operations' must be a list, got dict"]

    def test_non_object_entry(self) -> None:
        doc = _valid_doc()
        doc["operations"].append("oops")
        assert validate_schema(doc).errors == ["operations[1]: must be an object"]

    def test_non_object_document(self) -> None:
        result = validate_schema([])  # type: ignore[arg-type]
        assert result.valid is False
        assert result.errors == ["Document must be an object, got list"]

    def test_empty_operations_list_is_valid(self) -> None:
        doc = document_to_dict(build_schema("bare", {}))
        assert doc["operations"] == []
        assert validate_schema(doc).valid is True
