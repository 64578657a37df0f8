"""Tests for svcschema.engine.errors."""

from __future__ import annotations

from typing import Any

from svcschema.engine.errors import extract_errors


class TestExtractErrors:
    def test_only_exception_shapes(self, widgets_raw: dict[str, Any]) -> None:
        names = [e.name for e in extract_errors(widgets_raw)]
        assert names == ["ThrottlingException", "ConflictException", "InternalFailure"]

    def test_defaults_without_status(self) -> None:
        raw = {"shapes": {"Boom": {"type": "structure", "exception": True}}}
        (error,) = extract_errors(raw)
        assert error.http_status == 500
        assert error.retryable is False
        assert error.sender_fault is False
        assert error.code is None

    def test_throttling_flag_drives_retryable(self, widgets_raw: dict[str, Any]) -> None:
        by_name = {e.name: e for e in extract_errors(widgets_raw)}
        throttling = by_name["ThrottlingException"]
        assert throttling.http_status == 429
        assert throttling.retryable is True
        assert throttling.sender_fault is True
        assert throttling.code == "Throttling"
        assert throttling.documentation == "Request rate exceeded."
        assert by_name["ConflictException"].retryable is False

    def test_retryable_without_throttling_is_not_retryable(self) -> None:
        raw = {
            "shapes": {
                "Flaky": {
                    "type": "structure",
                    "exception": True,
                    "retryable": {"transient": True},
                }
            }
        }
        assert extract_errors(raw)[0].retryable is False

    def test_exception_flag_must_be_true(self) -> None:
        raw = {
            "shapes": {
                "A": {"type": "structure", "exception": "true"},
                "B": {"type": "structure", "exception": False},
                "C": {"type": "structure"},
            }
        }
        assert extract_errors(raw) == []

    def test_no_shapes(self) -> None:
        assert extract_errors({}) == []

    def test_serialised_keys(self) -> None:
        raw = {"shapes": {"Boom": {"type": "structure", "exception": True}}}
        data = extract_errors(raw)[0].model_dump(by_alias=True)
        assert data["httpStatus"] == 500
        assert data["senderFault"] is False
