"""Tests for JSON record recovery from model text."""

from hairstyle_studio.domain.analysis import AnalysisDefaults, FeasibilityRecord
from hairstyle_studio.services.structured_output import (
    extract_json_span,
    recover_record,
)

DEFAULT = AnalysisDefaults().feasibility


def test_extract_json_span_uses_first_and_last_brace() -> None:
    text = 'Sure! {"a": {"b": 1}} hope this helps}'

    assert extract_json_span(text) == '{"a": {"b": 1}} hope this helps}'


def test_extract_json_span_without_braces() -> None:
    assert extract_json_span("no json here") is None
    assert extract_json_span("} backwards {") is None


def test_recover_record_parses_embedded_object() -> None:
    text = (
        "Result:\n```json\n"
        '{"score": 64.6, "isFeasible": false, "estimatedCost": "200,000원", '
        '"requiredProcedures": ["탈색"], "warnings": ["손상 주의"]}\n```'
    )

    record, recovered = recover_record(text, FeasibilityRecord, DEFAULT)

    assert recovered is True
    assert record.score == 65
    assert record.is_feasible is False
    assert record.warnings == ["손상 주의"]


def test_recover_record_schema_mismatch_returns_default() -> None:
    text = '{"score": 140, "isFeasible": true, "estimatedCost": "x", "requiredProcedures": []}'

    record, recovered = recover_record(text, FeasibilityRecord, DEFAULT)

    assert recovered is False
    assert record is DEFAULT


def test_recover_record_malformed_json_returns_default() -> None:
    record, recovered = recover_record("{'score': 1,}", FeasibilityRecord, DEFAULT)

    assert recovered is False
    assert record is DEFAULT


def test_recover_record_trailing_prose_with_brace_returns_default() -> None:
    text = '{"score": 70, "isFeasible": true} and {more}'

    record, recovered = recover_record(text, FeasibilityRecord, DEFAULT)

    assert recovered is False
    assert record is DEFAULT
