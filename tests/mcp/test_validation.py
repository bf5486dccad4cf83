"""Tests for argument validation."""

import pytest

from mcp_toolbox.mcp.faults import ValidationFault
from mcp_toolbox.mcp.schema import SchemaDescriptor, enum, number, string
from mcp_toolbox.mcp.validation import ArgumentRecord, validate

SCHEMA = SchemaDescriptor({
    "name": string("Name"),
    "language": enum(("ko", "en"), required=False, default="ko"),
    "operation": enum(("add", "divide")),
    "a": number(),
    "note": string(required=False),
})


class TestValidArguments:
    """Conforming arguments produce a complete record."""

    def test_all_fields_supplied(self):
        record = validate(SCHEMA, {
            "name": "Kim", "language": "en", "operation": "add", "a": 2, "note": "hi",
        })

        assert isinstance(record, ArgumentRecord)
        assert dict(record) == {
            "name": "Kim", "language": "en", "operation": "add", "a": 2, "note": "hi",
        }

    def test_omitted_optionals_get_defaults(self):
        record = validate(SCHEMA, {"name": "Kim", "operation": "divide", "a": 1.5})

        assert record["language"] == "ko"
        assert record["note"] is None
        assert set(record) == {"name", "language", "operation", "a", "note"}

    def test_null_optional_treated_as_omitted(self):
        record = validate(SCHEMA, {"name": "Kim", "operation": "add", "a": 1, "language": None})

        assert record["language"] == "ko"

    def test_undeclared_fields_are_ignored(self):
        record = validate(SCHEMA, {"name": "Kim", "operation": "add", "a": 1, "extra": True})

        assert isinstance(record, ArgumentRecord)
        assert "extra" not in record

    def test_record_is_read_only(self):
        record = validate(SCHEMA, {"name": "Kim", "operation": "add", "a": 1})

        with pytest.raises(TypeError):
            record["name"] = "Lee"

    def test_empty_schema_accepts_none(self):
        record = validate(SchemaDescriptor(), None)

        assert isinstance(record, ArgumentRecord)
        assert len(record) == 0


class TestInvalidArguments:
    """Invalid arguments produce one fault naming every problem."""

    def test_missing_required_field(self):
        fault = validate(SCHEMA, {"operation": "add", "a": 1})

        assert isinstance(fault, ValidationFault)
        assert fault.fields == ["name"]
        assert fault.problems[0].reason == "required field is missing"

    def test_enum_out_of_set_lists_allowed_values(self):
        fault = validate(SCHEMA, {"name": "Kim", "operation": "modulo", "a": 1})

        assert isinstance(fault, ValidationFault)
        assert fault.fields == ["operation"]
        assert "add, divide" in fault.problems[0].reason

    def test_every_offending_field_is_reported(self):
        fault = validate(SCHEMA, {"language": "fr", "operation": "pow", "a": "1"})

        assert isinstance(fault, ValidationFault)
        assert fault.fields == ["name", "language", "operation", "a"]
        for field in ("name", "language", "operation", "a"):
            assert field in fault.message

    @pytest.mark.parametrize("value,expected", [
        ("3", "expected number, got string"),
        (True, "expected number, got boolean"),
        ([1], "expected number, got array"),
        (float("inf"), "expected a finite number"),
    ])
    def test_number_type_mismatch(self, value, expected):
        fault = validate(SCHEMA, {"name": "Kim", "operation": "add", "a": value})

        assert isinstance(fault, ValidationFault)
        assert fault.problems[0].field == "a"
        assert fault.problems[0].reason == expected

    def test_string_type_mismatch(self):
        fault = validate(SCHEMA, {"name": 42, "operation": "add", "a": 1})

        assert isinstance(fault, ValidationFault)
        assert fault.problems[0].reason == "expected string, got number"

    def test_non_mapping_arguments(self):
        fault = validate(SCHEMA, ["Kim"])

        assert isinstance(fault, ValidationFault)
        assert fault.fields == ["<arguments>"]

    def test_fault_serializes_problems(self):
        fault = validate(SCHEMA, {"operation": "add", "a": 1})

        assert fault.to_dict() == {
            "kind": "validation",
            "message": "Invalid arguments: name: required field is missing",
            "problems": [{"field": "name", "reason": "required field is missing"}],
        }
