"""Unit tests for validator module."""

import pytest
from rdformat_validator.schema import NumberSchema, POSITION_SCHEMA, RDFORMAT_SCHEMA
from rdformat_validator.validator import (
    RDFormatValidator,
    ValidationErrorCode,
    ValidationOptions,
    ValidationResult,
    ValidationError,
    ValidationWarning,
)
from rdformat_validator.validator.json_validator import (
    is_diagnostic_like,
    is_diagnostic_result_like,
    merge_refined_errors,
)
from rdformat_validator.validator.errors import ErrorReporter

Code = ValidationErrorCode


def diagnostic(**overrides):
    data = {"message": "Unused variable", "location": {"path": "src/app.js"}}
    data.update(overrides)
    return data


class TestInputChecks:
    """Tests for top-level input shape errors."""

    @pytest.fixture
    def validator(self):
        return RDFormatValidator()

    def test_null_input(self, validator):
        result = validator.validate(None)
        assert result.valid is False
        assert result.error_codes == [Code.NULL_INPUT]
        assert result.errors[0].path == ""

    @pytest.mark.parametrize("data", ["", "   \n\t"])
    def test_blank_string(self, validator, data):
        assert validator.validate(data).error_codes == [Code.EMPTY_INPUT]

    def test_empty_object(self, validator):
        result = validator.validate({})
        assert result.valid is False
        assert len(result.errors) == 1
        assert result.errors[0].code == Code.EMPTY_INPUT
        assert result.errors[0].path == ""

    def test_empty_array(self, validator):
        assert validator.validate([]).error_codes == [Code.EMPTY_ARRAY]

    def test_non_empty_string_is_type_mismatch(self, validator):
        result = validator.validate("hello")
        assert result.error_codes == [Code.TYPE_MISMATCH]
        assert result.errors[0].path == ""
        assert result.errors[0].expected == "object"

    def test_non_json_value_does_not_raise(self, validator):
        result = validator.validate({"message": {1, 2}, "location": {"path": "a"}})
        assert result.valid is False
        assert result.errors_at("message")[0].code == Code.TYPE_MISMATCH


class TestValidDocuments:
    """Tests for the three accepted document shapes."""

    @pytest.fixture
    def validator(self):
        return RDFormatValidator()

    def test_minimal_diagnostic(self, validator):
        result = validator.validate({"message": "x", "location": {"path": "a.js"}})
        assert result.valid is True
        assert result.errors == []

    def test_full_diagnostic(self, validator):
        data = diagnostic(
            severity="WARNING",
            source={"name": "eslint", "url": "https://eslint.org"},
            code={"value": "no-unused-vars", "url": "https://eslint.org/docs/rules/no-unused-vars"},
            location={
                "path": "src/app.js",
                "range": {"start": {"line": 3, "column": 7}, "end": {"line": 3, "column": 12}},
            },
            suggestions=[{
                "range": {"start": {"line": 3, "column": 7}, "end": {"line": 3, "column": 12}},
                "text": "",
            }],
            related_locations=[{"message": "declared here", "location": {"path": "src/app.js"}}],
            original_output="src/app.js:3:7: 'x' is defined but never used",
        )
        assert validator.validate(data).valid is True

    def test_array_of_diagnostics(self, validator):
        assert validator.validate([diagnostic(), diagnostic(severity="INFO")]).valid is True

    def test_diagnostic_result(self, validator):
        data = {"source": {"name": "golint"}, "severity": "ERROR", "diagnostics": [diagnostic()]}
        assert validator.validate(data).valid is True

    def test_empty_diagnostics_is_valid_with_warning(self, validator):
        result = validator.validate({"diagnostics": []})
        assert result.valid is True
        assert result.warning_codes == [Code.EMPTY_ARRAY]
        assert result.warnings[0].path == "diagnostics"


class TestStructuralRules:
    """Tests for generic schema rules."""

    @pytest.fixture
    def validator(self):
        return RDFormatValidator()

    def test_empty_message_is_empty_string(self, validator):
        result = validator.validate(diagnostic(message=""))
        assert result.error_codes == [Code.EMPTY_STRING]
        assert result.errors[0].path == "message"

    def test_whitespace_path_is_empty_string(self, validator):
        result = validator.validate(diagnostic(location={"path": "  "}))
        assert result.error_codes == [Code.EMPTY_STRING]
        assert result.errors[0].path == "location.path"

    def test_pattern_mismatch(self, validator):
        result = validator.validate(diagnostic(source={"name": "lint", "url": "ftp://x"}))
        assert result.error_codes == [Code.PATTERN_MISMATCH]
        assert result.errors[0].path == "source.url"

    def test_type_mismatch_stops_descent(self, validator):
        result = validator.validate(diagnostic(message=42))
        assert result.error_codes == [Code.TYPE_MISMATCH]
        assert result.errors[0].expected == "string"
        assert "number" in result.errors[0].message

    def test_required_property_in_nested_object(self, validator):
        result = validator.validate(diagnostic(source={"url": "https://x.org"}))
        assert result.error_codes == [Code.REQUIRED_PROPERTY_MISSING]
        assert result.errors[0].path == "source.name"
        assert result.errors[0].expected == "string"

    def test_array_items_are_indexed(self, validator):
        result = validator.validate([diagnostic(), diagnostic(message="")])
        assert result.error_codes == [Code.EMPTY_STRING]
        assert result.errors[0].path == "[1].message"

    def test_result_item_paths(self, validator):
        result = validator.validate({"diagnostics": [diagnostic(), {"message": "m", "location": {"path": ""}}]})
        assert result.errors[0].path == "diagnostics[1].location.path"

    def test_all_errors_are_collected(self, validator):
        result = validator.validate(diagnostic(message=5, severity="bad", source={}))
        codes = set(result.error_codes)
        assert {Code.TYPE_MISMATCH, Code.INVALID_SEVERITY, Code.REQUIRED_PROPERTY_MISSING} <= codes
        assert len(result.errors) >= 3


class TestUnknownProperties:
    """Tests for strict mode and extra field handling."""

    def test_extra_fields_allowed_by_default(self):
        result = RDFormatValidator().validate(diagnostic(extra=True))
        assert result.valid is True
        assert result.warnings == []

    def test_extra_fields_warn_when_disallowed(self):
        validator = RDFormatValidator(allow_extra_fields=False)
        result = validator.validate(diagnostic(extra=True))
        assert result.valid is True
        assert result.warning_codes == [Code.UNKNOWN_PROPERTY]
        assert result.warnings[0].path == "extra"

    def test_extra_fields_error_in_strict_mode(self):
        validator = RDFormatValidator(strict_mode=True, allow_extra_fields=False)
        result = validator.validate(diagnostic(extra=True))
        assert result.valid is False
        assert result.error_codes == [Code.UNKNOWN_PROPERTY]
        assert result.errors[0].path == "extra"

    def test_closed_schema_reports_without_option(self):
        schema = {
            "type": "object",
            "properties": {"name": {"type": "string"}},
            "additionalProperties": False,
        }
        result = RDFormatValidator().validate_field("", {"name": "a", "x": 1}, schema)
        assert result.valid is True
        assert result.warning_codes == [Code.UNKNOWN_PROPERTY]

    def test_per_call_options(self):
        validator = RDFormatValidator()
        result = validator.validate(
            diagnostic(extra=1),
            {"strictMode": True, "allowExtraFields": False},
        )
        assert result.error_codes == [Code.UNKNOWN_PROPERTY]
        assert validator.validate(diagnostic(extra=1)).valid is True


class TestDomainRefinement:
    """Tests for diagnostic-specific error codes."""

    @pytest.fixture
    def validator(self):
        return RDFormatValidator()

    def test_missing_location(self, validator):
        result = validator.validate({"message": "x"})
        assert result.valid is False
        assert result.error_codes == [Code.MISSING_DIAGNOSTIC_LOCATION]
        assert result.errors[0].path == "location"
        assert not any(
            e.code == Code.REQUIRED_PROPERTY_MISSING and e.path == "location"
            for e in result.errors
        )

    def test_missing_message(self, validator):
        result = validator.validate({"location": {"path": "a"}})
        assert result.error_codes == [Code.MISSING_DIAGNOSTIC_MESSAGE]
        assert result.errors[0].path == "message"

    def test_severity_only_object(self, validator):
        result = validator.validate({"severity": "error"})
        assert result.error_codes == [
            Code.MISSING_DIAGNOSTIC_MESSAGE,
            Code.MISSING_DIAGNOSTIC_LOCATION,
            Code.INVALID_SEVERITY,
        ]

    @pytest.mark.parametrize("severity", ["error", "CRITICAL", 3, None])
    def test_invalid_severity_replaces_generic_error(self, validator, severity):
        result = validator.validate(diagnostic(severity=severity))
        assert result.error_codes == [Code.INVALID_SEVERITY]
        assert result.errors[0].path == "severity"
        assert result.errors[0].value == severity

    def test_result_severity_is_refined(self, validator):
        result = validator.validate({"diagnostics": [diagnostic()], "severity": "warn"})
        assert result.error_codes == [Code.INVALID_SEVERITY]
        assert result.errors[0].path == "severity"

    @pytest.mark.parametrize("line", [0, -4, 0.5])
    def test_invalid_position(self, validator, line):
        data = diagnostic(location={"path": "a", "range": {"start": {"line": line}}})
        result = validator.validate(data)
        assert result.error_codes == [Code.INVALID_POSITION]
        assert result.errors[0].path == "location.range.start.line"
        assert result.errors[0].constraint == 1

    @pytest.mark.parametrize("line", ["3", True])
    def test_non_numeric_position_is_type_mismatch(self, validator, line):
        data = diagnostic(location={"path": "a", "range": {"start": {"line": line}}})
        result = validator.validate(data)
        assert result.error_codes == [Code.TYPE_MISMATCH]
        assert result.errors[0].path == "location.range.start.line"
        assert result.errors[0].expected == "number"

    def test_fractional_position_is_accepted(self, validator):
        data = diagnostic(location={"path": "a", "range": {"start": {"line": 1.5, "column": 2.25}}})
        assert validator.validate(data).valid is True

    def test_invalid_end_column(self, validator):
        data = diagnostic(location={
            "path": "a",
            "range": {"start": {"line": 1}, "end": {"line": 2, "column": 0}},
        })
        result = validator.validate(data)
        assert result.error_codes == [Code.INVALID_POSITION]
        assert result.errors[0].path == "location.range.end.column"

    def test_missing_line_stays_required_property(self, validator):
        data = diagnostic(location={"path": "a", "range": {"start": {"column": 2}}})
        result = validator.validate(data)
        assert result.error_codes == [Code.REQUIRED_PROPERTY_MISSING]
        assert result.errors[0].path == "location.range.start.line"

    def test_range_without_start(self, validator):
        data = diagnostic(location={"path": "a", "range": {"end": {"line": 2}}})
        result = validator.validate(data)
        assert result.error_codes == [Code.INVALID_RANGE]
        assert result.errors[0].path == "location.range.start"

    def test_refinement_inside_result(self, validator):
        result = validator.validate({"diagnostics": [diagnostic(), {"message": "m"}]})
        assert result.error_codes == [Code.MISSING_DIAGNOSTIC_LOCATION]
        assert result.errors[0].path == "diagnostics[1].location"

    def test_refinement_inside_array(self, validator):
        result = validator.validate([diagnostic(), {"location": {"path": "a"}}])
        assert result.error_codes == [Code.MISSING_DIAGNOSTIC_MESSAGE]
        assert result.errors[0].path == "[1].message"

    def test_non_array_diagnostics(self, validator):
        result = validator.validate({"diagnostics": "none"})
        assert result.error_codes == [Code.TYPE_MISMATCH]
        assert result.errors[0].path == "diagnostics"
        assert result.errors[0].expected == "array"

    def test_never_generic_and_specific_at_same_path(self, validator):
        data = [
            {"severity": "bad"},
            diagnostic(location={"path": "a", "range": {"start": {"line": 0}}}),
        ]
        result = validator.validate(data)
        seen = {}
        for error in result.errors:
            seen.setdefault(error.path, []).append(error.code)
        assert all(len(codes) == 1 for codes in seen.values())


class TestOneOfResolution:
    """Tests for choosing the closest alternative."""

    @pytest.fixture
    def validator(self):
        return RDFormatValidator()

    def test_errors_come_from_single_alternative(self, validator):
        data = [{"message": "x", "location": {"path": ""}}, 5]
        result = validator.validate(data)
        assert [(e.path, e.code) for e in result.errors] == [
            ("[0].location.path", Code.EMPTY_STRING),
            ("[1]", Code.TYPE_MISMATCH),
        ]

    def test_severity_only_object_has_no_array_noise(self, validator):
        result = validator.validate({"severity": "error"})
        assert not any(e.path == "" for e in result.errors)
        assert not any(e.path == "diagnostics" for e in result.errors)

    def test_warnings_from_matching_alternative_are_kept(self):
        validator = RDFormatValidator(allow_extra_fields=False)
        result = validator.validate({"diagnostics": [diagnostic(extra=1)]})
        assert result.valid is True
        assert [w.path for w in result.warnings] == ["diagnostics[0].extra"]

    def test_empty_one_of(self, validator):
        result = validator.validate_field("", {"a": 1}, {"oneOf": []})
        assert result.error_codes == [Code.ONEOF_VALIDATION_FAILED]


class TestValidateField:
    """Tests for single-node validation."""

    @pytest.fixture
    def validator(self):
        return RDFormatValidator()

    def test_number_string_is_type_mismatch(self, validator):
        result = validator.validate_field("line", "42", NumberSchema(minimum=1))
        assert result.error_codes == [Code.TYPE_MISMATCH]
        assert result.errors[0].path == "line"
        assert result.errors[0].expected == "number"

    def test_position_object(self, validator):
        result = validator.validate_field("", {"line": "42"}, POSITION_SCHEMA)
        assert result.error_codes == [Code.TYPE_MISMATCH]
        assert result.errors[0].path == "line"

    def test_min_and_max_value(self, validator):
        schema = {"type": "number", "minimum": 1, "maximum": 10}
        low = validator.validate_field("n", 0, schema)
        high = validator.validate_field("n", 11, schema)
        assert low.error_codes == [Code.MIN_VALUE_VIOLATION]
        assert low.errors[0].constraint == 1
        assert high.error_codes == [Code.MAX_VALUE_VIOLATION]
        assert high.errors[0].constraint == 10

    def test_string_lengths(self, validator):
        schema = {"type": "string", "minLength": 3, "maxLength": 5}
        assert validator.validate_field("s", "ab", schema).error_codes == [Code.MIN_LENGTH_VIOLATION]
        assert validator.validate_field("s", "abcdef", schema).error_codes == [Code.MAX_LENGTH_VIOLATION]
        assert validator.validate_field("s", "", schema).error_codes == [Code.EMPTY_STRING]

    def test_enum(self, validator):
        result = validator.validate_field("s", "d", {"type": "string", "enum": ["a", "b"]})
        assert result.error_codes == [Code.ENUM_VALIDATION_FAILED]
        assert "a, b" in result.errors[0].expected

    def test_no_domain_refinement(self, validator):
        schema = {"type": "object", "required": ["message"], "properties": {"message": {"type": "string"}}}
        result = validator.validate_field("", {"severity": "x"}, schema)
        assert result.error_codes == [Code.REQUIRED_PROPERTY_MISSING]


class TestOptions:
    """Tests for option handling."""

    def test_set_options_merges(self):
        validator = RDFormatValidator()
        validator.set_options({"strictMode": True})
        assert validator.options.strict_mode is True
        assert validator.options.allow_extra_fields is True
        validator.set_options(allow_extra_fields=False)
        assert validator.options == ValidationOptions(strict_mode=True, allow_extra_fields=False)

    def test_unknown_options_are_ignored(self):
        bag = {"strictMode": True, "allowExtraFields": False, "colour": True, "autoFix": True}
        data = {"message": "x", "location": {"path": "a"}, "extra": 1}

        result = RDFormatValidator().validate(data, bag)
        assert result.error_codes == [Code.UNKNOWN_PROPERTY]

        validator = RDFormatValidator()
        validator.set_options(bag)
        assert validator.options == ValidationOptions(strict_mode=True, allow_extra_fields=False)

    def test_options_to_dict(self):
        assert ValidationOptions(strict_mode=True).to_dict() == {
            "strictMode": True,
            "allowExtraFields": True,
        }

    def test_get_schema(self):
        assert RDFormatValidator().get_schema() is RDFORMAT_SCHEMA


class TestDeterminism:
    """Repeated validation gives identical output."""

    def test_repeated_calls_are_identical(self):
        validator = RDFormatValidator()
        data = [{"severity": "bad", "location": {"path": ""}}, {"message": 1}]
        first = validator.validate(data).to_dict()
        second = validator.validate(data).to_dict()
        assert first == second
        assert RDFormatValidator().validate(data).to_dict() == first


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_to_dict(self):
        reporter = ErrorReporter()
        result = ValidationResult(
            valid=False,
            errors=[reporter.create_error("message", Code.EMPTY_STRING, "", expected="non-empty string")],
            warnings=[reporter.create_warning("x", Code.UNKNOWN_PROPERTY)],
        )
        data = result.to_dict()
        assert data["valid"] is False
        assert data["errors"][0]["code"] == "EMPTY_STRING"
        assert data["errors"][0]["expected"] == "non-empty string"
        assert data["warnings"][0]["path"] == "x"

    def test_error_messages_name_the_property(self):
        error = ErrorReporter().create_error("location.range.start", Code.REQUIRED_PROPERTY_MISSING)
        assert "'start'" in error.message
        assert "location.range.start" in error.message

    def test_codes_are_strings(self):
        assert Code.TYPE_MISMATCH == "TYPE_MISMATCH"
        assert isinstance(ValidationError("", Code.EMPTY_INPUT, "m").code.value, str)
        assert ValidationWarning("p", Code.EMPTY_ARRAY, "m").to_dict()["code"] == "EMPTY_ARRAY"


class TestShapePredicates:
    """Tests for diagnostic shape recognition and merge."""

    def test_diagnostic_like(self):
        assert is_diagnostic_like({"severity": "x"})
        assert is_diagnostic_like({"source": {}})
        assert not is_diagnostic_like({"diagnostics": [], "message": "x"})
        assert not is_diagnostic_like({"other": 1})

    def test_result_like(self):
        assert is_diagnostic_result_like({"diagnostics": None})
        assert not is_diagnostic_result_like([])

    def test_merge_keeps_position_of_superseded_error(self):
        reporter = ErrorReporter()
        generic = [
            reporter.create_error("message", Code.REQUIRED_PROPERTY_MISSING),
            reporter.create_error("source.url", Code.PATTERN_MISMATCH, "x"),
            reporter.create_error("severity", Code.ENUM_VALIDATION_FAILED, "bad"),
        ]
        specific = [
            reporter.create_error("severity", Code.INVALID_SEVERITY, "bad"),
            reporter.create_error("message", Code.MISSING_DIAGNOSTIC_MESSAGE),
            reporter.create_error("location.range.start", Code.INVALID_RANGE),
        ]
        merged = merge_refined_errors(generic, specific)
        assert [e.code for e in merged] == [
            Code.MISSING_DIAGNOSTIC_MESSAGE,
            Code.PATTERN_MISMATCH,
            Code.INVALID_SEVERITY,
            Code.INVALID_RANGE,
        ]
