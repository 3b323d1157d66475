"""Unit tests for oneOf scoring heuristics."""

import pytest
from rdformat_validator.schema import (
    DIAGNOSTIC_SCHEMA,
    DIAGNOSTIC_RESULT_SCHEMA,
    RDFORMAT_SCHEMA,
)
from rdformat_validator.schema.rdformat import DIAGNOSTIC_ARRAY_SCHEMA
from rdformat_validator.validator.errors import ErrorReporter, ValidationErrorCode
from rdformat_validator.validator.scoring import (
    likelihood_terms,
    likelihood_score,
    order_by_likelihood,
    match_score_terms,
    match_score,
)

Code = ValidationErrorCode


@pytest.fixture
def diagnostic():
    return {"message": "x", "location": {"path": "a.js"}}


@pytest.fixture
def reporter():
    return ErrorReporter()


class TestLikelihood:
    """Tests for candidate ordering scores."""

    def test_full_diagnostic_against_diagnostic_schema(self, diagnostic):
        terms = likelihood_terms(DIAGNOSTIC_SCHEMA, diagnostic)
        assert terms["type_match"] == 10
        assert terms["all_required_present"] == 50
        assert terms["declared_properties"] == 4
        assert terms["recognized_key_ratio"] == 10
        assert terms["diagnostic_signature"] == 30
        assert likelihood_score(DIAGNOSTIC_SCHEMA, diagnostic) == 104

    def test_diagnostic_against_result_schema_is_clamped(self, diagnostic):
        terms = likelihood_terms(DIAGNOSTIC_RESULT_SCHEMA, diagnostic)
        assert terms["required_missing"] == -20
        assert terms["result_looks_like_diagnostic"] == -25
        assert likelihood_score(DIAGNOSTIC_RESULT_SCHEMA, diagnostic) == 0

    def test_result_against_result_schema(self):
        assert likelihood_score(DIAGNOSTIC_RESULT_SCHEMA, {"diagnostics": []}) == 72

    def test_type_mismatch_scores_zero(self):
        assert likelihood_terms(DIAGNOSTIC_SCHEMA, []) == {"type_mismatch": 0}
        assert likelihood_score(DIAGNOSTIC_SCHEMA, "text") == 0

    def test_array_scores_first_item(self, diagnostic):
        assert likelihood_score(DIAGNOSTIC_ARRAY_SCHEMA, [diagnostic]) == pytest.approx(10 + 15 + 104 * 0.3)

    def test_one_of_takes_best_alternative(self, diagnostic):
        assert likelihood_score(RDFORMAT_SCHEMA, diagnostic) == 104


class TestOrderByLikelihood:
    """Tests for candidate ordering."""

    def test_result_first_for_result_document(self):
        ordered = order_by_likelihood(RDFORMAT_SCHEMA.one_of, {"diagnostics": []})
        assert ordered[0] is DIAGNOSTIC_RESULT_SCHEMA

    def test_array_first_for_array_document(self, diagnostic):
        ordered = order_by_likelihood(RDFORMAT_SCHEMA.one_of, [diagnostic])
        assert ordered[0] is DIAGNOSTIC_ARRAY_SCHEMA

    def test_ties_keep_declaration_order(self):
        ordered = order_by_likelihood(RDFORMAT_SCHEMA.one_of, "text")
        assert ordered == list(RDFORMAT_SCHEMA.one_of)


class TestMatchScore:
    """Tests for failed-alternative ranking."""

    def test_severity_only_object_prefers_diagnostic(self, reporter):
        value = {"severity": "error"}
        diagnostic_errors = [
            reporter.create_error("message", Code.REQUIRED_PROPERTY_MISSING),
            reporter.create_error("location", Code.REQUIRED_PROPERTY_MISSING),
            reporter.create_error("severity", Code.ENUM_VALIDATION_FAILED, "error"),
        ]
        result_errors = [
            reporter.create_error("diagnostics", Code.REQUIRED_PROPERTY_MISSING),
            reporter.create_error("severity", Code.ENUM_VALIDATION_FAILED, "error"),
        ]
        array_errors = [
            reporter.create_error("", Code.TYPE_MISMATCH, value, expected="array"),
        ]

        assert match_score(DIAGNOSTIC_SCHEMA, value, diagnostic_errors) == 27
        assert match_score(DIAGNOSTIC_RESULT_SCHEMA, value, result_errors) == 17
        assert match_score(DIAGNOSTIC_ARRAY_SCHEMA, value, array_errors) == -55

    def test_named_terms(self, reporter):
        value = {"message": "x"}
        errors = [reporter.create_error("location", Code.REQUIRED_PROPERTY_MISSING)]
        terms = match_score_terms(DIAGNOSTIC_SCHEMA, value, errors)
        assert terms == {
            "base": 100,
            "errors": -5,
            "type_mismatches": 0,
            "required_missing": -30,
            "structural_errors": 0,
            "message_present": 10,
        }

    def test_structural_errors_score_higher_than_shape_errors(self, reporter, diagnostic):
        structural = [reporter.create_error("location.path", Code.EMPTY_STRING, "")]
        shape = [reporter.create_error("message", Code.TYPE_MISMATCH, 5, expected="string")]
        assert match_score(DIAGNOSTIC_SCHEMA, diagnostic, structural) > \
            match_score(DIAGNOSTIC_SCHEMA, diagnostic, shape)

    def test_root_kind_mismatch_penalty(self, reporter):
        errors = [reporter.create_error("", Code.TYPE_MISMATCH, "x", expected="object")]
        terms = match_score_terms(DIAGNOSTIC_SCHEMA, "x", errors)
        assert terms["root_kind_mismatch"] == -100
