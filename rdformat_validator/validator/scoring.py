"""
Scoring heuristics for ``oneOf`` resolution.

Two pure functions drive how the validator handles the polymorphic
top-level document:

- ``likelihood_score`` orders the alternatives before validation so the
  most plausible shape is tried first.
- ``match_score`` ranks failed alternatives afterwards so only the errors
  of the closest shape are reported.

Each score is the sum of named terms; ``*_terms`` functions expose the
breakdown for debugging and tests. Weights are relative: required-property
and type signals must outweigh key-count signals.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Sequence

from ..schema.nodes import ArraySchema, ObjectSchema, OneOfSchema, SchemaNode
from .errors import ValidationError, ValidationErrorCode


# Likelihood weights
TYPE_MATCH = 10
ALL_REQUIRED_PRESENT = 50
REQUIRED_PRESENT = 5
REQUIRED_MISSING = -20
DECLARED_PROPERTY_PRESENT = 2
RECOGNIZED_KEY_RATIO = 10
DIAGNOSTIC_SIGNATURE = 30
RESULT_LOOKS_LIKE_DIAGNOSTIC = -25
ARRAY_MATCH = 15
FIRST_ITEM_WEIGHT = 0.3

# Match score weights
BASE_SCORE = 100
PER_ERROR = -5
PER_TYPE_MISMATCH = -50
PER_REQUIRED_MISSING = -30
PER_STRUCTURAL_ERROR = 2
MESSAGE_PRESENT = 10
LOCATION_PRESENT = 10
RESULT_WITHOUT_DIAGNOSTICS = -20
ROOT_KIND_MISMATCH = -100

# "Right shape, wrong detail" errors
STRUCTURAL_CODES = frozenset({
    ValidationErrorCode.MIN_LENGTH_VIOLATION,
    ValidationErrorCode.MAX_LENGTH_VIOLATION,
    ValidationErrorCode.PATTERN_MISMATCH,
    ValidationErrorCode.EMPTY_STRING,
    ValidationErrorCode.MIN_VALUE_VIOLATION,
    ValidationErrorCode.MAX_VALUE_VIOLATION,
    ValidationErrorCode.ENUM_VALIDATION_FAILED,
    ValidationErrorCode.INVALID_POSITION,
    ValidationErrorCode.INVALID_RANGE,
    ValidationErrorCode.INVALID_LOCATION,
    ValidationErrorCode.INVALID_SEVERITY,
})


def _looks_like_single_diagnostic(value: Mapping) -> bool:
    return "message" in value or "location" in value


def _is_diagnostic_shaped(value: Mapping) -> bool:
    """Same test the refinement pass uses to recognize a diagnostic."""
    return "diagnostics" not in value and any(
        key in value for key in ("message", "location", "severity", "source")
    )


def likelihood_terms(schema: SchemaNode, value: Any) -> Dict[str, float]:
    """Named contributions to the likelihood that ``schema`` fits ``value``."""
    terms: Dict[str, float] = {}

    if isinstance(schema, OneOfSchema):
        best = max((likelihood_score(alt, value) for alt in schema.one_of), default=0)
        terms["best_alternative"] = best
        return terms

    if schema.type is not None:
        if not schema.matches_type(value):
            return {"type_mismatch": 0}
        terms["type_match"] = TYPE_MATCH

    if isinstance(schema, ObjectSchema):
        keys = set(value)
        required = schema.required
        if required:
            present = [name for name in required if name in keys]
            if len(present) == len(required):
                terms["all_required_present"] = ALL_REQUIRED_PRESENT
            else:
                terms["required_present"] = len(present) * REQUIRED_PRESENT
                terms["required_missing"] = (len(required) - len(present)) * REQUIRED_MISSING

        if schema.properties:
            declared = [name for name in schema.properties if name in keys]
            terms["declared_properties"] = len(declared) * DECLARED_PROPERTY_PRESENT
            terms["recognized_key_ratio"] = (
                len(declared) / max(len(keys), 1) * RECOGNIZED_KEY_RATIO
            )

        if "message" in keys and "location" in keys \
                and "message" in required and "location" in required:
            terms["diagnostic_signature"] = DIAGNOSTIC_SIGNATURE

        if "diagnostics" in required and _looks_like_single_diagnostic(value):
            terms["result_looks_like_diagnostic"] = RESULT_LOOKS_LIKE_DIAGNOSTIC

    elif isinstance(schema, ArraySchema):
        terms["array_match"] = ARRAY_MATCH
        if value and schema.items is not None:
            terms["first_item"] = likelihood_score(schema.items, value[0]) * FIRST_ITEM_WEIGHT

    return terms


def likelihood_score(schema: SchemaNode, value: Any) -> float:
    """
    How plausible it is that ``value`` was meant to be ``schema``.

    Never negative; a candidate whose type does not match scores 0.
    """
    return max(0, sum(likelihood_terms(schema, value).values()))


def order_by_likelihood(schemas: Sequence[SchemaNode], value: Any) -> List[SchemaNode]:
    """Sort candidates by descending likelihood; ties keep declaration order."""
    scored = [(likelihood_score(schema, value), index, schema) for index, schema in enumerate(schemas)]
    scored.sort(key=lambda item: (-item[0], item[1]))
    return [schema for _, _, schema in scored]


def match_score_terms(
    schema: SchemaNode,
    value: Any,
    errors: Sequence[ValidationError],
) -> Dict[str, float]:
    """Named contributions to how closely a failed alternative fits."""
    codes = [e.code for e in errors]
    terms: Dict[str, float] = {
        "base": BASE_SCORE,
        "errors": len(codes) * PER_ERROR,
        "type_mismatches": codes.count(ValidationErrorCode.TYPE_MISMATCH) * PER_TYPE_MISMATCH,
        "required_missing": codes.count(ValidationErrorCode.REQUIRED_PROPERTY_MISSING) * PER_REQUIRED_MISSING,
        "structural_errors": sum(1 for c in codes if c in STRUCTURAL_CODES) * PER_STRUCTURAL_ERROR,
    }

    if schema.type is not None and not schema.matches_type(value):
        terms["root_kind_mismatch"] = ROOT_KIND_MISMATCH

    if isinstance(schema, ObjectSchema) and isinstance(value, Mapping):
        required = schema.required
        if "message" in required and "message" in value:
            terms["message_present"] = MESSAGE_PRESENT
        if "location" in required and "location" in value:
            terms["location_present"] = LOCATION_PRESENT
        if "diagnostics" in required:
            if "diagnostics" not in value:
                terms["result_without_diagnostics"] = RESULT_WITHOUT_DIAGNOSTICS
            if _is_diagnostic_shaped(value):
                terms["result_looks_like_diagnostic"] = RESULT_LOOKS_LIKE_DIAGNOSTIC

    return terms


def match_score(schema: SchemaNode, value: Any, errors: Sequence[ValidationError]) -> float:
    """Closeness of a failed ``oneOf`` alternative; higher is closer."""
    return sum(match_score_terms(schema, value, errors).values())
