"""
JSON Validator - Validates decoded JSON against the RDFormat schema.

Performs two passes:
1. Schema validation - Recursive structural check against the schema graph,
   resolving the polymorphic top-level ``oneOf`` to its closest alternative
2. Domain refinement - Re-scans diagnostic-shaped nodes and replaces generic
   errors with diagnostic-specific codes at the same path

The validator never raises for decoded JSON values; an invalid document is
reported through the returned ValidationResult.

Instances are not safe to share across threads while ``set_options`` is
being called; use one validator per thread or an external lock.
"""

import re
from collections.abc import Mapping
from typing import Any, Dict, FrozenSet, List, Optional, Union

from ..schema.nodes import (
    ArraySchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    SchemaNode,
    SchemaType,
    StringSchema,
    schema_from_dict,
    value_kind,
)
from ..schema.rdformat import RDFORMAT_SCHEMA, SEVERITY_VALUES
from ..utils.logger import get_logger
from .errors import (
    ErrorReporter,
    ValidationError,
    ValidationErrorCode,
    ValidationOptions,
    ValidationResult,
    ValidationWarning,
)
from .paths import join_path
from .scoring import match_score, order_by_likelihood

logger = get_logger(__name__)

Code = ValidationErrorCode

SEVERITY_EXPECTED = "one of: " + ", ".join(SEVERITY_VALUES)

# Specific (domain) code -> generic codes it replaces at the same path
SUPERSEDES: Dict[ValidationErrorCode, FrozenSet[ValidationErrorCode]] = {
    Code.MISSING_DIAGNOSTIC_MESSAGE: frozenset({Code.REQUIRED_PROPERTY_MISSING}),
    Code.MISSING_DIAGNOSTIC_LOCATION: frozenset({Code.REQUIRED_PROPERTY_MISSING}),
    Code.INVALID_RANGE: frozenset({Code.REQUIRED_PROPERTY_MISSING}),
    Code.INVALID_SEVERITY: frozenset({Code.ENUM_VALIDATION_FAILED, Code.TYPE_MISMATCH}),
    Code.INVALID_POSITION: frozenset({Code.MIN_VALUE_VIOLATION, Code.MAX_VALUE_VIOLATION}),
    Code.TYPE_MISMATCH: frozenset({Code.TYPE_MISMATCH}),
}

OptionsLike = Union[ValidationOptions, Mapping, None]


def is_diagnostic_like(value: Any) -> bool:
    """An object that reads as a single diagnostic (possibly partial)."""
    return (
        isinstance(value, Mapping)
        and "diagnostics" not in value
        and any(key in value for key in ("message", "location", "severity", "source"))
    )


def is_diagnostic_result_like(value: Any) -> bool:
    """An object that reads as a diagnostic result wrapper."""
    return isinstance(value, Mapping) and "diagnostics" in value


def merge_refined_errors(
    generic: List[ValidationError],
    specific: List[ValidationError],
) -> List[ValidationError]:
    """
    Combine the two passes, letting specific errors override generic ones.

    A specific error takes the slot of the first generic error it
    supersedes at its path; the rest of the specific errors follow in
    discovery order.
    """
    by_path: Dict[str, List[ValidationError]] = {}
    for error in specific:
        by_path.setdefault(error.path, []).append(error)

    merged: List[ValidationError] = []
    placed = set()
    for error in generic:
        replacement = next(
            (s for s in by_path.get(error.path, ())
             if error.code in SUPERSEDES.get(s.code, frozenset())),
            None,
        )
        if replacement is None:
            merged.append(error)
        elif id(replacement) not in placed:
            merged.append(replacement)
            placed.add(id(replacement))

    merged.extend(error for error in specific if id(error) not in placed)
    return merged


class RDFormatValidator:
    """
    Validator for Reviewdog Diagnostic Format documents.

    Validates:
    - Input shape (null, empty string/object/array)
    - Structure against the three-way top-level schema
    - Types, enums, string and number constraints
    - Required and unknown properties
    - Diagnostic-specific rules (message, location, severity, positions)
    """

    def __init__(
        self,
        strict_mode: bool = False,
        allow_extra_fields: bool = True,
        schema: SchemaNode = RDFORMAT_SCHEMA,
    ):
        """
        Initialize validator.

        Args:
            strict_mode: If True, unknown properties are errors instead of warnings
            allow_extra_fields: If False, properties outside the schema are reported
            schema: Top-level document schema
        """
        self.options = ValidationOptions(
            strict_mode=strict_mode,
            allow_extra_fields=allow_extra_fields,
        )
        self.schema = schema
        self.reporter = ErrorReporter()

    @property
    def strict_mode(self) -> bool:
        return self.options.strict_mode

    def set_options(self, options: OptionsLike = None, **overrides: Any) -> None:
        """
        Merge new option values into the current set.

        Accepts a ValidationOptions, a mapping (snake_case or camelCase keys)
        and/or keyword arguments. Affects subsequent calls only.
        """
        self.options = self._resolve_options(options, overrides)

    def get_schema(self) -> SchemaNode:
        """Return the top-level document schema."""
        return self.schema

    def validate(self, data: Any, options: OptionsLike = None) -> ValidationResult:
        """
        Validate a decoded JSON document.

        Args:
            data: Decoded JSON value (dict, list, scalar or None)
            options: Per-call option overrides

        Returns:
            ValidationResult with all errors and warnings found
        """
        opts = self._resolve_options(options)

        input_error = self._check_input(data)
        if input_error is not None:
            logger.debug(f"Rejected input: {input_error.code.value}")
            return ValidationResult(valid=False, errors=[input_error])

        # Pass 1: generic schema validation
        generic_errors: List[ValidationError] = []
        warnings: List[ValidationWarning] = []
        self._validate_value(data, self.schema, "", generic_errors, warnings, opts)

        # Pass 2: diagnostic-specific refinement
        specific_errors: List[ValidationError] = []
        self._refine(data, "", specific_errors, warnings)

        errors = merge_refined_errors(generic_errors, specific_errors)

        logger.debug(
            f"Validation finished: valid={not errors}, "
            f"errors={len(errors)}, warnings={len(warnings)}"
        )
        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def validate_field(
        self,
        path: str,
        value: Any,
        schema: Union[SchemaNode, Mapping],
        options: OptionsLike = None,
    ) -> ValidationResult:
        """
        Validate one value against one explicit schema node.

        Args:
            path: Locator used as the prefix of reported paths
            value: Value to check
            schema: Schema node, or a JSON-Schema-like dict
            options: Per-call option overrides

        Returns:
            ValidationResult for that value alone (no domain refinement)
        """
        opts = self._resolve_options(options)
        if not isinstance(schema, SchemaNode):
            schema = schema_from_dict(schema)

        errors: List[ValidationError] = []
        warnings: List[ValidationWarning] = []
        self._validate_value(value, schema, path, errors, warnings, opts)
        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def _resolve_options(self, options: OptionsLike, overrides: Optional[Dict[str, Any]] = None) -> ValidationOptions:
        resolved = self.options
        if isinstance(options, ValidationOptions):
            resolved = options
        elif options is not None:
            resolved = resolved.merged(options)
        if overrides:
            resolved = resolved.merged(overrides)
        return resolved

    def _check_input(self, data: Any) -> Optional[ValidationError]:
        """Input-shape errors that stop validation before the schema pass."""
        if data is None:
            return self.reporter.create_error(
                "", Code.NULL_INPUT, data, expected="valid RDFormat data",
            )
        if isinstance(data, str) and not data.strip():
            return self.reporter.create_error(
                "", Code.EMPTY_INPUT, data, expected="non-empty RDFormat data",
            )
        if isinstance(data, Mapping) and not data:
            return self.reporter.create_error(
                "", Code.EMPTY_INPUT, data, expected="non-empty RDFormat object",
            )
        if isinstance(data, (list, tuple)) and not data:
            return self.reporter.create_error(
                "", Code.EMPTY_ARRAY, data, expected="non-empty array of diagnostics",
            )
        return None

    # ------------------------------------------------------------------
    # Pass 1: schema validation
    # ------------------------------------------------------------------

    def _validate_value(
        self,
        value: Any,
        schema: SchemaNode,
        path: str,
        errors: List[ValidationError],
        warnings: List[ValidationWarning],
        options: ValidationOptions,
    ) -> None:
        """Validate a value against a schema node, appending findings."""
        if isinstance(schema, OneOfSchema):
            self._validate_one_of(value, schema, path, errors, warnings, options)
            return

        if not schema.matches_type(value):
            errors.append(self.reporter.create_error(
                path, Code.TYPE_MISMATCH, value, expected=schema.type.value,
            ))
            return

        if isinstance(schema, StringSchema):
            self._validate_string(value, schema, path, errors)
        elif isinstance(schema, NumberSchema):
            self._validate_number(value, schema, path, errors)
        elif isinstance(schema, ObjectSchema):
            self._validate_object(value, schema, path, errors, warnings, options)
        elif isinstance(schema, ArraySchema):
            self._validate_array(value, schema, path, errors, warnings, options)

    def _validate_one_of(
        self,
        value: Any,
        schema: OneOfSchema,
        path: str,
        errors: List[ValidationError],
        warnings: List[ValidationWarning],
        options: ValidationOptions,
    ) -> None:
        """
        Resolve a ``oneOf`` node.

        The first alternative without errors wins. Otherwise only the errors
        of the best-scoring alternative are reported.
        """
        best = None  # (score, errors, warnings, schema)

        for candidate in order_by_likelihood(schema.one_of, value):
            sub_errors: List[ValidationError] = []
            sub_warnings: List[ValidationWarning] = []
            self._validate_value(value, candidate, path, sub_errors, sub_warnings, options)

            if not sub_errors:
                warnings.extend(sub_warnings)
                return

            score = match_score(candidate, value, sub_errors)
            if best is None or score > best[0]:
                best = (score, sub_errors, sub_warnings, candidate)

        if best is None:
            errors.append(self.reporter.create_error(
                path, Code.ONEOF_VALIDATION_FAILED, value,
                expected="a schema with at least one alternative",
            ))
            return

        score, best_errors, best_warnings, candidate = best
        logger.debug(
            f"No exact match{' at ' + path if path else ''}; closest alternative "
            f"{candidate.title or candidate.type} (score={score:g}, errors={len(best_errors)})"
        )
        errors.extend(best_errors)
        warnings.extend(best_warnings)

    def _validate_string(
        self,
        value: str,
        schema: StringSchema,
        path: str,
        errors: List[ValidationError],
    ) -> None:
        if schema.enum is not None and value not in schema.enum:
            errors.append(self.reporter.create_error(
                path, Code.ENUM_VALIDATION_FAILED, value,
                expected="one of: " + ", ".join(schema.enum),
            ))
            return

        # Empty is the more specific diagnosis than too short
        if schema.min_length and not value.strip():
            errors.append(self.reporter.create_error(
                path, Code.EMPTY_STRING, value, expected="non-empty string",
            ))
        elif schema.min_length is not None and len(value) < schema.min_length:
            errors.append(self.reporter.create_error(
                path, Code.MIN_LENGTH_VIOLATION, value,
                expected=f"string with minimum length {schema.min_length}",
                constraint=schema.min_length,
            ))

        if schema.max_length is not None and len(value) > schema.max_length:
            errors.append(self.reporter.create_error(
                path, Code.MAX_LENGTH_VIOLATION, value,
                expected=f"string with maximum length {schema.max_length}",
                constraint=schema.max_length,
            ))

        if schema.pattern is not None and not re.search(schema.pattern, value):
            errors.append(self.reporter.create_error(
                path, Code.PATTERN_MISMATCH, value,
                expected=f"string matching pattern: {schema.pattern}",
            ))

    def _validate_number(
        self,
        value: float,
        schema: NumberSchema,
        path: str,
        errors: List[ValidationError],
    ) -> None:
        if schema.minimum is not None and value < schema.minimum:
            errors.append(self.reporter.create_error(
                path, Code.MIN_VALUE_VIOLATION, value,
                expected=f"number >= {schema.minimum:g}",
                constraint=schema.minimum,
            ))

        if schema.maximum is not None and value > schema.maximum:
            errors.append(self.reporter.create_error(
                path, Code.MAX_VALUE_VIOLATION, value,
                expected=f"number <= {schema.maximum:g}",
                constraint=schema.maximum,
            ))

    def _validate_object(
        self,
        obj: Mapping,
        schema: ObjectSchema,
        path: str,
        errors: List[ValidationError],
        warnings: List[ValidationWarning],
        options: ValidationOptions,
    ) -> None:
        for name in schema.required:
            if name not in obj:
                child = schema.properties.get(name)
                errors.append(self.reporter.create_error(
                    join_path(path, name),
                    Code.REQUIRED_PROPERTY_MISSING,
                    None,
                    expected=child.type.value if child is not None and child.type else "value",
                ))

        for name, child in schema.properties.items():
            if name in obj:
                self._validate_value(
                    obj[name], child, join_path(path, name), errors, warnings, options,
                )

        if schema.properties and (
            not schema.additional_properties or not options.allow_extra_fields
        ):
            for name in obj:
                if name in schema.properties:
                    continue
                prop_path = join_path(path, str(name))
                if options.strict_mode:
                    errors.append(self.reporter.create_error(
                        prop_path, Code.UNKNOWN_PROPERTY, obj[name],
                        expected="property not present",
                    ))
                else:
                    warnings.append(self.reporter.create_warning(
                        prop_path, Code.UNKNOWN_PROPERTY,
                    ))

    def _validate_array(
        self,
        arr: List[Any],
        schema: ArraySchema,
        path: str,
        errors: List[ValidationError],
        warnings: List[ValidationWarning],
        options: ValidationOptions,
    ) -> None:
        if schema.items is None:
            return
        for index, item in enumerate(arr):
            self._validate_value(
                item, schema.items, join_path(path, index), errors, warnings, options,
            )

    # ------------------------------------------------------------------
    # Pass 2: diagnostic-specific refinement
    # ------------------------------------------------------------------

    def _refine(
        self,
        data: Any,
        path: str,
        errors: List[ValidationError],
        warnings: List[ValidationWarning],
    ) -> None:
        """Collect diagnostic-specific errors for diagnostic-shaped nodes."""
        if is_diagnostic_like(data):
            self._refine_diagnostic(data, path, errors)
        elif isinstance(data, (list, tuple)):
            for index, item in enumerate(data):
                if is_diagnostic_like(item):
                    self._refine_diagnostic(item, join_path(path, index), errors)
        elif is_diagnostic_result_like(data):
            self._refine_result(data, path, errors, warnings)

    def _refine_diagnostic(self, diagnostic: Mapping, path: str, errors: List[ValidationError]) -> None:
        if "message" not in diagnostic:
            errors.append(self.reporter.create_error(
                join_path(path, "message"), Code.MISSING_DIAGNOSTIC_MESSAGE, None,
                expected="string",
            ))

        if "location" not in diagnostic:
            errors.append(self.reporter.create_error(
                join_path(path, "location"), Code.MISSING_DIAGNOSTIC_LOCATION, None,
                expected="object",
            ))
        elif isinstance(diagnostic["location"], Mapping):
            self._refine_location(diagnostic["location"], join_path(path, "location"), errors)

        self._refine_severity(diagnostic, path, errors)

    def _refine_severity(self, node: Mapping, path: str, errors: List[ValidationError]) -> None:
        if "severity" in node and not self._is_known_severity(node["severity"]):
            errors.append(self.reporter.create_error(
                join_path(path, "severity"), Code.INVALID_SEVERITY, node["severity"],
                expected=SEVERITY_EXPECTED,
            ))

    @staticmethod
    def _is_known_severity(value: Any) -> bool:
        return isinstance(value, str) and value in SEVERITY_VALUES

    def _refine_location(self, location: Mapping, path: str, errors: List[ValidationError]) -> None:
        range_ = location.get("range")
        if not isinstance(range_, Mapping):
            return

        range_path = join_path(path, "range")
        if "start" not in range_:
            errors.append(self.reporter.create_error(
                join_path(range_path, "start"), Code.INVALID_RANGE, None,
                expected="position object with line number",
            ))
        elif isinstance(range_["start"], Mapping):
            self._refine_position(range_["start"], join_path(range_path, "start"), errors)

        if isinstance(range_.get("end"), Mapping):
            self._refine_position(range_["end"], join_path(range_path, "end"), errors)

    def _refine_position(self, position: Mapping, path: str, errors: List[ValidationError]) -> None:
        # Non-numbers are left to the generic TYPE_MISMATCH
        for key in ("line", "column"):
            if key not in position:
                continue
            value = position[key]
            if value_kind(value) == SchemaType.NUMBER and value < 1:
                errors.append(self.reporter.create_error(
                    join_path(path, key), Code.INVALID_POSITION, value,
                    expected=f"positive integer (1-based {key} number)",
                    constraint=1,
                ))

    def _refine_result(
        self,
        result: Mapping,
        path: str,
        errors: List[ValidationError],
        warnings: List[ValidationWarning],
    ) -> None:
        diagnostics = result.get("diagnostics")
        diagnostics_path = join_path(path, "diagnostics")

        if not isinstance(diagnostics, (list, tuple)):
            errors.append(self.reporter.create_error(
                diagnostics_path, Code.TYPE_MISMATCH, diagnostics, expected="array",
            ))
        elif not diagnostics:
            warnings.append(self.reporter.create_warning(
                diagnostics_path,
                Code.EMPTY_ARRAY,
                "Diagnostic result contains no diagnostics. This may be intentional but is unusual.",
            ))
        else:
            for index, item in enumerate(diagnostics):
                self._refine(item, join_path(diagnostics_path, index), errors, warnings)

        self._refine_severity(result, path, errors)
