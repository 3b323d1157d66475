"""
Validation error vocabulary - Codes, result records and message templates.

Shared by the validator (which produces errors) and the auto-fixer
(which consumes them). Nothing here depends on the schema.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from ..schema.nodes import value_kind
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ValidationErrorCode(str, Enum):
    """Error codes for every kind of validation failure."""
    # Input validation errors
    NULL_INPUT = "NULL_INPUT"
    EMPTY_INPUT = "EMPTY_INPUT"
    INVALID_JSON = "INVALID_JSON"

    # Type validation errors
    TYPE_MISMATCH = "TYPE_MISMATCH"

    # Schema validation errors
    ONEOF_VALIDATION_FAILED = "ONEOF_VALIDATION_FAILED"
    ENUM_VALIDATION_FAILED = "ENUM_VALIDATION_FAILED"

    # String validation errors
    MIN_LENGTH_VIOLATION = "MIN_LENGTH_VIOLATION"
    MAX_LENGTH_VIOLATION = "MAX_LENGTH_VIOLATION"
    PATTERN_MISMATCH = "PATTERN_MISMATCH"
    EMPTY_STRING = "EMPTY_STRING"

    # Number validation errors
    MIN_VALUE_VIOLATION = "MIN_VALUE_VIOLATION"
    MAX_VALUE_VIOLATION = "MAX_VALUE_VIOLATION"
    INVALID_NUMBER = "INVALID_NUMBER"

    # Object validation errors
    REQUIRED_PROPERTY_MISSING = "REQUIRED_PROPERTY_MISSING"
    UNKNOWN_PROPERTY = "UNKNOWN_PROPERTY"
    INVALID_OBJECT_STRUCTURE = "INVALID_OBJECT_STRUCTURE"

    # Array validation errors
    INVALID_ARRAY_ITEM = "INVALID_ARRAY_ITEM"
    EMPTY_ARRAY = "EMPTY_ARRAY"

    # RDFormat specific errors
    INVALID_SEVERITY = "INVALID_SEVERITY"
    INVALID_LOCATION = "INVALID_LOCATION"
    INVALID_RANGE = "INVALID_RANGE"
    INVALID_POSITION = "INVALID_POSITION"
    MISSING_DIAGNOSTIC_MESSAGE = "MISSING_DIAGNOSTIC_MESSAGE"
    MISSING_DIAGNOSTIC_LOCATION = "MISSING_DIAGNOSTIC_LOCATION"


def describe_type(value: Any) -> str:
    """Runtime JSON type name of a value, for messages."""
    kind = value_kind(value)
    return kind.value if kind is not None else type(value).__name__


@dataclass
class ValidationError:
    """A single validation error."""
    path: str
    code: ValidationErrorCode
    message: str
    value: Any = None
    expected: Optional[str] = None
    # Numeric or length bound that was violated, when there is one
    constraint: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "path": self.path,
            "code": self.code.value,
            "message": self.message,
            "value": self.value,
        }
        if self.expected is not None:
            data["expected"] = self.expected
        if self.constraint is not None:
            data["constraint"] = self.constraint
        return data


@dataclass
class ValidationWarning:
    """A non-fatal validation finding."""
    path: str
    code: ValidationErrorCode
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "code": self.code.value,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    """Result of validation process."""
    valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)

    @property
    def error_codes(self) -> List[ValidationErrorCode]:
        return [e.code for e in self.errors]

    @property
    def warning_codes(self) -> List[ValidationErrorCode]:
        return [w.code for w in self.warnings]

    def errors_at(self, path: str) -> List[ValidationError]:
        return [e for e in self.errors if e.path == path]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass
class ValidationOptions:
    """Options controlling how strictly documents are checked."""
    strict_mode: bool = False
    allow_extra_fields: bool = True

    # camelCase spellings accepted from JSON/JS-style option bags
    _ALIASES = {
        "strictMode": "strict_mode",
        "allowExtraFields": "allow_extra_fields",
    }

    @classmethod
    def from_dict(cls, data: Mapping) -> 'ValidationOptions':
        return cls().merged(data)

    def merged(self, overrides: Mapping) -> 'ValidationOptions':
        """Return a copy with the given keys replaced; unknown keys are ignored."""
        known = {f.name for f in fields(self)}
        changes = {}
        for key, value in overrides.items():
            name = self._ALIASES.get(key, key)
            if name not in known:
                logger.debug(f"Ignoring unknown validation option: {key}")
                continue
            if value is not None:
                changes[name] = bool(value)
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strictMode": self.strict_mode,
            "allowExtraFields": self.allow_extra_fields,
        }


# Message templates. Available fields: where, value, value_type, expected,
# constraint, prop, length.
ERROR_TEMPLATES: Dict[ValidationErrorCode, str] = {
    ValidationErrorCode.NULL_INPUT:
        "Input cannot be null. Please provide valid RDFormat data.",
    ValidationErrorCode.EMPTY_INPUT:
        "Input cannot be empty. Please provide valid RDFormat data.",
    ValidationErrorCode.INVALID_JSON:
        "Input{where} is not valid JSON.",
    ValidationErrorCode.TYPE_MISMATCH:
        "Expected {expected}{where}, but got {value_type}.",
    ValidationErrorCode.ONEOF_VALIDATION_FAILED:
        "Value{where} does not match any supported RDFormat structure "
        "(single diagnostic, array of diagnostics, or diagnostic result).",
    ValidationErrorCode.ENUM_VALIDATION_FAILED:
        "Invalid value '{value}'{where}. Expected {expected}.",
    ValidationErrorCode.MIN_LENGTH_VIOLATION:
        "String{where} must be at least {constraint} characters long, but got {length}.",
    ValidationErrorCode.MAX_LENGTH_VIOLATION:
        "String{where} must be at most {constraint} characters long, but got {length}.",
    ValidationErrorCode.PATTERN_MISMATCH:
        "String{where} does not match the required format. Expected {expected}.",
    ValidationErrorCode.EMPTY_STRING:
        "String{where} cannot be empty. Please provide a non-empty value.",
    ValidationErrorCode.MIN_VALUE_VIOLATION:
        "Number{where} must be at least {constraint}, but got {value}.",
    ValidationErrorCode.MAX_VALUE_VIOLATION:
        "Number{where} must be at most {constraint}, but got {value}.",
    ValidationErrorCode.INVALID_NUMBER:
        "Value{where} is not a valid number: '{value}'.",
    ValidationErrorCode.REQUIRED_PROPERTY_MISSING:
        "Missing required property '{prop}'{where}. This field is mandatory in RDFormat.",
    ValidationErrorCode.UNKNOWN_PROPERTY:
        "Unknown property '{prop}'{where}. This property is not part of the RDFormat specification.",
    ValidationErrorCode.INVALID_OBJECT_STRUCTURE:
        "Object{where} has an invalid structure. Expected {expected}.",
    ValidationErrorCode.INVALID_ARRAY_ITEM:
        "Array item{where} is invalid. Expected {expected}.",
    ValidationErrorCode.EMPTY_ARRAY:
        "Array{where} cannot be empty. Expected {expected}.",
    ValidationErrorCode.INVALID_SEVERITY:
        "Severity{where} must be one of: UNKNOWN_SEVERITY, ERROR, WARNING, INFO. Got '{value}'.",
    ValidationErrorCode.INVALID_LOCATION:
        "Location{where} is invalid. A location must have a 'path' field and optionally a 'range' field.",
    ValidationErrorCode.INVALID_RANGE:
        "Range{where} is invalid. A range must have a 'start' position and optionally an 'end' position.",
    ValidationErrorCode.INVALID_POSITION:
        "Position{where} is invalid. Expected {expected}, got '{value}'.",
    ValidationErrorCode.MISSING_DIAGNOSTIC_MESSAGE:
        "Diagnostic{where} is missing the required 'message' field. "
        "Every diagnostic must have a descriptive message.",
    ValidationErrorCode.MISSING_DIAGNOSTIC_LOCATION:
        "Diagnostic{where} is missing the required 'location' field. "
        "Every diagnostic must specify where the issue was found.",
}

WARNING_TEMPLATES: Dict[ValidationErrorCode, str] = {
    ValidationErrorCode.UNKNOWN_PROPERTY:
        "Property '{prop}'{where} is not part of the RDFormat specification and will be ignored.",
    ValidationErrorCode.EMPTY_ARRAY:
        "Array{where} is empty.",
}


def _last_segment(path: str) -> str:
    tail = path.rsplit(".", 1)[-1]
    if tail.endswith("]") and "[" in tail:
        return tail[tail.rindex("[") + 1:-1]
    return tail


class ErrorReporter:
    """Builds errors and warnings with human-readable messages."""

    def create_error(
        self,
        path: str,
        code: ValidationErrorCode,
        value: Any = None,
        expected: Optional[str] = None,
        constraint: Optional[float] = None,
    ) -> ValidationError:
        message = self._render(ERROR_TEMPLATES, code, path, value, expected, constraint)
        return ValidationError(
            path=path,
            code=code,
            message=message,
            value=value,
            expected=expected,
            constraint=constraint,
        )

    def create_warning(
        self,
        path: str,
        code: ValidationErrorCode,
        message: Optional[str] = None,
    ) -> ValidationWarning:
        if message is None:
            message = self._render(WARNING_TEMPLATES, code, path, None, None, None)
        return ValidationWarning(path=path, code=code, message=message)

    @staticmethod
    def _render(
        templates: Dict[ValidationErrorCode, str],
        code: ValidationErrorCode,
        path: str,
        value: Any,
        expected: Optional[str],
        constraint: Optional[float],
    ) -> str:
        where = f" at '{path}'" if path else ""
        template = templates.get(code, "Validation failed{where}: {expected}.")
        if isinstance(constraint, float) and constraint.is_integer():
            constraint = int(constraint)
        return template.format(
            where=where,
            value=value,
            value_type=describe_type(value),
            expected=expected or "a different value",
            constraint=constraint,
            prop=_last_segment(path),
            length=len(value) if isinstance(value, str) else 0,
        )
