"""
Auto-Fixer - Automatically repair common RDFormat validation errors.

Handles:
- Type coercion (string/number/boolean, wrap in array, replace with object)
- Missing required properties (named defaults, else by expected type)
- Severity normalization (case-insensitive synonyms)
- Empty strings, number bounds and positions (aggressive level only)

Every fix is deterministic and recorded as an AppliedFix with before/after
snapshots. The fixer never raises for an unfixable error; it is passed
through to ``remaining_errors`` unchanged.
"""

import json
import math
import re
from collections.abc import Mapping
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from ..utils.logger import get_logger
from .errors import ValidationError, ValidationErrorCode, ValidationResult, describe_type
from .paths import PathSegment, get_value_at_path, parse_path, set_value_at_path

logger = get_logger(__name__)

Code = ValidationErrorCode


class FixLevel(Enum):
    """How far the fixer may go."""
    BASIC = "basic"
    AGGRESSIVE = "aggressive"


# Defaults for missing properties, keyed by property name
MISSING_PROPERTY_DEFAULTS: Dict[str, Any] = {
    "message": "No message provided",
    "location": {"path": "unknown"},
    "path": "unknown",
    "line": 1,
    "column": 1,
    "severity": "UNKNOWN_SEVERITY",
    "diagnostics": [],
    "name": "unknown",
}

# (parent property, property) -> default, consulted before the table above
PARENT_DEFAULT_OVERRIDES: Dict[Tuple[str, str], Any] = {
    ("range", "start"): {"line": 1},
}

# Fallback defaults by the type word found in ``ValidationError.expected``
EXPECTED_TYPE_DEFAULTS: Dict[str, Any] = {
    "string": "",
    "number": 0,
    "array": [],
    "object": {},
}

EMPTY_STRING_DEFAULTS: Dict[str, str] = {
    "message": "No message provided",
    "path": "unknown",
    "name": "unknown",
}
EMPTY_STRING_FALLBACK = "unknown"

SEVERITY_SYNONYMS: Dict[str, str] = {
    "error": "ERROR",
    "err": "ERROR",
    "fatal": "ERROR",
    "warning": "WARNING",
    "warn": "WARNING",
    "caution": "WARNING",
    "info": "INFO",
    "information": "INFO",
    "note": "INFO",
}
UNKNOWN_SEVERITY = "UNKNOWN_SEVERITY"

DEFAULT_MINIMUM = 1
DEFAULT_MAXIMUM = 1000

POSITION_KEYS = ("line", "column")

AGGRESSIVE_CODES = frozenset({
    Code.EMPTY_STRING,
    Code.MIN_VALUE_VIOLATION,
    Code.MAX_VALUE_VIOLATION,
    Code.INVALID_POSITION,
})

FIX_MESSAGES: Dict[ValidationErrorCode, str] = {
    Code.TYPE_MISMATCH: "Converted {before_type} value '{before}' to {after_type} '{after}'",
    Code.REQUIRED_PROPERTY_MISSING: "Added missing property with default value '{after}'",
    Code.MISSING_DIAGNOSTIC_MESSAGE: "Added missing property with default value '{after}'",
    Code.MISSING_DIAGNOSTIC_LOCATION: "Added missing property with default value '{after}'",
    Code.EMPTY_STRING: "Replaced empty string with default value '{after}'",
    Code.MIN_VALUE_VIOLATION: "Adjusted value from {before} to minimum allowed value {after}",
    Code.MAX_VALUE_VIOLATION: "Adjusted value from {before} to maximum allowed value {after}",
    Code.INVALID_SEVERITY: "Normalized severity from '{before}' to '{after}'",
    Code.INVALID_POSITION: "Fixed invalid position value from {before} to {after}",
}

_TYPE_WORD = re.compile(r"\b(string|number|boolean|array|object)\b")
_MIN_BOUND = re.compile(r"at least (-?\d+(?:\.\d+)?)")
_MAX_BOUND = re.compile(r"at most (-?\d+(?:\.\d+)?)")

# Returned by coercion helpers when no repair applies
_UNFIXABLE = object()


@dataclass
class AppliedFix:
    """Record of one repair."""
    path: str
    message: str
    before: Any = None
    after: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "message": self.message,
            "before": self.before,
            "after": self.after,
        }


@dataclass
class FixResult:
    """Result of auto-fix operation."""
    fixed: bool
    data: Any = None
    applied_fixes: List[AppliedFix] = field(default_factory=list)
    remaining_errors: List[ValidationError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixed": self.fixed,
            "data": self.data,
            "appliedFixes": [f.to_dict() for f in self.applied_fixes],
            "remainingErrors": [e.to_dict() for e in self.remaining_errors],
        }


def expected_type(expected: Optional[str]) -> Optional[str]:
    """First basic type word named in an ``expected`` description."""
    if not expected:
        return None
    match = _TYPE_WORD.search(expected)
    return match.group(1) if match else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_number(text: str) -> Optional[Union[int, float]]:
    """Parse a numeric string; None if it is not a finite number."""
    text = text.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coerce_value(target: Optional[str], value: Any) -> Any:
    """
    Convert a value to the target JSON type.

    Returns ``_UNFIXABLE`` when the value has no sensible representation
    in that type.
    """
    if target == "string":
        if _is_number(value) or isinstance(value, bool):
            return _to_text(value)
        if value is None:
            return ""
    elif target == "number":
        if isinstance(value, bool):
            return 1 if value else 0
        if isinstance(value, str):
            number = parse_number(value)
            if number is not None:
                return number
    elif target == "boolean":
        if isinstance(value, str):
            return value.lower() == "true"
        if _is_number(value):
            return value != 0
    elif target == "array":
        if value is not None and not isinstance(value, (list, tuple)):
            return [value]
    elif target == "object":
        if not isinstance(value, Mapping):
            return {}
    return _UNFIXABLE


def normalize_severity(value: Any) -> str:
    """Map a severity spelling to its canonical value."""
    if isinstance(value, str):
        return SEVERITY_SYNONYMS.get(value.strip().lower(), UNKNOWN_SEVERITY)
    return UNKNOWN_SEVERITY


def _display(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return "undefined"
    return json.dumps(value, default=str)


def _property_context(segments: List[PathSegment]) -> Tuple[Optional[str], Optional[str]]:
    """Return (parent property, property) names of a parsed path."""
    names = [s for s in segments if isinstance(s, str)]
    prop = segments[-1] if segments and isinstance(segments[-1], str) else None
    parent = names[-2] if prop is not None and len(names) > 1 else None
    return parent, prop


class AutoFixer:
    """
    Automatic fixer for RDFormat validation errors.

    ``basic`` applies only repairs that keep the author's intent;
    ``aggressive`` also replaces empty strings and clamps numbers.
    """

    def __init__(self, fix_level: Union[FixLevel, str] = FixLevel.BASIC):
        """
        Initialize auto-fixer.

        Args:
            fix_level: FixLevel or its string value ("basic"/"aggressive")
        """
        self.fix_level = FixLevel(fix_level)

    @property
    def aggressive(self) -> bool:
        return self.fix_level == FixLevel.AGGRESSIVE

    def fix(self, data: Any, validation_result: ValidationResult) -> FixResult:
        """
        Attempt to fix every error of a validation result.

        Args:
            data: The decoded document; never modified
            validation_result: Validation result whose errors to fix

        Returns:
            FixResult with a repaired deep copy, applied fixes and the
            errors that could not be fixed (original order)
        """
        # Work on a copy
        fixed_data = deepcopy(data)
        applied_fixes: List[AppliedFix] = []
        remaining_errors: List[ValidationError] = []

        for error in validation_result.errors:
            try:
                applied = self.apply_fix(fixed_data, error)
            except (TypeError, ValueError, KeyError, IndexError) as e:
                logger.warning(f"Failed to fix {error.code.value} at '{error.path}': {e}")
                applied = None

            if applied is None:
                remaining_errors.append(error)
            else:
                applied_fixes.append(applied)

        logger.info(
            f"Applied {len(applied_fixes)} fixes, "
            f"{len(remaining_errors)} errors remain"
        )

        return FixResult(
            fixed=bool(applied_fixes),
            data=fixed_data,
            applied_fixes=applied_fixes,
            remaining_errors=remaining_errors,
        )

    def can_fix(self, error: ValidationError) -> bool:
        """True if ``apply_fix`` would repair this error."""
        return self._plan(error, error.value) is not _UNFIXABLE

    def apply_fix(self, data: Any, error: ValidationError) -> Optional[AppliedFix]:
        """
        Repair one error in place.

        Args:
            data: Document to modify (callers pass a copy)
            error: The error to repair

        Returns:
            AppliedFix describing the change, or None if not fixable
        """
        segments = parse_path(error.path)
        before = get_value_at_path(data, segments)

        after = self._plan(error, before)
        if after is _UNFIXABLE:
            return None

        if not set_value_at_path(data, segments, deepcopy(after)):
            logger.debug(f"Cannot write to '{error.path}'")
            return None

        logger.debug(f"Fixed {error.code.value} at '{error.path}'")
        return AppliedFix(
            path=error.path,
            message=self._fix_message(error.code, before, after),
            before=deepcopy(before),
            after=deepcopy(after),
        )

    def _plan(self, error: ValidationError, current: Any) -> Any:
        """Compute the replacement value for an error, or ``_UNFIXABLE``."""
        code = error.code
        segments = parse_path(error.path)

        if not segments:
            return _UNFIXABLE
        if code in AGGRESSIVE_CODES and not self.aggressive:
            return _UNFIXABLE

        if code == Code.TYPE_MISMATCH:
            return coerce_value(expected_type(error.expected), current)
        elif code in (
            Code.REQUIRED_PROPERTY_MISSING,
            Code.MISSING_DIAGNOSTIC_MESSAGE,
            Code.MISSING_DIAGNOSTIC_LOCATION,
        ):
            return self._missing_property_default(segments, error.expected)
        elif code == Code.INVALID_SEVERITY:
            return normalize_severity(current)
        elif code == Code.EMPTY_STRING:
            _, prop = _property_context(segments)
            return EMPTY_STRING_DEFAULTS.get(prop, EMPTY_STRING_FALLBACK)
        elif code == Code.MIN_VALUE_VIOLATION:
            bound = self._bound(error, _MIN_BOUND, DEFAULT_MINIMUM)
            return max(bound, current) if _is_number(current) else bound
        elif code == Code.MAX_VALUE_VIOLATION:
            bound = self._bound(error, _MAX_BOUND, DEFAULT_MAXIMUM)
            return min(bound, current) if _is_number(current) else bound
        elif code == Code.INVALID_POSITION:
            return self._position_value(segments, current)

        return _UNFIXABLE

    @staticmethod
    def _missing_property_default(segments: List[PathSegment], expected: Optional[str]) -> Any:
        parent, prop = _property_context(segments)
        if (parent, prop) in PARENT_DEFAULT_OVERRIDES:
            return PARENT_DEFAULT_OVERRIDES[(parent, prop)]
        if prop in MISSING_PROPERTY_DEFAULTS:
            return MISSING_PROPERTY_DEFAULTS[prop]
        return EXPECTED_TYPE_DEFAULTS.get(expected_type(expected), _UNFIXABLE)

    @staticmethod
    def _bound(error: ValidationError, pattern: re.Pattern, default: float) -> float:
        if error.constraint is not None:
            bound = error.constraint
        else:
            match = pattern.search(error.message or "")
            bound = float(match.group(1)) if match else default
        if isinstance(bound, float) and bound.is_integer():
            return int(bound)
        return bound

    @staticmethod
    def _position_value(segments: List[PathSegment], current: Any) -> Any:
        _, prop = _property_context(segments)
        if prop not in POSITION_KEYS:
            return _UNFIXABLE
        if isinstance(current, str):
            number = parse_number(current)
            if number is not None and number >= 1:
                return number
            return 1
        if not _is_number(current) or current < 1:
            return 1
        return _UNFIXABLE

    @staticmethod
    def _fix_message(code: ValidationErrorCode, before: Any, after: Any) -> str:
        template = FIX_MESSAGES.get(code, "Fixed value from '{before}' to '{after}'")
        return template.format(
            before=_display(before),
            after=_display(after),
            before_type=describe_type(before) if before is not None else "undefined",
            after_type=describe_type(after),
        )
