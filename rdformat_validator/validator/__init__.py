"""
Validator module - Validate and auto-fix RDFormat documents.

Provides:
- RDFormatValidator: Validates decoded JSON against the RDFormat schema
- AutoFixer: Automatically fixes common validation errors
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .errors import (
    ErrorReporter,
    ValidationError,
    ValidationErrorCode,
    ValidationOptions,
    ValidationResult,
    ValidationWarning,
)
from .json_validator import RDFormatValidator
from .auto_fixer import AppliedFix, AutoFixer, FixLevel, FixResult
from ..utils.logger import get_logger

__all__ = [
    'RDFormatValidator',
    'ValidationResult',
    'ValidationError',
    'ValidationWarning',
    'ValidationErrorCode',
    'ValidationOptions',
    'ErrorReporter',
    'AutoFixer',
    'AppliedFix',
    'FixLevel',
    'FixResult',
    'ValidationReport',
    'validate_and_fix',
]

logger = get_logger(__name__)


@dataclass
class ValidationReport:
    """Outcome of validate_and_fix, as consumed by the CLI."""
    valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    fixed_data: Any = None
    applied_fixes: List[AppliedFix] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }
        if self.applied_fixes:
            data["fixedData"] = self.fixed_data
            data["appliedFixes"] = [f.to_dict() for f in self.applied_fixes]
        return data


def validate_and_fix(
    data: Any,
    strict_mode: bool = False,
    allow_extra_fields: bool = True,
    auto_fix: bool = False,
    fix_level: Union[FixLevel, str] = FixLevel.BASIC,
    max_iterations: int = 3,
    validator: Optional[RDFormatValidator] = None,
) -> ValidationReport:
    """
    Convenience function to validate and optionally fix a document.

    Fixing runs in passes: each pass fixes the current errors and
    re-validates, until the document is valid, a pass applies nothing,
    or ``max_iterations`` passes have run.

    Args:
        data: Decoded JSON document
        strict_mode: If True, unknown properties are errors
        allow_extra_fields: If False, undeclared properties are reported
        auto_fix: If True, attempt to fix errors
        fix_level: Fix level for the auto-fixer
        max_iterations: Maximum number of fix passes
        validator: Validator to use instead of a fresh one

    Returns:
        ValidationReport for the final state of the document
    """
    if validator is None:
        validator = RDFormatValidator(
            strict_mode=strict_mode,
            allow_extra_fields=allow_extra_fields,
        )
    result = validator.validate(data)

    if result.valid or not auto_fix:
        return ValidationReport(
            valid=result.valid,
            errors=result.errors,
            warnings=result.warnings,
        )

    fixer = AutoFixer(fix_level=fix_level)
    current = data
    applied_fixes: List[AppliedFix] = []

    for iteration in range(1, max_iterations + 1):
        fix_result = fixer.fix(current, result)
        if not fix_result.fixed:
            break

        applied_fixes.extend(fix_result.applied_fixes)
        current = fix_result.data
        result = validator.validate(current)
        logger.debug(
            f"Fix pass {iteration}: {len(fix_result.applied_fixes)} applied, "
            f"{len(result.errors)} errors remain"
        )
        if result.valid:
            break

    return ValidationReport(
        valid=result.valid,
        errors=result.errors,
        warnings=result.warnings,
        fixed_data=current if applied_fixes else None,
        applied_fixes=applied_fixes,
    )
