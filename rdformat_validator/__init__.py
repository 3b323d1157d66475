"""
RDFormat Validator - Validate and repair Reviewdog Diagnostic Format JSON.

Main modules:
- schema: Declarative RDFormat schema
- validator: Validate and auto-fix decoded documents
- parser: Decode JSON from strings, files and streams
- core: Configuration
- cli: Command-line interface
"""

__version__ = "1.0.0"

from .schema import RDFORMAT_SCHEMA, get_schema, is_valid_schema
from .validator import (
    RDFormatValidator,
    AutoFixer,
    FixLevel,
    ValidationErrorCode,
    ValidationResult,
    validate_and_fix,
)
from .parser import JSONParser, parse_string, parse_file

__all__ = [
    'RDFORMAT_SCHEMA',
    'get_schema',
    'is_valid_schema',
    'RDFormatValidator',
    'AutoFixer',
    'FixLevel',
    'ValidationErrorCode',
    'ValidationResult',
    'validate_and_fix',
    'JSONParser',
    'parse_string',
    'parse_file',
    '__version__',
]
