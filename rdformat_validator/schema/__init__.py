"""
Schema module - Declarative description of valid RDFormat data.

Provides:
- Schema node types (closed set of frozen dataclasses)
- The static RDFormat schema graph and lookup helpers
"""

from .nodes import (
    SchemaType,
    SchemaNode,
    StringSchema,
    NumberSchema,
    BooleanSchema,
    NullSchema,
    ObjectSchema,
    ArraySchema,
    OneOfSchema,
    schema_from_dict,
    value_kind,
)
from .rdformat import (
    SEVERITY_VALUES,
    POSITION_SCHEMA,
    RANGE_SCHEMA,
    LOCATION_SCHEMA,
    SOURCE_SCHEMA,
    CODE_SCHEMA,
    SUGGESTION_SCHEMA,
    RELATED_LOCATION_SCHEMA,
    DIAGNOSTIC_SCHEMA,
    DIAGNOSTIC_RESULT_SCHEMA,
    RDFORMAT_SCHEMA,
    get_schema,
    is_valid_schema,
)

__all__ = [
    # Node types
    'SchemaType',
    'SchemaNode',
    'StringSchema',
    'NumberSchema',
    'BooleanSchema',
    'NullSchema',
    'ObjectSchema',
    'ArraySchema',
    'OneOfSchema',
    'schema_from_dict',
    'value_kind',
    # RDFormat schema
    'SEVERITY_VALUES',
    'POSITION_SCHEMA',
    'RANGE_SCHEMA',
    'LOCATION_SCHEMA',
    'SOURCE_SCHEMA',
    'CODE_SCHEMA',
    'SUGGESTION_SCHEMA',
    'RELATED_LOCATION_SCHEMA',
    'DIAGNOSTIC_SCHEMA',
    'DIAGNOSTIC_RESULT_SCHEMA',
    'RDFORMAT_SCHEMA',
    'get_schema',
    'is_valid_schema',
]
