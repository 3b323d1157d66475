"""
RDFormat schema - Static description of Reviewdog Diagnostic Format data.

Based on the reviewdog diagnostic protobuf definition. Three top-level
shapes are accepted: a single diagnostic, an array of diagnostics, or a
diagnostic result object wrapping a ``diagnostics`` array.
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional

from .nodes import (
    ArraySchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    SchemaNode,
    StringSchema,
)


SEVERITY_VALUES = ("UNKNOWN_SEVERITY", "ERROR", "WARNING", "INFO")

URL_PATTERN = r"^https?://.+"

SEVERITY_SCHEMA = StringSchema(
    description="Severity of the diagnostic",
    enum=SEVERITY_VALUES,
)

POSITION_SCHEMA = ObjectSchema(
    title="Position",
    description="1-based line and optional column in a file",
    required=("line",),
    properties={
        "line": NumberSchema(minimum=1),
        "column": NumberSchema(minimum=1),
    },
)

RANGE_SCHEMA = ObjectSchema(
    title="Range",
    required=("start",),
    properties={
        "start": POSITION_SCHEMA,
        "end": POSITION_SCHEMA,
    },
)

LOCATION_SCHEMA = ObjectSchema(
    title="Location",
    required=("path",),
    properties={
        "path": StringSchema(min_length=1, description="File path"),
        "range": RANGE_SCHEMA,
    },
)

SOURCE_SCHEMA = ObjectSchema(
    title="Source",
    description="Tool that produced the diagnostic",
    required=("name",),
    properties={
        "name": StringSchema(min_length=1),
        "url": StringSchema(pattern=URL_PATTERN),
    },
)

CODE_SCHEMA = ObjectSchema(
    title="Code",
    description="Rule code and optional documentation link",
    properties={
        "value": StringSchema(),
        "url": StringSchema(pattern=URL_PATTERN),
    },
)

SUGGESTION_SCHEMA = ObjectSchema(
    title="Suggestion",
    description="Replacement text for a range",
    required=("range", "text"),
    properties={
        "range": RANGE_SCHEMA,
        "text": StringSchema(),
    },
)

RELATED_LOCATION_SCHEMA = ObjectSchema(
    title="RelatedLocation",
    required=("location",),
    properties={
        "message": StringSchema(),
        "location": LOCATION_SCHEMA,
    },
)

DIAGNOSTIC_SCHEMA = ObjectSchema(
    title="Diagnostic",
    required=("message", "location"),
    properties={
        "message": StringSchema(min_length=1),
        "location": LOCATION_SCHEMA,
        "severity": SEVERITY_SCHEMA,
        "source": SOURCE_SCHEMA,
        "code": CODE_SCHEMA,
        "suggestions": ArraySchema(items=SUGGESTION_SCHEMA),
        "original_output": StringSchema(),
        "related_locations": ArraySchema(items=RELATED_LOCATION_SCHEMA),
    },
)

DIAGNOSTIC_ARRAY_SCHEMA = ArraySchema(
    title="DiagnosticArray",
    items=DIAGNOSTIC_SCHEMA,
)

DIAGNOSTIC_RESULT_SCHEMA = ObjectSchema(
    title="DiagnosticResult",
    required=("diagnostics",),
    properties={
        "diagnostics": ArraySchema(items=DIAGNOSTIC_SCHEMA),
        "source": SOURCE_SCHEMA,
        "severity": SEVERITY_SCHEMA,
    },
)

RDFORMAT_SCHEMA = OneOfSchema(
    title="Reviewdog Diagnostic Format",
    schema_uri="http://json-schema.org/draft-07/schema#",
    one_of=(
        DIAGNOSTIC_SCHEMA,
        DIAGNOSTIC_ARRAY_SCHEMA,
        DIAGNOSTIC_RESULT_SCHEMA,
    ),
)

_SCHEMAS: Dict[str, SchemaNode] = {
    "position": POSITION_SCHEMA,
    "range": RANGE_SCHEMA,
    "location": LOCATION_SCHEMA,
    "source": SOURCE_SCHEMA,
    "code": CODE_SCHEMA,
    "suggestion": SUGGESTION_SCHEMA,
    "relatedLocation": RELATED_LOCATION_SCHEMA,
    "diagnostic": DIAGNOSTIC_SCHEMA,
    "diagnosticResult": DIAGNOSTIC_RESULT_SCHEMA,
    "rdformat": RDFORMAT_SCHEMA,
}


def get_schema(name: str) -> Optional[SchemaNode]:
    """Look up a schema node by logical name, or None if unknown."""
    return _SCHEMAS.get(name)


def is_valid_schema(candidate: Any) -> bool:
    """
    Structural sniff test for schema-like values.

    True for schema nodes, and for mappings carrying a ``type`` string or
    one of the combinators ``oneOf``/``anyOf``/``allOf``.
    """
    if isinstance(candidate, SchemaNode):
        return candidate.type is not None or isinstance(candidate, OneOfSchema)
    if not isinstance(candidate, Mapping):
        return False
    if isinstance(candidate.get("type"), str):
        return True
    return any(key in candidate for key in ("oneOf", "anyOf", "allOf"))
