"""
Schema node types - A closed set of immutable schema shapes.

Every node carries exactly one discriminator: either a JSON type
(string/number/boolean/object/array/null) or a ``oneOf`` list of
alternatives. The validator dispatches on the node class, so adding a
new shape means adding a class here and a branch there.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Optional, Tuple


class SchemaType(Enum):
    """JSON value kinds a schema node can require."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"


def value_kind(value: Any) -> Optional[SchemaType]:
    """
    Classify a decoded JSON value.

    Returns None for values that are not valid JSON (NaN, sets, ...).
    ``bool`` is checked before numbers because it subclasses ``int``.
    """
    if value is None:
        return SchemaType.NULL
    if isinstance(value, bool):
        return SchemaType.BOOLEAN
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        return SchemaType.NUMBER
    if isinstance(value, str):
        return SchemaType.STRING
    if isinstance(value, (list, tuple)):
        return SchemaType.ARRAY
    if isinstance(value, Mapping):
        return SchemaType.OBJECT
    return None


@dataclass(frozen=True)
class SchemaNode:
    """Base class for all schema nodes."""
    title: Optional[str] = None
    description: Optional[str] = None

    @property
    def type(self) -> Optional[SchemaType]:
        return None

    def matches_type(self, value: Any) -> bool:
        """True if the value's runtime kind satisfies this node's type."""
        return self.type is None or value_kind(value) == self.type

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.title:
            data["title"] = self.title
        if self.description:
            data["description"] = self.description
        if self.type is not None:
            data["type"] = self.type.value
        return data


@dataclass(frozen=True)
class StringSchema(SchemaNode):
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    enum: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.enum is not None and not isinstance(self.enum, tuple):
            object.__setattr__(self, "enum", tuple(self.enum))

    @property
    def type(self) -> SchemaType:
        return SchemaType.STRING

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.enum is not None:
            data["enum"] = list(self.enum)
        if self.min_length is not None:
            data["minLength"] = self.min_length
        if self.max_length is not None:
            data["maxLength"] = self.max_length
        if self.pattern is not None:
            data["pattern"] = self.pattern
        return data


@dataclass(frozen=True)
class NumberSchema(SchemaNode):
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    @property
    def type(self) -> SchemaType:
        return SchemaType.NUMBER

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.minimum is not None:
            data["minimum"] = self.minimum
        if self.maximum is not None:
            data["maximum"] = self.maximum
        return data


@dataclass(frozen=True)
class BooleanSchema(SchemaNode):

    @property
    def type(self) -> SchemaType:
        return SchemaType.BOOLEAN


@dataclass(frozen=True)
class NullSchema(SchemaNode):

    @property
    def type(self) -> SchemaType:
        return SchemaType.NULL


@dataclass(frozen=True)
class ObjectSchema(SchemaNode):
    """
    Object shape.

    ``required`` keeps declaration order so missing-property errors are
    reported in a stable order. ``properties`` is frozen into a read-only
    mapping after construction.
    """
    required: Tuple[str, ...] = ()
    properties: Mapping = field(default_factory=dict)
    additional_properties: bool = True

    def __post_init__(self):
        if not isinstance(self.required, tuple):
            object.__setattr__(self, "required", tuple(self.required))
        if not isinstance(self.properties, MappingProxyType):
            object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def type(self) -> SchemaType:
        return SchemaType.OBJECT

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.required:
            data["required"] = list(self.required)
        if self.properties:
            data["properties"] = {
                name: node.to_dict() for name, node in self.properties.items()
            }
        if not self.additional_properties:
            data["additionalProperties"] = False
        return data


@dataclass(frozen=True)
class ArraySchema(SchemaNode):
    items: Optional[SchemaNode] = None

    @property
    def type(self) -> SchemaType:
        return SchemaType.ARRAY

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.items is not None:
            data["items"] = self.items.to_dict()
        return data


@dataclass(frozen=True)
class OneOfSchema(SchemaNode):
    """Value must match exactly one best alternative, in declaration order."""
    one_of: Tuple[SchemaNode, ...] = ()
    schema_uri: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.one_of, tuple):
            object.__setattr__(self, "one_of", tuple(self.one_of))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.schema_uri:
            data["$schema"] = self.schema_uri
        data.update(super().to_dict())
        data["oneOf"] = [node.to_dict() for node in self.one_of]
        return data


_TYPE_CLASSES = {
    "string": StringSchema,
    "number": NumberSchema,
    "boolean": BooleanSchema,
    "null": NullSchema,
    "object": ObjectSchema,
    "array": ArraySchema,
}


def schema_from_dict(data: Mapping) -> SchemaNode:
    """
    Build a schema node from a JSON-Schema-like dictionary.

    Only the keywords the diagnostic schema uses are understood.

    Raises:
        ValueError: If the dictionary has no usable discriminator
    """
    common = {
        "title": data.get("title"),
        "description": data.get("description"),
    }

    if "oneOf" in data:
        return OneOfSchema(
            one_of=tuple(schema_from_dict(alt) for alt in data["oneOf"]),
            schema_uri=data.get("$schema"),
            **common,
        )

    type_name = data.get("type")
    if type_name not in _TYPE_CLASSES:
        raise ValueError(f"Unsupported schema node: type={type_name!r}")

    if type_name == "string":
        enum = data.get("enum")
        return StringSchema(
            min_length=data.get("minLength"),
            max_length=data.get("maxLength"),
            pattern=data.get("pattern"),
            enum=tuple(enum) if enum is not None else None,
            **common,
        )
    if type_name == "number":
        return NumberSchema(
            minimum=data.get("minimum"),
            maximum=data.get("maximum"),
            **common,
        )
    if type_name == "object":
        return ObjectSchema(
            required=tuple(data.get("required", ())),
            properties={
                name: schema_from_dict(node)
                for name, node in data.get("properties", {}).items()
            },
            additional_properties=data.get("additionalProperties", True) is not False,
            **common,
        )
    if type_name == "array":
        items = data.get("items")
        return ArraySchema(
            items=schema_from_dict(items) if items is not None else None,
            **common,
        )

    return _TYPE_CLASSES[type_name](**common)
