"""
Domain Entities - Record Schema

Avro-style schema used by the pipeline host to describe records flowing
between stages. Only what the plugin needs is modelled: primitives, nullable
unions, enums, arrays, maps and nested records, with an optional logical
type carried through untouched.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import SchemaParseError


class SchemaType(str, Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BYTES = "bytes"
    STRING = "string"
    ENUM = "enum"
    ARRAY = "array"
    MAP = "map"
    RECORD = "record"
    UNION = "union"

    @property
    def is_simple(self) -> bool:
        return self not in _COMPLEX_TYPES


_COMPLEX_TYPES = {SchemaType.ARRAY, SchemaType.MAP, SchemaType.RECORD, SchemaType.UNION}
_PRIMITIVES = {t.value for t in SchemaType if t.is_simple and t is not SchemaType.ENUM}


@dataclass
class SchemaField:
    name: str
    schema: "Schema"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.schema.to_dict()}


@dataclass
class Schema:
    type: SchemaType
    name: Optional[str] = None
    fields: List[SchemaField] = field(default_factory=list)
    items: Optional["Schema"] = None
    values: Optional["Schema"] = None
    union_schemas: List["Schema"] = field(default_factory=list)
    symbols: List[str] = field(default_factory=list)
    logical_type: Optional[str] = None

    # Builders

    @classmethod
    def of(cls, schema_type: SchemaType) -> "Schema":
        return cls(type=schema_type)

    @classmethod
    def nullable_of(cls, schema: "Schema") -> "Schema":
        return cls(type=SchemaType.UNION, union_schemas=[schema, cls.of(SchemaType.NULL)])

    @classmethod
    def record_of(cls, name: str, fields: List[SchemaField]) -> "Schema":
        return cls(type=SchemaType.RECORD, name=name, fields=list(fields))

    # Queries

    def is_nullable(self) -> bool:
        return self.type is SchemaType.UNION and any(
            member.type is SchemaType.NULL for member in self.union_schemas
        )

    def non_nullable(self) -> "Schema":
        """Strip ``null`` from a nullable union."""
        if not self.is_nullable():
            return self
        members = [m for m in self.union_schemas if m.type is not SchemaType.NULL]
        if len(members) == 1:
            return members[0]
        return Schema(type=SchemaType.UNION, union_schemas=members)

    def get_field(self, name: str) -> Optional[SchemaField]:
        for schema_field in self.fields:
            if schema_field.name == name:
                return schema_field
        return None

    def field_names(self) -> List[str]:
        return [schema_field.name for schema_field in self.fields]

    # Serialization

    def to_dict(self) -> Any:
        if self.type is SchemaType.UNION:
            return [member.to_dict() for member in self.union_schemas]
        if self.type is SchemaType.RECORD:
            return {
                "type": "record",
                "name": self.name or "record",
                "fields": [schema_field.to_dict() for schema_field in self.fields],
            }
        if self.type is SchemaType.ARRAY:
            return {"type": "array", "items": self.items.to_dict() if self.items else "null"}
        if self.type is SchemaType.MAP:
            return {
                "type": "map",
                "keys": "string",
                "values": self.values.to_dict() if self.values else "null",
            }
        if self.type is SchemaType.ENUM:
            return {"type": "enum", "symbols": list(self.symbols)}
        if self.logical_type:
            return {"type": self.type.value, "logicalType": self.logical_type}
        return self.type.value

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def parse_json(cls, text: str) -> "Schema":
        """
        Parse a schema from its JSON representation.

        Raises:
            SchemaParseError: If the text is not JSON or describes an
                unsupported schema.
        """
        try:
            raw = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise SchemaParseError(f"Unable to parse schema JSON: {exc}") from exc
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: Any) -> "Schema":
        if isinstance(raw, str):
            if raw not in _PRIMITIVES:
                raise SchemaParseError(f"Unsupported schema type '{raw}'")
            return cls.of(SchemaType(raw))

        if isinstance(raw, list):
            if not raw:
                raise SchemaParseError("Union schema must have at least one member")
            return cls(type=SchemaType.UNION, union_schemas=[cls.from_dict(m) for m in raw])

        if not isinstance(raw, dict):
            raise SchemaParseError(f"Unexpected schema element: {raw!r}")

        type_name = raw.get("type")
        if isinstance(type_name, (dict, list)):
            return cls.from_dict(type_name)
        if type_name == "record":
            return cls._parse_record(raw)
        if type_name == "array":
            if "items" not in raw:
                raise SchemaParseError("Array schema must define 'items'")
            return cls(type=SchemaType.ARRAY, items=cls.from_dict(raw["items"]))
        if type_name == "map":
            if "values" not in raw:
                raise SchemaParseError("Map schema must define 'values'")
            return cls(type=SchemaType.MAP, values=cls.from_dict(raw["values"]))
        if type_name == "enum":
            symbols = raw.get("symbols")
            if not isinstance(symbols, list) or not symbols:
                raise SchemaParseError("Enum schema must define 'symbols'")
            return cls(type=SchemaType.ENUM, symbols=[str(s) for s in symbols])

        schema = cls.from_dict(type_name)
        schema.logical_type = raw.get("logicalType")
        return schema

    @classmethod
    def _parse_record(cls, raw: Dict[str, Any]) -> "Schema":
        raw_fields = raw.get("fields")
        if not isinstance(raw_fields, list):
            raise SchemaParseError("Record schema must define a list of 'fields'")

        fields: List[SchemaField] = []
        for raw_field in raw_fields:
            if not isinstance(raw_field, dict) or not raw_field.get("name"):
                raise SchemaParseError("Every record field must have a name")
            if "type" not in raw_field:
                raise SchemaParseError(f"Field '{raw_field['name']}' must have a type")
            fields.append(SchemaField(raw_field["name"], cls.from_dict(raw_field["type"])))
        return cls.record_of(raw.get("name") or "record", fields)


def field_type(schema_field: SchemaField) -> SchemaType:
    """Type of a field once a nullable wrapper has been removed."""
    return schema_field.schema.non_nullable().type
