"""
Domain service mapping MarkLogic documents to pipeline records and back.

Records are plain dictionaries keyed by schema field name. Reading coerces
document values to the declared field types; writing serializes a record
into the configured document format.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

from marklogic_plugin.domain.entities.document import Document, DocumentFormat, Format
from marklogic_plugin.domain.entities.errors import RecordConversionError
from marklogic_plugin.domain.entities.schema import Schema, SchemaType

Record = Dict[str, Any]

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}
_XML_ROOT = "record"


class RecordConverter:
    """Converts between documents and records for one stage configuration."""

    def __init__(
        self,
        schema: Schema,
        record_format: Format,
        delimiter: Optional[str] = None,
        file_field: Optional[str] = None,
        payload_field: Optional[str] = None,
    ):
        self.schema = schema
        self.format = record_format
        self.delimiter = delimiter
        self.file_field = file_field
        self.payload_field = payload_field

    # Reading

    def to_record(self, document: Document) -> Record:
        record: Record = {name: None for name in self.schema.field_names()}

        if self.format is Format.AUTO:
            self._fill_auto(record, document)
        elif self.format is Format.JSON:
            self._fill_from_mapping(record, self._parse_json(document), document.uri)
        elif self.format is Format.XML:
            self._fill_from_xml(record, self._parse_xml(document), document.uri)
        elif self.format is Format.DELIMITED:
            self._fill_delimited(record, document)
        elif self.format is Format.TEXT:
            self._set_payload(record, _decode(document), document.uri)
        elif self.format is Format.BLOB:
            self._set_payload(record, document.content, document.uri)

        if self.file_field:
            record[self.file_field] = document.uri
        return record

    def _fill_auto(self, record: Record, document: Document) -> None:
        if document.format is DocumentFormat.JSON:
            self._fill_from_mapping(record, self._parse_json(document), document.uri)
        elif document.format is DocumentFormat.XML:
            self._fill_from_xml(record, self._parse_xml(document), document.uri)
        elif self.payload_field:
            record[self.payload_field] = document.content

    def _parse_json(self, document: Document) -> Dict[str, Any]:
        try:
            data = json.loads(_decode(document))
        except ValueError as exc:
            raise RecordConversionError(
                f"Document '{document.uri}' is not valid JSON: {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise RecordConversionError(
                f"Document '{document.uri}' must contain a JSON object"
            )
        return data

    def _parse_xml(self, document: Document) -> ET.Element:
        try:
            return ET.fromstring(document.content)
        except ET.ParseError as exc:
            raise RecordConversionError(
                f"Document '{document.uri}' is not valid XML: {exc}"
            ) from exc

    def _content_fields(self) -> List[str]:
        return [
            name
            for name in self.schema.field_names()
            if name not in (self.file_field, self.payload_field)
        ]

    def _fill_from_mapping(self, record: Record, data: Dict[str, Any], uri: str) -> None:
        for name in self._content_fields():
            field_schema = self.schema.get_field(name).schema
            record[name] = coerce_value(data.get(name), field_schema, name, uri)

    def _fill_from_xml(self, record: Record, root: ET.Element, uri: str) -> None:
        for name in self._content_fields():
            field_schema = self.schema.get_field(name).schema
            record[name] = _xml_value(root.findall(name), field_schema, name, uri)

    def _fill_delimited(self, record: Record, document: Document) -> None:
        line = _decode(document).rstrip("\r\n")
        values = line.split(self.delimiter) if line else []
        names = self._content_fields()
        if len(values) > len(names):
            raise RecordConversionError(
                f"Document '{document.uri}' has {len(values)} values "
                f"but the schema defines {len(names)} fields"
            )
        for name, raw in zip(names, values):
            field_schema = self.schema.get_field(name).schema
            record[name] = coerce_value(raw, field_schema, name, document.uri)

    def _set_payload(self, record: Record, value: Any, uri: str) -> None:
        if not self.payload_field:
            return
        field_schema = self.schema.get_field(self.payload_field).schema
        record[self.payload_field] = coerce_value(value, field_schema, self.payload_field, uri)

    # Writing

    def to_document(self, record: Record, uri: str) -> Document:
        if self.format is Format.JSON:
            body = {
                name: _jsonable(record.get(name), name, uri)
                for name in self.schema.field_names()
                if name != self.file_field
            }
            content = json.dumps(body).encode("utf-8")
        elif self.format is Format.XML:
            root = ET.Element(_XML_ROOT)
            for name in self.schema.field_names():
                if name != self.file_field:
                    _append_xml(root, name, record.get(name), uri)
            content = ET.tostring(root, encoding="utf-8")
        elif self.format is Format.DELIMITED:
            content = self.delimiter.join(
                _to_text(record.get(name), name, uri) for name in self._content_fields()
            ).encode("utf-8")
        elif self.format is Format.TEXT:
            content = _to_text(
                record.get(self.payload_field), self.payload_field, uri
            ).encode("utf-8")
        elif self.format is Format.BLOB:
            payload = record.get(self.payload_field)
            if not isinstance(payload, bytes):
                payload = _to_text(payload, self.payload_field, uri).encode("utf-8")
            content = payload
        else:
            raise RecordConversionError(f"Format '{self.format.value}' cannot be written")

        return Document(uri=uri, content=content, format=self.format.document_format)


def coerce_value(value: Any, schema: Schema, name: str, uri: str) -> Any:
    """
    Coerce a raw document value to the Python type of ``schema``.

    Raises:
        RecordConversionError: If the value cannot represent the type, or is
            missing for a non-nullable field.
    """
    if value is None or (value == "" and schema.non_nullable().type is not SchemaType.STRING):
        if schema.is_nullable() or schema.type is SchemaType.NULL:
            return None
        raise RecordConversionError(
            f"Field '{name}' in document '{uri}' is missing and not nullable"
        )

    target = schema.non_nullable()
    try:
        return _coerce(value, target, name, uri)
    except (TypeError, ValueError) as exc:
        raise RecordConversionError(
            f"Field '{name}' in document '{uri}' cannot be converted "
            f"to {target.type.value}: {exc}"
        ) from exc


def _coerce(value: Any, schema: Schema, name: str, uri: str) -> Any:
    kind = schema.type
    if kind is SchemaType.BOOLEAN:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ValueError(f"'{value}' is not a boolean")
    if kind in (SchemaType.INT, SchemaType.LONG):
        if isinstance(value, bool):
            raise ValueError("booleans are not integers")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"{value} is not integral")
        return int(value)
    if kind in (SchemaType.FLOAT, SchemaType.DOUBLE):
        if isinstance(value, bool):
            raise ValueError("booleans are not numbers")
        return float(value)
    if kind is SchemaType.STRING:
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
    if kind is SchemaType.BYTES:
        return value if isinstance(value, bytes) else str(value).encode("utf-8")
    if kind is SchemaType.ENUM:
        if str(value) not in schema.symbols:
            raise ValueError(f"'{value}' is not one of {schema.symbols}")
        return str(value)
    if kind is SchemaType.ARRAY:
        if not isinstance(value, list):
            raise TypeError("expected a list")
        return [coerce_value(item, schema.items, name, uri) for item in value]
    if kind is SchemaType.MAP:
        if not isinstance(value, dict):
            raise TypeError("expected an object")
        return {str(k): coerce_value(v, schema.values, name, uri) for k, v in value.items()}
    if kind is SchemaType.RECORD:
        if not isinstance(value, dict):
            raise TypeError("expected an object")
        return {
            f.name: coerce_value(value.get(f.name), f.schema, f"{name}.{f.name}", uri)
            for f in schema.fields
        }
    if kind is SchemaType.UNION:
        for member in schema.union_schemas:
            try:
                return _coerce(value, member, name, uri)
            except (TypeError, ValueError, RecordConversionError):
                continue
        raise ValueError("value matches no union member")
    raise ValueError(f"unsupported type {kind.value}")


def _xml_value(elements: List[ET.Element], schema: Schema, name: str, uri: str) -> Any:
    target = schema.non_nullable()
    if target.type is SchemaType.ARRAY:
        if not elements:
            return coerce_value(None, schema, name, uri)
        return [_xml_value([el], target.items, name, uri) for el in elements]
    if not elements:
        return coerce_value(None, schema, name, uri)

    element = elements[0]
    if target.type is SchemaType.RECORD:
        return {
            f.name: _xml_value(element.findall(f.name), f.schema, f"{name}.{f.name}", uri)
            for f in target.fields
        }
    if target.type is SchemaType.MAP:
        return {
            child.tag: _xml_value([child], target.values, name, uri) for child in element
        }
    text = element.text if element.text is not None else ""
    if target.type is not SchemaType.STRING:
        text = text.strip()
    return coerce_value(text, schema, name, uri)


def _decode(document: Document) -> str:
    try:
        return document.text()
    except UnicodeDecodeError as exc:
        raise RecordConversionError(
            f"Document '{document.uri}' is not valid UTF-8: {exc}"
        ) from exc


def _text_of_bytes(value: bytes, name: str, uri: str) -> str:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RecordConversionError(
            f"Field '{name}' of document '{uri}' holds binary data "
            f"that cannot be written as text: {exc}"
        ) from exc


def _jsonable(value: Any, name: str, uri: str) -> Any:
    if isinstance(value, bytes):
        return _text_of_bytes(value, name, uri)
    if isinstance(value, dict):
        return {k: _jsonable(v, name, uri) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v, name, uri) for v in value]
    return value


def _to_text(value: Any, name: str, uri: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return _text_of_bytes(value, name, uri)
    if isinstance(value, (dict, list)):
        return json.dumps(_jsonable(value, name, uri))
    return str(value)


def _append_xml(parent: ET.Element, name: str, value: Any, uri: str) -> None:
    if value is None:
        return
    if isinstance(value, list):
        for item in value:
            _append_xml(parent, name, item, uri)
        return
    element = ET.SubElement(parent, name)
    if isinstance(value, dict):
        for key, child in value.items():
            _append_xml(element, str(key), child, uri)
    else:
        element.text = _to_text(value, name, uri)
