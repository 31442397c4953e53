from __future__ import annotations

import json
import xml.etree.ElementTree as ET

import pytest

from marklogic_plugin.domain.entities.document import Document, DocumentFormat, Format
from marklogic_plugin.domain.entities.errors import RecordConversionError
from marklogic_plugin.domain.entities.schema import Schema
from marklogic_plugin.domain.services.record_converter import RecordConverter


def _schema(*fields: tuple) -> Schema:
    return Schema.from_dict(
        {
            "type": "record",
            "name": "etlSchemaBody",
            "fields": [{"name": name, "type": type_} for name, type_ in fields],
        }
    )


ORDER_SCHEMA = _schema(
    ("file", "string"),
    ("id", "long"),
    ("paid", ["boolean", "null"]),
    ("total", "double"),
    ("tags", ["null", {"type": "array", "items": "string"}]),
)


def test_json_document_fields_are_coerced() -> None:
    converter = RecordConverter(ORDER_SCHEMA, Format.JSON, file_field="file")
    document = Document(
        uri="/orders/1.json",
        content=json.dumps({"id": "7", "total": 12, "tags": ["a", "b"], "extra": 1}).encode(),
        format=DocumentFormat.JSON,
    )

    record = converter.to_record(document)

    assert record == {
        "file": "/orders/1.json",
        "id": 7,
        "paid": None,
        "total": 12.0,
        "tags": ["a", "b"],
    }


def test_json_document_missing_required_field_fails() -> None:
    converter = RecordConverter(ORDER_SCHEMA, Format.JSON, file_field="file")
    document = Document("/orders/2.json", b'{"total": 1}', DocumentFormat.JSON)

    with pytest.raises(RecordConversionError, match="'id'"):
        converter.to_record(document)


def test_json_document_must_be_an_object() -> None:
    converter = RecordConverter(ORDER_SCHEMA, Format.JSON)

    with pytest.raises(RecordConversionError):
        converter.to_record(Document("/a.json", b"[1, 2]", DocumentFormat.JSON))


def test_xml_document_children_are_mapped() -> None:
    converter = RecordConverter(ORDER_SCHEMA, Format.XML, file_field="file")
    content = (
        b"<order><id> 3 </id><paid>true</paid><total>4.5</total>"
        b"<tags>x</tags><tags>y</tags></order>"
    )

    record = converter.to_record(Document("/orders/3.xml", content, DocumentFormat.XML))

    assert record["id"] == 3
    assert record["paid"] is True
    assert record["total"] == 4.5
    assert record["tags"] == ["x", "y"]
    assert record["file"] == "/orders/3.xml"


def test_delimited_document_follows_schema_order() -> None:
    schema = _schema(("file", "string"), ("name", "string"), ("age", ["int", "null"]))
    converter = RecordConverter(schema, Format.DELIMITED, delimiter=";", file_field="file")

    record = converter.to_record(Document("/p.csv", b"Ann;\n", DocumentFormat.TEXT))

    assert record == {"file": "/p.csv", "name": "Ann", "age": None}


def test_delimited_document_with_too_many_values_fails() -> None:
    schema = _schema(("name", "string"))
    converter = RecordConverter(schema, Format.DELIMITED, delimiter=",")

    with pytest.raises(RecordConversionError):
        converter.to_record(Document("/p.csv", b"a,b", DocumentFormat.TEXT))


def test_text_and_blob_documents_fill_payload() -> None:
    text_converter = RecordConverter(
        _schema(("body", "string")), Format.TEXT, payload_field="body"
    )
    blob_converter = RecordConverter(
        _schema(("body", "bytes")), Format.BLOB, payload_field="body"
    )

    assert text_converter.to_record(
        Document("/a.txt", "héllo".encode(), DocumentFormat.TEXT)
    ) == {"body": "héllo"}
    assert blob_converter.to_record(
        Document("/a.bin", b"\x00\x01", DocumentFormat.BINARY)
    ) == {"body": b"\x00\x01"}


def test_auto_format_dispatches_on_document_format() -> None:
    schema = _schema(
        ("file", "string"),
        ("id", ["long", "null"]),
        ("body", ["bytes", "null"]),
    )
    converter = RecordConverter(schema, Format.AUTO, file_field="file", payload_field="body")

    from_json = converter.to_record(Document("/a.json", b'{"id": 1}', DocumentFormat.JSON))
    from_binary = converter.to_record(Document("/b.png", b"\x89PNG", DocumentFormat.BINARY))

    assert from_json == {"file": "/a.json", "id": 1, "body": None}
    assert from_binary == {"file": "/b.png", "id": None, "body": b"\x89PNG"}


def test_invalid_number_reports_field_and_uri() -> None:
    converter = RecordConverter(ORDER_SCHEMA, Format.JSON, file_field="file")
    document = Document("/orders/9.json", b'{"id": "abc", "total": 1}', DocumentFormat.JSON)

    with pytest.raises(RecordConversionError) as exc:
        converter.to_record(document)

    assert "'id'" in exc.value.message
    assert "/orders/9.json" in exc.value.message


def test_to_document_json_skips_file_field() -> None:
    converter = RecordConverter(ORDER_SCHEMA, Format.JSON, file_field="file")
    record = {"file": "a", "id": 1, "paid": False, "total": 2.0, "tags": None}

    document = converter.to_document(record, "/out/a.json")

    assert document.format is DocumentFormat.JSON
    assert json.loads(document.content) == {
        "id": 1,
        "paid": False,
        "total": 2.0,
        "tags": None,
    }


def test_to_document_xml_writes_one_element_per_value() -> None:
    converter = RecordConverter(ORDER_SCHEMA, Format.XML, file_field="file")
    record = {"file": "a", "id": 1, "paid": None, "total": 2.5, "tags": ["x", "y"]}

    root = ET.fromstring(converter.to_document(record, "/out/a.xml").content)

    assert root.tag == "record"
    assert root.find("file") is None
    assert root.find("id").text == "1"
    assert root.find("paid") is None
    assert [el.text for el in root.findall("tags")] == ["x", "y"]


def test_to_document_delimited_joins_values() -> None:
    schema = _schema(("name", "string"), ("active", "boolean"), ("age", ["int", "null"]))
    converter = RecordConverter(schema, Format.DELIMITED, delimiter="|")

    document = converter.to_document({"name": "Ann", "active": True, "age": None}, "/p.csv")

    assert document.content == b"Ann|true|"
    assert document.format is DocumentFormat.TEXT


@pytest.mark.parametrize(
    "record_format, content",
    [(Format.TEXT, b"\xff\xfe"), (Format.DELIMITED, b"\xff,1"), (Format.JSON, b'{"a": "\xff"}')],
)
def test_document_that_is_not_utf8_fails_conversion(record_format, content) -> None:
    schema = _schema(("body", ["string", "null"]), ("n", ["int", "null"]))
    converter = RecordConverter(schema, record_format, delimiter=",", payload_field="body")

    with pytest.raises(RecordConversionError) as exc:
        converter.to_record(Document("/bad.txt", content, DocumentFormat.TEXT))

    assert "/bad.txt" in exc.value.message
    assert "UTF-8" in exc.value.message


@pytest.mark.parametrize("record_format", [Format.JSON, Format.XML, Format.DELIMITED])
def test_binary_bytes_field_cannot_be_written_as_text(record_format) -> None:
    converter = RecordConverter(_schema(("body", "bytes")), record_format, delimiter=",")

    with pytest.raises(RecordConversionError) as exc:
        converter.to_document({"body": b"\x89PNG\xff"}, "/out/x")

    assert "'body'" in exc.value.message
    assert "/out/x" in exc.value.message


def test_utf8_bytes_field_is_written_as_text() -> None:
    converter = RecordConverter(_schema(("body", "bytes")), Format.JSON)

    document = converter.to_document({"body": "héllo".encode()}, "/out/x.json")

    assert json.loads(document.content) == {"body": "héllo"}


def test_blob_writes_binary_payload_unchanged() -> None:
    converter = RecordConverter(_schema(("body", "bytes")), Format.BLOB, payload_field="body")

    document = converter.to_document({"body": b"\x89PNG\xff"}, "/out/x")

    assert document.content == b"\x89PNG\xff"
