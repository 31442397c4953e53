from __future__ import annotations

import json
from typing import Dict

import pytest
from conftest import BASE_PROPS

from marklogic_plugin.application.plugins.sink import MarkLogicSink
from marklogic_plugin.domain.entities.document import DocumentFormat
from marklogic_plugin.domain.entities.errors import InvalidStageError
from marklogic_plugin.domain.entities.schema import Schema
from marklogic_plugin.domain.entities.validation import FailureCollector

INPUT_SCHEMA = Schema.from_dict(
    {
        "type": "record",
        "name": "input",
        "fields": [
            {"name": "name", "type": ["string", "null"]},
            {"name": "amount", "type": "int"},
        ],
    }
)


def _props(**overrides: str) -> Dict[str, str]:
    return {
        **BASE_PROPS,
        "path": "/out/",
        "format": "JSON",
        "fileNameField": "name",
        "batchSize": "2",
        **overrides,
    }


def test_configure_collects_failures(gateway_factory) -> None:
    sink = MarkLogicSink(_props(path=""), gateway_factory)
    collector = FailureCollector()

    sink.configure(collector, INPUT_SCHEMA)

    assert [f.message for f in collector.get_validation_failures()] == [
        "Path must be specified."
    ]


@pytest.mark.asyncio
async def test_write_sends_documents_in_batches(gateway_factory, fake_gateway) -> None:
    sink = MarkLogicSink(_props(), gateway_factory)
    sink.prepare_run(INPUT_SCHEMA)
    records = [{"name": f"r{i}", "amount": i} for i in range(5)]

    written = await sink.write(records)

    assert written == 5
    assert [len(batch) for batch in fake_gateway.written] == [2, 2, 1]
    document = fake_gateway.documents["/out/r3.json"]
    assert document.format is DocumentFormat.JSON
    assert json.loads(document.content) == {"amount": 3}


@pytest.mark.asyncio
async def test_write_requires_prepare_run(gateway_factory) -> None:
    sink = MarkLogicSink(_props(), gateway_factory)

    with pytest.raises(RuntimeError):
        await sink.write([{"name": "a", "amount": 1}])


def test_prepare_run_rejects_invalid_config(gateway_factory) -> None:
    sink = MarkLogicSink(_props(batchSize="-1"), gateway_factory)

    with pytest.raises(InvalidStageError):
        sink.prepare_run(INPUT_SCHEMA)


def test_document_uri_uses_file_name_field(gateway_factory) -> None:
    sink = MarkLogicSink(_props(format="XML"), gateway_factory)
    sink.prepare_run(INPUT_SCHEMA)

    assert sink.document_uri({"name": "report", "amount": 1}) == "/out/report.xml"
    assert sink.document_uri({"name": "report.xml", "amount": 1}) == "/out/report.xml"


def test_document_uri_falls_back_to_random_name(gateway_factory) -> None:
    sink = MarkLogicSink(_props(), gateway_factory)
    sink.prepare_run(INPUT_SCHEMA)

    first = sink.document_uri({"name": None, "amount": 1})
    second = sink.document_uri({"name": None, "amount": 1})

    assert first.startswith("/out/") and first.endswith(".json")
    assert first != second


def test_path_macro_is_resolved_at_run_time(gateway_factory) -> None:
    sink = MarkLogicSink(_props(path="${dir}"), gateway_factory)
    sink.prepare_run(INPUT_SCHEMA, {"dir": "/daily"})

    assert sink.document_uri({"name": "a", "amount": 1}) == "/daily/a.json"
