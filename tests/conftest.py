from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from marklogic_plugin.domain.entities.document import Document, DocumentFormat  # noqa: E402
from marklogic_plugin.domain.entities.validation import (  # noqa: E402
    INPUT_SCHEMA_FIELD,
    OUTPUT_SCHEMA_FIELD,
    STAGE_CONFIG,
    FailureCollector,
)
from marklogic_plugin.domain.gateways.marklogic_gateway import IMarkLogicGateway  # noqa: E402


BASE_PROPS: Dict[str, str] = {
    "referenceName": "marklogic",
    "host": "localhost",
    "port": "8000",
    "database": "Documents",
    "user": "admin",
    "password": "admin",
    "authenticationType": "DIGEST",
    "connectionType": "DIRECT",
}


def record_schema(*fields: tuple) -> str:
    return json.dumps(
        {
            "type": "record",
            "name": "etlSchemaBody",
            "fields": [{"name": name, "type": type_} for name, type_ in fields],
        }
    )


class FakeMarkLogicGateway(IMarkLogicGateway):
    """In-memory MarkLogic keyed by URI, in insertion order."""

    def __init__(self, documents: Optional[Sequence[Document]] = None):
        self.documents: Dict[str, Document] = {d.uri: d for d in documents or []}
        self.written: List[List[Document]] = []
        self.evaluated: List[str] = []
        self.searches: List[Dict[str, Any]] = []
        self.factory_kwargs: Dict[str, Any] = {}

    def _matching(self, directory: Optional[str]) -> List[str]:
        return [uri for uri in self.documents if not directory or uri.startswith(directory)]

    async def estimate(self, query=None, directory=None) -> int:
        self.searches.append({"estimate": True, "query": query, "directory": directory})
        return len(self._matching(directory))

    async def search_uris(self, query, directory, start, page_length) -> List[str]:
        self.searches.append(
            {"query": query, "directory": directory, "start": start, "page_length": page_length}
        )
        uris = self._matching(directory)
        return uris[start - 1 : start - 1 + page_length]

    async def read_document(self, uri: str) -> Document:
        return self.documents[uri]

    async def write_documents(self, documents: Sequence[Document]) -> int:
        self.written.append(list(documents))
        for document in documents:
            self.documents[document.uri] = document
        return len(documents)

    async def eval_xquery(self, query: str) -> str:
        self.evaluated.append(query)
        return ""

    async def ping(self) -> bool:
        return True


@pytest.fixture()
def base_props() -> Dict[str, str]:
    return dict(BASE_PROPS)


@pytest.fixture()
def fake_gateway() -> FakeMarkLogicGateway:
    return FakeMarkLogicGateway()


@pytest.fixture()
def gateway_factory(fake_gateway: FakeMarkLogicGateway) -> Callable[..., IMarkLogicGateway]:
    def factory(**kwargs: Any) -> IMarkLogicGateway:
        fake_gateway.factory_kwargs = kwargs
        return fake_gateway

    return factory


@pytest.fixture()
def json_documents() -> List[Document]:
    return [
        Document(
            uri=f"/orders/{idx}.json",
            content=json.dumps({"id": idx, "customer": f"c{idx}", "total": idx * 1.5}).encode(),
            format=DocumentFormat.JSON,
        )
        for idx in range(1, 6)
    ]


def _assert_single_failure(collector: FailureCollector, attribute: str, name: str) -> None:
    failures = collector.get_validation_failures()
    assert len(failures) == 1, [f.message for f in failures]
    causes = [c for c in failures[0].causes if c.get_attribute(attribute) is not None]
    assert len(causes) == 1
    assert causes[0].get_attribute(attribute) == name


@pytest.fixture()
def assert_property_failed() -> Callable[[FailureCollector, str], None]:
    return lambda collector, name: _assert_single_failure(collector, STAGE_CONFIG, name)


@pytest.fixture()
def assert_output_field_failed() -> Callable[[FailureCollector, str], None]:
    return lambda collector, name: _assert_single_failure(
        collector, OUTPUT_SCHEMA_FIELD, name
    )


@pytest.fixture()
def assert_input_field_failed() -> Callable[[FailureCollector, str], None]:
    return lambda collector, name: _assert_single_failure(collector, INPUT_SCHEMA_FIELD, name)
