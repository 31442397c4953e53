"""
Domain Entities - MarkLogic documents

Enumerations for the user-facing plugin options and the value objects that
travel between the gateway and the stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Type, TypeVar

from .errors import ConfigError

E = TypeVar("E", bound=Enum)


def parse_option(enum_cls: Type[E], value: str, label: str, property_name: str) -> E:
    """Case-insensitive lookup of a plugin option by member name."""
    try:
        return enum_cls[value.strip().upper()]
    except KeyError as exc:
        raise ConfigError(
            f"Unknown {label} for value: {value}", property_name=property_name
        ) from exc


class InputMethod(str, Enum):
    """How the source selects documents."""

    QUERY = "query"
    PATH = "path"


class Format(str, Enum):
    """Record layout inside a document."""

    JSON = "json"
    XML = "xml"
    DELIMITED = "delimited"
    TEXT = "text"
    BLOB = "blob"
    AUTO = "auto"

    @property
    def extension(self) -> str:
        return _EXTENSIONS.get(self, "")

    @property
    def document_format(self) -> "DocumentFormat":
        return _DOCUMENT_FORMATS.get(self, DocumentFormat.TEXT)


class AuthenticationType(str, Enum):
    BASIC = "basic"
    DIGEST = "digest"


class ConnectionType(str, Enum):
    """DIRECT talks to a host; GATEWAY goes through a load balancer."""

    DIRECT = "direct"
    GATEWAY = "gateway"


class DocumentFormat(str, Enum):
    """Document format as reported by MarkLogic."""

    JSON = "json"
    XML = "xml"
    TEXT = "text"
    BINARY = "binary"

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]


_EXTENSIONS = {
    Format.JSON: ".json",
    Format.XML: ".xml",
    Format.DELIMITED: ".csv",
    Format.TEXT: ".txt",
}

_DOCUMENT_FORMATS = {
    Format.JSON: DocumentFormat.JSON,
    Format.XML: DocumentFormat.XML,
    Format.BLOB: DocumentFormat.BINARY,
}

_CONTENT_TYPES = {
    DocumentFormat.JSON: "application/json",
    DocumentFormat.XML: "application/xml",
    DocumentFormat.TEXT: "text/plain",
    DocumentFormat.BINARY: "application/octet-stream",
}


@dataclass(frozen=True)
class Document:
    """A document read from, or about to be written to, MarkLogic."""

    uri: str
    content: bytes
    format: DocumentFormat

    def text(self) -> str:
        return self.content.decode("utf-8")


@dataclass(frozen=True)
class DocumentSplit:
    """Window of search results, ``start`` is 1-based as in the REST API."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length - 1
