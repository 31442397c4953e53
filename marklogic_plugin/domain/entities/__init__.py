"""
Domain Entities Package

Value objects and errors shared by every stage of the plugin.
"""

from .document import (
    AuthenticationType,
    ConnectionType,
    Document,
    DocumentFormat,
    DocumentSplit,
    Format,
    InputMethod,
)
from .errors import (
    ConfigError,
    DomainError,
    InvalidStageError,
    MacroEvaluationError,
    PluginNotFoundError,
    RecordConversionError,
    SchemaParseError,
)
from .schema import Schema, SchemaField, SchemaType
from .validation import Cause, FailureCollector, ValidationFailure

__all__ = [
    "AuthenticationType",
    "ConnectionType",
    "Document",
    "DocumentFormat",
    "DocumentSplit",
    "Format",
    "InputMethod",
    "DomainError",
    "ConfigError",
    "SchemaParseError",
    "InvalidStageError",
    "RecordConversionError",
    "MacroEvaluationError",
    "PluginNotFoundError",
    "Schema",
    "SchemaField",
    "SchemaType",
    "Cause",
    "FailureCollector",
    "ValidationFailure",
]
