"""
Domain Errors

Error types raised by the plugin at run time. Configuration problems found
while validating a stage are collected instead (see ``validation``), and are
only raised, wrapped in ``InvalidStageError``, when a stage is about to run.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigError(DomainError):
    """Raised when a configuration property holds an unusable value."""

    def __init__(
        self,
        message: str,
        property_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.property_name = property_name
        super().__init__(message, details)


class SchemaParseError(DomainError):
    """Raised when a schema JSON document cannot be parsed."""


class InvalidStageError(DomainError):
    """Raised when a stage is run with a configuration that failed validation."""

    def __init__(self, failures: list):
        self.failures = failures
        messages = "; ".join(failure.message for failure in failures)
        super().__init__(
            f"Errors were encountered during validation. {messages}",
            details={"errors": [failure.to_dict() for failure in failures]},
        )


class RecordConversionError(DomainError):
    """Raised when a document cannot be mapped onto the declared schema."""


class MacroEvaluationError(DomainError):
    """Raised when a macro references an undefined runtime argument."""


class PluginNotFoundError(DomainError):
    """Raised when no stage is registered for a plugin type."""

    def __init__(self, plugin_type: str):
        super().__init__(f"No MarkLogic plugin of type '{plugin_type}'")
        self.plugin_type = plugin_type
