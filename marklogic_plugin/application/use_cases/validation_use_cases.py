"""
Stage Validation Use Case - Application Layer

Builds a stage from raw properties and runs its deploy-time validation,
returning every collected failure instead of raising.
"""

from typing import Optional

from marklogic_plugin.application.dtos.validation_dto import (
    StageValidationRequestDTO,
    StageValidationResponseDTO,
    ValidationFailureDTO,
)
from marklogic_plugin.application.plugins.registry import PluginRegistry
from marklogic_plugin.application.plugins.sink import MarkLogicSink
from marklogic_plugin.application.plugins.source import MarkLogicSource
from marklogic_plugin.domain.entities.errors import SchemaParseError
from marklogic_plugin.domain.entities.schema import Schema
from marklogic_plugin.domain.entities.validation import FailureCollector
from marklogic_plugin.shared import get_logger

logger = get_logger(__name__)


class ValidateStageUseCase:
    """Use case for validating a stage configuration."""

    def __init__(self, plugin_registry: PluginRegistry) -> None:
        self._registry = plugin_registry

    def execute(self, request: StageValidationRequestDTO) -> StageValidationResponseDTO:
        """
        Raises:
            PluginNotFoundError: If the plugin type is unknown.
        """
        stage = self._registry.create_stage(
            request.plugin_type, request.properties, request.stage_name
        )
        collector = FailureCollector(stage.stage_name)
        output_schema: Optional[Schema] = None

        if isinstance(stage, MarkLogicSource):
            output_schema = stage.configure(collector)
        elif isinstance(stage, MarkLogicSink):
            stage.configure(collector, self._input_schema(request, collector))
        else:
            stage.configure(collector)

        failures = collector.get_validation_failures()
        logger.info(
            "validation.completed",
            plugin_type=request.plugin_type,
            stage=stage.stage_name,
            failures=len(failures),
        )
        return StageValidationResponseDTO(
            plugin_type=request.plugin_type,
            valid=not failures,
            failures=[ValidationFailureDTO.from_domain(f) for f in failures],
            output_schema=output_schema.to_dict() if output_schema else None,
        )

    @staticmethod
    def _input_schema(
        request: StageValidationRequestDTO, collector: FailureCollector
    ) -> Optional[Schema]:
        if request.input_schema is None:
            return None
        try:
            if isinstance(request.input_schema, str):
                return Schema.parse_json(request.input_schema)
            return Schema.from_dict(request.input_schema)
        except SchemaParseError as exc:
            collector.add_failure(f"Invalid input schema: {exc.message}", None)
            return None
