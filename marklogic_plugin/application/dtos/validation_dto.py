"""
Application DTOs - Stage validation

Request and response contracts of the validation endpoint and CLI command.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from marklogic_plugin.domain.entities.validation import ValidationFailure


class StageValidationRequestDTO(BaseModel):
    """DTO for a stage validation request."""

    plugin_type: str = Field(description="batchsource, batchsink or action")
    stage_name: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)
    input_schema: Optional[Any] = Field(
        default=None, description="Schema of the records entering a sink"
    )


class ValidationFailureDTO(BaseModel):
    message: str
    corrective_action: Optional[str] = None
    causes: List[Dict[str, str]] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, failure: ValidationFailure) -> "ValidationFailureDTO":
        return cls(
            message=failure.message,
            corrective_action=failure.corrective_action,
            causes=[dict(cause.attributes) for cause in failure.causes],
        )


class StageValidationResponseDTO(BaseModel):
    """DTO for the outcome of a stage validation."""

    plugin_type: str
    valid: bool
    failures: List[ValidationFailureDTO] = Field(default_factory=list)
    output_schema: Optional[Any] = None
