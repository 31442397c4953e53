"""Application DTOs."""

from .validation_dto import (
    StageValidationRequestDTO,
    StageValidationResponseDTO,
    ValidationFailureDTO,
)

__all__ = [
    "StageValidationRequestDTO",
    "StageValidationResponseDTO",
    "ValidationFailureDTO",
]
