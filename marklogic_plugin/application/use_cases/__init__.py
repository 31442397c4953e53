"""Application use cases."""

from .validation_use_cases import ValidateStageUseCase

__all__ = ["ValidateStageUseCase"]
