"""
Failure collection for stage validation.

Mirrors the pipeline host's convention: validation code never raises on bad
user input. It records a ``ValidationFailure`` and attributes it to a config
property or to a schema field through ``Cause`` entries, so a UI can
highlight exactly what is wrong.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import InvalidStageError

STAGE_CONFIG = "stageConfig"
OUTPUT_SCHEMA_FIELD = "outputField"
INPUT_SCHEMA_FIELD = "inputField"


@dataclass
class Cause:
    """Single attribution of a failure."""

    attributes: Dict[str, str] = field(default_factory=dict)

    def get_attribute(self, key: str) -> Optional[str]:
        return self.attributes.get(key)


@dataclass
class ValidationFailure:
    message: str
    corrective_action: Optional[str] = None
    causes: List[Cause] = field(default_factory=list)

    def with_config_property(self, name: str) -> "ValidationFailure":
        self.causes.append(Cause({STAGE_CONFIG: name}))
        return self

    def with_output_schema_field(self, name: str) -> "ValidationFailure":
        self.causes.append(Cause({OUTPUT_SCHEMA_FIELD: name}))
        return self

    def with_input_schema_field(self, name: str) -> "ValidationFailure":
        self.causes.append(Cause({INPUT_SCHEMA_FIELD: name}))
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "corrective_action": self.corrective_action,
            "causes": [dict(cause.attributes) for cause in self.causes],
        }


class FailureCollector:
    """Accumulates validation failures for one stage."""

    def __init__(self, stage_name: str = "stage"):
        self.stage_name = stage_name
        self._failures: List[ValidationFailure] = []

    def add_failure(
        self, message: str, corrective_action: Optional[str] = None
    ) -> ValidationFailure:
        failure = ValidationFailure(message, corrective_action)
        self._failures.append(failure)
        return failure

    def get_validation_failures(self) -> List[ValidationFailure]:
        return list(self._failures)

    def has_failures(self) -> bool:
        return bool(self._failures)

    def get_or_raise(self) -> None:
        """Raise ``InvalidStageError`` if anything was collected."""
        if self._failures:
            raise InvalidStageError(self.get_validation_failures())
