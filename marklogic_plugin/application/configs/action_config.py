"""Config for the MarkLogic action."""

from typing import Optional

from pydantic import Field

from marklogic_plugin.domain.entities.validation import FailureCollector

from .base_config import BaseMarkLogicConfig

QUERY = "query"


class MarkLogicActionConfig(BaseMarkLogicConfig):
    query: Optional[str] = Field(
        default=None, alias=QUERY, description="XQuery to evaluate on the server"
    )

    def validate_config(self, collector: FailureCollector) -> None:
        super().validate_config(collector)

        if not self._unchecked(QUERY) and not (self.query and self.query.strip()):
            collector.add_failure("Query must be specified.", None).with_config_property(QUERY)
