"""MarkLogic action: runs an XQuery as a pipeline side-effect."""

from typing import Mapping, Optional

from marklogic_plugin.application.configs.action_config import MarkLogicActionConfig
from marklogic_plugin.domain.entities.validation import FailureCollector
from marklogic_plugin.shared import get_logger

from .base import MarkLogicStage

logger = get_logger(__name__)


class MarkLogicAction(MarkLogicStage):
    plugin_type = "action"
    config_class = MarkLogicActionConfig

    config: MarkLogicActionConfig

    def configure(self, collector: FailureCollector) -> None:
        self.config.validate_config(collector)

    async def run(self, arguments: Optional[Mapping[str, str]] = None) -> str:
        """
        Evaluate the configured query and return the server response.

        Server-side failures propagate so that the pipeline run fails.
        """
        config = self._resolve_config(arguments)
        logger.info("action.started", stage=self.stage_name, host=config.host)
        result = await self._gateway(config).eval_xquery(config.query)
        logger.info("action.completed", stage=self.stage_name)
        return result
