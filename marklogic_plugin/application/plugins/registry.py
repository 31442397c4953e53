"""Lookup of the stages published under the ``MarkLogic`` plugin name."""

from typing import Any, Dict, List, Mapping, Optional, Type

from marklogic_plugin.domain.entities.errors import PluginNotFoundError
from marklogic_plugin.shared import PLUGIN_NAME

from .action import MarkLogicAction
from .base import DEFAULT_PAGE_LENGTH, GatewayFactory, MarkLogicStage
from .sink import MarkLogicSink
from .source import MarkLogicSource

PLUGINS: Dict[str, Type[MarkLogicStage]] = {
    stage.plugin_type: stage for stage in (MarkLogicSource, MarkLogicSink, MarkLogicAction)
}


class PluginRegistry:
    """Creates configured stages for the pipeline host."""

    def __init__(
        self, gateway_factory: GatewayFactory, page_length: int = DEFAULT_PAGE_LENGTH
    ):
        self._gateway_factory = gateway_factory
        self._page_length = page_length

    def create_stage(
        self,
        plugin_type: str,
        properties: Mapping[str, Any],
        stage_name: Optional[str] = None,
    ) -> MarkLogicStage:
        """
        Raises:
            PluginNotFoundError: If ``plugin_type`` is not published.
        """
        stage_cls = PLUGINS.get(plugin_type)
        if stage_cls is None:
            raise PluginNotFoundError(plugin_type)
        return stage_cls(
            properties,
            self._gateway_factory,
            stage_name=stage_name or plugin_type,
            page_length=self._page_length,
        )

    def list_plugins(self) -> List[Dict[str, Any]]:
        descriptors = []
        for plugin_type, stage_cls in PLUGINS.items():
            properties = [
                {
                    "name": field.alias or name,
                    "description": field.description,
                    "required": field.is_required(),
                }
                for name, field in stage_cls.config_class.model_fields.items()
            ]
            descriptors.append(
                {
                    "name": PLUGIN_NAME,
                    "type": plugin_type,
                    "class_name": stage_cls.__name__,
                    "properties": properties,
                }
            )
        return descriptors
