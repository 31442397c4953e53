"""Common lifecycle of the MarkLogic pipeline stages."""

from abc import ABC
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Type

from marklogic_plugin.application.configs.base_config import BaseMarkLogicConfig
from marklogic_plugin.application.macros import evaluate_macros
from marklogic_plugin.domain.entities.validation import FailureCollector
from marklogic_plugin.domain.gateways.marklogic_gateway import IMarkLogicGateway

GatewayFactory = Callable[..., IMarkLogicGateway]

DEFAULT_PAGE_LENGTH = 100


class MarkLogicStage(ABC):
    """
    A configured stage.

    ``configure`` runs at pipeline deployment with macros unresolved and
    only collects failures. The run-time methods of each subclass first
    resolve macros from the run arguments and refuse to run on an invalid
    configuration.
    """

    plugin_type: ClassVar[str]
    config_class: ClassVar[Type[BaseMarkLogicConfig]]

    def __init__(
        self,
        properties: Mapping[str, Any],
        gateway_factory: GatewayFactory,
        stage_name: str = "stage",
        page_length: int = DEFAULT_PAGE_LENGTH,
    ):
        self.properties: Dict[str, Any] = dict(properties)
        self.stage_name = stage_name
        self.page_length = page_length
        self._gateway_factory = gateway_factory
        self.config = self.config_class.from_properties(self.properties)

    def _resolve_config(
        self, arguments: Optional[Mapping[str, str]], **validate_kwargs: Any
    ) -> BaseMarkLogicConfig:
        resolved = evaluate_macros(self.properties, arguments or {})
        config = self.config_class.from_properties(resolved)
        collector = FailureCollector(self.stage_name)
        config.validate_config(collector, **validate_kwargs)
        collector.get_or_raise()
        return config

    def _gateway(self, config: BaseMarkLogicConfig) -> IMarkLogicGateway:
        return self._gateway_factory(
            base_url=config.base_url(),
            user=config.user,
            password=config.password,
            authentication_type=config.get_authentication_type(),
            database=config.database,
        )
