"""
Dependency container - Main Layer

Composition root wiring settings, the MarkLogic gateway factory, the plugin
registry and the use cases.
"""

from dependency_injector import containers, providers

from marklogic_plugin.application.plugins.registry import PluginRegistry
from marklogic_plugin.application.use_cases.validation_use_cases import (
    ValidateStageUseCase,
)
from marklogic_plugin.infrastructure.gateways.marklogic_gateway import MarkLogicGateway

from .config import AppSettings


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependency-injector."""

    wiring_config = containers.WiringConfiguration(packages=["..presentation"])

    config = providers.Configuration()

    # Infrastructure: one gateway per stage, connection details come from
    # the stage properties at call time.
    marklogic_gateway = providers.Factory(
        MarkLogicGateway,
        timeout=config.marklogic.request_timeout,
    )

    plugin_registry = providers.Singleton(
        PluginRegistry,
        gateway_factory=marklogic_gateway.provider,
        page_length=config.marklogic.page_length,
    )

    validate_stage_use_case = providers.Factory(
        ValidateStageUseCase,
        plugin_registry=plugin_registry,
    )


_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize the global container with application settings."""
    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""
    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")
    return _app_container
