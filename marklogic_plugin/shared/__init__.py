"""
Shared module - Cross-cutting concerns

Constants, enums and logging helpers used by every layer of the plugin.
Nothing in here may depend on the domain, application or infrastructure
packages.
"""

from .consts import PLUGIN_NAME, EnumEnvironment, EnumLogLevel
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "PLUGIN_NAME",
    "EnumEnvironment",
    "EnumLogLevel",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
