"""
Stage configs.

One pydantic model per plugin type, all sharing the connection properties of
``BaseMarkLogicConfig``.
"""

from .action_config import MarkLogicActionConfig
from .base_config import BaseMarkLogicConfig, PluginConfig
from .batch_config import BaseBatchMarkLogicConfig
from .sink_config import MarkLogicSinkConfig
from .source_config import MarkLogicSourceConfig

__all__ = [
    "PluginConfig",
    "BaseMarkLogicConfig",
    "BaseBatchMarkLogicConfig",
    "MarkLogicSourceConfig",
    "MarkLogicSinkConfig",
    "MarkLogicActionConfig",
]
