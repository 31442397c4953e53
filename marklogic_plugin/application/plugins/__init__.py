"""
Pipeline stages published by the plugin.

``batchsource`` reads documents, ``batchsink`` writes them and ``action``
evaluates a query once per pipeline run.
"""

from .action import MarkLogicAction
from .base import GatewayFactory, MarkLogicStage
from .registry import PLUGINS, PluginRegistry
from .sink import MarkLogicSink
from .source import MarkLogicSource

__all__ = [
    "GatewayFactory",
    "MarkLogicStage",
    "MarkLogicSource",
    "MarkLogicSink",
    "MarkLogicAction",
    "PLUGINS",
    "PluginRegistry",
]
