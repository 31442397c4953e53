"""
Main module - Composition Root Layer

Settings, dependency container and entry points (HTTP API and CLI).
"""

from .config import AppSettings, get_settings
from .container import AppContainer, get_container, init_container

__all__ = [
    "AppSettings",
    "get_settings",
    "AppContainer",
    "init_container",
    "get_container",
]
