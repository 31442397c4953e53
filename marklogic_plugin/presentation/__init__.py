"""
Presentation Layer Package

HTTP surface of the plugin validation service.
"""

from marklogic_plugin.presentation import controllers

__all__ = ["controllers"]
