"""
Domain Layer Package

Plugin rules that do not depend on HTTP, settings or the hosting process:
schemas, failure collection, document value objects and record conversion.
"""

from marklogic_plugin.domain import entities, gateways, services

__all__ = ["entities", "gateways", "services"]
