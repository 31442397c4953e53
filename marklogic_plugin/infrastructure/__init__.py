"""
Infrastructure Layer Package

Adapters to external systems. The only one the plugin needs is the
MarkLogic REST gateway.
"""
