"""
Application Layer Package

Stage configs, the pipeline stages themselves and the use cases exposed
through the HTTP API and the CLI.
"""
